"""Public API for slim-xml.

Provides the document class with its load/save entry points, the module-level
parse functions and adapters to other XML object models.
"""

from .document import XMLDocument
from .parser import ParseResult, parse, parse_bytes, parse_file, parse_string
from .adapters import (
    AdapterMetadata,
    ConversionResult,
    ElementTreeAdapter,
    LxmlAdapter,
    XMLLibraryAdapter,
    get_adapter,
    list_adapters,
)

__all__ = [
    "XMLDocument",
    "ParseResult",
    "parse",
    "parse_bytes",
    "parse_file",
    "parse_string",
    "AdapterMetadata",
    "ConversionResult",
    "ElementTreeAdapter",
    "LxmlAdapter",
    "XMLLibraryAdapter",
    "get_adapter",
    "list_adapters",
]
