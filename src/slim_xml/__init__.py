"""slim-xml.

A lightweight in-memory XML document model with a tolerant single-pass
parser, encoding detection for ANSI, UTF-8 and UTF-16 buffers, and a
round-trip serializer.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_string(), parse_bytes(), parse_file()
- Level 2: Documents - XMLDocument with load/save entry points and DocumentConfig
- Level 3: Adapters - conversion to and from ElementTree and lxml
"""

__version__ = "0.1.0"
__author__ = "Slim XML Team"

# Level 1: Simple functions
from .api import ParseResult, parse, parse_bytes, parse_file, parse_string

# Level 2: Documents and configuration
from .api import XMLDocument
from .character import Encode
from .shared.config import DocumentConfig
from .tree import NodeType, ValueKind, XMLAttribute, XMLNode

# Level 3: Adapters
from .api import get_adapter

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse",
    "parse_string",
    "parse_bytes",
    "parse_file",
    "ParseResult",

    # Level 2: Documents, nodes and configuration
    "XMLDocument",
    "XMLNode",
    "XMLAttribute",
    "NodeType",
    "ValueKind",
    "Encode",
    "DocumentConfig",

    # Level 3: Adapters
    "get_adapter",
]
