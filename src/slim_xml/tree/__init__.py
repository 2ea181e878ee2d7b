"""Document tree for slim-xml.

Key Components:
    XMLNode: Handle onto one node with traversal, lookup and mutation
    XMLAttribute: Owned name/value pair of an element
    NodeArena: Id-keyed storage owning every node of a document
    XMLSerializer: Writes a tree back to indented markup text
"""

from .values import (
    ValueHolder,
    ValueKind,
    format_hex,
    format_value,
    parse_float,
    parse_hex,
    parse_int,
    parse_value,
)
from .entities import escape, unescape
from .nodes import NodeArena, NodeRecord, NodeType, XMLAttribute, XMLNode
from .serializer import XMLSerializer, serialize

__all__ = [
    "ValueHolder",
    "ValueKind",
    "format_hex",
    "format_value",
    "parse_float",
    "parse_hex",
    "parse_int",
    "parse_value",
    "escape",
    "unescape",
    "NodeArena",
    "NodeRecord",
    "NodeType",
    "XMLAttribute",
    "XMLNode",
    "XMLSerializer",
    "serialize",
]
