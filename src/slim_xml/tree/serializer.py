"""Serialization of document trees back to markup text.

The walk is depth-first pre-order. Elements without children or value are
written self-closing; comments are written verbatim between their
delimiters, and so are declarations unless a name or attributes were set on
them. Each nesting level adds one indentation unit.
"""

import logging
from typing import List, Optional, Tuple

from slim_xml.shared.config import SerializationConfig
from slim_xml.shared.logging import get_logger
from slim_xml.tree.entities import escape
from slim_xml.tree.nodes import NodeType, XMLNode

# Work items: a node to open at a depth, or literal closing text.
_WorkItem = Tuple[Optional[XMLNode], int, str]


class XMLSerializer:
    """Writes a node (or a whole document) as indented markup text."""

    def __init__(
        self,
        config: Optional[SerializationConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.config = config or SerializationConfig()
        self.logger = get_logger(__name__, correlation_id, "xml_serializer")

    def _escape(self, text: str) -> str:
        return escape(text) if self.config.transfer_characters else text

    def serialize(self, node: XMLNode) -> str:
        """Serialize ``node``; a document node writes only its children."""
        indent = self.config.indent
        newline = self.config.newline
        parts: List[str] = []

        stack: List[_WorkItem] = []
        if node.node_type is NodeType.DOCUMENT:
            stack.extend((child, 0, "") for child in reversed(node.children))
        else:
            stack.append((node, 0, ""))

        written = 0
        while stack:
            current, depth, closing = stack.pop()
            if current is None:
                parts.append(closing)
                continue

            written += 1
            prefix = indent * depth
            node_type = current.node_type
            if node_type is NodeType.COMMENT:
                parts.append(f"{prefix}<!--{current.value}-->{newline}")
            elif node_type is NodeType.DECLARATION:
                parts.append(f"{prefix}<?{self._declaration_body(current)}?>{newline}")
            else:
                self._open_element(current, depth, prefix, parts, stack)

        if self.logger.is_enabled_for(logging.DEBUG):
            self.logger.debug(
                "Serialized tree",
                extra={"nodes_written": written, "characters": sum(map(len, parts))},
            )
        return "".join(parts)

    def _declaration_body(self, declaration: XMLNode) -> str:
        """Parsed declarations keep their raw body; built ones get name and attributes."""
        pieces = [declaration.name] if declaration.name else []
        pieces.extend(
            f'{attribute.name}="{self._escape(attribute.value)}"'
            for attribute in declaration.iter_attributes()
        )
        if declaration.value:
            pieces.append(declaration.value)
        return " ".join(pieces)

    def _open_element(
        self,
        element: XMLNode,
        depth: int,
        prefix: str,
        parts: List[str],
        stack: List[_WorkItem],
    ) -> None:
        newline = self.config.newline
        start = [prefix, "<", element.name]
        for attribute in element.iter_attributes():
            start.append(f' {attribute.name}="{self._escape(attribute.value)}"')

        if element.is_empty():
            start.append(f"/>{newline}")
            parts.append("".join(start))
            return

        start.append(">")
        start.append(self._escape(element.value))
        children = element.children
        if not children:
            start.append(f"</{element.name}>{newline}")
            parts.append("".join(start))
            return

        start.append(newline)
        parts.append("".join(start))
        stack.append((None, depth, f"{prefix}</{element.name}>{newline}"))
        stack.extend((child, depth + 1, "") for child in reversed(children))


def serialize(node: XMLNode, config: Optional[SerializationConfig] = None) -> str:
    """Serialize a node with a one-off serializer."""
    return XMLSerializer(config).serialize(node)
