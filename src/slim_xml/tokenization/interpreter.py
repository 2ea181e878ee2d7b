"""Label interpretation: turns scanned labels into tree mutations.

The interpreter never raises for malformed markup. Every local recovery
(an unquoted attribute value, a mismatched closing tag, a label cut off by the
end of the input) is recorded as a diagnostic and parsing continues.
"""

import re
from enum import Enum, auto
from typing import List, Optional, Tuple

from slim_xml.shared.config import ParsingConfig
from slim_xml.shared.logging import CorrelationLogger, get_logger
from slim_xml.shared.result import DiagnosticCollector, DiagnosticSeverity
from slim_xml.tokenization.scanner import CDATA_OPEN, Label
from slim_xml.tree.entities import unescape
from slim_xml.tree.nodes import NodeType, XMLNode

COMPONENT = "label_interpreter"

_ELEMENT_NAME = re.compile(r"[^\s/>\"'=]+")
_ATTRIBUTE_NAME = re.compile(r"[^\s/>\"'=]+")
_UNQUOTED_VALUE = re.compile(r"[^\s>]*")
_WHITESPACE = re.compile(r"\s*")


class LabelKind(Enum):
    """What a label means to the tree builder."""

    DECLARATION = auto()
    COMMENT = auto()
    CDATA = auto()
    DOCTYPE = auto()
    CLOSING = auto()
    SELF_CLOSING = auto()
    OPEN = auto()


def classify_label(label_text: str) -> LabelKind:
    """Classify label text (including its ``<`` and ``>`` delimiters)."""
    body = label_text[1:]
    if body.startswith("?"):
        return LabelKind.DECLARATION
    if body.startswith("!--"):
        return LabelKind.COMMENT
    if label_text.startswith(CDATA_OPEN):
        return LabelKind.CDATA
    if body.startswith("!"):
        return LabelKind.DOCTYPE
    if body.startswith("/"):
        return LabelKind.CLOSING
    if body.endswith(">"):
        body = body[:-1]
    if body.rstrip().endswith("/"):
        return LabelKind.SELF_CLOSING
    return LabelKind.OPEN


def _strip_delimiters(text: str, opener: str, closer: str) -> str:
    """Remove ``opener`` and, when present, ``closer`` around a label body."""
    body = text[len(opener):]
    if body.endswith(closer):
        body = body[: -len(closer)]
    return body


class LabelInterpreter:
    """Applies labels and character data to a document tree."""

    def __init__(
        self,
        config: Optional[ParsingConfig] = None,
        collector: Optional[DiagnosticCollector] = None,
        correlation_id: Optional[str] = None,
        logger: Optional[CorrelationLogger] = None,
    ) -> None:
        self.config = config or ParsingConfig()
        self.collector = collector or DiagnosticCollector(correlation_id)
        self.logger = logger or get_logger(__name__, correlation_id, COMPONENT)
        self.nodes_created = 0

    def _recover(
        self,
        severity: DiagnosticSeverity,
        message: str,
        position: Optional[int],
        **details: object,
    ) -> None:
        self.collector.add(severity, message, COMPONENT, position, details or None)
        if severity is DiagnosticSeverity.WARNING:
            self.logger.warning(message, extra={"position": position, **details})
        else:
            self.logger.debug(message, extra={"position": position, **details})

    def _unescape(self, text: str) -> str:
        return unescape(text) if self.config.transfer_characters else text

    def _add_node(self, current: XMLNode, node_type: NodeType, name: str = "") -> XMLNode:
        self.nodes_created += 1
        return current.add_child(name, node_type)

    def interpret(self, label: Label, current: XMLNode) -> XMLNode:
        """Apply one label below ``current`` and return the new current parent.

        Args:
            label: Label produced by the scanner
            current: The element (or document) labels are attached to

        Returns:
            The parent for subsequent labels: a new element for open tags,
            the parent of ``current`` for closing tags, otherwise ``current``
        """
        if not label.complete:
            self._recover(
                DiagnosticSeverity.WARNING,
                "Unterminated label truncated",
                label.start,
                length=len(label),
            )
            return current

        kind = classify_label(label.text)
        if kind is LabelKind.DECLARATION:
            if self.config.keep_declarations:
                node = self._add_node(current, NodeType.DECLARATION)
                node.value = _strip_delimiters(label.text, "<?", "?>")
            return current

        if kind is LabelKind.COMMENT:
            if self.config.keep_comments:
                node = self._add_node(current, NodeType.COMMENT)
                node.value = _strip_delimiters(label.text, "<!--", "-->")
            return current

        if kind is LabelKind.CDATA:
            body = _strip_delimiters(label.text, CDATA_OPEN, "]]>")
            if current.node_type is NodeType.ELEMENT:
                current.value = current.value + body
            return current

        if kind is LabelKind.DOCTYPE:
            self._recover(
                DiagnosticSeverity.INFO, "Document type declaration skipped", label.start
            )
            return current

        if kind is LabelKind.CLOSING:
            return self._close_element(label, current)

        return self._open_element(label, current, kind is LabelKind.SELF_CLOSING)

    def _close_element(self, label: Label, current: XMLNode) -> XMLNode:
        name = _strip_delimiters(label.text, "</", ">").strip()
        parent = current.parent
        if current.node_type is not NodeType.ELEMENT or parent is None:
            self._recover(
                DiagnosticSeverity.WARNING,
                "Closing tag without open element ignored",
                label.start,
                tag=name,
            )
            return current
        if name != current.name:
            self._recover(
                DiagnosticSeverity.WARNING,
                "Mismatched closing tag",
                label.start,
                expected=current.name,
                found=name,
            )
        return parent

    def _open_element(self, label: Label, current: XMLNode, self_closing: bool) -> XMLNode:
        body = label.text[1:-1]
        if self_closing:
            body = body.rstrip()[:-1]

        match = _ELEMENT_NAME.match(body)
        if match is None:
            self._recover(
                DiagnosticSeverity.WARNING, "Label without element name skipped", label.start
            )
            return current

        element = self._add_node(current, NodeType.ELEMENT, match.group())
        for name, value in self.parse_attributes(body[match.end():], label.start):
            element.add_attribute(name, value)
        return current if self_closing else element

    def parse_attributes(self, source: str, position: Optional[int] = None) -> List[Tuple[str, str]]:
        """Parse the attribute section of a tag into ``(name, value)`` pairs.

        Values are unescaped unless character transfer is disabled. Bare
        names, unquoted values and unterminated quotes are accepted and
        recorded as recoveries.
        """
        attributes: List[Tuple[str, str]] = []
        length = len(source)
        pos = _WHITESPACE.match(source).end()
        while pos < length:
            match = _ATTRIBUTE_NAME.match(source, pos)
            if match is None:
                self._recover(
                    DiagnosticSeverity.WARNING,
                    "Unexpected character in tag skipped",
                    position,
                    character=source[pos],
                )
                pos = _WHITESPACE.match(source, pos + 1).end()
                continue

            name = match.group()
            pos = _WHITESPACE.match(source, match.end()).end()
            if pos >= length or source[pos] != "=":
                self._recover(
                    DiagnosticSeverity.WARNING,
                    "Attribute without value",
                    position,
                    attribute=name,
                )
                attributes.append((name, ""))
                continue

            pos = _WHITESPACE.match(source, pos + 1).end()
            if pos < length and source[pos] in "\"'":
                quote = source[pos]
                close = source.find(quote, pos + 1)
                if close == -1:
                    self._recover(
                        DiagnosticSeverity.WARNING,
                        "Unterminated attribute value",
                        position,
                        attribute=name,
                    )
                    value = source[pos + 1:]
                    pos = length
                else:
                    value = source[pos + 1:close]
                    pos = close + 1
            else:
                value_match = _UNQUOTED_VALUE.match(source, pos)
                value = value_match.group()
                pos = value_match.end()
                self._recover(
                    DiagnosticSeverity.WARNING,
                    "Unquoted attribute value",
                    position,
                    attribute=name,
                )

            attributes.append((name, self._unescape(value)))
            pos = _WHITESPACE.match(source, pos).end()
        return attributes

    def assign_text(self, segment: str, current: XMLNode) -> bool:
        """Assign character data to ``current``.

        Whitespace-only segments and text outside any element are ignored.

        Returns:
            True if the element value was replaced
        """
        if not segment or segment.isspace():
            return False
        if current.node_type is not NodeType.ELEMENT:
            return False
        text = segment.strip() if self.config.strip_text else segment
        current.value = self._unescape(text)
        return True
