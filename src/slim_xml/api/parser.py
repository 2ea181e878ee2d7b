"""Module-level parsing API.

Simple functions for the common cases, each returning a :class:`ParseResult`
that bundles the loaded document with its success flag, diagnostics and
statistics. For repeated loads with shared settings create an
:class:`~slim_xml.api.document.XMLDocument` directly.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, List, Optional, TextIO, Union

from slim_xml.api.document import PathType, XMLDocument
from slim_xml.character.encoding import Encode
from slim_xml.shared.config import DocumentConfig
from slim_xml.shared.logging import get_logger
from slim_xml.shared.result import DiagnosticEntry, DiagnosticSeverity, LoadStatistics
from slim_xml.tree.nodes import XMLNode

InputType = Union[str, bytes, bytearray, BinaryIO, TextIO, Path]

PREVIEW_LENGTH = 100  # Max length for content preview in logs


@dataclass
class ParseResult:
    """Outcome of a module-level parse call."""

    document: XMLDocument
    success: bool
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    statistics: LoadStatistics = field(default_factory=LoadStatistics)
    correlation_id: Optional[str] = None

    @property
    def root(self) -> Optional[XMLNode]:
        """First element of the document, or None."""
        return self.document.root_element

    @property
    def recovery_count(self) -> int:
        return sum(1 for entry in self.diagnostics if entry.is_recovery)

    @property
    def has_errors(self) -> bool:
        return any(
            entry.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
            for entry in self.diagnostics
        )

    def __bool__(self) -> bool:
        return self.success


def _result(document: XMLDocument, success: bool) -> ParseResult:
    return ParseResult(
        document=document,
        success=success,
        diagnostics=list(document.diagnostics),
        statistics=document.statistics,
        correlation_id=document.correlation_id,
    )


def parse_string(
    xml_string: str,
    config: Optional[DocumentConfig] = None,
    correlation_id: Optional[str] = None,
) -> ParseResult:
    """Parse a document from already decoded text.

    Examples:
        >>> result = parse_string('<root><item id="1">Hello</item></root>')
        >>> result.success
        True
        >>> result.root.find_child("item").value
        'Hello'
    """
    logger = get_logger(__name__, correlation_id, "parse_string")
    logger.debug(
        "Starting string parse",
        extra={
            "content_length": len(xml_string),
            "preview": xml_string[:PREVIEW_LENGTH],
        },
    )
    document = XMLDocument(config, correlation_id)
    return _result(document, document.load_from_string(xml_string))


def parse_bytes(
    data: Union[bytes, bytearray],
    encode: Optional[Encode] = None,
    config: Optional[DocumentConfig] = None,
    correlation_id: Optional[str] = None,
) -> ParseResult:
    """Parse a document from a raw buffer, detecting its encoding when ``encode`` is None."""
    document = XMLDocument(config, correlation_id)
    return _result(document, document.load_from_memory(data, encode))


def parse_file(
    path: PathType,
    encode: Optional[Encode] = None,
    config: Optional[DocumentConfig] = None,
    correlation_id: Optional[str] = None,
) -> ParseResult:
    """Parse the document stored at ``path``.

    A missing or unreadable file gives an unsuccessful result with an ERROR
    diagnostic.
    """
    document = XMLDocument(config, correlation_id)
    return _result(document, document.load_from_file(path, encode))


def parse(
    input_data: InputType,
    encode: Optional[Encode] = None,
    config: Optional[DocumentConfig] = None,
    correlation_id: Optional[str] = None,
) -> ParseResult:
    """Parse a document from text, bytes, a file-like object or a Path.

    Strings are always treated as markup, never as file names; pass a
    :class:`pathlib.Path` to read a file.

    Examples:
        >>> parse(b'<?xml version="1.0"?><root/>').root.name
        'root'
    """
    if isinstance(input_data, str):
        return parse_string(input_data, config, correlation_id)
    if isinstance(input_data, (bytes, bytearray)):
        return parse_bytes(input_data, encode, config, correlation_id)
    if isinstance(input_data, Path):
        return parse_file(input_data, encode, config, correlation_id)
    if hasattr(input_data, "read"):
        document = XMLDocument(config, correlation_id)
        return _result(document, document.load_from_stream(input_data, encode))
    raise TypeError(f"Unsupported input type: {type(input_data).__name__}")
