"""XML document: the root of a tree plus its load and save entry points.

A document owns the arena every node of its tree lives in. Loading replaces
the whole tree; malformed markup is recovered locally and reported through
:attr:`XMLDocument.diagnostics` rather than raised.
"""

import os
import time
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

from slim_xml.character.encoding import Encode, EncodingDetector
from slim_xml.character.transcoding import decode_buffer, encode_text
from slim_xml.shared.config import DocumentConfig
from slim_xml.shared.logging import get_logger
from slim_xml.shared.result import (
    DiagnosticCollector,
    DiagnosticEntry,
    DiagnosticSeverity,
    LoadStatistics,
)
from slim_xml.tokenization.interpreter import LabelInterpreter
from slim_xml.tokenization.scanner import LabelScanner
from slim_xml.tree.nodes import NodeArena, NodeType, XMLNode
from slim_xml.tree.serializer import XMLSerializer

COMPONENT = "xml_document"

PathType = Union[str, os.PathLike]


class XMLDocument(XMLNode):
    """Root node of a document tree with load and save operations.

    Example:
        >>> document = XMLDocument()
        >>> document.load_from_memory(b'<config debug="true"><name>demo</name></config>')
        True
        >>> config = document.find_child("config")
        >>> config.read_attribute("debug", False)
        True
    """

    def __init__(
        self,
        config: Optional[DocumentConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        arena = NodeArena()
        super().__init__(arena, arena.allocate(NodeType.DOCUMENT, None))
        arena.root_handle = self
        self.config = config or DocumentConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, COMPONENT)
        self.diagnostics: List[DiagnosticEntry] = []
        self.statistics = LoadStatistics()
        self.source_encode: Optional[Encode] = None

    @property
    def root_element(self) -> Optional[XMLNode]:
        """First element child of the document, or None."""
        for child in self.iter_children():
            if child.node_type is NodeType.ELEMENT:
                return child
        return None

    @property
    def default_encode(self) -> Encode:
        return Encode.from_name(self.config.character.default_encode)

    def _reset(self) -> None:
        self.clear_children()
        self.clear_attributes()
        self.name = ""
        self.value = ""
        self.source_encode = None

    # Loading

    def load_from_memory(self, buffer: bytes, encode: Optional[Encode] = None) -> bool:
        """Replace the tree with the document held in ``buffer``.

        Args:
            buffer: Raw document bytes
            encode: Encoding of ``buffer``; None detects it

        Returns:
            False when the buffer is empty or holds no markup at all,
            True otherwise (recoveries are listed in ``diagnostics``)
        """
        start_time = time.perf_counter()
        data = bytes(buffer)
        collector = DiagnosticCollector(self.correlation_id)
        statistics = LoadStatistics(bytes_processed=len(data))
        self._reset()

        self.logger.info("Loading document from memory", extra={"buffer_size": len(data)})
        if not data:
            collector.add(DiagnosticSeverity.ERROR, "Empty buffer", COMPONENT)
            return self._finish_load(False, collector, statistics, start_time)

        character = self.config.character
        if encode is None:
            detection = EncodingDetector(character.detection_sample_size).detect(data)
            encode = detection.encode
            self.logger.debug(
                "Detected encoding",
                extra={
                    "encode": encode.name,
                    "method": detection.method.name,
                    "multi_bytes": detection.multi_bytes,
                },
            )
        self.source_encode = encode

        text = decode_buffer(data, encode, character.ansi_codec)
        success = self._parse(text, collector, statistics)
        return self._finish_load(success, collector, statistics, start_time)

    def load_from_string(self, text: str) -> bool:
        """Replace the tree with the document in already decoded ``text``."""
        start_time = time.perf_counter()
        collector = DiagnosticCollector(self.correlation_id)
        statistics = LoadStatistics()
        self._reset()

        self.logger.info("Loading document from text", extra={"content_length": len(text)})
        if not text:
            collector.add(DiagnosticSeverity.ERROR, "Empty text", COMPONENT)
            return self._finish_load(False, collector, statistics, start_time)
        success = self._parse(text, collector, statistics)
        return self._finish_load(success, collector, statistics, start_time)

    def load_from_stream(self, stream: BinaryIO, encode: Optional[Encode] = None) -> bool:
        """Read ``stream`` to its end and load the result.

        Text streams are accepted as well; their content is already decoded.
        """
        data = stream.read()
        if isinstance(data, str):
            return self.load_from_string(data)
        return self.load_from_memory(data, encode)

    def load_from_file(self, path: PathType, encode: Optional[Encode] = None) -> bool:
        """Load the document stored at ``path``.

        Returns:
            False when the file cannot be read or holds no markup
        """
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            self._reset()
            self.logger.error("Failed to read document file", extra={"path": str(path)})
            collector = DiagnosticCollector(self.correlation_id)
            collector.add(
                DiagnosticSeverity.ERROR,
                f"Cannot read file: {e}",
                COMPONENT,
                details={"path": str(path)},
            )
            self.diagnostics = collector.entries
            self.statistics = LoadStatistics()
            return False
        return self.load_from_memory(data, encode)

    def _parse(
        self, text: str, collector: DiagnosticCollector, statistics: LoadStatistics
    ) -> bool:
        scanner = LabelScanner()
        interpreter = LabelInterpreter(
            self.config.parsing, collector, self.correlation_id
        )
        current: XMLNode = self
        cursor = 0
        for label in scanner.iter_labels(text):
            interpreter.assign_text(text[cursor:label.start], current)
            current = interpreter.interpret(label, current)
            cursor = label.end

        statistics.characters_processed = len(text)
        statistics.labels_scanned = scanner.labels_scanned
        statistics.nodes_created = interpreter.nodes_created

        if not scanner.labels_scanned:
            collector.add(DiagnosticSeverity.ERROR, "No markup found", COMPONENT)
            return False

        interpreter.assign_text(text[cursor:], current)
        unclosed = current.depth
        if unclosed:
            collector.add(
                DiagnosticSeverity.WARNING,
                "Elements left open at end of input",
                COMPONENT,
                position=len(text),
                details={"unclosed": unclosed},
            )
        return True

    def _finish_load(
        self,
        success: bool,
        collector: DiagnosticCollector,
        statistics: LoadStatistics,
        start_time: float,
    ) -> bool:
        statistics.processing_time_ms = (time.perf_counter() - start_time) * 1000
        statistics.recoveries = collector.recovery_count
        self.diagnostics = collector.entries
        self.statistics = statistics
        self.logger.info(
            "Document load completed" if success else "Document load failed",
            extra={
                "success": success,
                "processing_time_ms": statistics.processing_time_ms,
                "nodes_created": statistics.nodes_created,
                "recoveries": statistics.recoveries,
            },
        )
        return success

    # Saving

    def to_string(self) -> str:
        """Serialize the whole tree as text."""
        return XMLSerializer(self.config.serialization, self.correlation_id).serialize(self)

    def to_bytes(self, encode: Optional[Encode] = None) -> bytes:
        """Serialize the whole tree and encode it, byte-order mark included.

        Args:
            encode: Output encoding; None uses the configured default
        """
        return encode_text(
            self.to_string(),
            encode or self.default_encode,
            self.config.character.ansi_codec,
        )

    def save(
        self, target: Union[PathType, BinaryIO], encode: Optional[Encode] = None
    ) -> bool:
        """Write the document to a path or a writable binary stream.

        Returns:
            False when the target cannot be written
        """
        data = self.to_bytes(encode)
        try:
            if hasattr(target, "write"):
                target.write(data)  # type: ignore[union-attr]
            else:
                Path(target).write_bytes(data)  # type: ignore[arg-type]
        except OSError:
            self.logger.error("Failed to save document", extra={"target": str(target)})
            return False
        self.logger.info("Document saved", extra={"bytes_written": len(data)})
        return True

    def __repr__(self) -> str:
        return f"<XMLDocument children={self.child_count()}>"
