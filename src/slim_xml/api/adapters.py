"""Integration adapters for the ElementTree and lxml object models.

Adapters convert an :class:`~slim_xml.api.document.XMLDocument` into the
element tree of another XML library and back. Converting to a target builds
the element tree directly; converting from a target serializes it with the
library's own writer and loads the text with the tolerant parser.
"""

import time
import xml.etree.ElementTree as ElementTree
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from types import ModuleType
from typing import Any, Dict, List, Optional, Tuple, Type

from lxml import etree as lxml_etree

from slim_xml.api.document import XMLDocument
from slim_xml.api.parser import parse_string
from slim_xml.shared.config import DocumentConfig
from slim_xml.shared.logging import get_logger
from slim_xml.shared.result import DiagnosticEntry, DiagnosticSeverity
from slim_xml.tree.nodes import NodeType, XMLNode


@dataclass
class AdapterMetadata:
    """Metadata about an integration adapter."""

    name: str
    target_library: str
    description: str


@dataclass
class ConversionResult:
    """Result of a conversion operation."""

    success: bool
    converted_data: Any
    original_data: Any
    conversion_time_ms: float
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)


class XMLLibraryAdapter(ABC):
    """Bidirectional conversion between documents and an etree-style library."""

    def __init__(
        self,
        config: Optional[DocumentConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            config: Configuration for documents created by ``from_target``
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config
        self.correlation_id = correlation_id
        self._logger = get_logger(__name__, correlation_id, self.__class__.__name__)

    @property
    @abstractmethod
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""

    @property
    @abstractmethod
    def etree(self) -> ModuleType:
        """The etree module elements are built with."""

    def _tostring(self, element: Any) -> str:
        return self.etree.tostring(element, encoding="unicode")

    def to_target(self, document: XMLDocument) -> ConversionResult:
        """Convert the root element of ``document`` into a target element.

        Document-level comments and declarations have no place in a single
        element and are counted in the result metadata instead.
        """
        start_time = time.perf_counter()
        root = document.root_element
        if root is None:
            return self._create_error_result(
                "Document has no root element", document, _elapsed_ms(start_time)
            )

        warnings: List[str] = []
        try:
            element = self._build_element(root, warnings)
        except (TypeError, ValueError) as e:
            return self._create_error_result(
                f"Failed to convert to {self.metadata.target_library}: {e}",
                document,
                _elapsed_ms(start_time),
            )

        dropped = sum(1 for child in document.iter_children() if child != root)
        processing_time = _elapsed_ms(start_time)
        self._logger.debug(
            "Converted document to target",
            extra={"processing_time_ms": processing_time, "warnings": len(warnings)},
        )
        return ConversionResult(
            success=True,
            converted_data=element,
            original_data=document,
            conversion_time_ms=processing_time,
            warnings=warnings,
            metadata={
                "element_count": sum(1 for _ in element.iter()),
                "dropped_top_level_nodes": dropped,
            },
        )

    def from_target(self, target_data: Any) -> ConversionResult:
        """Convert a target element (or element tree) into a new document."""
        start_time = time.perf_counter()
        element = target_data.getroot() if hasattr(target_data, "getroot") else target_data
        if not hasattr(element, "tag"):
            return self._create_error_result(
                f"Target data is not a valid {self.metadata.target_library} element",
                target_data,
                _elapsed_ms(start_time),
            )

        xml_string = self._tostring(element)
        result = parse_string(xml_string, self.config, self.correlation_id)
        processing_time = _elapsed_ms(start_time)
        return ConversionResult(
            success=result.success,
            converted_data=result.document,
            original_data=target_data,
            conversion_time_ms=processing_time,
            metadata={"xml_length": len(xml_string)},
            diagnostics=result.diagnostics,
        )

    def _build_element(self, root: XMLNode, warnings: List[str]) -> Any:
        """Build the target element for ``root`` without recursing per level."""
        etree = self.etree
        top = None
        pending: List[Tuple[XMLNode, Any]] = [(root, None)]
        while pending:
            node, parent = pending.pop()
            if node.node_type is not NodeType.ELEMENT:
                try:
                    parent.append(self._build_leaf(node))
                except ValueError as e:
                    warnings.append(
                        f"Skipped {node.node_type.name.lower()} in <{parent.tag}>: {e}"
                    )
                continue

            element = etree.Element(node.name)
            for attribute in node.iter_attributes():
                if element.get(attribute.name) is not None:
                    warnings.append(
                        f"Duplicate attribute {attribute.name!r} on <{node.name}>: last value kept"
                    )
                element.set(attribute.name, attribute.value)
            if node.value:
                element.text = node.value

            if parent is None:
                top = element
            else:
                parent.append(element)
            pending.extend((child, element) for child in reversed(node.children))
        return top

    def _build_leaf(self, node: XMLNode) -> Any:
        if node.node_type is NodeType.COMMENT:
            return self.etree.Comment(node.value)
        if node.name:
            target = node.name
            pieces = [f'{attribute.name}="{attribute.value}"' for attribute in node.iter_attributes()]
            if node.value:
                pieces.append(node.value)
            text = " ".join(pieces)
        else:
            target, _, text = node.value.strip().partition(" ")
        return self.etree.ProcessingInstruction(target, text or None)

    def _create_error_result(
        self,
        error_message: str,
        original_data: Any,
        conversion_time_ms: float = 0.0,
    ) -> ConversionResult:
        """Create a ConversionResult for error conditions."""
        self._logger.warning(error_message)
        return ConversionResult(
            success=False,
            converted_data=None,
            original_data=original_data,
            conversion_time_ms=conversion_time_ms,
            errors=[error_message],
            diagnostics=[
                DiagnosticEntry(
                    severity=DiagnosticSeverity.ERROR,
                    message=error_message,
                    component=self.__class__.__name__,
                    correlation_id=self.correlation_id,
                )
            ],
        )


def _elapsed_ms(start_time: float) -> float:
    return (time.perf_counter() - start_time) * 1000


class ElementTreeAdapter(XMLLibraryAdapter):
    """Adapter for bidirectional conversion with xml.etree.ElementTree."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="elementtree",
            target_library="xml.etree.ElementTree",
            description="Bidirectional conversion between XMLDocument and ElementTree",
        )

    @property
    def etree(self) -> ModuleType:
        return ElementTree


class LxmlAdapter(XMLLibraryAdapter):
    """Adapter for bidirectional conversion with lxml.etree."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="lxml",
            target_library="lxml.etree",
            description="Bidirectional conversion between XMLDocument and lxml.etree",
        )

    @property
    def etree(self) -> ModuleType:
        return lxml_etree

    def _tostring(self, element: Any) -> str:
        return lxml_etree.tostring(element, encoding="unicode", with_tail=False)


_ADAPTERS: Dict[str, Type[XMLLibraryAdapter]] = {
    "elementtree": ElementTreeAdapter,
    "lxml": LxmlAdapter,
}


def get_adapter(
    adapter_name: str,
    config: Optional[DocumentConfig] = None,
    correlation_id: Optional[str] = None,
) -> Optional[XMLLibraryAdapter]:
    """Get an adapter instance by name.

    Args:
        adapter_name: ``"elementtree"`` or ``"lxml"``
        config: Configuration for documents created from target elements
        correlation_id: Optional correlation ID

    Returns:
        Adapter instance, or None for an unknown name
    """
    adapter_class = _ADAPTERS.get(adapter_name)
    if adapter_class is None:
        return None
    return adapter_class(config, correlation_id)


def list_adapters() -> List[AdapterMetadata]:
    """Metadata of every registered adapter."""
    return [adapter_class().metadata for adapter_class in _ADAPTERS.values()]
