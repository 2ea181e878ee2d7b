"""Tests for ElementTree and lxml adapters."""

import xml.etree.ElementTree as ElementTree

import pytest
from lxml import etree

from slim_xml.api.adapters import (
    ConversionResult,
    ElementTreeAdapter,
    LxmlAdapter,
    get_adapter,
    list_adapters,
)
from slim_xml.api.document import XMLDocument
from slim_xml.api.parser import parse_string
from slim_xml.tree.nodes import NodeType

SOURCE = (
    '<?xml version="1.0"?>'
    '<library owner="me">'
    '<book id="1" lang="en">Dune</book>'
    "<!-- shelf -->"
    '<book id="2"/>'
    "</library>"
)


@pytest.fixture
def document():
    return parse_string(SOURCE).document


@pytest.fixture(params=[ElementTreeAdapter, LxmlAdapter], ids=["elementtree", "lxml"])
def adapter(request):
    return request.param()


class TestToTarget:
    """Test suite for conversion into target elements."""

    def test_structure(self, adapter, document):
        result = adapter.to_target(document)

        assert isinstance(result, ConversionResult)
        assert result.success
        root = result.converted_data
        assert root.tag == "library"
        assert root.get("owner") == "me"
        books = root.findall("book")
        assert [book.get("id") for book in books] == ["1", "2"]
        assert books[0].text == "Dune"
        assert result.metadata["dropped_top_level_nodes"] == 1

    def test_comment_preserved(self, adapter, document):
        root = adapter.to_target(document).converted_data
        comments = [child for child in root if child.tag is adapter.etree.Comment]

        assert [comment.text for comment in comments] == [" shelf "]

    def test_duplicate_attribute_warning(self, adapter):
        document = parse_string('<a x="1" x="2"/>').document
        result = adapter.to_target(document)

        assert result.success
        assert result.converted_data.get("x") == "2"
        assert len(result.warnings) == 1

    def test_deep_nesting(self, adapter):
        """Conversion does not recurse once per nesting level."""
        depth = 3000
        document = parse_string("<a>" * depth + "</a>" * depth).document
        result = adapter.to_target(document)

        assert result.success
        assert result.metadata["element_count"] == depth

    def test_named_declaration_becomes_processing_instruction(self, adapter):
        document = XMLDocument()
        root = document.add_child("root")
        declaration = root.add_child("style", NodeType.DECLARATION)
        declaration.add_attribute("href", "a.css")
        result = adapter.to_target(document)

        instruction = result.converted_data[0]
        assert adapter.etree.tostring(instruction, encoding="unicode") == '<?style href="a.css"?>'

    def test_document_without_root(self, adapter):
        result = adapter.to_target(XMLDocument())

        assert not result.success
        assert result.errors == ["Document has no root element"]
        assert result.diagnostics[0].component == type(adapter).__name__


class TestFromTarget:
    """Test suite for conversion from target elements."""

    def test_elementtree_element(self):
        element = ElementTree.fromstring('<r a="1"><c>text</c><!-- x --></r>')
        result = ElementTreeAdapter().from_target(element)

        assert result.success
        root = result.converted_data.root_element
        assert root.find_attribute("a").value == "1"
        assert root.find_child("c").value == "text"

    def test_lxml_element_with_comment(self):
        element = etree.fromstring('<r><!-- note --><c x="&lt;"/></r>')
        result = LxmlAdapter().from_target(element)

        assert result.success
        root = result.converted_data.root_element
        assert root.get_child(0).node_type is NodeType.COMMENT
        assert root.find_child("c").find_attribute("x").value == "<"

    def test_lxml_tail_not_included(self):
        parent = etree.fromstring("<p><c/>tail</p>")
        result = LxmlAdapter().from_target(parent[0])

        assert result.converted_data.to_string() == "<c/>\n"

    def test_element_tree_wrapper(self):
        tree = ElementTree.ElementTree(ElementTree.fromstring("<w/>"))

        assert ElementTreeAdapter().from_target(tree).converted_data.root_element.name == "w"

    def test_invalid_target(self, adapter):
        result = adapter.from_target("not an element")

        assert not result.success
        assert result.converted_data is None

    def test_round_trip(self, adapter, document):
        element = adapter.to_target(document).converted_data
        back = adapter.from_target(element).converted_data

        assert back.to_string() == parse_string(
            '<library owner="me"><book id="1" lang="en">Dune</book>'
            '<!-- shelf --><book id="2"/></library>'
        ).document.to_string()


class TestRegistry:
    """Test suite for adapter lookup."""

    def test_get_adapter(self):
        assert isinstance(get_adapter("elementtree"), ElementTreeAdapter)
        assert isinstance(get_adapter("lxml", correlation_id="c"), LxmlAdapter)
        assert get_adapter("pandas") is None

    def test_list_adapters(self):
        assert [metadata.name for metadata in list_adapters()] == ["elementtree", "lxml"]
