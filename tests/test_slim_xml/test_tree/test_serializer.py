"""Tests for tree serialization."""

import pytest

from slim_xml.api.document import XMLDocument
from slim_xml.shared.config import SerializationConfig
from slim_xml.tree.nodes import NodeType
from slim_xml.tree.serializer import XMLSerializer, serialize


@pytest.fixture
def document():
    document = XMLDocument()
    declaration = document.add_child("", NodeType.DECLARATION)
    declaration.value = 'xml version="1.0"'
    root = document.add_child("root")
    item = root.add_child("item")
    item.add_attribute("id", 1)
    item.value = "a < b"
    comment = root.add_child("", NodeType.COMMENT)
    comment.value = " note "
    root.add_child("empty")
    return document


class TestXMLSerializer:
    """Test suite for XMLSerializer."""

    def test_document_layout(self, document):
        expected = (
            '<?xml version="1.0"?>\n'
            "<root>\n"
            '\t<item id="1">a &lt; b</item>\n'
            "\t<!-- note -->\n"
            "\t<empty/>\n"
            "</root>\n"
        )

        assert XMLSerializer().serialize(document) == expected

    def test_single_element(self, document):
        item = document.find_child("root").find_child("item")

        assert serialize(item) == '<item id="1">a &lt; b</item>\n'

    def test_value_and_children(self):
        document = XMLDocument()
        parent = document.add_child("p")
        parent.value = "text"
        parent.add_child("c")

        assert serialize(document) == "<p>text\n\t<c/>\n</p>\n"

    def test_attribute_escaping(self):
        document = XMLDocument()
        document.add_child("a").add_attribute("x", "\"'&<>")

        assert serialize(document) == '<a x="&quot;&apos;&amp;&lt;&gt;"/>\n'

    def test_custom_indent_and_newline(self, document):
        config = SerializationConfig(indent="  ", newline="\r\n")
        text = XMLSerializer(config).serialize(document.find_child("root"))

        assert text.startswith("<root>\r\n  <item")
        assert text.endswith("</root>\r\n")

    def test_compact_output(self, document):
        config = SerializationConfig(indent="", newline="")

        assert XMLSerializer(config).serialize(document.find_child("root")) == (
            '<root><item id="1">a &lt; b</item><!-- note --><empty/></root>'
        )

    def test_no_escaping_without_transfer(self):
        document = XMLDocument()
        document.add_child("a").value = "&lt;"

        config = SerializationConfig(transfer_characters=False)
        assert XMLSerializer(config).serialize(document) == "<a>&lt;</a>\n"

    def test_comment_and_declaration_verbatim(self):
        document = XMLDocument()
        document.add_child("", NodeType.COMMENT).value = "a & b"

        assert serialize(document) == "<!--a & b-->\n"

    def test_declaration_with_name_and_attributes(self):
        document = XMLDocument()
        declaration = document.add_child("xml", NodeType.DECLARATION)
        declaration.add_attribute("version", "1.0")
        declaration.add_attribute("encoding", "UTF-8")
        document.add_child("root")

        assert serialize(document) == '<?xml version="1.0" encoding="UTF-8"?>\n<root/>\n'

    def test_built_declaration_survives_reload(self):
        document = XMLDocument()
        declaration = document.add_child("style", NodeType.DECLARATION)
        declaration.add_attribute("href", "a&b.css")
        declaration.value = "media"
        document.add_child("root")

        reloaded = XMLDocument()
        assert reloaded.load_from_string(document.to_string())
        assert reloaded.get_child(0).value == 'style href="a&amp;b.css" media'
        assert reloaded.to_string() == document.to_string()

    def test_deep_nesting_indentation(self):
        document = XMLDocument()
        node = document
        for depth in range(4):
            node = node.add_child(f"n{depth}")
        node.value = "leaf"

        lines = serialize(document).splitlines()
        assert lines[3] == "\t\t\t<n3>leaf</n3>"
        assert lines[-1] == "</n0>"

    def test_empty_document(self):
        assert serialize(XMLDocument()) == ""
