"""Tests for label interpretation."""

import pytest

from slim_xml.api.document import XMLDocument
from slim_xml.shared.config import ParsingConfig
from slim_xml.shared.result import DiagnosticCollector, DiagnosticSeverity
from slim_xml.tokenization.interpreter import LabelInterpreter, LabelKind, classify_label
from slim_xml.tokenization.scanner import Label
from slim_xml.tree.nodes import NodeType


def _label(text):
    return Label(0, len(text), text)


@pytest.fixture
def collector():
    return DiagnosticCollector("test")


@pytest.fixture
def interpreter(collector):
    return LabelInterpreter(ParsingConfig(), collector)


@pytest.fixture
def document():
    return XMLDocument()


class TestClassifyLabel:
    """Test suite for label classification."""

    @pytest.mark.parametrize(
        "text,kind",
        [
            ('<?xml version="1.0"?>', LabelKind.DECLARATION),
            ("<!-- note -->", LabelKind.COMMENT),
            ("<![CDATA[x]]>", LabelKind.CDATA),
            ("<!DOCTYPE html>", LabelKind.DOCTYPE),
            ("</a>", LabelKind.CLOSING),
            ("<a/>", LabelKind.SELF_CLOSING),
            ('<a x="1" />', LabelKind.SELF_CLOSING),
            ("<a>", LabelKind.OPEN),
            ('<a x="1/">', LabelKind.OPEN),
        ],
    )
    def test_kinds(self, text, kind):
        assert classify_label(text) is kind


class TestInterpretElements:
    """Test suite for element labels."""

    def test_open_becomes_current(self, interpreter, document):
        current = interpreter.interpret(_label("<a>"), document)

        assert current.name == "a"
        assert current.parent == document
        assert interpreter.nodes_created == 1

    def test_self_closing_keeps_current(self, interpreter, document):
        current = interpreter.interpret(_label('<a x="1"/>'), document)

        assert current == document
        child = document.find_child("a")
        assert child.find_attribute("x").value == "1"

    def test_closing_pops(self, interpreter, document):
        element = interpreter.interpret(_label("<a>"), document)

        assert interpreter.interpret(_label("</a>"), element) == document

    def test_mismatched_close_pops_anyway(self, interpreter, collector, document):
        element = interpreter.interpret(_label("<a>"), document)

        assert interpreter.interpret(_label("</b>"), element) == document
        warning = collector.by_severity(DiagnosticSeverity.WARNING)[0]
        assert warning.message == "Mismatched closing tag"
        assert warning.details == {"expected": "a", "found": "b"}

    def test_orphan_close_ignored(self, interpreter, collector, document):
        assert interpreter.interpret(_label("</a>"), document) == document
        assert collector.entries[0].message == "Closing tag without open element ignored"

    def test_nameless_label_skipped(self, interpreter, collector, document):
        assert interpreter.interpret(_label("< a>"), document) == document
        assert not document.has_child()
        assert collector.recovery_count == 1

    def test_incomplete_label_truncated(self, interpreter, collector, document):
        label = Label(0, 6, '<a x="', complete=False)

        assert interpreter.interpret(label, document) == document
        assert not document.has_child()
        assert collector.entries[0].message == "Unterminated label truncated"


class TestInterpretSpecialLabels:
    """Test suite for comments, declarations, CDATA and DOCTYPE."""

    def test_comment_verbatim(self, interpreter, document):
        interpreter.interpret(_label("<!-- a > b -->"), document)

        comment = document.get_child(0)
        assert comment.node_type is NodeType.COMMENT
        assert comment.value == " a > b "

    def test_declaration_body(self, interpreter, document):
        interpreter.interpret(_label('<?xml version="1.0"?>'), document)

        declaration = document.get_child(0)
        assert declaration.node_type is NodeType.DECLARATION
        assert declaration.value == 'xml version="1.0"'
        assert declaration.name == ""

    def test_comments_dropped_when_disabled(self, collector, document):
        interpreter = LabelInterpreter(ParsingConfig(keep_comments=False), collector)
        interpreter.interpret(_label("<!--x-->"), document)

        assert not document.has_child()

    def test_declarations_dropped_when_disabled(self, collector, document):
        interpreter = LabelInterpreter(ParsingConfig(keep_declarations=False), collector)
        interpreter.interpret(_label("<?pi?>"), document)

        assert not document.has_child()

    def test_cdata_appended_verbatim(self, interpreter, document):
        element = document.add_child("a")
        element.value = "x"
        interpreter.interpret(_label("<![CDATA[&amp; <b>]]>"), element)

        assert element.value == "x&amp; <b>"

    def test_doctype_skipped_with_info(self, interpreter, collector, document):
        interpreter.interpret(_label("<!DOCTYPE r>"), document)

        assert not document.has_child()
        assert collector.entries[0].severity is DiagnosticSeverity.INFO


class TestParseAttributes:
    """Test suite for attribute parsing and tolerance."""

    def test_quoted_pairs_in_order(self, interpreter, collector):
        pairs = interpreter.parse_attributes(' a="1" b=\'two\'  c = "3"')

        assert pairs == [("a", "1"), ("b", "two"), ("c", "3")]
        assert collector.recovery_count == 0

    def test_values_unescaped(self, interpreter):
        pairs = interpreter.parse_attributes(' v="&lt;&amp;&gt;&quot;&apos;&unknown;"')

        assert pairs == [("v", "<&>\"'&unknown;")]

    def test_no_unescape_without_transfer(self, collector):
        interpreter = LabelInterpreter(ParsingConfig(transfer_characters=False), collector)

        assert interpreter.parse_attributes(' v="&lt;"') == [("v", "&lt;")]

    def test_unquoted_value(self, interpreter, collector):
        assert interpreter.parse_attributes(" a=1 b=two") == [("a", "1"), ("b", "two")]
        assert collector.recovery_count == 2

    def test_bare_name(self, interpreter, collector):
        assert interpreter.parse_attributes(" checked x='1'") == [("checked", ""), ("x", "1")]
        assert collector.entries[0].message == "Attribute without value"

    def test_unterminated_quote(self, interpreter, collector):
        assert interpreter.parse_attributes(' a="rest of tag') == [("a", "rest of tag")]
        assert collector.entries[0].message == "Unterminated attribute value"

    def test_duplicates_kept(self, interpreter):
        assert interpreter.parse_attributes(' a="1" a="2"') == [("a", "1"), ("a", "2")]


class TestAssignText:
    """Test suite for character data assignment."""

    def test_text_stripped_and_unescaped(self, interpreter, document):
        element = document.add_child("a")

        assert interpreter.assign_text("  1 &lt; 2\n", element)
        assert element.value == "1 < 2"

    def test_whitespace_ignored(self, interpreter, document):
        element = document.add_child("a")

        assert not interpreter.assign_text(" \n\t", element)
        assert element.value == ""

    def test_document_level_text_ignored(self, interpreter, document):
        assert not interpreter.assign_text("stray", document)
        assert document.value == ""

    def test_last_assignment_wins(self, interpreter, document):
        element = document.add_child("a")
        interpreter.assign_text("first", element)
        interpreter.assign_text("second", element)

        assert element.value == "second"

    def test_strip_disabled(self, collector, document):
        interpreter = LabelInterpreter(ParsingConfig(strip_text=False), collector)
        element = document.add_child("a")
        interpreter.assign_text(" x ", element)

        assert element.value == " x "
