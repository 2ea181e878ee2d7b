"""Tests for the label scanner."""

import pytest

from slim_xml.tokenization.scanner import Label, LabelScanner, ScannerState


def _texts(source):
    return [label.text for label in LabelScanner().iter_labels(source)]


class TestFindLabel:
    """Test suite for single label scans."""

    def test_simple_tag(self):
        label = LabelScanner().find_label("text <a> more")

        assert label == Label(5, 8, "<a>")
        assert label.complete

    def test_cursor_advances(self):
        scanner = LabelScanner()
        first = scanner.find_label("<a><b/></a>")
        second = scanner.find_label("<a><b/></a>", first.end)

        assert second.text == "<b/>"
        assert scanner.labels_scanned == 2

    def test_no_label(self):
        assert LabelScanner().find_label("plain text") is None
        assert LabelScanner().find_label("<a>", 3) is None

    def test_quoted_gt_does_not_close(self):
        """A '>' inside a quoted attribute value belongs to the value."""
        assert _texts('<a x=">"/>') == ['<a x=">"/>']
        assert _texts("<a x='a>b' y=\"'\">") == ["<a x='a>b' y=\"'\">"]

    def test_comment_gt_does_not_close(self):
        assert _texts("<!-- a > b --><c/>") == ["<!-- a > b -->", "<c/>"]

    def test_comment_with_quotes(self):
        """Quotes inside comments are not quote delimiters."""
        assert _texts("<!-- it's --><a/>") == ["<!-- it's -->", "<a/>"]

    def test_cdata_section(self):
        assert _texts("<a><![CDATA[x > y <z>]]></a>") == [
            "<a>",
            "<![CDATA[x > y <z>]]>",
            "</a>",
        ]

    def test_doctype_internal_subset(self):
        source = '<!DOCTYPE r [<!ENTITY e "v">]><r/>'

        assert _texts(source) == ['<!DOCTYPE r [<!ENTITY e "v">]>', "<r/>"]

    def test_doctype_subset_comment_with_apostrophe(self):
        """An apostrophe in a subset comment does not open a quote."""
        source = "<!DOCTYPE r [<!-- don't > stop --><!ENTITY e 'v'>]><r/>"

        assert _texts(source) == [
            "<!DOCTYPE r [<!-- don't > stop --><!ENTITY e 'v'>]>",
            "<r/>",
        ]

    def test_doctype_subset_comment_unterminated(self):
        label = LabelScanner().find_label("<!DOCTYPE r [<!-- open")

        assert not label.complete
        assert label.end == len("<!DOCTYPE r [<!-- open")

    def test_declaration(self):
        assert _texts('<?xml version="1.0"?><r/>') == ['<?xml version="1.0"?>', "<r/>"]

    @pytest.mark.parametrize(
        "source",
        ["<a", '<a x="never closed>', "<!-- open comment", "<![CDATA[ open"],
    )
    def test_unterminated_label(self, source):
        label = LabelScanner().find_label("  " + source)

        assert label.complete is False
        assert label.start == 2
        assert label.end == len(source) + 2
        assert label.text == source

    def test_state_returns_outside(self):
        scanner = LabelScanner()
        scanner.find_label('<a x="1">')

        assert scanner.state is ScannerState.OUTSIDE

    def test_state_left_in_quote_when_unterminated(self):
        scanner = LabelScanner()
        scanner.find_label('<a x="1>')

        assert scanner.state is ScannerState.IN_QUOTE


class TestLabel:
    """Test suite for Label."""

    def test_length(self):
        assert len(Label(3, 7, "<ab>")) == 4

    def test_invalid_span(self):
        with pytest.raises(ValueError, match="Label span"):
            Label(5, 2, "")
