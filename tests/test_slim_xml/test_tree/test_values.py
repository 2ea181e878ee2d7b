"""Tests for typed value conversion."""

import math

import pytest

from slim_xml.tree.values import (
    ValueKind,
    format_hex,
    format_value,
    kind_of,
    parse_bool,
    parse_float,
    parse_hex,
    parse_int,
    parse_value,
)


class TestFormatValue:
    """Test suite for value formatting."""

    @pytest.mark.parametrize(
        "value,text",
        [
            (True, "true"),
            (False, "false"),
            (42, "42"),
            (-7, "-7"),
            (1.5, "1.5"),
            (0.1, "0.1"),
            (1e20, "1e+20"),
            (3.0, "3"),
            ("text", "text"),
        ],
    )
    def test_formats(self, value, text):
        assert format_value(value) == text

    def test_unsupported_type(self):
        with pytest.raises(TypeError, match="Unsupported value type"):
            format_value([1, 2])

    def test_kind_of_bool_before_int(self):
        assert kind_of(True) is ValueKind.BOOLEAN
        assert kind_of(1) is ValueKind.INTEGER


class TestParsing:
    """Test suite for permissive text parsing."""

    @pytest.mark.parametrize(
        "text,value",
        [("12", 12), ("  -5", -5), ("+3", 3), ("42abc", 42), ("abc", 0), ("", 0), ("1.9", 1)],
    )
    def test_parse_int(self, text, value):
        assert parse_int(text) == value

    @pytest.mark.parametrize(
        "text,value",
        [("1.5", 1.5), (" -2e3", -2000.0), (".5x", 0.5), ("7", 7.0), ("nope", 0.0)],
    )
    def test_parse_float(self, text, value):
        assert parse_float(text) == value

    def test_parse_float_special(self):
        assert math.isinf(parse_float("inf"))
        assert math.isnan(parse_float("nan"))

    @pytest.mark.parametrize(
        "text,value",
        [("true", True), ("TRUE", True), ("True", False), ("1", False), ("", False)],
    )
    def test_parse_bool(self, text, value):
        assert parse_bool(text) is value

    def test_parse_value_dispatch(self):
        assert parse_value("5", ValueKind.INTEGER) == 5
        assert parse_value("5", ValueKind.FLOAT) == 5.0
        assert parse_value("true", ValueKind.BOOLEAN) is True
        assert parse_value("5", ValueKind.TEXT) == "5"


class TestHex:
    """Test suite for hexadecimal conversion."""

    @pytest.mark.parametrize(
        "text,value",
        [
            ("FF", 255),
            ("ff", 255),
            ("0x1A", 26),
            ("0xab", 171),
            ("Ff", 15),
            ("zz", 0),
            ("", 0),
        ],
    )
    def test_parse_hex(self, text, value):
        assert parse_hex(text) == value

    def test_format_hex(self):
        assert format_hex(255) == "FF"
        assert format_hex(0) == "0"

    def test_format_hex_negative(self):
        with pytest.raises(ValueError, match="Hex values must be >= 0"):
            format_hex(-1)
