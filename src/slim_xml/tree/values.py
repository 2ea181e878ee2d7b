"""Typed views over the text stored in nodes and attributes.

Names and values are always stored as text. These helpers convert between
that text and booleans, integers and floats with fixed, permissive rules:
formatting is deterministic and parsing never raises, falling back to zero
(or ``False``) for text that does not start with a number.
"""

import re
from enum import Enum, auto
from typing import Any, Union

TypedValue = Union[str, bool, int, float]

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)
_HEX_UPPER = re.compile(r"\s*(?:0[xX])?([0-9A-F]+)")
_HEX_LOWER = re.compile(r"\s*(?:0[xX])?([0-9a-f]+)")

TRUE_TEXTS = ("true", "TRUE")


class ValueKind(Enum):
    """Kinds of typed value a text field can be read or written as."""

    TEXT = auto()
    BOOLEAN = auto()
    INTEGER = auto()
    FLOAT = auto()


def kind_of(value: Any) -> ValueKind:
    """Determine the value kind of a Python value.

    Raises:
        TypeError: If the value is not text, bool, int or float
    """
    # bool is a subclass of int, so it must be tested first
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, int):
        return ValueKind.INTEGER
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, str):
        return ValueKind.TEXT
    raise TypeError(f"Unsupported value type: {type(value).__name__}")


def format_value(value: TypedValue) -> str:
    """Format a typed value as text.

    Booleans become ``"true"``/``"false"``, integers base 10 and floats use
    the ``%g`` general format.
    """
    kind = kind_of(value)
    if kind is ValueKind.BOOLEAN:
        return "true" if value else "false"
    if kind is ValueKind.INTEGER:
        return str(int(value))
    if kind is ValueKind.FLOAT:
        return "%g" % value
    return value  # type: ignore[return-value]


def parse_int(text: str) -> int:
    """Parse the leading decimal integer of ``text``; 0 when there is none."""
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def parse_float(text: str) -> float:
    """Parse the leading floating point number of ``text``; 0.0 when there is none."""
    match = _FLOAT_PREFIX.match(text)
    return float(match.group(1)) if match else 0.0


def parse_bool(text: str) -> bool:
    return text in TRUE_TEXTS


def parse_value(text: str, kind: ValueKind) -> TypedValue:
    """Parse text as the given value kind."""
    if kind is ValueKind.BOOLEAN:
        return parse_bool(text)
    if kind is ValueKind.INTEGER:
        return parse_int(text)
    if kind is ValueKind.FLOAT:
        return parse_float(text)
    return text


def parse_hex(text: str) -> int:
    """Parse hexadecimal text.

    Digits are first read as uppercase-only (``0-9A-F``); if that yields zero
    the text is read again as lowercase-only (``0-9a-f``). Mixed-case input is
    therefore read up to the first digit of the other case, e.g. ``"Ff"`` is
    15 and ``"ff"`` is 255.
    """
    for pattern in (_HEX_UPPER, _HEX_LOWER):
        match = pattern.match(text)
        value = int(match.group(1), 16) if match else 0
        if value:
            return value
    return 0


def format_hex(value: int) -> str:
    """Format an unsigned integer as uppercase hexadecimal without prefix."""
    if value < 0:
        raise ValueError("Hex values must be >= 0")
    return "%X" % value


class ValueHolder:
    """Typed get/set shared by nodes and attributes.

    Subclasses provide ``value`` as a text property.
    """

    __slots__ = ()

    value: str

    def get_value(self, kind: ValueKind = ValueKind.TEXT) -> TypedValue:
        """Read the value as ``kind``."""
        return parse_value(self.value, kind)

    def set_value(self, value: TypedValue) -> None:
        """Store a text, bool, int or float value using the fixed formats."""
        self.value = format_value(value)

    def get_hex(self) -> int:
        """Read the value as hexadecimal."""
        return parse_hex(self.value)

    def set_hex(self, value: int) -> None:
        """Store an integer as uppercase hexadecimal."""
        self.value = format_hex(value)
