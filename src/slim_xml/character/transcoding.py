"""Conversion between UTF-8 bytes and UTF-16 code units.

The two core conversions follow the two-pass sizing idiom: they write into a
caller supplied destination only as far as its length allows and always
return the number of units the complete input needs, so a first call without
a destination sizes the buffer for the second.

Malformed input never raises. Each maximal invalid UTF-8 subpart (bad lead
byte, stray continuation byte, truncated, overlong or surrogate sequence, or a
code point above U+10FFFF) and each unpaired UTF-16 surrogate becomes one
U+FFFD REPLACEMENT CHARACTER. The policy depends only on the input, so both
passes of the sizing idiom produce the same number of units.
"""

import sys
from array import array
from typing import Iterator, List, MutableSequence, Optional, Sequence

from slim_xml.character.encoding import (
    UTF8_BOM,
    UTF16_BE_BOM,
    UTF16_LE_BOM,
    Encode,
)

REPLACEMENT_CHARACTER = 0xFFFD
MAX_CODE_POINT = 0x10FFFF

HIGH_SURROGATE_MIN = 0xD800
HIGH_SURROGATE_MAX = 0xDBFF
LOW_SURROGATE_MIN = 0xDC00
LOW_SURROGATE_MAX = 0xDFFF
SUPPLEMENTARY_MIN = 0x10000

# (payload mask, continuation count, first continuation lower/upper bound)
# indexed by lead byte ranges; the narrowed first-continuation bounds reject
# overlong forms, surrogates and code points above U+10FFFF.
_LEAD_TABLE = {}
for _lead in range(0xC2, 0xE0):
    _LEAD_TABLE[_lead] = (0x1F, 1, 0x80, 0xBF)
for _lead in range(0xE0, 0xF0):
    _LEAD_TABLE[_lead] = (0x0F, 2, 0x80, 0xBF)
for _lead in range(0xF0, 0xF5):
    _LEAD_TABLE[_lead] = (0x07, 3, 0x80, 0xBF)
_LEAD_TABLE[0xE0] = (0x0F, 2, 0xA0, 0xBF)
_LEAD_TABLE[0xED] = (0x0F, 2, 0x80, 0x9F)
_LEAD_TABLE[0xF0] = (0x07, 3, 0x90, 0xBF)
_LEAD_TABLE[0xF4] = (0x07, 3, 0x80, 0x8F)
del _lead


def _iter_utf8_code_points(u8: bytes) -> Iterator[int]:
    i = 0
    total = len(u8)
    while i < total:
        byte = u8[i]
        i += 1
        if byte < 0x80:
            yield byte
            continue

        entry = _LEAD_TABLE.get(byte)
        if entry is None:
            yield REPLACEMENT_CHARACTER
            continue

        mask, remaining, lower, upper = entry
        code_point = byte & mask
        valid = True
        while remaining:
            if i < total and lower <= u8[i] <= upper:
                code_point = (code_point << 6) | (u8[i] & 0x3F)
                i += 1
                remaining -= 1
                lower, upper = 0x80, 0xBF
            else:
                valid = False
                break
        yield code_point if valid else REPLACEMENT_CHARACTER


def _iter_utf16_code_points(u16: Sequence[int]) -> Iterator[int]:
    i = 0
    total = len(u16)
    while i < total:
        unit = u16[i]
        i += 1
        if not 0 <= unit <= 0xFFFF:
            yield REPLACEMENT_CHARACTER
        elif HIGH_SURROGATE_MIN <= unit <= HIGH_SURROGATE_MAX:
            if i < total and LOW_SURROGATE_MIN <= u16[i] <= LOW_SURROGATE_MAX:
                low = u16[i]
                i += 1
                yield (
                    SUPPLEMENTARY_MIN
                    + ((unit - HIGH_SURROGATE_MIN) << 10)
                    + (low - LOW_SURROGATE_MIN)
                )
            else:
                yield REPLACEMENT_CHARACTER
        elif LOW_SURROGATE_MIN <= unit <= LOW_SURROGATE_MAX:
            yield REPLACEMENT_CHARACTER
        else:
            yield unit


def _utf16_units(code_point: int) -> Sequence[int]:
    if code_point < SUPPLEMENTARY_MIN:
        return (code_point,)
    offset = code_point - SUPPLEMENTARY_MIN
    return (HIGH_SURROGATE_MIN + (offset >> 10), LOW_SURROGATE_MIN + (offset & 0x3FF))


def _utf8_bytes(code_point: int) -> Sequence[int]:
    if code_point < 0x80:
        return (code_point,)
    if code_point < 0x800:
        return (0xC0 | (code_point >> 6), 0x80 | (code_point & 0x3F))
    if code_point < SUPPLEMENTARY_MIN:
        return (
            0xE0 | (code_point >> 12),
            0x80 | ((code_point >> 6) & 0x3F),
            0x80 | (code_point & 0x3F),
        )
    return (
        0xF0 | (code_point >> 18),
        0x80 | ((code_point >> 12) & 0x3F),
        0x80 | ((code_point >> 6) & 0x3F),
        0x80 | (code_point & 0x3F),
    )


def utf8_to_utf16(u8: bytes, u16: Optional[MutableSequence[int]] = None) -> int:
    """Convert UTF-8 bytes to UTF-16 code units.

    Args:
        u8: Source bytes
        u16: Optional destination; its length is the capacity. A surrogate
            pair is written only when both units fit.

    Returns:
        Number of code units the complete conversion requires
    """
    capacity = len(u16) if u16 is not None else 0
    required = 0
    for code_point in _iter_utf8_code_points(u8):
        units = _utf16_units(code_point)
        if required + len(units) <= capacity:
            for offset, unit in enumerate(units):
                u16[required + offset] = unit  # type: ignore[index]
        required += len(units)
    return required


def utf16_to_utf8(u16: Sequence[int], u8: Optional[bytearray] = None) -> int:
    """Convert UTF-16 code units to UTF-8 bytes.

    Args:
        u16: Source code units
        u8: Optional destination; its length is the capacity. A multi-byte
            sequence is written only when all of its bytes fit.

    Returns:
        Number of bytes the complete conversion requires
    """
    capacity = len(u8) if u8 is not None else 0
    required = 0
    for code_point in _iter_utf16_code_points(u16):
        encoded = _utf8_bytes(code_point)
        if required + len(encoded) <= capacity:
            u8[required:required + len(encoded)] = bytes(encoded)  # type: ignore[index]
        required += len(encoded)
    return required


def text_to_utf16(text: str) -> List[int]:
    """Split text into UTF-16 code units."""
    units: List[int] = []
    for char in text:
        units.extend(_utf16_units(ord(char)))
    return units


def utf16_to_text(u16: Sequence[int]) -> str:
    """Join UTF-16 code units into text, replacing unpaired surrogates."""
    return "".join(chr(code_point) for code_point in _iter_utf16_code_points(u16))


def decode_utf8(data: bytes) -> str:
    """Decode UTF-8 bytes into text using the two-pass conversion."""
    size = utf8_to_utf16(data)
    units = array("H", bytes(2 * size))
    utf8_to_utf16(data, units)
    return utf16_to_text(units)


def encode_utf8(text: str) -> bytes:
    """Encode text as UTF-8 bytes using the two-pass conversion."""
    units = text_to_utf16(text)
    buffer = bytearray(utf16_to_utf8(units))
    utf16_to_utf8(units, buffer)
    return bytes(buffer)


def units_from_bytes(data: bytes, big_endian: bool = False) -> array:
    """Read UTF-16 code units from bytes; a trailing odd byte is dropped."""
    units = array("H")
    units.frombytes(bytes(data[:len(data) - len(data) % 2]))
    if big_endian != (sys.byteorder == "big"):
        units.byteswap()
    return units


def units_to_bytes(u16: Sequence[int], big_endian: bool = False) -> bytes:
    """Pack UTF-16 code units into bytes."""
    units = array("H", u16)
    if big_endian != (sys.byteorder == "big"):
        units.byteswap()
    return units.tobytes()


def decode_buffer(data: bytes, encode: Encode, ansi_codec: str = "latin-1") -> str:
    """Decode a raw document buffer into working text.

    A byte-order mark matching ``encode`` is skipped.
    """
    if encode.is_utf8:
        if data.startswith(UTF8_BOM):
            data = data[len(UTF8_BOM):]
        return decode_utf8(data)
    if encode is Encode.UTF_16:
        if data.startswith(UTF16_LE_BOM):
            data = data[len(UTF16_LE_BOM):]
        return utf16_to_text(units_from_bytes(data, big_endian=False))
    if encode is Encode.UTF_16_BIG_ENDIAN:
        if data.startswith(UTF16_BE_BOM):
            data = data[len(UTF16_BE_BOM):]
        return utf16_to_text(units_from_bytes(data, big_endian=True))
    return bytes(data).decode(ansi_codec, errors="replace")


def encode_text(text: str, encode: Encode, ansi_codec: str = "latin-1") -> bytes:
    """Encode working text into an output buffer, prefixed with the encode's BOM.

    Characters the ANSI codec cannot represent become ``?``.
    """
    if encode.is_utf8:
        payload = encode_utf8(text)
    elif encode.is_utf16:
        payload = units_to_bytes(
            text_to_utf16(text), big_endian=encode is Encode.UTF_16_BIG_ENDIAN
        )
    else:
        payload = text.encode(ansi_codec, errors="replace")
    return encode.byte_order_mark + payload
