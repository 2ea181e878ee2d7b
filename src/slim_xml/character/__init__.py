"""Character layer for slim-xml.

Encoding detection for raw buffers and transcoding between UTF-8, UTF-16 and
the single-byte ANSI code page at the I/O boundary.
"""

from .encoding import (
    DEFAULT_ENCODE,
    BOMDetector,
    DetectionMethod,
    Encode,
    EncodingDetection,
    EncodingDetector,
    UTF8PatternAnalyzer,
    detect_encode,
)
from .transcoding import (
    REPLACEMENT_CHARACTER,
    decode_buffer,
    decode_utf8,
    encode_text,
    encode_utf8,
    text_to_utf16,
    units_from_bytes,
    units_to_bytes,
    utf8_to_utf16,
    utf16_to_text,
    utf16_to_utf8,
)

__all__ = [
    "DEFAULT_ENCODE",
    "BOMDetector",
    "DetectionMethod",
    "Encode",
    "EncodingDetection",
    "EncodingDetector",
    "UTF8PatternAnalyzer",
    "detect_encode",
    "REPLACEMENT_CHARACTER",
    "decode_buffer",
    "decode_utf8",
    "encode_text",
    "encode_utf8",
    "text_to_utf16",
    "units_from_bytes",
    "units_to_bytes",
    "utf8_to_utf16",
    "utf16_to_text",
    "utf16_to_utf8",
]
