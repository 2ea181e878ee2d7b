"""Encoding detection for raw XML byte buffers.

Detection runs in two stages: a byte-order mark at the very start of the
buffer is authoritative; without one, the sampled prefix is scanned for
well-formed multi-byte UTF-8 sequences. Anything else is treated as a
single-byte ANSI buffer. Detection never raises.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Tuple

# UTF-8 byte constants
ASCII_MAX = 0x80
UTF8_CONTINUATION_MIN = 0x80
UTF8_CONTINUATION_MAX = 0xBF
UTF8_2BYTE_MIN = 0xC2        # C0 and C1 only ever start overlong forms
UTF8_3BYTE_MIN = 0xE0
UTF8_4BYTE_MIN = 0xF0
UTF8_4BYTE_MAX = 0xF4        # above F4 the code point exceeds U+10FFFF

UTF8_BOM = b"\xef\xbb\xbf"
UTF16_LE_BOM = b"\xff\xfe"
UTF16_BE_BOM = b"\xfe\xff"

DEFAULT_SAMPLE_SIZE = 0       # whole buffer


class Encode(Enum):
    """Encodings a document can be read from and written to."""

    ANSI = 0
    UTF_8 = 1
    UTF_8_NO_MARK = 2
    UTF_16 = 3
    UTF_16_BIG_ENDIAN = 4

    @property
    def byte_order_mark(self) -> bytes:
        """BOM written in front of output in this encoding."""
        return _MARKS.get(self, b"")

    @property
    def is_utf16(self) -> bool:
        return self in (Encode.UTF_16, Encode.UTF_16_BIG_ENDIAN)

    @property
    def is_utf8(self) -> bool:
        return self in (Encode.UTF_8, Encode.UTF_8_NO_MARK)

    @classmethod
    def from_name(cls, name: str) -> "Encode":
        """Look up an encode by member name, case-insensitively."""
        try:
            return cls[name.upper().replace("-", "_")]
        except KeyError:
            raise ValueError(f"Unknown encode: {name}") from None


_MARKS = {
    Encode.UTF_8: UTF8_BOM,
    Encode.UTF_16: UTF16_LE_BOM,
    Encode.UTF_16_BIG_ENDIAN: UTF16_BE_BOM,
}

DEFAULT_ENCODE = Encode.UTF_8


class DetectionMethod(Enum):
    """Enumeration of encoding detection methods."""

    BOM = "bom"
    UTF8_PATTERN = "utf8_pattern"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class EncodingDetection:
    """Result of encoding detection.

    Attributes:
        encode: Detected source encoding
        multi_bytes: Whether non-ASCII data was seen in the sampled prefix
        method: Detection stage that decided
        bom_length: Number of leading bytes taken by a byte-order mark
    """

    encode: Encode
    multi_bytes: bool
    method: DetectionMethod
    bom_length: int = 0


class BOMDetector:
    """Byte Order Mark (BOM) detection for UTF-8 and UTF-16."""

    BOM_PATTERNS: ClassVar[Tuple[Tuple[bytes, Encode], ...]] = (
        (UTF8_BOM, Encode.UTF_8),
        (UTF16_LE_BOM, Encode.UTF_16),
        (UTF16_BE_BOM, Encode.UTF_16_BIG_ENDIAN),
    )

    def detect(self, data: bytes) -> Optional[Encode]:
        """Detect encoding based on BOM.

        Args:
            data: Byte data to analyze

        Returns:
            The encode announced by the BOM, None when there is none
        """
        for bom_bytes, encode in self.BOM_PATTERNS:
            if data.startswith(bom_bytes):
                return encode
        return None


class UTF8PatternAnalyzer:
    """Scans bytes for well-formed multi-byte UTF-8 sequences."""

    def analyze(self, data: bytes) -> Tuple[int, bool]:
        """Count valid multi-byte sequences and report whether any byte was invalid.

        A sequence cut off by the end of ``data`` counts as valid because
        ``data`` is usually a prefix sample of a longer buffer.

        Returns:
            ``(valid_sequences, saw_invalid)``
        """
        valid_sequences = 0
        i = 0
        total = len(data)

        while i < total:
            byte = data[i]
            if byte < ASCII_MAX:
                i += 1
                continue

            length = self._sequence_length(byte)
            if length == 0:
                return valid_sequences, True

            end = min(i + length, total)
            for pos in range(i + 1, end):
                if not UTF8_CONTINUATION_MIN <= data[pos] <= UTF8_CONTINUATION_MAX:
                    return valid_sequences, True

            valid_sequences += 1
            i += length

        return valid_sequences, False

    def _sequence_length(self, lead: int) -> int:
        if UTF8_2BYTE_MIN <= lead < UTF8_3BYTE_MIN:
            return 2
        if UTF8_3BYTE_MIN <= lead < UTF8_4BYTE_MIN:
            return 3
        if UTF8_4BYTE_MIN <= lead <= UTF8_4BYTE_MAX:
            return 4
        return 0


class EncodingDetector:
    """Main encoding detection class.

    Implements a cascading detection strategy:
    1. BOM detection
    2. UTF-8 multi-byte pattern scan
    3. Fallback to ANSI
    """

    def __init__(self, sample_size: int = DEFAULT_SAMPLE_SIZE) -> None:
        """Initialize detection components.

        Args:
            sample_size: Number of leading bytes inspected; 0 inspects everything
        """
        if sample_size < 0:
            raise ValueError("sample_size must be >= 0")
        self.sample_size = sample_size
        self.bom_detector = BOMDetector()
        self.pattern_analyzer = UTF8PatternAnalyzer()

    def _sample(self, data: bytes, offset: int = 0) -> bytes:
        if self.sample_size:
            return data[offset:offset + self.sample_size]
        return data[offset:]

    def detect(self, data: bytes) -> EncodingDetection:
        """Detect the encoding of ``data``.

        Args:
            data: Byte data to analyze

        Returns:
            EncodingDetection with the chosen encode and multi-byte flag
        """
        data = bytes(data)

        bom_encode = self.bom_detector.detect(data)
        if bom_encode is not None:
            bom_length = len(bom_encode.byte_order_mark)
            sample = self._sample(data, bom_length)
            if bom_encode.is_utf16:
                multi_bytes = _has_wide_units(sample, bom_encode is Encode.UTF_16)
            else:
                multi_bytes = any(byte >= ASCII_MAX for byte in sample)
            return EncodingDetection(bom_encode, multi_bytes, DetectionMethod.BOM, bom_length)

        valid_sequences, saw_invalid = self.pattern_analyzer.analyze(self._sample(data))
        if valid_sequences and not saw_invalid:
            return EncodingDetection(
                Encode.UTF_8_NO_MARK, True, DetectionMethod.UTF8_PATTERN
            )

        return EncodingDetection(Encode.ANSI, False, DetectionMethod.FALLBACK)


def _has_wide_units(sample: bytes, little_endian: bool) -> bool:
    byteorder = "little" if little_endian else "big"
    for pos in range(0, len(sample) - 1, 2):
        if int.from_bytes(sample[pos:pos + 2], byteorder) >= ASCII_MAX:
            return True
    return False


def detect_encode(data: bytes, sample_size: int = DEFAULT_SAMPLE_SIZE) -> EncodingDetection:
    """Detect the encoding of a raw buffer with a one-off detector."""
    return EncodingDetector(sample_size).detect(data)
