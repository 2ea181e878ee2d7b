"""Label scanner: finds the next markup unit in decoded text.

A label runs from a ``<`` to the ``>`` that really closes it. The scanner is a
small state machine so that a ``>`` inside a quoted attribute value, inside a
comment body or inside a CDATA section does not end the label early::

    OUTSIDE --'<'--> IN_TAG --'"' or "'"--> IN_QUOTE --same quote--> IN_TAG
    IN_TAG  --'<!--' prefix--> IN_COMMENT --'-->'--> OUTSIDE
    IN_TAG  --'<![CDATA[' prefix--> IN_CDATA --']]>'--> OUTSIDE
    IN_TAG  --unquoted '>'--> OUTSIDE

Inside ``<!DOCTYPE ...>``-style labels a ``>`` within ``[...]`` does not end
the label either, and comments inside the brackets are skipped whole.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional

COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "-->"
CDATA_OPEN = "<![CDATA["
CDATA_CLOSE = "]]>"
MARKUP_DECLARATION_OPEN = "<!"
QUOTES = "\"'"


class ScannerState(Enum):
    """State machine states for label scanning."""

    OUTSIDE = auto()
    IN_TAG = auto()
    IN_QUOTE = auto()
    IN_COMMENT = auto()
    IN_CDATA = auto()


@dataclass(frozen=True)
class Label:
    """One scanned markup unit.

    Attributes:
        start: Offset of the opening ``<``
        end: Offset just past the label; the cursor for the next scan
        text: The label text including its delimiters
        complete: False when the input ended before the label was closed
    """

    start: int
    end: int
    text: str
    complete: bool = True

    def __post_init__(self) -> None:
        """Validate label span."""
        if self.start < 0 or self.end < self.start:
            raise ValueError("Label span must satisfy 0 <= start <= end")

    def __len__(self) -> int:
        return self.end - self.start


class LabelScanner:
    """Quote- and comment-aware scanner over decoded text."""

    def __init__(self) -> None:
        self.state = ScannerState.OUTSIDE
        self.labels_scanned = 0

    def find_label(self, text: str, cursor: int = 0) -> Optional[Label]:
        """Find the next label at or after ``cursor``.

        Args:
            text: Decoded document text
            cursor: Offset to start scanning from

        Returns:
            The next Label, or None when no further ``<`` exists. A label the
            input never closes is returned with ``complete=False`` and spans
            to the end of ``text``.
        """
        self.state = ScannerState.OUTSIDE
        start = text.find("<", cursor)
        if start == -1:
            return None

        length = len(text)
        quote = ""
        bracket_depth = 0
        in_markup_declaration = False

        if text.startswith(COMMENT_OPEN, start):
            self.state = ScannerState.IN_COMMENT
            pos = start + len(COMMENT_OPEN)
        elif text.startswith(CDATA_OPEN, start):
            self.state = ScannerState.IN_CDATA
            pos = start + len(CDATA_OPEN)
        else:
            self.state = ScannerState.IN_TAG
            in_markup_declaration = text.startswith(MARKUP_DECLARATION_OPEN, start)
            pos = start + 1

        while pos < length:
            if self.state is ScannerState.IN_TAG:
                char = text[pos]
                pos += 1
                if bracket_depth and text.startswith(COMMENT_OPEN, pos - 1):
                    # comments of an internal subset may hold stray quotes
                    close = text.find(COMMENT_CLOSE, pos - 1 + len(COMMENT_OPEN))
                    if close == -1:
                        break
                    pos = close + len(COMMENT_CLOSE)
                elif char in QUOTES:
                    self.state = ScannerState.IN_QUOTE
                    quote = char
                elif char == ">" and not bracket_depth:
                    return self._emit(text, start, pos)
                elif in_markup_declaration and char == "[":
                    bracket_depth += 1
                elif in_markup_declaration and char == "]" and bracket_depth:
                    bracket_depth -= 1
            elif self.state is ScannerState.IN_QUOTE:
                close = text.find(quote, pos)
                if close == -1:
                    break
                self.state = ScannerState.IN_TAG
                pos = close + 1
            else:
                closer = (
                    COMMENT_CLOSE if self.state is ScannerState.IN_COMMENT else CDATA_CLOSE
                )
                close = text.find(closer, pos)
                if close == -1:
                    break
                return self._emit(text, start, close + len(closer))

        self.labels_scanned += 1
        return Label(start, length, text[start:], complete=False)

    def _emit(self, text: str, start: int, end: int) -> Label:
        self.state = ScannerState.OUTSIDE
        self.labels_scanned += 1
        return Label(start, end, text[start:end])

    def iter_labels(self, text: str, cursor: int = 0) -> Iterator[Label]:
        """Iterate all labels from ``cursor`` to the end of ``text``."""
        while True:
            label = self.find_label(text, cursor)
            if label is None:
                return
            yield label
            cursor = label.end
