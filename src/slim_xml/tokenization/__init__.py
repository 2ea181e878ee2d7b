"""Tokenization layer: label scanning and interpretation."""

from .scanner import Label, LabelScanner, ScannerState
from .interpreter import LabelInterpreter, LabelKind, classify_label

__all__ = [
    "Label",
    "LabelScanner",
    "ScannerState",
    "LabelInterpreter",
    "LabelKind",
    "classify_label",
]
