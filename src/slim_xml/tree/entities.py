"""Escaping of the five predefined XML character references."""

import re
from typing import Dict

ENTITIES: Dict[str, str] = {
    "lt": "<",
    "gt": ">",
    "amp": "&",
    "quot": '"',
    "apos": "'",
}

_ESCAPES = {char: f"&{name};" for name, char in ENTITIES.items()}
_ESCAPE_PATTERN = re.compile(r"[&<>\"']")
_REFERENCE_PATTERN = re.compile(r"&(lt|gt|amp|quot|apos);")


def escape(text: str) -> str:
    """Replace ``& < > " '`` with their character references."""
    return _ESCAPE_PATTERN.sub(lambda match: _ESCAPES[match.group(0)], text)


def unescape(text: str) -> str:
    """Resolve the five predefined references; any other ``&...;`` is kept as is."""
    if "&" not in text:
        return text
    return _REFERENCE_PATTERN.sub(lambda match: ENTITIES[match.group(1)], text)
