"""Shared utilities for slim-xml.

Configuration objects, diagnostics, exceptions and logging helpers used by
every processing layer.
"""

from .errors import DetachedNodeError, SlimXMLError
from .result import (
    DiagnosticCollector,
    DiagnosticEntry,
    DiagnosticSeverity,
    LoadStatistics,
)
from .config import (
    CharacterConfig,
    ConfigError,
    ConfigValidationError,
    DocumentConfig,
    ParsingConfig,
    SerializationConfig,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)

__all__ = [
    "DetachedNodeError",
    "SlimXMLError",
    "DiagnosticCollector",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "LoadStatistics",
    "CharacterConfig",
    "ConfigError",
    "ConfigValidationError",
    "DocumentConfig",
    "ParsingConfig",
    "SerializationConfig",
    "CorrelationLogger",
    "get_logger",
]
