"""Diagnostic and statistics types shared by the parsing layers.

Loading a document never raises for malformed markup; instead the scanner and
interpreter record what they recovered from as :class:`DiagnosticEntry`
objects and the load reports a single success flag.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()       # Content skipped on purpose (e.g. DOCTYPE)
    WARNING = auto()    # Malformed markup recovered locally
    ERROR = auto()      # Input could not be parsed at all
    CRITICAL = auto()


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    position: Optional[int] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")
        if self.position is not None and self.position < 0:
            raise ValueError("Diagnostic position must be >= 0")

    @property
    def is_recovery(self) -> bool:
        """Whether this entry records a recovery from malformed input."""
        return self.severity in (
            DiagnosticSeverity.WARNING,
            DiagnosticSeverity.ERROR,
            DiagnosticSeverity.CRITICAL,
        )


@dataclass
class LoadStatistics:
    """Counters collected while loading one buffer."""

    processing_time_ms: float = 0.0
    bytes_processed: int = 0
    characters_processed: int = 0
    labels_scanned: int = 0
    nodes_created: int = 0
    recoveries: int = 0

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms


class DiagnosticCollector:
    """Accumulates diagnostics for one load operation."""

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self.correlation_id = correlation_id
        self.entries: List[DiagnosticEntry] = []

    def add(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        position: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> DiagnosticEntry:
        """Record a diagnostic and return it."""
        entry = DiagnosticEntry(
            severity=severity,
            message=message,
            component=component,
            position=position,
            details=details,
            correlation_id=self.correlation_id,
        )
        self.entries.append(entry)
        return entry

    def by_severity(self, severity: DiagnosticSeverity) -> List[DiagnosticEntry]:
        """Get diagnostics of a specific severity level."""
        return [entry for entry in self.entries if entry.severity == severity]

    @property
    def recovery_count(self) -> int:
        """Number of recorded recoveries."""
        return sum(1 for entry in self.entries if entry.is_recovery)

    def __len__(self) -> int:
        return len(self.entries)
