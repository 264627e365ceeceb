"""Result objects and diagnostic types for XML comparison.

A comparison produces an immutable pair of rendered documents together with
statistics gathered during alignment and any diagnostics recorded on the way.
"""

import time
from dataclasses import asdict, dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Iterator, Optional, Tuple


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()
    ERROR = auto()      # Error conditions that were recovered


@dataclass(frozen=True)
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        """Convert diagnostic to a JSON-friendly dictionary."""
        return {
            "severity": self.severity.name,
            "message": self.message,
            "component": self.component,
            "details": self.details,
        }


@dataclass
class AlignmentStatistics:
    """Counters collected while aligning two element trees."""

    element_pairs_compared: int = 0
    attribute_pairs_compared: int = 0
    highlighted_attributes_left: int = 0
    highlighted_attributes_right: int = 0
    unmatched_elements_left: int = 0
    unmatched_elements_right: int = 0

    @property
    def has_differences(self) -> bool:
        """Check whether anything was highlighted on either side."""
        return any((
            self.highlighted_attributes_left,
            self.highlighted_attributes_right,
            self.unmatched_elements_left,
            self.unmatched_elements_right,
        ))

    def to_dict(self) -> Dict[str, Any]:
        """Convert statistics to dictionary representation."""
        result = asdict(self)
        result["has_differences"] = self.has_differences
        return result


@dataclass(frozen=True)
class ComparisonResult:
    """Immutable pair of formatted, highlight-annotated documents.

    Unpacks like a two-tuple:

        >>> left, right = format_pair('<a x="1"/>', '<a x="2"/>')
    """

    left: str
    right: str
    statistics: AlignmentStatistics = field(default_factory=AlignmentStatistics)
    diagnostics: Tuple[DiagnosticEntry, ...] = ()
    correlation_id: Optional[str] = None

    def __iter__(self) -> Iterator[str]:
        return iter((self.left, self.right))

    def has_errors(self) -> bool:
        """Check if result contains any error diagnostics."""
        return any(
            diag.severity is DiagnosticSeverity.ERROR for diag in self.diagnostics
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary representation."""
        return {
            "left": self.left,
            "right": self.right,
            "statistics": self.statistics.to_dict(),
            "diagnostics": [diag.to_dict() for diag in self.diagnostics],
            "correlation_id": self.correlation_id,
        }
