"""Shared utilities for XML comparison.

This module provides configuration objects, result types and logging helpers
used across the parsing, alignment and rendering stages.
"""

from .config import (
    ComparerConfig,
    ConfigError,
    ConfigValidationError,
    ParserConfig,
    RenderConfig,
    SerializationConfig,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    AlignmentStatistics,
    ComparisonResult,
    DiagnosticEntry,
    DiagnosticSeverity,
)

__all__ = [
    "ComparerConfig",
    "ConfigError",
    "ConfigValidationError",
    "ParserConfig",
    "RenderConfig",
    "SerializationConfig",
    "CorrelationLogger",
    "get_logger",
    "AlignmentStatistics",
    "ComparisonResult",
    "DiagnosticEntry",
    "DiagnosticSeverity",
]
