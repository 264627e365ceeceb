"""XML Highlight Diff.

Compares two XML documents position by position and renders both as
indented, HTML-escaped markup with differing attribute values highlighted,
ready to be shown side by side.

Progressive API Disclosure:
- Level 1: Simple functions - format_single(), format_pair()
- Level 2: Configured comparer - XMLComparer class with ComparerConfig
"""

__version__ = "0.1.0"
__author__ = "XML Highlight Diff Team"

from .api import XMLComparer, format_pair, format_single
from .shared.config import ComparerConfig, ParserConfig, RenderConfig, SerializationConfig
from .shared.result import AlignmentStatistics, ComparisonResult
from .tree import XMLParseError

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions
    "format_single",
    "format_pair",

    # Level 2: Configured comparer
    "XMLComparer",

    # Results and errors
    "AlignmentStatistics",
    "ComparisonResult",
    "XMLParseError",

    # Configuration classes
    "ComparerConfig",
    "ParserConfig",
    "RenderConfig",
    "SerializationConfig",
]
