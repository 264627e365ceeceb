"""HTML rendering of serialized XML segments.

Each segment is HTML-escaped first; only then are line breaks, indentation
and highlight spans substituted, so markup can never come from the document
itself.
"""

import html
from typing import List, Optional

from xml_highlight_diff.shared import RenderConfig
from xml_highlight_diff.shared.config import INDENT_CHAR
from xml_highlight_diff.render.serializer import Segment


class HTMLRenderer:
    """Turns annotated segments into markup ready for an HTML page."""

    def __init__(
        self,
        config: Optional[RenderConfig] = None,
        indent_char: str = INDENT_CHAR
    ) -> None:
        self.config = config or RenderConfig()
        self.indent_char = indent_char

    def render(self, segments: List[Segment]) -> str:
        """Render segments, wrapping highlighted ones in a styled span."""
        parts = []
        for segment in segments:
            text = self.render_text(segment.text)
            if segment.highlighted:
                text = f"{self.config.span_start}{text}{self.config.span_end}"
            parts.append(text)
        return "".join(parts)

    def render_text(self, text: str) -> str:
        """Escape text and substitute line breaks and indentation."""
        return (
            html.escape(text, quote=False)
            .replace('"', "&quot;")
            .replace("'", "&#39;")
            .replace("\n", self.config.line_break)
            .replace(self.indent_char, self.config.indent_html)
        )
