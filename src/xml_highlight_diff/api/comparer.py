"""Formatting and comparison API.

Two levels of entry point are provided:

- module-level functions :func:`format_single` and :func:`format_pair`
  for one-off calls with the default configuration;
- the :class:`XMLComparer` class for callers that hold a custom
  :class:`~xml_highlight_diff.shared.ComparerConfig`.

Every call parses its input fresh and keeps no state between calls.
"""

import time
from typing import List, Optional

from xml_highlight_diff.diff import LEFT, RIGHT, align_elements
from xml_highlight_diff.render import HTMLRenderer, XMLSerializer
from xml_highlight_diff.shared import (
    ComparerConfig,
    ComparisonResult,
    DiagnosticEntry,
    DiagnosticSeverity,
    get_logger,
)
from xml_highlight_diff.tree import XMLDocument, XMLParseError, XMLTreeBuilder

MS_PER_SECOND = 1000


def _is_blank(text: Optional[str]) -> bool:
    return text is None or not text.strip()


class XMLComparer:
    """Formats XML documents and compares pairs of them.

    Examples:
        >>> comparer = XMLComparer(ComparerConfig().override(
        ...     render__highlight_unmatched_elements=True))
        >>> result = comparer.compare('<a x="1"/>', '<a x="2"/>')
        >>> result.statistics.highlighted_attributes_left
        1
    """

    def __init__(self, config: Optional[ComparerConfig] = None) -> None:
        """Initialize comparer.

        Args:
            config: Comparer configuration, defaults to ``ComparerConfig()``
        """
        self.config = config or ComparerConfig()
        self.correlation_id = self.config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "xml_comparer")
        self.builder = XMLTreeBuilder(self.config.parser, self.correlation_id)
        self.serializer = XMLSerializer(
            self.config.serialization,
            highlight_unmatched_elements=self.config.render.highlight_unmatched_elements,
        )
        self.renderer = HTMLRenderer(
            self.config.render, indent_char=self.config.serialization.indent_char
        )

    def format_xml(self, xml: Optional[str]) -> str:
        """Format one document as indented, HTML-escaped markup.

        Empty or missing input yields the placeholder. Input that is not
        well-formed XML is returned unchanged; this method never raises for
        malformed input.
        """
        if not xml:
            return self.config.render.placeholder

        try:
            document = self.builder.build(xml)
        except XMLParseError as e:
            self.logger.debug(
                "Input is not well-formed XML, returning it unchanged",
                extra={"parse_error": str(e)}
            )
            return xml

        return self.render_document(document)

    def render_document(self, document: XMLDocument) -> str:
        """Serialize and render an already parsed document."""
        return self.renderer.render(self.serializer.serialize(document))

    def compare(self, xml_left: Optional[str], xml_right: Optional[str]) -> ComparisonResult:
        """Compare two documents and format both with differences highlighted.

        If either side is missing, empty or whitespace-only, no comparison is
        attempted and each side is formatted on its own.

        Raises:
            XMLParseError: If either side is not well-formed XML and
                ``fallback_on_parse_error`` is disabled; ``side`` tells
                which one
        """
        start_time = time.time()

        if _is_blank(xml_left) or _is_blank(xml_right):
            self.logger.debug("One side is empty, formatting without comparison")
            return ComparisonResult(
                left=self.format_xml(xml_left),
                right=self.format_xml(xml_right),
                correlation_id=self.correlation_id,
            )

        diagnostics: List[DiagnosticEntry] = []
        left_document = self._parse_side(xml_left, LEFT, diagnostics)
        right_document = self._parse_side(xml_right, RIGHT, diagnostics)

        if left_document is None or right_document is None:
            return ComparisonResult(
                left=self._render_or_passthrough(left_document, xml_left),
                right=self._render_or_passthrough(right_document, xml_right),
                diagnostics=tuple(diagnostics),
                correlation_id=self.correlation_id,
            )

        left_elements = left_document.elements
        right_elements = right_document.elements
        statistics = align_elements(left_elements, right_elements, self.correlation_id)

        result = ComparisonResult(
            left=self.render_document(XMLDocument.from_elements(left_elements)),
            right=self.render_document(XMLDocument.from_elements(right_elements)),
            statistics=statistics,
            diagnostics=tuple(diagnostics),
            correlation_id=self.correlation_id,
        )

        self.logger.info(
            "Comparison completed",
            extra={
                "processing_time_ms": (time.time() - start_time) * MS_PER_SECOND,
                "has_differences": statistics.has_differences,
            }
        )
        return result

    def _parse_side(
        self,
        xml: str,
        side: str,
        diagnostics: List[DiagnosticEntry]
    ) -> Optional[XMLDocument]:
        try:
            return self.builder.build(xml)
        except XMLParseError as e:
            e.side = side
            if not self.config.fallback_on_parse_error:
                self.logger.warning(
                    "Comparison aborted, input is not well-formed XML",
                    extra={"side": side, "parse_error": e.message}
                )
                raise

            diagnostics.append(DiagnosticEntry(
                severity=DiagnosticSeverity.ERROR,
                message=f"Input is not well-formed XML: {e.message}",
                component="xml_comparer",
                details={"side": side, "line": e.line, "column": e.column},
                correlation_id=self.correlation_id,
            ))
            return None

    def _render_or_passthrough(self, document: Optional[XMLDocument], xml: str) -> str:
        if document is None:
            return xml
        return self.render_document(document)


def format_single(xml: Optional[str], config: Optional[ComparerConfig] = None) -> str:
    """Format one XML document as indented, highlight-ready HTML markup.

    Args:
        xml: XML text; may be None, empty or malformed
        config: Optional comparer configuration

    Returns:
        The placeholder ``"-"`` for missing input, the input itself if it is
        not well-formed XML, otherwise the formatted markup

    Examples:
        >>> format_single(None)
        '-'
        >>> format_single('<a><b></a>')
        '<a><b></a>'
        >>> format_single('<a><b/></a>')
        '&lt;a&gt;<br/>&nbsp;&nbsp;&nbsp;&nbsp;&lt;b /&gt;<br/>&lt;/a&gt;'
    """
    return XMLComparer(config).format_xml(xml)


def format_pair(
    xml_left: Optional[str],
    xml_right: Optional[str],
    config: Optional[ComparerConfig] = None
) -> ComparisonResult:
    """Compare two XML documents and format both with differences highlighted.

    Args:
        xml_left: Left-hand XML text
        xml_right: Right-hand XML text
        config: Optional comparer configuration

    Returns:
        ComparisonResult holding the two formatted documents

    Raises:
        XMLParseError: If both sides are non-empty and either is malformed
            (unless ``config.fallback_on_parse_error`` is set)

    Examples:
        >>> left, right = format_pair("", "<a/>")
        >>> left
        '-'
    """
    return XMLComparer(config).compare(xml_left, xml_right)


__all__ = [
    "XMLComparer",
    "format_pair",
    "format_single",
]
