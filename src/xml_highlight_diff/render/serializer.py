"""Indented XML writer producing highlight-annotated segments.

The writer never inserts markup itself. It emits a flat sequence of
:class:`Segment` values, each either plain or highlighted, which the HTML
renderer escapes and decorates. Layout follows a conventional indenting XML
writer: one indentation character per depth, elements with only element
children broken over lines, and text or mixed content kept inline.
"""

from dataclasses import dataclass
from typing import List, Optional

from xml_highlight_diff.shared import SerializationConfig
from xml_highlight_diff.tree.model import (
    XMLCData,
    XMLComment,
    XMLDocument,
    XMLElement,
    XMLEntityReference,
    XMLNode,
    XMLProcessingInstruction,
    XMLText,
)


@dataclass(frozen=True)
class Segment:
    """A run of serialized text, either plain or highlighted."""

    text: str
    highlighted: bool = False


def escape_text(text: str) -> str:
    """Escape character data for XML output."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def escape_attribute(value: str) -> str:
    """Escape an attribute value for a double-quoted XML attribute.

    Line breaks and tabs are written as character references, otherwise a
    parser would normalize them to spaces.
    """
    return (
        escape_text(value)
        .replace('"', "&quot;")
        .replace("\n", "&#xA;")
        .replace("\r", "&#xD;")
        .replace("\t", "&#x9;")
    )


class _SegmentBuffer:
    """Accumulates segments, merging neighbours of the same kind."""

    def __init__(self) -> None:
        self.segments: List[Segment] = []

    def write(self, text: str, highlighted: bool = False) -> None:
        # Empty highlighted runs are kept so an empty differing value still shows
        if not text and not highlighted:
            return
        if self.segments and self.segments[-1].highlighted == highlighted:
            previous = self.segments.pop()
            text = previous.text + text
        self.segments.append(Segment(text, highlighted))

    def __bool__(self) -> bool:
        return bool(self.segments)


class XMLSerializer:
    """Serializes document trees into indented, annotated segments."""

    def __init__(
        self,
        config: Optional[SerializationConfig] = None,
        highlight_unmatched_elements: bool = False
    ) -> None:
        """Initialize serializer.

        Args:
            config: Serialization configuration
            highlight_unmatched_elements: Also highlight the tag names of
                elements that have no counterpart on the other side
        """
        self.config = config or SerializationConfig()
        self.highlight_unmatched_elements = highlight_unmatched_elements

    def serialize(self, document: XMLDocument) -> List[Segment]:
        """Serialize a whole document, one top-level node per line."""
        buffer = _SegmentBuffer()

        declaration = document.declaration
        if declaration is not None and self.config.include_declaration:
            text = f'<?xml version="{declaration.version}"'
            if declaration.encoding:
                text += f' encoding="{declaration.encoding}"'
            if declaration.standalone:
                text += f' standalone="{declaration.standalone}"'
            self._start_line(buffer, 0)
            buffer.write(text + "?>")

        if document.doctype:
            self._start_line(buffer, 0)
            buffer.write(document.doctype)

        for node in document.children:
            self._start_line(buffer, 0)
            self._write_node(buffer, node, 0, inline=False)

        return buffer.segments

    def _start_line(self, buffer: _SegmentBuffer, depth: int) -> None:
        if buffer:
            buffer.write("\n")
        buffer.write(self.config.indent_char * depth)

    def _write_node(
        self,
        buffer: _SegmentBuffer,
        node: XMLNode,
        depth: int,
        inline: bool
    ) -> None:
        if isinstance(node, XMLElement):
            self._write_element(buffer, node, depth, inline)
        elif isinstance(node, XMLText):
            buffer.write(escape_text(node.content))
        elif isinstance(node, XMLCData):
            buffer.write(f"<![CDATA[{node.content}]]>")
        elif isinstance(node, XMLEntityReference):
            buffer.write(f"&{node.name};")
        elif isinstance(node, XMLComment):
            buffer.write(f"<!--{node.content}-->")
        elif isinstance(node, XMLProcessingInstruction):
            if node.data:
                buffer.write(f"<?{node.target} {node.data}?>")
            else:
                buffer.write(f"<?{node.target}?>")
        else:
            raise TypeError(f"Cannot serialize node of type {type(node).__name__}")

    def _write_element(
        self,
        buffer: _SegmentBuffer,
        element: XMLElement,
        depth: int,
        inline: bool
    ) -> None:
        mark_tag = self.highlight_unmatched_elements and element.highlighted

        buffer.write("<")
        buffer.write(element.tag, mark_tag)
        for attribute in element.attributes:
            buffer.write(f' {attribute.name}="')
            buffer.write(escape_attribute(attribute.value), attribute.highlighted)
            buffer.write('"')

        if not element.children:
            buffer.write(self.config.empty_element_suffix)
            return
        buffer.write(">")

        if inline or element.has_text:
            for child in element.children:
                self._write_node(buffer, child, depth + 1, inline=True)
        else:
            for child in element.children:
                self._start_line(buffer, depth + 1)
                self._write_node(buffer, child, depth + 1, inline=False)
            self._start_line(buffer, depth)

        buffer.write("</")
        buffer.write(element.tag, mark_tag)
        buffer.write(">")


def to_plain_text(segments: List[Segment]) -> str:
    """Join segments back into plain serialized XML, dropping annotations."""
    return "".join(segment.text for segment in segments)
