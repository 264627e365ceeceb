"""Tree building from raw XML text.

This module parses text with lxml and converts the result into the document
model of :mod:`xml_highlight_diff.tree.model`. Well-formedness is required:
malformed input raises :class:`XMLParseError` and is never repaired.

lxml merges CDATA sections into the surrounding text, so they are swapped for
numbered placeholder processing instructions before parsing and restored as
:class:`XMLCData` nodes afterwards.

The doctype is kept as its ``<!DOCTYPE ...>`` line only; an internal subset
is dropped. Unresolved entity references are still written back, so output
of a document that declares entities in its internal subset refers to
entities it no longer declares.
"""

import re
from typing import Dict, List, Optional, Tuple

from lxml import etree

from xml_highlight_diff.shared import ParserConfig, get_logger
from xml_highlight_diff.tree.model import (
    XMLAttribute,
    XMLCData,
    XMLComment,
    XMLDeclaration,
    XMLDocument,
    XMLElement,
    XMLEntityReference,
    XMLNode,
    XMLProcessingInstruction,
    XMLText,
)

XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"

# Synthetic container used to parse documents with several top-level elements
_FRAGMENT_ROOT = "xml-highlight-diff-fragment"

# Target of the processing instructions standing in for CDATA sections
_CDATA_TARGET = "highlight-diff-cdata"

_DECLARATION_RE = re.compile(r"\A\ufeff?<\?xml\s+(?P<body>.*?)\?>", re.DOTALL)
_PSEUDO_ATTRIBUTE_RE = re.compile(r"([A-Za-z]+)\s*=\s*([\"'])(.*?)\2")
# Comments and PIs are matched too so CDATA markers inside them stay untouched
_MARKUP_SECTION_RE = re.compile(
    r"<!--.*?-->|<\?.*?\?>|<!\[CDATA\[(?P<cdata>.*?)\]\]>", re.DOTALL
)


class XMLParseError(ValueError):
    """Raised when text is not well-formed XML."""

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        side: Optional[str] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column
        self.side = side

    def __str__(self) -> str:
        text = self.message
        if self.line is not None:
            text = f"{text} (line {self.line}, column {self.column})"
        if self.side:
            text = f"{self.side}: {text}"
        return text


class XMLTreeBuilder:
    """Builds :class:`XMLDocument` trees from XML text."""

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize tree builder.

        Args:
            config: Parser configuration, defaults to ``ParserConfig()``
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "xml_tree_builder")

    def build(self, text: str) -> XMLDocument:
        """Parse ``text`` into a document tree.

        Args:
            text: XML document or, when fragments are allowed, a sequence of
                top-level elements

        Returns:
            XMLDocument holding the parsed nodes

        Raises:
            XMLParseError: If the text is not well-formed XML
        """
        declaration, body = self._split_declaration(text)
        body, sections = self._protect_cdata(body)

        try:
            root = etree.fromstring(body, self._make_parser())
        except (etree.XMLSyntaxError, ValueError) as document_error:
            if not self.config.allow_fragments:
                raise self._to_parse_error(document_error) from document_error
            document = self._build_fragment(body, sections)
            if document is None:
                raise self._to_parse_error(document_error) from document_error
            document.declaration = declaration
            self.logger.debug(
                "Parsed input as fragment",
                extra={"element_count": len(document.elements)}
            )
            return document

        document = XMLDocument(declaration=declaration)
        doctype = root.getroottree().docinfo.doctype
        if doctype:
            document.doctype = doctype

        preceding = list(root.itersiblings(preceding=True))
        for node in reversed(preceding):
            document.children.append(self._convert_node(node, {}, sections))
        document.children.append(self._convert_element(root, {}, sections))
        for node in root.itersiblings():
            document.children.append(self._convert_node(node, {}, sections))

        if any(isinstance(child, XMLCData) for child in document.children):
            raise XMLParseError("CDATA section outside of the root element")

        self.logger.debug(
            "Parsed document",
            extra={"root_tag": document.root.tag, "cdata_sections": len(sections)}
        )
        return document

    def _make_parser(self) -> etree.XMLParser:
        return etree.XMLParser(
            resolve_entities=self.config.resolve_entities,
            no_network=self.config.no_network,
            remove_blank_text=False,
            remove_comments=False,
            remove_pis=False,
        )

    def _build_fragment(self, body: str, sections: List[str]) -> Optional[XMLDocument]:
        """Parse ``body`` as the content of a synthetic root element.

        Whitespace between top-level nodes is ignored. Returns None if the
        content is not well-formed, holds no element, or holds character data
        outside of elements.
        """
        wrapped = f"<{_FRAGMENT_ROOT}>{body}</{_FRAGMENT_ROOT}>"
        try:
            container = etree.fromstring(wrapped, self._make_parser())
        except (etree.XMLSyntaxError, ValueError):
            return None

        holder = XMLElement(tag=_FRAGMENT_ROOT)
        self._convert_content(container, holder, {}, sections)
        holder.children = [
            child for child in holder.children
            if not (isinstance(child, XMLText) and not child.content.strip())
        ]
        if not holder.child_elements or holder.has_text:
            return None

        document = XMLDocument()
        for child in holder.children:
            if isinstance(child, XMLElement):
                child.parent = None
            document.children.append(child)
        return document

    def _convert_node(
        self,
        node: etree._Element,
        parent_nsmap: Dict,
        sections: List[str]
    ) -> XMLNode:
        if node.tag is etree.Comment:
            return XMLComment(node.text or "")
        if node.tag is etree.PI:
            if sections and node.target == _CDATA_TARGET:
                return XMLCData(sections[int(node.text.split()[0])])
            return XMLProcessingInstruction(node.target, node.text or "")
        if node.tag is etree.Entity:
            return XMLEntityReference(node.name)
        return self._convert_element(node, parent_nsmap, sections)

    def _convert_element(
        self,
        node: etree._Element,
        parent_nsmap: Dict,
        sections: List[str]
    ) -> XMLElement:
        nsmap = dict(node.nsmap)
        element = XMLElement(
            tag=self._qualify(etree.QName(node).namespace, etree.QName(node).localname,
                              node.prefix),
            attributes=self._convert_attributes(node, nsmap, parent_nsmap),
        )
        self._convert_content(node, element, nsmap, sections)
        return element

    def _convert_content(
        self,
        node: etree._Element,
        element: XMLElement,
        nsmap: Dict,
        sections: List[str]
    ) -> None:
        self._append_text(element, node.text)
        for child in node:
            element.add_child(self._convert_node(child, nsmap, sections))
            self._append_text(element, child.tail)

    def _convert_attributes(
        self,
        node: etree._Element,
        nsmap: Dict,
        parent_nsmap: Dict
    ) -> List[XMLAttribute]:
        attributes = []
        for prefix, uri in nsmap.items():
            if prefix in parent_nsmap and parent_nsmap[prefix] == uri:
                continue
            name = f"xmlns:{prefix}" if prefix else "xmlns"
            attributes.append(
                XMLAttribute(name=name, value=uri, is_namespace_declaration=True)
            )

        for key, value in node.attrib.items():
            qname = etree.QName(key)
            prefix = self._prefix_for(qname.namespace, nsmap)
            attributes.append(
                XMLAttribute(
                    name=self._qualify(qname.namespace, qname.localname, prefix),
                    value=value,
                )
            )
        return attributes

    def _append_text(self, element: XMLElement, text: Optional[str]) -> None:
        if not text:
            return
        if self.config.strip_whitespace_text and not text.strip():
            return
        element.add_child(XMLText(text))

    @staticmethod
    def _prefix_for(namespace: Optional[str], nsmap: Dict) -> Optional[str]:
        if namespace is None:
            return None
        if namespace == XML_NAMESPACE:
            return "xml"
        for prefix, uri in nsmap.items():
            if uri == namespace and prefix:
                return prefix
        return None

    @staticmethod
    def _qualify(namespace: Optional[str], localname: str, prefix: Optional[str]) -> str:
        if namespace and prefix:
            return f"{prefix}:{localname}"
        return localname

    @staticmethod
    def _split_declaration(text: str) -> Tuple[Optional[XMLDeclaration], str]:
        match = _DECLARATION_RE.match(text)
        if not match:
            return None, text.lstrip("\ufeff")

        pseudo = {
            name: value
            for name, _quote, value in _PSEUDO_ATTRIBUTE_RE.findall(match.group("body"))
        }
        declaration = XMLDeclaration(
            version=pseudo.get("version", "1.0"),
            encoding=pseudo.get("encoding"),
            standalone=pseudo.get("standalone"),
        )
        return declaration, text[match.end():]

    @staticmethod
    def _protect_cdata(body: str) -> Tuple[str, List[str]]:
        """Replace CDATA sections by numbered placeholder PIs.

        Placeholders keep the line breaks of the section they replace, so
        parse error positions stay on the right line.
        """
        if _CDATA_TARGET in body:
            return body, []

        sections: List[str] = []

        def replace(match: "re.Match[str]") -> str:
            content = match.group("cdata")
            if content is None:
                return match.group(0)
            sections.append(content)
            line_breaks = "\n" * content.count("\n")
            return f"<?{_CDATA_TARGET} {len(sections) - 1}{line_breaks}?>"

        return _MARKUP_SECTION_RE.sub(replace, body), sections

    @staticmethod
    def _to_parse_error(error: Exception) -> XMLParseError:
        if isinstance(error, etree.XMLSyntaxError):
            line, column = error.position
            return XMLParseError(error.msg or str(error), line=line, column=column)
        return XMLParseError(str(error))


def parse_document(
    text: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> XMLDocument:
    """Parse XML text into a document tree.

    Args:
        text: XML content as string
        config: Optional parser configuration
        correlation_id: Optional correlation ID for request tracking

    Returns:
        XMLDocument containing the parsed nodes

    Raises:
        XMLParseError: If the text is not well-formed XML

    Examples:
        >>> document = parse_document('<root a="1"><item/></root>')
        >>> document.root.get_attribute('a')
        '1'
        >>> len(parse_document('<a/><b/>').elements)
        2
    """
    return XMLTreeBuilder(config, correlation_id).build(text)
