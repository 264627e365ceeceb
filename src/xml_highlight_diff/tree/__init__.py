"""Document tree model and lxml-based tree builder."""

from .builder import XMLParseError, XMLTreeBuilder, parse_document
from .model import (
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

__all__ = [
    "XMLParseError",
    "XMLTreeBuilder",
    "parse_document",
    "XMLAttribute",
    "XMLCData",
    "XMLComment",
    "XMLDeclaration",
    "XMLDocument",
    "XMLElement",
    "XMLEntityReference",
    "XMLNode",
    "XMLProcessingInstruction",
    "XMLText",
]
