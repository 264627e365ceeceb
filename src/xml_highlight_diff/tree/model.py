"""Document tree used by the aligner and the serializer.

Nodes are plain dataclasses built fresh for every call. Highlighting is an
explicit flag on attributes and elements; attribute values are never rewritten.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Union


@dataclass(eq=False)
class XMLAttribute:
    """Attribute of an element, in document order."""

    name: str
    value: str
    is_namespace_declaration: bool = False
    highlighted: bool = False

    def __post_init__(self) -> None:
        """Validate attribute values."""
        if not self.name:
            raise ValueError("Attribute name cannot be empty")

    @property
    def local_name(self) -> str:
        """Get attribute name without namespace prefix.

        ``xmlns`` is its own local name, ``xmlns:p`` has local name ``p``.
        """
        if ":" in self.name:
            return self.name.split(":", 1)[1]
        return self.name

    def highlight(self) -> None:
        """Flag this attribute as differing."""
        self.highlighted = True


@dataclass(eq=False)
class XMLText:
    """Character data between tags."""

    content: str


@dataclass(eq=False)
class XMLCData:
    """CDATA section, written back as ``<![CDATA[content]]>``."""

    content: str


@dataclass(eq=False)
class XMLComment:
    """Comment node, written back as ``<!--content-->``."""

    content: str


@dataclass(eq=False)
class XMLProcessingInstruction:
    """Processing instruction, written back as ``<?target data?>``."""

    target: str
    data: str = ""


@dataclass(eq=False)
class XMLEntityReference:
    """Unresolved entity reference, written back as ``&name;``."""

    name: str


XMLNode = Union[
    "XMLElement",
    XMLText,
    XMLCData,
    XMLComment,
    XMLProcessingInstruction,
    XMLEntityReference,
]


@dataclass(eq=False)
class XMLElement:
    """Represents a single XML element in the document tree."""

    tag: str
    attributes: List[XMLAttribute] = field(default_factory=list)
    children: List[XMLNode] = field(default_factory=list)
    parent: Optional["XMLElement"] = None
    highlighted: bool = False

    def __post_init__(self) -> None:
        """Validate element values and establish parent-child relationships."""
        if not self.tag:
            raise ValueError("Element tag cannot be empty")

        for child in self.children:
            if isinstance(child, XMLElement):
                child.parent = self

    @property
    def local_name(self) -> str:
        """Get local tag name without namespace prefix."""
        if ":" in self.tag:
            return self.tag.split(":", 1)[1]
        return self.tag

    @property
    def child_elements(self) -> List["XMLElement"]:
        """Children that are elements, in order; other nodes are skipped."""
        return [child for child in self.children if isinstance(child, XMLElement)]

    @property
    def has_text(self) -> bool:
        """Check whether any direct child is non-empty character data."""
        return any(
            isinstance(child, (XMLText, XMLCData, XMLEntityReference))
            for child in self.children
        )

    def add_child(self, child: XMLNode) -> None:
        """Append a child node and establish parent relationship."""
        if isinstance(child, XMLElement):
            child.parent = self
        self.children.append(child)

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get attribute value with optional default."""
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute.value
        return default

    def find(self, tag: str) -> Optional["XMLElement"]:
        """Find first descendant element with matching tag name."""
        for element in self.iter_descendants():
            if element.tag == tag:
                return element
        return None

    def iter_descendants(self) -> Iterator["XMLElement"]:
        """Iterate over descendant elements in document order."""
        for child in self.child_elements:
            yield child
            yield from child.iter_descendants()

    def highlighted_attributes(self) -> List[XMLAttribute]:
        """Get the attributes of this element flagged as differing."""
        return [attribute for attribute in self.attributes if attribute.highlighted]

    def get_depth(self) -> int:
        """Get depth of this element in the tree (root = 0)."""
        if self.parent is None:
            return 0
        return self.parent.get_depth() + 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert element to dictionary representation."""
        result: Dict[str, Any] = {
            "tag": self.tag,
            "attributes": [
                {"name": a.name, "value": a.value, "highlighted": a.highlighted}
                for a in self.attributes
            ],
            "highlighted": self.highlighted,
        }
        if self.child_elements:
            result["children"] = [child.to_dict() for child in self.child_elements]
        return result


@dataclass
class XMLDeclaration:
    """The ``<?xml ...?>`` declaration as written in the source."""

    version: str = "1.0"
    encoding: Optional[str] = None
    standalone: Optional[str] = None


@dataclass
class XMLDocument:
    """Top-level container; may hold several root elements (a fragment)."""

    children: List[XMLNode] = field(default_factory=list)
    declaration: Optional[XMLDeclaration] = None
    doctype: Optional[str] = None

    @property
    def elements(self) -> List[XMLElement]:
        """Top-level elements in document order."""
        return [child for child in self.children if isinstance(child, XMLElement)]

    @property
    def root(self) -> Optional[XMLElement]:
        """First top-level element, if any."""
        elements = self.elements
        return elements[0] if elements else None

    def iter_elements(self) -> Iterator[XMLElement]:
        """Iterate over all elements in document order."""
        for element in self.elements:
            yield element
            yield from element.iter_descendants()

    @classmethod
    def from_elements(cls, elements: List[XMLElement]) -> "XMLDocument":
        """Build a bare document holding only the given top-level elements."""
        return cls(children=list(elements))
