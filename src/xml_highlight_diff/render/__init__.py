"""Serialization of document trees and HTML rendering of the result."""

from .markup import HTMLRenderer
from .serializer import (
    Segment,
    XMLSerializer,
    escape_attribute,
    escape_text,
    to_plain_text,
)

__all__ = [
    "HTMLRenderer",
    "Segment",
    "XMLSerializer",
    "escape_attribute",
    "escape_text",
    "to_plain_text",
]
