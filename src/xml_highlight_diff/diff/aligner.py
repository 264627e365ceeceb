"""Positional alignment of two element trees.

Index ``i`` on the left is always compared with index ``i`` on the right,
for attributes and for child elements alike; there is no matching by name or
key and no tolerance for reordering. Whatever one side has beyond the length
of the other is highlighted unconditionally.
"""

from typing import List, Optional, Sequence

from xml_highlight_diff.shared import AlignmentStatistics, get_logger
from xml_highlight_diff.tree.model import XMLAttribute, XMLElement

LEFT = "left"
RIGHT = "right"


class TreeAligner:
    """Flags differing attributes and unmatched elements on two trees.

    The aligner mutates only the ``highlighted`` flags of the trees it is
    given; names, values and structure are left untouched.
    """

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self.statistics = AlignmentStatistics()
        self.logger = get_logger(__name__, correlation_id, "tree_aligner")

    def align_sequences(
        self,
        left: Sequence[XMLElement],
        right: Sequence[XMLElement]
    ) -> None:
        """Align two ordered element sequences, marking the longer tail."""
        shared = min(len(left), len(right))
        for left_element, right_element in zip(left, right):
            self.align(left_element, right_element)

        for element in left[shared:]:
            self.mark_all(element, LEFT)
        for element in right[shared:]:
            self.mark_all(element, RIGHT)

    def align(self, left: XMLElement, right: XMLElement) -> None:
        """Compare two elements position by position and flag differences.

        Attributes at the same index differ when their local names or their
        values differ; both are flagged. Child elements at the same index are
        aligned recursively. Non-element children are never compared.
        """
        self.statistics.element_pairs_compared += 1
        self._align_attributes(left.attributes, right.attributes)
        self.align_sequences(left.child_elements, right.child_elements)

    def mark_all(self, element: XMLElement, side: str) -> None:
        """Flag an element without counterpart and its entire subtree."""
        element.highlighted = True
        if side == LEFT:
            self.statistics.unmatched_elements_left += 1
        else:
            self.statistics.unmatched_elements_right += 1

        for attribute in element.attributes:
            self._highlight(attribute, side)
        for child in element.child_elements:
            self.mark_all(child, side)

    def _align_attributes(
        self,
        left: List[XMLAttribute],
        right: List[XMLAttribute]
    ) -> None:
        shared = min(len(left), len(right))
        for left_attribute, right_attribute in zip(left, right):
            self.statistics.attribute_pairs_compared += 1
            if (
                left_attribute.local_name != right_attribute.local_name
                or left_attribute.value != right_attribute.value
            ):
                self._highlight(left_attribute, LEFT)
                self._highlight(right_attribute, RIGHT)

        for attribute in left[shared:]:
            self._highlight(attribute, LEFT)
        for attribute in right[shared:]:
            self._highlight(attribute, RIGHT)

    def _highlight(self, attribute: XMLAttribute, side: str) -> None:
        if attribute.highlighted:
            return
        attribute.highlight()
        if side == LEFT:
            self.statistics.highlighted_attributes_left += 1
        else:
            self.statistics.highlighted_attributes_right += 1


def align_elements(
    left: Sequence[XMLElement],
    right: Sequence[XMLElement],
    correlation_id: Optional[str] = None
) -> AlignmentStatistics:
    """Align two sequences of top-level elements in place.

    Args:
        left: Top-level elements of the left document
        right: Top-level elements of the right document
        correlation_id: Optional correlation ID for request tracking

    Returns:
        Statistics describing what was compared and highlighted
    """
    aligner = TreeAligner(correlation_id)
    aligner.align_sequences(left, right)
    aligner.logger.debug(
        "Aligned element trees",
        extra={"statistics": aligner.statistics.to_dict()}
    )
    return aligner.statistics
