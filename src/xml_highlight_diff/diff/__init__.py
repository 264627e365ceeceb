"""Positional tree alignment and highlighting."""

from .aligner import LEFT, RIGHT, TreeAligner, align_elements

__all__ = ["LEFT", "RIGHT", "TreeAligner", "align_elements"]
