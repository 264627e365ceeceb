"""Command-line interface module for XML Highlight Diff.

This module provides the ``format`` and ``compare`` commands.
"""

from .main import main

__all__ = ["main"]
