"""Public formatting and comparison API."""

from .comparer import XMLComparer, format_pair, format_single

__all__ = ["XMLComparer", "format_pair", "format_single"]
