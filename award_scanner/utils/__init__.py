"""Utility functions for time handling."""

from .timestamps import ensure_utc, format_for_storage, parse_from_storage, utc_now

__all__ = [
    "utc_now",
    "ensure_utc",
    "format_for_storage",
    "parse_from_storage",
]
