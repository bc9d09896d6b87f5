"""Utility functions for text normalization and timestamp handling."""

from .text import collapse_whitespace, normalize_for_key, truncate_text
from .timestamps import ensure_utc, parse_iso_datetime, to_iso_string, utc_now

__all__ = [
    # Text
    "collapse_whitespace",
    "normalize_for_key",
    "truncate_text",
    # Timestamps
    "utc_now",
    "ensure_utc",
    "parse_iso_datetime",
    "to_iso_string",
]
