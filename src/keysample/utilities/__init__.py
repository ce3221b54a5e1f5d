"""Common utilities for keysample."""

from .display import abbrev, format_bytes, format_count, format_histogram

__all__ = [
    "abbrev",
    "format_bytes",
    "format_count",
    "format_histogram",
]
