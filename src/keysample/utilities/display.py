# keysample/utilities/display.py
"""Display formatting helpers for reports."""

from __future__ import annotations

from typing import Sequence, Tuple

__all__ = ["format_bytes", "format_count", "abbrev", "format_histogram"]


def format_bytes(num_bytes: float) -> str:
    """Convert bytes to human-readable format.

    Examples:
        >>> format_bytes(1024)
        '1.00 KB'
        >>> format_bytes(1536000)
        '1.46 MB'
    """
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if abs(num_bytes) < 1024.0:
            return f"{num_bytes:.2f} {unit}"
        num_bytes /= 1024.0
    return f"{num_bytes:.2f} PB"


def format_count(n: int) -> str:
    return f"{n:,}"


def abbrev(s: str, width: int = 96) -> str:
    """Return s truncated with an ellipsis if it exceeds width."""
    return s if len(s) <= width else (s[: max(0, width - 1)] + "…")


def format_histogram(
    buckets: Sequence[Tuple[int, int]],
    *,
    width: int = 40,
    as_bytes: bool = False,
) -> list[str]:
    """
    Render ``(upper_bound, occurrences)`` pairs as text bars.

    Bars are scaled to the largest bucket; every non-empty bucket gets at
    least one mark.
    """
    if not buckets:
        return []
    peak = max(n for _, n in buckets)
    lines = []
    for bound, n in buckets:
        label = format_bytes(bound) if as_bytes else format_count(bound)
        bar = "#" * max(1, round(width * n / peak))
        lines.append(f"  <= {label:>12}  {bar} {format_count(n)}")
    return lines
