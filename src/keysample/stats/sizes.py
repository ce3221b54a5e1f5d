# keysample/stats/sizes.py
"""Mergeable running statistics for a stream of sizes."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

__all__ = ["SizeStats", "power_of_two_bucket"]


def power_of_two_bucket(size: int) -> int:
    """
    Return the histogram bucket for ``size``: the smallest power of two >= size.

    Zero gets its own bucket so empty collections stay distinguishable.

    Examples:
        >>> power_of_two_bucket(0), power_of_two_bucket(1), power_of_two_bucket(5)
        (0, 1, 8)
    """
    if size < 0:
        raise ValueError(f"size must be non-negative, got {size}")
    if size == 0:
        return 0
    return 1 << (size - 1).bit_length()


@dataclass
class SizeStats:
    """Count, sum, extremes and a power-of-two histogram of observed sizes."""

    count: int = 0
    total: int = 0
    min: Optional[int] = None
    max: Optional[int] = None
    histogram: Counter = field(default_factory=Counter)

    def observe(self, size: int) -> None:
        bucket = power_of_two_bucket(size)
        self.count += 1
        self.total += size
        self.min = size if self.min is None else min(self.min, size)
        self.max = size if self.max is None else max(self.max, size)
        self.histogram[bucket] += 1

    def merge(self, other: "SizeStats") -> "SizeStats":
        """Fold ``other`` into this instance; ``other`` is left untouched."""
        if other.count == 0:
            return self
        self.count += other.count
        self.total += other.total
        self.min = other.min if self.min is None else min(self.min, other.min)
        self.max = other.max if self.max is None else max(self.max, other.max)
        self.histogram.update(other.histogram)
        return self

    @property
    def mean(self) -> float:
        return self.total / self.count if self.count else 0.0

    def buckets(self) -> List[Tuple[int, int]]:
        """Histogram as ``(bucket_upper_bound, occurrences)`` sorted by bound."""
        return sorted(self.histogram.items())

    def to_dict(self) -> Dict[str, object]:
        return {
            "count": self.count,
            "total": self.total,
            "min": self.min,
            "max": self.max,
            "mean": self.mean,
            "histogram": {str(k): v for k, v in self.buckets()},
        }
