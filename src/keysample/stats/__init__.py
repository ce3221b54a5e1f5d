"""Accumulation and merging of sampled statistics."""

from .sizes import SizeStats, power_of_two_bucket
from .results import Results, ensure_entry, merge_results

__all__ = [
    "SizeStats",
    "power_of_two_bucket",
    "Results",
    "ensure_entry",
    "merge_results",
]
