# keysample/sampling/aggregate.py
"""Aggregation policies: which buckets a sampled key is attributed to."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, List, Sequence

from keysample.types import ValueType

__all__ = [
    "Aggregator",
    "AnyKey",
    "FunctionAggregator",
    "KeyPrefix",
    "ANY_KEY_BUCKET",
    "NO_PREFIX_BUCKET",
    "distinct_groups",
]

ANY_KEY_BUCKET = "any"
NO_PREFIX_BUCKET = "(no-prefix)"


class Aggregator(ABC):
    """
    Maps a sampled key to zero or more bucket names.

    Implementations must be free of side effects: one instance is shared by
    every sampling run of a session, possibly across threads.
    """

    @abstractmethod
    def groups(self, key: str, value_type: ValueType) -> Sequence[str]:
        """Return the bucket names ``key`` should be recorded under."""


class AnyKey(Aggregator):
    """Collapse every observation into one global bucket."""

    def __init__(self, bucket: str = ANY_KEY_BUCKET):
        self.bucket = bucket

    def groups(self, key: str, value_type: ValueType) -> Sequence[str]:
        return [self.bucket]

    def __repr__(self) -> str:
        return f"AnyKey({self.bucket!r})"


class FunctionAggregator(Aggregator):
    """Adapt a plain ``fn(key, value_type) -> [bucket, ...]`` callable."""

    def __init__(self, fn: Callable[[str, ValueType], Sequence[str]]):
        self.fn = fn

    def groups(self, key: str, value_type: ValueType) -> Sequence[str]:
        return self.fn(key, value_type)

    def __repr__(self) -> str:
        name = getattr(self.fn, "__name__", repr(self.fn))
        return f"FunctionAggregator({name})"


class KeyPrefix(Aggregator):
    """
    Group keys by their leading segments, e.g. ``user:42:profile`` -> ``user``.

    Args:
        delimiter: Segment separator
        depth: Number of leading segments that form the bucket name
    """

    def __init__(self, delimiter: str = ":", depth: int = 1):
        if not delimiter:
            raise ValueError("delimiter must be a non-empty string")
        if depth < 1:
            raise ValueError(f"depth must be >= 1, got {depth}")
        self.delimiter = delimiter
        self.depth = depth

    def groups(self, key: str, value_type: ValueType) -> Sequence[str]:
        parts = key.split(self.delimiter)
        if len(parts) == 1 or not parts[0]:
            return [NO_PREFIX_BUCKET]
        # The final segment is the key's own identifier, never part of the prefix.
        prefix = parts[: min(self.depth, len(parts) - 1)]
        return [self.delimiter.join(prefix)]

    def __repr__(self) -> str:
        return f"KeyPrefix({self.delimiter!r}, depth={self.depth})"


def distinct_groups(groups: Sequence[str]) -> List[str]:
    """Drop repeated bucket names, keeping first-seen order."""
    return list(dict.fromkeys(groups))
