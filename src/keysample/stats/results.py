# keysample/stats/results.py
"""Per-bucket accumulator of sampled statistics and the merge helpers."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Dict, List, MutableMapping, Optional, Tuple, Union

from keysample.stats.sizes import SizeStats
from keysample.types import ValueType

__all__ = ["Results", "ensure_entry", "merge_results", "MEMBER_DISPLAY_LIMIT"]

Payload = Union[bytes, bytearray, str]

# Members are remembered by a bounded prefix so huge values cannot pin memory.
MEMBER_DISPLAY_LIMIT = 100


def _size(value: Payload) -> int:
    """Byte length of a payload; text is measured as UTF-8."""
    if isinstance(value, str):
        return len(value.encode("utf-8"))
    return len(value)


def _display(value: Payload) -> str:
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode("utf-8", "backslashreplace")
    if len(value) > MEMBER_DISPLAY_LIMIT:
        return value[: MEMBER_DISPLAY_LIMIT - 1] + "…"
    return value


@dataclass
class Results:
    """
    Summary statistics for one aggregation bucket.

    Every field is a counter or a ``SizeStats``, so two instances combine
    with ``merge`` in any order and grouping to the same final state.

    ``name`` is a label assigned by whoever owns the bucket map after a run.
    It takes no part in equality and ``merge`` leaves it alone.
    """

    name: str = field(default="", compare=False)
    key_count: int = 0
    type_counts: Counter = field(default_factory=Counter)

    string_sizes: SizeStats = field(default_factory=SizeStats)

    list_lengths: SizeStats = field(default_factory=SizeStats)
    list_element_sizes: SizeStats = field(default_factory=SizeStats)

    set_cardinalities: SizeStats = field(default_factory=SizeStats)
    set_member_sizes: SizeStats = field(default_factory=SizeStats)

    sorted_set_cardinalities: SizeStats = field(default_factory=SizeStats)
    sorted_set_member_sizes: SizeStats = field(default_factory=SizeStats)

    hash_lengths: SizeStats = field(default_factory=SizeStats)
    hash_field_sizes: SizeStats = field(default_factory=SizeStats)
    hash_value_sizes: SizeStats = field(default_factory=SizeStats)

    sampled_keys: Dict[ValueType, Counter] = field(default_factory=dict)
    """How often each key was drawn, per value type"""

    sampled_members: Dict[ValueType, Counter] = field(default_factory=dict)
    """How often each element/member/field was seen, per collection type"""

    # --- observation ------------------------------------------------------

    def _count_key(self, key: str, vt: ValueType) -> None:
        self.key_count += 1
        self.type_counts[vt] += 1
        self.sampled_keys.setdefault(vt, Counter())[key] += 1

    def _count_member(self, vt: ValueType, member: Payload) -> None:
        self.sampled_members.setdefault(vt, Counter())[_display(member)] += 1

    def observe_string(self, key: str, value: Payload) -> None:
        self._count_key(key, ValueType.STRING)
        self.string_sizes.observe(_size(value))

    def observe_list(self, key: str, length: int, first_element: Optional[Payload]) -> None:
        self._count_key(key, ValueType.LIST)
        self.list_lengths.observe(length)
        if first_element is not None:
            self.list_element_sizes.observe(_size(first_element))
            self._count_member(ValueType.LIST, first_element)

    def observe_set(self, key: str, cardinality: int, member: Optional[Payload]) -> None:
        self._count_key(key, ValueType.SET)
        self.set_cardinalities.observe(cardinality)
        if member is not None:
            self.set_member_sizes.observe(_size(member))
            self._count_member(ValueType.SET, member)

    def observe_sorted_set(
        self, key: str, cardinality: int, first_member: Optional[Payload]
    ) -> None:
        self._count_key(key, ValueType.SORTED_SET)
        self.sorted_set_cardinalities.observe(cardinality)
        if first_member is not None:
            self.sorted_set_member_sizes.observe(_size(first_member))
            self._count_member(ValueType.SORTED_SET, first_member)

    def observe_hash(
        self,
        key: str,
        field_count: int,
        sampled_field: Optional[Payload],
        sampled_value: Optional[Payload],
    ) -> None:
        self._count_key(key, ValueType.HASH)
        self.hash_lengths.observe(field_count)
        if sampled_field is not None:
            self.hash_field_sizes.observe(_size(sampled_field))
            self._count_member(ValueType.HASH, sampled_field)
        if sampled_value is not None:
            self.hash_value_sizes.observe(_size(sampled_value))

    # --- combination ------------------------------------------------------

    def _distributions(self) -> List[Tuple[str, SizeStats]]:
        return [
            ("string_sizes", self.string_sizes),
            ("list_lengths", self.list_lengths),
            ("list_element_sizes", self.list_element_sizes),
            ("set_cardinalities", self.set_cardinalities),
            ("set_member_sizes", self.set_member_sizes),
            ("sorted_set_cardinalities", self.sorted_set_cardinalities),
            ("sorted_set_member_sizes", self.sorted_set_member_sizes),
            ("hash_lengths", self.hash_lengths),
            ("hash_field_sizes", self.hash_field_sizes),
            ("hash_value_sizes", self.hash_value_sizes),
        ]

    def merge(self, other: "Results") -> "Results":
        """
        Fold ``other``'s statistics into this instance and return it.

        Counted values are copied; no reference to ``other`` or its
        containers is retained, and ``other`` is not modified.
        """
        if other is self:
            raise ValueError("Cannot merge a Results instance into itself")
        self.key_count += other.key_count
        self.type_counts.update(other.type_counts)
        for attr, dist in other._distributions():
            getattr(self, attr).merge(dist)
        for vt, keys in other.sampled_keys.items():
            self.sampled_keys.setdefault(vt, Counter()).update(keys)
        for vt, members in other.sampled_members.items():
            self.sampled_members.setdefault(vt, Counter()).update(members)
        return self

    # --- views ------------------------------------------------------------

    def top_keys(self, vt: ValueType, n: int = 10) -> List[Tuple[str, int]]:
        return _top(self.sampled_keys.get(vt), n)

    def top_members(self, vt: ValueType, n: int = 10) -> List[Tuple[str, int]]:
        return _top(self.sampled_members.get(vt), n)

    def to_dict(self) -> Dict[str, object]:
        """JSON-serializable snapshot of every statistic."""
        out: Dict[str, object] = {
            "name": self.name,
            "key_count": self.key_count,
            "type_counts": {vt.value: n for vt, n in sorted(self.type_counts.items())},
        }
        for attr, dist in self._distributions():
            out[attr] = dist.to_dict()
        out["sampled_keys"] = {
            vt.value: dict(c) for vt, c in sorted(self.sampled_keys.items())
        }
        out["sampled_members"] = {
            vt.value: dict(c) for vt, c in sorted(self.sampled_members.items())
        }
        return out


def _top(counter: Optional[Counter], n: int) -> List[Tuple[str, int]]:
    if not counter:
        return []
    # Ties broken by name so output does not depend on insertion order.
    return sorted(counter.items(), key=lambda kv: (-kv[1], kv[0]))[:n]


def ensure_entry(
    stats: MutableMapping[str, Results],
    group: str,
    factory: Callable[[], Results] = Results,
) -> Results:
    """Return the accumulator for ``group``, creating it with ``factory`` if absent."""
    entry = stats.get(group)
    if entry is None:
        entry = factory()
        stats[group] = entry
    return entry


def merge_results(
    totals: MutableMapping[str, Results],
    partial: Dict[str, Results],
) -> MutableMapping[str, Results]:
    """
    Merge one run's ``bucket -> Results`` map into ``totals`` in place.

    Buckets new to ``totals`` get a fresh accumulator, so ``totals`` never
    shares state with ``partial``. Each merged entry is named after its bucket.
    """
    for group, results in partial.items():
        entry = ensure_entry(totals, group)
        entry.merge(results)
        entry.name = group
    return totals
