# keysample/sampling/samplers.py
"""
Per-type samplers.

Each sampler issues the smallest set of commands that characterises one key
of its type, then records the observation in every bucket the aggregator
picks. Store errors are not caught here; they reach the run loop unchanged.

List, sorted set and hash samplers always look at the first element or field
rather than a random one. Reports built from earlier samples rely on that
distribution, so it is kept.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from keysample.errors import CommandError
from keysample.sampling.aggregate import Aggregator, distinct_groups
from keysample.stats.results import Results, ensure_entry
from keysample.store.client import RawKey, decode_key, flush
from keysample.types import ValueType

__all__ = [
    "sample_string",
    "sample_list",
    "sample_set",
    "sample_sorted_set",
    "sample_hash",
    "SAMPLERS",
]

Sampler = Callable[[object, RawKey, Aggregator, Dict[str, Results]], None]


def _buckets(
    key: str, vt: ValueType, aggregator: Aggregator, stats: Dict[str, Results]
) -> List[Results]:
    return [ensure_entry(stats, g) for g in distinct_groups(aggregator.groups(key, vt))]


def _as_int(reply: object, command: str) -> int:
    if isinstance(reply, bool) or not isinstance(reply, int):
        raise CommandError(f"Malformed {command} reply: {reply!r}")
    return reply


def _first(reply: object, command: str) -> Optional[bytes]:
    """First item of a range reply, or None when the range is empty."""
    if not isinstance(reply, (list, tuple)):
        raise CommandError(f"Malformed {command} reply: {reply!r}")
    return reply[0] if reply else None


def _pair(client, key: RawKey, count_cmd: str, member_cmd: str, *args) -> tuple:
    pipe = client.pipeline(transaction=False)
    getattr(pipe, count_cmd)(key)
    getattr(pipe, member_cmd)(key, *args)
    replies = flush(pipe)
    if len(replies) != 2:
        raise CommandError(
            f"Expected 2 pipeline replies for {count_cmd.upper()}/"
            f"{member_cmd.upper()}, got {len(replies)}"
        )
    return replies[0], replies[1]


def sample_string(client, key: RawKey, aggregator: Aggregator, stats: Dict[str, Results]) -> None:
    value = client.get(key)
    if value is None:
        # Expired between TYPE and GET.
        raise CommandError(f"GET returned nil for string key: {decode_key(key)}")
    name = decode_key(key)
    for s in _buckets(name, ValueType.STRING, aggregator, stats):
        s.observe_string(name, value)


def sample_list(client, key: RawKey, aggregator: Aggregator, stats: Dict[str, Results]) -> None:
    length, head = _pair(client, key, "llen", "lrange", 0, 0)
    length = _as_int(length, "LLEN")
    first = _first(head, "LRANGE")
    name = decode_key(key)
    for s in _buckets(name, ValueType.LIST, aggregator, stats):
        s.observe_list(name, length, first)


def sample_set(client, key: RawKey, aggregator: Aggregator, stats: Dict[str, Results]) -> None:
    card, member = _pair(client, key, "scard", "srandmember")
    card = _as_int(card, "SCARD")
    if member is not None and not isinstance(member, (bytes, str)):
        raise CommandError(f"Malformed SRANDMEMBER reply: {member!r}")
    name = decode_key(key)
    for s in _buckets(name, ValueType.SET, aggregator, stats):
        s.observe_set(name, card, member)


def sample_sorted_set(client, key: RawKey, aggregator: Aggregator, stats: Dict[str, Results]) -> None:
    card, head = _pair(client, key, "zcard", "zrange", 0, 0)
    card = _as_int(card, "ZCARD")
    first = _first(head, "ZRANGE")
    name = decode_key(key)
    for s in _buckets(name, ValueType.SORTED_SET, aggregator, stats):
        s.observe_sorted_set(name, card, first)


def sample_hash(client, key: RawKey, aggregator: Aggregator, stats: Dict[str, Results]) -> None:
    length, fields = _pair(client, key, "hlen", "hkeys")
    length = _as_int(length, "HLEN")
    field = _first(fields, "HKEYS")
    value = client.hget(key, field) if field is not None else None
    name = decode_key(key)
    for s in _buckets(name, ValueType.HASH, aggregator, stats):
        s.observe_hash(name, length, field, value)


SAMPLERS: Dict[ValueType, Sampler] = {
    ValueType.STRING: sample_string,
    ValueType.LIST: sample_list,
    ValueType.SET: sample_set,
    ValueType.SORTED_SET: sample_sorted_set,
    ValueType.HASH: sample_hash,
}
