# tests/sampling/test_aggregate.py
from __future__ import annotations

import pytest

from keysample.sampling.aggregate import (
    ANY_KEY_BUCKET,
    NO_PREFIX_BUCKET,
    Aggregator,
    AnyKey,
    FunctionAggregator,
    KeyPrefix,
    distinct_groups,
)
from keysample.types import ValueType


def test_aggregator_is_abstract():
    with pytest.raises(TypeError):
        Aggregator()  # type: ignore[abstract]


@pytest.mark.parametrize("vt", list(ValueType))
def test_any_key_returns_single_constant_bucket(vt):
    agg = AnyKey()
    assert list(agg.groups("whatever:key", vt)) == [ANY_KEY_BUCKET]
    assert list(AnyKey("all").groups("k", vt)) == ["all"]


def test_function_aggregator_delegates():
    seen = []

    def by_type(key, vt):
        seen.append((key, vt))
        return [vt.value, "everything"]

    agg = FunctionAggregator(by_type)
    assert list(agg.groups("k", ValueType.HASH)) == ["hash", "everything"]
    assert seen == [("k", ValueType.HASH)]
    assert "by_type" in repr(agg)


@pytest.mark.parametrize(
    "key, depth, expected",
    [
        ("user:42:profile", 1, "user"),
        ("user:42:profile", 2, "user:42"),
        ("user:42:profile", 5, "user:42"),
        ("user:42", 3, "user"),
        ("plainkey", 1, NO_PREFIX_BUCKET),
        (":session", 1, NO_PREFIX_BUCKET),
        (":session:1", 2, NO_PREFIX_BUCKET),
    ],
)
def test_key_prefix_groups(key, depth, expected):
    agg = KeyPrefix(":", depth=depth)
    assert list(agg.groups(key, ValueType.STRING)) == [expected]


def test_key_prefix_validates_arguments():
    with pytest.raises(ValueError):
        KeyPrefix("")
    with pytest.raises(ValueError):
        KeyPrefix(":", depth=0)


def test_distinct_groups_keeps_first_seen_order():
    assert distinct_groups(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]
    assert distinct_groups([]) == []
