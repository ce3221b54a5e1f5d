# tests/stats/test_sizes.py
from __future__ import annotations

import pytest

from keysample.stats.sizes import SizeStats, power_of_two_bucket


@pytest.mark.parametrize(
    "size, bucket",
    [(0, 0), (1, 1), (2, 2), (3, 4), (4, 4), (5, 8), (1000, 1024), (1024, 1024)],
)
def test_power_of_two_bucket(size, bucket):
    assert power_of_two_bucket(size) == bucket


def test_power_of_two_bucket_rejects_negative():
    with pytest.raises(ValueError):
        power_of_two_bucket(-1)


def test_observe_tracks_extremes_and_histogram():
    s = SizeStats()
    for size in (3, 0, 17, 4):
        s.observe(size)

    assert s.count == 4
    assert s.total == 24
    assert (s.min, s.max) == (0, 17)
    assert s.mean == pytest.approx(6.0)
    assert s.buckets() == [(0, 1), (4, 2), (32, 1)]


def test_empty_stats_have_no_extremes():
    s = SizeStats()
    assert s.count == 0
    assert s.min is None and s.max is None
    assert s.mean == 0.0
    assert s.buckets() == []


def test_merge_empty_is_identity_both_ways():
    a = SizeStats()
    a.observe(5)
    before = SizeStats(a.count, a.total, a.min, a.max, a.histogram.copy())

    assert a.merge(SizeStats()) == before

    b = SizeStats()
    b.merge(a)
    assert b == before


def test_merge_matches_single_stream_and_leaves_other_untouched():
    whole, left, right = SizeStats(), SizeStats(), SizeStats()
    sizes = [1, 9, 9, 120, 0, 33]
    for i, size in enumerate(sizes):
        whole.observe(size)
        (left if i % 2 else right).observe(size)

    right_snapshot = right.to_dict()
    left.merge(right)

    assert left == whole
    assert right.to_dict() == right_snapshot


def test_to_dict_is_json_friendly():
    s = SizeStats()
    s.observe(6)
    d = s.to_dict()
    assert d["histogram"] == {"8": 1}
    assert d["min"] == d["max"] == 6
