# tests/conftest.py
"""Shared test doubles for the redis client."""
from __future__ import annotations

import itertools

import pytest


class FakeRedis:
    """
    In-memory stand-in for the slice of redis.Redis the sampler uses.

    ``data`` maps raw keys to Python values whose type decides the redis type:
    bytes -> string, list -> list, set -> set, dict -> hash, tuple -> zset
    (members in rank order). ``types`` overrides the TYPE reply per key.
    ``draws`` is the sequence RANDOMKEY cycles through (default: data order).
    ``errors`` maps a command name to an exception raised when it runs.
    """

    def __init__(self, data=None, *, draws=None, types=None, errors=None):
        self.data = dict(data or {})
        self.types = dict(types or {})
        self.errors = dict(errors or {})
        self.calls: list = []
        self.pipelines: list = []
        self.closed = False
        order = list(draws) if draws is not None else list(self.data)
        self._draws = itertools.cycle(order) if order else None

    # --- plumbing ---------------------------------------------------------

    def _call(self, name, *args):
        self.calls.append((name,) + args)
        exc = self.errors.get(name)
        if exc is not None:
            raise exc
        return getattr(self, "_" + name)(*args)

    def pipeline(self, transaction=True):
        assert transaction is False, "sampler pipelines must not be transactional"
        return FakePipeline(self)

    def close(self):
        self.closed = True

    # --- commands ---------------------------------------------------------

    def ping(self):
        return self._call("ping")

    def dbsize(self):
        return self._call("dbsize")

    def randomkey(self):
        return self._call("randomkey")

    def type(self, key):
        return self._call("type", key)

    def get(self, key):
        return self._call("get", key)

    def hget(self, key, field):
        return self._call("hget", key, field)

    def _ping(self):
        return True

    def _dbsize(self):
        return len(self.data)

    def _randomkey(self):
        return next(self._draws) if self._draws is not None else None

    def _type(self, key):
        if key in self.types:
            return self.types[key]
        value = self.data.get(key)
        if value is None:
            return b"none"
        if isinstance(value, bytes):
            return b"string"
        if isinstance(value, list):
            return b"list"
        if isinstance(value, set):
            return b"set"
        if isinstance(value, tuple):
            return b"zset"
        if isinstance(value, dict):
            return b"hash"
        raise TypeError(f"unsupported fake value: {value!r}")

    def _get(self, key):
        return self.data.get(key)

    def _llen(self, key):
        return len(self.data.get(key, []))

    def _lrange(self, key, start, stop):
        return list(self.data.get(key, []))[start: stop + 1]

    def _scard(self, key):
        return len(self.data.get(key, set()))

    def _srandmember(self, key):
        members = sorted(self.data.get(key, set()))
        return members[0] if members else None

    def _zcard(self, key):
        return len(self.data.get(key, ()))

    def _zrange(self, key, start, stop):
        return list(self.data.get(key, ()))[start: stop + 1]

    def _hlen(self, key):
        return len(self.data.get(key, {}))

    def _hkeys(self, key):
        return list(self.data.get(key, {}))

    def _hget(self, key, field):
        return self.data.get(key, {}).get(field)

    def commands(self):
        """Names of every command issued, pipelined ones included, in order."""
        return [c[0] for c in self.calls]


class FakePipeline:
    """Queues commands and replays them against the owning FakeRedis."""

    def __init__(self, client: FakeRedis):
        self.client = client
        self.queued: list = []

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)

        def queue(*args):
            self.queued.append((name,) + args)
            return self
        return queue

    def execute(self):
        self.client.pipelines.append([c[0] for c in self.queued])
        try:
            return [self.client._call(name, *args) for name, *args in self.queued]
        finally:
            self.queued = []


@pytest.fixture
def make_redis():
    """Factory for FakeRedis instances."""
    return FakeRedis


@pytest.fixture
def mixed_data():
    """One key of every supported type."""
    return {
        b"user:1:name": b"alice",
        b"queue:jobs": [b"job-1", b"job-22"],
        b"tags:post:9": {b"red", b"green", b"blue"},
        b"scores:daily": (b"carol", b"dave"),
        b"user:1:profile": {b"email": b"alice@example.com", b"age": b"31"},
    }
