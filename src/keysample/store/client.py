# keysample/store/client.py
"""Thin helpers over a redis-py client: connection, pipelines, random keys."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, List, Tuple, Union

import redis

from keysample.errors import CommandError, EmptyKeyspaceError, StoreConnectionError
from keysample.types import Options, ValueType

logger = logging.getLogger(__name__)

RawKey = Union[bytes, str]

__all__ = [
    "connect",
    "open_store",
    "flush",
    "key_count",
    "random_key",
    "decode_key",
]


def decode_key(raw: RawKey) -> str:
    """Render a raw redis key as text; undecodable bytes are escaped."""
    if isinstance(raw, (bytes, bytearray)):
        return bytes(raw).decode("utf-8", "backslashreplace")
    return raw


def connect(options: Options) -> redis.Redis:
    """
    Open a client for ``options`` and verify it with ``PING``.

    redis-py connects lazily, so the ping is what surfaces an unreachable
    host or a rejected password.
    """
    client = redis.Redis(
        host=options.host,
        port=options.port,
        db=options.db,
        password=options.password,
        socket_timeout=options.socket_timeout,
        socket_connect_timeout=options.socket_timeout,
    )
    try:
        client.ping()
    except redis.RedisError as exc:
        client.close()
        raise StoreConnectionError(
            f"Could not connect to redis at {options.address}: {exc}"
        ) from exc
    logger.debug("Connected to redis at %s (db %d)", options.address, options.db)
    return client


@contextmanager
def open_store(options: Options) -> Iterator[redis.Redis]:
    """Connect to the store and close the connection on exit."""
    client = connect(options)
    try:
        yield client
    finally:
        try:
            client.close()
        except redis.RedisError as exc:
            logger.warning("Error closing connection to %s: %s", options.address, exc)


def flush(pipe) -> List[object]:
    """Send a queued pipeline and return the replies in command order."""
    return pipe.execute()


def key_count(client) -> int:
    """Total number of keys in the selected database (``DBSIZE``)."""
    n = client.dbsize()
    if not isinstance(n, int):
        raise CommandError(f"Malformed DBSIZE reply: {n!r}")
    return n


def random_key(client) -> Tuple[RawKey, ValueType, object]:
    """
    Draw one random key and classify it.

    Returns:
        (raw_key, value_type, type_reply); ``type_reply`` is the store's own
        answer, kept for error messages when the type is not recognised.
    """
    raw = client.randomkey()
    if raw is None:
        raise EmptyKeyspaceError("RANDOMKEY returned no key; the database is empty")
    reply = client.type(raw)
    return raw, ValueType.from_reply(reply), reply
