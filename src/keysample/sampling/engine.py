# keysample/sampling/engine.py
"""The sampling loop for a single redis instance."""

from __future__ import annotations

import logging
from contextlib import nullcontext
from typing import Callable, Dict, NamedTuple, Optional

import redis

from keysample.errors import CommandError, EmptyKeyspaceError, SamplingError, UnknownTypeError
from keysample.sampling.aggregate import Aggregator, AnyKey
from keysample.sampling.samplers import SAMPLERS
from keysample.stats.results import Results
from keysample.store.client import decode_key, key_count, open_store, random_key
from keysample.types import Options

logger = logging.getLogger(__name__)

__all__ = ["run", "RunResult", "progress_interval"]

ProgressCallback = Callable[[int, Options], None]


class RunResult(NamedTuple):
    """Outcome of one completed run."""

    results: Dict[str, Results]
    key_count: int
    """Keys held by the store when the run started (DBSIZE)"""
    sampled: int


def progress_interval(num_keys: int) -> int:
    """Keys between progress notifications; fixed for the whole run."""
    return max(num_keys // 100, 100)


def run(
    options: Options,
    aggregator: Optional[Aggregator] = None,
    *,
    client=None,
    on_progress: Optional[ProgressCallback] = None,
) -> RunResult:
    """
    Sample ``options.num_keys`` random keys and aggregate their statistics.

    Process
    -------
    1. Connect (skipped when ``client`` is supplied; the caller then owns it)
    2. Read DBSIZE; an empty database cannot be sampled
    3. For each draw: RANDOMKEY + TYPE, report progress, dispatch by type
    4. Return the ``bucket -> Results`` map

    Any failure aborts the run with a ``SamplingError`` whose ``results``
    attribute holds the buckets populated so far. Those partial results are
    not a valid sample. Nothing is retried.
    """
    aggregator = aggregator if aggregator is not None else AnyKey()
    stats: Dict[str, Results] = {}
    interval = progress_interval(options.num_keys)

    store = nullcontext(client) if client is not None else open_store(options)
    with store as conn:
        try:
            total = key_count(conn)
            if total == 0:
                raise EmptyKeyspaceError(
                    f"No keys to sample in redis at {options.address} (db {options.db})"
                )

            for i in range(options.num_keys):
                raw, vt, reply = random_key(conn)

                if i and i % interval == 0:
                    logger.info("Sampled %d keys from redis at: %s...", i, options.address)
                    if on_progress is not None:
                        on_progress(i, options)

                sampler = SAMPLERS.get(vt)
                if sampler is None:
                    raise UnknownTypeError(decode_key(raw), reply)
                sampler(conn, raw, aggregator, stats)

        except redis.RedisError as exc:
            raise CommandError(
                f"Redis command failed at {options.address}: {exc}", stats
            ) from exc
        except SamplingError as exc:
            exc.results = stats
            raise

    logger.info(
        "Finished sampling %d keys from redis at %s (%d keys total, %d buckets)",
        options.num_keys, options.address, total, len(stats),
    )
    return RunResult(results=stats, key_count=total, sampled=options.num_keys)
