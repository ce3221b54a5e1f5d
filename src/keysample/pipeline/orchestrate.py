# keysample/pipeline/orchestrate.py
from __future__ import annotations

import logging
from concurrent.futures import Executor, ThreadPoolExecutor, as_completed
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple, Type

from tqdm import tqdm

from keysample.errors import SamplingError
from keysample.sampling.aggregate import Aggregator, AnyKey
from keysample.sampling.engine import run
from keysample.stats.results import Results, merge_results
from keysample.types import Options

logger = logging.getLogger(__name__)

__all__ = ["SessionResult", "sample_instances"]


class SessionResult(NamedTuple):
    """Merged outcome of sampling several redis instances."""

    totals: Dict[str, Results]
    key_count: int
    """Sum of DBSIZE over the instances that completed"""
    failures: List[Tuple[Options, SamplingError]]


def sample_instances(
    instances: Sequence[Options],
    aggregator: Optional[Aggregator] = None,
    *,
    workers: Optional[int] = None,
    fail_fast: bool = True,
    executor_class: Type[Executor] = ThreadPoolExecutor,
) -> SessionResult:
    """
    Sample every instance concurrently and merge the per-run maps.

    Each run owns its connection and its ``bucket -> Results`` map. Maps are
    merged here, on the calling thread, only after their run has finished,
    so no accumulator is ever touched by two threads.

    With ``fail_fast`` the first failed run is re-raised at once: pending runs
    are cancelled and runs still in flight are not waited for. Otherwise failed runs are logged, left out of the totals, and
    reported in ``SessionResult.failures``.
    """
    aggregator = aggregator if aggregator is not None else AnyKey()
    instances = list(instances)
    if not instances:
        return SessionResult(totals={}, key_count=0, failures=[])
    if workers is None:
        workers = min(32, len(instances))

    totals: Dict[str, Results] = {}
    total_keys = 0
    failures: List[Tuple[Options, SamplingError]] = []

    with tqdm(total=len(instances), desc="Sampling Instances", unit="instances",
              colour="blue") as pbar:
        executor = executor_class(max_workers=workers)
        futures = {}
        try:
            for opts in instances:
                logger.info(
                    "Sampling %d keys from redis at: %s...", opts.num_keys, opts.address
                )
                futures[executor.submit(run, opts, aggregator)] = opts

            for fut in as_completed(futures):
                opts = futures[fut]
                try:
                    outcome = fut.result()
                except SamplingError as exc:
                    logger.error("Sampling failed for %s: %s", opts.address, exc)
                    if fail_fast:
                        raise
                    failures.append((opts, exc))
                    continue
                finally:
                    pbar.update(1)

                logger.info("Got results back from redis at %s", opts.address)
                total_keys += outcome.key_count
                merge_results(totals, outcome.results)
        except BaseException:
            # Runs already in flight are abandoned rather than joined.
            executor.shutdown(wait=False, cancel_futures=True)
            raise
        executor.shutdown(wait=True)

    logger.info(
        "Merged %d of %d instances into %d buckets (%d keys in total)",
        len(instances) - len(failures), len(instances), len(totals), total_keys,
    )
    return SessionResult(totals=totals, key_count=total_keys, failures=failures)
