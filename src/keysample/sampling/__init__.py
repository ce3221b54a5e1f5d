"""Random-key sampling against a redis instance."""

from .aggregate import (
    ANY_KEY_BUCKET,
    NO_PREFIX_BUCKET,
    Aggregator,
    AnyKey,
    FunctionAggregator,
    KeyPrefix,
)
from .engine import RunResult, progress_interval, run
from .samplers import SAMPLERS

__all__ = [
    "ANY_KEY_BUCKET",
    "NO_PREFIX_BUCKET",
    "Aggregator",
    "AnyKey",
    "FunctionAggregator",
    "KeyPrefix",
    "RunResult",
    "progress_interval",
    "run",
    "SAMPLERS",
]
