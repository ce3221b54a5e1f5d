"""Estimate the shape of a redis data set by sampling random keys."""

from .errors import (
    CommandError,
    EmptyKeyspaceError,
    SamplingError,
    StoreConnectionError,
    UnknownTypeError,
)
from .sampling import (
    Aggregator,
    AnyKey,
    FunctionAggregator,
    KeyPrefix,
    RunResult,
    run,
)
from .stats import Results, SizeStats, merge_results
from .types import Options, ValueType

__version__ = "0.1.0"

__all__ = [
    # Configuration and types
    "Options",
    "ValueType",
    # Aggregation
    "Aggregator",
    "AnyKey",
    "FunctionAggregator",
    "KeyPrefix",
    # Sampling
    "run",
    "RunResult",
    # Statistics
    "Results",
    "SizeStats",
    "merge_results",
    # Errors
    "SamplingError",
    "StoreConnectionError",
    "CommandError",
    "EmptyKeyspaceError",
    "UnknownTypeError",
]
