# keysample/errors.py
"""Exceptions raised by a sampling run."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional

if TYPE_CHECKING:
    from keysample.stats.results import Results

__all__ = [
    "SamplingError",
    "StoreConnectionError",
    "CommandError",
    "EmptyKeyspaceError",
    "UnknownTypeError",
]


class SamplingError(RuntimeError):
    """
    Base class for failures that abort a sampling run.

    ``results`` holds whatever buckets were populated before the failure.
    They describe an inconsistent partial sample and must be treated as
    provisional.
    """

    def __init__(self, message: str, results: Optional[Dict[str, "Results"]] = None):
        super().__init__(message)
        self.results: Dict[str, "Results"] = results if results is not None else {}


class StoreConnectionError(SamplingError):
    """The store could not be reached; no results exist."""


class CommandError(SamplingError):
    """A store command failed or returned a malformed reply."""


class EmptyKeyspaceError(CommandError):
    """The store holds no keys, so there is nothing to sample."""


class UnknownTypeError(SamplingError):
    """A sampled key reported a type outside the five supported ones."""

    def __init__(
        self,
        key: str,
        reply: object,
        results: Optional[Dict[str, "Results"]] = None,
    ):
        super().__init__(f"unknown type {reply!r} for redis key: {key}", results)
        self.key = key
        self.reply = reply
