# keysample/types.py
"""Shared types: value classifications and sampling configuration."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

__all__ = ["ValueType", "Options"]


class ValueType(str, Enum):
    """Redis value types, spelled the way the ``TYPE`` command replies."""

    STRING = "string"
    LIST = "list"
    SET = "set"
    SORTED_SET = "zset"
    HASH = "hash"
    UNKNOWN = "unknown"

    @classmethod
    def from_reply(cls, reply: Union[bytes, str, None]) -> "ValueType":
        """Map a ``TYPE`` reply to a member; anything unrecognized is UNKNOWN."""
        if isinstance(reply, (bytes, bytearray)):
            reply = bytes(reply).decode("ascii", "replace")
        try:
            vt = cls(reply)
        except ValueError:
            return cls.UNKNOWN
        return vt


@dataclass(frozen=True)
class Options:
    """Sampling configuration for a single redis instance."""

    host: str = "localhost"
    port: int = 6379
    num_keys: int = 1000
    """Number of random keys to sample; must be at least 1"""

    db: int = 0
    password: Optional[str] = None
    socket_timeout: Optional[float] = None
    """Seconds before a blocked socket operation fails (None waits forever)"""

    def __post_init__(self) -> None:
        if self.num_keys < 1:
            raise ValueError(f"num_keys must be >= 1, got {self.num_keys}")
        if not 0 < self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}")
        if self.socket_timeout is not None and self.socket_timeout <= 0:
            raise ValueError(
                f"socket_timeout must be positive, got {self.socket_timeout}"
            )

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"
