"""Access to the sampled key-value store."""

from .client import connect, decode_key, flush, key_count, open_store, random_key

__all__ = ["connect", "decode_key", "flush", "key_count", "open_store", "random_key"]
