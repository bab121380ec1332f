"""
valkey-memo: expiring memoization backed by Valkey

Wrap any function so that repeated calls with the same arguments inside a
TTL window are served from a key/value store instead of being recomputed.
"""

from .cache import InMemoryStore, KeyValueStore, StoreUnavailableError, ValkeyConfig, ValkeyStore
from .memoize import MemoizedFunction, make_memoized, memoized, memoized_with_settings
from .stats import MemoStats

__version__ = "0.1.0"

__all__ = [
    "make_memoized",
    "memoized",
    "memoized_with_settings",
    "MemoizedFunction",
    "MemoStats",
    "KeyValueStore",
    "ValkeyStore",
    "InMemoryStore",
    "ValkeyConfig",
    "StoreUnavailableError",
]
