"""
Store layer for memoized functions.

This module contains Valkey client configuration, the key/value store
capability with its Valkey and in-memory implementations, and cache key
conventions.
"""

from .config import (
    ValkeyConfig,
    ValkeyMemoError,
    StoreUnavailableError,
    ValkeyConfigurationError,
)
from .client import create_client, close_client
from .store import KeyValueStore, ValkeyStore, InMemoryStore
from .utils import CacheKeyBuilder, validate_key

__all__ = [
    # Configuration
    "ValkeyConfig",
    "ValkeyMemoError",
    "StoreUnavailableError",
    "ValkeyConfigurationError",

    # Client
    "create_client",
    "close_client",

    # Stores
    "KeyValueStore",
    "ValkeyStore",
    "InMemoryStore",

    # Utilities
    "CacheKeyBuilder",
    "validate_key",
]
