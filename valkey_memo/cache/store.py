"""
Key/value store capability used by memoized functions.

The memoization wrapper only needs three operations: ``get``, ``set`` and
``expire``. ``ValkeyStore`` provides them on top of a Valkey server and
``InMemoryStore`` provides them in-process, mainly for tests and demos.
Both serialize values as JSON so a cache hit returns the same structure
no matter which store produced it. Values JSON cannot represent
exactly (dates, sets, custom objects) are rejected with TypeError rather
than stored in a lossy form.
"""

import fnmatch
import json
import logging
import threading
import time
from typing import Any, Callable, Dict, Optional, Protocol, Tuple, runtime_checkable

import valkey

from .client import close_client, create_client
from .config import ValkeyConfig

logger = logging.getLogger(__name__)


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal store capability: read, write and schedule expiry."""

    def get(self, key: str) -> Optional[Any]: ...

    def set(self, key: str, value: Any) -> Any: ...

    def expire(self, key: str, ttl_seconds: int) -> Any: ...


def _check_keys(value: Any) -> None:
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(
                    f"keys must be str to round-trip through JSON, not {type(key).__name__}"
                )
            _check_keys(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _check_keys(item)


def _dumps(value: Any) -> str:
    # No default= fallback: a lossy encoding would change the value on a hit.
    _check_keys(value)
    return json.dumps(value)


class ValkeyStore:
    """
    Valkey-backed store with transparent JSON serialization.

    Errors raised by the client (connection refused, timeouts, ...) are
    propagated; deciding whether a failure is fatal is up to the caller.
    """

    def __init__(self, client: valkey.Valkey):
        """
        Args:
            client: A ready-to-use Valkey client. It is not pinged here.
        """
        self.client = client

    @classmethod
    def from_config(cls, config: Optional[ValkeyConfig] = None) -> "ValkeyStore":
        """Create a store with its own pooled client."""
        return cls(create_client(config))

    def get(self, key: str) -> Optional[Any]:
        """
        Get and deserialize a value.

        Returns:
            The decoded value, or None if the key does not exist
        """
        raw = self.client.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: Any) -> bool:
        """Serialize ``value`` to JSON and store it without an expiry."""
        return bool(self.client.set(key, _dumps(value)))

    def expire(self, key: str, ttl_seconds: int) -> bool:
        """Set a TTL on ``key``. A TTL of 0 removes the key immediately."""
        return bool(self.client.expire(key, ttl_seconds))

    def delete(self, key: str) -> bool:
        """Delete ``key``; True if something was removed."""
        return bool(self.client.delete(key))

    def clear(self, pattern: str = "*") -> int:
        """
        Delete every key matching ``pattern``.

        Uses SCAN rather than KEYS so large databases are not blocked.

        Returns:
            Number of keys removed
        """
        deleted = 0
        for key in self.client.scan_iter(match=pattern, count=500):
            deleted += self.client.delete(key)
        logger.debug(f"Cleared {deleted} keys matching {pattern}")
        return deleted

    def ping(self) -> bool:
        """Round-trip to the server. Raises on connection failure."""
        return bool(self.client.ping())

    def close(self) -> None:
        """Release pooled connections."""
        close_client(self.client)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class InMemoryStore:
    """
    Process-local store honouring the same contract as ``ValkeyStore``.

    Expiry is evaluated lazily against ``clock`` so tests can move time
    forward without sleeping. All operations are guarded by a lock.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._lock = threading.Lock()
        # key -> (serialized value, expires_at or None)
        self._rows: Dict[str, Tuple[str, Optional[float]]] = {}

    def _live_row(self, key: str) -> Optional[Tuple[str, Optional[float]]]:
        row = self._rows.get(key)
        if row is None:
            return None
        expires_at = row[1]
        if expires_at is not None and expires_at <= self._clock():
            del self._rows[key]
            return None
        return row

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            row = self._live_row(key)
        if row is None:
            return None
        return json.loads(row[0])

    def set(self, key: str, value: Any) -> bool:
        # Like SET, a plain write clears any previous TTL.
        serialized = _dumps(value)
        with self._lock:
            self._rows[key] = (serialized, None)
        return True

    def expire(self, key: str, ttl_seconds: int) -> bool:
        with self._lock:
            row = self._live_row(key)
            if row is None:
                return False
            if ttl_seconds <= 0:
                del self._rows[key]
                return True
            self._rows[key] = (row[0], self._clock() + ttl_seconds)
        return True

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._rows.pop(key, None) is not None

    def ttl(self, key: str) -> int:
        """
        Remaining TTL in whole seconds, mirroring the TTL command:
        -2 if the key is missing, -1 if it has no expiry.
        """
        with self._lock:
            row = self._live_row(key)
            if row is None:
                return -2
            if row[1] is None:
                return -1
            return max(0, int(row[1] - self._clock()))

    def clear(self, pattern: str = "*") -> int:
        """Delete live keys matching a glob ``pattern``; returns how many."""
        with self._lock:
            matched = [
                key for key in list(self._rows)
                if self._live_row(key) is not None and fnmatch.fnmatchcase(key, pattern)
            ]
            for key in matched:
                del self._rows[key]
        return len(matched)

    def __len__(self) -> int:
        with self._lock:
            return sum(1 for key in list(self._rows) if self._live_row(key) is not None)
