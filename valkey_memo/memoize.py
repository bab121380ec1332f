"""
Expiring memoization backed by a key/value store.

``make_memoized`` wraps a function so that repeated calls with equal
arguments inside a TTL window are answered from the store instead of
re-running the function::

    store = ValkeyStore.from_config()
    fetch_weather = make_memoized("weather", 900, store, fetch_weather)

    fetch_weather("US", "Seattle")   # miss: calls the function, caches result
    fetch_weather("US", "Seattle")   # hit: answered by Valkey

On a miss the result is written with SET and then given a TTL with
EXPIRE. The two commands are not atomic and concurrent misses on the same
key may both run the function; the last write wins. Wrapped functions
should therefore return the same value for the same arguments.

Failures of the wrapped function are re-raised and never cached. Store
failures only cost the caching: a failed read is treated as a miss
(unless ``strict=True``) and a failed write is logged and ignored.
"""

import functools
import logging
from typing import Any, Callable, Optional

from .cache.config import StoreUnavailableError
from .cache.store import KeyValueStore
from .cache.utils import CacheKeyBuilder, validate_key
from .stats import MemoStats
from .utils.config import MemoSettings, get_config

logger = logging.getLogger(__name__)


def _check_ttl(ttl_seconds: Any) -> int:
    if isinstance(ttl_seconds, bool) or not isinstance(ttl_seconds, int):
        raise TypeError(f"ttl_seconds must be an int, got {type(ttl_seconds).__name__}")
    if ttl_seconds < 0:
        raise ValueError(f"ttl_seconds must be >= 0, got {ttl_seconds}")
    return ttl_seconds


class MemoizedFunction:
    """
    Callable returned by ``make_memoized``.

    Accepts the same arguments as the wrapped function and returns the
    same values. Holds no per-call state; everything cached lives in the
    store.
    """

    def __init__(
        self,
        key_prefix: str,
        ttl_seconds: int,
        store: KeyValueStore,
        func: Callable[..., Any],
        strict: bool = False,
        stats: Optional[MemoStats] = None
    ):
        if not callable(func):
            raise TypeError(f"func must be callable, got {type(func).__name__}")

        # Copies func.__dict__, so it must run before our own attributes are set.
        functools.update_wrapper(self, func)
        self._key_prefix = key_prefix
        self._ttl_seconds = _check_ttl(ttl_seconds)
        self._store = store
        self._strict = strict
        self.stats = stats if stats is not None else MemoStats()

        if not validate_key(key_prefix):
            logger.warning(f"Key prefix {key_prefix!r} is empty, too long or contains whitespace")

    def __get__(self, instance: Any, owner: Any = None) -> Any:
        # Bind like a function so decorated methods receive self.
        if instance is None:
            return self
        return functools.partial(self, instance)

    @property
    def key_prefix(self) -> str:
        return self._key_prefix

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    @property
    def store(self) -> KeyValueStore:
        return self._store

    @property
    def strict(self) -> bool:
        return self._strict

    def cache_key(self, *args: Any, **kwargs: Any) -> str:
        """Key under which the result for these arguments is stored."""
        return CacheKeyBuilder.build_memo_key(self._key_prefix, args, kwargs)

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        key = self.cache_key(*args, **kwargs)

        cached = self._read(key)
        if cached is not None:
            self.stats.record("hit_count")
            logger.debug(f"Cache hit for {key}")
            return cached

        self.stats.record("miss_count")
        logger.debug(f"Cache miss for {key}")

        try:
            result = self.__wrapped__(*args, **kwargs)
        except Exception:
            self.stats.record("call_errors")
            raise

        self._write(key, result)
        return result

    def _read(self, key: str) -> Optional[Any]:
        try:
            return self._store.get(key)
        except Exception as e:
            self.stats.record("read_errors")
            if self._strict:
                raise StoreUnavailableError(f"Cache read failed for key {key}: {e}") from e
            logger.warning(f"Cache read failed for key {key}, treating as miss: {e}")
            return None

    def _write(self, key: str, result: Any) -> None:
        try:
            self._store.set(key, result)
            self._store.expire(key, self._ttl_seconds)
        except Exception as e:
            self.stats.record("write_errors")
            logger.warning(f"Cache write failed for key {key}: {e}")
            return
        self.stats.record("set_count")

    def invalidate(self, *args: Any, **kwargs: Any) -> bool:
        """
        Drop the cached result for these arguments.

        Returns:
            True if an entry was removed

        Raises:
            TypeError: If the store has no ``delete`` operation
        """
        delete = getattr(self._store, "delete", None)
        if delete is None:
            raise TypeError(f"{type(self._store).__name__} does not support delete")
        return bool(delete(self.cache_key(*args, **kwargs)))

    def invalidate_all(self) -> int:
        """
        Drop every cached result under this function's prefix.

        Returns:
            Number of entries removed

        Raises:
            TypeError: If the store has no ``clear`` operation
        """
        clear = getattr(self._store, "clear", None)
        if clear is None:
            raise TypeError(f"{type(self._store).__name__} does not support clear")
        return clear(CacheKeyBuilder.build_pattern(self._key_prefix))

    def __repr__(self) -> str:
        return (
            f"MemoizedFunction({self.__wrapped__!r}, key_prefix={self._key_prefix!r}, "
            f"ttl_seconds={self._ttl_seconds})"
        )


def make_memoized(
    key_prefix: str,
    ttl_seconds: int,
    store: KeyValueStore,
    func: Callable[..., Any],
    *,
    strict: bool = False,
    stats: Optional[MemoStats] = None
) -> MemoizedFunction:
    """
    Wrap ``func`` with an expiring cache.

    Args:
        key_prefix: Namespace for this function's keys
        ttl_seconds: Lifetime of cached results; 0 caches nothing useful
        store: Object providing get/set/expire, e.g. ``ValkeyStore``
        func: Function to wrap
        strict: Raise StoreUnavailableError when the store cannot be read
            instead of recomputing
        stats: Counters to update, shared between wrappers if desired

    Returns:
        MemoizedFunction: The wrapped callable

    Raises:
        TypeError: If ttl_seconds is not an int or func is not callable
        ValueError: If ttl_seconds is negative
    """
    return MemoizedFunction(key_prefix, ttl_seconds, store, func, strict=strict, stats=stats)


def memoized(
    key_prefix: str,
    ttl_seconds: int,
    store: KeyValueStore,
    **options: Any
) -> Callable[[Callable[..., Any]], MemoizedFunction]:
    """
    Decorator form of ``make_memoized``::

        @memoized("airport:info", 86400, store)
        def airport_info(iata):
            ...
    """
    def decorator(func: Callable[..., Any]) -> MemoizedFunction:
        return make_memoized(key_prefix, ttl_seconds, store, func, **options)

    return decorator


def memoized_with_settings(
    store: KeyValueStore,
    namespace: Optional[str] = None,
    ttl_seconds: Optional[int] = None,
    settings: Optional[MemoSettings] = None
) -> Callable[[Callable[..., Any]], MemoizedFunction]:
    """
    Decorator taking its defaults from ``MemoSettings``.

    The key prefix is ``"<settings.key_prefix>:<namespace>"`` where the
    namespace defaults to the function's qualified name. TTL and strict
    reads come from the settings unless overridden.
    """
    settings = settings or get_config()
    ttl = settings.default_ttl_seconds if ttl_seconds is None else ttl_seconds

    def decorator(func: Callable[..., Any]) -> MemoizedFunction:
        prefix = f"{settings.key_prefix}:{namespace or func.__qualname__}"
        return make_memoized(prefix, ttl, store, func, strict=settings.strict_reads)

    return decorator
