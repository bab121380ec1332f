"""
Cache key utilities.

Memoized calls are keyed on a namespacing prefix plus a SHA-256 digest of
a canonical JSON encoding of their arguments. The encoding tags every
value JSON cannot represent unambiguously, so ``{1: "a"}`` and
``{"1": "a"}`` get different keys.
"""

import hashlib
import json
from typing import Any, Mapping, Optional, Sequence

MAX_KEY_LENGTH = 250
DIGEST_LENGTH = 64

_JSON_SCALARS = (str, int, float, bool, type(None))
_GLOB_SPECIAL = "*?["


def _type_name(value: Any) -> str:
    cls = type(value)
    return f"{cls.__module__}.{cls.__qualname__}"


def _dumps_canonical(value: Any) -> str:
    return json.dumps(value, separators=(',', ':'))


def canonicalize(value: Any) -> Any:
    """
    Convert ``value`` into plain JSON data that identifies it uniquely.

    Exact str/int/float/bool/None values are kept as they are and lists
    and tuples become arrays. Everything else becomes a single-key object
    naming its kind:

    - dict: ``{"dict": [[key, value], ...]}`` sorted by encoded key
    - set/frozenset: ``{"set": [...]}`` sorted by encoded element
    - anything else: ``{"repr": [type name, repr(value)]}``

    Only these wrappers produce JSON objects, and sorting compares
    encoded strings, so mixed key types never need comparing.
    """
    if type(value) in _JSON_SCALARS:
        return value
    if type(value) in (list, tuple):
        return [canonicalize(item) for item in value]
    if type(value) is dict:
        pairs = [[canonicalize(k), canonicalize(v)] for k, v in value.items()]
        pairs.sort(key=lambda pair: _dumps_canonical(pair[0]))
        return {"dict": pairs}
    if type(value) in (set, frozenset):
        return {"set": sorted((canonicalize(item) for item in value), key=_dumps_canonical)}
    return {"repr": [_type_name(value), repr(value)]}


class CacheKeyBuilder:
    """
    Builder class for generating consistent cache keys.

    All methods are static; the class only groups the key conventions.
    """

    @staticmethod
    def encode_arguments(
        args: Sequence[Any],
        kwargs: Optional[Mapping[str, Any]] = None
    ) -> str:
        """
        Canonical JSON encoding of a call's arguments.

        Positional order is preserved and keyword arguments are sorted by
        name.

        Example:
            encode_arguments((1, "a"), {"b": True})
            # Returns: '[[1,"a"],[["b",true]]]'
        """
        named = [[name, canonicalize(value)] for name, value in sorted((kwargs or {}).items())]
        return _dumps_canonical([canonicalize(list(args)), named])

    @staticmethod
    def build_memo_key(
        prefix: str,
        args: Sequence[Any],
        kwargs: Optional[Mapping[str, Any]] = None
    ) -> str:
        """
        Build the cache key for one memoized call.

        Args:
            prefix: Namespace for the wrapped function
            args: Positional arguments, in call order
            kwargs: Keyword arguments (optional)

        Returns:
            str: ``"<prefix>:<sha256 hex digest>"``

        Example:
            build_memo_key("weather", ("US", "Seattle"))
            # Returns: "weather:3f0c...e1"
        """
        encoded = CacheKeyBuilder.encode_arguments(args, kwargs)
        digest = hashlib.sha256(encoded.encode("utf-8")).hexdigest()
        return f"{prefix}:{digest}"

    @staticmethod
    def build_pattern(prefix: str) -> str:
        """
        Build a SCAN pattern matching every memo key under ``prefix``.

        The digest part is matched with exactly 64 ``?`` so a prefix
        never matches keys of a longer prefix that starts with it.
        Glob characters in the prefix are matched literally.

        Example:
            build_pattern("weather")
            # Returns: "weather:????...?"
        """
        escaped = "".join(f"[{char}]" if char in _GLOB_SPECIAL else char for char in str(prefix))
        return f"{escaped}:{'?' * DIGEST_LENGTH}"


def validate_key(key: str) -> bool:
    """
    Validate cache key format and length.

    Args:
        key: Cache key to validate

    Returns:
        bool: True if key is usable
    """
    if not key or not isinstance(key, str):
        return False

    if len(key) > MAX_KEY_LENGTH:
        return False

    invalid_chars = ['\n', '\r', '\t', ' ']
    if any(char in key for char in invalid_chars):
        return False

    return True
