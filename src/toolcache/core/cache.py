"""Bounded, time-aware in-memory cache for tooling scripts.

Provides a key/value store with two independent eviction pressures:

- a hard capacity limit, enforced oldest-in first-out (by first insertion,
  never by access)
- a per-entry time-to-live, evaluated lazily on read

plus an optional admission guard that refuses oversized string values.

Expired entries are not removed by reads. They linger (and count towards
``size``) until ``prune()`` sweeps them or capacity eviction reaches them.

Usage:
    from toolcache.core.cache import BoundedExpiringCache, MISSING

    cache = BoundedExpiringCache(max_size=50, ttl_ms=5000)
    cache.set("repo-scan", results)

    hit = cache.get("repo-scan")
    if hit is MISSING:
        ...
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional

__all__ = [
    "DEFAULT_MAX_SIZE",
    "DEFAULT_TTL_MS",
    "MISSING",
    "BoundedExpiringCache",
    "CacheConfigError",
    "CacheEntry",
    "monotonic_ms",
]

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 100
DEFAULT_TTL_MS = 60_000


def monotonic_ms() -> float:
    """Monotonic clock reading in milliseconds."""
    return time.monotonic() * 1000.0


class _Missing:
    """Sentinel type for cache misses.

    Distinct from ``None`` so that a stored ``None`` can be told apart
    from an absent or expired key.
    """

    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()
"""Returned by ``get`` when the key is absent or expired."""


class CacheConfigError(ValueError):
    """Raised when a cache is constructed with unusable settings."""

    def __init__(self, message: str, *, option: Optional[str] = None):
        super().__init__(message)
        self.option = option


@dataclass
class CacheEntry:
    """A stored value plus the clock reading (ms) of its last write."""

    key: Hashable
    value: Any
    stored_at: float


def _validate(max_size: Any, ttl_ms: Any, max_value_size: Any) -> None:
    if isinstance(max_size, bool) or not isinstance(max_size, int) or max_size < 1:
        raise CacheConfigError(
            f"max_size must be a positive integer, got {max_size!r}",
            option="max_size",
        )
    if (
        isinstance(ttl_ms, bool)
        or not isinstance(ttl_ms, (int, float))
        or not ttl_ms > 0
    ):
        raise CacheConfigError(
            f"ttl_ms must be a positive number of milliseconds, got {ttl_ms!r}",
            option="ttl_ms",
        )
    if max_value_size is not None and (
        isinstance(max_value_size, bool)
        or not isinstance(max_value_size, int)
        or max_value_size < 0
    ):
        raise CacheConfigError(
            f"max_value_size must be None or a non-negative integer, got {max_value_size!r}",
            option="max_value_size",
        )


class BoundedExpiringCache:
    """FIFO-bounded key/value cache with lazy TTL expiry.

    Not thread-safe. One logical owner per instance; callers sharing an
    instance across threads must serialize access themselves.

    Values are stored by reference. Mutating a value after ``set`` (or
    after ``get``) mutates the cached copy too.
    """

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        ttl_ms: float = DEFAULT_TTL_MS,
        max_value_size: Optional[int] = None,
        *,
        clock: Optional[Callable[[], float]] = None,
    ):
        """Initialize the cache.

        Args:
            max_size: Entries kept before FIFO eviction begins (>= 1).
            ttl_ms: Freshness window in milliseconds (> 0).
            max_value_size: Maximum length of ``str`` values. ``None``
                disables the check. Non-string values are never checked.
            clock: Callable returning the current time in milliseconds.
                Defaults to a monotonic millisecond clock.

        Raises:
            CacheConfigError: If any setting is out of range.
        """
        _validate(max_size, ttl_ms, max_value_size)
        self._max_size = max_size
        self._ttl_ms = ttl_ms
        self._max_value_size = max_value_size
        self._clock = clock or monotonic_ms
        # Dict order is first-admission order; overwrites keep their slot.
        self._entries: "OrderedDict[Hashable, CacheEntry]" = OrderedDict()

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def ttl_ms(self) -> float:
        return self._ttl_ms

    @property
    def max_value_size(self) -> Optional[int]:
        return self._max_value_size

    @property
    def size(self) -> int:
        """Number of stored entries, including expired ones not yet pruned."""
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return self.has(key)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(max_size={self._max_size}, "
            f"ttl_ms={self._ttl_ms}, max_value_size={self._max_value_size}, "
            f"size={len(self._entries)})"
        )

    def _is_fresh(self, entry: CacheEntry, now: float) -> bool:
        return (now - entry.stored_at) < self._ttl_ms

    def set(self, key: Hashable, value: Any) -> bool:
        """Store ``value`` under ``key``.

        ``key`` may be any hashable object; unhashable keys such as lists
        raise ``TypeError`` and leave the cache unchanged.

        Overwriting an existing key refreshes its value and timestamp but
        keeps its position in eviction order. Inserting a new key may evict
        the oldest admitted entries until the cache is back within
        ``max_size``.

        Returns:
            False if the value was refused by the string length guard
            (any existing entry is left untouched), True otherwise.
        """
        if (
            self._max_value_size is not None
            and isinstance(value, str)
            and len(value) > self._max_value_size
        ):
            logger.debug(
                "Rejected oversized cache value",
                extra={
                    "cache_key": repr(key),
                    "value_length": len(value),
                    "max_value_size": self._max_value_size,
                },
            )
            return False

        now = self._clock()
        entry = self._entries.get(key)
        if entry is not None:
            entry.value = value
            entry.stored_at = now
            return True

        self._entries[key] = CacheEntry(key=key, value=value, stored_at=now)
        while len(self._entries) > self._max_size:
            evicted_key, _ = self._entries.popitem(last=False)
            logger.debug(
                "Evicted oldest cache entry",
                extra={"cache_key": repr(evicted_key), "max_size": self._max_size},
            )
        return True

    def get(self, key: Hashable, default: Any = MISSING) -> Any:
        """Return the value for ``key`` if present and fresh, else ``default``.

        Expired entries are left in place; see ``prune``.
        """
        entry = self._entries.get(key)
        if entry is None or not self._is_fresh(entry, self._clock()):
            return default
        return entry.value

    def has(self, key: Hashable) -> bool:
        """Return True if ``key`` is present and not expired."""
        entry = self._entries.get(key)
        return entry is not None and self._is_fresh(entry, self._clock())

    def delete(self, key: Hashable) -> bool:
        """Remove ``key`` whether or not it has expired.

        Returns:
            True if an entry was removed, False if the key was absent.
        """
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Remove every entry."""
        self._entries.clear()

    def prune(self) -> int:
        """Remove all expired entries.

        Returns:
            Number of entries removed.
        """
        now = self._clock()
        expired = [
            key for key, entry in self._entries.items() if not self._is_fresh(entry, now)
        ]
        for key in expired:
            del self._entries[key]

        if expired:
            logger.debug(
                "Pruned expired cache entries",
                extra={"removed": len(expired), "remaining": len(self._entries)},
            )
        return len(expired)

    def get_stats(self) -> Dict[str, Any]:
        """Get a snapshot of occupancy and configuration.

        Returns:
            Dict with ``size``, ``max_size``, ``ttl`` (milliseconds) and
            ``max_value_size``.
        """
        return {
            "size": len(self._entries),
            "max_size": self._max_size,
            "ttl": self._ttl_ms,
            "max_value_size": self._max_value_size,
        }
