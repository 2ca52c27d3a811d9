"""Cached file-system probes for repository scanners.

Project detectors ask the same questions many times per run ("does
``pyproject.toml`` exist?", "what is in ``package.json``?"). ``FileCache``
answers them from two ``BoundedExpiringCache`` instances: one for
existence checks and one for file contents. Content caching is capped per
file so a single large file cannot crowd out the rest.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from toolcache.core.cache import MISSING, BoundedExpiringCache

__all__ = [
    "DEFAULT_FILE_CACHE_SIZE",
    "DEFAULT_FILE_CACHE_TTL_MS",
    "MAX_CACHED_FILE_SIZE",
    "FileCache",
]

logger = logging.getLogger(__name__)

DEFAULT_FILE_CACHE_SIZE = 100
DEFAULT_FILE_CACHE_TTL_MS = 60_000

# 64KB max per cached file
MAX_CACHED_FILE_SIZE = 64 * 1024

PathLike = Union[str, Path]


class FileCache:
    """Existence and content cache keyed by normalized absolute path.

    Missing files are cached too: ``read_text`` stores ``None`` for them,
    which the underlying cache keeps apart from a miss.
    """

    def __init__(
        self,
        exists_cache: Optional[BoundedExpiringCache] = None,
        content_cache: Optional[BoundedExpiringCache] = None,
    ):
        """Initialize the file cache.

        Args:
            exists_cache: Cache for existence checks. Defaults to a
                100-entry, one-minute cache.
            content_cache: Cache for file contents. Defaults to a
                100-entry, one-minute cache refusing files over 64KB.
        """
        # Explicit None checks: an empty cache is falsy (len() == 0).
        if exists_cache is None:
            exists_cache = BoundedExpiringCache(
                max_size=DEFAULT_FILE_CACHE_SIZE, ttl_ms=DEFAULT_FILE_CACHE_TTL_MS
            )
        if content_cache is None:
            content_cache = BoundedExpiringCache(
                max_size=DEFAULT_FILE_CACHE_SIZE,
                ttl_ms=DEFAULT_FILE_CACHE_TTL_MS,
                max_value_size=MAX_CACHED_FILE_SIZE,
            )
        self.exists_cache = exists_cache
        self.content_cache = content_cache
        self.hits = 0
        self.misses = 0
        self.rejected = 0

    @staticmethod
    def normalize(path: PathLike) -> str:
        """Resolve ``path`` so ``./foo``, ``foo`` and ``/abs/foo`` share an entry."""
        return str(Path(path).expanduser().resolve())

    def exists(self, path: PathLike) -> bool:
        """Return whether ``path`` exists, consulting the cache first."""
        key = self.normalize(path)
        cached = self.exists_cache.get(key)
        if cached is not MISSING:
            self.hits += 1
            return cached

        self.misses += 1
        found = Path(key).exists()
        self.exists_cache.set(key, found)
        return found

    def read_text(self, path: PathLike) -> Optional[str]:
        """Return the UTF-8 contents of ``path``, or None if it cannot be read.

        Entries are keyed by path alone, so the decoding is fixed.

        Files larger than the content cache's ``max_value_size`` are read
        and returned but not stored.
        """
        key = self.normalize(path)
        cached = self.content_cache.get(key)
        if cached is not MISSING:
            self.hits += 1
            return cached

        self.misses += 1
        try:
            content: Optional[str] = Path(key).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug(
                "File not readable, caching miss",
                extra={"path": key, "error": str(exc)},
            )
            content = None

        if not self.content_cache.set(key, content):
            self.rejected += 1
            logger.debug(
                "File too large to cache",
                extra={"path": key, "max_value_size": self.content_cache.max_value_size},
            )
        return content

    def prune(self) -> int:
        """Drop expired entries from both caches.

        Returns:
            Total number of entries removed.
        """
        return self.exists_cache.prune() + self.content_cache.prune()

    def clear(self) -> None:
        """Empty both caches and reset the counters."""
        self.exists_cache.clear()
        self.content_cache.clear()
        self.hits = 0
        self.misses = 0
        self.rejected = 0

    def stats(self) -> Dict[str, Any]:
        """Get counters plus the stats of each underlying cache."""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "rejected": self.rejected,
            "exists_cache": self.exists_cache.get_stats(),
            "content_cache": self.content_cache.get_stats(),
        }
