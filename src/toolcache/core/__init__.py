"""Core cache primitives for toolcache."""

from toolcache.core.cache import (
    DEFAULT_MAX_SIZE,
    DEFAULT_TTL_MS,
    MISSING,
    BoundedExpiringCache,
    CacheConfigError,
    CacheEntry,
)

from toolcache.core.file_cache import (
    MAX_CACHED_FILE_SIZE,
    FileCache,
)

__all__ = [
    "DEFAULT_MAX_SIZE",
    "DEFAULT_TTL_MS",
    "MISSING",
    "BoundedExpiringCache",
    "CacheConfigError",
    "CacheEntry",
    "MAX_CACHED_FILE_SIZE",
    "FileCache",
]
