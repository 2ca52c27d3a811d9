"""toolcache - bounded, expiring in-memory caches for developer tooling."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("toolcache")
except PackageNotFoundError:
    # Package not installed (development mode without editable install)
    __version__ = "0.1.0"

from toolcache.core.cache import (
    MISSING,
    BoundedExpiringCache,
    CacheConfigError,
)
from toolcache.core.file_cache import FileCache

__all__ = [
    "__version__",
    "MISSING",
    "BoundedExpiringCache",
    "CacheConfigError",
    "FileCache",
]
