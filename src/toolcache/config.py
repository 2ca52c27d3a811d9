"""
Configuration for toolcache.

Supports configuration via:
1. Environment variables (highest priority)
2. TOML config file (toolcache.toml)
3. Default values (lowest priority)

Environment variables:
- TOOLCACHE_CONFIG_FILE: Path to TOML config file
- TOOLCACHE_MAX_SIZE: Entries kept before FIFO eviction (default 100)
- TOOLCACHE_TTL_MS: Entry freshness window in milliseconds (default 60000)
- TOOLCACHE_MAX_VALUE_SIZE: Max length of cached string values (default: unlimited)
- TOOLCACHE_FILE_CACHE_MAX_SIZE: Entries per file cache (default 100)
- TOOLCACHE_FILE_CACHE_TTL_MS: File cache freshness window (default 60000)
- TOOLCACHE_MAX_FILE_SIZE: Largest file content kept in the file cache (default 65536)
- TOOLCACHE_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
- TOOLCACHE_STRUCTURED_LOGGING: JSON log lines (true/false)

Example toolcache.toml:

    [cache]
    max_size = 200
    ttl_ms = 30000
    max_value_size = 4096

    [file_cache]
    max_file_size = 32768

    [logging]
    level = "DEBUG"
    structured = false
"""

import logging
import os
from dataclasses import dataclass, field
from importlib.metadata import version as get_package_version, PackageNotFoundError
from pathlib import Path
from typing import Any, Dict, Optional, Union

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # Python < 3.11 fallback

from toolcache.core.cache import (
    DEFAULT_MAX_SIZE,
    DEFAULT_TTL_MS,
    BoundedExpiringCache,
)
from toolcache.core.file_cache import (
    DEFAULT_FILE_CACHE_SIZE,
    DEFAULT_FILE_CACHE_TTL_MS,
    MAX_CACHED_FILE_SIZE,
    FileCache,
)
from toolcache.core.logging_config import configure_logging


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILES = ("toolcache.toml", ".toolcache.toml")


def _get_version() -> str:
    """Get package version from metadata (single source of truth: pyproject.toml)."""
    try:
        return get_package_version("toolcache")
    except PackageNotFoundError:
        return "0.1.0"  # Fallback for dev without install


_PACKAGE_VERSION = _get_version()


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"true", "1", "yes", "on"}


def _parse_optional_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    text = str(value).strip().lower()
    if text in {"", "none", "null", "unlimited"}:
        return None
    return int(text)


def _parse_ttl(value: Any) -> Union[int, float]:
    """Parse a TTL, keeping fractional milliseconds."""
    if isinstance(value, (int, float)):
        return value
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        return float(text)


def _env_ttl(name: str) -> Optional[Union[int, float]]:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return _parse_ttl(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric value for %s: %r", name, raw)
        return None


def _env_int(name: str) -> Optional[int]:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer value for %s: %r", name, raw)
        return None


@dataclass
class CacheSettings:
    """Settings for general-purpose result caches.

    Attributes:
        max_size: Entries kept before FIFO eviction
        ttl_ms: Freshness window in milliseconds
        max_value_size: Max length for string values (None = unlimited)
    """

    max_size: int = DEFAULT_MAX_SIZE
    ttl_ms: float = DEFAULT_TTL_MS
    max_value_size: Optional[int] = None

    @classmethod
    def from_toml_dict(cls, data: Dict[str, Any]) -> "CacheSettings":
        """Create settings from TOML dict (typically [cache] section)."""
        return cls(
            max_size=int(data.get("max_size", DEFAULT_MAX_SIZE)),
            ttl_ms=_parse_ttl(data.get("ttl_ms", DEFAULT_TTL_MS)),
            max_value_size=_parse_optional_int(data.get("max_value_size")),
        )

    def build(self) -> BoundedExpiringCache:
        """Construct a cache with these settings.

        Raises:
            CacheConfigError: If the settings are out of range.
        """
        return BoundedExpiringCache(
            max_size=self.max_size,
            ttl_ms=self.ttl_ms,
            max_value_size=self.max_value_size,
        )


@dataclass
class FileCacheSettings:
    """Settings for the file existence/content caches.

    Attributes:
        max_size: Entries per underlying cache
        ttl_ms: Freshness window in milliseconds
        max_file_size: Largest file content (in characters) that is cached
    """

    max_size: int = DEFAULT_FILE_CACHE_SIZE
    ttl_ms: float = DEFAULT_FILE_CACHE_TTL_MS
    max_file_size: int = MAX_CACHED_FILE_SIZE

    @classmethod
    def from_toml_dict(cls, data: Dict[str, Any]) -> "FileCacheSettings":
        """Create settings from TOML dict (typically [file_cache] section)."""
        return cls(
            max_size=int(data.get("max_size", DEFAULT_FILE_CACHE_SIZE)),
            ttl_ms=_parse_ttl(data.get("ttl_ms", DEFAULT_FILE_CACHE_TTL_MS)),
            max_file_size=int(data.get("max_file_size", MAX_CACHED_FILE_SIZE)),
        )

    def build(self) -> FileCache:
        """Construct a FileCache with two freshly built caches."""
        return FileCache(
            exists_cache=BoundedExpiringCache(
                max_size=self.max_size, ttl_ms=self.ttl_ms
            ),
            content_cache=BoundedExpiringCache(
                max_size=self.max_size,
                ttl_ms=self.ttl_ms,
                max_value_size=self.max_file_size,
            ),
        )


@dataclass
class ToolcacheConfig:
    """Configuration with support for env vars and TOML overrides."""

    cache: CacheSettings = field(default_factory=CacheSettings)
    file_cache: FileCacheSettings = field(default_factory=FileCacheSettings)

    # Logging configuration
    log_level: str = "WARNING"
    structured_logging: bool = True

    version: str = field(default_factory=lambda: _PACKAGE_VERSION)
    config_file: Optional[Path] = None

    @classmethod
    def from_env(cls, config_file: Optional[str] = None) -> "ToolcacheConfig":
        """
        Create configuration from environment variables and optional TOML file.

        Priority (highest to lowest):
        1. Environment variables
        2. TOML config file
        3. Default values
        """
        config = cls()

        toml_path = config_file or os.environ.get("TOOLCACHE_CONFIG_FILE")
        if toml_path:
            config._load_toml(Path(toml_path))
        else:
            for default_path in DEFAULT_CONFIG_FILES:
                if Path(default_path).exists():
                    config._load_toml(Path(default_path))
                    break

        config._load_env()

        return config

    def _load_toml(self, path: Path) -> None:
        """Load configuration from TOML file."""
        if not path.exists():
            logger.warning(f"Config file not found: {path}")
            return

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)

            if "cache" in data:
                self.cache = CacheSettings.from_toml_dict(data["cache"])

            if "file_cache" in data:
                self.file_cache = FileCacheSettings.from_toml_dict(data["file_cache"])

            if "logging" in data:
                log = data["logging"]
                if "level" in log:
                    self.log_level = str(log["level"]).upper()
                if "structured" in log:
                    self.structured_logging = _parse_bool(log["structured"])

            self.config_file = path

        except (OSError, tomllib.TOMLDecodeError, AttributeError, TypeError, ValueError) as e:
            logger.error(f"Error loading config file {path}: {e}")

    def _load_env(self) -> None:
        """Load configuration from environment variables."""
        if (max_size := _env_int("TOOLCACHE_MAX_SIZE")) is not None:
            self.cache.max_size = max_size
        if (ttl_ms := _env_ttl("TOOLCACHE_TTL_MS")) is not None:
            self.cache.ttl_ms = ttl_ms
        if (max_value := os.environ.get("TOOLCACHE_MAX_VALUE_SIZE")) is not None:
            try:
                self.cache.max_value_size = _parse_optional_int(max_value)
            except ValueError:
                logger.warning(
                    "Ignoring non-integer value for TOOLCACHE_MAX_VALUE_SIZE: %r",
                    max_value,
                )

        if (fc_size := _env_int("TOOLCACHE_FILE_CACHE_MAX_SIZE")) is not None:
            self.file_cache.max_size = fc_size
        if (fc_ttl := _env_ttl("TOOLCACHE_FILE_CACHE_TTL_MS")) is not None:
            self.file_cache.ttl_ms = fc_ttl
        if (max_file := _env_int("TOOLCACHE_MAX_FILE_SIZE")) is not None:
            self.file_cache.max_file_size = max_file

        if level := os.environ.get("TOOLCACHE_LOG_LEVEL"):
            self.log_level = level.upper()
        if structured := os.environ.get("TOOLCACHE_STRUCTURED_LOGGING"):
            self.structured_logging = _parse_bool(structured)

    def build_cache(self) -> BoundedExpiringCache:
        """Construct a result cache from the ``[cache]`` settings."""
        return self.cache.build()

    def build_file_cache(self) -> FileCache:
        """Construct a FileCache from the ``[file_cache]`` settings."""
        return self.file_cache.build()

    def setup_logging(self) -> None:
        """Configure logging based on settings."""
        configure_logging(
            level=self.log_level,
            format="structured" if self.structured_logging else "human",
        )

