"""CLI command groups."""

from toolcache.cli.commands.cache import cache

__all__ = [
    "cache",
]
