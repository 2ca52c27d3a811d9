"""
Root pytest configuration and shared fixtures.

Provides a controllable clock for TTL tests and an isolated environment
for configuration/CLI tests.
"""

import logging
import os
from typing import Callable, Optional

import pytest

from toolcache.core.cache import BoundedExpiringCache


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: int = 1_000_000):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FakeClock:
    """A fake clock starting at an arbitrary non-zero time."""
    return FakeClock()


@pytest.fixture
def make_cache(clock: FakeClock) -> Callable[..., BoundedExpiringCache]:
    """Factory for caches bound to the fake clock."""

    def _make(
        max_size: int = 100,
        ttl_ms: float = 60_000,
        max_value_size: Optional[int] = None,
    ) -> BoundedExpiringCache:
        return BoundedExpiringCache(
            max_size=max_size,
            ttl_ms=ttl_ms,
            max_value_size=max_value_size,
            clock=clock,
        )

    return _make


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Run in an empty directory with no TOOLCACHE_* variables set."""
    for key in list(os.environ):
        if key.startswith("TOOLCACHE_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    yield tmp_path
    # CLI runs attach handlers to streams that are closed afterwards
    logging.getLogger("toolcache").handlers.clear()
