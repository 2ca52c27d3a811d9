"""Correlation context for log records and CLI responses.

A run of a tooling script (one CLI command, one scan) gets a correlation ID
stored in a context variable. Log records and response envelopes pick it up
without it being passed around explicitly.

Usage:
    from toolcache.core.context import sync_run_context, get_correlation_id

    with sync_run_context() as ctx:
        print(ctx.correlation_id)  # e.g., "run_a1b2c3d4e5f6"
"""

from __future__ import annotations

import secrets
import time
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Generator, Optional

__all__ = [
    "correlation_id_var",
    "start_time_var",
    "RunContext",
    "generate_correlation_id",
    "sync_run_context",
    "get_correlation_id",
    "get_start_time",
]

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")
"""Correlation ID for the current run."""

start_time_var: ContextVar[float] = ContextVar("start_time", default=0.0)
"""Run start time as Unix timestamp."""


def generate_correlation_id(prefix: str = "run") -> str:
    """Generate a unique correlation ID.

    Format: {prefix}_{12_hex_chars}

    Args:
        prefix: ID prefix (default: "run")

    Returns:
        Unique correlation ID string
    """
    return f"{prefix}_{secrets.token_hex(6)}"


@dataclass
class RunContext:
    """Snapshot of the context set up by ``sync_run_context``."""

    correlation_id: str = ""
    start_time: float = field(default_factory=time.time)


@contextmanager
def sync_run_context(
    *,
    correlation_id: Optional[str] = None,
    prefix: str = "run",
) -> Generator[RunContext, None, None]:
    """Set the correlation context for the duration of the with block.

    Args:
        correlation_id: Explicit ID (auto-generated if None)
        prefix: Prefix used when generating an ID

    Yields:
        RunContext snapshot
    """
    corr_id = correlation_id or generate_correlation_id(prefix)
    start = time.time()

    token_corr = correlation_id_var.set(corr_id)
    token_start = start_time_var.set(start)
    try:
        yield RunContext(correlation_id=corr_id, start_time=start)
    finally:
        correlation_id_var.reset(token_corr)
        start_time_var.reset(token_start)


def get_correlation_id() -> str:
    """Get the current correlation ID, or empty string outside a run."""
    return correlation_id_var.get()


def get_start_time() -> float:
    """Get the current run start time, or 0.0 outside a run."""
    return start_time_var.get()
