"""Structured logging hooks for CLI commands.

Each command runs inside a correlation context so that its log records and
its response envelope share one ID.
"""

import logging
import time
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

from toolcache.core.context import sync_run_context

__all__ = [
    "cli_command",
    "get_cli_logger",
    "CLILogger",
]

T = TypeVar("T")


class CLILogger:
    """Logger for CLI commands that passes keyword context as ``extra``."""

    def __init__(self, name: str = "toolcache.cli"):
        self._logger = logging.getLogger(name)

    def _log(self, level: int, message: str, **extra: Any) -> None:
        self._logger.log(level, message, extra={"cli_context": extra})

    def debug(self, message: str, **extra: Any) -> None:
        self._log(logging.DEBUG, message, **extra)


_cli_logger = CLILogger()


def get_cli_logger() -> CLILogger:
    """Get the shared CLI logger."""
    return _cli_logger


def cli_command(
    command_name: Optional[str] = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator for CLI commands.

    Sets a correlation ID for the duration of the command and logs
    start and completion (with duration) at DEBUG level.

    Args:
        command_name: Override command name (defaults to function name).

    Example:
        >>> @cli_command("probe")
        ... def probe_cmd(paths):
        ...     ...
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        name = command_name or func.__name__

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            with sync_run_context(prefix="cli"):
                start = time.perf_counter()
                success = True
                error_msg = None

                _cli_logger.debug(f"CLI command started: {name}", command=name)

                try:
                    return func(*args, **kwargs)
                except SystemExit as e:
                    # emit_error exits with a non-zero status
                    success = not e.code
                    raise
                except Exception as e:
                    success = False
                    error_msg = str(e)
                    raise
                finally:
                    duration_ms = (time.perf_counter() - start) * 1000
                    _cli_logger.debug(
                        f"CLI command completed: {name}",
                        command=name,
                        success=success,
                        duration_ms=round(duration_ms, 2),
                        error=error_msg,
                    )

        return wrapper

    return decorator
