"""toolcache CLI - inspect cache settings and probe the file cache.

All commands emit structured JSON to stdout for reliable parsing.
"""

from toolcache.cli.config import CLIContext, create_context
from toolcache.cli.logging import cli_command, get_cli_logger
from toolcache.cli.main import cli
from toolcache.cli.output import emit, emit_error, emit_success
from toolcache.cli.registry import get_context

__all__ = [
    # Entry point
    "cli",
    # Context
    "CLIContext",
    "create_context",
    "get_context",
    # Output
    "emit",
    "emit_error",
    "emit_success",
    # Logging
    "cli_command",
    "get_cli_logger",
]
