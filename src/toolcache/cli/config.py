"""CLI configuration context.

Wraps ``toolcache.config.ToolcacheConfig`` with the overrides given on
the command line.
"""

from typing import Optional

from toolcache.config import ToolcacheConfig


class CLIContext:
    """CLI execution context with resolved configuration."""

    def __init__(
        self,
        config_file: Optional[str] = None,
        log_level: Optional[str] = None,
        config: Optional[ToolcacheConfig] = None,
    ):
        """Initialize CLI context.

        Args:
            config_file: Explicit TOML path from --config.
            log_level: Log level override from --log-level.
            config: Prebuilt configuration (skips env/TOML loading).
        """
        self._config = config or ToolcacheConfig.from_env(config_file=config_file)
        if log_level:
            self._config.log_level = log_level.upper()

    @property
    def config(self) -> ToolcacheConfig:
        """Get the effective configuration."""
        return self._config


def create_context(
    config_file: Optional[str] = None,
    log_level: Optional[str] = None,
) -> CLIContext:
    """Create a CLI context and apply its logging settings.

    Args:
        config_file: Optional TOML config path.
        log_level: Optional log level override.

    Returns:
        Configured CLIContext instance.
    """
    ctx = CLIContext(config_file=config_file, log_level=log_level)
    ctx.config.setup_logging()
    return ctx
