"""Command registry for the toolcache CLI."""

import click

from toolcache.cli.config import CLIContext


def get_context(ctx: click.Context) -> CLIContext:
    """Get the CLI context stored on the root Click context.

    Raises:
        RuntimeError: If the command was invoked outside the ``cli`` group.
    """
    obj = ctx.find_root().obj
    if not obj or "cli_context" not in obj:
        raise RuntimeError("No CLI context available. Invoke commands through the cli group.")
    return obj["cli_context"]


def register_all_commands(cli: click.Group) -> None:
    """Register all command groups with the CLI.

    Args:
        cli: The main Click group to register commands with.
    """
    from toolcache.cli.commands import cache

    cli.add_command(cache)

    @cli.command("version")
    @click.pass_context
    def version(ctx: click.Context) -> None:
        """Show CLI version information."""
        from toolcache.cli.output import emit_success

        cli_ctx = get_context(ctx)
        emit_success(
            {
                "name": "toolcache",
                "version": cli_ctx.config.version,
            }
        )
