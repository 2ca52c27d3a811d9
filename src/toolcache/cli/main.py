"""toolcache CLI entry point.

JSON-only output for scripts and AI coding assistants.
"""

import click

from toolcache.cli.config import create_context
from toolcache.cli.registry import register_all_commands


@click.group()
@click.option(
    "--config",
    "config_file",
    envvar="TOOLCACHE_CONFIG_FILE",
    type=click.Path(exists=False, dir_okay=False),
    help="Path to a toolcache.toml config file",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Override the configured log level",
)
@click.pass_context
def cli(ctx: click.Context, config_file: str | None, log_level: str | None) -> None:
    """toolcache - bounded, expiring caches for tooling scripts.

    All commands output JSON for reliable parsing.
    """
    ctx.ensure_object(dict)
    ctx.obj["cli_context"] = create_context(config_file=config_file, log_level=log_level)


register_all_commands(cli)


if __name__ == "__main__":
    cli()
