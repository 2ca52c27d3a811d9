"""Cache commands for the toolcache CLI.

Provides commands for inspecting effective cache settings and for probing
files through the file cache.
"""

from typing import Any, Dict, NoReturn, Tuple

import click

from toolcache.cli.logging import cli_command, get_cli_logger
from toolcache.cli.output import emit_error, emit_success
from toolcache.cli.registry import get_context
from toolcache.core.cache import CacheConfigError
from toolcache.core.file_cache import FileCache
from toolcache.core.responses import ErrorCode, ErrorType

logger = get_cli_logger()


def _invalid_config(exc: CacheConfigError) -> NoReturn:
    emit_error(
        f"Invalid cache configuration: {exc}",
        code=ErrorCode.INVALID_CONFIG.value,
        error_type=ErrorType.VALIDATION.value,
        remediation="Check the [cache]/[file_cache] sections and TOOLCACHE_* variables",
        details={"option": exc.option} if exc.option else None,
    )


@click.group("cache")
def cache() -> None:
    """In-memory cache inspection."""
    pass


@cache.command("info")
@click.pass_context
@cli_command("info")
def cache_info_cmd(ctx: click.Context) -> None:
    """Show effective cache settings and statistics.

    Builds the configured caches to validate the settings and reports
    their initial stats.
    """
    config = get_context(ctx).config

    try:
        result_cache = config.build_cache()
        file_cache = config.build_file_cache()
    except CacheConfigError as exc:
        _invalid_config(exc)

    emit_success(
        {
            "config_file": str(config.config_file) if config.config_file else None,
            "cache": result_cache.get_stats(),
            "file_cache": file_cache.stats(),
        }
    )


@cache.command("probe")
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=False))
@click.option(
    "--passes",
    type=int,
    default=2,
    show_default=True,
    help="How many times each path is read through the cache.",
)
@click.pass_context
@cli_command("probe")
def cache_probe_cmd(ctx: click.Context, paths: Tuple[str, ...], passes: int) -> None:
    """Read PATHS through the file cache and report hits and misses.

    The first pass populates the cache; later passes should be served
    from it unless a file is too large to cache.
    """
    if passes < 1:
        emit_error(
            f"passes must be at least 1, got {passes}",
            code=ErrorCode.VALIDATION_ERROR.value,
            error_type=ErrorType.VALIDATION.value,
            remediation="Pass --passes 1 or higher",
        )

    config = get_context(ctx).config
    try:
        file_cache: FileCache = config.build_file_cache()
    except CacheConfigError as exc:
        _invalid_config(exc)

    files: Dict[str, Dict[str, Any]] = {}
    for _ in range(passes):
        for path in paths:
            exists = file_cache.exists(path)
            content = file_cache.read_text(path)
            files[path] = {
                "path": FileCache.normalize(path),
                "exists": exists,
                "size": len(content) if content is not None else None,
            }

    for report in files.values():
        report["cached"] = file_cache.content_cache.has(report["path"])

    logger.debug(
        "Probe finished",
        paths=len(paths),
        passes=passes,
        hits=file_cache.hits,
        misses=file_cache.misses,
    )

    emit_success(
        {
            "passes": passes,
            "files": files,
            "stats": file_cache.stats(),
        }
    )
