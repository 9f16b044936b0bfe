"""
Groupix CLI Application - Built with Click.

Commands:
    groupix copy-memories    Copy the newest `memories` rows from prod to dev
    groupix copy-storage     Copy bucket objects from prod to dev

Both commands are also installed as stand-alone `copy-memories` and
`copy-storage` scripts.

Exit status is 0 on success and 1 when configuration is missing, the row
copy fails, the bucket cannot be listed, or any object failed to copy.
"""

import asyncio
import dataclasses
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from groupix import __version__
from groupix.core.config import ObjectCopyConfig, RowCopyConfig
from groupix.core.credentials import describe_service_key
from groupix.core.env import DEFAULT_ENV_FILE, EnvManager
from groupix.core.exceptions import GroupixError, MissingConfigError
from groupix.core.logger import configure_logging, get_logger
from groupix.transfer.objects import copy_storage
from groupix.transfer.progress import TransferResult
from groupix.transfer.rows import copy_memories

console = Console()
logger = get_logger("groupix.cli")


class OrderedGroup(click.Group):
    """Click Group that lists commands in the order they were added."""

    def list_commands(self, ctx):
        return list(self.commands.keys())


@click.group(cls=OrderedGroup)
@click.version_option(version=__version__, prog_name="groupix")
def cli():
    """
    Groupix - copy production data into a development project.

    \b
    Commands:
        copy-memories    Copy the newest table rows (plain insert)
        copy-storage     Copy bucket objects (upsert, safe to re-run)

    \b
    Credentials are read from scripts/.env.copy (if present) layered over
    the process environment.
    """


# ============================================================================
# Shared helpers
# ============================================================================


env_file_option = click.option(
    "--env-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help=f"KEY=VALUE file with credentials (default: {DEFAULT_ENV_FILE})",
)
verbose_option = click.option("--verbose", "-v", is_flag=True, help="Verbose output")


def _load_config(config_cls, env_file: Path | None):
    """Build a job configuration or exit with status 1."""
    try:
        return config_cls.from_env(EnvManager.load(env_file))
    except MissingConfigError as e:
        for key in e.missing:
            click.echo(f"Missing env var: {key}", err=True)
        sys.exit(1)
    except GroupixError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)


def _apply_overrides(config, **overrides):
    """Replace config fields with the command line values that were given."""
    given = {key: value for key, value in overrides.items() if value is not None}
    if not given:
        return config
    try:
        return dataclasses.replace(config, **given)
    except GroupixError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)


def _log_keys(config) -> None:
    logger.info(describe_service_key("Prod", config.source.service_key))
    logger.info(describe_service_key("Dev ", config.target.service_key))


def _display_summary(result: TransferResult) -> None:
    table = Table(title="Transfer Summary", show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value")
    table.add_row("Enumerated", str(result.total))
    table.add_row("Success", f"[green]{result.transferred}[/green]")
    table.add_row("Failed", f"[red]{result.failed}[/red]" if result.failed else "0")
    table.add_row("Avg rate", f"{result.files_per_second:.2f} files/s")
    console.print(table)


# ============================================================================
# groupix copy-memories
# ============================================================================


@click.command("copy-memories")
@env_file_option
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Rows to copy (MEMORIES_LIMIT, default 500)")
@click.option("--table", default=None, help="Table to copy (default: memories)")
@verbose_option
def copy_memories_cmd(env_file: Path | None, limit: int | None, table: str | None, verbose: bool):
    """
    Copy the newest rows of the memories table from prod to dev.

    \b
    Rows are inserted without their id, so running this twice inserts
    the rows twice.
    """
    configure_logging(verbose)
    config = _apply_overrides(_load_config(RowCopyConfig, env_file), limit=limit, table=table)
    _log_keys(config)

    try:
        result = asyncio.run(copy_memories(config))
    except GroupixError as e:
        logger.error(f"Copy failed: {e}")
        sys.exit(1)

    if result.inserted:
        console.print(f"[green]✓ {result.inserted} rows copied[/green]")
    else:
        console.print("[yellow]No rows to copy[/yellow]")


# ============================================================================
# groupix copy-storage
# ============================================================================


@click.command("copy-storage")
@env_file_option
@click.option("--bucket", default=None, help="Bucket to copy (SUPABASE_BUCKET)")
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Objects to copy (COPY_LIMIT, default 1000)")
@click.option(
    "--concurrency",
    "-c",
    type=click.IntRange(min=1),
    default=None,
    help="Transfers in flight (COPY_CONCURRENCY, default 3)",
)
@click.option(
    "--log-every",
    type=click.IntRange(min=1),
    default=None,
    help="Progress line every N files (COPY_LOG_EVERY, default 25)",
)
@verbose_option
def copy_storage_cmd(
    env_file: Path | None,
    bucket: str | None,
    limit: int | None,
    concurrency: int | None,
    log_every: int | None,
    verbose: bool,
):
    """
    Copy objects of a storage bucket from prod to dev.

    \b
    Objects are uploaded with upsert, so re-running overwrites instead of
    duplicating. Failed objects are reported and make the exit status 1;
    objects copied successfully stay in place.
    """
    configure_logging(verbose)
    config = _apply_overrides(
        _load_config(ObjectCopyConfig, env_file),
        bucket=bucket,
        limit=limit,
        concurrency=concurrency,
        log_every=log_every,
    )
    _log_keys(config)

    console.print(
        Panel(
            f"Bucket: {config.bucket}\n"
            f"Limit: {config.limit}\n"
            f"Concurrency: {config.concurrency}",
            title="Storage Copy",
            border_style="blue",
        )
    )

    try:
        result = asyncio.run(copy_storage(config))
    except GroupixError as e:
        logger.error(f"Copy failed: {e}")
        sys.exit(1)

    _display_summary(result)
    if not result.success:
        sys.exit(1)


cli.add_command(copy_memories_cmd)
cli.add_command(copy_storage_cmd)
