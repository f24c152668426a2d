#!/usr/bin/env python3
"""
Kokizami CLI
-------------

Command-line interface for the kokizami time tracker.

This module provides the main CLI group and shared context setup for all
kkzm commands. Running ``kkzm`` without a command lists every kizami.

Command Structure:
    - Tracking (start, restart, stop, edit, delete)
    - Reports (list, summary, tags)

Usage:
    kkzm start "write spec #docs"
    kkzm stop
    kkzm summary --month 2024-05
"""
import click
from pathlib import Path

from kokizami.core.paths import DB_ENV_VAR, DB_PATH, LOG_DIR, LOG_DIR_ENV_VAR
from kokizami.database import KokizamiDB
from kokizami.kokizami import Kokizami


@click.group(invoke_without_command=True)
@click.option(
    "--db-path",
    type=click.Path(),
    default=str(DB_PATH),
    envvar=DB_ENV_VAR,
    help="Path to database file",
)
@click.option(
    "--log-dir",
    type=click.Path(),
    default=str(LOG_DIR),
    envvar=LOG_DIR_ENV_VAR,
    help="Path to log directory",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Show detailed errors and tracebacks",
)
@click.pass_context
def cli(ctx, db_path, log_dir, verbose):
    """kokizami: track what you are working on"""
    ctx.ensure_object(dict)
    ctx.obj["db_path"] = Path(db_path)
    ctx.obj["log_dir"] = Path(log_dir)
    ctx.obj["verbose"] = verbose

    if ctx.invoked_subcommand is None:
        ctx.invoke(cli.get_command(ctx, "list"))


def get_kokizami(ctx) -> Kokizami:
    """Get or create the Kokizami facade from context."""
    if "kokizami" not in ctx.obj:
        db = KokizamiDB(db_path=ctx.obj["db_path"], log_dir=ctx.obj["log_dir"])
        ctx.obj["db"] = db
        ctx.obj["logger"] = db.logger
        ctx.obj["kokizami"] = Kokizami(db)
    return ctx.obj["kokizami"]


def main() -> None:
    """Console script entry point."""
    cli(obj={})


# Import and register command modules
# These imports must come after CLI group definition
from .tracking import start, restart, stop, edit, delete  # noqa: E402
from .reports import list_kizami, summary, tags  # noqa: E402

cli.add_command(start)
cli.add_command(restart)
cli.add_command(stop)
cli.add_command(edit)
cli.add_command(delete)
cli.add_command(list_kizami)
cli.add_command(summary)
cli.add_command(tags)


if __name__ == "__main__":
    main()
