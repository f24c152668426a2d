"""
Tracking Commands
------------------

Commands that create or change kizami.

Commands:
    - start: Start a new kizami
    - restart: Start a new kizami with the description of an old one
    - stop: Stop one kizami, or every running one
    - edit: Edit description and times in $EDITOR
    - delete: Delete a kizami
"""
import click

from kokizami.core.cli_utils import format_kizami
from kokizami.core.exceptions import DatabaseError, ValidationError
from kokizami.core.logging_manager import handle_cli_error
from kokizami.core.validators import REOPEN_MARKER, DataValidator
from . import get_kokizami


def _first_line(text):
    return text.split("\n", 1)[0].rstrip("\r") if text else ""


@click.command()
@click.argument("desc", required=False)
@click.option(
    "-s", "--stop", "stop_running", is_flag=True,
    help="Stop all running kizami in advance",
)
@click.pass_context
def start(ctx, desc, stop_running):
    """Start a new kizami (opens $EDITOR when DESC is omitted)."""
    try:
        if desc is None:
            desc = _first_line(click.edit(""))

        kkzm = get_kokizami(ctx)
        kizami = kkzm.start(desc, stop_running=stop_running)
        click.echo(format_kizami(kizami, kkzm.now()))

    except (ValidationError, DatabaseError) as e:
        handle_cli_error(ctx, e, "start", additional_context={"desc": desc})


@click.command()
@click.argument("kizami_id", type=int)
@click.option(
    "-s", "--stop", "stop_running", is_flag=True,
    help="Stop all running kizami in advance",
)
@click.pass_context
def restart(ctx, kizami_id, stop_running):
    """Start a new kizami with the description of KIZAMI_ID."""
    try:
        kkzm = get_kokizami(ctx)
        kizami = kkzm.restart(kizami_id, stop_running=stop_running)
        click.echo(format_kizami(kizami, kkzm.now()))

    except (ValidationError, DatabaseError) as e:
        handle_cli_error(ctx, e, "restart", additional_context={"id": kizami_id})


@click.command()
@click.argument("kizami_id", type=int, required=False)
@click.pass_context
def stop(ctx, kizami_id):
    """Stop KIZAMI_ID, or every running kizami when no id is given."""
    try:
        kkzm = get_kokizami(ctx)

        if kizami_id is None:
            count = kkzm.stop_all()
            click.echo(f"Stopped {count} kizami")
            return

        kizami = kkzm.stop(kizami_id)
        click.echo(format_kizami(kizami, kkzm.now()))

    except (ValidationError, DatabaseError) as e:
        handle_cli_error(ctx, e, "stop", additional_context={"id": kizami_id})


@click.command()
@click.argument("kizami_id", type=int)
@click.pass_context
def edit(ctx, kizami_id):
    """
    Edit KIZAMI_ID in $EDITOR.

    The editor shows three lines: description, start time and stop time
    (YYYY-MM-DD HH:MM:SS, local time). A stop time of "-" makes the kizami
    running again.
    """
    try:
        kkzm = get_kokizami(ctx)
        kizami = kkzm.get(kizami_id)

        if kizami.stopped_at is None:
            stopped = REOPEN_MARKER
        else:
            stopped = DataValidator.format_timestamp(kizami.stopped_at, kkzm.tz)

        text = click.edit(
            "\n".join(
                [
                    kizami.desc,
                    DataValidator.format_timestamp(kizami.started_at, kkzm.tz),
                    stopped,
                ]
            )
        )
        if text is None:
            click.echo("Edit cancelled, nothing changed")
            return

        lines = [line.rstrip("\r") for line in text.split("\n")]
        if len(lines) < 3:
            raise ValidationError(
                "Edited text needs three lines: desc, started_at, stopped_at"
            )

        kizami = kkzm.edit(kizami_id, lines[0], lines[1], lines[2])
        click.echo(format_kizami(kizami, kkzm.now()))

    except (ValidationError, DatabaseError) as e:
        handle_cli_error(ctx, e, "edit", additional_context={"id": kizami_id})


@click.command()
@click.argument("kizami_id", type=int)
@click.pass_context
def delete(ctx, kizami_id):
    """Delete KIZAMI_ID and its tag relations."""
    try:
        get_kokizami(ctx).delete(kizami_id)
        click.echo(f"Deleted kizami {kizami_id}")

    except (ValidationError, DatabaseError) as e:
        handle_cli_error(ctx, e, "delete", additional_context={"id": kizami_id})
