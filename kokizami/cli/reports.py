"""
Report Commands
----------------

Read-only views of the kizami log.

Commands:
    - list: All kizami, one tab-separated row each
    - summary: Elapsed time of a month per tag and description
    - tags: All tags, or the tags of one kizami
"""
import click

from kokizami.core.cli_utils import format_kizami, format_summary, this_month
from kokizami.core.exceptions import DatabaseError, ValidationError
from kokizami.core.logging_manager import handle_cli_error
from . import get_kokizami


@click.command("list")
@click.pass_context
def list_kizami(ctx):
    """Show all kizami."""
    try:
        kkzm = get_kokizami(ctx)
        kizamis = kkzm.list()

        if not kizamis:
            click.echo("list is empty")
            return

        now = kkzm.now()
        for kizami in kizamis:
            click.echo(format_kizami(kizami, now))

    except (ValidationError, DatabaseError) as e:
        handle_cli_error(ctx, e, "list")


@click.command()
@click.option(
    "-m", "--month",
    help="Year and month to summarize, YYYY-MM (default: this month)",
)
@click.pass_context
def summary(ctx, month):
    """Show elapsed time of a month per tag and description."""
    month = month or this_month()
    try:
        kkzm = get_kokizami(ctx)
        by_tag = kkzm.summary_by_tag(month)
        by_desc = kkzm.summary_by_desc(month)

        click.echo(format_summary(month, by_tag, by_desc))

    except (ValidationError, DatabaseError) as e:
        handle_cli_error(ctx, e, "summary", additional_context={"month": month})


@click.command()
@click.option("--id", "kizami_id", type=int, help="Show the tags of this kizami")
@click.pass_context
def tags(ctx, kizami_id):
    """Show all tags, or the tags of one kizami."""
    try:
        kkzm = get_kokizami(ctx)
        if kizami_id is None:
            found = kkzm.all_tags()
        else:
            found = kkzm.tags_of(kizami_id)

        for tag in found:
            click.echo(tag.label)

    except (ValidationError, DatabaseError) as e:
        handle_cli_error(ctx, e, "tags", additional_context={"id": kizami_id})
