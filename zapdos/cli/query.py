"""Listing commands for stored objects and jobs."""

from __future__ import annotations

import click

from zapdos.cli.common import Context, global_options, handle_errors
from zapdos.core.output import print_output

OBJECT_COLUMNS = {
    "id": "ID",
    "file_name": "File",
    "content_type": "Content Type",
    "size": "Size",
    "created_at": "Created",
}
JOB_COLUMNS = {
    "id": "ID",
    "status": "Status",
    "type": "Type",
    "object_id": "Object ID",
    "created_at": "Created",
}


@click.command("objects")
@click.option(
    "--kind",
    type=click.Choice(["all", "video", "image"]),
    default="all",
    show_default=True,
    help="Filter by content type family",
)
@click.option("--limit", "-l", type=int, help="Maximum rows to return")
@global_options
@handle_errors
def objects(ctx: Context, kind: str, limit: int | None) -> None:
    """List stored objects.

    Example:
        zapdos objects
        zapdos objects --kind video --limit 20
    """
    storage = ctx.get_storage()
    items = storage.list_objects(None if kind == "all" else kind, limit=limit)

    print_output(
        [item.to_row(list(OBJECT_COLUMNS)) for item in items],
        format=ctx.output_format,
        columns=OBJECT_COLUMNS,
        quiet=ctx.quiet,
        id_field="id",
    )


@click.command("jobs")
@click.option("--limit", "-l", type=int, help="Maximum rows to return")
@global_options
@handle_errors
def jobs(ctx: Context, limit: int | None) -> None:
    """List background jobs.

    Example:
        zapdos jobs --limit 10
    """
    storage = ctx.get_storage()
    items = storage.list_jobs(limit=limit)

    print_output(
        [item.to_row(list(JOB_COLUMNS)) for item in items],
        format=ctx.output_format,
        columns=JOB_COLUMNS,
        quiet=ctx.quiet,
        id_field="id",
    )
