"""Upload and signed-URL commands for zapdos."""

from __future__ import annotations

from pathlib import Path

import click

from zapdos.cli.common import Context, ExitCode, global_options, handle_errors
from zapdos.core.output import (
    OutputFormat,
    create_progress,
    print_output,
    print_success,
    print_warning,
)
from zapdos.core.validation import validate_quantity
from zapdos.models.upload import UploadOutcome
from zapdos.uploads.callbacks import UploadCallbacks


def _outcome_rows(paths: list[Path], outcomes: list[UploadOutcome]) -> list[dict[str, object]]:
    rows = []
    for outcome in outcomes:
        row: dict[str, object] = {
            "index": outcome.file_index,
            "file": paths[outcome.file_index].name,
        }
        if outcome.data is not None:
            row.update(status="ok", object_id=outcome.data.object_id, message="")
        elif outcome.error is not None:
            row.update(status="failed", object_id="", message=outcome.error.message)
        rows.append(row)
    return rows


@click.command("upload")
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--method",
    type=click.Choice(["PUT", "POST"], case_sensitive=False),
    help="Upload verb (defaults to the profile's upload_method)",
)
@click.option(
    "--url",
    "urls",
    multiple=True,
    help="Pre-fetched signed URL, once per file in order",
)
@global_options
@handle_errors
def upload(
    ctx: Context,
    paths: tuple[str, ...],
    method: str | None,
    urls: tuple[str, ...],
) -> None:
    """Upload one or more files.

    Each file gets its own signed URL, transfers concurrently, and has its
    metadata committed once stored. Exits 1 if any file fails.

    Example:
        zapdos upload clip.mp4 cover.png
        zapdos upload clip.mp4 --url "https://storage.example.com/b/o?X-Zapdos-Token=..."
    """
    storage = ctx.get_storage()
    files = [Path(p) for p in paths]
    show_progress = not ctx.quiet and ctx.output_format == OutputFormat.TABLE

    with create_progress() as progress:
        tasks = {
            i: progress.add_task(path.name, total=100, visible=show_progress)
            for i, path in enumerate(files)
        }

        def on_progress(value: int, file_index: int) -> None:
            progress.update(tasks[file_index], completed=value)

        def on_stored(file_index: int) -> None:
            progress.update(
                tasks[file_index],
                completed=100,
                description=f"{files[file_index].name} (committing)",
            )

        def on_completed(object_id: str, file_index: int) -> None:
            progress.update(tasks[file_index], description=f"{files[file_index].name} done")

        def on_failed(message: str, file_index: int) -> None:
            progress.update(tasks[file_index], description=f"{files[file_index].name} failed")

        callbacks = UploadCallbacks(
            on_progress=on_progress,
            on_stored=on_stored,
            on_completed=on_completed,
            on_failed=on_failed,
        )
        outcomes = storage.upload(
            files,
            callbacks,
            signed_urls=list(urls) or None,
            method=method,
        )

    rows = _outcome_rows(files, outcomes)
    print_output(
        rows,
        format=ctx.output_format,
        columns={
            "index": "#",
            "file": "File",
            "status": "Status",
            "object_id": "Object ID",
            "message": "Message",
        },
        quiet=ctx.quiet,
        id_field="object_id",
    )

    failed = sum(1 for o in outcomes if not o.ok)
    if failed:
        if not ctx.quiet:
            print_warning(f"{failed} of {len(outcomes)} file(s) failed")
        raise SystemExit(ExitCode.GENERAL_ERROR)
    if not ctx.quiet and ctx.output_format == OutputFormat.TABLE:
        print_success(f"Uploaded {len(outcomes)} file(s)")


@click.command("urls")
@click.option("--quantity", "-n", type=int, default=1, show_default=True, help="Number of URLs")
@global_options
@handle_errors
def urls(ctx: Context, quantity: int) -> None:
    """Request signed upload URLs.

    Example:
        zapdos urls --quantity 3
    """
    quantity = validate_quantity(quantity)
    signed = ctx.get_client().get_upload_urls(quantity)

    if ctx.quiet or ctx.output_format == OutputFormat.TABLE:
        for url in signed:
            click.echo(url)
        return
    print_output(signed, format=ctx.output_format)
