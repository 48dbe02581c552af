"""Output formatting for zapdos.

Rows print as a Rich table, as JSON, or as bare ids in quiet mode.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table

console = Console()
err_console = Console(stderr=True)


class OutputFormat(Enum):
    """Output format options."""

    JSON = "json"
    TABLE = "table"

    @classmethod
    def from_string(cls, value: str) -> OutputFormat:
        return cls(value.lower())


# =============================================================================
# Rendering
# =============================================================================


def _cell(val: Any) -> str:
    if val is None:
        return ""
    if isinstance(val, bool):
        return "Yes" if val else "No"
    if isinstance(val, (list, dict)):
        return json.dumps(val)
    return str(val)


def print_table(rows: Sequence[Mapping[str, Any]], columns: Mapping[str, str]) -> None:
    """Print rows as a Rich table.

    Args:
        rows: Row dicts.
        columns: Row key to header label, in display order.
    """
    if not rows:
        console.print("[dim]No results[/dim]")
        return

    table = Table(show_header=True, header_style="bold")
    for label in columns.values():
        table.add_column(label)
    for row in rows:
        table.add_row(*(_cell(row.get(key)) for key in columns))
    console.print(table)


def print_key_value(data: Mapping[str, Any], *, title: str | None = None) -> None:
    """Print one record as aligned ``Label  value`` lines."""
    if title:
        console.print(f"[bold]{title}[/bold]")

    labels = {key: key.replace("_", " ").title() for key in data}
    width = max((len(label) for label in labels.values()), default=0)
    for key, value in data.items():
        if value is None:
            shown = "[dim]-[/dim]"
        elif isinstance(value, bool):
            shown = "[green]Yes[/green]" if value else "[red]No[/red]"
        else:
            shown = _cell(value)
        console.print(f"  {labels[key]:<{width}}  {shown}")


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


def print_output(
    data: Any,
    *,
    format: OutputFormat = OutputFormat.TABLE,
    columns: Mapping[str, str] | None = None,
    quiet: bool = False,
    id_field: str = "id",
) -> None:
    """Print command results.

    Quiet mode prints one ``id_field`` value per row, blank when a row has
    none. Without ``columns`` the table format falls back to JSON.

    Args:
        data: A row dict, a list of rows, or any JSON-serializable value.
        format: Output format.
        columns: Row key to header label for table output.
        quiet: Print ids only.
        id_field: Row key printed in quiet mode.
    """
    if quiet:
        for row in data if isinstance(data, list) else [data]:
            print(_cell(row.get(id_field)) if isinstance(row, Mapping) else row)
        return

    if format == OutputFormat.JSON or columns is None:
        print_json(data)
        return

    print_table(data if isinstance(data, list) else [data], columns)


# =============================================================================
# Status Messages
# =============================================================================


def print_error(message: str) -> None:
    err_console.print(f"[red]Error:[/red] {message}")


def print_warning(message: str) -> None:
    err_console.print(f"[yellow]Warning:[/yellow] {message}")


def print_success(message: str) -> None:
    console.print(f"[green]✓[/green] {message}")


def create_progress() -> Progress:
    """Per-file upload bars, drawn on stderr and cleared when done."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=err_console,
        transient=True,
    )
