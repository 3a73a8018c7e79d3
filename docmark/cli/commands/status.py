"""Status command for output store visibility."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from docmark.core.config import Settings
from docmark.services.models import StoreStatus
from docmark.storage.store import PersistenceStore

app = typer.Typer(invoke_without_command=True)


@app.callback()
def status(
    output: Path | None = typer.Option(None, "-o", "--output", help="Output directory"),
) -> None:
    """List persisted markdown files, newest first."""
    settings = Settings(output_dir=output) if output is not None else Settings()
    snapshot = PersistenceStore(settings.output_dir).status()

    console = Console()
    if not snapshot.files:
        console.print(f"No files found in {settings.output_dir}")
        return
    _print_table(console, snapshot)


def _print_table(console: Console, snapshot: StoreStatus) -> None:
    table = Table(title=f"Stored Files ({snapshot.total_files})")
    table.add_column("Name")
    table.add_column("Size", justify="right")
    table.add_column("Last Modified")
    for info in snapshot.files:
        table.add_row(
            info.name,
            str(info.size),
            info.last_modified.isoformat(timespec="seconds"),
        )
    console.print(table)
