"""Rich and plain-text renderings of records, backups, and statistics."""

from datetime import datetime

from rich.box import ROUNDED
from rich.panel import Panel
from rich.table import Table

from recvault.core.models import BackupInfo, Record
from recvault.core.sorting import VaultStatistics, storage_label


def format_records_table(
    records: list[Record], title: str | None = None, show_values: bool = False
) -> Table:
    """Format records as a Rich table.

    Args:
        records: Records to show, in display order.
        title: Table title.
        show_values: Whether to include the value column.

    Returns:
        Rich Table object.
    """
    table = Table(
        title=title,
        box=ROUNDED,
        show_header=True,
        header_style="bold cyan",
        title_style="bold",
        row_styles=["none", "dim"],
    )

    table.add_column("#", style="dim", width=4, justify="right")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    if show_values:
        table.add_column("Value")
    table.add_column("Created", style="yellow", width=10)

    for i, record in enumerate(records, 1):
        row = [str(i), str(record.id), record.name]
        if show_values:
            row.append(record.value)
        row.append(record.created_at.date().isoformat())
        table.add_row(*row)

    return table


def format_backups_table(backups: list[BackupInfo]) -> Table:
    """Format snapshot metadata as a Rich table."""
    table = Table(box=ROUNDED, show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=4, justify="right")
    table.add_column("Filename", style="cyan")
    table.add_column("Created")
    table.add_column("Size", justify="right")

    for i, backup in enumerate(backups, 1):
        table.add_row(
            str(i),
            backup.filename,
            backup.created.astimezone().strftime("%Y-%m-%d %H:%M:%S"),
            f"{backup.size} bytes",
        )

    return table


def format_statistics_panel(stats: VaultStatistics) -> Panel:
    """Format vault statistics as a Rich panel."""
    lines = [
        f"[bold]Storage:[/bold] {stats.storage}",
        f"[bold]Total Records:[/bold] {stats.total}",
        f"[bold]Last Modified:[/bold] "
        f"{stats.latest.astimezone().strftime('%Y-%m-%d %H:%M:%S')}",
        f"[bold]Longest Name:[/bold] {stats.longest_name} "
        f"({len(stats.longest_name)} chars)",
        f"[bold]Earliest Record:[/bold] {stats.earliest.date().isoformat()}",
        f"[bold]Latest Record:[/bold] {stats.latest.date().isoformat()}",
    ]
    return Panel("\n".join(lines), title="Vault Statistics", border_style="blue")


def format_export(records: list[Record], exported_at: datetime | None = None) -> str:
    """Render records as a plain-text export report."""
    exported_at = exported_at or datetime.now()
    lines = [
        "VAULT DATA EXPORT",
        "=================",
        f"Date: {exported_at.strftime('%Y-%m-%d %H:%M:%S')}",
        f"Total Records: {len(records)}",
        f"Storage: {storage_label(records)}",
        "",
    ]
    for i, record in enumerate(records, 1):
        lines.append(
            f"{i}. ID: {record.id} | Name: {record.name} | Value: {record.value} "
            f"| Created: {record.created_at.date().isoformat()}"
        )
    return "\n".join(lines).rstrip() + "\n"
