"""Record management CLI commands."""

from datetime import datetime
from pathlib import Path

import click
from rich.prompt import Confirm

from recvault.core.models import RecordId
from recvault.core.sorting import (
    SORT_FIELDS,
    SORT_ORDERS,
    compute_statistics,
    search_records,
    sort_records,
    storage_label,
)

from .formatters import (
    format_backups_table,
    format_export,
    format_records_table,
    format_statistics_panel,
)


class RecordIdType(click.ParamType):
    """Click parameter type for record identifiers."""

    name = "record_id"

    def convert(self, value, param, ctx):
        if isinstance(value, RecordId):
            return value
        try:
            return RecordId.parse(value)
        except ValueError as e:
            self.fail(str(e), param, ctx)


RECORD_ID = RecordIdType()


def get_store(ctx):
    """Get the record store from context."""
    return ctx.obj.store


# Command: add
@click.command()
@click.argument("name")
@click.argument("value")
@click.pass_context
def add(ctx: click.Context, name: str, value: str) -> None:
    """Add a new record."""
    console = ctx.obj.console
    record = get_store(ctx).add_record(name, value)
    console.print(
        f"[green]✓[/green] Record added: {record.id} "
        f"[dim](stored in {record.source.label})[/dim]"
    )


# Command: list
@click.command(name="list")
@click.option("--values", is_flag=True, help="Show record values")
@click.pass_context
def list_cmd(ctx: click.Context, values: bool) -> None:
    """List all records, newest first."""
    console = ctx.obj.console
    store = get_store(ctx)
    records = store.list_records()

    if not records:
        console.print("[yellow]No records found.[/yellow]")
        return

    title = f"Records (from {storage_label(records, store.last_source)})"
    console.print(format_records_table(records, title=title, show_values=values))


# Command: update
@click.command()
@click.argument("record_id", type=RECORD_ID)
@click.argument("name")
@click.argument("value")
@click.pass_context
def update(ctx: click.Context, record_id: RecordId, name: str, value: str) -> None:
    """Change the name and value of a record."""
    console = ctx.obj.console
    record = get_store(ctx).update_record(record_id, name, value)

    if record is None:
        console.print(f"[red]Record not found:[/red] {record_id}")
        ctx.exit(1)

    console.print(f"[green]✓[/green] Record updated: {record.id}")


# Command: delete
@click.command()
@click.argument("record_id", type=RECORD_ID)
@click.option("--force", "-f", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete(ctx: click.Context, record_id: RecordId, force: bool) -> None:
    """Delete a record."""
    console = ctx.obj.console

    if not force and not Confirm.ask("Are you sure?", console=console):
        console.print("[yellow]Deletion cancelled.[/yellow]")
        return

    record = get_store(ctx).delete_record(record_id)
    if record is None:
        console.print(f"[red]Record not found:[/red] {record_id}")
        ctx.exit(1)

    console.print(f"[green]✓[/green] Record deleted: {record.id} ({record.name})")


# Command: search
@click.command()
@click.argument("keyword")
@click.pass_context
def search(ctx: click.Context, keyword: str) -> None:
    """Find records by name or id."""
    console = ctx.obj.console
    store = get_store(ctx)
    results = search_records(store.list_records(), keyword)

    if not results:
        console.print("[yellow]No records found.[/yellow]")
        return

    title = (
        f"Found {len(results)} matching records "
        f"(from {storage_label(results, store.last_source)})"
    )
    console.print(format_records_table(results, title=title))


# Command: sort
@click.command()
@click.option(
    "--by", "field", type=click.Choice(SORT_FIELDS), default="name", help="Sort key"
)
@click.option(
    "--order",
    type=click.Choice(SORT_ORDERS),
    default="ascending",
    help="Sort direction",
)
@click.pass_context
def sort(ctx: click.Context, field: str, order: str) -> None:
    """List records sorted by name or date."""
    console = ctx.obj.console
    store = get_store(ctx)
    records = sort_records(store.list_records(), field=field, order=order)

    if not records:
        console.print("[yellow]No records found.[/yellow]")
        return

    title = f"Sorted Records (from {storage_label(records, store.last_source)})"
    console.print(format_records_table(records, title=title))


# Command: export
@click.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("export.txt"),
    show_default=True,
    help="Output file",
)
@click.option("--force", "-f", is_flag=True, help="Skip confirmation")
@click.pass_context
def export(ctx: click.Context, output: Path, force: bool) -> None:
    """Export all records to a text file."""
    console = ctx.obj.console

    if not force and not Confirm.ask("Export all data?", console=console):
        console.print("[yellow]Export cancelled.[/yellow]")
        return

    records = get_store(ctx).list_records()
    output.write_text(format_export(records, exported_at=datetime.now()))
    console.print(f"[green]✓[/green] Exported {len(records)} records to {output}")


# Command: backups
@click.command()
@click.pass_context
def backups(ctx: click.Context) -> None:
    """List backup snapshots, newest first."""
    console = ctx.obj.console
    snapshots = get_store(ctx).list_backups()

    if not snapshots:
        console.print("[yellow]No backups found.[/yellow]")
        return

    console.print(format_backups_table(snapshots))


# Command: stats
@click.command()
@click.pass_context
def stats(ctx: click.Context) -> None:
    """Show vault statistics."""
    console = ctx.obj.console
    statistics = compute_statistics(get_store(ctx).list_records())

    if statistics is None:
        console.print("[yellow]No records for statistics.[/yellow]")
        return

    console.print(format_statistics_panel(statistics))


COMMANDS = [add, list_cmd, update, delete, search, sort, export, backups, stats]
