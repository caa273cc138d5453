"""Main CLI entry point and application setup."""

import logging
from dataclasses import dataclass
from pathlib import Path

import click
from click.exceptions import Exit
from dotenv import find_dotenv, load_dotenv
from rich.console import Console

from recvault import __version__
from recvault.cli import commands
from recvault.config import Settings, load_settings
from recvault.exceptions import VaultError
from recvault.storage.events import EventBus, log_events
from recvault.storage.store import RecordStore


@dataclass
class Context:
    """CLI context that holds shared resources."""

    store: RecordStore
    console: Console
    settings: Settings
    debug: bool = False


def setup_logging(
    verbose: bool = False, quiet: bool = False, debug: bool = False
) -> None:
    """Configure logging based on CLI flags."""
    if quiet:
        level = logging.ERROR
    elif verbose or debug:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s"
        if not debug
        else "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_console(no_color: bool = False, width: int | None = None) -> Console:
    """Create Rich console with appropriate settings."""
    return Console(
        no_color=no_color,
        width=width or 120,
        highlight=not no_color,
        color_system=None if no_color else "auto",
    )


def build_store(settings: Settings) -> RecordStore:
    """Create the record store for a CLI session."""
    events = EventBus()
    log_events(events)
    return RecordStore.from_settings(settings, events=events)


class VaultGroup(click.Group):
    """Custom group that reports vault errors and handles KeyboardInterrupt."""

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except KeyboardInterrupt:
            console = getattr(ctx.obj, "console", None) if ctx.obj else None
            if console:
                console.print("[yellow]Interrupted[/yellow]")
            ctx.exit(130)
        except (click.ClickException, click.Abort, Exit, SystemExit):
            raise
        except VaultError as e:
            debug = getattr(ctx.obj, "debug", False) if ctx.obj else False
            if debug:
                raise
            console = getattr(ctx.obj, "console", None) if ctx.obj else None
            if console:
                console.print(f"[red]Error:[/red] {e}")
            else:
                click.echo(f"Error: {e}", err=True)
            ctx.exit(1)


@click.group(cls=VaultGroup)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("--debug", is_flag=True, help="Enable debug mode with full tracebacks")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option(
    "--data-dir",
    "-d",
    type=click.Path(path_type=Path),
    help="Override data directory location",
)
@click.option("--mongodb-uri", help="MongoDB connection string")
@click.version_option(
    version=__version__, prog_name="recvault", message="recvault version %(version)s"
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    no_color: bool,
    debug: bool,
    config: Path | None,
    data_dir: Path | None,
    mongodb_uri: str | None,
) -> None:
    """Personal record vault.

    Stores name/value records in MongoDB, falling back to a local JSON file
    when the database is unreachable. Every change is snapshotted.
    """
    setup_logging(verbose=verbose, quiet=quiet, debug=debug)
    load_dotenv(find_dotenv(usecwd=True))

    console = create_console(no_color=no_color)

    try:
        settings = load_settings(
            config_file=config, data_dir=data_dir, mongodb_uri=mongodb_uri
        )
    except ValueError as e:
        if debug:
            raise
        console.print(f"[red]Error loading configuration:[/red] {e}")
        ctx.exit(1)

    store = build_store(settings)
    ctx.call_on_close(store.disconnect)
    ctx.obj = Context(store=store, console=console, settings=settings, debug=debug)


# Register commands
for command in commands.COMMANDS:
    cli.add_command(command)


def main() -> None:
    """Console script entry point."""
    cli()
