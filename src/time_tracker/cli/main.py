"""Main CLI application."""

import json
import sys
from pathlib import Path
from typing import Any, Optional

import click
import yaml  # type: ignore[import-untyped]
from rich.console import Console
from rich.table import Table

from time_tracker import __version__
from time_tracker.core.config import ConfigManager
from time_tracker.core.storage import SQLiteGateway, StorageError
from time_tracker.core.tracker import TimeTracker, TrackerError

console = Console()
error_console = Console(stderr=True)


def get_config(ctx: click.Context) -> ConfigManager:
    """Get ConfigManager instance with optional custom config path."""
    config_path = ctx.obj.get("config_path")
    return ConfigManager(Path(config_path) if config_path else None)


def format_hms(seconds: int) -> str:
    """Format seconds as HH:MM:SS."""
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "config_path", help="Path to config file", type=click.Path())
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], no_color: bool) -> None:
    """Time Tracker - log work time against named tracks.

    Run the API server and inspect the local database.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path

    if no_color:
        console.no_color = True


@cli.command()
@click.option("--host", default=None, help="Host address (default: from config)")
@click.option("--port", type=int, default=None, help="Port number (default: from config)")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
@click.pass_context
def serve(ctx: click.Context, host: Optional[str], port: Optional[int], reload: bool) -> None:
    """Start the API server.

    Examples:
        time-tracker serve
        time-tracker serve --host 0.0.0.0 --port 8080
    """
    from time_tracker.api.server import run_server

    config = get_config(ctx)

    try:
        run_server(host=host, port=port, reload=reload, config=config)
    except KeyboardInterrupt:
        console.print("Exited.")
    except (OSError, StorageError) as e:
        error_console.print(f"[red]Error starting server:[/red] {e}")
        sys.exit(1)


@cli.command("init-db")
@click.pass_context
def init_db(ctx: click.Context) -> None:
    """Create the database tables if they do not exist.

    Example:
        time-tracker init-db
    """
    config = get_config(ctx)
    gateway = SQLiteGateway(config.database_url())

    try:
        gateway.initialize()
    except StorageError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    finally:
        gateway.close()

    location = config.database_path() or ":memory:"
    console.print(f"[green]✓[/green] Database ready: {location}")


@cli.command()
@click.argument("uid", type=int)
@click.pass_context
def tracks(ctx: click.Context, uid: int) -> None:
    """Show the tracks of an account.

    Example:
        time-tracker tracks 1
    """
    config = get_config(ctx)
    gateway = SQLiteGateway(config.database_url())

    try:
        gateway.initialize()
        account, account_tracks = TimeTracker(gateway).get_account(uid)
    except (TrackerError, StorageError) as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    finally:
        gateway.close()

    if not account_tracks:
        console.print(f"[yellow]No tracks for {account.username}[/yellow]")
        return

    table = Table(title=f"Tracks for {account.username} (ID {account.uid})")
    table.add_column("Track", style="bold")
    table.add_column("Time", style="magenta", justify="right")
    table.add_column("Seconds", style="cyan", justify="right")

    for track in account_tracks:
        table.add_row(track.name, format_hms(track.seconds), str(track.seconds))

    total = sum(t.seconds for t in account_tracks)
    table.add_row("[dim]Total[/dim]", format_hms(total), str(total))

    console.print(table)


@cli.group()
def config() -> None:
    """Show and change settings in the config file."""
    pass


@config.command("show")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def config_show(ctx: click.Context, as_json: bool) -> None:
    """Show all configuration settings.

    Example:
        time-tracker config show
        time-tracker config show --json
    """
    config_mgr = get_config(ctx)

    if as_json:
        click.echo(json.dumps(config_mgr.to_dict(), indent=2))
        return

    table = Table(title="Time Tracker Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    def add_rows(prefix: str, data: dict[str, Any]) -> None:
        for key, value in data.items():
            full_key = f"{prefix}.{key}" if prefix else key
            if isinstance(value, dict):
                add_rows(full_key, value)
            else:
                table.add_row(full_key, str(value))

    add_rows("", config_mgr.to_dict())
    console.print(table)
    console.print(f"\nConfig file: {config_mgr.config_path}")


@config.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def config_set(ctx: click.Context, key: str, value: str) -> None:
    """Set a configuration value.

    VALUE is read as YAML, so numbers and true/false keep their types.

    Example:
        time-tracker config set api.port 8080
        time-tracker config set api.cors.enabled true
    """
    config_mgr = get_config(ctx)

    try:
        converted = yaml.safe_load(value)
        config_mgr.set(key, converted)
    except (ValueError, yaml.YAMLError) as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    console.print(f"[green]✓[/green] Set {key} = {converted}")


@config.command("reset")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
def config_reset(ctx: click.Context, yes: bool) -> None:
    """Reset configuration to defaults.

    Example:
        time-tracker config reset --yes
    """
    config_mgr = get_config(ctx)

    if not yes and not click.confirm("Reset all configuration to defaults?"):
        console.print("Cancelled")
        return

    config_mgr.reset()
    console.print("[green]✓[/green] Configuration reset to defaults")
    console.print(f"Config file: {config_mgr.config_path}")


def main() -> None:
    """Entry point for the console script."""
    cli(obj={})


if __name__ == "__main__":
    main()
