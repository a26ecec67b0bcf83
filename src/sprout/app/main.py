"""CLI entry point for sprout.

Provides the `sprout` command for launching the Textual interface and
for working with the saved sermon from the shell.
"""

import os
import subprocess
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule

from sprout import __version__
from sprout.app.config import AppConfig, ensure_app_config_exists, get_app_config_path
from sprout.app.logging_config import LOG_FILE_NAME, setup_logging
from sprout.app.services.generation import API_KEY_ENV, GenerationBridge, GenerationError
from sprout.app.services.timer import format_clock
from sprout.app.state import EditorStore
from sprout.app.storage import (
    InvalidImportFormat,
    SnapshotStorage,
    export_document,
    read_import_file,
)

app = typer.Typer(
    name="sprout",
    help="Sprout - sermon editor for the Communicating for a Change framework",
    no_args_is_help=False,
)
console = Console()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
    ),
) -> None:
    """Sprout - write and present sermons."""
    if version:
        console.print(f"sprout version {__version__}")
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


def _load_config(config_path: Optional[Path]) -> AppConfig:
    """Load the given config file or the default one.

    Exits with status 1 if the config cannot be loaded.
    """
    try:
        if config_path:
            return AppConfig.load(config_path)
        return ensure_app_config_exists()
    except FileNotFoundError as e:
        console.print(f"[red]Config file not found: {e}[/red]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Error loading config: {e}[/red]")
        raise typer.Exit(1)


def _open_store(config: AppConfig) -> EditorStore:
    return EditorStore(SnapshotStorage(config.data_dir))


def _check_saved(store: EditorStore) -> None:
    """Exit with status 1 if the last change could not be written."""
    if store.save_error is not None:
        console.print(f"[red]Could not save sermon: {escape(str(store.save_error))}[/red]")
        raise typer.Exit(1)


def _config_option() -> Optional[Path]:
    return typer.Option(None, "--config", "-c", help="Path to config file")


@app.command()
def run(config_path: Optional[Path] = _config_option()) -> None:
    """Launch the TUI application."""
    config = _load_config(config_path)

    logger = setup_logging(config.log_dir)
    logger.info(f"Data dir: {config.data_dir}")
    logger.info(f"Generation model: {config.model}")
    console.print(f"[dim]Session log: {config.log_dir / LOG_FILE_NAME}[/dim]")

    if not os.environ.get(API_KEY_ENV):
        console.print(f"[yellow]{API_KEY_ENV} is not set; draft generation will be unavailable.[/yellow]")

    from sprout.app.app import SproutApp

    try:
        app_instance = SproutApp(config)
        logger.info("Launching TUI application")
        app_instance.run()
        logger.info("Application exited normally")
    except KeyboardInterrupt:
        logger.info("Application interrupted by user (Ctrl+C)")
        console.print("\n[yellow]Interrupted by user[/yellow]")
        raise typer.Exit(0)
    except Exception as e:
        logger.exception(f"Application error: {e}")
        console.print(f"[red]Error running app: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def config(
    show: bool = typer.Option(False, "--show", help="Show current configuration"),
    edit: bool = typer.Option(False, "--edit", help="Open config in editor"),
) -> None:
    """Manage application configuration."""
    config_path = get_app_config_path()

    if show or not edit:
        if config_path.exists():
            cfg = AppConfig.load(config_path)
            console.print(f"[bold]Config file:[/bold] {config_path}")
            console.print(f"[bold]Data dir:[/bold] {cfg.data_dir}")
            console.print(f"[bold]Export dir:[/bold] {cfg.export_dir}")
            console.print(f"[bold]Log dir:[/bold] {cfg.log_dir}")
            console.print(f"[bold]Model:[/bold] {cfg.model}")
            console.print(f"[bold]API base:[/bold] {cfg.api_base}")
        else:
            console.print(f"[yellow]No config file at {config_path}[/yellow]")
            console.print("Run [bold]sprout run[/bold] to create default config.")

    if edit:
        editor = os.environ.get("EDITOR", "nano")
        subprocess.call([editor, str(config_path)])


@app.command()
def show(config_path: Optional[Path] = _config_option()) -> None:
    """Print the saved sermon."""
    store = _open_store(_load_config(config_path))
    document = store.document

    console.print(
        Panel.fit(
            f"[bold]{escape(document.reference or 'No reference')}[/bold]\n\n{escape(document.verses)}".rstrip(),
            title="Scripture",
            border_style="cyan",
        )
    )
    console.print(f"[bold]One point:[/bold] {escape(document.statement)}")

    for section in document.ordered_sections():
        console.print(Rule(f"{section.label} · {section.title}", align="left"))
        console.print(escape(section.content) if section.content else f"[dim]{section.placeholder}[/dim]")

    console.print(f"\n[dim]Printed {format_clock()}[/dim]")


@app.command()
def export(
    destination: Optional[Path] = typer.Argument(
        None, help="File or directory to write (defaults to the export directory)"
    ),
    config_path: Optional[Path] = _config_option(),
) -> None:
    """Export the saved sermon to a JSON file."""
    cfg = _load_config(config_path)
    store = _open_store(cfg)

    try:
        path = export_document(store.document, destination or cfg.export_dir)
    except OSError as e:
        console.print(f"[red]Export failed: {e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✓[/green] Exported to {path}")


@app.command("import")
def import_file(
    source: Path = typer.Argument(..., help="Sermon JSON file to load"),
    config_path: Optional[Path] = _config_option(),
) -> None:
    """Replace the saved sermon with a JSON file."""
    store = _open_store(_load_config(config_path))

    try:
        data = read_import_file(source)
    except InvalidImportFormat as e:
        console.print(f"[red]Invalid file format: {e}[/red]")
        raise typer.Exit(1)

    document = store.replace_all(data)
    _check_saved(store)
    filled = sum(1 for section in document.ordered_sections() if section.content)
    console.print(f"[green]✓[/green] Loaded {source} ({filled} of {len(document.sections)} sections filled)")


@app.command()
def reset(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    config_path: Optional[Path] = _config_option(),
) -> None:
    """Clear the saved sermon."""
    store = _open_store(_load_config(config_path))

    if store.reset(lambda: yes or typer.confirm("Are you sure you want to clear all data?")):
        _check_saved(store)
        console.print("[green]✓[/green] All data cleared")
    else:
        console.print("[yellow]Reset cancelled[/yellow]")


@app.command()
def generate(config_path: Optional[Path] = _config_option()) -> None:
    """Generate a full draft from the saved reference and verses."""
    cfg = _load_config(config_path)
    store = _open_store(cfg)
    bridge = GenerationBridge(model=cfg.model, api_base=cfg.api_base, timeout=cfg.timeout_seconds)

    with console.status(f"Generating with {cfg.model}..."):
        try:
            generated = bridge.generate_into(store)
        except GenerationError as e:
            console.print(f"[red]Failed to generate content: {e}[/red]")
            raise typer.Exit(1)

    _check_saved(store)
    console.print(f"[green]✓[/green] Draft generated. One point: [bold]{escape(generated.statement)}[/bold]")


def cli_entry() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    cli_entry()
