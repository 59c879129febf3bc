"""Settings commands.

Provides commands to show the effective engine settings and to write
a default settings file.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from purgetree.core.paths import get_settings_path
from purgetree.core.settings import (
    EngineSettings,
    SettingsError,
    load_settings_or_default,
    save_settings,
)
from purgetree.utils.formatting import console, print_error, print_success, print_warning

app = typer.Typer(
    help="Show and initialize engine settings.",
    no_args_is_help=True,
)


@app.command()
def show(
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Settings file to read."),
    ] = None,
) -> None:
    """Show the effective engine settings."""
    path = config_path or get_settings_path()
    try:
        settings = load_settings_or_default(path)
    except SettingsError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    source = str(path) if path.exists() else "defaults"
    table = Table(
        title="Engine Settings",
        caption=f"Source: {escape(source)}",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Setting", style="bold")
    table.add_column("Value")

    table.add_row("follow_symlinks", str(settings.follow_symlinks).lower())
    table.add_row("retry_delay_ms", str(settings.retry_delay_ms))
    table.add_row("reclaim_workaround", settings.reclaim_workaround)

    console.print(table)


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing settings file."),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Settings file to write."),
    ] = None,
) -> None:
    """Write a settings file with default values."""
    path = config_path or get_settings_path()

    if path.exists():
        if not force:
            print_error(f"Settings already exist: {escape(str(path))} (use --force to overwrite)")
            raise typer.Exit(code=1)
        print_warning(f"Overwriting existing settings: {escape(str(path))}")

    try:
        saved = save_settings(EngineSettings(), path)
    except SettingsError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    print_success(f"Settings written to {escape(str(saved))}")
