"""Recursive delete command.

Resolves the given paths, shows what will be removed and runs the
deletion engine over them.
"""

import os
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from purgetree.core.resolver import FileResolver
from purgetree.core.settings import EngineSettings, SettingsError, load_settings_or_default
from purgetree.deletion.engine import DeletionEngine
from purgetree.deletion.models import DeletionRequest
from purgetree.errors import (
    DeletionCancelledError,
    PathResolutionError,
    UnableToDeleteError,
)
from purgetree.utils.formatting import (
    console,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

# Conventional exit status for SIGINT
EXIT_CANCELLED = 130


def remove(
    paths: Annotated[
        list[str],
        typer.Argument(help="Files or directories to delete recursively."),
    ],
    follow_symlinks: Annotated[
        bool | None,
        typer.Option(
            "--follow-symlinks/--no-follow-symlinks",
            help="Delete the contents of symlinked directories too.",
            show_default=False,
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be deleted."),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
    base_dir: Annotated[
        Path | None,
        typer.Option("--base-dir", "-C", help="Resolve relative paths against this directory."),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Settings file to use."),
    ] = None,
) -> None:
    """Delete files and directory trees, retrying locked entries once."""
    settings = _load_settings(config_path)
    resolver = FileResolver(base_dir)

    try:
        roots = resolver.resolve_all(paths)
    except PathResolutionError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    follow = settings.follow_symlinks if follow_symlinks is None else follow_symlinks
    existing = [root for root in roots if os.path.lexists(root)]

    _print_deletion_plan(roots, dry_run)

    if not existing:
        print_info("Nothing to delete.")
        return

    if dry_run:
        print_info(f"Dry-run: {len(existing)} path(s) would be deleted.")
        return

    if not yes:
        confirmed = typer.confirm(
            f"\nProceed with deleting {len(existing)} path(s)?",
            default=False,
        )
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    engine = DeletionEngine.from_settings(settings, resolver=resolver)
    request = DeletionRequest(roots=roots, follow_symlinks=follow)

    try:
        outcome = engine.delete(request)
    except UnableToDeleteError as e:
        print_error(f"Failed to delete {escape(e.root)}")
        err_console.print(escape(e.message), highlight=False, soft_wrap=True)
        raise typer.Exit(code=1) from e
    except (DeletionCancelledError, KeyboardInterrupt) as e:
        print_warning("Deletion cancelled.")
        raise typer.Exit(code=EXIT_CANCELLED) from e

    if outcome.did_work:
        print_success(f"Deleted {len(existing)} path(s).")
    else:
        print_info("Nothing to delete.")


# === Private helper functions ===


def _load_settings(config_path: Path | None) -> EngineSettings:
    """Load settings, exiting with an error when the file is invalid."""
    try:
        return load_settings_or_default(config_path)
    except SettingsError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e


def _describe(path: str) -> str:
    """Describe the kind of filesystem entry at ``path``."""
    if os.path.islink(path):
        return "symlink"
    if os.path.isdir(path):
        return "directory"
    if os.path.exists(path):
        return "file"
    return "-"


def _print_deletion_plan(roots: list[str], dry_run: bool) -> None:
    """Display planned deletions."""
    label = "Planned Deletions (dry-run)" if dry_run else "Planned Deletions"
    table = Table(
        title=label,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Path", style="bold")
    table.add_column("Type", width=10)
    table.add_column("Status", width=10)

    for root in roots:
        if os.path.lexists(root):
            status = "[removed]delete[/]"
        else:
            status = "[muted]missing[/]"
        table.add_row(escape(root), _describe(root), status)

    console.print(table)
