"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from typing import Annotated

import typer

from purgetree import __version__
from purgetree.cli.commands import config, rm
from purgetree.utils.logging_setup import configure_logging

# Create main Typer app
app = typer.Typer(
    name="purgetree",
    help="Safe recursive deletion with retry and diagnostics.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"purgetree version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Log every visited path and retry.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Only log errors.",
        ),
    ] = False,
) -> None:
    """purgetree - Safe recursive deletion.

    Removes trees leaf-first, retries locked entries once and reports
    every path that could not be removed.
    """
    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    configure_logging(verbose=verbose, quiet=quiet)


# Register commands
app.command(name="rm")(rm.remove)
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
