"""CLI package for purgetree.

This package contains the Typer application and all subcommands.
"""

from purgetree.cli.main import app

__all__ = ["app"]
