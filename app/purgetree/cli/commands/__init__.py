"""CLI commands for purgetree.

This package contains all subcommand implementations.
"""

from purgetree.cli.commands import config, rm

__all__ = ["config", "rm"]
