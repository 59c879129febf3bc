"""Utility modules for purgetree.

This module exports commonly used utility functions.
"""

from purgetree.utils.formatting import (
    console,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from purgetree.utils.logging_setup import configure_logging

__all__ = [
    "configure_logging",
    "console",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
