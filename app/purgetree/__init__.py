"""purgetree - Safe recursive deletion with retry and diagnostics.

Removes directory trees leaf-first, retries transient failures once,
and reports every path that could not be removed in a single error.
"""

__version__ = "0.1.0"
