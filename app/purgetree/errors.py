"""Exceptions raised by the deletion engine and its collaborators."""

from pathlib import Path


class PurgetreeError(Exception):
    """Base exception for all purgetree errors."""


class PathResolutionError(PurgetreeError):
    """Raised when a path specification cannot be turned into a filesystem path."""


class UnableToDeleteError(PurgetreeError):
    """Raised when a root still has entries left after the single retry.

    Attributes:
        root: The root path whose subtree could not be fully removed.
        message: Full diagnostic text describing every failed path.
    """

    def __init__(self, root: str | Path, message: str) -> None:
        super().__init__(message)
        self.root = str(root)
        self.message = message


class DeletionCancelledError(PurgetreeError):
    """Raised when the retry pause is cancelled through the engine's cancel event."""
