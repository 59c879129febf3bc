"""Deletion domain models.

This module defines the data structures passed into and returned from
the deletion engine, plus the transient node representation used
while walking a tree.
"""

import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Insertion-ordered set of absolute paths that survived the retry.
FailureSet = dict[str, None]


class NodeState(str, Enum):
    """Lifecycle of a single entry during recursive deletion.

    Attributes:
        UNVISITED: Not yet reached by the traversal.
        DESCENDING: Directory whose children are being deleted.
        DELETING: First removal attempt in progress.
        RETRY_PENDING: First attempt failed, waiting for the single retry.
        DELETED: Entry is gone.
        FAILED: Entry survived the retry and was recorded.
    """

    UNVISITED = "unvisited"
    DESCENDING = "descending"
    DELETING = "deleting"
    RETRY_PENDING = "retry_pending"
    DELETED = "deleted"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class DeletionRequest:
    """A set of roots to delete.

    Attributes:
        roots: Path specifications, processed in order. Each is handed to
            the path resolver, so anything it accepts is allowed here. A
            lone string or path is a single root.
        follow_symlinks: Descend into symlinked directories and delete
            their contents as well as the link itself.
    """

    roots: Sequence[Any] = field(default_factory=tuple)
    follow_symlinks: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.roots, (str, bytes, os.PathLike)):
            object.__setattr__(self, "roots", (self.roots,))


@dataclass(frozen=True, slots=True)
class TraversalNode:
    """One filesystem entry visited during recursion.

    Attributes:
        path: Absolute path of the entry.
        is_directory: Whether the entry is a directory (following links).
        is_symlink: Whether the entry itself is a symbolic link.
    """

    path: str
    is_directory: bool
    is_symlink: bool

    def should_descend(self, follow_symlinks: bool) -> bool:
        """Check whether the traversal lists this node's children."""
        return self.is_directory and (follow_symlinks or not self.is_symlink)


@dataclass(frozen=True, slots=True)
class DeletionOutcome:
    """Result of one top-level delete call.

    Attributes:
        did_work: True if at least one root existed and was processed.
        ok: True when every processed root was fully removed.
    """

    did_work: bool
    ok: bool = True
