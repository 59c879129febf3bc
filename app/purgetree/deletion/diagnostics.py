"""Diagnostic messages for roots that could not be fully deleted.

Two independent passes go into a message: the recorded failure set
(entries we tried to remove and could not), and a fresh listing of the
live tree (entries that showed up after their directory was already
walked). Only the second pass catches concurrent writers.
"""

import os
from collections.abc import Iterable

from purgetree.core.platform import SymlinkOracle

CHILD_FAILURES_HEADER = (
    "Child paths failed to delete! Is something holding files in the target directory?"
)
REMAINING_FILES_HEADER = (
    "More files were found after failure! "
    "Is something concurrently writing into the target directory?"
)


def build_help_message(
    root: str,
    follow_symlinks: bool,
    failed_paths: Iterable[str],
    symlink_oracle: SymlinkOracle,
) -> str:
    """Build the error text for a root whose subtree was not fully removed.

    Args:
        root: Absolute path of the root.
        follow_symlinks: Whether the deletion followed symlinked directories.
        failed_paths: Paths recorded as failed, in traversal order. Not mutated.
        symlink_oracle: Symlink detection capability.

    Returns:
        Multi-line message naming the root and every path left behind.
    """
    is_symlink = symlink_oracle.is_symlink(root)
    is_directory = os.path.isdir(root)

    help_text = "Unable to delete "
    if is_symlink:
        help_text += "symlink to "
    help_text += "directory " if is_directory else "file "
    help_text += f"'{root}'"

    if not (is_directory and (follow_symlinks or not is_symlink)):
        return help_text

    root_path = os.path.abspath(root)
    child_failures = [path for path in dict.fromkeys(failed_paths) if path != root_path]
    if child_failures:
        help_text += _section(CHILD_FAILURES_HEADER, child_failures)

    known = set(child_failures)
    known.add(root_path)
    remaining = [
        path for path in list_remaining_paths(root, follow_symlinks) if path not in known
    ]
    if remaining:
        help_text += _section(REMAINING_FILES_HEADER, remaining)

    return help_text


def list_remaining_paths(directory: str, follow_symlinks: bool = False) -> list[str]:
    """List every entry still present under a directory.

    Files, directories and links are all reported, parents before
    children. Symlinked directories are listed but only descended into
    when ``follow_symlinks`` is set. Unreadable directories are skipped.

    Args:
        directory: Directory to walk.
        follow_symlinks: Descend into symlinked directories.

    Returns:
        Absolute paths of all entries below ``directory``.
    """
    paths: list[str] = []
    pending = [os.path.abspath(directory)]
    while pending:
        current = pending.pop()
        try:
            with os.scandir(current) as it:
                entries = list(it)
        except OSError:
            continue

        dirs: list[str] = []
        descend: list[str] = []
        files: list[str] = []
        for entry in entries:
            try:
                is_dir = entry.is_dir()
            except OSError:
                is_dir = False
            if not is_dir:
                files.append(entry.name)
                continue
            dirs.append(entry.name)
            if follow_symlinks or not entry.is_symlink():
                descend.append(entry.name)

        paths.extend(os.path.join(current, name) for name in sorted(dirs))
        paths.extend(os.path.join(current, name) for name in sorted(files))
        pending.extend(os.path.join(current, name) for name in sorted(descend, reverse=True))
    return paths


def _section(header: str, paths: list[str]) -> str:
    lines = [f"\n  {header}"]
    lines.extend(f"\n  - {path}" for path in paths)
    return "".join(lines)
