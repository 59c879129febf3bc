"""Platform capabilities consumed by the deletion engine.

Symlink detection and the decision whether to run a garbage collection
pass before retrying a failed delete live here, so the engine itself
carries no OS checks.
"""

import os
import sys
from typing import Protocol


class SymlinkOracle(Protocol):
    """Capability that reports whether a path is a symbolic link."""

    def is_symlink(self, path: str) -> bool:
        """Check whether ``path`` itself is a symbolic link."""
        ...


class PlatformInfo(Protocol):
    """Capability describing platform quirks relevant to deletion."""

    def requires_reclaim_workaround(self) -> bool:
        """Check whether stale handles should be reclaimed before a retry."""
        ...


class NativeSymlinkOracle:
    """Symlink detection using the running interpreter's ``os.path``."""

    def is_symlink(self, path: str) -> bool:
        """Check whether ``path`` is a symbolic link.

        Args:
            path: Absolute filesystem path.

        Returns:
            True if the entry is a link, including dangling links.
        """
        return os.path.islink(path)


class NativePlatformInfo:
    """Platform info for the host the interpreter is running on.

    Windows keeps files open while unreferenced handles wait for
    finalization, which makes deletes fail spuriously.
    """

    def __init__(self, platform: str | None = None) -> None:
        """Initialize the NativePlatformInfo.

        Args:
            platform: Platform identifier in ``sys.platform`` form. Defaults
                to the current interpreter's platform.
        """
        self._platform = platform or sys.platform

    @property
    def is_windows(self) -> bool:
        """Check whether the platform is Windows (including Cygwin)."""
        return self._platform.startswith(("win", "cygwin"))

    def requires_reclaim_workaround(self) -> bool:
        """Return True on Windows only."""
        return self.is_windows


class StaticPlatformInfo:
    """Platform info with a fixed answer, used for configuration overrides."""

    def __init__(self, reclaim: bool) -> None:
        self._reclaim = reclaim

    def requires_reclaim_workaround(self) -> bool:
        """Return the configured answer."""
        return self._reclaim
