"""Recursive deletion engine.

Walks each root depth-first, removes children before their parent,
retries a failed removal exactly once, and reports everything that is
still left in a single error per root.
"""

import gc
import logging
import os
import threading
import time
from typing import Any

from purgetree.core.platform import (
    NativePlatformInfo,
    NativeSymlinkOracle,
    PlatformInfo,
    SymlinkOracle,
)
from purgetree.core.resolver import FileResolver, PathResolver
from purgetree.core.settings import EngineSettings
from purgetree.deletion.diagnostics import build_help_message
from purgetree.deletion.models import (
    DeletionOutcome,
    DeletionRequest,
    FailureSet,
    NodeState,
    TraversalNode,
)
from purgetree.errors import DeletionCancelledError, UnableToDeleteError

logger = logging.getLogger(__name__)

# Pause before the single retry of a failed delete, in seconds
DELETE_RETRY_DELAY = 0.010


class DeletionEngine:
    """Deletes directory trees leaf-first with a single retry per entry.

    An engine holds no per-call state, so one instance can serve several
    threads as long as they delete disjoint trees.

    Attributes:
        _resolver: Turns root specifications into absolute paths.
        _symlink_oracle: Symlink detection.
        _platform_info: Decides whether to garbage collect before a retry.
        _retry_delay: Pause before the retry, in seconds.
        _cancel_event: Optional event that aborts the retry pause when set.
    """

    def __init__(
        self,
        resolver: PathResolver | None = None,
        symlink_oracle: SymlinkOracle | None = None,
        platform_info: PlatformInfo | None = None,
        *,
        retry_delay: float = DELETE_RETRY_DELAY,
        cancel_event: threading.Event | None = None,
    ) -> None:
        """Initialize the DeletionEngine.

        Args:
            resolver: Path resolver. Defaults to a FileResolver on the cwd.
            symlink_oracle: Symlink detection. Defaults to os.path.islink.
            platform_info: Platform quirks. Defaults to the running host.
            retry_delay: Seconds to pause before retrying a failed delete.
            cancel_event: When set during the retry pause, the call raises
                DeletionCancelledError.
        """
        if retry_delay < 0:
            msg = f"retry_delay must not be negative, got {retry_delay}"
            raise ValueError(msg)
        self._resolver = resolver or FileResolver()
        self._symlink_oracle = symlink_oracle or NativeSymlinkOracle()
        self._platform_info = platform_info or NativePlatformInfo()
        self._retry_delay = retry_delay
        self._cancel_event = cancel_event

    @classmethod
    def from_settings(
        cls,
        settings: EngineSettings,
        resolver: PathResolver | None = None,
        cancel_event: threading.Event | None = None,
    ) -> "DeletionEngine":
        """Build an engine configured from EngineSettings.

        Args:
            settings: Loaded engine settings.
            resolver: Optional path resolver.
            cancel_event: Optional cancellation event.

        Returns:
            Configured DeletionEngine.
        """
        return cls(
            resolver=resolver,
            platform_info=settings.platform_info(),
            retry_delay=settings.retry_delay,
            cancel_event=cancel_event,
        )

    def delete(self, request: DeletionRequest) -> DeletionOutcome:
        """Delete every root of a request.

        Roots that don't exist are skipped. The first root whose subtree
        cannot be fully removed aborts the call; later roots are left
        untouched.

        Args:
            request: Roots and symlink handling.

        Returns:
            DeletionOutcome with did_work set if any root existed.

        Raises:
            PathResolutionError: If a root cannot be resolved.
            UnableToDeleteError: If a root still has entries after retrying.
            DeletionCancelledError: If the retry pause was cancelled.
        """
        did_work = False
        for root in self._resolver.resolve_all(request.roots):
            if not os.path.lexists(root):
                logger.debug("Skipping %s, it does not exist", root)
                continue
            logger.debug("Deleting %s", root)
            did_work = True
            self._delete_root(root, request.follow_symlinks)
        return DeletionOutcome(did_work=did_work, ok=True)

    def delete_paths(self, *paths: Any) -> bool:
        """Delete paths without following symlinks.

        Args:
            *paths: Path specifications.

        Returns:
            True if at least one path existed.
        """
        return self.delete(DeletionRequest(roots=paths, follow_symlinks=False)).did_work

    def delete_file(self, path: str) -> bool:
        """Remove a single entry and confirm it is gone.

        Directories must already be empty. Links are removed, never their
        targets. An entry that vanished before removal counts as removed.

        Args:
            path: Absolute path of the entry.

        Returns:
            True only if the removal succeeded and the entry no longer exists.
        """
        try:
            if os.path.isdir(path) and not self._symlink_oracle.is_symlink(path):
                os.rmdir(path)
            else:
                os.unlink(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.debug("Could not delete %s: %s", path, e)
            return False
        return not os.path.lexists(path)

    def _delete_root(self, root: str, follow_symlinks: bool) -> None:
        failed_paths: FailureSet = {}
        self._delete_recursively(root, follow_symlinks, failed_paths)
        if failed_paths:
            logger.warning("%d path(s) under %s could not be deleted", len(failed_paths), root)
            message = build_help_message(root, follow_symlinks, failed_paths, self._symlink_oracle)
            raise UnableToDeleteError(root, message)

    def _delete_recursively(
        self,
        root: str,
        follow_symlinks: bool,
        failed_paths: FailureSet,
    ) -> None:
        # Post-order walk on an explicit stack; entries are (path, node) where
        # node is set once the directory has been listed and only the
        # directory itself remains to be removed.
        stack: list[tuple[str, TraversalNode | None]] = [(root, None)]
        while stack:
            path, listed = stack.pop()
            if listed is not None:
                self._delete_node(listed, failed_paths)
                continue

            node = self._node(path)
            if not node.should_descend(follow_symlinks):
                self._delete_node(node, failed_paths)
                continue

            self._trace(node, NodeState.DESCENDING)
            try:
                names = sorted(os.listdir(node.path))
            except FileNotFoundError:
                # Something else may have removed it
                continue
            except OSError as e:
                logger.debug("Could not list %s: %s", node.path, e)
                names = []

            stack.append((node.path, node))
            stack.extend((os.path.join(node.path, name), None) for name in reversed(names))

    def _delete_node(self, node: TraversalNode, failed_paths: FailureSet) -> None:
        self._trace(node, NodeState.DELETING)
        if self.delete_file(node.path):
            self._trace(node, NodeState.DELETED)
            return
        self._handle_failed_delete(node, failed_paths)

    def _handle_failed_delete(self, node: TraversalNode, failed_paths: FailureSet) -> None:
        self._trace(node, NodeState.RETRY_PENDING)
        if self._platform_info.requires_reclaim_workaround():
            # Release handles held by unreachable objects before retrying
            gc.collect()
        self._pause()

        if self.delete_file(node.path):
            self._trace(node, NodeState.DELETED)
            return
        self._trace(node, NodeState.FAILED)
        failed_paths[os.path.abspath(node.path)] = None

    def _pause(self) -> None:
        if self._cancel_event is not None:
            if self._cancel_event.wait(self._retry_delay):
                msg = "Deletion cancelled while waiting to retry"
                raise DeletionCancelledError(msg)
            return
        time.sleep(self._retry_delay)

    def _node(self, path: str) -> TraversalNode:
        return TraversalNode(
            path=path,
            is_directory=os.path.isdir(path),
            is_symlink=self._symlink_oracle.is_symlink(path),
        )

    @staticmethod
    def _trace(node: TraversalNode, state: NodeState) -> None:
        logger.debug("%s %s", state.value, node.path)
