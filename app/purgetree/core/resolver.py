"""Path resolution for deletion roots.

Turns loosely-typed path specifications (strings, ``os.PathLike``
objects, callables and nested collections of these) into absolute
filesystem paths.
"""

import os
from collections.abc import Callable, Iterable
from typing import Any, Protocol

from purgetree.errors import PathResolutionError


class PathResolver(Protocol):
    """Capability that turns path specifications into absolute paths."""

    def resolve(self, spec: Any) -> str:
        """Resolve a single path specification."""
        ...

    def resolve_all(self, specs: Iterable[Any]) -> list[str]:
        """Resolve and flatten a collection of path specifications."""
        ...


class FileResolver:
    """Default resolver relative to a base directory.

    Accepted specifications:
    - ``str``, ``bytes`` and ``os.PathLike`` objects
    - zero-argument callables, evaluated at resolution time
    - iterables of any of the above (flattened in order, ``resolve_all`` only)

    ``~`` is expanded. Relative paths are joined onto the base directory.
    Symlinks are never resolved, so a link root stays a link.

    Attributes:
        _base_dir: Directory that relative specifications are anchored to.
    """

    def __init__(self, base_dir: str | os.PathLike[str] | None = None) -> None:
        """Initialize the FileResolver.

        Args:
            base_dir: Anchor for relative paths. Defaults to the current
                working directory at construction time.
        """
        self._base_dir = os.path.abspath(os.fspath(base_dir)) if base_dir else os.getcwd()

    @property
    def base_dir(self) -> str:
        """Directory relative specifications are resolved against."""
        return self._base_dir

    def resolve(self, spec: Any) -> str:
        """Resolve a single path specification to an absolute path.

        Args:
            spec: Path specification.

        Returns:
            Absolute, normalized path string.

        Raises:
            PathResolutionError: If the specification is empty, None, or
                of an unsupported type.
        """
        if callable(spec) and not isinstance(spec, (str, bytes, os.PathLike)):
            spec = self._evaluate(spec)

        if spec is None:
            msg = "Cannot resolve path from None"
            raise PathResolutionError(msg)

        if isinstance(spec, bytes):
            raw = os.fsdecode(spec)
        elif isinstance(spec, (str, os.PathLike)):
            raw = os.fspath(spec)
            if isinstance(raw, bytes):
                raw = os.fsdecode(raw)
        else:
            msg = f"Cannot convert {type(spec).__name__} to a path: {spec!r}"
            raise PathResolutionError(msg)

        if not raw:
            msg = "Cannot resolve an empty path"
            raise PathResolutionError(msg)

        expanded = os.path.expanduser(raw)
        return os.path.normpath(os.path.join(self._base_dir, expanded))

    def resolve_all(self, specs: Iterable[Any]) -> list[str]:
        """Resolve every specification, flattening nested collections.

        A single path given as ``specs`` is one specification, never a
        sequence of characters.

        Args:
            specs: Iterable of path specifications.

        Returns:
            Absolute paths in the order they were given.

        Raises:
            PathResolutionError: If any specification cannot be resolved.
        """
        if isinstance(specs, (str, bytes, os.PathLike)):
            return [self.resolve(specs)]

        resolved: list[str] = []
        for spec in specs:
            self._collect(spec, resolved)
        return resolved

    def _collect(self, spec: Any, into: list[str]) -> None:
        if callable(spec) and not isinstance(spec, (str, bytes, os.PathLike)):
            spec = self._evaluate(spec)

        if isinstance(spec, (str, bytes, os.PathLike)) or spec is None:
            into.append(self.resolve(spec))
            return

        if isinstance(spec, Iterable):
            for item in spec:
                self._collect(item, into)
            return

        into.append(self.resolve(spec))

    @staticmethod
    def _evaluate(factory: Callable[[], Any]) -> Any:
        try:
            return factory()
        except PathResolutionError:
            raise
        except Exception as e:
            msg = f"Path factory {factory!r} failed: {e}"
            raise PathResolutionError(msg) from e
