"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import logging
import os
from collections.abc import Iterator
from pathlib import Path

import pytest
from purgetree.core.platform import StaticPlatformInfo
from purgetree.deletion.engine import DeletionEngine
from purgetree.utils.logging_setup import LOGGER_NAME


class FlakyEngine(DeletionEngine):
    """DeletionEngine whose removals fail a set number of times per path.

    Simulates a lock held by another process: while a path has failures
    left, ``delete_file`` reports failure without touching the entry.
    """

    def __init__(self, failures: dict[str, int] | None = None, **kwargs: object) -> None:
        kwargs.setdefault("platform_info", StaticPlatformInfo(False))
        kwargs.setdefault("retry_delay", 0.0)
        super().__init__(**kwargs)  # type: ignore[arg-type]
        self.failures = dict(failures or {})
        self.attempts: list[str] = []

    def delete_file(self, path: str) -> bool:
        self.attempts.append(path)
        remaining = self.failures.get(path, 0)
        if remaining:
            self.failures[path] = remaining - 1
            return False
        return super().delete_file(path)


# Large enough that the single retry can never exhaust it
PERMANENT = 1_000_000


@pytest.fixture(autouse=True)
def isolated_config_home(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> Iterator[Path]:
    """Point XDG_CONFIG_HOME at an empty directory for every test."""
    config_home = tmp_path_factory.mktemp("xdg-config")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    yield config_home


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Create a small directory tree and return its root.

    Layout::

        root/
            a.txt
            b.txt
            sub/
                c.txt
                deeper/
                    d.txt
            empty/
    """
    root = tmp_path / "root"
    (root / "sub" / "deeper").mkdir(parents=True)
    (root / "empty").mkdir()
    (root / "a.txt").write_text("a")
    (root / "b.txt").write_text("b")
    (root / "sub" / "c.txt").write_text("c")
    (root / "sub" / "deeper" / "d.txt").write_text("d")
    return root


# Deeper than the default interpreter recursion limit
DEEP_TREE_DEPTH = 1100


@pytest.fixture
def deep_tree(tmp_path: Path) -> Iterator[Path]:
    """Create a single chain of nested directories and return its root.

    Layout is ``deep/d/d/.../d/leaf.txt`` with ``DEEP_TREE_DEPTH`` levels
    of ``d``. Built with ``os.mkdir`` in a loop since ``os.makedirs``
    recurses once per component.
    """
    root = tmp_path / "deep"
    current = str(root)
    os.mkdir(current)
    for _ in range(DEEP_TREE_DEPTH):
        current = os.path.join(current, "d")
        os.mkdir(current)
    with open(os.path.join(current, "leaf.txt"), "w") as f:
        f.write("leaf")
    yield root
    DeletionEngine(platform_info=StaticPlatformInfo(False), retry_delay=0.0).delete_paths(root)


@pytest.fixture
def engine() -> DeletionEngine:
    """Engine with no pause and no garbage collection before retries."""
    return DeletionEngine(platform_info=StaticPlatformInfo(False), retry_delay=0.0)


@pytest.fixture
def flaky_engine() -> type[FlakyEngine]:
    """Engine class whose removals fail a configurable number of times."""
    return FlakyEngine


@pytest.fixture
def permanent() -> int:
    """Failure count that outlasts the single retry."""
    return PERMANENT


@pytest.fixture(autouse=True)
def reset_package_logger() -> Iterator[None]:
    """Drop handlers the CLI attached so streams from one test don't leak into the next."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
