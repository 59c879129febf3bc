"""DevOps tasks for purgetree.

Usage: uv run devops.py <task>
Tasks: fmt, lint, test, clean
"""

import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent

# Artifacts removed by the clean task, relative to the project root
CLEAN_TARGETS = [
    ".pytest_cache",
    ".ruff_cache",
    ".coverage",
    "htmlcov",
    "build",
    "dist",
]


def _run(commands: list[list[str]]) -> None:
    """Execute a sequence of shell commands, exiting on first failure."""
    for cmd in commands:
        try:
            subprocess.run(cmd, check=True, cwd=ROOT)  # nosec: B603, B607
        except subprocess.CalledProcessError as e:
            print(f"Command failed: {' '.join(e.cmd)}", file=sys.stderr)
            sys.exit(e.returncode)


def format_code() -> None:
    """Format the codebase with Ruff."""
    _run([["ruff", "format", "."], ["ruff", "check", "--fix", "."]])


def lint() -> None:
    """Check formatting and lint rules without modifying files."""
    _run([["ruff", "format", "--check", "."], ["ruff", "check", "."]])


def test() -> None:
    """Run tests with PyTest."""
    _run([["uv", "run", "pytest", "-q"]])


def clean() -> None:
    """Remove caches and build artifacts using purgetree itself."""
    from purgetree.deletion.engine import DeletionEngine

    engine = DeletionEngine()
    targets = [ROOT / name for name in CLEAN_TARGETS]
    for pattern in ("__pycache__", "*.egg-info"):
        targets.extend(p for p in ROOT.rglob(pattern) if ".venv" not in p.parts)
    if engine.delete_paths(targets):
        print("Caches and artifacts removed.")
    else:
        print("Nothing to clean.")


TASKS = {
    "fmt": format_code,
    "lint": lint,
    "test": test,
    "clean": clean,
}


if __name__ == "__main__":
    if len(sys.argv) != 2 or sys.argv[1] not in TASKS:
        print(__doc__, file=sys.stderr)
        sys.exit(2)
    TASKS[sys.argv[1]]()
