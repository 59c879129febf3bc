"""Unit tests for the rm command."""

import os
from pathlib import Path
from unittest.mock import MagicMock, patch

from purgetree.cli.main import app
from purgetree.core.paths import get_settings_path
from purgetree.deletion.models import DeletionOutcome, DeletionRequest
from purgetree.errors import DeletionCancelledError, UnableToDeleteError
from typer.testing import CliRunner

runner = CliRunner()


class TestRm:
    """Tests for purgetree rm command."""

    def test_deletes_tree_with_yes(self, sample_tree: Path) -> None:
        """--yes skips the prompt and deletes the tree."""
        result = runner.invoke(app, ["rm", "--yes", str(sample_tree)])

        assert result.exit_code == 0
        assert not sample_tree.exists()
        assert "Deleted 1 path(s)" in result.output

    def test_prompt_declined(self, sample_tree: Path) -> None:
        """Declining the prompt leaves everything in place."""
        result = runner.invoke(app, ["rm", str(sample_tree)], input="n\n")

        assert result.exit_code == 0
        assert sample_tree.exists()
        assert "Aborted." in result.output

    def test_prompt_accepted(self, sample_tree: Path) -> None:
        """Accepting the prompt deletes."""
        result = runner.invoke(app, ["rm", str(sample_tree)], input="y\n")

        assert result.exit_code == 0
        assert not sample_tree.exists()

    def test_dry_run(self, sample_tree: Path) -> None:
        """--dry-run shows the plan and deletes nothing."""
        result = runner.invoke(app, ["rm", "--dry-run", str(sample_tree)])

        assert result.exit_code == 0
        assert sample_tree.exists()
        assert "Planned Deletions (dry-run)" in result.output
        assert "1 path(s) would be deleted" in result.output

    def test_nothing_to_delete(self, tmp_path: Path) -> None:
        """Missing paths are reported without error."""
        result = runner.invoke(app, ["rm", "--yes", str(tmp_path / "missing")])

        assert result.exit_code == 0
        assert "Nothing to delete." in result.output

    def test_relative_paths_with_base_dir(self, tmp_path: Path) -> None:
        """--base-dir anchors relative paths."""
        (tmp_path / "out").mkdir()

        result = runner.invoke(app, ["rm", "--yes", "-C", str(tmp_path), "out"])

        assert result.exit_code == 0
        assert not (tmp_path / "out").exists()

    def test_requires_paths(self) -> None:
        """At least one path is required."""
        result = runner.invoke(app, ["rm"])

        assert result.exit_code != 0

    def test_resolution_error(self) -> None:
        """An unresolvable path exits with an error."""
        result = runner.invoke(app, ["rm", "--yes", ""])

        assert result.exit_code == 1
        assert "empty path" in result.output

    def test_unable_to_delete(self, sample_tree: Path) -> None:
        """A residual failure prints the diagnostic and exits 1."""
        error = UnableToDeleteError(
            str(sample_tree),
            "Unable to delete directory\n  Child paths failed to delete!\n  - /x/locked",
        )
        with patch("purgetree.cli.commands.rm.DeletionEngine") as mock_engine_class:
            mock_engine_class.from_settings.return_value.delete.side_effect = error

            result = runner.invoke(app, ["rm", "--yes", str(sample_tree)])

        assert result.exit_code == 1
        assert "Failed to delete" in result.output
        assert "Child paths failed to delete!" in result.output
        assert "/x/locked" in result.output

    def test_cancelled(self, sample_tree: Path) -> None:
        """Cancellation exits with status 130."""
        with patch("purgetree.cli.commands.rm.DeletionEngine") as mock_engine_class:
            mock_engine_class.from_settings.return_value.delete.side_effect = (
                DeletionCancelledError("cancelled")
            )

            result = runner.invoke(app, ["rm", "--yes", str(sample_tree)])

        assert result.exit_code == 130
        assert "cancelled" in result.output.lower()

    def test_follow_symlinks_flag_passed(self, sample_tree: Path) -> None:
        """--follow-symlinks is forwarded in the request."""
        mock_engine = MagicMock()
        mock_engine.delete.return_value = DeletionOutcome(did_work=True)
        with patch("purgetree.cli.commands.rm.DeletionEngine") as mock_engine_class:
            mock_engine_class.from_settings.return_value = mock_engine

            result = runner.invoke(app, ["rm", "--yes", "--follow-symlinks", str(sample_tree)])

        assert result.exit_code == 0
        request = mock_engine.delete.call_args.args[0]
        assert isinstance(request, DeletionRequest)
        assert request.follow_symlinks is True
        assert list(request.roots) == [str(sample_tree)]

    def test_follow_symlinks_default_from_settings(self, sample_tree: Path) -> None:
        """Without the flag the settings file decides."""
        settings_path = get_settings_path()
        settings_path.parent.mkdir(parents=True)
        settings_path.write_text("follow_symlinks = true\n")
        mock_engine = MagicMock()
        mock_engine.delete.return_value = DeletionOutcome(did_work=True)
        with patch("purgetree.cli.commands.rm.DeletionEngine") as mock_engine_class:
            mock_engine_class.from_settings.return_value = mock_engine

            result = runner.invoke(app, ["rm", "--yes", str(sample_tree)])

        assert result.exit_code == 0
        assert mock_engine.delete.call_args.args[0].follow_symlinks is True

    def test_invalid_settings(self, sample_tree: Path, tmp_path: Path) -> None:
        """A broken settings file exits with an error before deleting."""
        config = tmp_path / "bad.toml"
        config.write_text("retry_delay_ms = -1\n")

        result = runner.invoke(app, ["rm", "--yes", "--config", str(config), str(sample_tree)])

        assert result.exit_code == 1
        assert sample_tree.exists()

    def test_symlink_not_followed_by_default(self, tmp_path: Path) -> None:
        """The linked directory's contents survive a default rm."""
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "keep").write_text("x")
        root = tmp_path / "root"
        root.mkdir()
        (root / "link").symlink_to(outside, target_is_directory=True)

        result = runner.invoke(app, ["rm", "--yes", str(root)])

        assert result.exit_code == 0
        assert not root.exists()
        assert (outside / "keep").exists()


class TestRmIntegration:
    """End-to-end rm runs against the real engine."""

    def test_locked_file_reported(self, sample_tree: Path) -> None:
        """A permanently failing entry is named in the output."""
        locked = str(sample_tree / "a.txt")
        real_unlink = os.unlink

        def unlink(path: str, *args: object, **kwargs: object) -> None:
            if str(path) == locked:
                raise PermissionError(13, "Permission denied", path)
            real_unlink(path, *args, **kwargs)

        with (
            patch("purgetree.deletion.engine.os.unlink", side_effect=unlink),
            patch("purgetree.deletion.engine.time.sleep"),
        ):
            result = runner.invoke(app, ["rm", "--yes", str(sample_tree)])

        assert result.exit_code == 1
        assert "Child paths failed to delete!" in result.output
        assert "a.txt" in result.output
        assert (sample_tree / "a.txt").exists()
        assert not (sample_tree / "b.txt").exists()

