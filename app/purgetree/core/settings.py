"""Engine settings.

This module provides the configuration model and I/O functions for the
deletion engine: whether symlinked directories are followed, how long
to pause before the single retry, and whether to force the pre-retry
garbage collection pass.

Settings are stored in ~/.config/purgetree/settings.toml
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Literal

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from purgetree.core.paths import get_settings_path
from purgetree.core.platform import NativePlatformInfo, PlatformInfo, StaticPlatformInfo
from purgetree.errors import PurgetreeError

logger = logging.getLogger(__name__)

ReclaimMode = Literal["auto", "always", "never"]

DEFAULT_RETRY_DELAY_MS = 10


class EngineSettings(BaseModel):
    """Configuration for the deletion engine.

    Attributes:
        follow_symlinks: Default for descending into symlinked directories.
        retry_delay_ms: Pause before the single retry, in milliseconds.
        reclaim_workaround: "auto" detects the platform, "always"/"never"
            force the garbage collection pass on or off.
    """

    model_config = ConfigDict(extra="forbid")

    follow_symlinks: Annotated[
        bool,
        Field(description="Descend into symlinked directories"),
    ] = False
    retry_delay_ms: Annotated[
        int,
        Field(ge=0, le=10_000, description="Retry pause in milliseconds (0-10000)"),
    ] = DEFAULT_RETRY_DELAY_MS
    reclaim_workaround: Annotated[
        ReclaimMode,
        Field(description="Garbage collection before retry"),
    ] = "auto"

    @property
    def retry_delay(self) -> float:
        """Retry pause in seconds."""
        return self.retry_delay_ms / 1000

    def platform_info(self) -> PlatformInfo:
        """Build the PlatformInfo matching ``reclaim_workaround``.

        Returns:
            NativePlatformInfo for "auto", a StaticPlatformInfo otherwise.
        """
        if self.reclaim_workaround == "auto":
            return NativePlatformInfo()
        return StaticPlatformInfo(self.reclaim_workaround == "always")


class SettingsError(PurgetreeError):
    """Base exception for settings errors."""


class SettingsNotFoundError(SettingsError):
    """Raised when the settings file is not found."""


class SettingsParseError(SettingsError):
    """Raised when the settings file cannot be parsed."""


def load_settings(path: Path | None = None) -> EngineSettings:
    """Load engine settings from a TOML file.

    Args:
        path: Path to the settings file. If None, uses the default path.

    Returns:
        Validated EngineSettings object.

    Raises:
        SettingsNotFoundError: If the file doesn't exist.
        SettingsParseError: If the TOML syntax is invalid.
        SettingsError: If the content doesn't match the schema.
    """
    settings_path = path or get_settings_path()

    if not settings_path.exists():
        raise SettingsNotFoundError(f"Settings not found: {settings_path}")

    try:
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise SettingsParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise SettingsError(f"Failed to read settings: {e}") from e

    try:
        return EngineSettings.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise SettingsError(f"Invalid settings content: {e}") from e


def load_settings_or_default(path: Path | None = None) -> EngineSettings:
    """Load settings, falling back to defaults when no file exists.

    Args:
        path: Path to the settings file. If None, uses the default path.

    Returns:
        Loaded or default EngineSettings.

    Raises:
        SettingsParseError: If the file exists but is not valid TOML.
        SettingsError: If the file exists but doesn't match the schema.
    """
    try:
        return load_settings(path)
    except SettingsNotFoundError:
        logger.debug("No settings file, using defaults")
        return EngineSettings()


def save_settings(settings: EngineSettings, path: Path | None = None) -> Path:
    """Save engine settings to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        settings: The EngineSettings object to save.
        path: Path to save to. If None, uses the default path.

    Returns:
        Path where the settings were saved.

    Raises:
        SettingsError: If the file cannot be written.
    """
    settings_path = path or get_settings_path()
    data = _settings_to_dict(settings)

    tmp_path: Path | None = None
    try:
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=settings_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(settings_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise SettingsError(f"Failed to write settings: {e}") from e

    return settings_path


def _settings_to_dict(settings: EngineSettings) -> dict[str, object]:
    """Convert EngineSettings to a dictionary for TOML serialization.

    Only non-default values are included, except ``retry_delay_ms`` which
    is always written so the file documents the pause.
    """
    result: dict[str, object] = {"retry_delay_ms": settings.retry_delay_ms}

    if settings.follow_symlinks:
        result["follow_symlinks"] = True

    if settings.reclaim_workaround != "auto":
        result["reclaim_workaround"] = settings.reclaim_workaround

    return result
