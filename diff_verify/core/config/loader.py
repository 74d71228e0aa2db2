"""
Configuration loader - reads diff-verify.yml into VerifySettings.

The file is optional. When present it supplies defaults for the
command line: paths, the emit command, dry-run and diff context.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from diff_verify.core.models.settings import VerifySettings

logger = logging.getLogger(__name__)

# Default config filename, looked up in the working directory only
SETTINGS_FILE = "diff-verify.yml"


class ConfigError(Exception):
    """Raised when the settings file is unreadable or invalid."""


def find_settings_file(start_dir: Path | None = None) -> Path | None:
    """Return ``diff-verify.yml`` in *start_dir* (default: cwd), if any.

    Unlike a project file this is not searched upward: target paths
    are relative to the working directory, so a settings file from a
    parent directory would describe the wrong files.
    """
    candidate = (start_dir or Path.cwd()) / SETTINGS_FILE
    return candidate if candidate.is_file() else None


def load_settings(path: Path | None = None) -> VerifySettings:
    """Load and validate settings.

    Args:
        path: Explicit settings file. If None, looks for diff-verify.yml
            in the cwd and returns defaults when there is none.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    explicit = path is not None
    if path is None:
        path = find_settings_file()

    if path is None:
        logger.debug("No %s found, using defaults", SETTINGS_FILE)
        return VerifySettings()

    if explicit and not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    # An empty file is a valid, empty configuration
    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        settings = VerifySettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e

    logger.info("Loaded settings from %s (%d path patterns)", path, len(settings.paths))
    return settings


def merge_settings(
    base: VerifySettings,
    paths: tuple[str, ...] | list[str] = (),
    command: tuple[str, ...] | list[str] = (),
    dry_run: bool = False,
    context_lines: int | None = None,
) -> VerifySettings:
    """Overlay command-line values on file settings.

    Paths and command replace the file's values when given; dry-run
    is enabled if either side enables it.
    """
    return base.model_copy(
        update={
            "paths": list(paths) if paths else list(base.paths),
            "command": list(command) if command else list(base.command),
            "dry_run": base.dry_run or dry_run,
            "context_lines": base.context_lines if context_lines is None else context_lines,
        }
    )
