"""Optional settings files for the CLI.

Two scopes are read, later overriding earlier:
- User global (~/.dep-workspace/settings.yaml)
- Project (.dep-workspace/settings.yaml, relative to the working directory)

The core library never reads these; the CLI turns them into a WorkspaceContext.
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel
from pydantic import Field
from pydantic import ValidationError

from .vcs import DEFAULT_PROBE_TIMEOUT

logger = logging.getLogger(__name__)

SETTINGS_DIR = ".dep-workspace"
SETTINGS_FILE = "settings.yaml"


class SettingsError(Exception):
    """Raised when a settings file exists but cannot be used."""


class WorkspaceSettings(BaseModel):
    """Settings merged from all scopes."""

    roots: list[str] = Field(default_factory=list, description="Workspace roots in precedence order")
    probe_timeout: float = Field(DEFAULT_PROBE_TIMEOUT, gt=0, description="Seconds allowed for a VCS probe")


def default_settings_paths(working_dir: Path, home: Path | None = None) -> list[Path]:
    """Settings files in precedence order (lowest first)."""
    home = home if home is not None else Path.home()
    paths = [home / SETTINGS_DIR / SETTINGS_FILE]
    project = working_dir / SETTINGS_DIR / SETTINGS_FILE
    if project not in paths:
        paths.append(project)
    return paths


def _read_settings(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise SettingsError(f"Invalid YAML in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SettingsError(f"Settings file {path} must contain a mapping, got {type(data).__name__}")
    return data


def load_settings(paths: list[Path]) -> WorkspaceSettings:
    """Load and merge settings files; later files override earlier ones key by key.

    Raises:
        SettingsError: A file is not valid YAML or has the wrong shape
    """
    merged: dict[str, Any] = {}
    for path in paths:
        data = _read_settings(path)
        if data:
            logger.debug(f"Loaded settings from {path}")
        merged.update(data)

    try:
        return WorkspaceSettings.model_validate(merged)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings: {e}") from e
