"""Where sasswatch looks for its config files.

The watcher is embedded in a host process and watches one project, so the
project file is found relative to the host's working directory. An optional
per-user file can hold settings shared by every project on the machine, such
as the path to a locally installed dart-sass.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

CONFIG_DIR = ".sasswatch"
CONFIG_FILENAME = "config.yaml"


def get_user_config_path() -> Path | None:
    """Per-user config: %APPDATA%, $XDG_CONFIG_HOME or ~/.config. May not exist."""
    if sys.platform == "win32":
        app_data = os.environ.get("APPDATA")
        return Path(app_data) / "sasswatch" / CONFIG_FILENAME if app_data else None

    config_home = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(config_home) / "sasswatch" / CONFIG_FILENAME


def get_project_config_path(project_root: str | Path | None = None) -> Path:
    """Project config under ``project_root``, defaulting to the host cwd."""
    root = Path(project_root) if project_root is not None else Path.cwd()
    return root / CONFIG_DIR / CONFIG_FILENAME


def get_config_paths(project_root: str | Path | None = None) -> list[Path]:
    """Config files in merge order: user first, then the project overriding it."""
    user_path = get_user_config_path()
    paths = [user_path] if user_path is not None else []
    paths.append(get_project_config_path(project_root))
    return paths
