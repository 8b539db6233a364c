"""Configuration file loading.

Layers, lowest priority first: the per-user file, the project file next to
the host's working directory, then SASSWATCH_* environment variables. Each
layer is a mapping of sections (``watch``, ``logging``) to flat key/value
mappings, so layers are merged one section at a time.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml

from sasswatch.config.paths import get_config_paths
from sasswatch.config.schema import (
    DEFAULT_COMPILER,
    DEFAULT_OUTPUT_EXTENSION,
    DEFAULT_POLLING_INTERVAL,
    DEFAULT_SEARCH_PATTERN,
    Config,
    LoggingConfig,
    WatchConfig,
)
from sasswatch.errors import ConfigError

# Module logger (may not be configured yet at import time)
_log = logging.getLogger("sasswatch.config")

# camelCase spellings accepted alongside the snake_case keys
_WATCH_ALIASES = {
    "directoriesToWatch": "directories_to_watch",
    "filesToWatch": "files_to_watch",
    "fileSearchPattern": "file_search_pattern",
    "pollingInterval": "polling_interval",
    "compilerExecutablePath": "compiler_executable_path",
    "outputExtension": "output_extension",
    "compileTimeout": "compile_timeout",
}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file, returning empty dict if not found or invalid."""
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except yaml.YAMLError as e:
        _log.warning("Invalid YAML in %s: %s", path, e)
        return {}
    except PermissionError:
        _log.debug("Permission denied reading %s", path)
        return {}
    except OSError as e:
        _log.warning("Error reading %s: %s", path, e)
        return {}


def env_overrides() -> dict[str, Any]:
    """Build config dict from environment variables."""
    overrides: dict[str, Any] = {}

    log_path = os.environ.get("SASSWATCH_LOG")
    if log_path:
        overrides.setdefault("logging", {})["file"] = log_path

    compiler = os.environ.get("SASSWATCH_COMPILER")
    if compiler:
        overrides.setdefault("watch", {})["compiler_executable_path"] = compiler

    return overrides


def _normalize_layer(layer: dict[str, Any]) -> dict[str, Any]:
    """Rewrite camelCase watch keys so layers using either spelling merge."""
    watch = layer.get("watch")
    if not isinstance(watch, dict):
        return layer
    normalized = {_WATCH_ALIASES.get(key, key): value for key, value in watch.items()}
    return {**layer, "watch": normalized}


def merge_layers(*layers: dict[str, Any]) -> dict[str, Any]:
    """Merge config layers; later layers win key by key inside a section.

    A None value never overrides, and lists are replaced rather than
    concatenated, so a project can narrow the user's directories.
    """
    merged: dict[str, Any] = {}
    for layer in layers:
        for section, values in _normalize_layer(layer).items():
            if values is None:
                continue
            current = merged.get(section)
            if isinstance(current, dict) and isinstance(values, dict):
                merged[section] = {
                    **current,
                    **{k: v for k, v in values.items() if v is not None},
                }
            else:
                merged[section] = values
    return merged


def _path_set(value: Any, key: str) -> frozenset[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str):
        return frozenset([value])
    if isinstance(value, Iterable):
        return frozenset(str(v) for v in value if v)
    raise ConfigError(f"{key} must be a list of paths, got {type(value).__name__}")


def _number(value: Any, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{key} must be a number of seconds, got {value!r}")
    return float(value)


def dict_to_config(data: dict[str, Any]) -> Config:
    """Convert merged dict to typed Config dataclass.

    Raises:
        ConfigError: If a watch value has the wrong type or is out of range.
    """
    watch_section = data.get("watch") or {}
    if not isinstance(watch_section, dict):
        raise ConfigError(f"watch must be a mapping, got {type(watch_section).__name__}")
    watch_data = _normalize_layer({"watch": watch_section})["watch"]
    timeout = watch_data.get("compile_timeout")
    watch = WatchConfig(
        directories_to_watch=_path_set(
            watch_data.get("directories_to_watch"), "directories_to_watch"
        ),
        files_to_watch=_path_set(watch_data.get("files_to_watch"), "files_to_watch"),
        file_search_pattern=watch_data.get("file_search_pattern", DEFAULT_SEARCH_PATTERN),
        polling_interval=_number(
            watch_data.get("polling_interval", DEFAULT_POLLING_INTERVAL), "polling_interval"
        ),
        compiler_executable_path=watch_data.get("compiler_executable_path", DEFAULT_COMPILER),
        output_extension=watch_data.get("output_extension", DEFAULT_OUTPUT_EXTENSION),
        compile_timeout=None if timeout is None else _number(timeout, "compile_timeout"),
    )

    log_data = data.get("logging") or {}
    if not isinstance(log_data, dict):
        raise ConfigError(f"logging must be a mapping, got {type(log_data).__name__}")
    logging_config = LoggingConfig(
        level=log_data.get("level"),
        verbose=log_data.get("verbose"),
        file=log_data.get("file"),
    )

    known_keys = {"watch", "logging"}
    extra = {k: v for k, v in data.items() if k not in known_keys}

    return Config(watch=watch, logging=logging_config, extra=extra)


def load_config(project_root: str | Path | None = None) -> Config:
    """Load and merge config from all layers.

    Args:
        project_root: Directory holding ``.sasswatch/config.yaml``.
            Defaults to the current working directory, the same directory
            watched paths are resolved against.

    Returns:
        Merged Config object.

    Raises:
        ConfigError: If a merged value is invalid.
    """
    layers: list[dict[str, Any]] = []

    for path in get_config_paths(project_root):
        data = load_yaml_file(path)
        if data:
            _log.debug("Loaded config from %s", path)
            layers.append(data)

    layers.append(env_overrides())
    return dict_to_config(merge_layers(*layers))
