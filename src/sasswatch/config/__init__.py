"""Configuration management for sasswatch.

Provides layered YAML-based configuration with:
- User-level config (~/.config/sasswatch/ or %APPDATA%)
- Project-level config (.sasswatch/ in the host's working directory)
- Environment variable overrides (highest priority)

Example usage:
    from sasswatch.config import load_config

    config = load_config()
    print(config.watch.directories_to_watch)
"""

from sasswatch.config.loader import dict_to_config, load_config, load_yaml_file, merge_layers
from sasswatch.config.paths import (
    get_config_paths,
    get_project_config_path,
    get_user_config_path,
)
from sasswatch.config.schema import Config, LoggingConfig, WatchConfig

__all__ = [
    "Config",
    "LoggingConfig",
    "WatchConfig",
    "load_config",
    "load_yaml_file",
    "dict_to_config",
    "merge_layers",
    "get_config_paths",
    "get_user_config_path",
    "get_project_config_path",
]
