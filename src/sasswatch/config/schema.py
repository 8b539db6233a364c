"""Configuration schema dataclasses for sasswatch.

WatchConfig is immutable: the watcher holds a reference to it for its whole
lifetime and never mutates it. Use ``dataclasses.replace`` to derive a
modified copy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from sasswatch.errors import ConfigError

DEFAULT_SEARCH_PATTERN = "*.scss"
DEFAULT_POLLING_INTERVAL = 3.0
DEFAULT_COMPILER = "sass"
DEFAULT_OUTPUT_EXTENSION = ".css"


@dataclass(frozen=True)
class WatchConfig:
    """What to watch and how to compile it.

    Example config.yaml:
        watch:
          directories_to_watch:
            - styles
          files_to_watch:
            - theme/site.scss
          file_search_pattern: "*.scss"
          polling_interval: 3.0
          compiler_executable_path: sass
    """

    directories_to_watch: frozenset[str] = frozenset()  # Relative to cwd, scanned recursively
    files_to_watch: frozenset[str] = frozenset()  # Relative to cwd, pattern not applied
    file_search_pattern: str = DEFAULT_SEARCH_PATTERN
    polling_interval: float = DEFAULT_POLLING_INTERVAL  # Seconds between ticks
    compiler_executable_path: str = DEFAULT_COMPILER
    output_extension: str = DEFAULT_OUTPUT_EXTENSION
    compile_timeout: float | None = None  # None waits for the compiler indefinitely

    def __post_init__(self) -> None:
        # Accept any iterable of paths but store frozensets
        if not isinstance(self.directories_to_watch, frozenset):
            object.__setattr__(self, "directories_to_watch", frozenset(self.directories_to_watch))
        if not isinstance(self.files_to_watch, frozenset):
            object.__setattr__(self, "files_to_watch", frozenset(self.files_to_watch))

        for name in ("file_search_pattern", "compiler_executable_path", "output_extension"):
            value = getattr(self, name)
            if not isinstance(value, str):
                raise ConfigError(f"{name} must be a string, got {type(value).__name__}")

        if self.polling_interval <= 0:
            raise ConfigError(f"polling_interval must be positive, got {self.polling_interval}")
        if not self.file_search_pattern:
            raise ConfigError("file_search_pattern must not be empty")
        if not self.compiler_executable_path:
            raise ConfigError("compiler_executable_path must not be empty")
        if not self.output_extension.startswith(".") or len(self.output_extension) < 2:
            raise ConfigError(
                f"output_extension must look like '.css', got {self.output_extension!r}"
            )
        if self.compile_timeout is not None and self.compile_timeout <= 0:
            raise ConfigError(f"compile_timeout must be positive, got {self.compile_timeout}")


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str | None = None  # DEBUG, INFO, WARNING, ERROR
    verbose: int | None = None  # 0..4, takes precedence over level
    file: str | None = None  # Log file path


@dataclass
class Config:
    """Root configuration object."""

    watch: WatchConfig = field(default_factory=WatchConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Unknown top-level sections, kept for hosts that share the file
    extra: dict[str, Any] = field(default_factory=dict)
