"""Exception types raised by sasswatch."""

from __future__ import annotations

from pathlib import Path


class SassWatchError(Exception):
    """Base class for sasswatch errors."""


class ConfigError(SassWatchError, ValueError):
    """Raised when a watch configuration value is invalid."""


class FingerprintError(SassWatchError):
    """Raised when a watched file cannot be read for hashing."""

    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(f"Could not read {path}: {cause}")
        self.path = path
        self.cause = cause
