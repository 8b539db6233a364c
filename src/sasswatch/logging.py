"""Logging for sasswatch.

The watcher runs inside a host process, so every module logs to a child of
the ``sasswatch`` logger and relies on propagation. ``setup_logging`` only
sets that logger's level, plus a handler where nobody else will print:

- a file handler when ``logging.file`` or SASSWATCH_LOG names one
- nothing when the host has already configured the root logger
- otherwise a stderr handler, and only when stderr is a terminal

Verbosity 0..4 maps to error, warning, info, verbose, trace.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sasswatch.config.schema import LoggingConfig

# Below DEBUG: per-tick detail such as dropped ticks and unchanged files
TRACE = 5
# Between DEBUG and INFO: one line per compiled file
VERBOSE = 15

logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(VERBOSE, "VERBOSE")

logger = logging.getLogger("sasswatch")

_initialized = False

_VERBOSITY_LEVELS = (logging.ERROR, logging.WARNING, logging.INFO, VERBOSE, TRACE)

_FORMAT = "%(asctime)s %(name)s %(levelname)s: %(message)s"


class _LowercaseLevelFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        record.levelname = record.levelname.lower()
        return super().format(record)


def resolve_level(config: LoggingConfig | None) -> int:
    """Map a LoggingConfig to a numeric level; verbose wins over level."""
    if config is None:
        return logging.INFO
    if config.verbose is not None:
        index = min(max(config.verbose, 0), len(_VERBOSITY_LEVELS) - 1)
        return _VERBOSITY_LEVELS[index]
    if config.level:
        level = logging.getLevelName(config.level.upper())
        if isinstance(level, int):
            return level
    return logging.INFO


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Set the sasswatch level and add a handler if the host has none.

    Only the first call has an effect.

    Args:
        config: Optional LoggingConfig with level, verbose, and file settings.
    """
    global _initialized
    if _initialized:
        return
    _initialized = True

    level = resolve_level(config)
    logger.setLevel(level)
    formatter = _LowercaseLevelFormatter(_FORMAT, datefmt="%H:%M:%S")

    log_path = config.file if config and config.file else os.environ.get("SASSWATCH_LOG")
    if log_path:
        try:
            handler = logging.FileHandler(
                os.path.expanduser(log_path), mode="a", encoding="utf-8"
            )
        except OSError as e:
            logger.warning("Could not open log file %s: %s", log_path, e)
        else:
            handler.setFormatter(formatter)
            logger.addHandler(handler)
            return

    if logging.getLogger().handlers:
        # Host owns output; records reach it through propagation
        return
    if sys.stderr.isatty():
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        logger.addHandler(handler)


def get_logger(name: str | None = None) -> logging.Logger:
    """Get the sasswatch logger, or a child such as ``sasswatch.watching``."""
    if name:
        return logger.getChild(name)
    return logger
