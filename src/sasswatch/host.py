"""Wiring the watcher into a host application.

``add_sass_compiler`` builds a scheduler for the host to own;
``start_watching``/``stop_watching`` manage one process-global instance.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path

from sasswatch.compiler.protocol import CompileInvoker
from sasswatch.config.loader import load_config
from sasswatch.config.schema import WatchConfig
from sasswatch.logging import setup_logging
from sasswatch.watching.scheduler import WatchScheduler

ConfigureCallback = Callable[[WatchConfig], WatchConfig]


def add_sass_compiler(
    configure: ConfigureCallback | None = None,
    *,
    config: WatchConfig | None = None,
    cwd: str | Path | None = None,
    invoker: CompileInvoker | None = None,
) -> WatchScheduler:
    """Build a scheduler from defaults or a given config.

    Args:
        configure: Optional callback returning an adjusted WatchConfig,
            typically via ``dataclasses.replace``.
        config: Starting configuration. Defaults to WatchConfig().
        cwd: Working directory for path resolution and the compiler.
        invoker: Custom compiler invoker.

    Example:
        scheduler = add_sass_compiler(
            lambda c: replace(c, directories_to_watch={"wwwroot/scss"})
        )
    """
    watch = config if config is not None else WatchConfig()
    if configure is not None:
        watch = configure(watch)
    return WatchScheduler(watch, cwd=cwd, invoker=invoker)


# Global scheduler instance
_global_scheduler: WatchScheduler | None = None


def start_watching(
    configure: ConfigureCallback | None = None,
    *,
    config: WatchConfig | None = None,
    cwd: str | Path | None = None,
    cancellation: asyncio.Event | None = None,
) -> WatchScheduler:
    """Start the global watcher, replacing any previous one.

    When no config is given, it is loaded from the user config and from
    ``.sasswatch/config.yaml`` under ``cwd`` (the current working directory
    by default), and logging is set up from the same files. Must be called from within a
    running event loop.
    """
    global _global_scheduler

    if _global_scheduler is not None:
        _global_scheduler.stop()

    if config is None:
        loaded = load_config(project_root=cwd if cwd is not None else Path.cwd())
        setup_logging(loaded.logging)
        config = loaded.watch

    _global_scheduler = add_sass_compiler(configure, config=config, cwd=cwd)
    _global_scheduler.start(cancellation)
    return _global_scheduler


def stop_watching() -> None:
    """Stop the global watcher."""
    global _global_scheduler

    if _global_scheduler is not None:
        _global_scheduler.stop()
        _global_scheduler = None
