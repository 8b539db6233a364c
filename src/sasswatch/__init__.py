"""sasswatch: poll stylesheet sources and recompile them with an external sass."""

__version__ = "0.1.0"

from sasswatch.compiler import CompileInvoker, CompileResult, SubprocessCompileInvoker
from sasswatch.config import Config, LoggingConfig, WatchConfig, load_config
from sasswatch.errors import ConfigError, SassWatchError
from sasswatch.host import add_sass_compiler, start_watching, stop_watching
from sasswatch.watching import (
    ChangeDetector,
    ContentHasher,
    FileSetBuilder,
    FileStatus,
    ScanCycle,
    WatchScheduler,
)

__all__ = [
    # Host entry points
    "add_sass_compiler",
    "start_watching",
    "stop_watching",
    # Config
    "Config",
    "LoggingConfig",
    "WatchConfig",
    "load_config",
    # Watching
    "ChangeDetector",
    "ContentHasher",
    "FileSetBuilder",
    "FileStatus",
    "ScanCycle",
    "WatchScheduler",
    # Compiler
    "CompileInvoker",
    "CompileResult",
    "SubprocessCompileInvoker",
    # Errors
    "ConfigError",
    "SassWatchError",
]
