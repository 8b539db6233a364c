"""Poll-based change detection for stylesheet sources.

Each scan enumerates the watch set, fingerprints every file by content, and
hands new or changed files to the compiler.
"""

from sasswatch.watching.detector import ChangeDetector, FileOutcome, FileStatus
from sasswatch.watching.fileset import FileSetBuilder
from sasswatch.watching.handlers import FileEventHandlers, output_is_stale, output_path_for
from sasswatch.watching.hashing import ContentHasher
from sasswatch.watching.scheduler import ScanCycle, WatchScheduler

__all__ = [
    "ChangeDetector",
    "ContentHasher",
    "FileEventHandlers",
    "FileOutcome",
    "FileSetBuilder",
    "FileStatus",
    "ScanCycle",
    "WatchScheduler",
    "output_is_stale",
    "output_path_for",
]
