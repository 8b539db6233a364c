"""Builds the set of stylesheet files currently in scope for watching."""

from __future__ import annotations

import fnmatch
from collections import deque
from pathlib import Path

from sasswatch.config.schema import WatchConfig
from sasswatch.logging import get_logger

log = get_logger("watching")


class FileSetBuilder:
    """Enumerates watched directories and files into a deduplicated set.

    Directories are walked breadth-first with an explicit queue so that an
    unreadable directory only loses its own entries; the rest of the walk
    continues from the queue. Missing configured paths are logged and
    skipped.
    """

    def __init__(self, config: WatchConfig, cwd: str | Path | None = None) -> None:
        self._config = config
        self._cwd = Path(cwd) if cwd is not None else None

    def resolve_path(self, path: str | Path) -> Path:
        """Resolve a configured path relative to the working directory."""
        p = Path(path)
        if not p.is_absolute():
            base = self._cwd if self._cwd is not None else Path.cwd()
            p = base / p
        return p.resolve()

    def build(self) -> set[Path]:
        """Compute the absolute paths of every file currently watched."""
        files: set[Path] = set()

        for relative_path in sorted(self._config.directories_to_watch):
            full_dir_path = self.resolve_path(relative_path)
            if not full_dir_path.is_dir():
                log.error("Directory not found. Skipping %s", full_dir_path)
                continue
            files.update(self.walk(full_dir_path))

        for relative_path in sorted(self._config.files_to_watch):
            full_path = self.resolve_path(relative_path)
            if not full_path.is_file():
                log.error("File not found. Skipping %s", full_path)
                continue
            files.add(full_path)

        return files

    def walk(self, root: Path) -> list[Path]:
        """Breadth-first search below root for files matching the pattern.

        Symlinked directories are followed. Each real directory is visited
        once, so link cycles cannot make the walk run forever.
        """
        pattern = self._config.file_search_pattern
        found: list[Path] = []
        queue: deque[Path] = deque([root])
        visited: set[Path] = {root.resolve()}

        while queue:
            directory = queue.popleft()
            try:
                children = sorted(directory.iterdir())
            except OSError as e:
                log.error("Error while building file watch list at %s: %s", directory, e)
                continue

            for child in children:
                try:
                    if child.is_dir():
                        real = child.resolve()
                        if real in visited:
                            log.debug("Already walked %s, skipping link %s", real, child)
                            continue
                        visited.add(real)
                        queue.append(child)
                    elif child.is_file() and fnmatch.fnmatch(child.name, pattern):
                        found.append(child)
                except OSError as e:
                    log.error("Error while building file watch list at %s: %s", child, e)

        return found
