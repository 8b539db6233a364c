"""Fingerprint table and New/Changed/Unchanged classification."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType

from sasswatch.compiler.result import CompileResult
from sasswatch.errors import FingerprintError
from sasswatch.watching.handlers import FileEventHandlers
from sasswatch.watching.hashing import ContentHasher


class FileStatus(Enum):
    """Classification of a file relative to the previous scan."""

    NEW = "new"
    CHANGED = "changed"
    UNCHANGED = "unchanged"


@dataclass
class FileOutcome:
    """What happened to one file during a scan cycle."""

    path: Path
    status: FileStatus
    fingerprint: str
    compile_result: CompileResult | None = None


class ChangeDetector:
    """Remembers the last fingerprint seen for each path.

    The table only grows: entries for files that leave the watch set are
    kept and simply never looked up again. Fingerprints are recorded after
    the handler runs whether or not the compile succeeded, so a file that
    keeps failing is only retried once its content changes again.
    """

    def __init__(
        self,
        handlers: FileEventHandlers,
        hasher: ContentHasher | None = None,
    ) -> None:
        self._handlers = handlers
        self._hasher = hasher or ContentHasher()
        self._fingerprints: dict[Path, str] = {}

    @property
    def fingerprints(self) -> Mapping[Path, str]:
        """Read-only view of the fingerprint table."""
        return MappingProxyType(self._fingerprints)

    def classify(self, path: Path, fingerprint: str) -> FileStatus:
        existing = self._fingerprints.get(path)
        if existing is None:
            return FileStatus.NEW
        if existing != fingerprint:
            return FileStatus.CHANGED
        return FileStatus.UNCHANGED

    def record(self, path: Path, fingerprint: str) -> None:
        self._fingerprints[path] = fingerprint

    async def process(
        self,
        path: Path,
        should_stop: Callable[[], bool] | None = None,
    ) -> FileOutcome | None:
        """Hash, classify and handle one file.

        Args:
            path: Absolute path of the file.
            should_stop: Checked before hashing and before compiling.

        Returns:
            The outcome, or None if should_stop returned True first. A file
            abandoned this way keeps its previous fingerprint.

        Raises:
            FingerprintError: If the file could not be read. Nothing is
                recorded.
            Exception: Anything the handler raises. The fingerprint is
                recorded first.
        """
        if should_stop is not None and should_stop():
            return None

        try:
            fingerprint = await self._hasher.hash(path)
        except OSError as e:
            raise FingerprintError(path, e) from e

        status = self.classify(path, fingerprint)
        if status is FileStatus.UNCHANGED:
            return FileOutcome(path=path, status=status, fingerprint=fingerprint)

        if should_stop is not None and should_stop():
            return None

        try:
            if status is FileStatus.NEW:
                result = await self._handlers.on_new(path)
            else:
                result = await self._handlers.on_changed(path)
        finally:
            self.record(path, fingerprint)

        return FileOutcome(
            path=path, status=status, fingerprint=fingerprint, compile_result=result
        )
