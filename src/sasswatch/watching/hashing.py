"""Content fingerprints for change detection."""

from __future__ import annotations

import asyncio
import hashlib
from pathlib import Path


class ContentHasher:
    """Computes a SHA-256 hex digest over a file's full byte content.

    Read errors (file vanished, permission changed) propagate as OSError;
    the caller treats them as a failure for that file only.
    """

    algorithm = "sha256"

    def __init__(self, chunk_size: int = 65536) -> None:
        self._chunk_size = chunk_size

    def hash_sync(self, path: Path) -> str:
        hasher = hashlib.new(self.algorithm)
        with open(path, "rb") as f:
            while chunk := f.read(self._chunk_size):
                hasher.update(chunk)
        return hasher.hexdigest()

    async def hash(self, path: Path) -> str:
        """Hash the file off the event loop thread."""
        return await asyncio.to_thread(self.hash_sync, path)
