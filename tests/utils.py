"""Shared test utilities for sasswatch tests."""

from __future__ import annotations

import asyncio
import os
import stat
from pathlib import Path

from sasswatch.compiler.result import CompileResult


class RecordingInvoker:
    """In-memory CompileInvoker that records every call.

    Args:
        exit_code: Exit code reported for every compile.
        stderr: Error text reported for failed compiles.
        hold: If given, each compile waits on this event before returning.
        fail_on: Source file names for which compile raises RuntimeError.
    """

    def __init__(
        self,
        exit_code: int = 0,
        stderr: str = "",
        hold: asyncio.Event | None = None,
        fail_on: set[str] | None = None,
    ) -> None:
        self.exit_code = exit_code
        self.stderr = stderr
        self.hold = hold
        self.fail_on = fail_on or set()
        self.calls: list[tuple[Path, Path]] = []
        self.started = asyncio.Event()
        self.active = 0
        self.max_active = 0

    async def compile(self, source: Path, output: Path) -> CompileResult:
        self.calls.append((source, output))
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            self.started.set()
            if self.hold is not None:
                await self.hold.wait()
            if source.name in self.fail_on:
                raise RuntimeError(f"boom: {source.name}")
        finally:
            self.active -= 1

        return CompileResult(
            source=source,
            output=output,
            exit_code=self.exit_code,
            stderr=self.stderr,
            status="ok" if self.exit_code == 0 else "error",
            duration_ms=1.0,
        )

    @property
    def sources(self) -> list[str]:
        return [source.name for source, _ in self.calls]


def write_script(path: Path, body: str) -> Path:
    """Write an executable /bin/sh script."""
    path.write_text("#!/bin/sh\n" + body + "\n", encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def set_mtime_ns(path: Path, mtime_ns: int) -> None:
    os.utime(path, ns=(mtime_ns, mtime_ns))
