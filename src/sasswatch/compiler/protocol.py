"""Compile invoker protocol."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from sasswatch.compiler.result import CompileResult


class CompileInvoker(Protocol):
    """Runs the external stylesheet compiler for one source/output pair.

    Implementations must not raise for compiler failures; the outcome is
    reported through the returned CompileResult.
    """

    async def compile(self, source: Path, output: Path) -> CompileResult:
        ...
