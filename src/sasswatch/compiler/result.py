"""Compile invocation result dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass
class CompileResult:
    """Outcome of one compiler run against a source/output pair.

    Attributes:
        source: Stylesheet that was compiled.
        output: Path the compiler was asked to write.
        exit_code: Process exit code (0 = success), or None on timeout.
        stderr: Captured standard error text.
        status: "ok", "error", or "timeout".
        duration_ms: Wall time of the invocation in milliseconds.
    """

    source: Path
    output: Path
    exit_code: int | None
    stderr: str
    status: str  # "ok", "error", "timeout"
    duration_ms: float

    @property
    def success(self) -> bool:
        """True if the compiler exited with code 0."""
        return self.exit_code == 0

    def __repr__(self) -> str:
        if self.success:
            return f"<CompileResult ok, {self.source.name} -> {self.output.name}>"
        return f"<CompileResult {self.status}, exit={self.exit_code}, {self.source.name}>"
