"""New-file and changed-file policies.

A changed file is always recompiled. A file seen for the first time is only
compiled when its output is missing or older than the source, so a restart
does not rebuild every stylesheet that is already up to date.
"""

from __future__ import annotations

from pathlib import Path

from sasswatch.compiler.protocol import CompileInvoker
from sasswatch.compiler.result import CompileResult
from sasswatch.config.schema import DEFAULT_OUTPUT_EXTENSION
from sasswatch.logging import TRACE, get_logger

log = get_logger("watching")


def output_path_for(source: Path, extension: str = DEFAULT_OUTPUT_EXTENSION) -> Path:
    """Output lives next to the source with its extension replaced."""
    return source.with_suffix(extension)


def output_is_stale(source: Path, output: Path) -> bool:
    """True if output is missing or source was modified strictly after it."""
    try:
        output_mtime = output.stat().st_mtime_ns
    except FileNotFoundError:
        return True
    return source.stat().st_mtime_ns > output_mtime


class FileEventHandlers:
    """Decides whether a new or changed stylesheet needs compiling."""

    def __init__(
        self,
        invoker: CompileInvoker,
        output_extension: str = DEFAULT_OUTPUT_EXTENSION,
    ) -> None:
        self._invoker = invoker
        self._output_extension = output_extension

    def output_path(self, source: Path) -> Path:
        return output_path_for(source, self._output_extension)

    async def on_new(self, source: Path) -> CompileResult | None:
        """Compile a first-seen file only if its output is missing or stale.

        Returns:
            The compile result, or None when the output is up to date.
        """
        output = self.output_path(source)
        if not output_is_stale(source, output):
            log.log(TRACE, "Output up to date: %s", output.name)
            return None

        log.debug("Detected file change: %s", source.name)
        return await self._invoker.compile(source, output)

    async def on_changed(self, source: Path) -> CompileResult:
        """Recompile unconditionally."""
        log.debug("Detected file change: %s", source.name)
        return await self._invoker.compile(source, self.output_path(source))
