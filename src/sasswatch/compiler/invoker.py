"""Subprocess-based invoker for the external sass compiler."""

from __future__ import annotations

import asyncio
import time
from pathlib import Path

from sasswatch.compiler.result import CompileResult
from sasswatch.logging import get_logger

log = get_logger("compiler")

# Fixed flags: minified output, no source maps, stop on first error
COMPILER_ARGS: tuple[str, ...] = (
    "--style=compressed",
    "--no-source-map",
    "--stop-on-error",
)


class SubprocessCompileInvoker:
    """Invoke the compiler executable with asyncio subprocess.

    The command line is ``<executable> --style=compressed --no-source-map
    --stop-on-error <input> <output>``, run from ``cwd``. Nonzero exits and
    launch failures are logged and returned as results, never raised.
    """

    def __init__(
        self,
        executable: str = "sass",
        cwd: str | Path | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the invoker.

        Args:
            executable: Compiler binary name or path.
            cwd: Working directory for the compiler. Defaults to the
                process working directory at call time.
            timeout: Seconds to wait before killing the compiler. None waits
                indefinitely.
        """
        self._executable = executable
        self._cwd = cwd
        self._timeout = timeout

    @property
    def executable(self) -> str:
        return self._executable

    def build_command(self, source: Path, output: Path) -> list[str]:
        """Build the argv for compiling source into output."""
        return [self._executable, *COMPILER_ARGS, str(source), str(output)]

    async def compile(self, source: Path, output: Path) -> CompileResult:
        """Run the compiler and capture its exit code and stderr.

        Args:
            source: Absolute path of the stylesheet to compile.
            output: Absolute path the compiled CSS is written to.

        Returns:
            CompileResult describing the run.
        """
        start_time = time.perf_counter()
        cmd_list = self.build_command(source, output)
        working_dir = str(self._cwd) if self._cwd is not None else None

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd_list,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
                cwd=working_dir,
            )
        except FileNotFoundError:
            return self._failed(
                source, output, 127, f"Command not found: {self._executable}", start_time
            )
        except PermissionError:
            return self._failed(
                source, output, 126, f"Permission denied: {self._executable}", start_time
            )
        except OSError as e:
            return self._failed(source, output, 1, f"OS error: {e}", start_time)

        try:
            if self._timeout is not None:
                _, stderr_data = await asyncio.wait_for(
                    process.communicate(), timeout=self._timeout
                )
            else:
                _, stderr_data = await process.communicate()
        except asyncio.TimeoutError:
            try:
                process.kill()
                await process.wait()
            except ProcessLookupError:
                pass  # Process already gone

            log.error("Compile timed out after %ss: %s", self._timeout, source)
            return CompileResult(
                source=source,
                output=output,
                exit_code=None,
                stderr=f"Compiler timed out after {self._timeout}s",
                status="timeout",
                duration_ms=(time.perf_counter() - start_time) * 1000,
            )

        duration_ms = (time.perf_counter() - start_time) * 1000
        stderr = stderr_data.decode("utf-8", errors="replace") if stderr_data else ""
        exit_code = process.returncode

        if exit_code == 0:
            log.info("Compiled %s -> %s (%.0fms)", source.name, output.name, duration_ms)
            status = "ok"
        else:
            if stderr:
                log.error("Compile error in %s: %s", source, stderr.strip())
            else:
                log.error("Compile error in %s: exit code %s", source, exit_code)
            status = "error"

        return CompileResult(
            source=source,
            output=output,
            exit_code=exit_code,
            stderr=stderr,
            status=status,
            duration_ms=duration_ms,
        )

    def _failed(
        self,
        source: Path,
        output: Path,
        exit_code: int,
        message: str,
        start_time: float,
    ) -> CompileResult:
        log.error("Could not launch compiler for %s: %s", source, message)
        return CompileResult(
            source=source,
            output=output,
            exit_code=exit_code,
            stderr=message,
            status="error",
            duration_ms=(time.perf_counter() - start_time) * 1000,
        )
