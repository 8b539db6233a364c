"""Polling scheduler that drives scan cycles.

A timer task fires every ``polling_interval`` seconds on a fixed schedule.
Each tick tries to start a scan cycle; if one is still running the tick is
dropped. Cycles run as their own tasks so a slow compile never delays the
timer.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from pathlib import Path

from sasswatch.compiler.invoker import SubprocessCompileInvoker
from sasswatch.compiler.protocol import CompileInvoker
from sasswatch.compiler.result import CompileResult
from sasswatch.config.schema import WatchConfig
from sasswatch.errors import FingerprintError
from sasswatch.logging import TRACE, get_logger
from sasswatch.watching.detector import ChangeDetector, FileOutcome, FileStatus
from sasswatch.watching.fileset import FileSetBuilder
from sasswatch.watching.handlers import FileEventHandlers
from sasswatch.watching.hashing import ContentHasher

log = get_logger("watching")


@dataclass
class ScanCycle:
    """Record of a single scan over the watch set."""

    files: set[Path]
    outcomes: dict[Path, FileOutcome] = field(default_factory=dict)
    failures: dict[Path, str] = field(default_factory=dict)
    cancelled: bool = False
    started_at: float = field(default_factory=time.time)

    def with_status(self, status: FileStatus) -> list[Path]:
        return sorted(p for p, o in self.outcomes.items() if o.status is status)

    @property
    def compile_results(self) -> list[CompileResult]:
        return [o.compile_result for o in self.outcomes.values() if o.compile_result is not None]


class WatchScheduler:
    """Polls the configured stylesheets and recompiles what changed.

    Example:
        scheduler = WatchScheduler(WatchConfig(directories_to_watch={"styles"}))
        async with scheduler:
            await host_shutdown.wait()
    """

    def __init__(
        self,
        config: WatchConfig,
        *,
        cwd: str | Path | None = None,
        invoker: CompileInvoker | None = None,
        hasher: ContentHasher | None = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            config: Immutable watch configuration.
            cwd: Directory that configured paths are relative to and the
                compiler runs in. Defaults to the current working directory.
            invoker: Compiler invoker. Defaults to running
                ``config.compiler_executable_path`` as a subprocess.
            hasher: Content hasher. Defaults to SHA-256.
        """
        self._config = config
        self._cwd = Path(cwd) if cwd is not None else Path.cwd()
        self._invoker = invoker or SubprocessCompileInvoker(
            config.compiler_executable_path,
            cwd=self._cwd,
            timeout=config.compile_timeout,
        )
        self._file_set = FileSetBuilder(config, cwd=self._cwd)
        self._detector = ChangeDetector(
            FileEventHandlers(self._invoker, config.output_extension),
            hasher=hasher,
        )

        # Control state. The host signal is only ever read; stop() sets
        # the scheduler's own event.
        self._cancellation: asyncio.Event | None = None
        self._stopped = asyncio.Event()
        self._scan_running = False
        self._timer_task: asyncio.Task[None] | None = None
        self._cycle_task: asyncio.Task[ScanCycle | None] | None = None

    @property
    def config(self) -> WatchConfig:
        return self._config

    @property
    def detector(self) -> ChangeDetector:
        return self._detector

    @property
    def file_set(self) -> FileSetBuilder:
        return self._file_set

    @property
    def is_running(self) -> bool:
        """True while the timer is firing."""
        return self._timer_task is not None and not self._timer_task.done()

    @property
    def is_scanning(self) -> bool:
        """True while a scan cycle is in progress."""
        return self._scan_running

    def start(self, cancellation: asyncio.Event | None = None) -> None:
        """Start the polling timer.

        Must be called from within a running event loop.

        Args:
            cancellation: Shared signal that stops the timer and makes an
                in-progress cycle abandon its remaining files. If it is
                already set, nothing is started.
        """
        if self.is_running:
            log.warning("Sass watcher already running")
            return

        self._cancellation = cancellation
        self._stopped.clear()

        if self.should_stop():
            log.info("Sass watcher cancelled before start")
            return

        log.info(
            "Sass compiler file change watcher starting (interval: %.1fs)",
            self._config.polling_interval,
        )
        self._timer_task = asyncio.create_task(self._timer_loop())

    def stop(self) -> None:
        """Stop the timer without touching the host's cancellation signal.

        A cycle already in progress stops at its next per-file check; use
        wait_idle() to wait for it.
        """
        self._stopped.set()
        if self._timer_task is not None and not self._timer_task.done():
            self._timer_task.cancel()
        self._timer_task = None
        log.info("Sass compiler file change watcher stopped")

    def should_stop(self) -> bool:
        """True once stop() was called or the host signal is set."""
        if self._stopped.is_set():
            return True
        return self._cancellation is not None and self._cancellation.is_set()

    async def wait_idle(self) -> None:
        """Wait for the in-progress scan cycle, if any, to finish."""
        task = self._cycle_task
        if task is not None and not task.done():
            await asyncio.wait({task})

    async def __aenter__(self) -> WatchScheduler:
        self.start()
        return self

    async def __aexit__(self, *args: object) -> None:
        self.stop()
        await self.wait_idle()

    def tick(self) -> bool:
        """Start a scan cycle unless one is running or we are cancelled.

        The busy check and set happen without yielding to the event loop,
        so two ticks can never both start a cycle.

        Returns:
            True if a new cycle was started.
        """
        if self.should_stop():
            return False
        if self._scan_running:
            log.log(TRACE, "Scan still running, dropping tick")
            return False

        self._scan_running = True
        self._cycle_task = asyncio.create_task(self._guarded_scan())
        return True

    async def run_cycle(self) -> ScanCycle | None:
        """Run one scan cycle now, subject to the same busy guard as ticks.

        Returns:
            The completed ScanCycle, or None if a cycle was already running
            or the cycle failed as a whole.
        """
        if self._scan_running:
            return None
        self._scan_running = True
        return await self._guarded_scan()

    async def _timer_loop(self) -> None:
        loop = asyncio.get_running_loop()
        interval = self._config.polling_interval
        next_tick = loop.time() + interval

        try:
            while not self.should_stop():
                await asyncio.sleep(max(0.0, next_tick - loop.time()))
                if self.should_stop():
                    break

                self.tick()

                # Keep to the fixed schedule; ticks missed while the loop
                # was blocked are skipped, not replayed.
                next_tick += interval
                now = loop.time()
                if next_tick <= now:
                    missed = int((now - next_tick) // interval) + 1
                    next_tick += missed * interval
        except asyncio.CancelledError:
            log.debug("Sass watcher timer cancelled")

    async def _guarded_scan(self) -> ScanCycle | None:
        try:
            return await self._scan()
        except Exception:
            log.exception("Scan cycle failed")
            return None
        finally:
            self._scan_running = False

    async def _scan(self) -> ScanCycle:
        cycle = ScanCycle(files=self._file_set.build())

        for path in sorted(cycle.files):
            if self.should_stop():
                cycle.cancelled = True
                break

            try:
                outcome = await self._detector.process(path, self.should_stop)
            except FingerprintError as e:
                log.warning("%s, skipping until next scan", e)
                cycle.failures[path] = str(e)
                continue
            except Exception as e:
                # Fingerprint already recorded; retried only once content changes
                log.exception("Error processing %s", path)
                cycle.failures[path] = str(e)
                continue

            if outcome is None:
                cycle.cancelled = True
                break
            cycle.outcomes[path] = outcome

        return cycle
