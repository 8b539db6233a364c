"""Tests for the external compiler invocation."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

from sasswatch.compiler import COMPILER_ARGS, CompileResult, SubprocessCompileInvoker
from tests.utils import write_script

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="uses /bin/sh scripts")


class TestCompileResult:
    """Tests for CompileResult dataclass."""

    def test_success_property(self) -> None:
        result = CompileResult(
            source=Path("a.scss"),
            output=Path("a.css"),
            exit_code=0,
            stderr="",
            status="ok",
            duration_ms=5.0,
        )
        assert result.success is True
        assert "ok" in repr(result)

    def test_failure_property(self) -> None:
        result = CompileResult(
            source=Path("a.scss"),
            output=Path("a.css"),
            exit_code=65,
            stderr="Error: expected ';'",
            status="error",
            duration_ms=5.0,
        )
        assert result.success is False
        assert "exit=65" in repr(result)

    def test_timeout_is_failure(self) -> None:
        result = CompileResult(
            source=Path("a.scss"),
            output=Path("a.css"),
            exit_code=None,
            stderr="",
            status="timeout",
            duration_ms=1000.0,
        )
        assert result.success is False


class TestSubprocessCompileInvoker:
    """Tests for SubprocessCompileInvoker."""

    @pytest.fixture
    def source(self, styles: Path) -> Path:
        path = styles / "a.scss"
        path.write_text("body { color: red; }\n")
        return path

    @pytest.fixture
    def fake_sass(self, tmp_path: Path) -> Path:
        """Records its argv and working directory, then copies input to output."""
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir()
        return write_script(
            bin_dir / "sass",
            f'printf "%s\\n" "$@" > "{bin_dir}/args.txt"\n'
            f'pwd > "{bin_dir}/cwd.txt"\n'
            'cp "$4" "$5"',
        )

    def test_build_command(self) -> None:
        invoker = SubprocessCompileInvoker("sass")
        command = invoker.build_command(Path("/p/a.scss"), Path("/p/a.css"))
        assert command == [
            "sass",
            "--style=compressed",
            "--no-source-map",
            "--stop-on-error",
            "/p/a.scss",
            "/p/a.css",
        ]
        assert tuple(command[1:4]) == COMPILER_ARGS

    @posix_only
    @pytest.mark.asyncio
    async def test_success(self, fake_sass: Path, source: Path, tmp_path: Path) -> None:
        invoker = SubprocessCompileInvoker(str(fake_sass), cwd=tmp_path)
        output = source.with_suffix(".css")

        result = await invoker.compile(source, output)

        assert result.success
        assert result.status == "ok"
        assert result.exit_code == 0
        assert output.read_text() == source.read_text()

        args = (fake_sass.parent / "args.txt").read_text().splitlines()
        assert args == [*COMPILER_ARGS, str(source), str(output)]
        cwd = (fake_sass.parent / "cwd.txt").read_text().strip()
        assert Path(cwd).resolve() == tmp_path.resolve()

    @posix_only
    @pytest.mark.asyncio
    async def test_nonzero_exit_is_logged_not_raised(
        self, tmp_path: Path, source: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        failing = write_script(
            tmp_path / "failing-sass", 'echo "Error: expected \\";\\"." >&2\nexit 65'
        )
        invoker = SubprocessCompileInvoker(str(failing), cwd=tmp_path)

        with caplog.at_level(logging.ERROR, logger="sasswatch"):
            result = await invoker.compile(source, source.with_suffix(".css"))

        assert not result.success
        assert result.exit_code == 65
        assert result.status == "error"
        assert "Error: expected" in result.stderr
        assert "Compile error" in caplog.text
        assert "Error: expected" in caplog.text
        assert not source.with_suffix(".css").exists()

    @pytest.mark.asyncio
    async def test_executable_not_found(self, source: Path, tmp_path: Path) -> None:
        invoker = SubprocessCompileInvoker("nonexistent_sass_xyz", cwd=tmp_path)

        result = await invoker.compile(source, source.with_suffix(".css"))

        assert result.exit_code == 127
        assert result.status == "error"
        assert "nonexistent_sass_xyz" in result.stderr

    @posix_only
    @pytest.mark.asyncio
    async def test_permission_denied(self, source: Path, tmp_path: Path) -> None:
        not_executable = tmp_path / "sass"
        not_executable.write_text("#!/bin/sh\nexit 0\n")
        not_executable.chmod(0o644)
        invoker = SubprocessCompileInvoker(str(not_executable), cwd=tmp_path)

        result = await invoker.compile(source, source.with_suffix(".css"))

        assert result.exit_code == 126
        assert not result.success

    @posix_only
    @pytest.mark.asyncio
    async def test_timeout_kills_compiler(self, source: Path, tmp_path: Path) -> None:
        slow = write_script(tmp_path / "slow-sass", "exec sleep 10")
        invoker = SubprocessCompileInvoker(str(slow), cwd=tmp_path, timeout=0.2)

        result = await invoker.compile(source, source.with_suffix(".css"))

        assert result.status == "timeout"
        assert result.exit_code is None
        assert result.duration_ms < 5000
