import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from gotestlens.config import RunConfig
from gotestlens.output import ReportSink
from gotestlens.testing import TestRunResult


def go_event(action: str, package: str = "pkg", test: str | None = None, **extra) -> str:
    """Builds one line of `go test -json` output."""
    payload: dict = {"Action": action, "Package": package}
    if test is not None:
        payload["Test"] = test
    for key, value in extra.items():
        payload[key.capitalize()] = value
    return json.dumps(payload)


class FakeTestRunner:
    """Replays canned stdout/stderr chunks through the runner callbacks."""

    def __init__(self, stdout_chunks: list[bytes], stderr_chunks: list[bytes] | None = None, exit_code: int = 0):
        self.stdout_chunks = stdout_chunks
        self.stderr_chunks = stderr_chunks or []
        self.exit_code = exit_code
        self.calls: list[tuple[list[str], Path]] = []

    async def run_tests(self, command, working_dir, on_stdout=None, on_stderr=None) -> TestRunResult:
        self.calls.append((command, working_dir))
        for chunk in self.stdout_chunks:
            if on_stdout:
                on_stdout(chunk)
        for chunk in self.stderr_chunks:
            if on_stderr:
                on_stderr(chunk)
        stdout = b"".join(self.stdout_chunks).decode()
        stderr = b"".join(self.stderr_chunks).decode()
        return TestRunResult(
            success=self.exit_code == 0,
            exit_code=self.exit_code,
            stdout=stdout,
            stderr=stderr,
        )


class StaticResolver:
    """Resolves every file to `<package-dir>/<file>` without running `go list`."""

    def __init__(self, root: str = "internal", failing_files: set[str] | None = None):
        self.root = root
        self.failing_files = failing_files or set()
        self.calls: list[tuple[str, str]] = []

    async def resolve(self, package: str, filename: str) -> str:
        from gotestlens.exceptions import PathResolutionError

        self.calls.append((package, filename))
        if filename in self.failing_files:
            raise PathResolutionError("lookup failed", package, filename=filename, exit_code=1)
        return f"{self.root}/{package.rsplit('/', 1)[-1]}/{filename}"


@pytest.fixture
def event():
    return go_event


@pytest.fixture
def run_config(tmp_path: Path) -> RunConfig:
    return RunConfig(
        package="./...",
        working_dir=tmp_path,
        workspace_root=tmp_path,
        show_passed_tests=True,
        long_running_threshold=-1,
    )


@pytest.fixture
def mock_sink() -> MagicMock:
    return MagicMock(spec=ReportSink)


@pytest.fixture
def static_resolver() -> StaticResolver:
    return StaticResolver()


@pytest.fixture
def make_runner():
    return FakeTestRunner


@pytest.fixture
def make_resolver():
    return StaticResolver
