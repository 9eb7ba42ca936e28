#
# tests/unit/test_resolver.py
#
"""
Tests for resolving package files to repository-relative paths via `go list`.
"""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from gotestlens.exceptions import PathResolutionError
from gotestlens.pipeline.resolver import GoListPathResolver, PathResolver, relativize

SUBPROCESS_EXEC = "gotestlens.pipeline.resolver.asyncio.create_subprocess_exec"


def _process(stdout: bytes = b"", stderr: bytes = b"", returncode: int = 0) -> MagicMock:
    process = MagicMock()
    process.communicate = AsyncMock(return_value=(stdout, stderr))
    process.returncode = returncode
    return process


def test_relativize_strips_workspace_prefix() -> None:
    assert relativize(Path("/ws/repo/pkg/a_test.go"), Path("/ws/repo")) == "pkg/a_test.go"


def test_relativize_keeps_paths_outside_workspace() -> None:
    assert relativize(Path("/elsewhere/a_test.go"), Path("/ws/repo")) == "/elsewhere/a_test.go"
    assert relativize(Path("/elsewhere/a_test.go"), None) == "/elsewhere/a_test.go"


@pytest.mark.asyncio
class TestGoListPathResolver:
    async def test_resolves_relative_path(self) -> None:
        resolver = GoListPathResolver(working_dir=Path("/ws/repo"), workspace_root=Path("/ws/repo"))
        with patch(SUBPROCESS_EXEC, new=AsyncMock(return_value=_process(b"/ws/repo/internal/pkg\n"))) as exec_mock:
            path = await resolver.resolve("example.com/repo/internal/pkg", "pkg_test.go")

        assert path == "internal/pkg/pkg_test.go"
        args, kwargs = exec_mock.call_args
        assert args == ("go", "list", "-f", "{{.Dir}}", "example.com/repo/internal/pkg")
        assert kwargs["cwd"] == Path("/ws/repo")
        assert isinstance(resolver, PathResolver)

    async def test_package_directory_is_cached(self) -> None:
        resolver = GoListPathResolver(workspace_root=Path("/ws"))
        with patch(SUBPROCESS_EXEC, new=AsyncMock(return_value=_process(b"/ws/pkg\n"))) as exec_mock:
            first = await resolver.resolve("pkg", "a_test.go")
            second = await resolver.resolve("pkg", "b_test.go")

        assert (first, second) == ("pkg/a_test.go", "pkg/b_test.go")
        exec_mock.assert_called_once()

    async def test_nonzero_exit_raises(self) -> None:
        resolver = GoListPathResolver()
        process = _process(stderr=b"no required module provides package\n", returncode=1)
        with patch(SUBPROCESS_EXEC, new=AsyncMock(return_value=process)):
            with pytest.raises(PathResolutionError) as exc_info:
                await resolver.resolve("missing/pkg", "a_test.go")

        assert exc_info.value.exit_code == 1
        assert exc_info.value.package == "missing/pkg"
        assert exc_info.value.filename == "a_test.go"

    async def test_empty_output_raises(self) -> None:
        resolver = GoListPathResolver()
        with patch(SUBPROCESS_EXEC, new=AsyncMock(return_value=_process(b"  \n"))):
            with pytest.raises(PathResolutionError):
                await resolver.resolve("pkg", "a_test.go")

    async def test_missing_binary_raises(self) -> None:
        resolver = GoListPathResolver(go_binary="definitely-not-go")
        with patch(SUBPROCESS_EXEC, new=AsyncMock(side_effect=FileNotFoundError("no such file"))):
            with pytest.raises(PathResolutionError):
                await resolver.resolve("pkg", "a_test.go")

    async def test_failures_are_not_cached(self) -> None:
        resolver = GoListPathResolver(workspace_root=Path("/ws"))
        exec_mock = AsyncMock(side_effect=[_process(returncode=1), _process(b"/ws/pkg\n")])
        with patch(SUBPROCESS_EXEC, new=exec_mock):
            with pytest.raises(PathResolutionError):
                await resolver.resolve("pkg", "a_test.go")
            assert await resolver.resolve("pkg", "a_test.go") == "pkg/a_test.go"

    async def test_invalid_argument_raises_resolution_error(self) -> None:
        resolver = GoListPathResolver()
        with patch(SUBPROCESS_EXEC, new=AsyncMock(side_effect=ValueError("embedded null byte"))):
            with pytest.raises(PathResolutionError) as excinfo:
                await resolver.resolve("bad\x00pkg", "a_test.go")
        assert excinfo.value.filename == "a_test.go"
