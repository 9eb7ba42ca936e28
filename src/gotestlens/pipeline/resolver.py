# src/gotestlens/pipeline/resolver.py

"""
Maps a Go package import path plus a bare filename to a repository-relative path.
"""

import asyncio
from pathlib import Path, PurePosixPath
from typing import Protocol, runtime_checkable

import structlog

from gotestlens.exceptions import PathResolutionError
from gotestlens.telemetry import StructLogger

log: StructLogger = structlog.get_logger("pipeline.resolver")


@runtime_checkable
class PathResolver(Protocol):
    """Protocol for anything that can locate the source file of a package."""

    async def resolve(self, package: str, filename: str) -> str:
        """
        Returns the path of `filename` inside `package`.

        Raises:
            PathResolutionError: If the package directory cannot be determined.
        """
        ...


def relativize(path: Path, workspace_root: Path | None) -> str:
    """Strips `workspace_root` from `path` when it is a prefix, returning a POSIX path."""
    if workspace_root is not None:
        try:
            path = path.relative_to(workspace_root)
        except ValueError:
            pass
    return PurePosixPath(*path.parts).as_posix()


class GoListPathResolver(PathResolver):
    """
    Resolves package directories with `go list -f {{.Dir}} <package>`.

    Directories are cached per package for the lifetime of the resolver, so
    one run asks `go list` at most once per package that resolved.
    """

    def __init__(
        self,
        working_dir: Path = Path("."),
        workspace_root: Path | None = None,
        go_binary: str = "go",
    ):
        self.working_dir = working_dir
        self.workspace_root = workspace_root
        self.go_binary = go_binary
        self._dirs: dict[str, Path] = {}

    async def package_dir(self, package: str) -> Path:
        cached = self._dirs.get(package)
        if cached is not None:
            return cached

        command = [self.go_binary, "list", "-f", "{{.Dir}}", package]
        resolve_log = log.bind(package=package, working_dir=str(self.working_dir))
        resolve_log.debug("Resolving package directory", emoji_key="resolve")
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=self.working_dir,
            )
            stdout_bytes, stderr_bytes = await process.communicate()
        # ValueError covers arguments the OS cannot take, e.g. an embedded NUL
        except (OSError, ValueError) as e:
            raise PathResolutionError(f"could not run '{self.go_binary} list': {e}", package) from e

        stdout = stdout_bytes.decode("utf-8", errors="replace").strip()
        stderr = stderr_bytes.decode("utf-8", errors="replace")
        if process.returncode != 0:
            raise PathResolutionError(
                f"'go list' exited with code {process.returncode}",
                package,
                exit_code=process.returncode,
                stderr=stderr,
            )
        if not stdout:
            raise PathResolutionError("'go list' returned no directory", package, exit_code=0, stderr=stderr)

        directory = Path(stdout.splitlines()[0].strip())
        self._dirs[package] = directory
        return directory

    async def resolve(self, package: str, filename: str) -> str:
        try:
            directory = await self.package_dir(package)
        except PathResolutionError as e:
            e.filename = filename
            raise
        return relativize(directory / filename, self.workspace_root)

# 🔼⚙️
