#
# config/models.py
#
"""
Attrs-based data models for gotestlens configuration structure.
"""

import logging
import os
from pathlib import Path
from typing import Any

from attrs import define, field

OUTPUT_FORMATS = ("github", "console")
RUNNER_NAMES = ("go", "subprocess")


# --- Converters and validators ---
def split_args(value: Any) -> tuple[str, ...]:
    """Accepts a `;`-separated string or a sequence and returns clean arguments."""
    if value is None:
        return ()
    if isinstance(value, str):
        parts = value.split(";")
    else:
        parts = [str(part) for part in value]
    return tuple(a.strip() for a in parts if a.strip())


def _optional_path(value: Any) -> Path | None:
    if value is None or value == "":
        return None
    return Path(value)


def _default_workspace_root() -> Path | None:
    return _optional_path(os.environ.get("GITHUB_WORKSPACE"))


def _validate_log_level(inst: Any, attr: Any, value: str) -> None:
    """Validator for standard logging level names."""
    valid = logging._nameToLevel.keys()
    if value.upper() not in valid:
        raise ValueError(f"Invalid log_level '{value}'. Must be one of {list(valid)}.")


def _validate_threshold(inst: Any, attr: Any, value: int) -> None:
    """`-1` disables the long-running check, anything else must be non-negative."""
    if not isinstance(value, int) or isinstance(value, bool) or value < -1:
        raise ValueError(f"Field '{attr.name}' must be an integer >= -1, got {value!r}")


def _validate_choice(choices: tuple[str, ...], allow_none: bool = False):
    def _validator(inst: Any, attr: Any, value: str | None) -> None:
        if value is None and allow_none:
            return
        if value not in choices:
            raise ValueError(f"Field '{attr.name}' must be one of {list(choices)}, got {value!r}")

    return _validator


@define(frozen=True, slots=True)
class RunConfig:
    """Settings for a single `go test` invocation and how its results are reported."""

    package: str = field(default="./...")
    args: tuple[str, ...] = field(default=(), converter=split_args)
    working_dir: Path = field(default=Path("."), converter=Path)
    workspace_root: Path | None = field(factory=_default_workspace_root, converter=_optional_path)
    go_binary: str = field(default="go")
    runner: str = field(default="go", validator=_validate_choice(RUNNER_NAMES))

    # Reporting switches
    show_stdout: bool = field(default=False)
    show_package_output: bool = field(default=True)
    show_passed_tests: bool = field(default=True)
    long_running_threshold: int = field(default=15, validator=_validate_threshold)
    output_format: str | None = field(
        default=None, validator=_validate_choice(OUTPUT_FORMATS, allow_none=True)
    )


@define(frozen=True, slots=True)
class GlobalConfig:
    """Global default settings for gotestlens."""
    log_level: str = field(default="WARNING", validator=_validate_log_level)

    @property
    def numeric_log_level(self) -> int:
        return logging.getLevelName(self.log_level.upper())


@define(frozen=True, slots=True)
class GotestlensConfig:
    """Root configuration object for the gotestlens application."""
    run: RunConfig = field(factory=RunConfig)
    global_config: GlobalConfig = field(factory=GlobalConfig, metadata={"toml_name": "global"})

# 🔼⚙️
