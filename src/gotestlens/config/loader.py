#
# config/loader.py
#
"""
Loads gotestlens configuration from an optional TOML file plus overrides.
"""

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import attrs
import structlog

from gotestlens.config.models import GlobalConfig, GotestlensConfig, RunConfig
from gotestlens.exceptions import ConfigurationError
from gotestlens.pipeline.events import atoi_or_default
from gotestlens.telemetry import StructLogger

log: StructLogger = structlog.get_logger("config.loader")

_RUN_FIELDS = frozenset(a.name for a in attrs.fields(RunConfig))
_GLOBAL_FIELDS = frozenset(a.name for a in attrs.fields(GlobalConfig))


def _read_toml(config_path: Path) -> dict[str, Any]:
    try:
        with config_path.open("rb") as f:
            return tomllib.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError("Configuration file not found", path=str(config_path)) from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML: {e}", path=str(config_path)) from e
    except OSError as e:
        raise ConfigurationError(f"Could not read configuration: {e}", path=str(config_path)) from e


def _section(data: Mapping[str, Any], name: str, allowed: frozenset[str], path: str | None) -> dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, Mapping):
        raise ConfigurationError(f"Section [{name}] must be a table", path=path)
    unknown = sorted(set(section) - allowed)
    if unknown:
        raise ConfigurationError(f"Unknown key(s) in [{name}]: {', '.join(unknown)}", path=path)
    return dict(section)


def load_config(
    config_path: Path | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> GotestlensConfig:
    """
    Builds the configuration from an optional TOML file and explicit overrides.

    Args:
        config_path: Path to a TOML file with optional `[run]` and `[global]` tables.
        overrides: `RunConfig` field values (typically from the CLI or its
            environment variables). `None` values are ignored so that unset
            options never mask the file.

    Returns:
        The validated configuration.

    Raises:
        ConfigurationError: If the file is unreadable or a value is invalid.
    """
    path_str = str(config_path) if config_path else None
    data: dict[str, Any] = {}
    if config_path is not None:
        log.debug("Reading configuration file", path=path_str)
        data = _read_toml(config_path)
        unknown_sections = sorted(set(data) - {"run", "global"})
        if unknown_sections:
            raise ConfigurationError(
                f"Unknown section(s): {', '.join(unknown_sections)}", path=path_str
            )

    run_values = _section(data, "run", _RUN_FIELDS, path_str)
    global_values = _section(data, "global", _GLOBAL_FIELDS, path_str)

    for key, value in (overrides or {}).items():
        if key not in _RUN_FIELDS:
            raise ConfigurationError(f"Unknown option '{key}'")
        if value is not None:
            run_values[key] = value

    threshold = run_values.get("long_running_threshold")
    if isinstance(threshold, str):
        run_values["long_running_threshold"] = atoi_or_default(threshold, 15)

    try:
        config = GotestlensConfig(
            run=RunConfig(**run_values),
            global_config=GlobalConfig(**global_values),
        )
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}", path=path_str) from e

    log.debug("Configuration loaded", package=config.run.package, args=list(config.run.args))
    return config

# 🔼⚙️
