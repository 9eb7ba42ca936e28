#
# src/gotestlens/output/__init__.py
#
"""
Report sinks: where and how a finished report is shown.
"""
import os

import structlog

from gotestlens.exceptions import ConfigurationError
from gotestlens.telemetry import StructLogger

from .console import ConsoleSink
from .github import GithubActionsSink
from .protocols import ReportSink

log: StructLogger = structlog.get_logger("output")

SINK_MAP: dict[str, type] = {
    "github": GithubActionsSink,
    "console": ConsoleSink,
}


def detect_output_format() -> str:
    return "github" if os.environ.get("GITHUB_ACTIONS") == "true" else "console"


def get_report_sink(output_format: str | None = None) -> ReportSink:
    """Returns a sink for `output_format`, auto-detecting GitHub Actions when unset."""
    name = (output_format or detect_output_format()).lower()
    sink_class = SINK_MAP.get(name)
    if sink_class is None:
        raise ConfigurationError(
            f"Unsupported output format: '{output_format}'. Available formats: {list(SINK_MAP.keys())}"
        )
    log.debug("Using report sink", output_format=name)
    return sink_class()


__all__ = [
    "ConsoleSink",
    "GithubActionsSink",
    "ReportSink",
    "detect_output_format",
    "get_report_sink",
]

# 🔼⚙️
