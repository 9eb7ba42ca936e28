#
# src/gotestlens/output/protocols.py
#
"""
Protocol for the destinations a test report can be rendered to.
"""
from typing import Protocol, runtime_checkable

from gotestlens.pipeline.report import Report, ReportMessage


@runtime_checkable
class ReportSink(Protocol):
    def notice(self, message: ReportMessage) -> None:
        """Shows a progress line while the run is still going."""
        ...

    def raw(self, chunk: bytes) -> None:
        """Echoes raw test-runner output as it arrives."""
        ...

    def render(self, report: Report) -> None:
        """Renders the final report."""
        ...

# 🔼⚙️
