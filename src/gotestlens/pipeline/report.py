# src/gotestlens/pipeline/report.py

"""
Data structures produced by the reporting pipeline.

These describe what should be shown, never how: sinks in `gotestlens.output`
decide on colours, grouping syntax and annotation formats.
"""

from enum import Enum, auto

from attrs import define, field


class Verdict(Enum):
    """Overall outcome of one test run."""

    PASSED = auto()
    FAILED = auto()
    INFRA_FAILURE = auto()  # Nonzero exit but no test can be blamed.


class MessageLevel(Enum):
    """Severity/tone of a single report line."""

    INFO = auto()
    SUCCESS = auto()
    WARNING = auto()
    FAILURE = auto()  # A test outcome line, not an error of the tool itself.
    ERROR = auto()  # Marks the run as failed on the CI host.


@define(frozen=True, slots=True)
class ReportMessage:
    level: MessageLevel
    text: str


@define(frozen=True, slots=True)
class LocatedAnnotation:
    """An annotation whose file has been resolved to a repository-relative path."""

    path: str
    line: int
    text: str


@define(frozen=True, slots=True)
class ReportBlock:
    """A titled, collapsible chunk of output, optionally with source annotations."""

    title: str
    text: str
    level: MessageLevel = field(default=MessageLevel.INFO)
    annotations: tuple[LocatedAnnotation, ...] = field(default=(), converter=tuple)


ReportItem = ReportMessage | ReportBlock


def format_seconds(seconds: float) -> str:
    """Renders a duration without trailing zeros, e.g. `0.01`, `2`, `1.5`."""
    return f"{seconds:f}".rstrip("0").rstrip(".") or "0"


@define(frozen=True, slots=True)
class Report:
    verdict: Verdict
    items: tuple[ReportItem, ...] = field(converter=tuple)
    passed: int = field(default=0)
    total: int = field(default=0)
    elapsed_seconds: float = field(default=0.0)

    @property
    def failed(self) -> bool:
        return self.verdict is not Verdict.PASSED

    @property
    def blocks(self) -> list[ReportBlock]:
        return [item for item in self.items if isinstance(item, ReportBlock)]

    @property
    def annotations(self) -> list[LocatedAnnotation]:
        return [a for block in self.blocks for a in block.annotations]

    @property
    def errors(self) -> list[str]:
        return [
            item.text
            for item in self.items
            if isinstance(item, ReportMessage) and item.level is MessageLevel.ERROR
        ]

# 🔼⚙️
