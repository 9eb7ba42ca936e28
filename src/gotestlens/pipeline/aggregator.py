# src/gotestlens/pipeline/aggregator.py

"""
Folds the `go test -json` event stream into per-test records and failure sets.
"""

from collections.abc import Callable, Iterable

import structlog
from attrs import define, field, mutable

from gotestlens.exceptions import EventDecodeError
from gotestlens.pipeline.classifier import Classification, classify_output
from gotestlens.pipeline.events import (
    ACTION_FAIL,
    ACTION_OUTPUT,
    ACTION_PASS,
    TestEvent,
    decode_event,
)
from gotestlens.pipeline.report import MessageLevel, ReportMessage, format_seconds
from gotestlens.telemetry import StructLogger

log: StructLogger = structlog.get_logger("pipeline.aggregator")

NoticeCallback = Callable[[ReportMessage], None]


def make_test_key(package: str, test: str | None) -> str:
    """Builds the identity of a test; a bare package stands for package-level output."""
    return f"{package}/{test}" if test else package


@mutable(slots=True)
class TestRecord:
    """
    Everything captured for one test key during a run.

    `output` is append-only and keeps arrival order.
    """

    key: str = field()
    package: str = field()
    elapsed: float = field(default=0.0)
    output: list[str] = field(factory=list)

    @property
    def text(self) -> str:
        return "".join(self.output)


@define(frozen=True, slots=True)
class Diagnostic:
    """A line that could not be decoded as an event."""

    line: str
    error: str


class ResultAggregator:
    """
    Builds the result ledger for one `go test` run.

    Lines are fed in arrival order via `process_line`. The classification
    sets only ever grow; a key may be in several of them at once.
    """

    def __init__(
        self,
        show_package_output: bool = True,
        show_passed_tests: bool = True,
        show_stdout: bool = False,
        long_running_threshold: int = -1,
        on_notice: NoticeCallback | None = None,
    ):
        self.show_package_output = show_package_output
        self.show_passed_tests = show_passed_tests
        self.show_stdout = show_stdout
        self.long_running_threshold = long_running_threshold
        self._on_notice = on_notice

        self.records: dict[str, TestRecord] = {}
        # dicts rather than sets so reports list keys in first-seen order
        self._failed: dict[str, None] = {}
        self._panicked: dict[str, None] = {}
        self._errored: dict[str, None] = {}
        self.total_run = 0
        self.diagnostics: list[Diagnostic] = []

    # --- Read side ---
    @property
    def failed(self) -> list[str]:
        return list(self._failed)

    @property
    def panicked(self) -> list[str]:
        return list(self._panicked)

    @property
    def errored(self) -> list[str]:
        return list(self._errored)

    @property
    def failing_keys(self) -> set[str]:
        return set(self._failed) | set(self._panicked) | set(self._errored)

    @property
    def has_failures(self) -> bool:
        return bool(self._failed or self._panicked or self._errored)

    @property
    def passed(self) -> int:
        return max(self.total_run - len(self.failing_keys), 0)

    def get(self, key: str) -> TestRecord | None:
        return self.records.get(key)

    # --- Write side ---
    def process_lines(self, lines: Iterable[str]) -> None:
        for line in lines:
            self.process_line(line)

    def process_line(self, line: str) -> TestEvent | None:
        """Decodes and applies one line; undecodable lines are logged and skipped."""
        try:
            event = decode_event(line)
        except EventDecodeError as e:
            self.diagnostics.append(Diagnostic(line=line, error=e.reason))
            log.error("Failed to process line", line=line, error=e.reason, emoji_key="decode")
            return None
        self.process_event(event)
        return event

    def process_event(self, event: TestEvent) -> None:
        if not self.show_package_output and not event.test:
            return

        record = self._record_for(event)

        if event.action == ACTION_OUTPUT:
            self._classify(record.key, event.output or "")
            record.output.append(event.output or "")
        elif event.action == ACTION_FAIL:
            self.total_run += 1
            record.elapsed = event.elapsed
            self._failed[record.key] = None
            self._on_fail(record)
        elif event.action == ACTION_PASS:
            self.total_run += 1
            record.elapsed = event.elapsed
            self._on_pass(record)

    def _record_for(self, event: TestEvent) -> TestRecord:
        key = make_test_key(event.package, event.test)
        record = self.records.get(key)
        if record is None:
            record = TestRecord(key=key, package=event.package)
            self.records[key] = record
        return record

    def _classify(self, key: str, fragment: str) -> None:
        classification = classify_output(fragment)
        if classification is Classification.PANIC:
            if key not in self._panicked:
                log.debug("Panic detected in test output", key=key)
            self._panicked[key] = None
        elif classification is Classification.ERROR:
            if key not in self._errored:
                log.debug("Error marker detected in test output", key=key)
            self._errored[key] = None

    # --- Live notices ---
    def _is_long_running(self, record: TestRecord) -> bool:
        return self.long_running_threshold != -1 and record.elapsed >= self.long_running_threshold

    def _notify(self, level: MessageLevel, text: str) -> None:
        if self._on_notice is not None:
            self._on_notice(ReportMessage(level=level, text=text))

    def _on_fail(self, record: TestRecord) -> None:
        elapsed = format_seconds(record.elapsed)
        if self._is_long_running(record):
            self._notify(MessageLevel.WARNING, f"{record.key} took {elapsed}s to fail")
        if not self.show_stdout:
            self._notify(MessageLevel.FAILURE, f"{record.key} failed in {elapsed}s")

    def _on_pass(self, record: TestRecord) -> None:
        elapsed = format_seconds(record.elapsed)
        if self._is_long_running(record):
            self._notify(MessageLevel.WARNING, f"{record.key} passed in {elapsed}s")
        elif not self.show_stdout and self.show_passed_tests:
            self._notify(MessageLevel.SUCCESS, f"{record.key} passed in {elapsed}s")

# 🔼⚙️
