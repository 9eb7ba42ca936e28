# src/gotestlens/runtime/orchestrator.py

"""
High-level coordinator for one `go test` run.
Wires the runner's output streams through the pipeline and renders the report.
"""

import time

import structlog

from gotestlens.config import RunConfig
from gotestlens.output import ReportSink
from gotestlens.pipeline import (
    GoListPathResolver,
    LineFramer,
    PathResolver,
    Report,
    Reporter,
    ResultAggregator,
)
from gotestlens.telemetry import StructLogger
from gotestlens.testing import TestRunner, build_go_test_command

log: StructLogger = structlog.get_logger("runtime.orchestrator")


class TestRunOrchestrator:
    """Owns the pipeline state for exactly one run; create a new instance per run."""

    def __init__(
        self,
        config: RunConfig,
        runner: TestRunner,
        sink: ReportSink,
        resolver: PathResolver | None = None,
    ):
        self.config = config
        self.runner = runner
        self.sink = sink
        self.resolver = resolver or GoListPathResolver(
            working_dir=config.working_dir,
            workspace_root=config.workspace_root,
            go_binary=config.go_binary,
        )
        self.framer = LineFramer()
        self.aggregator = ResultAggregator(
            show_package_output=config.show_package_output,
            show_passed_tests=config.show_passed_tests,
            show_stdout=config.show_stdout,
            long_running_threshold=config.long_running_threshold,
            on_notice=sink.notice,
        )

    def _on_stdout(self, chunk: bytes) -> None:
        if self.config.show_stdout:
            self.sink.raw(chunk)
        self.aggregator.process_lines(self.framer.feed(chunk))

    def _on_stderr(self, chunk: bytes) -> None:
        if self.config.show_stdout:
            self.sink.raw(chunk)

    async def run(self) -> Report:
        """Runs the tests to completion and returns the rendered report."""
        command = build_go_test_command(self.config)
        run_log = log.bind(package=self.config.package)
        run_log.info(f"Running test as \"{' '.join(command)}\"", emoji_key="run")
        start = time.monotonic()

        result = await self.runner.run_tests(
            command,
            self.config.working_dir,
            on_stdout=self._on_stdout,
            on_stderr=self._on_stderr,
        )
        # A final line without a trailing newline is still an event.
        self.aggregator.process_lines(self.framer.flush())

        run_log.debug(
            "Stream processing complete",
            exit_code=result.exit_code,
            records=len(self.aggregator.records),
            diagnostics=len(self.aggregator.diagnostics),
        )

        reporter = Reporter(self.aggregator, self.resolver)
        report = await reporter.build(
            exit_code=result.exit_code,
            stdout=result.stdout,
            stderr=result.stderr,
            elapsed_seconds=time.monotonic() - start,
        )
        self.sink.render(report)
        run_log.info("Test run finished", verdict=report.verdict.name, emoji_key="time")
        return report

# 🔼⚙️
