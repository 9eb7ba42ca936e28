# src/gotestlens/pipeline/reporter.py

"""
Turns the aggregated results of a run plus its exit status into a Report.
"""

import structlog

from gotestlens.exceptions import PathResolutionError
from gotestlens.pipeline.aggregator import ResultAggregator, TestRecord
from gotestlens.pipeline.annotations import extract_annotations
from gotestlens.pipeline.report import (
    LocatedAnnotation,
    MessageLevel,
    Report,
    ReportBlock,
    ReportItem,
    ReportMessage,
    Verdict,
    format_seconds,
)
from gotestlens.pipeline.resolver import PathResolver
from gotestlens.telemetry import StructLogger

log: StructLogger = structlog.get_logger("pipeline.reporter")


class Reporter:
    """
    Builds the final report for one run.

    Annotations are resolved one at a time; a failure to resolve one of them
    drops only that annotation.
    """

    def __init__(self, aggregator: ResultAggregator, resolver: PathResolver | None = None):
        self.aggregator = aggregator
        self.resolver = resolver

    async def build(
        self,
        exit_code: int,
        stdout: str,
        stderr: str,
        elapsed_seconds: float,
    ) -> Report:
        agg = self.aggregator
        report_log = log.bind(exit_code=exit_code, total_run=agg.total_run)

        if exit_code != 0 and not agg.has_failures:
            report_log.warning("Nonzero exit without failing tests", emoji_key="report")
            return Report(
                verdict=Verdict.INFRA_FAILURE,
                items=[
                    ReportMessage(
                        MessageLevel.ERROR,
                        f"go test failed with exit code {exit_code}, but no tests failed. "
                        "Check output for more details",
                    ),
                    ReportBlock(title="stdout", text=stdout),
                    ReportBlock(title="stderr", text=stderr),
                ],
                passed=agg.passed,
                total=agg.total_run,
                elapsed_seconds=elapsed_seconds,
            )

        items: list[ReportItem] = []

        # stderr also carries module downloads, so it is informational only
        if stderr:
            items.append(ReportBlock(title="stderr", text=stderr))

        for verb, keys in (
            ("panicked", agg.panicked),
            ("errored", agg.errored),
            ("failed", agg.failed),
        ):
            if not keys:
                continue
            items.append(ReportMessage(MessageLevel.ERROR, f"{len(keys)}/{agg.total_run} tests {verb}"))
            for key in keys:
                record = agg.get(key)
                if record is None or not record.output:
                    continue
                items.append(await self._failure_block(record, verb))

        passed = agg.passed
        items.append(
            ReportMessage(
                MessageLevel.SUCCESS,
                f"{passed}/{agg.total_run} tests passed in {elapsed_seconds:.2f}s",
            )
        )

        verdict = Verdict.FAILED if agg.has_failures else Verdict.PASSED
        report_log.info("Report built", verdict=verdict.name, passed=passed, emoji_key="report")
        return Report(
            verdict=verdict,
            items=items,
            passed=passed,
            total=agg.total_run,
            elapsed_seconds=elapsed_seconds,
        )

    async def _failure_block(self, record: TestRecord, verb: str) -> ReportBlock:
        title = f"test {record.key} {verb} in {format_seconds(record.elapsed)}s"
        return ReportBlock(
            title=title,
            text=f"{title}:\n{record.text}",
            level=MessageLevel.ERROR,
            annotations=await self.annotate(record),
        )

    async def annotate(self, record: TestRecord) -> list[LocatedAnnotation]:
        """Extracts and resolves the source annotations for one failing test."""
        located: list[LocatedAnnotation] = []
        for annotation in extract_annotations(record.output):
            if self.resolver is None:
                path = annotation.file
            else:
                try:
                    path = await self.resolver.resolve(record.package, annotation.file)
                except PathResolutionError as e:
                    log.warning(
                        "Could not resolve annotation path, skipping it",
                        key=record.key,
                        file=annotation.file,
                        line=annotation.line,
                        error=str(e),
                        emoji_key="resolve",
                    )
                    continue
                except Exception as e:
                    log.exception(
                        "Path resolver raised unexpectedly, skipping annotation",
                        key=record.key,
                        file=annotation.file,
                        line=annotation.line,
                        error=str(e),
                        emoji_key="resolve",
                    )
                    continue
            located.append(LocatedAnnotation(path=path, line=annotation.line, text=annotation.text))
        return located

# 🔼⚙️
