#
# tests/unit/test_output.py
#
"""
Tests for the GitHub Actions and console report sinks.
"""

import io

import pytest
from rich.console import Console

from gotestlens.exceptions import ConfigurationError
from gotestlens.output import ConsoleSink, GithubActionsSink, detect_output_format, get_report_sink
from gotestlens.output.github import escape_data, escape_property, format_command
from gotestlens.pipeline.report import (
    LocatedAnnotation,
    MessageLevel,
    Report,
    ReportBlock,
    ReportMessage,
    Verdict,
)

FAILED_REPORT = Report(
    verdict=Verdict.FAILED,
    items=[
        ReportMessage(MessageLevel.ERROR, "1/2 tests failed"),
        ReportBlock(
            title="test pkg/TestB failed in 0.02s",
            text="test pkg/TestB failed in 0.02s:\n    pkg_test.go:10: boom\n",
            level=MessageLevel.ERROR,
            annotations=[LocatedAnnotation(path="internal/pkg/pkg_test.go", line=10, text="pkg_test.go:10: boom")],
        ),
        ReportMessage(MessageLevel.SUCCESS, "1/2 tests passed in 0.50s"),
    ],
    passed=1,
    total=2,
    elapsed_seconds=0.5,
)


class TestWorkflowCommands:
    def test_escape_data(self) -> None:
        assert escape_data("50%\r\nnext") == "50%25%0D%0Anext"

    def test_escape_property(self) -> None:
        assert escape_property("a:b,c") == "a%3Ab%2Cc"

    def test_format_command(self) -> None:
        assert format_command("error", "x\ny", file="a.go", line=3) == "::error file=a.go,line=3::x%0Ay"
        assert format_command("endgroup") == "::endgroup::"


class TestGithubActionsSink:
    def test_render_failed_report(self) -> None:
        stream = io.StringIO()
        GithubActionsSink(stream).render(FAILED_REPORT)

        assert stream.getvalue().splitlines() == [
            "::error::1/2 tests failed",
            "::group::test pkg/TestB failed in 0.02s",
            "::error::test pkg/TestB failed in 0.02s:%0A    pkg_test.go:10: boom%0A",
            "::endgroup::",
            "::error file=internal/pkg/pkg_test.go,line=10,title=test pkg/TestB failed in 0.02s::"
            "pkg_test.go:10: boom",
            "\u001b[32m1/2 tests passed in 0.50s",
        ]

    def test_plain_block_is_not_an_error(self) -> None:
        stream = io.StringIO()
        GithubActionsSink(stream).render(
            Report(verdict=Verdict.PASSED, items=[ReportBlock(title="stderr", text="go: downloading x\n")])
        )
        assert stream.getvalue().splitlines() == ["::group::stderr", "go: downloading x", "::endgroup::"]

    @pytest.mark.parametrize(
        ("level", "prefix"),
        [
            (MessageLevel.WARNING, "\u001b[33m"),
            (MessageLevel.FAILURE, "\u001b[31m"),
            (MessageLevel.INFO, ""),
        ],
    )
    def test_notice_colors(self, level: MessageLevel, prefix: str) -> None:
        stream = io.StringIO()
        GithubActionsSink(stream).notice(ReportMessage(level, "pkg/TestA passed in 20s"))
        assert stream.getvalue() == f"{prefix}pkg/TestA passed in 20s\n"

    def test_raw_passthrough(self) -> None:
        stream = io.StringIO()
        GithubActionsSink(stream).raw(b'{"Action":"run"}\npart')
        assert stream.getvalue() == '{"Action":"run"}\npart'


class TestConsoleSink:
    def _sink(self) -> tuple[ConsoleSink, io.StringIO]:
        buffer = io.StringIO()
        return ConsoleSink(Console(file=buffer, width=120, color_system=None, highlight=False)), buffer

    def test_render_failed_report(self) -> None:
        sink, buffer = self._sink()
        sink.render(FAILED_REPORT)
        out = buffer.getvalue()
        assert "1/2 tests failed" in out
        assert "test pkg/TestB failed in 0.02s" in out
        assert "internal/pkg/pkg_test.go:10" in out
        assert "1/2 tests passed in 0.50s" in out
        assert out.rstrip().endswith("FAILED")

    def test_infra_failure_label(self) -> None:
        sink, buffer = self._sink()
        sink.render(Report(verdict=Verdict.INFRA_FAILURE, items=[]))
        assert "INFRA FAILURE" in buffer.getvalue()

    def test_notice(self) -> None:
        sink, buffer = self._sink()
        sink.notice(ReportMessage(MessageLevel.SUCCESS, "pkg/TestA passed in 0.01s"))
        assert buffer.getvalue() == "pkg/TestA passed in 0.01s\n"


class TestSinkFactory:
    def test_explicit_formats(self) -> None:
        assert isinstance(get_report_sink("github"), GithubActionsSink)
        assert isinstance(get_report_sink("console"), ConsoleSink)

    def test_auto_detects_github_actions(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITHUB_ACTIONS", "true")
        assert detect_output_format() == "github"
        assert isinstance(get_report_sink(None), GithubActionsSink)
        monkeypatch.delenv("GITHUB_ACTIONS")
        assert detect_output_format() == "console"

    def test_unknown_format(self) -> None:
        with pytest.raises(ConfigurationError):
            get_report_sink("xml")
