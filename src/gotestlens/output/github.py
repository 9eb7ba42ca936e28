#
# src/gotestlens/output/github.py
#
"""
Renders reports as GitHub Actions workflow commands.

See the "workflow commands" section of the GitHub Actions documentation for
the `::group::`, `::error::` syntax and escaping rules.
"""
import sys
from typing import TextIO

from gotestlens.output.protocols import ReportSink
from gotestlens.pipeline.report import (
    LocatedAnnotation,
    MessageLevel,
    Report,
    ReportBlock,
    ReportMessage,
)

ANSI_COLORS = {
    MessageLevel.SUCCESS: "\u001b[32m",
    MessageLevel.WARNING: "\u001b[33m",
    MessageLevel.FAILURE: "\u001b[31m",
}


def escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


def format_command(command: str, message: str = "", **properties: str | int) -> str:
    """Builds `::command key=value,...::message`."""
    props = ",".join(
        f"{key}={escape_property(str(value))}" for key, value in properties.items() if value is not None
    )
    head = f"::{command} {props}" if props else f"::{command}"
    return f"{head}::{escape_data(message)}"


class GithubActionsSink(ReportSink):
    """Writes workflow commands and plain log lines to a text stream (stdout by default)."""

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def _write(self, text: str) -> None:
        self.stream.write(text if text.endswith("\n") else text + "\n")
        self.stream.flush()

    def notice(self, message: ReportMessage) -> None:
        if message.level is MessageLevel.ERROR:
            self._write(format_command("error", message.text))
        else:
            self._write(ANSI_COLORS.get(message.level, "") + message.text)

    def raw(self, chunk: bytes) -> None:
        self.stream.write(chunk.decode("utf-8", errors="replace"))
        self.stream.flush()

    def _annotation(self, annotation: LocatedAnnotation, title: str) -> None:
        self._write(
            format_command(
                "error",
                annotation.text,
                file=annotation.path,
                line=annotation.line,
                title=title,
            )
        )

    def _block(self, block: ReportBlock) -> None:
        self._write(format_command("group", block.title))
        if block.level is MessageLevel.ERROR:
            self._write(format_command("error", block.text))
        else:
            self._write(block.text)
        self._write("::endgroup::")
        for annotation in block.annotations:
            self._annotation(annotation, block.title)

    def render(self, report: Report) -> None:
        for item in report.items:
            if isinstance(item, ReportBlock):
                self._block(item)
            else:
                self.notice(item)

# 🔼⚙️
