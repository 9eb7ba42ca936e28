#
# src/gotestlens/output/console.py
#
"""
Renders reports for humans in a terminal using rich.
"""
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from gotestlens.output.protocols import ReportSink
from gotestlens.pipeline.report import MessageLevel, Report, ReportBlock, ReportMessage, Verdict

LEVEL_STYLES = {
    MessageLevel.INFO: "",
    MessageLevel.SUCCESS: "green",
    MessageLevel.WARNING: "yellow",
    MessageLevel.FAILURE: "red",
    MessageLevel.ERROR: "bold red",
}

VERDICT_STYLES = {
    Verdict.PASSED: ("PASSED", "bold green"),
    Verdict.FAILED: ("FAILED", "bold red"),
    Verdict.INFRA_FAILURE: ("INFRA FAILURE", "bold magenta"),
}


class ConsoleSink(ReportSink):
    def __init__(self, console: Console | None = None):
        self.console = console or Console(highlight=False)

    def notice(self, message: ReportMessage) -> None:
        self.console.print(Text(message.text, style=LEVEL_STYLES[message.level]))

    def raw(self, chunk: bytes) -> None:
        self.console.out(chunk.decode("utf-8", errors="replace"), end="", highlight=False)

    def _block(self, block: ReportBlock) -> None:
        body = Text(block.text.rstrip("\n"))
        if block.annotations:
            body.append("\n\n")
            for annotation in block.annotations:
                body.append(f"{annotation.path}:{annotation.line}", style="bold cyan")
                body.append(f" {annotation.text}\n")
        style = LEVEL_STYLES[block.level] or "dim"
        self.console.print(Panel(body, title=block.title, title_align="left", border_style=style))

    def render(self, report: Report) -> None:
        for item in report.items:
            if isinstance(item, ReportBlock):
                self._block(item)
            else:
                self.notice(item)
        label, style = VERDICT_STYLES[report.verdict]
        self.console.print(Text(label, style=style))

# 🔼⚙️
