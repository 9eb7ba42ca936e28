# src/gotestlens/cli/main.py

"""
Main CLI entry point for gotestlens using Click.
Handles global options like logging level.
"""

import click
import structlog

from gotestlens import __version__
from gotestlens.cli.config_cmds import config_cli
from gotestlens.cli.run_cmds import run_cli
from gotestlens.cli.utils import logging_options, setup_logging_from_context
from gotestlens.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.main")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "-V", "--version", package_name="gotestlens")
@logging_options
@click.pass_context
def cli(
    ctx: click.Context,
    log_level: str | None,
    log_file: str | None,
    json_logs: bool | None,
):
    """
    Gotestlens: run `go test -json` and report failures with source annotations.

    Streams the test event output, classifies failures, panics and sanitizer
    errors, and renders the result for GitHub Actions or a terminal.
    Configuration precedence: CLI options > Environment Variables > Config File > Defaults.
    """
    ctx.ensure_object(dict)

    ctx.obj["LOG_LEVEL"] = log_level
    ctx.obj["LOG_FILE"] = log_file
    ctx.obj["JSON_LOGS"] = json_logs if json_logs is not None else False

    setup_logging_from_context(
        ctx, default_log_level="WARNING"
    )
    log.debug(
        "Main CLI group initialized",
        log_level=log_level,
        log_file=log_file,
        json_logs=json_logs,
    )


cli.add_command(config_cli)
cli.add_command(run_cli)

if __name__ == "__main__":
    cli()

# 🖥️⚙️
