# src/gotestlens/cli/run_cmds.py

import asyncio
import logging
import sys
from pathlib import Path

import click
import structlog

from gotestlens.cli.utils import logging_options, setup_logging_from_context
from gotestlens.config import load_config
from gotestlens.exceptions import ConfigurationError, TestRunnerError
from gotestlens.output import get_report_sink
from gotestlens.pipeline import Report, Verdict
from gotestlens.runtime import TestRunOrchestrator
from gotestlens.telemetry import StructLogger
from gotestlens.testing import get_test_runner

log: StructLogger = structlog.get_logger("cli.run")

EXIT_CODES = {
    Verdict.PASSED: 0,
    Verdict.FAILED: 1,
    Verdict.INFRA_FAILURE: 2,
}
EXIT_SETUP_ERROR = 3


def _run_orchestrator(orchestrator: TestRunOrchestrator) -> Report:
    """Runs one test session on a fresh event loop."""
    try:
        return asyncio.run(orchestrator.run())
    finally:
        logging.shutdown()


@click.command(name="run")
@click.argument("package", required=False, envvar="GOTESTLENS_PACKAGE")
@click.option(
    "-c",
    "--config-path",
    type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True, path_type=Path),
    default=None,
    envvar="GOTESTLENS_CONF",
    help="Optional TOML configuration file (env var GOTESTLENS_CONF).",
    show_envvar=True,
)
@click.option(
    "--args",
    "test_args",
    default=None,
    envvar="GOTESTLENS_ARGS",
    help="Extra `go test` arguments, separated by ';' (e.g. '-race;-count=1').",
)
@click.option(
    "--show-stdout/--hide-stdout",
    default=None,
    envvar="GOTESTLENS_SHOW_STDOUT",
    help="Echo the raw `go test` output while it runs.",
)
@click.option(
    "--show-package-output/--hide-package-output",
    default=None,
    envvar="GOTESTLENS_SHOW_PACKAGE_OUTPUT",
    help="Include package-level output (build errors, coverage) that belongs to no test.",
)
@click.option(
    "--show-passed-tests/--hide-passed-tests",
    default=None,
    envvar="GOTESTLENS_SHOW_PASSED_TESTS",
    help="Print a line for every passing test.",
)
@click.option(
    "--long-running-threshold",
    type=click.IntRange(min=-1),
    default=None,
    envvar="GOTESTLENS_LONG_RUNNING_THRESHOLD",
    help="Flag tests taking at least this many seconds; -1 disables the check.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["github", "console"], case_sensitive=False),
    default=None,
    envvar="GOTESTLENS_FORMAT",
    help="Report format. Defaults to 'github' under GitHub Actions, else 'console'.",
)
@click.option(
    "--working-dir",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    envvar="GOTESTLENS_WORKING_DIR",
    help="Directory to run `go test` in.",
)
@click.option(
    "--workspace-root",
    type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    envvar="GOTESTLENS_WORKSPACE_ROOT",
    help="Prefix stripped from annotation paths (defaults to $GITHUB_WORKSPACE).",
)
@click.option(
    "--go-binary",
    default=None,
    envvar="GOTESTLENS_GO_BINARY",
    help="The `go` executable to use.",
)
@logging_options
@click.pass_context
def run_cli(
    ctx: click.Context,
    package: str | None,
    config_path: Path | None,
    test_args: str | None,
    show_stdout: bool | None,
    show_package_output: bool | None,
    show_passed_tests: bool | None,
    long_running_threshold: int | None,
    output_format: str | None,
    working_dir: Path | None,
    workspace_root: Path | None,
    go_binary: str | None,
    **kwargs,
):
    """Run `go test -json` on PACKAGE and report the results."""
    overrides = {
        "package": package,
        "args": test_args,
        "show_stdout": show_stdout,
        "show_package_output": show_package_output,
        "show_passed_tests": show_passed_tests,
        "long_running_threshold": long_running_threshold,
        "output_format": output_format.lower() if output_format else None,
        "working_dir": working_dir,
        "workspace_root": workspace_root,
        "go_binary": go_binary,
    }

    try:
        config = load_config(config_path, overrides)
        runner = get_test_runner(config.run.runner)
        sink = get_report_sink(config.run.output_format)
    except ConfigurationError as e:
        log.error("Failed to load or validate configuration", error=str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_SETUP_ERROR)

    setup_logging_from_context(
        ctx,
        local_log_level=kwargs.get("log_level"),
        local_log_file=kwargs.get("log_file"),
        local_json_logs=kwargs.get("json_logs"),
        default_log_level=config.global_config.log_level,
    )

    orchestrator = TestRunOrchestrator(config=config.run, runner=runner, sink=sink)

    try:
        report = _run_orchestrator(orchestrator)
    except TestRunnerError as e:
        log.error("Test runner failed to start", error=str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_SETUP_ERROR)

    exit_code = EXIT_CODES[report.verdict]
    log.info("'run' command finished.", verdict=report.verdict.name, exit_code=exit_code)
    if exit_code != 0:
        sys.exit(exit_code)

# 🔼⚙️
