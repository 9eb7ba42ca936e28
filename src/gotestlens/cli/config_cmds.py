# src/gotestlens/cli/config_cmds.py

from pathlib import Path

import click
import structlog
from rich.pretty import pretty_repr

from gotestlens.cli.utils import logging_options, setup_logging_from_context
from gotestlens.config import load_config
from gotestlens.exceptions import ConfigurationError
from gotestlens.output import detect_output_format
from gotestlens.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.config")


@click.group(name="config")
def config_cli():
    """Commands for inspecting and validating configuration."""
    pass


@config_cli.command(name="show")
@click.option(
    "-c",
    "--config-path",
    type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True, path_type=Path),
    default=None,
    envvar="GOTESTLENS_CONF",
    help="Optional TOML configuration file (env var GOTESTLENS_CONF).",
    show_envvar=True,
)
@logging_options
@click.pass_context
def show_config(ctx: click.Context, config_path: Path | None, **kwargs):
    """Load, validate, and display the configuration."""
    setup_logging_from_context(
        ctx,
        local_log_level=kwargs.get("log_level"),
        local_log_file=kwargs.get("log_file"),
        local_json_logs=kwargs.get("json_logs"),
    )
    log.info("Executing 'config show' command", config_path=str(config_path))

    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        log.error("Failed to load or validate configuration", error=str(e))
        click.echo(f"Error: Configuration problem:\n{e}", err=True)
        ctx.exit(1)

    # Generate a rich-formatted string and echo it for testability.
    click.echo(pretty_repr(config, expand_all=True))
    if config.run.output_format is None:
        click.echo(f"Output format (auto-detected): {detect_output_format()}")

# 🔼⚙️
