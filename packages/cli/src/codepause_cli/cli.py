"""CLI entry point for codepause.

Commands:
  report      classify an event log by usage mode and score every AI acceptance
  thresholds  show the per-level review policy and the effective thresholds
  check       compare daily metrics against the active thresholds
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from codepause_cli.commands.check import check_cmd
from codepause_cli.commands.report import report_cmd
from codepause_cli.commands.thresholds import thresholds_cmd

console = Console()


def _configure_logging(verbose: bool) -> None:
    """Route library logging through rich. Only DEBUG output is opt-in."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(
    version=importlib.metadata.version("codepause"),
    prog_name="codepause",
)
@click.option(
    "--config",
    "config_path",
    default=".codepause.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="CODEPAUSE_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Measure how AI coding assistance is used and how well it is reviewed."""
    from codepause_core.config import load_config

    _configure_logging(verbose)
    ctx.ensure_object(dict)

    try:
        config = load_config(config_path)
    except ValueError as e:
        raise click.UsageError(str(e))

    ctx.obj["config"] = config
    ctx.obj["config_path"] = config_path


main.add_command(report_cmd)
main.add_command(thresholds_cmd)
main.add_command(check_cmd)
