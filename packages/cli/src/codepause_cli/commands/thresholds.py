"""thresholds command: show per-level review policy."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from codepause_core.config import build_threshold_manager
from codepause_core.models import LEVELS
from codepause_core.thresholds import ThresholdManager

console = Console()


def _fmt_ms(ms: float) -> str:
    return f"{ms / 1000:g}s"


@click.command("thresholds")
@click.option(
    "--level",
    type=click.Choice(LEVELS),
    default=None,
    help="Experience level. Overrides config file.",
)
@click.pass_context
def thresholds_cmd(ctx, level: str | None):
    """Show the default thresholds per experience level and the active ones.

    The active row reflects the configured level plus any per-field
    overrides from the config file, after clamping.
    """
    config = dict(ctx.obj.get("config") or {}) if ctx.obj else {}
    if level is not None:
        config["experience_level"] = level

    try:
        active = build_threshold_manager(config).get_config()
    except ValueError as e:
        raise click.UsageError(str(e))

    table = Table(title="Review Thresholds", show_header=True, header_style="bold cyan")
    table.add_column("Level", style="bold")
    table.add_column("Blind approval", justify="right")
    table.add_column("Max AI %", justify="right")
    table.add_column("Min review", justify="right")
    table.add_column("Streak", justify="right")

    for name, defaults in ThresholdManager.all_level_thresholds().items():
        label = f"{name} [green](active)[/green]" if name == active.level else name
        table.add_row(
            label,
            _fmt_ms(defaults.blind_approval_time),
            f"{defaults.max_ai_percentage:g}%",
            _fmt_ms(defaults.min_review_time),
            str(defaults.streak_threshold),
        )
    console.print(table)

    console.print(f"\n[bold]Effective thresholds[/bold] ({active.level})")
    console.print(f"  Blind approval time: {_fmt_ms(active.blind_approval_time)}")
    console.print(f"  Max AI percentage:   {active.max_ai_percentage:g}%")
    console.print(f"  Min review time:     {_fmt_ms(active.min_review_time)}")
    console.print(f"  Streak threshold:    {active.streak_threshold}")
