"""check command: compare daily metrics against the active thresholds."""

from __future__ import annotations

import click
from rich.console import Console

from codepause_core.config import build_threshold_manager
from codepause_core.events import load_daily_metrics
from codepause_core.models import LEVELS

console = Console()


@click.command("check")
@click.argument("metrics_file", type=click.Path(dir_okay=False))
@click.option(
    "--level",
    type=click.Choice(LEVELS),
    default=None,
    help="Experience level. Overrides config file.",
)
@click.pass_context
def check_cmd(ctx, metrics_file: str, level: str | None):
    """Check the most recent day in METRICS_FILE against your thresholds.

    Also suggests a blind-approval allowance from all days in the file.
    Reporting only: nothing is changed in your configuration.
    """
    config = dict(ctx.obj.get("config") or {}) if ctx.obj else {}
    if level is not None:
        config["experience_level"] = level

    try:
        manager = build_threshold_manager(config)
        metrics = load_daily_metrics(metrics_file)
    except (FileNotFoundError, ValueError) as e:
        raise click.UsageError(str(e))

    if not metrics:
        console.print("[yellow]No daily metrics found.[/yellow]")
        return

    latest = metrics[-1]
    result = manager.check_metrics(latest)
    active = manager.get_config()

    console.print(f"\n[bold]Threshold check for [cyan]{latest.date}[/cyan][/bold] ({active.level})")
    if result.ai_percentage_exceeded:
        console.print(
            f"  [red]AI share {latest.ai_percentage:.0f}% is above your {active.max_ai_percentage:g}% limit[/red]"
        )
    else:
        console.print(f"  [green]AI share {latest.ai_percentage:.0f}% is within your limit[/green]")

    if result.review_time_low:
        console.print(
            f"  [red]Average review time {latest.average_review_time / 1000:.1f}s is below "
            f"the {active.min_review_time / 1000:g}s minimum[/red]"
        )
    else:
        console.print(
            f"  [green]Average review time {latest.average_review_time / 1000:.1f}s meets the minimum[/green]"
        )

    suggestion = manager.suggest_adaptive_threshold(metrics)
    console.print(f"\n[bold]Suggested blind-approval time:[/bold] {suggestion.blind_approval_time / 1000:g}s")
    console.print(f"  [dim]{suggestion.reasoning}[/dim]")
