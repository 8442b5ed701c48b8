"""report command: classify an event log and score every AI acceptance."""

from __future__ import annotations

import json

import click
from rich.console import Console
from rich.table import Table

from codepause_core.events import load_events, load_file_reviews
from codepause_core.models import LEVELS, LIGHT, THOROUGH
from codepause_core.modes import AGENT, CHAT_PASTE, INLINE
from codepause_core.report import ReportSummary, run_report

console = Console()

_MODE_LABELS = {AGENT: "Agent", INLINE: "Inline autocomplete", CHAT_PASTE: "Chat / paste"}
_CATEGORY_STYLE = {THOROUGH: "green", LIGHT: "yellow"}


def _print_modes(summary: ReportSummary) -> None:
    modes = summary.modes
    table = Table(title="Coding Modes", show_header=True, header_style="bold cyan")
    table.add_column("Mode", style="bold")
    table.add_column("Lines", justify="right")
    table.add_column("Events", justify="right")
    table.add_column("Share", justify="right")
    table.add_column("Details")

    table.add_row(
        _MODE_LABELS[AGENT],
        str(modes.agent.lines),
        str(modes.agent.events),
        f"{modes.agent.percentage}%",
        f"{modes.agent.reviewed_files}/{modes.agent.total_files} agent file(s) reviewed"
        if modes.agent.total_files
        else "",
    )
    table.add_row(
        _MODE_LABELS[INLINE],
        str(modes.inline.lines),
        str(modes.inline.events),
        f"{modes.inline.percentage}%",
        f"{modes.inline.acceptances} acceptance(s), {modes.inline.quick_acceptances} under 2s"
        if modes.inline.acceptances
        else "",
    )
    table.add_row(
        _MODE_LABELS[CHAT_PASTE],
        str(modes.chat_paste.lines),
        str(modes.chat_paste.events),
        f"{modes.chat_paste.percentage}%",
        "",
    )
    console.print(table)
    console.print(f"  Total AI lines: {modes.total_lines}")


def _print_acceptances(summary: ReportSummary, show_insights: bool, limit: int) -> None:
    table = Table(title="Review Quality", show_header=True, header_style="bold cyan")
    table.add_column("File", max_width=40)
    table.add_column("Lines", justify="right")
    table.add_column("Review", justify="right")
    table.add_column("Expected", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Category")
    if show_insights:
        table.add_column("Insights")

    for scored in summary.acceptances[-limit:]:
        event, analysis = scored.event, scored.analysis
        style = _CATEGORY_STYLE.get(analysis.category, "red")
        row = [
            event.file_path or "",
            str(event.lines_of_code or 0),
            f"{analysis.actual_review_time / 1000:.1f}s" if analysis.actual_review_time else "-",
            f"{analysis.expected_review_time / 1000:.1f}s",
            str(analysis.score),
            f"[{style}]{analysis.category}[/{style}]",
        ]
        if show_insights:
            row.append("\n".join(analysis.insights))
        table.add_row(*row)

    console.print(table)


@click.command("report")
@click.argument("events_file", type=click.Path(dir_okay=False))
@click.option(
    "--file-reviews",
    "file_reviews_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="File-review status export used for agent file counts.",
)
@click.option(
    "--level",
    type=click.Choice(LEVELS),
    default=None,
    help="Experience level. Overrides config file.",
)
@click.option("--exclude", multiple=True, help="Path pattern to leave out. Repeatable; adds to config excludes.")
@click.option("--insights/--no-insights", default=True, show_default=True, help="Show per-acceptance insights.")
@click.option(
    "--limit",
    type=click.IntRange(min=0),
    default=20,
    show_default=True,
    help="Maximum number of acceptances to list. 0 lists none.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the full report as JSON.")
@click.pass_context
def report_cmd(
    ctx,
    events_file: str,
    file_reviews_path: str | None,
    level: str | None,
    exclude: tuple[str, ...],
    insights: bool,
    limit: int,
    as_json: bool,
):
    """Classify EVENTS_FILE by usage mode and score each AI acceptance.

    EVENTS_FILE is a tracker export in .json, .jsonl or .yml format. Events
    from manual coding are ignored; every accepted AI suggestion is scored
    for review quality in the order it appears.
    """
    config = dict(ctx.obj.get("config") or {}) if ctx.obj else {}
    if level is not None:
        config["experience_level"] = level
    config["exclude"] = list(config.get("exclude") or []) + list(exclude)

    try:
        events = load_events(events_file)
        file_reviews = load_file_reviews(file_reviews_path) if file_reviews_path else None
        summary = run_report(events, config, file_reviews=file_reviews)
    except (FileNotFoundError, ValueError) as e:
        raise click.UsageError(str(e))

    if as_json:
        click.echo(json.dumps(summary.to_dict(), indent=2, ensure_ascii=False))
        return

    console.print(f"\n[bold]CodePause report[/bold] [dim]({summary.level} thresholds)[/dim]")
    console.print(
        f"  Events: {summary.total_events}"
        + (f", {summary.excluded_events} excluded" if summary.excluded_events else "")
    )

    _print_modes(summary)

    if not summary.acceptances:
        console.print("[yellow]No AI suggestion acceptances to score.[/yellow]")
        return

    if limit:
        _print_acceptances(summary, insights, limit)

    stats = summary.stats
    console.print(f"  Acceptances scored: {len(summary.acceptances)}")
    console.print(f"  Average score:      {summary.average_score}")
    if stats is not None and stats.recent_count:
        console.print(
            f"  Last {stats.recent_count}: "
            f"[green]{stats.thorough_count} thorough[/green] · "
            f"[yellow]{stats.light_count} light[/yellow] · "
            f"[red]{stats.none_count} none[/red] "
            f"(avg {stats.average_score})"
        )
