"""
Recall CLI - inspect the review scheduler from the terminal.

Stateless front end over the pure calculators; useful for checking what
the engine would schedule for a given recall score and history.

Usage:
    recall next-review --score 80 --count 2 --last 2024-01-01
    recall plan --target 2024-02-01 --score 40
    recall retention --score 70 --count 3 --days 5 --reviews 4 --high 2
    recall config
"""

from __future__ import annotations

import json
import sys
from datetime import date
from typing import Annotated

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from config import get_settings
from src.scheduling import DeadlineScheduler, RetentionCalculator, ReviewCalculator

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="recall",
    help="Spaced-repetition review scheduler",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)

console = Console()


def _parse_date(value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"expected YYYY-MM-DD, got {value!r}") from None


ScoreOption = Annotated[
    int, typer.Option("--score", "-s", min=0, max=100, help="Self-rated recall (0-100)")
]
CountOption = Annotated[
    int, typer.Option("--count", "-c", min=0, help="Perfect recall count")
]
LastOption = Annotated[
    str | None,
    typer.Option("--last", "-l", help="Last reviewed date (YYYY-MM-DD), default today"),
]


# =============================================================================
# Scheduling Commands
# =============================================================================


@app.command("next-review")
def next_review(
    score: ScoreOption,
    count: CountOption = 0,
    last: LastOption = None,
) -> None:
    """Show the next review date for a single review."""
    last_day = _parse_date(last) or date.today()
    calculator = ReviewCalculator(get_settings().review_interval_table)

    next_day = calculator.next_review_date(score, last_day, count)

    table = Table(title="Next Review")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Score factor", f"{calculator.score_factor(score):.2f}")
    table.add_row("Base interval", f"{calculator.base_interval(count)} days")
    table.add_row("Interval", f"{(next_day - last_day).days} days")
    table.add_row("Last reviewed", last_day.isoformat())
    table.add_row("Next review", next_day.isoformat())
    console.print(table)


@app.command()
def plan(
    target: Annotated[str, typer.Option("--target", "-t", help="Deadline (YYYY-MM-DD)")],
    score: ScoreOption,
    count: CountOption = 0,
    last: LastOption = None,
    today: Annotated[
        str | None, typer.Option("--today", help="Reference day (YYYY-MM-DD)")
    ] = None,
) -> None:
    """Plan reviews that finish before a deadline."""
    target_day = _parse_date(target)
    today_day = _parse_date(today) or date.today()
    scheduler = DeadlineScheduler()

    dates = scheduler.plan(target_day, score, _parse_date(last), count, today=today_day)

    table = Table(title=f"Review plan until {target_day.isoformat()}")
    table.add_column("#", style="dim")
    table.add_column("Date", style="green")
    table.add_column("Gap", style="cyan")
    previous = today_day
    for index, review_day in enumerate(dates, start=1):
        table.add_row(str(index), review_day.isoformat(), f"+{(review_day - previous).days}d")
        previous = review_day
    console.print(table)

    days_left = (target_day - today_day).days
    if days_left <= 0:
        console.print("[yellow]Deadline reached - review today.[/]")


@app.command()
def retention(
    score: ScoreOption,
    count: CountOption = 0,
    days: Annotated[int, typer.Option("--days", min=0, help="Days since last review")] = 0,
    reviews: Annotated[int, typer.Option("--reviews", min=0, help="Reviews performed")] = 0,
    high: Annotated[int, typer.Option("--high", min=0, help="Reviews rated 80+")] = 0,
) -> None:
    """Estimate memory retention."""
    table = Table(title="Retention")
    table.add_column("Model", style="cyan")
    table.add_column("Score", style="green")
    table.add_row("Simple", f"{RetentionCalculator.simple_score(score, count)}%")
    table.add_row(
        "Forgetting curve",
        f"{RetentionCalculator.enhanced_score(score, days, reviews, high)}%",
    )
    console.print(table)


@app.command()
def config() -> None:
    """Show the active engine configuration."""
    console.print_json(json.dumps(get_settings().get_engine_config(), indent=2))


# =============================================================================
# Entry Point
# =============================================================================


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log scheduling decisions")
    ] = False,
) -> None:
    """Spaced-repetition review scheduler."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else get_settings().log_level.upper(),
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
