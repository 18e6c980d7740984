"""Analysis commands: status, xp, xp-history, stats."""

import json
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.config import DEFAULT_STATS_RANGE, DEFAULT_XP_HISTORY_WEEKS, STATS_RANGES
from ...core.models import WorkoutEntry
from ...core.scoring import week_containing, weekly_score, xp_history
from ...core.statistics import range_stats, status_snapshot
from ...io.history_store import HistoryStore
from ...io.serializers import ValidationError, parse_date, weekly_score_to_dict
from .. import views
from ..app import HistoryPathOption, JsonOption, app, get_rules, get_store


def _load_or_exit(store: HistoryStore) -> list[WorkoutEntry]:
    if not store.exists():
        views.print_error(f"Entry log not found: {store.history_path}")
        views.print_info("Run 'init' first to create the entry log.")
        raise typer.Exit(1)

    try:
        return store.load_entries()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def _parse_day_or_exit(value: str | None) -> datetime:
    if value is None:
        return datetime.now()
    try:
        return parse_date(value)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)


@app.command()
def status(
    today: Annotated[
        Optional[str],
        typer.Option("--today", help="Reference day YYYY-MM-DD (default: today)"),
    ] = None,
    history_path: HistoryPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show integrity, current Normal streak and latest state.
    """
    entries = _load_or_exit(get_store(history_path))
    ref = _parse_day_or_exit(today)

    snapshot = status_snapshot(entries, ref, rules=get_rules())

    if json_out:
        print(json.dumps({
            "integrity": snapshot.integrity,
            "current_streak": snapshot.current_streak,
            "latest_identity": snapshot.latest_identity.name if snapshot.latest_identity is not None else None,
            "health": snapshot.health,
            "warning": snapshot.warning,
        }, indent=2))
        return

    views.console.print()
    views.console.print(views.format_status_display(snapshot))
    views.console.print()


@app.command()
def xp(
    week: Annotated[
        Optional[str],
        typer.Option("--week", "-w", help="Any day of the week to score, YYYY-MM-DD (default: this week)"),
    ] = None,
    history_path: HistoryPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the weekly XP breakdown.
    """
    entries = _load_or_exit(get_store(history_path))
    rules = get_rules()

    start = week_containing(_parse_day_or_exit(week), rules=rules)
    score = weekly_score(entries, start, rules=rules)

    if json_out:
        print(json.dumps(weekly_score_to_dict(score), indent=2))
        return

    views.print_weekly_score(score)


@app.command("xp-history")
def xp_history_cmd(
    weeks: Annotated[
        int,
        typer.Option("--weeks", "-n", help="Number of weeks to show"),
    ] = DEFAULT_XP_HISTORY_WEEKS,
    history_path: HistoryPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show XP per week as a chart.
    """
    if weeks < 1:
        views.print_error("--weeks must be at least 1")
        raise typer.Exit(1)

    entries = _load_or_exit(get_store(history_path))
    rules = get_rules()

    start = week_containing(datetime.now(), rules=rules)
    scores = xp_history(entries, start, weeks, rules=rules)

    if json_out:
        print(json.dumps([weekly_score_to_dict(s) for s in scores], indent=2))
        return

    views.print_xp_history(scores)


@app.command()
def stats(
    range_: Annotated[
        str,
        typer.Option("--range", "-r", help="Days to cover: 7, 14, 30, 60, 120 or 'all'"),
    ] = str(DEFAULT_STATS_RANGE),
    history_path: HistoryPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show session count, mean energy, plan usage and stability.
    """
    if range_ == "all":
        days = None
    elif range_.isdigit() and int(range_) in STATS_RANGES:
        days = int(range_)
    else:
        choices = ", ".join(str(r) for r in STATS_RANGES)
        views.print_error(f"Invalid range: {range_}. Must be one of {choices} or 'all'")
        raise typer.Exit(1)

    entries = _load_or_exit(get_store(history_path))
    result = range_stats(entries, datetime.now(), days)

    if json_out:
        print(json.dumps({
            "range_days": result.range_days,
            "total_logs": result.total_logs,
            "avg_energy": result.avg_energy,
            "unique_plans": result.unique_plans,
            "stability_score": result.stability_score,
        }, indent=2))
        return

    views.print_range_stats(result)
