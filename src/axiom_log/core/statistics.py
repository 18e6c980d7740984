"""
Read-only summaries for the status and statistics views.
"""

import math
from collections import defaultdict
from datetime import timedelta, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from .config import HIGH_INTEGRITY_STATES
from .dates import DayLike, as_day, local_day
from .integrity import health_band, integrity_index, integrity_warning
from .models import RangeStats, StatusSnapshot, WorkoutEntry
from .rules import DEFAULT_RULES, ScoringRules
from .streaks import current_streak


def _mean_one_decimal(values: list[int]) -> float:
    """Mean rounded to one decimal, halves away from zero."""
    mean = Decimal(sum(values)) / Decimal(len(values))
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def latest_entry(entries: Iterable[WorkoutEntry]) -> WorkoutEntry | None:
    """Most recent entry by timestamp, or None for an empty log."""
    return max(entries, key=lambda e: e.timestamp, default=None)


def status_snapshot(
    entries: Iterable[WorkoutEntry],
    today: DayLike,
    tz: tzinfo | None = None,
    rules: ScoringRules | None = None,
) -> StatusSnapshot:
    """
    Integrity, live streak and latest identity in one record.

    Args:
        entries: Entry log (any order)
        today: Reference day
        tz: Zone used for day bucketing (None = local)
        rules: Rule table (defaults to DEFAULT_RULES)

    Returns:
        StatusSnapshot
    """
    rules = rules or DEFAULT_RULES
    entries = list(entries)

    score = integrity_index(entries, today, tz, rules)
    latest = latest_entry(entries)

    return StatusSnapshot(
        integrity=score,
        current_streak=current_streak(entries, today, tz),
        latest_identity=latest.identity if latest is not None else None,
        health=health_band(score, rules),
        warning=integrity_warning(score, rules),
    )


def range_stats(
    entries: Iterable[WorkoutEntry],
    now: DayLike,
    days: int | None = 7,
    tz: tzinfo | None = None,
) -> RangeStats:
    """
    Aggregate statistics over the last `days` calendar days.

    The range covers today and the days - 1 days before it.  days=None
    takes every entry up to and including today.

    Returns:
        RangeStats; all-zero when the range is empty
    """
    today = as_day(now, tz)
    first = today - timedelta(days=days - 1) if days is not None else None

    selected = [
        e
        for e in entries
        if local_day(e.timestamp, tz) <= today
        and (first is None or local_day(e.timestamp, tz) >= first)
    ]
    selected.sort(key=lambda e: e.timestamp)

    stats = RangeStats(range_days=days)
    if not selected:
        return stats

    total = len(selected)
    stats.total_logs = total
    stats.avg_energy = _mean_one_decimal([e.energy for e in selected])
    stats.unique_plans = len({e.plan_id for e in selected if e.plan_id})
    high = sum(1 for e in selected if e.identity in HIGH_INTEGRITY_STATES)
    stats.stability_score = math.floor(100 * high / total + 0.5)

    per_day: dict[str, list[int]] = defaultdict(list)
    for e in selected:
        per_day[local_day(e.timestamp, tz).isoformat()].append(e.energy)
    stats.energy_by_day = {d: _mean_one_decimal(v) for d, v in per_day.items()}

    return stats
