"""
Integrity index: a weighted 7-day rolling score in [0, 100].

Each day of the window owns an equal share of 100.  The representative
entry of the day earns a percentage of that share according to its
identity; an empty day earns nothing.  The score is recomputed from the raw
log on every call.
"""

import math
from datetime import timedelta, tzinfo
from typing import Iterable

from .dates import DayLike, as_day, entry_by_day
from .models import WorkoutEntry
from .rules import DEFAULT_RULES, ScoringRules


def integrity_index(
    entries: Iterable[WorkoutEntry],
    today: DayLike,
    tz: tzinfo | None = None,
    rules: ScoringRules | None = None,
) -> int:
    """
    Compute the integrity index for the window ending today (inclusive).

    Args:
        entries: Entry log (any order)
        today: Reference day (date, datetime or epoch seconds)
        tz: Zone used for day bucketing (None = local)
        rules: Rule table (defaults to DEFAULT_RULES)

    Returns:
        Integer score, clamped to rules.integrity_max
    """
    rules = rules or DEFAULT_RULES
    by_day = entry_by_day(entries, tz)
    if not by_day:
        return 0

    end = as_day(today, tz)
    window = rules.window_days

    # Integer sum of per-day percentages; divided once below.
    weight_sum = 0
    for i in range(window):
        entry = by_day.get(end - timedelta(days=i))
        if entry is not None:
            weight_sum += rules.integrity_weights[entry.identity]

    score = math.floor(weight_sum / window + 0.5)  # half-up
    return max(0, min(rules.integrity_max, score))


def health_band(score: int, rules: ScoringRules | None = None) -> str:
    """Classify an integrity score as "stable", "degraded" or "critical"."""
    rules = rules or DEFAULT_RULES
    stable_above, degraded_above = rules.health_thresholds
    if score > stable_above:
        return "stable"
    if score > degraded_above:
        return "degraded"
    return "critical"


def integrity_warning(score: int, rules: ScoringRules | None = None) -> bool:
    """True when the score is low enough to show a warning."""
    rules = rules or DEFAULT_RULES
    return score < rules.warning_below
