"""
Weekly XP scoring.

A week's XP is the sum of:
- base points per entry by identity
- an overdrive bonus whose per-entry rate depends on the week's count
- +1 per entry logged with high energy
- a bonus for the longest NORMAL streak inside the week
- a flat bonus for beating the previous week's total

The previous week is scored with the same rules minus its own comparison
bonus, so the comparison never recurses further than one week.
"""

import logging
from datetime import date, timedelta, tzinfo
from typing import Iterable

from .dates import DayLike, as_day, entries_in_range, start_of_week
from .models import IdentityState, WeeklyScore, WorkoutEntry
from .rules import DEFAULT_RULES, ScoringRules
from .streaks import windowed_max_streak

logger = logging.getLogger(__name__)


def base_points(entries: Iterable[WorkoutEntry], rules: ScoringRules | None = None) -> int:
    """Sum of identity base points; every entry counts, including same-day ones."""
    rules = rules or DEFAULT_RULES
    return sum(rules.base_points[e.identity] for e in entries)


def overdrive_bonus(count: int, rules: ScoringRules | None = None) -> int:
    """
    Overdrive bonus for a week with `count` OVERDRIVE entries.

    The rate is picked from the total count first and then multiplied, so
    two entries earn 2 x 20 rather than 15 + 20.
    """
    rules = rules or DEFAULT_RULES
    if count <= 0:
        return 0
    return count * rules.overdrive_rate(count)


def overdrive_tier(count: int) -> int:
    """Display tier: 1 for 0-1 overdrive entries, 2 for exactly 2, 3 for 3+."""
    if count >= 3:
        return 3
    if count == 2:
        return 2
    return 1


def energy_bonus(entries: Iterable[WorkoutEntry], rules: ScoringRules | None = None) -> int:
    rules = rules or DEFAULT_RULES
    return sum(rules.energy_points for e in entries if e.energy >= rules.energy_threshold)


def streak_bonus(max_streak: int, rules: ScoringRules | None = None) -> int:
    """Map the week's longest NORMAL run to its bonus (3->2, 4->3, 5->4, 6+->5)."""
    rules = rules or DEFAULT_RULES
    return rules.streak_bonus_for(max_streak)


def _score_week(
    entries: list[WorkoutEntry],
    week_start: date,
    tz: tzinfo | None,
    rules: ScoringRules,
) -> WeeklyScore:
    """Score one week without the comparison bonus."""
    week_end = week_start + timedelta(days=rules.window_days)
    week_entries = entries_in_range(entries, week_start, week_end, tz)

    od_count = sum(1 for e in week_entries if e.identity == IdentityState.OVERDRIVE)
    max_run = windowed_max_streak(week_entries, week_start, rules.window_days, tz)

    score = WeeklyScore(
        week_start=week_start.isoformat(),
        base=base_points(week_entries, rules),
        overdrive_bonus=overdrive_bonus(od_count, rules),
        streak_bonus=streak_bonus(max_run, rules),
        energy_bonus=energy_bonus(week_entries, rules),
        overdrive_count=od_count,
        max_normal_streak=max_run,
        entry_count=len(week_entries),
    )
    score.total = score.base + score.overdrive_bonus + score.streak_bonus + score.energy_bonus
    return score


def weekly_score(
    entries: Iterable[WorkoutEntry],
    week_start: DayLike,
    tz: tzinfo | None = None,
    rules: ScoringRules | None = None,
) -> WeeklyScore:
    """
    Full XP breakdown for the week [week_start, week_start + 7).

    Args:
        entries: Entry log (any order)
        week_start: First day of the week (date, datetime or epoch seconds)
        tz: Zone used for day bucketing (None = local)
        rules: Rule table (defaults to DEFAULT_RULES)

    Returns:
        WeeklyScore whose total includes the comparison bonus
    """
    rules = rules or DEFAULT_RULES
    entries = list(entries)
    start = as_day(week_start, tz)

    current = _score_week(entries, start, tz, rules)
    previous = _score_week(entries, start - timedelta(days=rules.window_days), tz, rules)

    current.previous_week_total = previous.total
    if previous.total > 0 and current.total > previous.total:
        current.comparison_bonus = rules.comparison_bonus
    current.total += current.comparison_bonus

    logger.debug(
        "Week %s: base=%d od=%d streak=%d energy=%d cmp=%d total=%d (prev %d)",
        current.week_start,
        current.base,
        current.overdrive_bonus,
        current.streak_bonus,
        current.energy_bonus,
        current.comparison_bonus,
        current.total,
        previous.total,
    )
    return current


def week_containing(
    day: DayLike,
    tz: tzinfo | None = None,
    rules: ScoringRules | None = None,
) -> date:
    """First day of the scoring week that contains `day`."""
    rules = rules or DEFAULT_RULES
    return start_of_week(as_day(day, tz), rules.week_start_weekday)


def xp_history(
    entries: Iterable[WorkoutEntry],
    week_start: DayLike,
    weeks: int = 4,
    tz: tzinfo | None = None,
    rules: ScoringRules | None = None,
) -> list[WeeklyScore]:
    """
    Weekly breakdowns for `weeks` consecutive weeks ending at week_start.

    Returns:
        List of WeeklyScore, oldest week first
    """
    rules = rules or DEFAULT_RULES
    entries = list(entries)
    last = as_day(week_start, tz)
    step = timedelta(days=rules.window_days)
    return [
        weekly_score(entries, last - step * i, tz, rules)
        for i in range(max(weeks, 0) - 1, -1, -1)
    ]
