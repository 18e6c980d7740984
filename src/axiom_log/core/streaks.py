"""
NORMAL-streak evaluation.

A streak counts consecutive NORMAL days.  An OVERDRIVE day bridges: it
neither breaks the run nor extends it.  Any other identity, or a day with
no entry, ends the run.

Two views are provided:
- windowed_max_streak: longest run inside a fixed window (weekly XP)
- current_streak: the live run ending at today (status display)
"""

import logging
from datetime import date, timedelta, tzinfo
from typing import Iterable

from .dates import DayLike, as_day, days_in_window, entry_by_day
from .models import IdentityState, WorkoutEntry

logger = logging.getLogger(__name__)


def windowed_max_streak(
    entries: Iterable[WorkoutEntry],
    window_start: date,
    days: int = 7,
    tz: tzinfo | None = None,
) -> int:
    """
    Longest NORMAL run inside [window_start, window_start + days).

    Args:
        entries: Entry log (any order)
        window_start: First calendar day of the window
        days: Window length in days
        tz: Zone used for day bucketing (None = local)

    Returns:
        Maximum run length, 0 when the window holds no NORMAL day
    """
    by_day = entry_by_day(entries, tz)
    current = 0
    best = 0

    for day in days_in_window(window_start, days):
        entry = by_day.get(day)
        identity = entry.identity if entry is not None else None

        if identity == IdentityState.NORMAL:
            current += 1
            best = max(best, current)
        elif identity == IdentityState.OVERDRIVE:
            continue
        else:
            current = 0

    return best


def current_streak(
    entries: Iterable[WorkoutEntry],
    today: DayLike,
    tz: tzinfo | None = None,
) -> int:
    """
    Live NORMAL streak anchored at today.

    If today has no entry yet the walk starts at yesterday; an unlogged
    today does not break the streak.  The walk moves backward one day at a
    time until it meets a non-bridging identity or an empty day.

    Args:
        entries: Entry log (any order)
        today: Reference day (date, datetime or epoch seconds)
        tz: Zone used for day bucketing (None = local)

    Returns:
        Number of NORMAL days in the run
    """
    by_day = entry_by_day(entries, tz)
    if not by_day:
        return 0

    check = as_day(today, tz)
    if check not in by_day:
        check -= timedelta(days=1)

    earliest = min(by_day)
    count = 0
    while check >= earliest:
        entry = by_day.get(check)
        if entry is None:
            break
        if entry.identity == IdentityState.NORMAL:
            count += 1
        elif entry.identity != IdentityState.OVERDRIVE:
            break
        check -= timedelta(days=1)

    logger.debug("Current streak anchored at %s: %d", as_day(today, tz), count)
    return count
