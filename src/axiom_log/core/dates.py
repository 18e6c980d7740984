"""
Calendar-day bucketing shared by the streak, integrity and scoring modules.

All windowing happens on local calendar days.  Every function takes the
same optional ``tz``; None means the host's local zone.  Callers must pass
the same tz to every component so day boundaries agree.
"""

from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable

from .models import WorkoutEntry

DayLike = date | datetime | int | float


def local_day(timestamp: float, tz: tzinfo | None = None) -> date:
    """Return the calendar day an epoch-seconds timestamp falls on."""
    return datetime.fromtimestamp(timestamp, tz).date()


def as_day(value: DayLike, tz: tzinfo | None = None) -> date:
    """
    Normalize a reference instant to a calendar day.

    Accepts a date, a datetime (aware datetimes are converted to ``tz``
    first; naive ones are taken as already local) or epoch seconds.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(tz).date()
        return value.date()
    if isinstance(value, date):
        return value
    return local_day(float(value), tz)


def start_of_week(day: date, week_start_weekday: int) -> date:
    """Most recent day (inclusive) whose weekday() equals week_start_weekday."""
    diff = (day.weekday() - week_start_weekday) % 7
    return day - timedelta(days=diff)


def days_in_window(start: date, days: int) -> list[date]:
    """The `days` consecutive calendar days beginning at start."""
    return [start + timedelta(days=i) for i in range(days)]


def entries_in_range(
    entries: Iterable[WorkoutEntry],
    start: date,
    end: date,
    tz: tzinfo | None = None,
) -> list[WorkoutEntry]:
    """
    Entries whose local day d satisfies start <= d < end, oldest first.

    Sorting is stable, so entries sharing a timestamp keep input order.
    """
    selected = [e for e in entries if start <= local_day(e.timestamp, tz) < end]
    selected.sort(key=lambda e: e.timestamp)
    return selected


def entry_by_day(
    entries: Iterable[WorkoutEntry],
    tz: tzinfo | None = None,
) -> dict[date, WorkoutEntry]:
    """
    Map each calendar day to its representative entry.

    When a day holds several entries the one with the latest timestamp wins;
    on equal timestamps the later one in input order wins.
    """
    by_day: dict[date, WorkoutEntry] = {}
    for entry in sorted(entries, key=lambda e: e.timestamp):
        by_day[local_day(entry.timestamp, tz)] = entry
    return by_day
