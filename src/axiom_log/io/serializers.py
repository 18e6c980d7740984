"""
JSON serialization for workout entries.

Handles conversion between WorkoutEntry and JSON-compatible dicts, and
validation of user-supplied field values.
"""

import json
from datetime import datetime
from typing import Any

from ..core.models import IdentityState, WeeklyScore, WorkoutEntry


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_identity(value: Any) -> IdentityState:
    """
    Validate an identity given as rank or name.

    Raises:
        ValidationError: If the value names no identity state
    """
    try:
        return IdentityState.parse(value)
    except ValueError as e:
        raise ValidationError(str(e)) from e


def validate_energy(value: Any) -> int:
    """
    Validate energy level.

    Raises:
        ValidationError: If energy is not an integer in 1..5
    """
    if isinstance(value, bool):
        raise ValidationError(f"Invalid energy: {value!r}")
    try:
        energy = int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid energy: {value!r}. Expected an integer 1-5") from e
    if energy != value and not isinstance(value, str):
        raise ValidationError(f"Invalid energy: {value!r}. Expected an integer 1-5")
    if not 1 <= energy <= 5:
        raise ValidationError(f"Energy must be between 1 and 5, got {energy}")
    return energy


def validate_timestamp(value: Any) -> float:
    """
    Validate epoch-seconds timestamp.

    Raises:
        ValidationError: If timestamp is not numeric
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"Invalid timestamp: {value!r}. Expected epoch seconds")
    return float(value)


def parse_date_time(date_str: str, time_str: str = "12:00") -> float:
    """
    Convert local YYYY-MM-DD and HH:MM strings to epoch seconds.

    Raises:
        ValidationError: If either part is malformed
    """
    try:
        dt = datetime.strptime(f"{date_str} {time_str}", "%Y-%m-%d %H:%M")
    except ValueError as e:
        raise ValidationError(
            f"Invalid date/time: {date_str} {time_str}. Expected YYYY-MM-DD and HH:MM"
        ) from e
    return dt.timestamp()


def parse_date(date_str: str) -> datetime:
    """Parse YYYY-MM-DD, raising ValidationError on bad input."""
    try:
        return datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValidationError(f"Invalid date: {date_str}. Expected YYYY-MM-DD") from e


def entry_to_dict(entry: WorkoutEntry) -> dict[str, Any]:
    """
    Convert WorkoutEntry to JSON-compatible dict.

    Identity is stored by rank.  Optional fields are omitted when unset.
    """
    data: dict[str, Any] = {
        "timestamp": entry.timestamp,
        "identity": int(entry.identity),
        "energy": entry.energy,
    }
    if entry.plan_id:
        data["plan_id"] = entry.plan_id
    if entry.notes:
        data["notes"] = entry.notes
    return data


def dict_to_entry(data: dict[str, Any]) -> WorkoutEntry:
    """
    Convert dict to WorkoutEntry.

    Accepts identity as rank or name, and ``planId`` as an alias of
    ``plan_id`` so exports from the web client load unchanged.

    Raises:
        ValidationError: If data is invalid
    """
    for key in ("timestamp", "identity", "energy"):
        if key not in data:
            raise ValidationError(f"Missing required field: {key}")

    plan_id = data.get("plan_id", data.get("planId"))
    notes = data.get("notes")

    return WorkoutEntry(
        timestamp=validate_timestamp(data["timestamp"]),
        identity=validate_identity(data["identity"]),
        energy=validate_energy(data["energy"]),
        plan_id=str(plan_id) if plan_id else None,
        notes=str(notes) if notes else None,
    )


def entry_to_json_line(entry: WorkoutEntry) -> str:
    """Serialize an entry to one compact JSONL line (no newline)."""
    return json.dumps(entry_to_dict(entry), separators=(",", ":"))


def weekly_score_to_dict(score: WeeklyScore) -> dict[str, Any]:
    """Convert a weekly breakdown to a JSON-compatible dict."""
    return {
        "week_start": score.week_start,
        "base": score.base,
        "overdrive_bonus": score.overdrive_bonus,
        "streak_bonus": score.streak_bonus,
        "energy_bonus": score.energy_bonus,
        "comparison_bonus": score.comparison_bonus,
        "total": score.total,
        "previous_week_total": score.previous_week_total,
        "overdrive_count": score.overdrive_count,
        "max_normal_streak": score.max_normal_streak,
        "margin": score.margin,
        "entry_count": score.entry_count,
    }
