"""
ScoringRules: the full rule table as one immutable value.

Every engine function accepts an optional ScoringRules and falls back to
DEFAULT_RULES, which is built from the constants in config.py.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from . import config
from .models import IdentityState

_REQUIRED_SECTIONS: frozenset[str] = frozenset(
    {"base_points", "overdrive_tier_rates", "streak_bonus", "integrity_weights"}
)


@dataclass(frozen=True)
class ScoringRules:
    """Numeric rule table for weekly XP, streaks and integrity."""

    base_points: Mapping[IdentityState, int]
    overdrive_tier_rates: Mapping[int, int]  # min count -> per-entry rate
    streak_bonus: Mapping[int, int]  # min run length -> bonus
    integrity_weights: Mapping[IdentityState, int]  # percent of a day's share
    energy_threshold: int = config.ENERGY_BONUS_THRESHOLD
    energy_points: int = config.ENERGY_BONUS_POINTS
    comparison_bonus: int = config.COMPARISON_BONUS
    window_days: int = config.WINDOW_DAYS
    week_start_weekday: int = config.WEEK_START_WEEKDAY
    integrity_max: int = config.INTEGRITY_MAX
    # Integrity thresholds used by the status display
    health_thresholds: tuple[int, int] = field(
        default=(config.HEALTH_STABLE_ABOVE, config.HEALTH_DEGRADED_ABOVE)
    )
    warning_below: int = config.INTEGRITY_WARNING_BELOW

    def __post_init__(self) -> None:
        """Validate rule table."""
        if self.window_days <= 0:
            raise ValueError("window_days must be positive")
        if not 0 <= self.week_start_weekday <= 6:
            raise ValueError("week_start_weekday must be in 0..6 (Monday=0)")
        if 0 not in self.overdrive_tier_rates:
            raise ValueError("overdrive_tier_rates must define a rate for count 0")
        for state in IdentityState:
            if state not in self.base_points:
                raise ValueError(f"base_points missing {state.name}")
            if state not in self.integrity_weights:
                raise ValueError(f"integrity_weights missing {state.name}")
        # Tables are copied and exposed read-only
        for name in ("base_points", "overdrive_tier_rates", "streak_bonus", "integrity_weights"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    def overdrive_rate(self, count: int) -> int:
        """Per-entry rate for a week with `count` overdrive entries."""
        tier = max(k for k in self.overdrive_tier_rates if k <= max(count, 0))
        return self.overdrive_tier_rates[tier]

    def streak_bonus_for(self, run_length: int) -> int:
        """Bonus for the longest NORMAL run of the week; 0 below the lowest key."""
        eligible = [k for k in self.streak_bonus if k <= run_length]
        if not eligible:
            return 0
        return self.streak_bonus[max(eligible)]


DEFAULT_RULES = ScoringRules(
    base_points=dict(config.BASE_POINTS),
    overdrive_tier_rates=dict(config.OVERDRIVE_TIER_RATES),
    streak_bonus=dict(config.STREAK_BONUS_TABLE),
    integrity_weights=dict(config.INTEGRITY_WEIGHTS),
)


def _identity_table(raw: Any, section: str) -> dict[IdentityState, int]:
    if not isinstance(raw, dict):
        raise ValueError(f"{section} must be a mapping of identity -> points")
    table: dict[IdentityState, int] = {}
    for key, value in raw.items():
        state = IdentityState.parse(key)
        table[state] = _as_int(value, f"{section}.{key}")
    return table


def _int_table(raw: Any, section: str) -> dict[int, int]:
    if not isinstance(raw, dict):
        raise ValueError(f"{section} must be a mapping of count -> points")
    return {_as_int(k, section): _as_int(v, f"{section}.{k}") for k, v in raw.items()}


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be an integer, got {value!r}") from e


def rules_from_dict(d: dict) -> ScoringRules:
    """Convert a raw dict (from YAML) to ScoringRules.

    Raises ValueError if a required section is absent or malformed.
    """
    missing = _REQUIRED_SECTIONS - set(d)
    if missing:
        raise ValueError(f"Scoring rules missing sections: {sorted(missing)}")

    energy = d.get("energy_bonus", {}) or {}
    calendar = d.get("calendar", {}) or {}
    status = d.get("status", {}) or {}

    return ScoringRules(
        base_points=_identity_table(d["base_points"], "base_points"),
        overdrive_tier_rates=_int_table(d["overdrive_tier_rates"], "overdrive_tier_rates"),
        streak_bonus=_int_table(d["streak_bonus"], "streak_bonus"),
        integrity_weights=_identity_table(d["integrity_weights"], "integrity_weights"),
        energy_threshold=_as_int(energy.get("threshold", config.ENERGY_BONUS_THRESHOLD), "energy_bonus.threshold"),
        energy_points=_as_int(energy.get("points", config.ENERGY_BONUS_POINTS), "energy_bonus.points"),
        comparison_bonus=_as_int(d.get("comparison_bonus", config.COMPARISON_BONUS), "comparison_bonus"),
        window_days=_as_int(calendar.get("window_days", config.WINDOW_DAYS), "calendar.window_days"),
        week_start_weekday=_as_int(
            calendar.get("week_start_weekday", config.WEEK_START_WEEKDAY), "calendar.week_start_weekday"
        ),
        integrity_max=_as_int(d.get("integrity_max", config.INTEGRITY_MAX), "integrity_max"),
        health_thresholds=(
            _as_int(status.get("stable_above", config.HEALTH_STABLE_ABOVE), "status.stable_above"),
            _as_int(status.get("degraded_above", config.HEALTH_DEGRADED_ABOVE), "status.degraded_above"),
        ),
        warning_below=_as_int(status.get("warning_below", config.INTEGRITY_WARNING_BELOW), "status.warning_below"),
    )
