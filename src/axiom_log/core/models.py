"""
Data models for axiom-log.

IdentityState is the fixed classification attached to every logged session.
WorkoutEntry is one immutable log record; WeeklyScore and StatusSnapshot are
the read-only summaries produced by the scoring engine.
"""

from dataclasses import dataclass, field
from enum import IntEnum


class IdentityState(IntEnum):
    """
    Coarse effort/recovery classification of a training day.

    The integer value is the persisted rank; lower rank means higher effort.
    """

    OVERDRIVE = 0
    NORMAL = 1
    MAINTENANCE = 2
    SURVIVAL = 3
    REST = 4

    @classmethod
    def parse(cls, value: "int | str | IdentityState") -> "IdentityState":
        """
        Parse a rank (int or numeric string) or a case-insensitive name.

        Raises:
            ValueError: If value names no identity state
        """
        if isinstance(value, IdentityState):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Invalid identity: {value!r}")
        if isinstance(value, int):
            return cls(value)
        if isinstance(value, str):
            text = value.strip()
            if text.isdigit():
                return cls(int(text))
            try:
                return cls[text.upper()]
            except KeyError:
                pass
        valid = ", ".join(s.name.lower() for s in cls)
        raise ValueError(f"Invalid identity: {value!r}. Must be one of {valid}")


IDENTITY_LABELS: dict[IdentityState, str] = {
    IdentityState.OVERDRIVE: "Overdrive",
    IdentityState.NORMAL: "Normal",
    IdentityState.MAINTENANCE: "Maintenance",
    IdentityState.SURVIVAL: "Survival",
    IdentityState.REST: "Rest",
}


@dataclass(frozen=True)
class WorkoutEntry:
    """
    One logged training session.

    timestamp is epoch seconds; the local calendar day it falls on is what
    every windowed computation keys off.
    """

    timestamp: float
    identity: IdentityState
    energy: int  # self-reported, 1..5
    plan_id: str | None = None  # opaque reference to an external plan
    notes: str | None = None

    def __post_init__(self) -> None:
        """Validate entry data."""
        if isinstance(self.timestamp, bool) or not isinstance(self.timestamp, (int, float)):
            raise ValueError(f"timestamp must be a number, got {self.timestamp!r}")
        if not isinstance(self.identity, IdentityState):
            object.__setattr__(self, "identity", IdentityState.parse(self.identity))
        if isinstance(self.energy, bool) or not isinstance(self.energy, int):
            raise ValueError(f"energy must be an integer, got {self.energy!r}")
        if not 1 <= self.energy <= 5:
            raise ValueError(f"energy must be between 1 and 5, got {self.energy}")


@dataclass
class WeeklyScore:
    """
    XP breakdown for one week.

    total already includes comparison_bonus; previous_week_total is the
    pre-comparison total of the week before.
    """

    week_start: str  # ISO date of the first day of the week
    base: int = 0
    overdrive_bonus: int = 0
    streak_bonus: int = 0
    energy_bonus: int = 0
    comparison_bonus: int = 0
    total: int = 0
    previous_week_total: int = 0
    overdrive_count: int = 0
    max_normal_streak: int = 0
    entry_count: int = 0

    @property
    def pre_comparison_total(self) -> int:
        return self.total - self.comparison_bonus

    @property
    def margin(self) -> int:
        """Points by which this week beat the previous one (pre-comparison)."""
        return self.pre_comparison_total - self.previous_week_total


@dataclass
class StatusSnapshot:
    """At-a-glance status derived from the last seven days."""

    integrity: int
    current_streak: int
    latest_identity: IdentityState | None
    health: str  # "stable" | "degraded" | "critical"
    warning: bool


@dataclass
class RangeStats:
    """Aggregate statistics over a trailing range of days."""

    range_days: int | None  # None = all entries
    total_logs: int = 0
    avg_energy: float = 0.0
    unique_plans: int = 0
    stability_score: int = 0
    energy_by_day: dict[str, float] = field(default_factory=dict)
