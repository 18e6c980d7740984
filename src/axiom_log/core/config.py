"""
Configuration constants for the identity progression model.

These are the defaults behind DEFAULT_RULES and are mirrored in the bundled
scoring.yaml.  User overrides are loaded by core.engine.config_loader.
"""

from typing import Final

from .models import IdentityState

# =============================================================================
# CALENDAR
# =============================================================================

WINDOW_DAYS: Final[int] = 7  # Length of a scoring week and the integrity window
WEEK_START_WEEKDAY: Final[int] = 6  # Python weekday; 6 = Sunday

# =============================================================================
# WEEKLY XP: BASE POINTS
# =============================================================================

# OVERDRIVE is scored through the tier bonus, REST earns nothing.
BASE_POINTS: Final[dict[IdentityState, int]] = {
    IdentityState.OVERDRIVE: 0,
    IdentityState.NORMAL: 10,
    IdentityState.MAINTENANCE: 6,
    IdentityState.SURVIVAL: 3,
    IdentityState.REST: 0,
}

# =============================================================================
# WEEKLY XP: OVERDRIVE TIERS
# =============================================================================

# Per-entry rate chosen by the week's total overdrive count.
# Keys are minimum counts; the highest key <= count applies.
OVERDRIVE_TIER_RATES: Final[dict[int, int]] = {
    0: 15,
    2: 20,
    3: 25,
}

# =============================================================================
# WEEKLY XP: ENERGY
# =============================================================================

ENERGY_BONUS_THRESHOLD: Final[int] = 4  # energy >= this earns the bonus
ENERGY_BONUS_POINTS: Final[int] = 1

# =============================================================================
# WEEKLY XP: NORMAL STREAK
# =============================================================================

# Longest NORMAL run in the week -> bonus.  Keys are minimum run lengths.
STREAK_BONUS_TABLE: Final[dict[int, int]] = {
    3: 2,
    4: 3,
    5: 4,
    6: 5,
}

# =============================================================================
# WEEKLY XP: BEAT LAST WEEK
# =============================================================================

COMPARISON_BONUS: Final[int] = 5

# =============================================================================
# INTEGRITY INDEX
# =============================================================================

# Percentage of one day's share awarded per identity; missing day = 0.
INTEGRITY_WEIGHTS: Final[dict[IdentityState, int]] = {
    IdentityState.OVERDRIVE: 100,
    IdentityState.NORMAL: 100,
    IdentityState.MAINTENANCE: 40,
    IdentityState.SURVIVAL: 20,
    IdentityState.REST: 40,
}

INTEGRITY_MAX: Final[int] = 100

# =============================================================================
# STATUS DISPLAY
# =============================================================================

HEALTH_STABLE_ABOVE: Final[int] = 80  # integrity > 80 -> "stable"
HEALTH_DEGRADED_ABOVE: Final[int] = 40  # integrity > 40 -> "degraded", else "critical"
INTEGRITY_WARNING_BELOW: Final[int] = 70

# Identities counted as "high integrity" in range statistics.
HIGH_INTEGRITY_STATES: Final[frozenset[IdentityState]] = frozenset(
    {IdentityState.OVERDRIVE, IdentityState.NORMAL}
)

STATS_RANGES: Final[tuple[int, ...]] = (7, 14, 30, 60, 120)
DEFAULT_STATS_RANGE: Final[int] = 7
DEFAULT_XP_HISTORY_WEEKS: Final[int] = 4
