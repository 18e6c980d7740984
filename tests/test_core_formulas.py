"""
Rule-focused unit tests for the identity progression engine.

Each test pins one rule of the weekly XP score, the Normal-streak
evaluator or the integrity index.  Expected values are hand-computed from
the rule table so the tests act as a reference.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from axiom_log.core.config import BASE_POINTS, COMPARISON_BONUS, STREAK_BONUS_TABLE
from axiom_log.core.dates import as_day, entries_in_range, entry_by_day, local_day, start_of_week
from axiom_log.core.integrity import health_band, integrity_index, integrity_warning
from axiom_log.core.models import IdentityState, WorkoutEntry
from axiom_log.core.rules import DEFAULT_RULES, ScoringRules, rules_from_dict
from axiom_log.core.scoring import (
    base_points,
    energy_bonus,
    overdrive_bonus,
    overdrive_tier,
    streak_bonus,
    week_containing,
    weekly_score,
    xp_history,
)
from axiom_log.core.statistics import range_stats, status_snapshot
from axiom_log.core.streaks import current_streak, windowed_max_streak

OD = IdentityState.OVERDRIVE
N = IdentityState.NORMAL
M = IdentityState.MAINTENANCE
S = IdentityState.SURVIVAL
R = IdentityState.REST

# 2026-03-01 is a Sunday, the default week start.
WEEK = date(2026, 3, 1)
PREV_WEEK = WEEK - timedelta(days=7)

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _entry(
    day: date,
    identity: IdentityState,
    energy: int = 3,
    hour: int = 12,
    plan_id: str | None = None,
) -> WorkoutEntry:
    ts = datetime(day.year, day.month, day.day, hour).timestamp()
    return WorkoutEntry(timestamp=ts, identity=identity, energy=energy, plan_id=plan_id)


def _run(start: date, identities: list[IdentityState | None], energy: int = 3) -> list[WorkoutEntry]:
    """One entry per day from start; None leaves the day empty."""
    return [
        _entry(start + timedelta(days=i), ident, energy)
        for i, ident in enumerate(identities)
        if ident is not None
    ]


# =============================================================================
# Identity model
# =============================================================================


class TestIdentityState:
    """Rank table and parsing."""

    def test_ranks(self):
        assert [int(s) for s in (OD, N, M, S, R)] == [0, 1, 2, 3, 4]

    def test_parse_name_case_insensitive(self):
        assert IdentityState.parse("normal") is N
        assert IdentityState.parse("OverDrive") is OD

    def test_parse_rank(self):
        assert IdentityState.parse(3) is S
        assert IdentityState.parse("4") is R

    def test_parse_unknown_raises(self):
        with pytest.raises(ValueError):
            IdentityState.parse("beast")
        with pytest.raises(ValueError):
            IdentityState.parse(7)

    def test_entry_rejects_energy_out_of_range(self):
        with pytest.raises(ValueError):
            WorkoutEntry(timestamp=0.0, identity=N, energy=6)
        with pytest.raises(ValueError):
            WorkoutEntry(timestamp=0.0, identity=N, energy=0)

    def test_entry_coerces_rank_identity(self):
        entry = WorkoutEntry(timestamp=0.0, identity=1, energy=3)
        assert entry.identity is N


# =============================================================================
# Calendar bucketing
# =============================================================================


class TestDates:
    """Local-day bucketing and week boundaries."""

    def test_local_day_respects_tz(self):
        assert local_day(0, timezone.utc) == date(1970, 1, 1)
        assert local_day(0, timezone(timedelta(hours=-5))) == date(1969, 12, 31)

    def test_as_day_accepts_date_datetime_and_epoch(self):
        assert as_day(WEEK) == WEEK
        assert as_day(datetime(2026, 3, 1, 23, 59)) == WEEK
        assert as_day(datetime(2026, 3, 1, 23, 0, tzinfo=timezone.utc), timezone.utc) == WEEK
        ts = datetime(2026, 3, 1, 8).timestamp()
        assert as_day(ts) == WEEK

    def test_start_of_week_sunday(self):
        assert start_of_week(date(2026, 3, 4), 6) == WEEK
        assert start_of_week(WEEK, 6) == WEEK
        assert start_of_week(date(2026, 3, 7), 6) == WEEK

    def test_start_of_week_monday(self):
        assert start_of_week(WEEK, 0) == date(2026, 2, 23)

    def test_entries_in_range_half_open(self):
        entries = [_entry(WEEK, N), _entry(WEEK + timedelta(days=7), N)]
        selected = entries_in_range(entries, WEEK, WEEK + timedelta(days=7))
        assert len(selected) == 1

    def test_entry_by_day_latest_wins(self):
        morning = _entry(WEEK, S, hour=8)
        evening = _entry(WEEK, N, hour=20)
        assert entry_by_day([evening, morning])[WEEK] is evening


# =============================================================================
# Windowed max streak
# =============================================================================


class TestWindowedMaxStreak:
    """Longest NORMAL run inside a 7-day window, OVERDRIVE bridging."""

    def test_empty_is_zero(self):
        assert windowed_max_streak([], WEEK) == 0

    def test_three_consecutive_normals(self):
        assert windowed_max_streak(_run(WEEK, [N, N, N]), WEEK) == 3

    def test_overdrive_bridges_without_extending(self):
        entries = _run(WEEK, [N, N, OD, N])
        assert windowed_max_streak(entries, WEEK) == 3

    def test_maintenance_breaks(self):
        entries = _run(WEEK, [N, N, M, N])
        assert windowed_max_streak(entries, WEEK) == 2

    def test_empty_day_breaks(self):
        entries = _run(WEEK, [N, N, None, N, N, N])
        assert windowed_max_streak(entries, WEEK) == 3

    def test_adjacent_overdrive_never_changes_run(self):
        base = _run(WEEK, [None, N, N, N])
        with_od = base + [_entry(WEEK, OD), _entry(WEEK + timedelta(days=4), OD)]
        assert windowed_max_streak(base, WEEK) == 3
        assert windowed_max_streak(with_od, WEEK) == 3

    def test_days_outside_window_ignored(self):
        entries = _run(PREV_WEEK, [N] * 14)
        assert windowed_max_streak(entries, WEEK) == 7

    def test_all_overdrive_is_zero(self):
        assert windowed_max_streak(_run(WEEK, [OD] * 7), WEEK) == 0


# =============================================================================
# Live current streak
# =============================================================================


class TestCurrentStreak:
    """Open-ended NORMAL streak anchored at today."""

    TODAY = date(2026, 3, 10)

    def _days_back(self, identities: list[IdentityState | None]) -> list[WorkoutEntry]:
        """identities[0] is today, identities[1] yesterday, ..."""
        return [
            _entry(self.TODAY - timedelta(days=i), ident)
            for i, ident in enumerate(identities)
            if ident is not None
        ]

    def test_no_entries(self):
        assert current_streak([], self.TODAY) == 0

    def test_counts_today_when_logged(self):
        assert current_streak(self._days_back([N, N]), self.TODAY) == 2

    def test_unlogged_today_starts_from_yesterday(self):
        assert current_streak(self._days_back([None, N, N, N]), self.TODAY) == 3

    def test_unlogged_today_and_yesterday_is_zero(self):
        assert current_streak(self._days_back([None, None, N, N]), self.TODAY) == 0

    def test_overdrive_bridges(self):
        assert current_streak(self._days_back([N, OD, N]), self.TODAY) == 2

    def test_overdrive_today_does_not_count(self):
        assert current_streak(self._days_back([OD, N]), self.TODAY) == 1

    @pytest.mark.parametrize("breaker", [S, R, M])
    def test_non_normal_terminates(self, breaker):
        entries = self._days_back([N, N, breaker] + [N] * 10)
        assert current_streak(entries, self.TODAY) == 2

    def test_gap_terminates(self):
        assert current_streak(self._days_back([N, None, N, N]), self.TODAY) == 1

    def test_accepts_datetime_reference(self):
        entries = self._days_back([N, N])
        assert current_streak(entries, datetime(2026, 3, 10, 23, 30)) == 2

    def test_same_day_tie_break_uses_latest(self):
        entries = self._days_back([N, N]) + [_entry(self.TODAY, S, hour=23)]
        assert current_streak(entries, self.TODAY) == 0


# =============================================================================
# Integrity index
# =============================================================================


class TestIntegrityIndex:
    """Weighted 7-day rolling score."""

    TODAY = date(2026, 3, 7)

    def _window(self, identities: list[IdentityState | None]) -> list[WorkoutEntry]:
        return [
            _entry(self.TODAY - timedelta(days=i), ident)
            for i, ident in enumerate(identities)
            if ident is not None
        ]

    def test_empty_is_zero(self):
        assert integrity_index([], self.TODAY) == 0

    def test_full_week_normal_is_exactly_100(self):
        assert integrity_index(self._window([N] * 7), self.TODAY) == 100

    def test_full_week_mixed_high_states_is_exactly_100(self):
        assert integrity_index(self._window([OD, N, OD, N, OD, N, OD]), self.TODAY) == 100

    def test_single_normal_day(self):
        # 100/7 = 14.29
        assert integrity_index(self._window([N]), self.TODAY) == 14

    def test_weighted_mix(self):
        # (3*100 + 2*40 + 20) / 7 = 57.14
        entries = self._window([N, N, N, M, M, S, None])
        assert integrity_index(entries, self.TODAY) == 57

    def test_rest_weighs_like_maintenance(self):
        # 7 * 40 / 7 = 40
        assert integrity_index(self._window([R] * 7), self.TODAY) == 40

    def test_older_entries_ignored(self):
        entries = self._window([None] * 7 + [N] * 7)
        assert integrity_index(entries, self.TODAY) == 0

    def test_future_entries_ignored(self):
        entries = [_entry(self.TODAY + timedelta(days=1), N)]
        assert integrity_index(entries, self.TODAY) == 0

    def test_multiple_entries_one_day_uses_latest(self):
        entries = [_entry(self.TODAY, S, hour=8), _entry(self.TODAY, N, hour=20)]
        assert integrity_index(entries, self.TODAY) == 14

    @pytest.mark.parametrize(
        "score,band",
        [(100, "stable"), (81, "stable"), (80, "degraded"), (41, "degraded"), (40, "critical"), (0, "critical")],
    )
    def test_health_band(self, score, band):
        assert health_band(score) == band

    def test_warning_threshold(self):
        assert integrity_warning(69) is True
        assert integrity_warning(70) is False


# =============================================================================
# Weekly XP components
# =============================================================================


class TestXpComponents:
    """Individual bonus rules."""

    def test_base_points_table(self):
        entries = _run(WEEK, [OD, N, M, S, R])
        assert base_points(entries) == 0 + 10 + 6 + 3 + 0

    @pytest.mark.parametrize("count,expected", [(0, 0), (1, 15), (2, 40), (3, 75), (4, 100)])
    def test_overdrive_bonus_tiers(self, count, expected):
        assert overdrive_bonus(count) == expected

    @pytest.mark.parametrize("count,tier", [(0, 1), (1, 1), (2, 2), (3, 3), (6, 3)])
    def test_overdrive_tier(self, count, tier):
        assert overdrive_tier(count) == tier

    @pytest.mark.parametrize(
        "run,bonus", [(0, 0), (1, 0), (2, 0), (3, 2), (4, 3), (5, 4), (6, 5), (7, 5)]
    )
    def test_streak_bonus_table(self, run, bonus):
        assert streak_bonus(run) == bonus

    def test_energy_bonus_counts_four_and_five(self):
        entries = [
            _entry(WEEK, N, energy=4),
            _entry(WEEK, R, energy=5),
            _entry(WEEK, N, energy=3),
            _entry(WEEK, OD, energy=1),
        ]
        assert energy_bonus(entries) == 2


# =============================================================================
# Weekly XP total
# =============================================================================


class TestWeeklyScore:
    """Full breakdown including week-over-week comparison."""

    def test_empty_log(self):
        score = weekly_score([], WEEK)
        assert score.total == 0
        assert score.comparison_bonus == 0
        assert score.previous_week_total == 0

    def test_three_consecutive_normals(self):
        score = weekly_score(_run(WEEK, [N, N, N]), WEEK)
        assert score.base == 30
        assert score.streak_bonus == 2
        assert score.energy_bonus == 0
        assert score.overdrive_bonus == 0
        assert score.total == 32

    def test_full_high_energy_week(self):
        # 70 base + 5 streak + 7 energy
        score = weekly_score(_run(WEEK, [N] * 7, energy=5), WEEK)
        assert score.total == 82
        assert score.max_normal_streak == 7

    def test_overdrive_counted_by_tier(self):
        score = weekly_score(_run(WEEK, [OD, OD, N]), WEEK)
        assert score.overdrive_count == 2
        assert score.overdrive_bonus == 40
        assert score.base == 10
        assert score.total == 50

    def test_same_day_entries_each_scored(self):
        entries = [_entry(WEEK, N, hour=8), _entry(WEEK, N, hour=18)]
        score = weekly_score(entries, WEEK)
        assert score.base == 20
        assert score.streak_bonus == 0

    def test_week_boundary_half_open(self):
        entries = [_entry(WEEK + timedelta(days=7), N), _entry(WEEK - timedelta(days=1), N)]
        score = weekly_score(entries, WEEK)
        assert score.base == 0

    def test_beating_previous_week_adds_bonus(self):
        entries = _run(PREV_WEEK, [N]) + _run(WEEK, [N, None, N])
        score = weekly_score(entries, WEEK)
        assert score.previous_week_total == 10
        assert score.comparison_bonus == COMPARISON_BONUS
        assert score.total == 25
        assert score.margin == 10

    def test_equal_total_gets_no_bonus(self):
        entries = _run(PREV_WEEK, [N, None, N]) + _run(WEEK, [N, None, N])
        score = weekly_score(entries, WEEK)
        assert score.previous_week_total == 20
        assert score.comparison_bonus == 0
        assert score.total == 20

    def test_zero_previous_week_never_triggers(self):
        score = weekly_score(_run(WEEK, [OD, OD, OD]), WEEK)
        assert score.previous_week_total == 0
        assert score.comparison_bonus == 0
        assert score.total == 75

    def test_previous_week_total_excludes_its_own_bonus(self):
        two_back = PREV_WEEK - timedelta(days=7)
        entries = (
            _run(two_back, [N])  # 10
            + _run(PREV_WEEK, [N, None, N])  # 20, would be 25 with its own bonus
            + _run(WEEK, [N, None, N])  # 20
        )
        prev = weekly_score(entries, PREV_WEEK)
        assert prev.total == 25

        score = weekly_score(entries, WEEK)
        assert score.previous_week_total == 20
        assert score.comparison_bonus == 0

    def test_losing_week_no_bonus(self):
        entries = _run(PREV_WEEK, [N, N, N]) + _run(WEEK, [N])
        score = weekly_score(entries, WEEK)
        assert score.previous_week_total == 32
        assert score.total == 10

    def test_input_order_irrelevant(self):
        entries = _run(PREV_WEEK, [N]) + _run(WEEK, [N, N, N, OD, N], energy=4)
        forward = weekly_score(entries, WEEK)
        backward = weekly_score(list(reversed(entries)), WEEK)
        assert forward == backward

    def test_week_start_as_datetime(self):
        score = weekly_score(_run(WEEK, [N, N, N]), datetime(2026, 3, 1, 0, 0))
        assert score.week_start == "2026-03-01"
        assert score.total == 32


class TestXpHistory:

    def test_oldest_first(self):
        entries = _run(PREV_WEEK, [N]) + _run(WEEK, [N, N, N])
        history = xp_history(entries, WEEK, weeks=3)
        assert [h.week_start for h in history] == ["2026-02-15", "2026-02-22", "2026-03-01"]
        assert [h.total for h in history] == [0, 10, 37]

    def test_week_containing_uses_sunday_start(self):
        assert week_containing(date(2026, 3, 5)) == WEEK


# =============================================================================
# Statistics and status snapshot
# =============================================================================


class TestRangeStats:

    TODAY = date(2026, 3, 7)

    def test_empty(self):
        stats = range_stats([], self.TODAY, 7)
        assert stats.total_logs == 0
        assert stats.avg_energy == 0.0
        assert stats.stability_score == 0

    def test_aggregates(self):
        entries = [
            _entry(self.TODAY, N, energy=4, plan_id="push"),
            _entry(self.TODAY - timedelta(days=1), OD, energy=5, plan_id="push"),
            _entry(self.TODAY - timedelta(days=2), M, energy=3),
        ]
        stats = range_stats(entries, self.TODAY, 7)
        assert stats.total_logs == 3
        assert stats.avg_energy == 4.0
        assert stats.unique_plans == 1
        assert stats.stability_score == 67
        assert stats.energy_by_day["2026-03-07"] == 4.0

    def test_range_excludes_older_entries(self):
        entries = [_entry(self.TODAY, N), _entry(self.TODAY - timedelta(days=7), N)]
        assert range_stats(entries, self.TODAY, 7).total_logs == 1
        assert range_stats(entries, self.TODAY, None).total_logs == 2

    def test_stability_half_rounds_up(self):
        entries = [_entry(self.TODAY, N)] + [
            _entry(self.TODAY - timedelta(days=i), R) for i in range(1, 8)
        ]
        # 1 of 8 high-integrity = 12.5%
        assert range_stats(entries, self.TODAY, None).stability_score == 13

    def test_energy_half_rounds_up(self):
        entries = [
            _entry(self.TODAY, N, energy=e, hour=8 + i) for i, e in enumerate([2, 2, 2, 3])
        ]
        stats = range_stats(entries, self.TODAY, 7)
        # 9 / 4 = 2.25
        assert stats.avg_energy == 2.3
        assert stats.energy_by_day["2026-03-07"] == 2.3

    def test_future_entries_excluded(self):
        entries = [_entry(self.TODAY, N), _entry(self.TODAY + timedelta(days=1), OD)]
        assert range_stats(entries, self.TODAY, 7).total_logs == 1
        assert range_stats(entries, self.TODAY, None).total_logs == 1


class TestStatusSnapshot:

    def test_empty(self):
        snap = status_snapshot([], date(2026, 3, 7))
        assert snap.integrity == 0
        assert snap.current_streak == 0
        assert snap.latest_identity is None
        assert snap.health == "critical"
        assert snap.warning is True

    def test_three_normal_days(self):
        today = date(2026, 3, 4)
        entries = _run(date(2026, 3, 2), [N, N, N])
        snap = status_snapshot(entries, today)
        # 300 / 7 = 42.86
        assert snap.integrity == 43
        assert snap.current_streak == 3
        assert snap.latest_identity is N
        assert snap.health == "degraded"


# =============================================================================
# Rule table
# =============================================================================


class TestScoringRules:

    def _raw(self) -> dict:
        return {
            "base_points": {s.name.lower(): BASE_POINTS[s] for s in IdentityState},
            "overdrive_tier_rates": {0: 15, 2: 20, 3: 25},
            "streak_bonus": dict(STREAK_BONUS_TABLE),
            "integrity_weights": {"overdrive": 100, "normal": 100, "maintenance": 40, "survival": 20, "rest": 40},
        }

    def test_from_dict_matches_defaults(self):
        rules = rules_from_dict(self._raw())
        assert rules.base_points == DEFAULT_RULES.base_points
        assert rules.comparison_bonus == DEFAULT_RULES.comparison_bonus
        assert rules.week_start_weekday == 6

    def test_custom_rules_flow_into_score(self):
        raw = self._raw()
        raw["comparison_bonus"] = 10
        raw["base_points"]["normal"] = 12
        rules = rules_from_dict(raw)
        entries = _run(PREV_WEEK, [N]) + _run(WEEK, [N, None, N])
        score = weekly_score(entries, WEEK, rules=rules)
        assert score.base == 24
        assert score.comparison_bonus == 10

    def test_missing_section_raises(self):
        raw = self._raw()
        del raw["streak_bonus"]
        with pytest.raises(ValueError):
            rules_from_dict(raw)

    def test_missing_identity_raises(self):
        raw = self._raw()
        del raw["integrity_weights"]["rest"]
        with pytest.raises(ValueError):
            rules_from_dict(raw)

    def test_non_integer_raises(self):
        raw = self._raw()
        raw["base_points"]["normal"] = "ten"
        with pytest.raises(ValueError):
            rules_from_dict(raw)

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_RULES.base_points[N] = 99
        with pytest.raises(TypeError):
            DEFAULT_RULES.streak_bonus[7] = 9
        assert DEFAULT_RULES.base_points[N] == 10

    def test_source_dict_is_copied(self):
        points = dict(BASE_POINTS)
        rules = ScoringRules(
            base_points=points,
            overdrive_tier_rates=dict(DEFAULT_RULES.overdrive_tier_rates),
            streak_bonus=dict(STREAK_BONUS_TABLE),
            integrity_weights=dict(DEFAULT_RULES.integrity_weights),
        )
        points[N] = 50
        assert rules.base_points[N] == 10
