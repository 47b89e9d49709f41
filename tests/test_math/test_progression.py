"""Tests for the progression projector: load aggregation and weekly targets."""

import math

import pytest

from plan_engine.math.progression import (
    aggregate_logs,
    conditioning_floor,
    load_kg,
    project_targets,
    round_half_up,
)
from plan_engine.models.enums import (
    FOCUS_NOTE_DELOAD,
    FOCUS_NOTE_LOGGED,
    FOCUS_NOTE_PROGRESSION,
    BlockType,
)
from plan_engine.models.progression import LoggedSet, WeeklyLogSummary
from plan_engine.models.template import Block, DayTemplate, ExerciseEntry, Template


def _conditioning_template(minutes: list[int]) -> Template:
    zone2 = ExerciseEntry(id="bike_zone2", name="Bike", equipment="bike", sets=1, reps="20 min")
    squat = ExerciseEntry(id="back_squat", name="Squat", equipment="barbell", sets=3, reps="5")
    days = []
    for i, m in enumerate(minutes):
        blocks = [Block(BlockType.STRENGTH, "Main", 30, (squat,))]
        if m:
            blocks.append(Block(BlockType.CONDITIONING, "Zone 2", m, (zone2,)))
        days.append(DayTemplate(day_index=i, focus=f"Day {i}", blocks=tuple(blocks)))
    return Template(days_per_week=len(days), pattern=tuple(days))


class TestLoadKg:
    def test_sums_weight_times_reps(self) -> None:
        sets = [LoggedSet(100, 5), LoggedSet(80, 10)]
        assert load_kg(sets) == 1300

    def test_rounds_half_up(self) -> None:
        assert load_kg([LoggedSet(22.5, 3)]) == 68

    def test_empty(self) -> None:
        assert load_kg([]) == 0

    def test_malformed_entries_contribute_nothing(self) -> None:
        sets = [
            LoggedSet(100, 5),
            LoggedSet("heavy", 5),
            LoggedSet(None, 8),
            LoggedSet(60, None),
            LoggedSet(True, 10),
            LoggedSet(math.nan, 10),
            LoggedSet(math.inf, 1),
        ]
        assert load_kg(sets) == 500

    def test_accepts_mappings(self) -> None:
        assert load_kg([{"weightKg": 50, "reps": 10}, {"weight_kg": 20, "reps": 5}]) == 600

    def test_round_half_up(self) -> None:
        assert round_half_up(4099.5) == 4100
        assert round_half_up(3362.0) == 3362


class TestAggregateLogs:
    def test_groups_by_week(self) -> None:
        logs = [
            WeeklyLogSummary(1, (LoggedSet(100, 10),), zone2_minutes=30),
            WeeklyLogSummary(0, (LoggedSet(50, 10),)),
            WeeklyLogSummary(1, (LoggedSet(100, 5),), zone2_minutes=20),
        ]
        by_week = aggregate_logs(logs)
        assert sorted(by_week) == [0, 1]
        assert by_week[1].load_kg == 1500
        assert by_week[1].zone2_minutes == 50.0
        assert by_week[0].zone2_minutes == 0.0

    def test_no_logs(self) -> None:
        assert aggregate_logs([]) == {}


class TestConditioningFloor:
    def test_minimum_of_ninety_minutes_and_two_sessions(self, sample_template: Template) -> None:
        floor = conditioning_floor(sample_template)
        assert floor.session_count == 2
        assert floor.per_week_minutes == 90

    def test_planned_minutes_above_minimum(self) -> None:
        floor = conditioning_floor(_conditioning_template([40, 40, 40]))
        assert floor.per_week_minutes == 120
        assert floor.session_count == 3

    def test_thirty_minutes_per_session(self) -> None:
        floor = conditioning_floor(_conditioning_template([20, 20, 20, 20]))
        assert floor.session_count == 4
        assert floor.per_week_minutes == 120


class TestProjectTargets:
    def test_one_target_per_week(self, sample_template: Template) -> None:
        targets = project_targets(sample_template, 8, [])
        assert [t.week_index for t in targets] == list(range(8))

    def test_logged_week_progresses_two_and_a_half_percent(
        self, sample_template: Template, week0_logs: list[WeeklyLogSummary]
    ) -> None:
        targets = project_targets(sample_template, 8, week0_logs)
        assert targets[0].total_load_kg == 4000
        assert targets[0].focus_notes == FOCUS_NOTE_LOGGED
        assert targets[1].total_load_kg == 4100
        assert targets[1].focus_notes == FOCUS_NOTE_PROGRESSION

    def test_deload_week_reduces_load(
        self, sample_template: Template, week0_logs: list[WeeklyLogSummary]
    ) -> None:
        targets = project_targets(sample_template, 8, week0_logs)
        assert targets[2].is_deload
        assert targets[2].total_load_kg == 3362  # 4100 * 0.82
        assert targets[2].focus_notes == FOCUS_NOTE_DELOAD
        assert targets[3].total_load_kg == 3446  # 3362 * 1.025

    def test_seed_load_without_logs(self, sample_template: Template) -> None:
        targets = project_targets(sample_template, 4, [])
        assert targets[0].total_load_kg == 3280  # 3200 * 1.025
        assert not targets[0].is_deload

    def test_load_never_below_floor(self, sample_template: Template) -> None:
        logs = [WeeklyLogSummary(0, (LoggedSet(20, 10),))]
        targets = project_targets(sample_template, 6, logs)
        assert all(t.total_load_kg >= 2500 for t in targets)
        assert targets[0].total_load_kg == 2500

    def test_unlogged_weeks_before_latest_log_carry_forward(
        self, sample_template: Template
    ) -> None:
        logs = [
            WeeklyLogSummary(0, (LoggedSet(100, 30),)),  # 3000
            WeeklyLogSummary(3, (LoggedSet(100, 40),)),  # 4000
        ]
        targets = project_targets(sample_template, 6, logs)
        assert targets[1].total_load_kg == 3000
        assert targets[2].total_load_kg == 3000
        assert targets[3].total_load_kg == 4000
        assert targets[4].total_load_kg == 4100

    def test_conditioning_target_is_floor(self, sample_template: Template) -> None:
        targets = project_targets(sample_template, 3, [])
        assert {t.zone2_minutes for t in targets} == {90}

    def test_deload_flags_follow_classifier(self, sample_template: Template) -> None:
        targets = project_targets(sample_template, 10, [])
        assert [t.week_index for t in targets if t.is_deload] == [2, 6]

    def test_malformed_logs_never_raise(self, sample_template: Template) -> None:
        logs = [WeeklyLogSummary(0, (LoggedSet("x", "y"),), zone2_minutes="n/a")]
        targets = project_targets(sample_template, 4, logs)
        assert targets[0].total_load_kg == 2500
        assert targets[0].focus_notes == FOCUS_NOTE_LOGGED

    @pytest.mark.parametrize("bad_week", [None, "x", 1.5, math.nan])
    def test_logs_with_invalid_week_are_skipped(
        self, sample_template: Template, week0_logs: list[WeeklyLogSummary], bad_week: object
    ) -> None:
        logs = [*week0_logs, WeeklyLogSummary(bad_week, (LoggedSet(1, 1),))]
        targets = project_targets(sample_template, 4, logs)
        assert targets == project_targets(sample_template, 4, week0_logs)
        assert targets[0].total_load_kg == 4000

    def test_deterministic(
        self, sample_template: Template, week0_logs: list[WeeklyLogSummary]
    ) -> None:
        assert project_targets(sample_template, 12, week0_logs) == project_targets(
            sample_template, 12, week0_logs
        )

    @pytest.mark.parametrize("total_weeks", [0, -3])
    def test_empty_program(self, sample_template: Template, total_weeks: int) -> None:
        assert project_targets(sample_template, total_weeks, []) == []
