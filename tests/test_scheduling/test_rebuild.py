"""Tests for re-dating a plan's workouts after a start-date change."""

from __future__ import annotations

import dataclasses
from datetime import date
from typing import Callable

import pytest

from plan_engine.exceptions import InvalidStartDate, MissingTemplate
from plan_engine.models.plan import Plan, WorkoutInstance
from plan_engine.models.template import Template
from plan_engine.scheduling.calendar import ScheduleOptions, expand_template
from plan_engine.scheduling.rebuild import build_plan_schedule


@pytest.fixture
def undated_plan(
    sample_template: Template, schedule_options: Callable[..., ScheduleOptions]
) -> tuple[Plan, list[WorkoutInstance]]:
    options = schedule_options(start_date=None)
    template, calendar, instances = expand_template(sample_template, options)
    plan = Plan(
        id=options.plan_id,
        user_id=options.user_id,
        duration_weeks=options.weeks,
        days_per_week=options.days_per_week,
        template=template,
        calendar=calendar,
    )
    return plan, instances


class TestBuildPlanSchedule:
    def test_dates_from_monday_start(self, undated_plan) -> None:
        plan, instances = undated_plan
        result = build_plan_schedule(plan, "2025-01-06", instances)
        assert [w.session_date for w in result.instances[:6]] == [
            date(2025, 1, 6), date(2025, 1, 8), date(2025, 1, 10),
            date(2025, 1, 13), date(2025, 1, 15), date(2025, 1, 17),
        ]

    def test_midweek_start_wraps_to_following_monday(self, undated_plan) -> None:
        plan, instances = undated_plan
        result = build_plan_schedule(plan, "2025-01-08", instances)
        assert result.instances[0].session_date == date(2025, 1, 13)
        assert result.instances[1].session_date == date(2025, 1, 8)
        assert result.instances[2].session_date == date(2025, 1, 10)
        assert result.instances[3].session_date == date(2025, 1, 20)

    def test_only_dates_change(self, undated_plan) -> None:
        plan, instances = undated_plan
        result = build_plan_schedule(plan, date(2025, 3, 3), instances)
        for before, after in zip(instances, result.instances):
            assert dataclasses.replace(after, session_date=None) == before

    def test_idempotent(self, undated_plan) -> None:
        plan, instances = undated_plan
        first = build_plan_schedule(plan, "2025-02-10", instances)
        second = build_plan_schedule(plan, "2025-02-10", first.instances)
        assert [w.session_date for w in first.instances] == [
            w.session_date for w in second.instances
        ]
        assert first == build_plan_schedule(plan, "2025-02-10", instances)

    def test_updates_and_calendar(self, undated_plan) -> None:
        plan, instances = undated_plan
        result = build_plan_schedule(plan, "2025-01-06", instances)
        assert len(result.updates) == len(instances)
        update = result.updates[4]
        assert update.id == instances[4].id
        assert update.session_date == date(2025, 1, 15)
        assert update.week_index == 1
        assert len(result.calendar.weeks) == 8
        assert result.calendar.weeks[0].start_date == "2025-01-06"
        assert result.calendar.weeks[0].days[2].iso_date == "2025-01-10"

    def test_preferred_days(self, undated_plan) -> None:
        plan, instances = undated_plan
        plan = dataclasses.replace(plan, preferred_days=("tue", "thu", "sat"))
        result = build_plan_schedule(plan, "2025-01-06", instances)
        assert [w.session_date for w in result.instances[:3]] == [
            date(2025, 1, 7), date(2025, 1, 9), date(2025, 1, 11),
        ]

    @pytest.mark.parametrize("start", ["", None, "2025-13-01", "tomorrow"])
    def test_invalid_start_date(self, undated_plan, start) -> None:
        plan, instances = undated_plan
        with pytest.raises(InvalidStartDate):
            build_plan_schedule(plan, start, instances)

    def test_invalid_start_is_a_value_error(self, undated_plan) -> None:
        plan, instances = undated_plan
        with pytest.raises(ValueError):
            build_plan_schedule(plan, "2025/01/06", instances)

    def test_missing_template(self, undated_plan) -> None:
        plan, instances = undated_plan
        with pytest.raises(MissingTemplate):
            build_plan_schedule(dataclasses.replace(plan, template=None), "2025-01-06", instances)

    def test_input_instances_untouched(self, undated_plan) -> None:
        plan, instances = undated_plan
        build_plan_schedule(plan, "2025-01-06", instances)
        assert all(w.session_date is None for w in instances)
