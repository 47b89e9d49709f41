"""PlanEngine: the orchestrator that turns template drafts into dated plans."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from plan_engine.exceptions import InvalidStartDate, MissingTemplate
from plan_engine.guardrails.audit import validate_safety
from plan_engine.guardrails.catalog import ExerciseCatalog, MemoizedCatalog
from plan_engine.guardrails.post_processor import post_process_template
from plan_engine.math.dates import TodayIndex, parse_iso_date, today_index
from plan_engine.math.periodization import generate_framework
from plan_engine.math.progression import project_targets
from plan_engine.models.enums import GoalBias, PlanStatus
from plan_engine.models.periodization import PeriodizationFramework
from plan_engine.models.plan import Calendar, Plan, WorkoutInstance
from plan_engine.models.profile import ProfileConstraints
from plan_engine.models.progression import ProgressionTarget, WeeklyLogSummary
from plan_engine.models.template import Template
from plan_engine.scheduling.calendar import ScheduleOptions, expand_template
from plan_engine.scheduling.rebuild import ScheduleResult, build_plan_schedule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanGenerationResult:
    """Everything one generation produces, to be persisted together or not at all.

    A non-empty ``violations`` means the safety audit failed and the caller
    should not persist the plan.
    """

    plan: Plan
    instances: tuple[WorkoutInstance, ...]
    calendar: Calendar
    warnings: tuple[str, ...] = field(default_factory=tuple)
    violations: tuple[str, ...] = field(default_factory=tuple)
    safety_notes: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_safe(self) -> bool:
        return not self.violations


class PlanEngine:
    """Runs guardrails, the safety audit and calendar expansion for a plan.

    Usage:
        engine = PlanEngine()
        result = engine.generate_plan(draft, profile, plan_id, user_id, "2025-01-06")
        framework = engine.framework_for(profile)
        targets = engine.progression_for(result.plan, logs)
    """

    def __init__(self, catalog: ExerciseCatalog | None = None) -> None:
        self.catalog = catalog if catalog is not None else ExerciseCatalog.from_config()

    def generate_plan(
        self,
        draft: Mapping[str, Any] | Template,
        profile: ProfileConstraints,
        plan_id: str,
        user_id: str,
        start_date: str | date | None = None,
    ) -> PlanGenerationResult:
        """Validate and adjust *draft*, then expand it into a dated plan.

        The profile's ``days_per_week`` decides how many sessions each week
        gets. When the draft's ``daysPerWeek`` differs, the profile value wins
        and the mismatch is reported in ``warnings``.

        Args:
            draft: Generator-produced template draft.
            profile: The user's training profile and constraints.
            plan_id: Id of the plan being generated.
            user_id: Owner of the plan.
            start_date: Optional program start; instances stay undated
                without one.

        Returns:
            PlanGenerationResult with the plan, its instances and calendar,
            the guardrail warnings and any audit violations.

        Raises:
            TemplateValidationError: If the draft fails schema validation.
            InvalidStartDate: If *start_date* is given but not a date.
        """
        start = self._parse_start(start_date) if start_date else None
        constraints = profile.guardrail_constraints()
        lookups = MemoizedCatalog(self.catalog)

        guarded = post_process_template(draft, constraints, lookups)
        violations = validate_safety(guarded.template, constraints, lookups)
        if violations:
            logger.warning(
                "Plan %s failed safety audit with %d violation(s)", plan_id, len(violations),
            )

        options = ScheduleOptions(
            plan_id=plan_id,
            user_id=user_id,
            weeks=profile.total_weeks,
            days_per_week=profile.days_per_week,
            start_date=start,
            preferred_days=tuple(profile.preferred_days),
        )
        template, calendar, instances = expand_template(guarded.template, options)

        plan = Plan(
            id=plan_id,
            user_id=user_id,
            duration_weeks=profile.total_weeks,
            days_per_week=profile.days_per_week,
            preferred_days=tuple(profile.preferred_days),
            start_date=start,
            status=PlanStatus.DRAFT,
            template=template,
            calendar=calendar,
            minutes_per_session=profile.minutes_per_session,
            title=f"{profile.total_weeks}-week {GoalBias(profile.goal_bias).value} plan",
        )
        logger.info(
            "Generated plan %s: %d workouts, %d warning(s)",
            plan_id, len(instances), len(guarded.warnings),
        )
        return PlanGenerationResult(
            plan=plan,
            instances=tuple(instances),
            calendar=calendar,
            warnings=guarded.warnings,
            violations=tuple(violations),
            safety_notes=guarded.safety_notes,
        )

    def reschedule(
        self,
        plan: Plan,
        instances: Sequence[WorkoutInstance],
        start_date: str | date,
    ) -> tuple[Plan, ScheduleResult]:
        """Move a plan to a new start date.

        Returns the plan with its new start date and calendar, plus the
        re-dated instances and per-workout updates.
        """
        result = build_plan_schedule(plan, start_date, instances)
        updated = dataclasses.replace(
            plan, start_date=parse_iso_date(start_date), calendar=result.calendar,
        )
        return updated, result

    def framework_for(self, profile: ProfileConstraints) -> PeriodizationFramework:
        return generate_framework(
            profile.total_weeks, profile.experience_level, profile.goal_bias,
        )

    def progression_for(
        self, plan: Plan, logs: Iterable[WeeklyLogSummary]
    ) -> list[ProgressionTarget]:
        """Weekly load and conditioning targets for *plan*.

        Raises:
            MissingTemplate: If the plan has no template.
        """
        if plan.template is None:
            raise MissingTemplate(plan.id)
        return project_targets(plan.template, plan.duration_weeks, logs)

    def today(
        self, plan: Plan, timezone: str, now: datetime | None = None
    ) -> TodayIndex:
        """Where "today" falls in the plan for a user in *timezone*."""
        if plan.start_date is None:
            raise InvalidStartDate(None)
        return today_index(plan.start_date, timezone, plan.duration_weeks * 7, now)

    @staticmethod
    def _parse_start(start_date: str | date) -> date:
        try:
            return parse_iso_date(start_date)
        except ValueError as exc:
            raise InvalidStartDate(start_date) from exc
