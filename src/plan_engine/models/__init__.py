"""Data models for the plan engine."""

from plan_engine.models.enums import (
    BlockType,
    ExperienceLevel,
    GoalBias,
    ImpactLevel,
    MovementPattern,
    PeriodizationPhase,
    PlanStatus,
)
from plan_engine.models.periodization import (
    BlockGuidelines,
    PeriodizationBlock,
    PeriodizationFramework,
)
from plan_engine.models.plan import (
    Calendar,
    CalendarDay,
    CalendarWeek,
    Plan,
    WorkoutInstance,
    WorkoutPayload,
    WorkoutScheduleUpdate,
)
from plan_engine.models.profile import GuardrailConstraints, ProfileConstraints
from plan_engine.models.progression import (
    ConditioningFloor,
    LoggedSet,
    ProgressionTarget,
    WeeklyAggregate,
    WeeklyLogSummary,
)
from plan_engine.models.template import Block, DayTemplate, ExerciseEntry, Template
from plan_engine.models.weeks import WeekIndex, WeekNumber

__all__ = [
    "Block",
    "BlockGuidelines",
    "BlockType",
    "Calendar",
    "CalendarDay",
    "CalendarWeek",
    "ConditioningFloor",
    "DayTemplate",
    "ExerciseEntry",
    "ExperienceLevel",
    "GoalBias",
    "GuardrailConstraints",
    "ImpactLevel",
    "LoggedSet",
    "MovementPattern",
    "PeriodizationBlock",
    "PeriodizationFramework",
    "PeriodizationPhase",
    "Plan",
    "PlanStatus",
    "ProfileConstraints",
    "ProgressionTarget",
    "Template",
    "WeekIndex",
    "WeekNumber",
    "WeeklyAggregate",
    "WeeklyLogSummary",
    "WorkoutInstance",
    "WorkoutPayload",
    "WorkoutScheduleUpdate",
]
