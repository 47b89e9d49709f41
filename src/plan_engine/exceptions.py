"""Exception hierarchy for the plan engine."""

from __future__ import annotations

from typing import Any


class PlanEngineError(Exception):
    """Base exception for all plan_engine errors."""


class TemplateValidationError(PlanEngineError):
    """A template draft does not conform to the template shape."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(f"Schema validation failed: {message}")
        self.errors = errors or []


class InvalidStartDate(PlanEngineError, ValueError):
    """A plan start date is missing or not a calendar date."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Invalid plan start date: {value!r}")
        self.value = value


class MissingTemplate(PlanEngineError):
    """The plan carries no template to schedule from."""

    def __init__(self, plan_id: str) -> None:
        super().__init__(f"Plan {plan_id} is missing template data")
        self.plan_id = plan_id


class WorkoutEditError(PlanEngineError):
    """An exercise edit could not be applied to a workout."""


class InvalidBlockIndex(WorkoutEditError):
    def __init__(self, block_index: int, block_count: int) -> None:
        super().__init__(
            f"Invalid block index {block_index} (workout has {block_count} blocks)"
        )
        self.block_index = block_index


class ExerciseNotFound(WorkoutEditError):
    def __init__(self, exercise_id: str) -> None:
        super().__init__(f"Exercise {exercise_id!r} not found in block")
        self.exercise_id = exercise_id
