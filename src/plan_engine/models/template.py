"""Template model: the reusable weekly blueprint (microcycle pattern).

All types are frozen; edits go through ``dataclasses.replace`` so a workout
instance payload never shares mutable state with the template it was copied
from.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from plan_engine.models.enums import BlockType


@dataclass(frozen=True)
class ExerciseEntry:
    """One prescribed exercise inside a block.

    ``reps`` is free-form ("8-12", "15 min", "AMRAP").
    """

    id: str
    name: str
    equipment: str
    sets: int
    reps: str
    tempo: str | None = None
    cues: tuple[str, ...] = field(default_factory=tuple)
    notes: str | None = None


@dataclass(frozen=True)
class Block:
    """Labeled workout segment with its ordered exercises."""

    type: BlockType
    title: str
    duration_minutes: int
    exercises: tuple[ExerciseEntry, ...] = field(default_factory=tuple)

    @property
    def total_sets(self) -> int:
        return sum(ex.sets for ex in self.exercises)


@dataclass(frozen=True)
class DayTemplate:
    """One training day of the weekly pattern."""

    day_index: int  # position the generator gave the day (0-6)
    focus: str
    blocks: tuple[Block, ...] = field(default_factory=tuple)

    @property
    def total_minutes(self) -> int:
        return sum(b.duration_minutes for b in self.blocks)

    def blocks_of_type(self, block_type: BlockType) -> tuple[Block, ...]:
        return tuple(b for b in self.blocks if b.type == block_type)

    def has_block_type(self, block_type: BlockType) -> bool:
        return any(b.type == block_type for b in self.blocks)


@dataclass(frozen=True)
class Template:
    """Weekly workout template.

    ``id`` and ``weeks`` are attached by the application when the template is
    expanded into a plan; generator drafts leave them unset.
    """

    days_per_week: int
    pattern: tuple[DayTemplate, ...]
    id: str | None = None
    weeks: int | None = None

    def day_for_session(self, session_index: int) -> DayTemplate:
        """Day template for a weekly session slot, rotating over the pattern."""
        return self.pattern[session_index % len(self.pattern)]

    def count_blocks(self, block_type: BlockType) -> int:
        return sum(len(day.blocks_of_type(block_type)) for day in self.pattern)
