"""Immutable session, exercise and set models."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from lift_cli.core.constants import EXERCISE_ID_TEMPLATE, EXERCISE_NAME_TEMPLATE


class Phase(str, Enum):
    """Timing mode of a session."""

    READY = "READY"
    IN_SET = "IN_SET"
    IN_REST = "IN_REST"


@dataclass(frozen=True)
class SetRecord:
    """One lift interval and the rest that followed it, in epoch milliseconds."""

    set_start: Optional[int] = None
    set_end: Optional[int] = None
    rest_start: Optional[int] = None
    rest_end: Optional[int] = None

    @property
    def lift_ms(self) -> int:
        if self.set_start is None or self.set_end is None:
            return 0
        return self.set_end - self.set_start

    @property
    def rest_ms(self) -> int:
        if self.rest_start is None or self.rest_end is None:
            return 0
        return self.rest_end - self.rest_start

    @property
    def has_open_rest(self) -> bool:
        return self.rest_start is not None and self.rest_end is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "set_start": self.set_start,
            "set_end": self.set_end,
            "rest_start": self.rest_start,
            "rest_end": self.rest_end,
        }


@dataclass(frozen=True)
class Exercise:
    """A named unit of work with an append-only set log."""

    id: str
    name: str
    sets: Tuple[SetRecord, ...] = ()

    @classmethod
    def numbered(cls, number: int, name: Optional[str] = None) -> "Exercise":
        """Build the empty exercise at 1-based position ``number``."""
        return cls(
            id=EXERCISE_ID_TEMPLATE.format(n=number),
            name=name or EXERCISE_NAME_TEMPLATE.format(n=number),
        )

    def append_set(self, record: SetRecord) -> "Exercise":
        return replace(self, sets=self.sets + (record,))

    def replace_last_set(self, record: SetRecord) -> "Exercise":
        """Swap the newest set; every earlier set is left untouched."""
        if not self.sets:
            return self
        return replace(self, sets=self.sets[:-1] + (record,))

    @property
    def last_set(self) -> Optional[SetRecord]:
        return self.sets[-1] if self.sets else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "sets": [record.to_dict() for record in self.sets],
        }


@dataclass(frozen=True)
class ActiveInterval:
    """The open timing interval of the current phase."""

    set_start: Optional[int] = None
    rest_start: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return self.set_start is None and self.rest_start is None


@dataclass(frozen=True)
class Session:
    """Aggregate root: one workout from start to finish."""

    start_time: Optional[int] = None
    exercise_start_time: Optional[int] = None
    end_time: Optional[int] = None
    phase: Phase = Phase.READY
    current_exercise_index: int = 0
    exercises: Tuple[Exercise, ...] = field(default_factory=lambda: (Exercise.numbered(1),))
    active: ActiveInterval = field(default_factory=ActiveInterval)

    @property
    def started(self) -> bool:
        return self.start_time is not None

    @property
    def ended(self) -> bool:
        return self.end_time is not None

    @property
    def running(self) -> bool:
        return self.started and not self.ended

    @property
    def current_exercise(self) -> Exercise:
        return self.exercises[self.current_exercise_index]

    def with_current_exercise(self, exercise: Exercise) -> "Session":
        """Return a copy with the current exercise swapped for ``exercise``."""
        exercises = list(self.exercises)
        exercises[self.current_exercise_index] = exercise
        return replace(self, exercises=tuple(exercises))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start_time": self.start_time,
            "exercise_start_time": self.exercise_start_time,
            "end_time": self.end_time,
            "phase": self.phase.value,
            "current_exercise_index": self.current_exercise_index,
            "exercises": [exercise.to_dict() for exercise in self.exercises],
            "active": {
                "set_start": self.active.set_start,
                "rest_start": self.active.rest_start,
            },
        }
