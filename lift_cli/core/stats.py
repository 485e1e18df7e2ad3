"""Derived statistics for a session snapshot.

Nothing here is cached on the session: every value is recomputed from the
timestamp log, with ``now`` passed in for anything still running.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, NamedTuple, Optional

from lift_cli.core.constants import PHASE_LABELS, PRIMARY_ACTION_LABELS
from lift_cli.core.models import Exercise, Phase, Session, SetRecord
from lift_cli.utils.formatting import format_clock


class Totals(NamedTuple):
    lift_ms: int
    rest_ms: int

    @property
    def total_ms(self) -> int:
        return self.lift_ms + self.rest_ms


def _sum_records(records: Iterable[SetRecord]) -> Totals:
    lift_ms = 0
    rest_ms = 0
    for record in records:
        lift_ms += record.lift_ms
        rest_ms += record.rest_ms
    return Totals(lift_ms, rest_ms)


def _all_records(session: Session) -> Iterable[SetRecord]:
    for exercise in session.exercises:
        yield from exercise.sets


def total_lift_ms(session: Session) -> int:
    return _sum_records(_all_records(session)).lift_ms


def total_rest_ms(session: Session) -> int:
    return _sum_records(_all_records(session)).rest_ms


def total_gym_ms(session: Session, now: int) -> int:
    """Time since the session started, frozen at ``end_time`` once finished."""
    if session.start_time is None:
        return 0
    end = session.end_time if session.end_time is not None else now
    return end - session.start_time


def exercise_totals(exercise: Exercise) -> Totals:
    return _sum_records(exercise.sets)


def percent_of(part: float, whole: float) -> int:
    """Whole-number percentage; 0 when ``whole`` is not positive."""
    if not whole or whole <= 0:
        return 0
    return int(math.floor(part / whole * 100 + 0.5))


def set_count(session: Session) -> int:
    """Sets logged so far in the current exercise."""
    return len(session.current_exercise.sets)


def phase_elapsed_ms(session: Session, now: int) -> int:
    if session.ended:
        return 0
    if session.phase == Phase.IN_SET and session.active.set_start is not None:
        return now - session.active.set_start
    if session.phase == Phase.IN_REST and session.active.rest_start is not None:
        return now - session.active.rest_start
    return 0


def exercise_elapsed_ms(session: Session, now: int) -> int:
    if session.exercise_start_time is None:
        return 0
    end = session.end_time if session.end_time is not None else now
    return end - session.exercise_start_time


def session_elapsed_ms(session: Session, now: int) -> int:
    return total_gym_ms(session, now)


def phase_label(phase: Phase) -> str:
    return PHASE_LABELS[phase.value]


def primary_action(session: Session) -> Optional[str]:
    """Label of the one phase action available, or None when not running."""
    if not session.running:
        return None
    return PRIMARY_ACTION_LABELS[session.phase.value]


def live_view(session: Session, now: int) -> Dict[str, Any]:
    """Values a display refreshes on every tick."""
    phase_ms = phase_elapsed_ms(session, now)
    return {
        "phase": session.phase.value,
        "phase_label": phase_label(session.phase),
        "exercise_number": session.current_exercise_index + 1,
        "exercise_name": session.current_exercise.name,
        "set_count": set_count(session),
        "phase_elapsed_ms": phase_ms,
        "exercise_elapsed_ms": exercise_elapsed_ms(session, now),
        "session_elapsed_ms": session_elapsed_ms(session, now),
        "phase_clock": "0:00" if session.phase == Phase.READY else format_clock(phase_ms),
        "exercise_clock": format_clock(exercise_elapsed_ms(session, now)),
        "session_clock": format_clock(session_elapsed_ms(session, now)),
        "primary_action": primary_action(session),
        "started": session.started,
        "ended": session.ended,
    }


def _exercise_summary(exercise: Exercise) -> Dict[str, Any]:
    totals = exercise_totals(exercise)
    sets: List[Dict[str, Any]] = []
    for index, record in enumerate(exercise.sets, 1):
        sets.append(
            {
                "set": index,
                "lift_ms": record.lift_ms,
                "rest_ms": record.rest_ms,
                "lift": format_clock(record.lift_ms),
                "rest": format_clock(record.rest_ms),
            }
        )
    return {
        "id": exercise.id,
        "name": exercise.name,
        "set_count": len(exercise.sets),
        "lift_ms": totals.lift_ms,
        "rest_ms": totals.rest_ms,
        "total_ms": totals.total_ms,
        "lift": format_clock(totals.lift_ms),
        "rest": format_clock(totals.rest_ms),
        "total": format_clock(totals.total_ms),
        "sets": sets,
    }


def build_summary(session: Session, now: int) -> Dict[str, Any]:
    """Aggregate a session into the summary report payload."""
    totals = _sum_records(_all_records(session))
    gym_ms = total_gym_ms(session, now)
    lift_pct = percent_of(totals.lift_ms, totals.total_ms)
    rest_pct = max(0, min(100, 100 - lift_pct))

    return {
        "start_time": session.start_time,
        "end_time": session.end_time,
        "finished": session.ended,
        "totals": {
            "gym_ms": gym_ms,
            "lift_ms": totals.lift_ms,
            "rest_ms": totals.rest_ms,
            "gym": format_clock(gym_ms),
            "lift": format_clock(totals.lift_ms),
            "rest": format_clock(totals.rest_ms),
            "lift_pct": lift_pct,
            "rest_pct": rest_pct,
        },
        "exercises": [_exercise_summary(exercise) for exercise in session.exercises],
    }
