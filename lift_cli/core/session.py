"""Session state machine.

Every transition is a pure function ``(session, now) -> session``. When a
precondition does not hold the same snapshot is returned untouched, so callers
can detect a no-op with ``is``.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional, Sequence

from lift_cli.core.clock import Clock, SystemClock
from lift_cli.core.constants import EXERCISE_NAME_TEMPLATE
from lift_cli.core.models import ActiveInterval, Exercise, Phase, Session, SetRecord
from lift_cli.core.wakelock import NullWakeLock, WakeLock

logger = logging.getLogger(__name__)

IDLE = ActiveInterval()


def new_session() -> Session:
    """Fresh, not-yet-started session with one empty exercise."""
    return Session()


def start(session: Session, now: int) -> Session:
    if session.started:
        return session
    return replace(
        session,
        start_time=now,
        exercise_start_time=None,
        end_time=None,
        phase=Phase.READY,
        active=IDLE,
    )


def start_set(session: Session, now: int) -> Session:
    if not session.running or session.phase != Phase.READY:
        return session
    exercise_start = session.exercise_start_time
    if exercise_start is None:
        exercise_start = now
    return replace(
        session,
        phase=Phase.IN_SET,
        exercise_start_time=exercise_start,
        active=ActiveInterval(set_start=now),
    )


def end_set_start_rest(session: Session, now: int) -> Session:
    if not session.running or session.phase != Phase.IN_SET:
        return session
    record = SetRecord(
        set_start=session.active.set_start,
        set_end=now,
        rest_start=now,
    )
    updated = session.with_current_exercise(session.current_exercise.append_set(record))
    return replace(updated, phase=Phase.IN_REST, active=ActiveInterval(rest_start=now))


def end_rest_start_set(session: Session, now: int) -> Session:
    if not session.running or session.phase != Phase.IN_REST:
        return session
    exercise = session.current_exercise
    last = exercise.last_set
    if last is None:
        return session
    updated = session.with_current_exercise(exercise.replace_last_set(replace(last, rest_end=now)))
    return replace(updated, phase=Phase.IN_SET, active=ActiveInterval(set_start=now))


def _close_open_interval(session: Session, now: int, zero_rest: bool) -> Session:
    """Finalize the open lift or rest interval of the current exercise.

    A lift in progress becomes a new record; with ``zero_rest`` it also gets a
    zero-length rest so finished sessions never hold a set without one.
    """
    exercise = session.current_exercise

    if session.phase == Phase.IN_SET:
        set_start = session.active.set_start
        record = SetRecord(
            set_start=set_start if set_start is not None else now,
            set_end=now,
            rest_start=now if zero_rest else None,
            rest_end=now if zero_rest else None,
        )
        session = session.with_current_exercise(exercise.append_set(record))
    elif session.phase == Phase.IN_REST:
        last = exercise.last_set
        if last is not None and last.has_open_rest:
            session = session.with_current_exercise(
                exercise.replace_last_set(replace(last, rest_end=now))
            )

    return replace(session, phase=Phase.READY, active=IDLE)


def next_exercise(session: Session, now: int, name: Optional[str] = None) -> Session:
    if not session.running:
        return session
    closed = _close_open_interval(session, now, zero_rest=False)
    added = Exercise.numbered(len(closed.exercises) + 1, name=name)
    return replace(
        closed,
        exercises=closed.exercises + (added,),
        current_exercise_index=len(closed.exercises),
        exercise_start_time=None,
    )


def finish(session: Session, now: int) -> Session:
    if not session.running:
        return session
    closed = _close_open_interval(session, now, zero_rest=True)
    return replace(closed, end_time=now)


def reset(session: Session, now: int) -> Session:
    del session, now
    return new_session()


TRANSITIONS: Dict[str, Callable[[Session, int], Session]] = {
    "start": start,
    "start_set": start_set,
    "end_set_start_rest": end_set_start_rest,
    "end_rest_start_set": end_rest_start_set,
    "next_exercise": next_exercise,
    "finish": finish,
    "reset": reset,
}


def exercise_namer(plan: Sequence[str], template: str = EXERCISE_NAME_TEMPLATE) -> Callable[[int], str]:
    """Return ``number -> name`` using the planned names first, then ``template``."""
    names: List[str] = [str(name) for name in plan if name]

    def _name(number: int) -> str:
        if 0 < number <= len(names):
            return names[number - 1]
        return template.format(n=number)

    return _name


class SessionController:
    """Holds the current snapshot and wires transitions to the clock and wake lock."""

    def __init__(
        self,
        clock: Optional[Clock] = None,
        wake_lock: Optional[WakeLock] = None,
        namer: Optional[Callable[[int], str]] = None,
    ) -> None:
        self.clock = clock or SystemClock()
        self.wake_lock = wake_lock or NullWakeLock()
        self.namer = namer or exercise_namer([])
        self.session = self._fresh()

    def _fresh(self) -> Session:
        first = Exercise.numbered(1, name=self.namer(1))
        return replace(new_session(), exercises=(first,))

    def now(self) -> int:
        return self.clock.now_ms()

    def _apply(self, action: str, updated: Session) -> Session:
        if updated is self.session:
            logger.debug("Ignored %s in phase %s", action, self.session.phase.value)
            return updated
        logger.debug("%s: %s -> %s", action, self.session.phase.value, updated.phase.value)
        self.session = updated
        return updated

    def _acquire_wake_lock(self) -> None:
        try:
            self.wake_lock.acquire()
        except Exception as exc:
            logger.debug("Wake lock acquire failed: %s", exc)

    def _release_wake_lock(self) -> None:
        try:
            self.wake_lock.release()
        except Exception as exc:
            logger.debug("Wake lock release failed: %s", exc)

    def start(self) -> Session:
        before = self.session
        result = self._apply("start", start(before, self.now()))
        if result is not before:
            self._acquire_wake_lock()
        return result

    def start_set(self) -> Session:
        return self._apply("start_set", start_set(self.session, self.now()))

    def end_set_start_rest(self) -> Session:
        return self._apply("end_set_start_rest", end_set_start_rest(self.session, self.now()))

    def end_rest_start_set(self) -> Session:
        return self._apply("end_rest_start_set", end_rest_start_set(self.session, self.now()))

    def next_exercise(self) -> Session:
        name = self.namer(len(self.session.exercises) + 1)
        return self._apply("next_exercise", next_exercise(self.session, self.now(), name=name))

    def finish(self) -> Session:
        before = self.session
        result = self._apply("finish", finish(before, self.now()))
        if result is not before:
            self._release_wake_lock()
        return result

    def reset(self) -> Session:
        self.session = self._fresh()
        logger.debug("reset: new session")
        self._release_wake_lock()
        return self.session

    def close(self) -> None:
        """Release anything held for the running session."""
        self._release_wake_lock()

    def primary(self) -> Session:
        """Run whichever phase action the current phase offers."""
        if not self.session.running:
            return self.session
        if self.session.phase == Phase.READY:
            return self.start_set()
        if self.session.phase == Phase.IN_SET:
            return self.end_set_start_rest()
        return self.end_rest_start_set()

    def dispatch(self, action: str) -> Session:
        """Invoke an operation by its name (see ``TRANSITIONS``)."""
        if action not in TRANSITIONS:
            raise ValueError(f"Unknown action: {action}")
        handler = getattr(self, action)
        return handler()

    def snapshot(self) -> Dict[str, Any]:
        return self.session.to_dict()
