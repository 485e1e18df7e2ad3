from __future__ import annotations

import dataclasses

import pytest

from lift_cli.core.models import Exercise, Phase, Session, SetRecord


def test_set_record_durations() -> None:
    record = SetRecord(set_start=1_000, set_end=4_000, rest_start=4_000, rest_end=10_000)
    assert record.lift_ms == 3_000
    assert record.rest_ms == 6_000
    assert not record.has_open_rest


def test_set_record_open_rest() -> None:
    record = SetRecord(set_start=0, set_end=10, rest_start=10)
    assert record.has_open_rest
    assert record.rest_ms == 0


def test_exercise_append_and_replace_last() -> None:
    exercise = Exercise.numbered(2)
    assert exercise.id == "ex-2"
    assert exercise.name == "Exercise 2"
    assert exercise.replace_last_set(SetRecord()) is exercise

    first = SetRecord(0, 1, 1, None)
    second = SetRecord(2, 3, 3, None)
    exercise = exercise.append_set(first).append_set(second)
    patched = exercise.replace_last_set(SetRecord(2, 3, 3, 9))
    assert patched.sets[0] is first
    assert patched.sets[1].rest_end == 9
    assert exercise.sets[1].rest_end is None


def test_session_is_immutable() -> None:
    session = Session()
    with pytest.raises(dataclasses.FrozenInstanceError):
        session.phase = Phase.IN_SET  # type: ignore[misc]


def test_session_to_dict_is_json_friendly() -> None:
    payload = Session(start_time=5).to_dict()
    assert payload["phase"] == "READY"
    assert payload["start_time"] == 5
    assert payload["exercises"] == [{"id": "ex-1", "name": "Exercise 1", "sets": []}]
    assert payload["active"] == {"set_start": None, "rest_start": None}
