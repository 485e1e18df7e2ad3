from __future__ import annotations

import json
from collections import deque
from pathlib import Path
from typing import Any, Iterable, List, Optional

import pytest
from typer.testing import CliRunner

from lift_cli.core.clock import ManualClock
from lift_cli.core.session import SessionController


class RecordingWakeLock:
    def __init__(self, fail: bool = False) -> None:
        self.calls: List[str] = []
        self.fail = fail

    def acquire(self) -> None:
        self.calls.append("acquire")
        if self.fail:
            raise RuntimeError("no display")

    def release(self) -> None:
        self.calls.append("release")
        if self.fail:
            raise RuntimeError("no display")


class ScriptedKeys:
    """Key source fed from a fixed sequence; ``None`` entries are idle ticks."""

    def __init__(self, keys: Iterable[Optional[str]], clock: Optional[ManualClock] = None, step_ms: int = 0) -> None:
        self._keys = deque(keys)
        self.clock = clock
        self.step_ms = step_ms

    def __enter__(self) -> "ScriptedKeys":
        return self

    def __exit__(self, *exc: Any) -> None:
        return None

    def read(self, timeout: float) -> Optional[str]:
        if self.clock is not None:
            self.clock.advance(self.step_ms)
        if not self._keys:
            return "q"
        return self._keys.popleft()


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    path = tmp_path / "config" / "config.toml"
    monkeypatch.setenv("LIFT_CONFIG_FILE", str(path))
    monkeypatch.delenv("LIFT_OUTPUT_DIR", raising=False)
    return path


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock(start_ms=0)


@pytest.fixture()
def wake_lock() -> RecordingWakeLock:
    return RecordingWakeLock()


@pytest.fixture()
def controller(clock: ManualClock, wake_lock: RecordingWakeLock) -> SessionController:
    return SessionController(clock=clock, wake_lock=wake_lock)


@pytest.fixture()
def scripted_keys():
    return ScriptedKeys


@pytest.fixture()
def failing_wake_lock() -> RecordingWakeLock:
    return RecordingWakeLock(fail=True)


@pytest.fixture()
def basic_cycle_events() -> List[dict]:
    return [
        {"at": 0, "action": "start"},
        {"at": 0, "action": "start_set"},
        {"at": "10s", "action": "end_set_start_rest"},
        {"at": "40s", "action": "end_rest_start_set"},
        {"at": "50s", "action": "finish"},
    ]


@pytest.fixture()
def write_temp_json(tmp_path: Path):
    def _write(name: str, payload: Any) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(payload, indent=2) + "\n")
        return path

    return _write


@pytest.fixture()
def write_temp_text(tmp_path: Path):
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content.strip() + "\n")
        return path

    return _write
