from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import pytest
import typer
from rich.console import Console

from lift_cli.commands.common import export_summary, get_state, print_json_payload, render_summary
from lift_cli.core.clock import ManualClock
from lift_cli.core.config import default_config
from lift_cli.core.state import CLIState
from lift_cli.core.stats import build_summary
from lift_cli.core.wakelock import CommandWakeLock, NullWakeLock


@dataclass
class FakeContext:
    obj: Any


def _state(config: Dict[str, Any] | None = None, plain: bool = True) -> CLIState:
    return CLIState(
        json_output=False,
        plain_output=plain,
        verbose=False,
        quiet=False,
        config_path=Path("/tmp/config.toml"),
        config=config or default_config(),
        console=Console(record=True, width=100),
    )


def _finished(state: CLIState):
    clock = ManualClock(1_000)
    controller = state.build_controller(clock=clock, wake_lock=False)
    controller.start()
    controller.start_set()
    clock.advance(5_000)
    controller.end_set_start_rest()
    clock.advance(10_000)
    controller.finish()
    return controller.session, build_summary(controller.session, clock.now_ms())


def test_get_state_returns_cli_state() -> None:
    state = _state()
    assert get_state(FakeContext(obj=state)) is state


def test_get_state_raises_on_invalid_obj() -> None:
    with pytest.raises(typer.Exit):
        get_state(FakeContext(obj={"not": "state"}))


def test_print_json_payload_plain_is_compact(capsys) -> None:
    print_json_payload(_state(), {"a": 1, "b": [1, 2]})
    assert capsys.readouterr().out.strip() == '{"a":1,"b":[1,2]}'


def test_build_controller_uses_exercise_plan() -> None:
    config = default_config()
    config["exercises"]["plan"] = ["Deadlift"]
    config["exercises"]["name_template"] = "Lift #{n}"
    controller = _state(config).build_controller(clock=ManualClock(0), wake_lock=False)

    assert controller.session.exercises[0].name == "Deadlift"
    controller.start()
    controller.next_exercise()
    assert controller.session.current_exercise.name == "Lift #2"
    assert isinstance(controller.wake_lock, NullWakeLock)


def test_build_controller_wake_lock_from_config() -> None:
    config = default_config()
    config["wake_lock"]["command"] = ["sleep", "60"]
    controller = _state(config).build_controller(clock=ManualClock(0))
    assert isinstance(controller.wake_lock, CommandWakeLock)

    config["wake_lock"]["enabled"] = False
    controller = _state(config).build_controller(clock=ManualClock(0))
    assert isinstance(controller.wake_lock, NullWakeLock)


def test_export_summary_respects_configured_formats(tmp_path: Path) -> None:
    config = default_config()
    config["export"]["formats"] = ["json"]
    state = _state(config)
    session, report = _finished(state)

    paths = export_summary(state, report, session, tmp_path / "out")

    assert [path.suffix for path in paths] == [".json"]
    payload = json.loads(paths[0].read_text())
    assert payload["summary"]["totals"]["gym_ms"] == 15_000
    assert payload["session"]["end_time"] == 16_000


def test_export_summary_env_output_dir(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("LIFT_OUTPUT_DIR", str(tmp_path / "env"))
    state = _state()
    session, report = _finished(state)

    paths = export_summary(state, report, session, None)

    assert {path.parent for path in paths} == {(tmp_path / "env").resolve()}


def test_render_summary_lists_totals_and_sets() -> None:
    state = _state(plain=False)
    _, report = _finished(state)

    state.console.print(render_summary(report))
    text = state.console.export_text()

    assert "Total time in gym" in text
    assert "0:15" in text
    assert "Set 1" in text
    assert "33% lifting • 67% resting" in text
