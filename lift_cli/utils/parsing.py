"""Parsing helpers for scripted session replays."""

from __future__ import annotations

import json
import math
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Union

import yaml

from lift_cli.core.constants import REPLAY_ACTIONS


class ScriptError(ValueError):
    """Raised when a replay script is malformed."""


class ReplayEvent(NamedTuple):
    at_ms: int
    action: str


class ReplayScript(NamedTuple):
    started_at_ms: int
    events: List[ReplayEvent]


def parse_offset(value: Union[str, int, float]) -> int:
    """Parse an event offset into milliseconds.

    Integers are milliseconds; strings accept ``M:SS``, ``H:MM:SS`` or a
    number with an ``ms``/``s``/``m`` suffix.
    """
    if isinstance(value, bool):
        raise ScriptError(f"Invalid offset: {value!r}")
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise ScriptError(f"Offset must be finite: {value!r}")
        if value < 0:
            raise ScriptError(f"Offset must not be negative: {value!r}")
        return int(value)

    raw = str(value).strip().lower()
    try:
        if ":" in raw:
            parts = [int(part) for part in raw.split(":")]
            if len(parts) == 2:
                seconds = parts[0] * 60 + parts[1]
            elif len(parts) == 3:
                seconds = parts[0] * 3600 + parts[1] * 60 + parts[2]
            else:
                raise ScriptError(f"Invalid offset: {value!r}")
            result = seconds * 1000
        elif raw.endswith("ms"):
            result = int(float(raw[:-2]))
        elif raw.endswith("s"):
            result = int(float(raw[:-1]) * 1000)
        elif raw.endswith("m"):
            result = int(float(raw[:-1]) * 60000)
        else:
            result = int(float(raw))
    except (ValueError, OverflowError) as exc:
        raise ScriptError(f"Invalid offset: {value!r}") from exc

    if result < 0:
        raise ScriptError(f"Offset must not be negative: {value!r}")
    return result


def parse_started_at(value: Optional[Any]) -> int:
    """Parse the optional script start time into epoch milliseconds."""
    if value is None:
        return 0
    if isinstance(value, datetime):
        return int(value.timestamp() * 1000)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if not math.isfinite(value):
            raise ScriptError(f"Invalid started_at: {value!r}")
        return int(value)
    try:
        return int(datetime.fromisoformat(str(value)).timestamp() * 1000)
    except (ValueError, OverflowError) as exc:
        raise ScriptError(f"Invalid started_at: {value!r}") from exc


def build_script(raw_data: Any) -> ReplayScript:
    """Validate loaded script data and normalize it into a ReplayScript."""
    if isinstance(raw_data, list):
        raw_data = {"events": raw_data}
    if not isinstance(raw_data, dict):
        raise ScriptError("Replay script must be a mapping with an 'events' list")

    raw_events = raw_data.get("events")
    if not isinstance(raw_events, list) or not raw_events:
        raise ScriptError("Replay script needs a non-empty 'events' list")

    events: List[ReplayEvent] = []
    previous = 0
    for index, item in enumerate(raw_events, 1):
        if not isinstance(item, dict):
            raise ScriptError(f"Event {index} must be a mapping")
        action = str(item.get("action", "")).strip().replace("-", "_")
        if action not in REPLAY_ACTIONS:
            raise ScriptError(f"Event {index}: unknown action {item.get('action')!r}")
        if "at" not in item:
            raise ScriptError(f"Event {index}: missing 'at'")
        at_ms = parse_offset(item["at"])
        if at_ms < previous:
            raise ScriptError(f"Event {index}: offsets must not go backwards")
        previous = at_ms
        events.append(ReplayEvent(at_ms=at_ms, action=action))

    return ReplayScript(started_at_ms=parse_started_at(raw_data.get("started_at")), events=events)


def load_replay_script(file_path: Path) -> ReplayScript:
    """Load a replay script from JSON or YAML."""
    text = file_path.read_text()
    try:
        if file_path.suffix.lower() in {".yaml", ".yml"}:
            raw_data: Dict[str, Any] = yaml.safe_load(text)
        else:
            try:
                raw_data = json.loads(text)
            except json.JSONDecodeError:
                raw_data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ScriptError(f"Could not parse {file_path}: {exc}") from exc
    return build_script(raw_data)
