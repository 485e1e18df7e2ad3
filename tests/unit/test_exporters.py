from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

from lift_cli.core import session as sm
from lift_cli.core.stats import build_summary
from lift_cli.exporters.json_export import write_json, write_summary
from lift_cli.exporters.markdown import summary_to_markdown, write_summary_markdown

START_MS = int(datetime(2026, 2, 14, 9, 0).timestamp() * 1000)


def _report() -> Dict[str, Any]:
    state = sm.start(sm.new_session(), START_MS)
    state = sm.start_set(state, START_MS)
    state = sm.end_set_start_rest(state, START_MS + 10_000)
    state = sm.end_rest_start_set(state, START_MS + 40_000)
    state = sm.next_exercise(state, START_MS + 50_000, name="Bench Press")
    state = sm.finish(state, START_MS + 65_000)
    return build_summary(state, START_MS + 65_000)


def test_summary_to_markdown_has_frontmatter_and_sections() -> None:
    text = summary_to_markdown(_report())
    assert text.startswith("---\n")
    assert 'started: "2026-02-14 09:00:00"' in text
    assert 'gym: "1:05"' in text
    assert "exercises: 2" in text
    assert "- **Total lifting:** 0:20" in text
    assert "- **Split:** 40% lifting • 60% resting" in text
    assert "### Exercise 1" in text
    assert "| 2 | 0:10 | 0:00 |" in text
    assert "### Bench Press" in text


def test_summary_to_markdown_skips_set_table_for_empty_exercise() -> None:
    text = summary_to_markdown(_report())
    bench = text.split("### Bench Press", 1)[1]
    assert "| Set |" not in bench
    assert "- **Sets:** 0" in bench


def test_write_summary_markdown(tmp_path: Path) -> None:
    path = write_summary_markdown(tmp_path / "out" / "summary.md", _report())
    assert path.exists()
    assert "# Summary" in path.read_text()


def test_write_json(tmp_path: Path) -> None:
    path = write_json(tmp_path / "nested" / "payload.json", {"a": 1})
    assert json.loads(path.read_text()) == {"a": 1}


def test_write_summary_writes_each_format(tmp_path: Path) -> None:
    report = _report()
    paths = write_summary(tmp_path, report, session={"phase": "READY"})
    names = sorted(path.name for path in paths)
    assert names == ["session-20260214-090000.json", "session-20260214-090000.md"]

    payload = json.loads((tmp_path / "session-20260214-090000.json").read_text())
    assert payload["summary"]["totals"]["lift_ms"] == 20_000
    assert payload["session"] == {"phase": "READY"}


def test_write_summary_single_format(tmp_path: Path) -> None:
    paths = write_summary(tmp_path, _report(), formats=["markdown"])
    assert [path.suffix for path in paths] == [".md"]


def test_write_summary_keeps_earlier_export_with_same_start(tmp_path: Path) -> None:
    first = write_summary(tmp_path, _report())
    second = write_summary(tmp_path, _report(), formats=["json"])

    assert [path.name for path in second] == ["session-20260214-090000-2.json"]
    assert all(path.exists() for path in first)
    assert len(list(tmp_path.iterdir())) == 3
