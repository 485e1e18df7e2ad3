from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from lift_cli.utils.formatting import format_clock, format_percent_split, format_timestamp
from lift_cli.utils.text import available_stem, session_stem


@pytest.mark.parametrize(
    ("ms", "expected"),
    [
        (0, "0:00"),
        (999, "0:00"),
        (59_000, "0:59"),
        (60_000, "1:00"),
        (3_661_000, "61:01"),
        (-5_000, "0:00"),
        (None, "0:00"),
    ],
)
def test_format_clock(ms, expected: str) -> None:
    assert format_clock(ms) == expected


def test_format_timestamp() -> None:
    ms = int(datetime(2026, 2, 14, 9, 30, 5).timestamp() * 1000)
    assert format_timestamp(ms) == "2026-02-14 09:30:05"
    assert format_timestamp(None) == "N/A"


def test_format_percent_split() -> None:
    assert format_percent_split(40, 60) == "40% lifting • 60% resting"


def test_session_stem() -> None:
    ms = int(datetime(2026, 2, 14, 9, 30, 5).timestamp() * 1000)
    assert session_stem(ms) == "session-20260214-093005"
    assert session_stem(None) == "session-unstarted"


def test_available_stem_skips_taken_names(tmp_path: Path) -> None:
    assert available_stem(tmp_path, "session-x", [".json", ".md"]) == "session-x"
    (tmp_path / "session-x.md").write_text("")
    assert available_stem(tmp_path, "session-x", [".json", ".md"]) == "session-x-2"
    (tmp_path / "session-x-2.json").write_text("")
    assert available_stem(tmp_path, "session-x", [".json", ".md"]) == "session-x-3"
