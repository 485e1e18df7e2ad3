"""JSON export helpers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from lift_cli.exporters.markdown import write_summary_markdown
from lift_cli.utils.text import available_stem, session_stem


def write_json(path: Path, payload: Any) -> Path:
    """Write payload as pretty JSON and return path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2) + "\n")
    return path


def write_summary(
    output_dir: Path,
    report: Dict[str, Any],
    session: Optional[Dict[str, Any]] = None,
    formats: Sequence[str] = ("json", "markdown"),
) -> List[Path]:
    """Write a finished session summary in each requested format."""
    stem = available_stem(output_dir, session_stem(report.get("start_time")), (".json", ".md"))
    written: List[Path] = []
    if "json" in formats:
        payload: Dict[str, Any] = {"summary": report}
        if session is not None:
            payload["session"] = session
        written.append(write_json(output_dir / f"{stem}.json", payload))
    if "markdown" in formats:
        written.append(write_summary_markdown(output_dir / f"{stem}.md", report))
    return written
