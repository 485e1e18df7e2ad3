"""Markdown session summary export."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

from lift_cli.utils.formatting import format_percent_split, format_timestamp


def _exercise_section(exercise: Dict[str, Any]) -> List[str]:
    lines = [
        f"### {exercise['name']}",
        "",
        f"- **Sets:** {exercise['set_count']}",
        f"- **Total:** {exercise['total']}",
        f"- **Lifting total:** {exercise['lift']}",
        f"- **Resting total:** {exercise['rest']}",
    ]
    if exercise["sets"]:
        lines.extend(["", "| Set | Lifting | Resting |", "|-----|---------|---------|"])
        for row in exercise["sets"]:
            lines.append(f"| {row['set']} | {row['lift']} | {row['rest']} |")
    lines.append("")
    return lines


def summary_to_markdown(report: Dict[str, Any]) -> str:
    """Convert a session summary report to markdown with frontmatter."""
    totals = report["totals"]
    exercises = report.get("exercises", [])
    started = format_timestamp(report.get("start_time"))
    ended = format_timestamp(report.get("end_time"))

    lines = [
        "---",
        f"started: \"{started}\"",
        f"ended: \"{ended}\"",
        f"gym: \"{totals['gym']}\"",
        f"lifting: \"{totals['lift']}\"",
        f"resting: \"{totals['rest']}\"",
        f"exercises: {len(exercises)}",
        "---",
        "",
        "# Summary",
        "",
        f"- **Total time in gym:** {totals['gym']}",
        f"- **Total lifting:** {totals['lift']}",
        f"- **Total resting:** {totals['rest']}",
        f"- **Split:** {format_percent_split(totals['lift_pct'], totals['rest_pct'])}",
        "",
        "## Exercises",
        "",
    ]
    for exercise in exercises:
        lines.extend(_exercise_section(exercise))
    return "\n".join(lines)


def write_summary_markdown(path: Path, report: Dict[str, Any]) -> Path:
    """Write summary markdown and return path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(summary_to_markdown(report))
    return path
