"""Shared command helpers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from lift_cli.core.config import resolve_export_formats, resolve_output_dir
from lift_cli.core.constants import PHASE_STYLES
from lift_cli.core.models import Session
from lift_cli.core.state import CLIState
from lift_cli.exporters.json_export import write_summary
from lift_cli.utils.formatting import format_percent_split


def get_state(ctx: typer.Context) -> CLIState:
    """Extract validated CLI state from Typer context."""
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=2)
    return state


def print_json_payload(state: CLIState, payload: Any) -> None:
    """Print JSON payload with plain-mode fallback for piping."""
    if state.plain_output:
        typer.echo(json.dumps(payload, separators=(",", ":")))
        return
    state.console.print_json(data=payload)


def live_lines(view: Dict[str, Any]) -> List[str]:
    """Plain-text rendering of the live view."""
    lines = [
        f"Exercise Time {view['exercise_clock']}    Workout Time {view['session_clock']}",
        f"Exercise {view['exercise_number']} — Set {view['set_count']}",
        f"{view['phase_label']}  {view['phase_clock']}",
    ]
    if view["primary_action"]:
        lines.append(f"[enter] {view['primary_action']}")
    if view["ended"]:
        lines.append("[r] New Workout   [q] Quit")
    elif view["started"]:
        lines.append("[n] Next Exercise   [f] Finish Workout   [q] Quit")
    else:
        lines.append("[f] Start Workout   [q] Quit")
    return lines


def render_live(view: Dict[str, Any]) -> Panel:
    """Rich panel for the running session screen."""
    header = Table.grid(expand=True)
    header.add_column(justify="left")
    header.add_column(justify="right")
    header.add_row("[dim]EXERCISE TIME[/dim]", "[dim]WORKOUT TIME[/dim]")
    header.add_row(
        Text(view["exercise_clock"], style="bold"),
        Text(view["session_clock"], style="bold"),
    )

    style = PHASE_STYLES.get(view["phase"], "bold")
    body = Group(
        header,
        Text(""),
        Text(f"EXERCISE {view['exercise_number']} — SET {view['set_count']}", style="dim"),
        Text(view["phase_label"].upper(), style=style, justify="center"),
        Text(view["phase_clock"], style=style, justify="center"),
        Text(""),
        Text("\n".join(live_lines(view)[3:]), style="dim"),
    )
    return Panel(body, title=view["exercise_name"], border_style=style)


def render_summary(report: Dict[str, Any]) -> Group:
    """Rich tables for a finished session summary."""
    totals = report["totals"]
    overview = Table(title="Summary", show_header=False)
    overview.add_column("Metric")
    overview.add_column("Value", justify="right")
    overview.add_row("Total time in gym", totals["gym"])
    overview.add_row("[green]Total lifting[/green]", f"[green]{totals['lift']}[/green]")
    overview.add_row("[red]Total resting[/red]", f"[red]{totals['rest']}[/red]")
    overview.add_row("Split", format_percent_split(totals["lift_pct"], totals["rest_pct"]))

    tables: List[Any] = [overview]
    for exercise in report["exercises"]:
        table = Table(title=f"{exercise['name']} ({exercise['set_count']} sets, {exercise['total']})")
        table.add_column("Set")
        table.add_column("Lifting", justify="right", style="green")
        table.add_column("Resting", justify="right", style="red")
        for row in exercise["sets"]:
            table.add_row(f"Set {row['set']}", row["lift"], row["rest"])
        table.add_section()
        table.add_row("Total", exercise["lift"], exercise["rest"])
        tables.append(table)
    return Group(*tables)


def summary_lines(report: Dict[str, Any]) -> List[str]:
    """Plain-text rendering of a session summary."""
    totals = report["totals"]
    lines = [
        f"gym\t{totals['gym']}",
        f"lifting\t{totals['lift']}",
        f"resting\t{totals['rest']}",
        f"split\t{totals['lift_pct']}%\t{totals['rest_pct']}%",
    ]
    for exercise in report["exercises"]:
        lines.append(f"{exercise['name']}\t{exercise['set_count']} sets\t{exercise['lift']}\t{exercise['rest']}")
        for row in exercise["sets"]:
            lines.append(f"  set {row['set']}\t{row['lift']}\t{row['rest']}")
    return lines


def print_summary(state: CLIState, report: Dict[str, Any]) -> None:
    if state.json_output:
        print_json_payload(state, report)
        return
    if state.plain_output:
        for line in summary_lines(report):
            typer.echo(line)
        return
    state.console.print(render_summary(report))


def export_summary(
    state: CLIState,
    report: Dict[str, Any],
    session: Session,
    output_dir: Optional[Path],
) -> List[Path]:
    """Write summary exports into the resolved output directory."""
    out_dir = resolve_output_dir(state.config, explicit=output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    return write_summary(
        out_dir,
        report,
        session=session.to_dict(),
        formats=resolve_export_formats(state.config),
    )
