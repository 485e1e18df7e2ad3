"""Scripted session replay command."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from lift_cli.commands.common import export_summary, get_state, print_json_payload, print_summary
from lift_cli.core.clock import ManualClock
from lift_cli.core.session import SessionController
from lift_cli.core.stats import build_summary
from lift_cli.exporters.markdown import summary_to_markdown
from lift_cli.utils.parsing import ReplayScript, ScriptError, load_replay_script

logger = logging.getLogger(__name__)


def replay_script(controller: SessionController, clock: ManualClock, script: ReplayScript) -> int:
    """Feed every scripted event through the controller; return the no-op count."""
    ignored = 0
    for event in script.events:
        clock.set(script.started_at_ms + event.at_ms)
        before = controller.session
        after = controller.dispatch(event.action)
        if after is before and event.action != "reset":
            ignored += 1
            logger.info("Event %s at +%dms had no effect", event.action, event.at_ms)
    return ignored


def replay_command(
    ctx: typer.Context,
    script_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Replay script (YAML or JSON)"),
    output_format: str = typer.Option("pretty", "--format", help="Output format: pretty|markdown|json"),
    output_dir: Optional[Path] = typer.Option(None, help="Also export the summary to this directory"),
) -> None:
    """Replay a timed list of session actions and print the summary."""
    state = get_state(ctx)
    if output_format not in {"pretty", "markdown", "json"}:
        raise typer.BadParameter("--format must be one of: pretty, markdown, json")

    try:
        script = load_replay_script(script_file)
    except ScriptError as exc:
        typer.echo(f"Replay error: {exc}")
        raise typer.Exit(code=1)

    clock = ManualClock(start_ms=script.started_at_ms)
    controller = state.build_controller(clock=clock, wake_lock=False)
    ignored = replay_script(controller, clock, script)
    report = build_summary(controller.session, clock.now_ms())

    if output_dir is not None:
        paths = export_summary(state, report, controller.session, output_dir)
        for path in paths:
            logger.info("Exported %s", path)

    if state.json_output or output_format == "json":
        payload: Dict[str, Any] = {
            "summary": report,
            "session": controller.session.to_dict(),
            "ignored_events": ignored,
        }
        print_json_payload(state, payload)
        return

    if output_format == "markdown":
        typer.echo(summary_to_markdown(report))
        return

    print_summary(state, report)
    if ignored and not state.quiet:
        state.console.print(f"{ignored} event(s) had no effect")
