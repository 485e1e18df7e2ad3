"""Interactive live session command."""

from __future__ import annotations

import logging
from contextlib import nullcontext
from pathlib import Path
from typing import Callable, Dict, Optional

import typer
from rich.live import Live

from lift_cli.commands.common import (
    export_summary,
    get_state,
    live_lines,
    print_summary,
    render_live,
)
from lift_cli.core.config import resolve_tick_seconds
from lift_cli.core.session import SessionController
from lift_cli.core.state import CLIState
from lift_cli.core.stats import build_summary, live_view
from lift_cli.utils.keys import KeySource, TerminalKeys

logger = logging.getLogger(__name__)

QUIT = "quit"

KEY_ACTIONS: Dict[str, str] = {
    "": "primary",
    " ": "primary",
    "s": "primary",
    "n": "next_exercise",
    "f": "start_or_finish",
    "r": "reset",
    "q": QUIT,
}


def handle_key(controller: SessionController, key: str) -> Optional[str]:
    """Apply the action bound to ``key`` and return its name."""
    action = KEY_ACTIONS.get(key)
    if action is None:
        logger.debug("Unbound key %r", key)
        return None
    if action == QUIT:
        return QUIT
    if action == "start_or_finish":
        if controller.session.started:
            controller.finish()
            return "finish"
        controller.start()
        return "start"
    if action == "primary":
        controller.primary()
        return action
    controller.dispatch(action)
    return action


def run_loop(
    controller: SessionController,
    keys: KeySource,
    tick_seconds: float,
    on_tick: Callable[[bool], None],
    on_finish: Callable[[], None],
) -> None:
    """Single-threaded event loop: wait for a key or a tick, then redisplay.

    Ticks never change the session; they only trigger a redraw against the
    current time. ``on_tick`` is told whether a key was handled.
    """
    while True:
        key = keys.read(tick_seconds)
        if key is None:
            on_tick(False)
            continue
        was_ended = controller.session.ended
        if handle_key(controller, key) == QUIT:
            break
        if controller.session.ended and not was_ended:
            on_finish()
        on_tick(True)


def _key_source() -> TerminalKeys:
    return TerminalKeys()


def _finish_session(state: CLIState, controller: SessionController, output_dir: Optional[Path], export: bool) -> None:
    report = build_summary(controller.session, controller.now())
    print_summary(state, report)
    if not export:
        return
    paths = export_summary(state, report, controller.session, output_dir)
    if not state.json_output:
        for path in paths:
            state.console.print(f"Exported to: {path}")


def run_command(
    ctx: typer.Context,
    output_dir: Optional[Path] = typer.Option(None, help="Directory for the finished session summary"),
    no_export: bool = typer.Option(False, help="Do not write the summary to disk"),
    no_wake_lock: bool = typer.Option(False, help="Do not keep the display awake"),
) -> None:
    """Run a live workout timer in the terminal."""
    state = get_state(ctx)
    controller = state.build_controller(wake_lock=not no_wake_lock)
    tick_seconds = resolve_tick_seconds(state.config)

    def _view():
        return live_view(controller.session, controller.now())

    live_ctx = (
        Live(render_live(_view()), console=state.console, auto_refresh=False, transient=True)
        if not state.plain_output and not state.json_output
        else nullcontext()
    )

    def _tick(changed: bool) -> None:
        if isinstance(live_ctx, Live):
            live_ctx.update(render_live(_view()), refresh=True)
        elif changed and state.plain_output:
            typer.echo("\n".join(live_lines(_view())))

    def _on_finish() -> None:
        if isinstance(live_ctx, Live):
            live_ctx.stop()
        _finish_session(state, controller, output_dir, export=not no_export)
        if isinstance(live_ctx, Live):
            live_ctx.start(refresh=True)

    if state.plain_output:
        typer.echo("\n".join(live_lines(_view())))

    try:
        with _key_source() as keys, live_ctx:
            run_loop(controller, keys, tick_seconds, on_tick=_tick, on_finish=_on_finish)
    except KeyboardInterrupt:
        logger.debug("Interrupted")
    finally:
        if controller.session.running:
            state.console.print("Session abandoned before finishing; nothing exported.")
        controller.close()
