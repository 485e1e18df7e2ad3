"""Runtime state container for CLI context."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console

from lift_cli.core.clock import Clock
from lift_cli.core.session import SessionController, exercise_namer
from lift_cli.core.wakelock import NullWakeLock, wake_lock_from_config


@dataclass
class CLIState:
    """CLI runtime options and loaded configuration."""

    json_output: bool
    plain_output: bool
    verbose: bool
    quiet: bool
    config_path: Path
    config: Dict[str, Any]
    console: Console

    def build_controller(self, clock: Optional[Clock] = None, wake_lock: bool = True) -> SessionController:
        """Create a session controller configured from the loaded config."""
        exercises_cfg = self.config.get("exercises", {})
        namer = exercise_namer(
            exercises_cfg.get("plan", []),
            template=exercises_cfg.get("name_template", "Exercise {n}"),
        )
        lock = wake_lock_from_config(self.config) if wake_lock else NullWakeLock()
        return SessionController(clock=clock, wake_lock=lock, namer=namer)
