"""Best-effort keep-awake handles used while a session runs."""

from __future__ import annotations

import logging
import subprocess
import sys
from typing import Any, Dict, List, Optional, Protocol, Sequence

from lift_cli.core.constants import WAKE_LOCK_COMMANDS

logger = logging.getLogger(__name__)


class WakeLock(Protocol):
    """Acquire/release pair; implementations must never raise."""

    def acquire(self) -> None:
        ...

    def release(self) -> None:
        ...


class NullWakeLock:
    """Wake lock that does nothing."""

    def acquire(self) -> None:
        return None

    def release(self) -> None:
        return None


def default_inhibit_commands(platform: Optional[str] = None) -> List[List[str]]:
    """Inhibitor commands to try on ``platform`` (defaults to the running one)."""
    key = platform or sys.platform
    if key.startswith("linux"):
        key = "linux"
    return [list(command) for command in WAKE_LOCK_COMMANDS.get(key, [])]


class CommandWakeLock:
    """Keep the machine awake by holding an inhibitor subprocess open."""

    def __init__(self, commands: Sequence[Sequence[str]]) -> None:
        self.commands = [list(command) for command in commands if command]
        self._process: Optional[subprocess.Popen] = None

    @property
    def held(self) -> bool:
        return self._process is not None and self._process.poll() is None

    def acquire(self) -> None:
        if self.held:
            return
        for command in self.commands:
            try:
                self._process = subprocess.Popen(
                    command,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                )
            except (OSError, ValueError) as exc:
                logger.debug("Wake lock command %s unavailable: %s", command[0], exc)
                continue
            logger.debug("Wake lock acquired via %s", command[0])
            return
        logger.debug("No wake lock command could be started")

    def release(self) -> None:
        process = self._process
        self._process = None
        if process is None:
            return
        try:
            process.terminate()
            process.wait(timeout=2)
        except subprocess.TimeoutExpired:
            process.kill()
            process.wait()
        except OSError as exc:
            logger.debug("Wake lock release failed: %s", exc)
        else:
            logger.debug("Wake lock released")


def wake_lock_from_config(config: Dict[str, Any], enabled: bool = True) -> WakeLock:
    """Build the wake lock described by the ``wake_lock`` config table."""
    wl_cfg = config.get("wake_lock", {})
    if not enabled or not wl_cfg.get("enabled", True):
        return NullWakeLock()

    command = wl_cfg.get("command") or []
    commands = [list(command)] if command else default_inhibit_commands()
    if not commands:
        return NullWakeLock()
    return CommandWakeLock(commands)
