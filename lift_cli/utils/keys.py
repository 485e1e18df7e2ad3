"""Keyboard input for the interactive timer."""

from __future__ import annotations

import os
import select
import sys
import termios
import tty
from types import TracebackType
from typing import Optional, Protocol, TextIO, Type


class KeySource(Protocol):
    def read(self, timeout: float) -> Optional[str]:
        """Return one key, "" for Enter, or None when ``timeout`` passes."""
        ...


class TerminalKeys:
    """Single-key reads from a terminal in cbreak mode; line reads otherwise."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream or sys.stdin
        self._saved = None
        self.closed = False

    @property
    def is_tty(self) -> bool:
        return self.stream.isatty()

    def __enter__(self) -> "TerminalKeys":
        if self.is_tty:
            fd = self.stream.fileno()
            self._saved = termios.tcgetattr(fd)
            tty.setcbreak(fd)
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        if self._saved is not None:
            termios.tcsetattr(self.stream.fileno(), termios.TCSADRAIN, self._saved)
            self._saved = None

    def read(self, timeout: float) -> Optional[str]:
        if self.closed:
            return "q"
        ready, _, _ = select.select([self.stream], [], [], timeout)
        if not ready:
            return None

        if self.is_tty:
            char = os.read(self.stream.fileno(), 1).decode(errors="ignore")
            if not char:
                self.closed = True
                return "q"
            return "" if char in {"\n", "\r"} else char.lower()

        line = self.stream.readline()
        if not line:
            self.closed = True
            return "q"
        return line.strip().lower()[:1]
