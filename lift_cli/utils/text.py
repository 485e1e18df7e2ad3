"""Text helpers."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional


def session_stem(start_time_ms: Optional[int]) -> str:
    """Filesystem-safe file stem for a session export."""
    if start_time_ms is None:
        return "session-unstarted"
    stamp = datetime.fromtimestamp(start_time_ms / 1000).strftime("%Y%m%d-%H%M%S")
    return f"session-{stamp}"


def available_stem(directory: Path, stem: str, suffixes: Iterable[str]) -> str:
    """Return ``stem``, or ``stem-2``, ``stem-3``... so no ``stem+suffix`` file exists yet."""
    suffixes = list(suffixes)
    candidate = stem
    counter = 2
    while any((directory / f"{candidate}{suffix}").exists() for suffix in suffixes):
        candidate = f"{stem}-{counter}"
        counter += 1
    return candidate
