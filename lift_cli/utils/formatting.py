"""Formatting helpers used by exports and console output."""

from __future__ import annotations

from datetime import datetime
from typing import Optional


def format_clock(ms: Optional[float]) -> str:
    """Format milliseconds as M:SS with unbounded minutes."""
    total_seconds = max(0, int((ms or 0) // 1000))
    m, s = divmod(total_seconds, 60)
    return f"{m}:{s:02d}"


def format_timestamp(ms: Optional[int]) -> str:
    """Format epoch milliseconds as local YYYY-MM-DD HH:MM:SS."""
    if ms is None:
        return "N/A"
    return datetime.fromtimestamp(ms / 1000).strftime("%Y-%m-%d %H:%M:%S")


def format_percent_split(lift_pct: int, rest_pct: int) -> str:
    """Format the lifting/resting split line."""
    return f"{lift_pct}% lifting • {rest_pct}% resting"
