"""Static constants and labels for the lift timer."""

from __future__ import annotations

DEFAULT_TICK_MS = 250

EXERCISE_ID_TEMPLATE = "ex-{n}"
EXERCISE_NAME_TEMPLATE = "Exercise {n}"

PHASE_LABELS = {
    "READY": "Ready",
    "IN_SET": "Lifting",
    "IN_REST": "Resting",
}

PHASE_STYLES = {
    "READY": "bold white",
    "IN_SET": "bold green",
    "IN_REST": "bold red",
}

PRIMARY_ACTION_LABELS = {
    "READY": "Start Set",
    "IN_SET": "End Set → Start Rest",
    "IN_REST": "End Rest → Start Set",
}

# Inhibitor commands tried in order when no wake_lock.command is configured.
WAKE_LOCK_COMMANDS = {
    "darwin": [["caffeinate", "-d", "-i"]],
    "linux": [
        [
            "systemd-inhibit",
            "--what=idle:sleep",
            "--who=lift",
            "--why=Workout in progress",
            "sleep",
            "infinity",
        ],
    ],
}

REPLAY_ACTIONS = (
    "start",
    "start_set",
    "end_set_start_rest",
    "end_rest_start_set",
    "next_exercise",
    "finish",
    "reset",
)
