"""Configuration loading and persistence."""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # Python 3.9-3.10
    import tomli as tomllib  # type: ignore[no-redef]

from lift_cli.core.constants import DEFAULT_TICK_MS, EXERCISE_NAME_TEMPLATE


class ConfigError(RuntimeError):
    """Raised when config file parsing fails."""


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def expand_path(path_str: str) -> Path:
    """Expand user/env vars and return absolute path."""
    return Path(os.path.expandvars(path_str)).expanduser().resolve()


def default_config_path() -> Path:
    """Get default config file path."""
    raw = os.getenv("LIFT_CONFIG_FILE", "~/.config/lift/config.toml")
    return expand_path(raw)


def default_config() -> Dict[str, Any]:
    """Built-in configuration defaults."""
    return {
        "timer": {
            "tick_ms": DEFAULT_TICK_MS,
        },
        "wake_lock": {
            "enabled": True,
            "command": [],
        },
        "exercises": {
            "plan": [],
            "name_template": EXERCISE_NAME_TEMPLATE,
        },
        "export": {
            "default_directory": "./sessions",
            "formats": ["json", "markdown"],
        },
    }


def _read_config(path: Path) -> Dict[str, Any]:
    suffix = path.suffix.lower()
    text = path.read_text()
    try:
        if suffix in {".toml", ""}:
            loaded = tomllib.loads(text)
        else:
            loaded = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in config file {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in config file {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file {path} must contain an object/table at the root")
    return loaded


def _validate(cfg: Dict[str, Any]) -> None:
    for section in default_config():
        if not isinstance(cfg.get(section), dict):
            raise ConfigError(f"[{section}] must be a table, got {cfg.get(section)!r}")

    tick = cfg["timer"].get("tick_ms")
    if isinstance(tick, bool) or not isinstance(tick, int) or tick <= 0:
        raise ConfigError(f"timer.tick_ms must be a positive integer, got {tick!r}")

    template = cfg["exercises"].get("name_template")
    if not isinstance(template, str) or "{n}" not in template:
        raise ConfigError("exercises.name_template must be a string containing {n}")
    try:
        template.format(n=1)
    except (KeyError, IndexError, ValueError) as exc:
        raise ConfigError(f"exercises.name_template {template!r} is not a valid template: {exc!r}") from exc

    plan = cfg["exercises"].get("plan")
    if not isinstance(plan, list):
        raise ConfigError("exercises.plan must be a list of names")

    command = cfg["wake_lock"].get("command")
    if not isinstance(command, list) or not all(isinstance(part, str) for part in command):
        raise ConfigError("wake_lock.command must be a list of strings")

    formats = cfg["export"].get("formats")
    if not isinstance(formats, list) or not all(isinstance(fmt, str) for fmt in formats):
        raise ConfigError("export.formats must be a list of strings")
    unknown = sorted(set(formats) - {"json", "markdown"})
    if unknown:
        raise ConfigError(f"export.formats has unknown entries: {', '.join(unknown)}")


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from disk, merged with defaults."""
    cfg_path = path or default_config_path()
    cfg = default_config()

    if cfg_path.exists():
        loaded = _read_config(cfg_path)
        cfg = _deep_merge(cfg, loaded)

    _validate(cfg)
    return cfg


def _toml_literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    if isinstance(value, list):
        items = ", ".join(_toml_literal(item) for item in value if item is not None)
        return f"[{items}]"
    raise TypeError(f"Unsupported TOML value type: {type(value)!r}")


def _dict_to_toml(data: Dict[str, Any], prefix: Optional[str] = None) -> str:
    lines = []
    plain_keys = []
    nested_keys = []

    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, dict):
            nested_keys.append((key, value))
        else:
            plain_keys.append((key, value))

    if prefix is not None:
        lines.append(f"[{prefix}]")

    for key, value in plain_keys:
        lines.append(f"{key} = {_toml_literal(value)}")

    if plain_keys and nested_keys:
        lines.append("")

    for index, (key, value) in enumerate(nested_keys):
        table_name = key if prefix is None else f"{prefix}.{key}"
        lines.append(_dict_to_toml(value, prefix=table_name))
        if index != len(nested_keys) - 1:
            lines.append("")

    return "\n".join(lines)


def save_config(config: Dict[str, Any], path: Optional[Path] = None) -> Path:
    """Save configuration to disk as TOML (default) or JSON."""
    cfg_path = path or default_config_path()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)

    if cfg_path.suffix.lower() == ".json":
        cfg_path.write_text(json.dumps(config, indent=2) + "\n")
        return cfg_path

    cfg_path.write_text(_dict_to_toml(config).strip() + "\n")
    return cfg_path


def resolve_output_dir(config: Dict[str, Any], explicit: Optional[Path] = None) -> Path:
    """Resolve output directory with CLI override first."""
    if explicit is not None:
        return explicit.expanduser().resolve()
    raw = os.getenv("LIFT_OUTPUT_DIR") or config.get("export", {}).get(
        "default_directory",
        "./sessions",
    )
    return expand_path(raw)


def resolve_tick_seconds(config: Dict[str, Any]) -> float:
    """Redisplay interval in seconds."""
    return int(config.get("timer", {}).get("tick_ms", DEFAULT_TICK_MS)) / 1000


def resolve_export_formats(config: Dict[str, Any]) -> List[str]:
    formats = config.get("export", {}).get("formats") or ["json", "markdown"]
    return [str(fmt) for fmt in formats if str(fmt) in {"json", "markdown"}]
