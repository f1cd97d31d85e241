from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from .lib.settings_file import atomic_write_text, detect_format, dump_settings, parse_settings

logger = logging.getLogger(__name__)

STATE_VERSION = 1


def load_state(path: str) -> Dict[str, Any]:
    p = Path(path).expanduser()
    if not p.exists():
        return {}
    return parse_settings(p.read_text(encoding="utf-8"), fmt=detect_format(p), source=str(p))


def save_state(path: str, state: Dict[str, Any]) -> None:
    p = Path(path).expanduser()
    atomic_write_text(p, dump_settings(state, fmt=detect_format(p)))


def ensure_defaults(state: Dict[str, Any]) -> Dict[str, Any]:
    """Fill required keys without overriding recorded values."""

    state.setdefault("version", STATE_VERSION)
    state.setdefault("config", {})
    state.setdefault("platform", {})
    state.setdefault("execution", {})

    exe = state["execution"]
    exe.setdefault("current_step", None)
    exe.setdefault("completed_steps", [])
    exe.setdefault("errors", [])
    exe.setdefault("decisions", {})

    return state


def record_decision(state: Dict[str, Any], key: str, value: Any) -> None:
    state.setdefault("execution", {}).setdefault("decisions", {})[key] = value


def mark_step_completed(state: Dict[str, Any], step_id: str) -> None:
    completed = state.setdefault("execution", {}).setdefault("completed_steps", [])
    if step_id not in completed:
        completed.append(step_id)


def is_step_completed(state: Dict[str, Any], step_id: str) -> bool:
    exe = state.get("execution") or {}
    return step_id in (exe.get("completed_steps") or [])
