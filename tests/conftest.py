"""Shared pytest fixtures for starship-setup tests."""

import json
import logging
from pathlib import Path
from typing import Any, Dict

import pytest


@pytest.fixture
def terminal_settings() -> Dict[str, Any]:
    """A trimmed Windows Terminal style settings document."""
    return {
        "$schema": "https://aka.ms/terminal-profiles-schema",
        "defaultProfile": "{2c4de342-38b7-51cf-b940-2309a097f518}",
        "copyOnSelect": False,
        "profiles": {
            "defaults": {"fontSize": 11},
            "list": [
                {"name": "Ubuntu", "guid": "{2c4de342-38b7-51cf-b940-2309a097f518}"},
                {"name": "Arch", "hidden": False},
            ],
        },
        "schemes": [],
    }


@pytest.fixture
def settings_file(tmp_path: Path, terminal_settings: Dict[str, Any]) -> Path:
    p = tmp_path / "settings.json"
    p.write_text(json.dumps(terminal_settings, indent=2), encoding="utf-8")
    return p


def _clear_markers(root: logging.Logger) -> None:
    for attr in ("_starship_setup_configured", "_starship_setup_log_path"):
        if hasattr(root, attr):
            delattr(root, attr)


@pytest.fixture
def reset_logging():
    """Undo configure_logging() so each CLI test gets its own log file."""
    root = logging.getLogger()
    _clear_markers(root)
    yield
    for h in list(root.handlers):
        # pytest's own capture handlers are subclasses; leave those.
        if type(h) in (logging.FileHandler, logging.StreamHandler):
            root.removeHandler(h)
            h.close()
    _clear_markers(root)
