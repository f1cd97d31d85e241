from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from ..lib.merger import ConfigMerger
from ..setup_config import SetupConfig
from ..state_store import record_decision

logger = logging.getLogger(__name__)


class TerminalSettingsStep:
    """Apply the configured edit batch to a terminal settings document."""

    step_id = "60_terminal_settings"

    def __init__(self, merger: ConfigMerger | None = None) -> None:
        self.merger = merger or ConfigMerger()

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = SetupConfig(raw=state.get("config") or {})
        path = cfg.terminal_settings_path
        if not path:
            logger.info("No terminal settings configured; skipping")
            return state

        edits = cfg.terminal_settings_edits
        if not edits:
            logger.info("No terminal settings edits configured; skipping")
            return state

        if not Path(path).exists() and not cfg.terminal_settings_create:
            logger.warning("Terminal settings %s not found; skipping", path)
            record_decision(state, "terminal_settings", {"path": path, "changed": False, "missing": True})
            return state

        result = self.merger.merge_file(
            path,
            edits,
            create_missing=cfg.terminal_settings_create,
            backup=cfg.terminal_settings_backup,
            dry_run=cfg.dry_run,
        )
        record_decision(
            state,
            "terminal_settings",
            {
                "path": result.path,
                "changed": result.changed,
                "backup": result.backup_path,
                "applied": result.applied,
            },
        )
        return state
