from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.command import run_shell, which
from ..setup_config import SetupConfig
from ..state_store import record_decision

logger = logging.getLogger(__name__)

STARSHIP_INSTALLER = "curl -sS https://starship.rs/install.sh | sh -s -- -y"


class InstallStarshipStep:
    step_id = "20_install_starship"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = SetupConfig(raw=state.get("config") or {})

        existing = which("starship")
        if existing:
            logger.info("Starship is already installed (%s)", existing)
            record_decision(state, "starship", "present")
            return state

        run_shell(STARSHIP_INSTALLER, capture=False, dry_run=cfg.dry_run)
        record_decision(state, "starship", "installed")
        logger.info("Starship installed")
        return state
