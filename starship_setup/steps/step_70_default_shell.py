from __future__ import annotations

import logging
import os
from typing import Any, Dict

from ..lib.command import run_cmd, which
from ..setup_config import SetupConfig
from ..state_store import record_decision

logger = logging.getLogger(__name__)


class DefaultShellStep:
    step_id = "70_default_shell"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = SetupConfig(raw=state.get("config") or {})
        if not cfg.set_default_shell:
            logger.info("Leaving the login shell unchanged")
            return state

        zsh = which("zsh")
        if not zsh:
            raise RuntimeError("zsh not found on PATH; cannot make it the login shell")

        if os.environ.get("SHELL") == zsh:
            logger.info("zsh is already the login shell")
            return state

        run_cmd(["chsh", "-s", zsh], capture=False, dry_run=cfg.dry_run)
        record_decision(state, "login_shell", zsh)
        logger.info("zsh set as default shell")
        return state
