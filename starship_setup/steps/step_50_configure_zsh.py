from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.command import which
from ..lib.platform_detect import distro_icon
from ..lib.rc_block import merge_rc_file
from ..lib.zsh_profile import zsh_blocks
from ..setup_config import SetupConfig
from ..state_store import record_decision

logger = logging.getLogger(__name__)


class ConfigureZshStep:
    step_id = "50_configure_zsh"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = SetupConfig(raw=state.get("config") or {})
        platform = state.get("platform") or {}

        icon = platform.get("icon") or distro_icon(platform.get("distro"))
        blocks = zsh_blocks(icon=icon, with_exa=bool(which("exa")))

        result = merge_rc_file(cfg.zshrc_path, blocks, dry_run=cfg.dry_run)
        actions = dict(result.actions)
        if all(a == "skipped" for a in actions.values()):
            logger.info("Starship already configured in %s", cfg.zshrc_path)
        elif result.changed:
            logger.info("zsh configured (%s)", cfg.zshrc_path)

        record_decision(state, "zshrc", {"path": result.path, "actions": actions, "backup": result.backup_path})
        return state
