from __future__ import annotations

import logging
from typing import Any, Dict, List

from ..lib.command import CommandError, which
from ..lib.pkg import detect_package_manager, install_package
from ..setup_config import SetupConfig
from ..state_store import record_decision

logger = logging.getLogger(__name__)

REQUIRED_TOOLS = ["zsh"]
OPTIONAL_TOOLS = ["exa"]


class InstallToolsStep:
    step_id = "30_install_tools"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = SetupConfig(raw=state.get("config") or {})
        if not cfg.install_tools:
            logger.info("Tool installation disabled by config")
            return state

        missing_required = [t for t in REQUIRED_TOOLS if not which(t)]
        missing_optional = [t for t in OPTIONAL_TOOLS if not which(t)]
        if not missing_required and not missing_optional:
            logger.info("Required tools already present")
            return state

        manager = detect_package_manager()
        if manager is None:
            if missing_required:
                raise RuntimeError(
                    f"Cannot install {', '.join(missing_required)} automatically; no apt-get/dnf/pacman found"
                )
            logger.warning("Could not install %s; install manually", ", ".join(missing_optional))
            record_decision(state, "tools_unavailable", missing_optional)
            return state

        installed: List[str] = []
        first = True
        for tool in missing_required:
            install_package(manager, tool, refresh=first, dry_run=cfg.dry_run)
            installed.append(tool)
            first = False

        unavailable: List[str] = []
        for tool in missing_optional:
            try:
                install_package(manager, tool, refresh=first, dry_run=cfg.dry_run)
                installed.append(tool)
            except CommandError as e:
                logger.warning("Could not install %s: %s", tool, e)
                unavailable.append(tool)
            first = False

        record_decision(state, "package_manager", manager)
        record_decision(state, "tools_installed", installed)
        if unavailable:
            record_decision(state, "tools_unavailable", unavailable)
        return state
