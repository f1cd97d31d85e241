from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from ..lib.command import CommandError, run_cmd, which
from ..lib.pkg import detect_package_manager, install_package
from ..setup_config import SetupConfig
from ..state_store import record_decision

logger = logging.getLogger(__name__)

# Checked in order inside the cloned repository.
CONFIG_CANDIDATES = ["starship.toml", ".config/starship.toml"]


def find_starship_toml(repo_dir: Path) -> Optional[Path]:
    for rel in CONFIG_CANDIDATES:
        p = repo_dir / rel
        if p.is_file():
            return p
    return None


def _install_git(dry_run: bool) -> bool:
    manager = detect_package_manager()
    if manager is None:
        logger.warning("git is missing and no apt-get/dnf/pacman was found")
        return False
    logger.info("Installing git via %s", manager)
    try:
        install_package(manager, "git", dry_run=dry_run)
    except CommandError as e:
        logger.warning("Could not install git: %s", e)
        return False
    return True


class FetchStarshipConfigStep:
    step_id = "40_fetch_starship_config"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = SetupConfig(raw=state.get("config") or {})
        repo = cfg.starship_config_repo
        if not repo:
            logger.info("No Starship config repository configured; skipping")
            return state

        if not which("git") and not _install_git(cfg.dry_run):
            logger.warning("git is not available; place your config at %s manually", cfg.starship_config_path)
            record_decision(state, "starship_config", "git_unavailable")
            return state

        dest = Path(cfg.starship_config_path)
        if cfg.dry_run:
            run_cmd(["git", "clone", "--depth", "1", repo, "<tmp>"], dry_run=True)
            logger.info("Would copy starship.toml to %s", str(dest))
            return state

        with tempfile.TemporaryDirectory(prefix="starship-config-") as tmp:
            clone_dir = Path(tmp) / "repo"
            r = run_cmd(["git", "clone", "--depth", "1", repo, str(clone_dir)], check=False)
            if not r.ok:
                logger.warning("Failed to clone %s; place your config at %s manually", repo, str(dest))
                record_decision(state, "starship_config", "clone_failed")
                return state

            found = find_starship_toml(clone_dir)
            if found is None:
                logger.warning("No starship.toml found in %s; copy it to %s manually", repo, str(dest))
                record_decision(state, "starship_config", "not_found")
                return state

            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(found, dest)

        logger.info("Copied %s from %s to %s", found.relative_to(clone_dir), repo, str(dest))
        record_decision(state, "starship_config", "copied")
        return state
