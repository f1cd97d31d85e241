from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .command import run_cmd, which

logger = logging.getLogger(__name__)


# First available wins; same order as the shell installer used.
INSTALL_COMMANDS: Dict[str, List[str]] = {
    "apt-get": ["sudo", "apt-get", "install", "-y"],
    "dnf": ["sudo", "dnf", "install", "-y"],
    "pacman": ["sudo", "pacman", "-S", "--noconfirm"],
}


def detect_package_manager() -> Optional[str]:
    for name in INSTALL_COMMANDS:
        if which(name):
            return name
    return None


def install_package(manager: str, package: str, *, refresh: bool = False, dry_run: bool = False) -> None:
    if manager not in INSTALL_COMMANDS:
        raise ValueError(f"Unsupported package manager: {manager}")
    if refresh and manager == "apt-get":
        run_cmd(["sudo", "apt-get", "update"], capture=False, dry_run=dry_run)
    run_cmd([*INSTALL_COMMANDS[manager], package], capture=False, dry_run=dry_run)
    logger.info("Installed %s via %s", package, manager)
