from __future__ import annotations

import logging
import os
import re
import shlex
import shutil
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


# Nerd Font (font-logos) glyphs, matched by substring in this order.
DISTRO_ICONS: List[Tuple[Tuple[str, ...], str]] = [
    (("kali",), "\uf327"),
    (("arch",), "\uf303"),
    (("debian",), "\uf306"),
    (("raspbian",), "\uf315"),
    (("ubuntu",), "\uf31b"),
    (("elementary",), "\uf309"),
    (("fedora",), "\uf30a"),
    (("coreos",), "\uf305"),
    (("gentoo",), "\uf30d"),
    (("mageia",), "\uf310"),
    (("centos",), "\uf304"),
    (("opensuse", "tumbleweed"), "\uf314"),
    (("sabayon",), "\uf317"),
    (("slackware",), "\uf319"),
    (("linuxmint",), "\uf30e"),
    (("alpine",), "\uf300"),
    (("aosc",), "\uf301"),
    (("nixos",), "\uf313"),
    (("devuan",), "\uf307"),
    (("manjaro",), "\uf312"),
    (("rhel",), "\uf316"),
    (("macos",), "\uf302"),
]

GENERIC_LINUX_ICON = "\uf31a"

_WSL_RE = re.compile(r"microsoft|wsl", re.IGNORECASE)


def is_wsl(proc_version_text: str) -> bool:
    return bool(_WSL_RE.search(proc_version_text or ""))


def detect_wsl(proc_version_path: str = "/proc/version") -> bool:
    try:
        return is_wsl(Path(proc_version_path).read_text(encoding="utf-8", errors="replace"))
    except OSError:
        return False


def parse_os_release(text: str) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, raw = line.partition("=")
        try:
            parts = shlex.split(raw)
        except ValueError:
            parts = [raw.strip("\"'")]
        out[key.strip()] = parts[0] if parts else ""
    return out


def read_os_release(path: str = "/etc/os-release") -> Dict[str, str]:
    p = Path(path)
    if not p.exists():
        return {}
    return parse_os_release(p.read_text(encoding="utf-8", errors="replace"))


def distro_icon(distro_id: Optional[str]) -> str:
    """Substring lookup; 'opensuse-tumbleweed' and 'tumbleweed' both match."""

    needle = (distro_id or "").lower()
    for keys, icon in DISTRO_ICONS:
        if any(k in needle for k in keys):
            return icon
    return GENERIC_LINUX_ICON


def detect_platform(
    *,
    proc_version_path: str = "/proc/version",
    os_release_path: str = "/etc/os-release",
) -> Dict[str, Any]:
    release = read_os_release(os_release_path)
    distro = (release.get("ID") or "").lower() or None
    info: Dict[str, Any] = {
        "wsl": detect_wsl(proc_version_path),
        "distro": distro,
        "distro_like": (release.get("ID_LIKE") or "").lower() or None,
        "pretty_name": release.get("PRETTY_NAME"),
        "icon": distro_icon(distro),
        "login_shell": os.environ.get("SHELL"),
        "zsh_path": shutil.which("zsh"),
    }
    logger.info(
        "Platform: wsl=%s distro=%s shell=%s", info["wsl"], info["distro"], info["login_shell"]
    )
    return info
