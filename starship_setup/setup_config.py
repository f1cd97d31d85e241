from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .lib.edits import EditOperation, edits_from_config


def _expand(path: str) -> str:
    return os.path.expandvars(os.path.expanduser(path))


@dataclass(frozen=True)
class SetupConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def dry_run(self) -> bool:
        return bool(self.raw.get("dry_run", False))

    @property
    def install_tools(self) -> bool:
        return bool(self.raw.get("install_tools", True))

    @property
    def set_default_shell(self) -> bool:
        return bool(self.raw.get("set_default_shell", False))

    @property
    def zshrc_path(self) -> str:
        return _expand(str(self.raw.get("zshrc_path") or "~/.zshrc"))

    @property
    def starship_config_path(self) -> str:
        return _expand(str(self.raw.get("starship_config_path") or "~/.config/starship.toml"))

    @property
    def starship_config_repo(self) -> Optional[str]:
        repo = self.raw.get("starship_config_repo")
        return str(repo) if repo else None

    @property
    def terminal_settings_path(self) -> Optional[str]:
        p = (self.raw.get("terminal_settings") or {}).get("path")
        return _expand(str(p)) if p else None

    @property
    def terminal_settings_create(self) -> bool:
        return bool((self.raw.get("terminal_settings") or {}).get("create_missing", False))

    @property
    def terminal_settings_backup(self) -> bool:
        return bool((self.raw.get("terminal_settings") or {}).get("backup", True))

    @property
    def terminal_settings_edits(self) -> List[EditOperation]:
        return edits_from_config((self.raw.get("terminal_settings") or {}).get("edits") or [])

    def with_overrides(self, **overrides: Any) -> "SetupConfig":
        raw = dict(self.raw)
        raw.update({k: v for k, v in overrides.items() if v is not None})
        return SetupConfig(raw=raw)


def load_setup_config(path: Optional[str]) -> SetupConfig:
    """Read the YAML setup config; no path means all defaults."""

    if not path:
        return SetupConfig()
    p = Path(path).expanduser()
    if not p.exists():
        raise FileNotFoundError(path)

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path} must contain a mapping/object")

    cfg = SetupConfig(raw=raw)
    # Surface malformed edits at load time rather than mid-run.
    _ = cfg.terminal_settings_edits
    return cfg
