from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Literal

import yaml

from .errors import SettingsIOError, SettingsNotFound, SettingsParseError

logger = logging.getLogger(__name__)


SettingsFormat = Literal["json", "yaml"]


@dataclass
class SettingsDocument:
    root: Dict[str, Any] = field(default_factory=dict)
    fmt: SettingsFormat = "json"


def detect_format(path: str | Path) -> SettingsFormat:
    if Path(path).suffix.lower() in {".yaml", ".yml"}:
        return "yaml"
    # Terminal settings are JSON regardless of extension.
    return "json"


def parse_settings(text: str, *, fmt: SettingsFormat, source: str = "<memory>") -> Dict[str, Any]:
    try:
        if fmt == "yaml":
            data = yaml.safe_load(text)
            if data is None:
                data = {}
        else:
            data = json.loads(text.lstrip("\ufeff"))
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SettingsParseError(source, str(e)) from e

    if not isinstance(data, dict):
        raise SettingsParseError(source, f"root must be a mapping, got {type(data).__name__}")
    return data


def dump_settings(data: Dict[str, Any], *, fmt: SettingsFormat) -> str:
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    return json.dumps(data, indent=4, ensure_ascii=False) + "\n"


def load_settings(path: str | Path) -> SettingsDocument:
    p = Path(path)
    if not p.exists():
        raise SettingsNotFound(str(p))

    try:
        text = p.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise SettingsParseError(str(p), f"not UTF-8 text ({e})") from e
    except OSError as e:
        raise SettingsIOError(str(p), str(e)) from e

    fmt = detect_format(p)
    return SettingsDocument(root=parse_settings(text, fmt=fmt, source=str(p)), fmt=fmt)


def real_path(path: str | Path) -> Path:
    # Follows every link, including a dangling last one.
    return Path(os.path.realpath(Path(path).expanduser()))


def _backup_candidate(p: Path, stamp: str, n: int) -> Path:
    suffix = f".backup-{stamp}" if n == 0 else f".backup-{stamp}-{n}"
    return p.with_name(p.name + suffix)


def backup_file(path: str | Path) -> Path:
    """Copy path to a new timestamped sibling and return the copy's path.

    Earlier backups are never overwritten; a counter is appended on collision.
    A symlink is followed, so the backup sits next to the real file.
    """

    p = real_path(path)
    if not p.exists():
        raise SettingsNotFound(str(p))

    stamp = datetime.now().strftime("%Y%m%dT%H%M%S-%f")
    n = 0
    dest = _backup_candidate(p, stamp, n)
    while dest.exists():
        n += 1
        dest = _backup_candidate(p, stamp, n)

    try:
        shutil.copy2(p, dest)
    except OSError as e:
        raise SettingsIOError(str(dest), f"backup failed: {e}") from e

    logger.info("Backed up %s -> %s", str(p), str(dest))
    return dest


def atomic_write_text(path: str | Path, text: str) -> None:
    """Replace path with text via a fsynced temp sibling and os.replace().

    A symlinked path keeps its link; the file it points to is replaced.
    """

    p = real_path(path)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{p.name}.", suffix=".tmp", dir=str(p.parent))
    except OSError as e:
        raise SettingsIOError(str(p), str(e)) from e

    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        if p.exists():
            shutil.copymode(p, tmp)
        os.replace(tmp, p)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        raise SettingsIOError(str(p), str(e)) from e


def save_settings(doc: SettingsDocument, path: str | Path) -> None:
    try:
        text = dump_settings(doc.root, fmt=doc.fmt)
    except (TypeError, ValueError, yaml.YAMLError) as e:
        raise SettingsIOError(str(path), f"cannot serialize document: {e}") from e

    atomic_write_text(path, text)
    logger.info("Saved %s (%d bytes)", str(path), len(text.encode("utf-8")))
