from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, List, Optional

import yaml

from .lib.edits import EditOperation, edits_from_config
from .lib.errors import MergeError, PathError, SettingsParseError
from .lib.merger import ConfigMerger, MergeResult
from .lib.settings_file import detect_format
from .logging_utils import DEFAULT_LOG_PATH, configure_logging

logger = logging.getLogger(__name__)


def load_edit_batch(path: str) -> List[EditOperation]:
    """Read edits from YAML/JSON: a list, or a mapping with an 'edits' list."""

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)
    text = p.read_text(encoding="utf-8")

    raw: Any
    try:
        raw = yaml.safe_load(text) if detect_format(p) == "yaml" else json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SettingsParseError(str(p), str(e)) from e

    if isinstance(raw, dict):
        raw = raw.get("edits")
    if not isinstance(raw, list):
        raise ValueError(f"{path} must hold a list of edits or a mapping with an 'edits' list")
    return edits_from_config(raw)


def run_merge(
    *,
    settings_path: str,
    edits_path: str,
    create_missing: bool,
    backup: bool,
    dry_run: bool,
) -> MergeResult:
    ops = load_edit_batch(edits_path)
    logger.info("Loaded %d edit(s) from %s", len(ops), edits_path)
    return ConfigMerger().merge_file(
        settings_path,
        ops,
        create_missing=create_missing,
        backup=backup,
        dry_run=dry_run,
    )


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="starship-merge")
    p.add_argument("settings", help="Settings document to update (json|yaml)")
    p.add_argument("--edits", required=True, help="Edit batch file (json|yaml)")
    p.add_argument("--create", action="store_true", help="Start from an empty document if settings is missing")
    p.add_argument("--no-backup", action="store_true", help="Do not keep a copy of the previous file")
    p.add_argument("--dry-run", action="store_true")
    p.add_argument("--log", default=DEFAULT_LOG_PATH)

    args = p.parse_args(argv)
    configure_logging(log_path=args.log)

    try:
        result = run_merge(
            settings_path=args.settings,
            edits_path=args.edits,
            create_missing=bool(args.create),
            backup=not args.no_backup,
            dry_run=bool(args.dry_run),
        )
    except PathError as e:
        logger.error("Edit %s failed at %s: %s", e.operation, e.path, e.reason)
        return 1
    except (MergeError, ValueError, FileNotFoundError) as e:
        logger.error("%s", e)
        return 1

    if result.changed:
        logger.info("%s updated (backup: %s)", result.path, result.backup_path or "none")
    else:
        logger.info("%s unchanged", result.path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
