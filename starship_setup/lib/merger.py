from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from .edits import EditOperation, apply_edits
from .errors import SettingsNotFound
from .settings_file import (
    SettingsDocument,
    backup_file,
    detect_format,
    dump_settings,
    load_settings,
    save_settings,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MergeResult:
    path: str
    changed: bool
    backup_path: Optional[str] = None
    applied: List[str] = field(default_factory=list)
    created: bool = False


def _same_content(a: SettingsDocument, b: SettingsDocument) -> bool:
    # Compare serialized forms; 1 == True == 1.0 in Python but not in JSON.
    return dump_settings(a.root, fmt=a.fmt) == dump_settings(b.root, fmt=b.fmt)


class ConfigMerger:
    """Load -> apply -> backup -> atomic save for one settings document.

    apply() only touches memory. Disk is written by save() alone, so any
    failure before save() leaves the file exactly as it was.
    """

    def load(self, path: str | Path) -> SettingsDocument:
        return load_settings(path)

    def backup(self, path: str | Path) -> Path:
        return backup_file(path)

    def apply(self, doc: SettingsDocument, operations: Sequence[EditOperation]) -> SettingsDocument:
        return SettingsDocument(root=apply_edits(doc.root, operations), fmt=doc.fmt)

    def save(self, doc: SettingsDocument, path: str | Path) -> None:
        save_settings(doc, path)

    def merge_file(
        self,
        path: str | Path,
        operations: Sequence[EditOperation],
        *,
        create_missing: bool = False,
        backup: bool = True,
        dry_run: bool = False,
    ) -> MergeResult:
        p = Path(path)
        names = [op.name for op in operations]

        created = False
        try:
            original = self.load(p)
        except SettingsNotFound:
            if not create_missing:
                raise
            logger.info("%s does not exist; starting from an empty document", str(p))
            original = SettingsDocument(root={}, fmt=detect_format(p))
            created = True

        updated = self.apply(original, operations)

        if not created and _same_content(original, updated):
            logger.info("%s already up to date (%d edit(s))", str(p), len(names))
            return MergeResult(path=str(p), changed=False, applied=names)

        if dry_run:
            logger.info("Would update %s with edits: %s", str(p), ", ".join(names) or "(none)")
            return MergeResult(path=str(p), changed=True, applied=names, created=created)

        backup_path: Optional[Path] = None
        if backup and not created:
            backup_path = self.backup(p)

        self.save(updated, p)
        logger.info("Updated %s with edits: %s", str(p), ", ".join(names) or "(none)")
        return MergeResult(
            path=str(p),
            changed=True,
            backup_path=str(backup_path) if backup_path else None,
            applied=names,
            created=created,
        )
