from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Literal, Optional, Sequence, Tuple

from .errors import SettingsIOError
from .settings_file import atomic_write_text, backup_file

logger = logging.getLogger(__name__)


BlockAction = Literal["inserted", "replaced", "unchanged", "skipped"]

MARKER_TAG = "starship-setup"


@dataclass(frozen=True)
class RcBlock:
    """A named region of a shell rc file owned by this tool.

    sentinel: if this text already appears outside any managed block, the
    file was configured by hand and the block is left out.
    """

    name: str
    body: str
    sentinel: Optional[str] = None

    @property
    def begin_marker(self) -> str:
        return f"# >>> {MARKER_TAG}: {self.name} >>>"

    @property
    def end_marker(self) -> str:
        return f"# <<< {MARKER_TAG}: {self.name} <<<"

    def render(self) -> str:
        body = self.body.strip("\n")
        return f"{self.begin_marker}\n{body}\n{self.end_marker}\n"


@dataclass(frozen=True)
class RcMergeResult:
    path: str
    changed: bool
    actions: List[Tuple[str, BlockAction]] = field(default_factory=list)
    backup_path: Optional[str] = None


def _block_pattern(block: RcBlock) -> re.Pattern[str]:
    return re.compile(
        rf"^{re.escape(block.begin_marker)}[ \t]*\n.*?^{re.escape(block.end_marker)}[ \t]*(?:\n|\Z)",
        re.MULTILINE | re.DOTALL,
    )


_ANY_MANAGED = re.compile(
    rf"^# >>> {re.escape(MARKER_TAG)}: .*? >>>[ \t]*\n.*?^# <<< {re.escape(MARKER_TAG)}: .*? <<<[ \t]*(?:\n|\Z)",
    re.MULTILINE | re.DOTALL,
)


def upsert_block(text: str, block: RcBlock) -> Tuple[str, BlockAction]:
    rendered = block.render()
    pattern = _block_pattern(block)
    matches = list(pattern.finditer(text))

    if matches:
        first = matches[0]
        # Later duplicates collapse into the first occurrence.
        out = text
        for m in reversed(matches[1:]):
            out = out[: m.start()] + out[m.end():]
        out = out[: first.start()] + rendered + out[first.end():]
        if out == text:
            return text, "unchanged"
        return out, "replaced"

    if block.sentinel and block.sentinel in _ANY_MANAGED.sub("", text):
        return text, "skipped"

    if not text:
        return rendered, "inserted"
    sep = "\n" if text.endswith("\n") else "\n\n"
    return text + sep + rendered, "inserted"


def merge_rc_file(
    path: str | Path,
    blocks: Sequence[RcBlock],
    *,
    backup: bool = True,
    dry_run: bool = False,
) -> RcMergeResult:
    p = Path(path)
    existed = p.exists()
    try:
        original = p.read_text(encoding="utf-8") if existed else ""
    except OSError as e:
        raise SettingsIOError(str(p), str(e)) from e

    text = original
    actions: List[Tuple[str, BlockAction]] = []
    for block in blocks:
        text, action = upsert_block(text, block)
        actions.append((block.name, action))
        logger.info("rc block %s in %s: %s", block.name, str(p), action)

    if text == original:
        return RcMergeResult(path=str(p), changed=False, actions=actions)

    if dry_run:
        logger.info("Would update %s", str(p))
        return RcMergeResult(path=str(p), changed=True, actions=actions)

    backup_path = backup_file(p) if (backup and existed) else None
    atomic_write_text(p, text)
    return RcMergeResult(
        path=str(p),
        changed=True,
        actions=actions,
        backup_path=str(backup_path) if backup_path else None,
    )
