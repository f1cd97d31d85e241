from __future__ import annotations

from typing import Sequence, Union

PathSegment = Union[str, int]


class MergeError(Exception):
    """Base class for every failure raised while merging a settings file."""


class SettingsNotFound(MergeError, FileNotFoundError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Settings file not found: {path}")
        self.path = path


class SettingsParseError(MergeError, ValueError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot parse settings file {path}: {reason}")
        self.path = path
        self.reason = reason


class SettingsIOError(MergeError, OSError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"I/O failure on {path}: {reason}")
        self.path = path
        self.reason = reason


class PathError(MergeError, LookupError):
    """An edit's target path does not fit the document's actual shape."""

    def __init__(self, operation: str, path: Sequence[PathSegment], reason: str) -> None:
        self.operation = operation
        self.path = list(path)
        self.reason = reason
        super().__init__(f"Edit {operation!r} failed at {format_path(self.path)}: {reason}")


def format_path(path: Sequence[PathSegment]) -> str:
    if not path:
        return "<root>"
    out = ""
    for seg in path:
        out += f"[{seg}]" if isinstance(seg, int) else (f".{seg}" if out else str(seg))
    return out
