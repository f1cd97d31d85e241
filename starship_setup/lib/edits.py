from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Literal, Mapping, Sequence, Tuple

from .errors import PathError, PathSegment

logger = logging.getLogger(__name__)


EditKind = Literal["upsert_scalar", "upsert_object", "upsert_into_named_list"]

EDIT_KINDS: Tuple[str, ...] = ("upsert_scalar", "upsert_object", "upsert_into_named_list")

_SCALAR_TYPES = (str, int, float, bool, type(None))


@dataclass(frozen=True)
class EditOperation:
    """A named, idempotent change to one location of a settings document.

    upsert_scalar / upsert_object:
      target_path ends with the key (or existing list index) to overwrite.

    upsert_into_named_list:
      target_path locates the list itself. Elements whose "name" equals
      payload["name"] are removed, then the payload is appended. A missing
      list is initialized as [].
    """

    name: str
    target_path: Tuple[PathSegment, ...]
    kind: EditKind
    payload: Any

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("EditOperation.name must be a non-empty string")
        if self.kind not in EDIT_KINDS:
            raise ValueError(f"Unknown edit kind for {self.name!r}: {self.kind}")
        object.__setattr__(self, "target_path", tuple(self.target_path))
        for seg in self.target_path:
            if isinstance(seg, bool) or not isinstance(seg, (str, int)):
                raise ValueError(f"Path segments must be str or int in {self.name!r}, got {seg!r}")

        if self.kind == "upsert_scalar" and not isinstance(self.payload, _SCALAR_TYPES):
            raise ValueError(f"upsert_scalar {self.name!r} needs a scalar payload")
        if self.kind == "upsert_object" and not isinstance(self.payload, Mapping):
            raise ValueError(f"upsert_object {self.name!r} needs a mapping payload")
        if self.kind == "upsert_into_named_list":
            if not isinstance(self.payload, Mapping) or not isinstance(self.payload.get("name"), str):
                raise ValueError(
                    f"upsert_into_named_list {self.name!r} needs a mapping payload with a string 'name'"
                )


def upsert_scalar(name: str, target_path: Sequence[PathSegment], value: Any) -> EditOperation:
    return EditOperation(name=name, target_path=tuple(target_path), kind="upsert_scalar", payload=value)


def upsert_object(name: str, target_path: Sequence[PathSegment], value: Mapping[str, Any]) -> EditOperation:
    return EditOperation(name=name, target_path=tuple(target_path), kind="upsert_object", payload=value)


def upsert_into_named_list(
    name: str, target_path: Sequence[PathSegment], element: Mapping[str, Any]
) -> EditOperation:
    return EditOperation(
        name=name, target_path=tuple(target_path), kind="upsert_into_named_list", payload=element
    )


def _child(node: Any, seg: PathSegment, op: EditOperation, walked: List[PathSegment]) -> Any:
    """Step one segment down, creating a mapping for a missing mapping key."""

    if isinstance(node, dict):
        if not isinstance(seg, str):
            raise PathError(op.name, walked, f"index {seg} used on a mapping")
        if seg not in node:
            node[seg] = {}
        return node[seg]

    if isinstance(node, list):
        if not isinstance(seg, int):
            raise PathError(op.name, walked, f"key {seg!r} used on a list")
        if seg < -len(node) or seg >= len(node):
            raise PathError(op.name, walked, f"index {seg} out of range (len={len(node)})")
        return node[seg]

    raise PathError(op.name, walked, f"expected a mapping or list, found {type(node).__name__}")


def _parent_of_target(root: Dict[str, Any], op: EditOperation) -> Any:
    node: Any = root
    walked: List[PathSegment] = []
    for seg in op.target_path[:-1]:
        node = _child(node, seg, op, walked)
        walked.append(seg)
    return node


def _set_last(parent: Any, op: EditOperation, value: Any) -> None:
    last = op.target_path[-1]
    prefix = list(op.target_path[:-1])
    if isinstance(parent, dict):
        if not isinstance(last, str):
            raise PathError(op.name, prefix, f"index {last} used on a mapping")
        parent[last] = value
        return
    if isinstance(parent, list):
        if not isinstance(last, int):
            raise PathError(op.name, prefix, f"key {last!r} used on a list")
        if last < -len(parent) or last >= len(parent):
            raise PathError(op.name, prefix, f"index {last} out of range (len={len(parent)})")
        parent[last] = value
        return
    raise PathError(op.name, prefix, f"expected a mapping or list, found {type(parent).__name__}")


def _upsert_named(parent: Any, op: EditOperation) -> None:
    last = op.target_path[-1]
    prefix = list(op.target_path[:-1])

    if isinstance(parent, dict) and isinstance(last, str):
        if last not in parent:
            parent[last] = []
        target = parent[last]
    elif isinstance(parent, list) and isinstance(last, int):
        if last < -len(parent) or last >= len(parent):
            raise PathError(op.name, prefix, f"index {last} out of range (len={len(parent)})")
        target = parent[last]
    else:
        raise PathError(op.name, prefix, f"cannot address {last!r} in {type(parent).__name__}")

    if not isinstance(target, list):
        raise PathError(op.name, op.target_path, f"expected a list, found {type(target).__name__}")

    element_name = op.payload["name"]
    kept = [el for el in target if not (isinstance(el, dict) and el.get("name") == element_name)]
    removed = len(target) - len(kept)
    kept.append(copy.deepcopy(dict(op.payload)))
    target[:] = kept
    logger.debug("Named list %s: replaced %d element(s) named %r", op.name, removed, element_name)


def apply_edits(document: Dict[str, Any], operations: Iterable[EditOperation]) -> Dict[str, Any]:
    """Apply operations in order to a copy of document and return the copy.

    The input is never mutated, so a PathError leaves the caller holding the
    untouched original.
    """

    result = copy.deepcopy(document)
    for op in operations:
        if not op.target_path:
            raise PathError(op.name, [], "target path is empty")

        parent = _parent_of_target(result, op)
        if op.kind == "upsert_into_named_list":
            _upsert_named(parent, op)
        else:
            _set_last(parent, op, copy.deepcopy(op.payload))
        logger.debug("Applied %s (%s)", op.name, op.kind)
    return result


def _parse_path(raw: Any, entry_name: str) -> Tuple[PathSegment, ...]:
    if isinstance(raw, str):
        parts = raw.split(".")
        if any(not p for p in parts):
            raise ValueError(f"Edit {entry_name!r} has an empty segment in path {raw!r}")
        return tuple(int(p) if p.lstrip("-").isdigit() else p for p in parts)
    if isinstance(raw, (list, tuple)):
        return tuple(raw)
    raise ValueError(f"Edit {entry_name!r} path must be a list or dotted string")


def edits_from_config(items: Iterable[Mapping[str, Any]]) -> List[EditOperation]:
    """Build operations from plain mappings: {name, path, kind, value}.

    A dotted path turns every all-digit segment into a list index, so a
    mapping key such as "0" can only be reached with the list form
    (["profiles", "0"]).
    """

    ops: List[EditOperation] = []
    for idx, item in enumerate(items):
        if not isinstance(item, Mapping):
            raise ValueError(f"Edit #{idx} must be a mapping, got {type(item).__name__}")
        name = item.get("name")
        if not name or not isinstance(name, str):
            raise ValueError(f"Edit #{idx} is missing a 'name'")
        for key in ("path", "kind"):
            if key not in item:
                raise ValueError(f"Edit {name!r} is missing '{key}'")
        if "value" not in item:
            raise ValueError(f"Edit {name!r} is missing 'value'")
        ops.append(
            EditOperation(
                name=name,
                target_path=_parse_path(item["path"], name),
                kind=item["kind"],
                payload=item["value"],
            )
        )
    return ops
