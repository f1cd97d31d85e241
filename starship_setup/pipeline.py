from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence

from .state_store import is_step_completed, mark_step_completed

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single idempotent provisioning step."""

    step_id: str

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class PipelineResult:
    state: Dict[str, Any]
    ran_steps: List[str] = field(default_factory=list)
    skipped_steps: List[str] = field(default_factory=list)


def _check_step_ids(steps: Sequence[Step], *ids: Optional[str]) -> None:
    known = {s.step_id for s in steps}
    for step_id in ids:
        if step_id is not None and step_id not in known:
            raise ValueError(f"Unknown step id: {step_id} (known: {', '.join(sorted(known))})")


def run_pipeline(
    *,
    state: Dict[str, Any],
    steps: Sequence[Step],
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    force: bool = False,
) -> PipelineResult:
    """Run steps in order; completed steps are skipped unless force is set."""

    _check_step_ids(steps, start_at, stop_after)

    ran: List[str] = []
    skipped: List[str] = []
    reached = start_at is None

    for step in steps:
        reached = reached or step.step_id == start_at
        if not reached:
            continue

        exe = state.setdefault("execution", {})
        exe["current_step"] = step.step_id

        if not force and is_step_completed(state, step.step_id):
            logger.info("Skipping step %s (already completed)", step.step_id)
            skipped.append(step.step_id)
        else:
            logger.info("Running step %s", step.step_id)
            state = step.run(state)
            mark_step_completed(state, step.step_id)
            ran.append(step.step_id)

        if step.step_id == stop_after:
            logger.info("Stopping after %s", stop_after)
            break

    state.setdefault("execution", {})["current_step"] = None
    return PipelineResult(state=state, ran_steps=ran, skipped_steps=skipped)
