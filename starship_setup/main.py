from __future__ import annotations

import argparse
import logging
from typing import Any, Dict, Optional

from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import run_pipeline
from .setup_config import load_setup_config
from .state_store import ensure_defaults, load_state, save_state
from .steps import (
    ConfigureZshStep,
    DefaultShellStep,
    DetectPlatformStep,
    FetchStarshipConfigStep,
    InstallStarshipStep,
    InstallToolsStep,
    SummaryStep,
    TerminalSettingsStep,
)

logger = logging.getLogger(__name__)


DEFAULT_STATE_PATH = "~/.local/state/starship-setup/state.json"


def build_steps():
    return [
        DetectPlatformStep(),
        InstallStarshipStep(),
        InstallToolsStep(),
        FetchStarshipConfigStep(),
        ConfigureZshStep(),
        TerminalSettingsStep(),
        DefaultShellStep(),
        SummaryStep(),
    ]


def run(
    *,
    config_path: Optional[str] = None,
    state_path: str = DEFAULT_STATE_PATH,
    log_path: str = DEFAULT_LOG_PATH,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    force: bool = False,
    dry_run: Optional[bool] = None,
) -> Dict[str, Any]:
    """Run the setup pipeline, persisting state for resume."""

    actual_log_path = configure_logging(log_path=log_path)

    try:
        cfg = load_setup_config(config_path).with_overrides(dry_run=dry_run)
        # A dry run starts from a blank state and is never saved.
        state = ensure_defaults({} if cfg.dry_run else load_state(state_path))
    except Exception:
        logger.exception("Cannot start setup (config=%s, state=%s)", config_path, state_path)
        raise

    state["config"] = dict(cfg.raw)
    paths = state.setdefault("execution", {}).setdefault("paths", {})
    paths["log_path_requested"] = log_path
    paths["log_path_actual"] = actual_log_path

    try:
        result = run_pipeline(
            state=state,
            steps=build_steps(),
            start_at=start_at,
            stop_after=stop_after,
            force=force,
        )
        state = result.state
        summary = state.setdefault("execution", {}).setdefault("summary", {})
        summary["ran_steps"] = result.ran_steps
        summary["skipped_steps"] = result.skipped_steps
        return state
    except Exception as e:
        logger.exception("Setup failed")
        state.setdefault("execution", {}).setdefault("errors", []).append(
            {
                "step": (state.get("execution") or {}).get("current_step"),
                "error": str(e),
            }
        )
        raise
    finally:
        if not cfg.dry_run:
            save_state(state_path, state)


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="starship-setup")
    p.add_argument("--config", default=None, help="Path to setup config (yaml)")
    p.add_argument("--state", default=DEFAULT_STATE_PATH, help="Path to setup state (json|yaml)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to setup log")
    p.add_argument("--start-at", default=None, help="Start at step_id (e.g. 50_configure_zsh)")
    p.add_argument("--stop-after", default=None, help="Stop after step_id")
    p.add_argument("--force", action="store_true", help="Re-run steps even if marked completed")
    p.add_argument("--dry-run", action="store_true", default=None, help="Log actions without changing anything")

    args = p.parse_args(argv)

    try:
        run(
            config_path=args.config,
            state_path=args.state,
            log_path=args.log,
            start_at=args.start_at,
            stop_after=args.stop_after,
            force=args.force,
            dry_run=args.dry_run,
        )
    except KeyboardInterrupt:
        return 130
    except Exception:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
