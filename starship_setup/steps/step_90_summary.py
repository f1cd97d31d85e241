from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from ..setup_config import SetupConfig

logger = logging.getLogger(__name__)


class SummaryStep:
    step_id = "90_summary"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = SetupConfig(raw=state.get("config") or {})

        logger.info("Installation complete")
        logger.info("Next steps: run 'source %s' or restart your terminal", cfg.zshrc_path)

        if not Path(cfg.starship_config_path).exists():
            logger.warning("No Starship config yet; place your starship.toml at %s", cfg.starship_config_path)
        return state
