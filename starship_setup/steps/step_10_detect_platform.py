from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.platform_detect import detect_platform

logger = logging.getLogger(__name__)


class DetectPlatformStep:
    step_id = "10_detect_platform"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        info = detect_platform()
        state["platform"] = info
        logger.info("Running in %s", "WSL" if info["wsl"] else "Linux")
        return state
