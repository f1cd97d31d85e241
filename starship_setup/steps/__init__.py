from .step_10_detect_platform import DetectPlatformStep
from .step_20_install_starship import InstallStarshipStep
from .step_30_install_tools import InstallToolsStep
from .step_40_fetch_starship_config import FetchStarshipConfigStep
from .step_50_configure_zsh import ConfigureZshStep
from .step_60_terminal_settings import TerminalSettingsStep
from .step_70_default_shell import DefaultShellStep
from .step_90_summary import SummaryStep

__all__ = [
    "DetectPlatformStep",
    "InstallStarshipStep",
    "InstallToolsStep",
    "FetchStarshipConfigStep",
    "ConfigureZshStep",
    "TerminalSettingsStep",
    "DefaultShellStep",
    "SummaryStep",
]
