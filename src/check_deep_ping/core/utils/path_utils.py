# src/check_deep_ping/core/utils/path_utils.py
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class PathUtils:
    """
    A central utility for reliably retrieving important package paths.
    """

    @staticmethod
    def get_shell_package_root() -> Path:
        """
        Returns the absolute path of the check_deep_ping package directory.
        (e.g., /path/to/src/check_deep_ping)
        """
        return Path(__file__).resolve().parents[2]

    @staticmethod
    def get_settings_file() -> Path:
        """Returns the path to the bundled settings.json."""
        return PathUtils.get_shell_package_root() / "settings.json"
