# src/heroprint/core/utils/path_utils.py
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class PathUtils:
    """
    A central utility for reliably retrieving package and user paths.
    """

    # --- Package specific paths

    @staticmethod
    def get_package_root() -> Path:
        """Returns the directory of the installed `heroprint` package."""
        return Path(__file__).resolve().parents[2]

    @staticmethod
    def get_default_settings_file() -> Path:
        return PathUtils.get_package_root() / "settings.json"

    # --- User specific paths ---

    @staticmethod
    def get_user_config_dir() -> Path:
        """
        Returns the path to the user's .heroprint config directory.
        (e.g., ~/.heroprint/)
        """
        return Path.home() / ".heroprint"

    @staticmethod
    def get_user_settings_file() -> Path:
        """Optional per-user overrides (e.g., ~/.heroprint/settings.json)."""
        return PathUtils.get_user_config_dir() / "settings.json"
