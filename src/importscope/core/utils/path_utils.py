# src/importscope/core/utils/path_utils.py
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class PathUtils:
    """
    A central utility for reliably retrieving important package and user paths.
    """

    # --- Package specific paths

    @staticmethod
    def get_package_root() -> Path:
        """Returns the directory of the installed `importscope` package."""
        return Path(__file__).resolve().parent.parent.parent

    @staticmethod
    def get_settings_file() -> Path:
        return PathUtils.get_package_root() / "settings.json"

    # --- User specific paths ---

    @staticmethod
    def get_user_config_dir() -> Path:
        """
        Returns the path to the user's .importscope config directory.
        (e.g., ~/.importscope/)
        """
        return Path.home() / ".importscope"

    @staticmethod
    def get_user_settings_file() -> Path:
        """Optional per-user overrides, merged over the packaged settings."""
        return PathUtils.get_user_config_dir() / "settings.json"

    # --- Helper methods ---

    @staticmethod
    def to_file_url(path: str) -> str:
        """Returns the absolute file:// URL of a local path."""
        return Path(path).expanduser().resolve().as_uri()
