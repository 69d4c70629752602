# src/importscope/core/managers/config_manager.py
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from importscope.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


class ConfigManager:
    """
    A singleton class to manage the application's configuration.
    It loads settings from the packaged settings.json, merges the user's
    ~/.importscope/settings.json over it and allows in-memory modifications.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ConfigManager, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        """Loads the configuration from the file."""
        self._config: Dict[str, Any] = {}
        self.reset()
        logger.debug("ConfigManager initialized.")

    def get_nested(self, key_path: str, default: Optional[Any] = None) -> Any:
        """
        Safely retrieves a nested value from the configuration.
        e.g., 'loader.timeout'.
        """
        keys = key_path.split('.')
        value = self._config
        for key in keys:
            if isinstance(value, dict):
                value = value.get(key)
            else:
                return default
        return value if value is not None else default

    def set_nested(self, key_path: str, value: Any) -> bool:
        """
        Sets a nested value in the in-memory configuration.
        e.g., 'debug.level', 'INFO'
        """
        keys = key_path.split('.')
        d = self._config
        # Navigate to the second-to-last dictionary
        for key in keys[:-1]:
            d = d.setdefault(key, {})
            if not isinstance(d, dict):
                logger.error("Cannot set value: '%s' is not a dictionary.", key)
                return False

        # Cast to the type of the value being replaced
        original_value = d.get(keys[-1])
        if original_value is not None and not isinstance(original_value, (dict, list)):
            try:
                if isinstance(original_value, bool) and isinstance(value, str):
                    value = value.strip().lower() in ("1", "true", "yes", "on")
                else:
                    value = type(original_value)(value)
            except (ValueError, TypeError):
                logger.warning(
                    "Could not cast new value for '%s' to type %s. Storing as string.",
                    key_path, type(original_value).__name__
                )

        d[keys[-1]] = value
        logger.info("Configuration updated: %s = %s", key_path, value)
        return True

    def reset(self):
        """Resets the in-memory configuration from the settings files."""
        self._config = self._read(PathUtils.get_settings_file())
        user_settings = PathUtils.get_user_settings_file()
        if user_settings.exists():
            _deep_merge(self._config, self._read(user_settings))
        logger.debug("Configuration has been (re)loaded.")

    @staticmethod
    def _read(config_path: Path) -> Dict[str, Any]:
        if not config_path.exists():
            logger.warning("settings.json not found at %s. Using empty config.", config_path)
            return {}
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to load %s: %s", config_path, e, exc_info=True)
            return {}


# The global singleton instance that the entire application will use.
config_manager = ConfigManager()
