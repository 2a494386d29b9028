# src/pagelens/core/managers/config_manager.py
import json
import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError

from analyzer.config import DEFAULT_CONFIG, AnalyzerConfig
from pagelens.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off"}


def _cast_like(original: Any, value: Any) -> Any:
    """Casts a (string) value to the type of the value it replaces."""
    if not isinstance(value, str):
        return value
    if isinstance(original, bool):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
        raise ValueError(f"not a boolean: {value!r}")
    if isinstance(original, (dict, list)):
        parsed = json.loads(value)
        if not isinstance(parsed, type(original)):
            raise TypeError(f"expected {type(original).__name__}")
        return parsed
    return type(original)(value)


class ConfigManager:
    """
    A singleton class to manage the runtime settings of the pagelens shell.
    It loads the saved (or shipped default) settings, applies changes in memory
    and saves them back to settings.json on request.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ConfigManager, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        self._config: Dict[str, Any] = {}
        self.load()
        logger.debug("ConfigManager initialized.")

    def get_all(self) -> Dict[str, Any]:
        return self._config

    def get_nested(self, key_path: str, default: Optional[Any] = None) -> Any:
        """
        Safely retrieves a nested value, e.g. 'analysis.deadline_seconds'.
        """
        value = self._config
        for key in key_path.split('.'):
            if isinstance(value, dict):
                value = value.get(key)
            else:
                return default
        return value if value is not None else default

    def set_nested(self, key_path: str, value: Any) -> bool:
        """
        Sets a nested value in memory, keeping the type of the value it replaces.
        e.g. ('analysis.max_workers', '8') stores the int 8.
        """
        keys = key_path.split('.')
        d = self._config
        for key in keys[:-1]:
            d = d.setdefault(key, {})
            if not isinstance(d, dict):
                logger.error("Cannot set value: '%s' is not a dictionary.", key)
                return False

        original_value = d.get(keys[-1])
        if original_value is not None:
            try:
                value = _cast_like(original_value, value)
            except (ValueError, TypeError) as e:
                logger.error(
                    "Could not cast new value for '%s' to type %s: %s",
                    key_path, type(original_value).__name__, e
                )
                return False

        d[keys[-1]] = value
        logger.info("Configuration updated: %s = %s", key_path, value)
        return True

    def load(self):
        """Loads settings.json, or the shipped defaults when nothing was saved."""
        config_path = PathUtils.get_settings_file()
        if not config_path.exists():
            config_path = PathUtils.get_default_settings_file()
        if not config_path.exists():
            logger.warning("No settings found at %s. Using empty config.", config_path)
            self._config = {}
            return
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                self._config = json.load(f)
            logger.debug("Configuration has been (re)loaded from %s.", config_path)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to load %s: %s", config_path.name, e, exc_info=True)
            self._config = {}

    def save(self) -> bool:
        """Writes the in-memory configuration to settings.json."""
        config_path = PathUtils.get_settings_file()
        try:
            with open(config_path, "w", encoding="utf-8") as f:
                json.dump(self._config, f, indent=2)
                f.write("\n")
        except OSError as e:
            logger.error("Failed to save settings to %s: %s", config_path, e)
            return False
        logger.info("Configuration saved to %s.", config_path)
        return True

    def reset(self) -> bool:
        """Discards saved changes and reloads the shipped defaults."""
        config_path = PathUtils.get_settings_file()
        try:
            config_path.unlink(missing_ok=True)
        except OSError as e:
            logger.error("Failed to remove %s: %s", config_path, e)
            return False
        self.load()
        return True

    def analyzer_config(self) -> AnalyzerConfig:
        """
        The analyzer constants with the `analyzer` block of the settings
        applied as overrides. Invalid overrides fall back to the defaults.
        """
        overrides = self.get_nested("analyzer", {})
        if not isinstance(overrides, dict) or not overrides:
            return DEFAULT_CONFIG
        try:
            return AnalyzerConfig.from_overrides(overrides)
        except ValidationError as e:
            logger.error("Invalid analyzer overrides in settings; using defaults. %s", e)
            return DEFAULT_CONFIG


config_manager = ConfigManager()
