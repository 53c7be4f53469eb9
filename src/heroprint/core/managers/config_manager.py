# src/heroprint/core/managers/config_manager.py
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from heroprint.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off"}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _coerce(value: Any, like: Any) -> Any:
    """Converts `value` to the type of `like` (bool understands 'false'/'off')."""
    if isinstance(like, bool) and isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
        raise ValueError(f"'{value}' is not a boolean")
    return type(like)(value)


class ConfigManager:
    """
    Process-wide settings store.

    Layers, lowest first:
      1. settings.json shipped inside the heroprint package
      2. ~/.heroprint/settings.json (optional, deep-merged on top)
      3. in-memory changes made through set_nested()

    reset() drops layer 3 and re-reads the files.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._config = {}
            instance.reset()
            cls._instance = instance
        return cls._instance

    def get_all(self) -> Dict[str, Any]:
        return self._config

    def get_nested(self, key_path: str, default: Optional[Any] = None) -> Any:
        """Dotted lookup, e.g. get_nested('viewport.width', 1440)."""
        node: Any = self._config
        for part in key_path.split('.'):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return default if node is None else node

    def set_nested(self, key_path: str, value: Any) -> bool:
        """
        Changes one value in memory. When the key already holds a value the new
        one is converted to that type, so CLI strings like '1920' stay ints.
        Returns False when a segment of the path is not a dictionary.
        """
        *parents, leaf = key_path.split('.')
        target = self._config
        for part in parents:
            target = target.setdefault(part, {})
            if not isinstance(target, dict):
                logger.error("Cannot set '%s': '%s' holds a %s, not a section.",
                             key_path, part, type(target).__name__)
                return False

        current = target.get(leaf)
        if current is not None:
            try:
                value = _coerce(value, current)
            except (ValueError, TypeError):
                logger.warning("Keeping '%s' as given; it does not convert to %s.",
                               key_path, type(current).__name__)

        target[leaf] = value
        logger.info("Setting changed: %s = %r", key_path, value)
        return True

    def reset(self):
        """Rebuilds the configuration from the packaged and user settings files."""
        config: Dict[str, Any] = {}
        for label, path, required in self._sources():
            if not path.exists():
                if required:
                    logger.warning("%s settings not found at %s. Using empty config.", label, path)
                continue
            try:
                config = _deep_merge(config, self._read(path))
                logger.debug("Loaded %s settings from %s", label, path)
            except (OSError, ValueError) as e:
                # json.JSONDecodeError is a ValueError
                logger.error("Ignoring unreadable %s settings %s: %s", label, path, e)
        self._config = config

    @staticmethod
    def _sources() -> List[Tuple[str, Path, bool]]:
        return [
            ("default", PathUtils.get_default_settings_file(), True),
            ("user", PathUtils.get_user_settings_file(), False),
        ]

    @staticmethod
    def _read(path: Path) -> Dict[str, Any]:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{path} does not contain a JSON object")
        return data


config_manager = ConfigManager()
