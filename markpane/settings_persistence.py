"""Per-document settings that survive restarts.

Settings are stored in a JSON file in the user's config directory, indexed by
the absolute path of the document. Markpane remembers the layout mode each
document was last saved with.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .config import APP_NAME

logger = logging.getLogger(__name__)

LAYOUT_KEY = "layout_mode"


class SettingsPersistence:
    """Manages persistent storage of per-document settings."""

    def __init__(self, config_dir: Optional[Path] = None):
        self._config_dir = Path(config_dir) if config_dir else Path(platformdirs.user_config_dir(APP_NAME))
        self._settings_file = self._config_dir / "settings.json"
        self._settings_cache: Optional[Dict[str, Dict[str, Any]]] = None

    def _load_all_settings(self) -> Dict[str, Dict[str, Any]]:
        if self._settings_cache is not None:
            return self._settings_cache
        if not self._settings_file.exists():
            self._settings_cache = {}
            return self._settings_cache
        try:
            with open(self._settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not load settings from {self._settings_file}: {e}")
            data = {}
        if not isinstance(data, dict):
            logger.warning("Settings file has invalid format (not a dict), ignoring")
            data = {}
        self._settings_cache = data
        return data

    def _save_all_settings(self, settings: Dict[str, Dict[str, Any]]) -> bool:
        """Write all settings atomically (temp file + rename)."""
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Could not create config directory {self._config_dir}: {e}")
            return False

        temp_file = self._settings_file.with_suffix('.tmp')
        try:
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(settings, f, indent=2)
            temp_file.replace(self._settings_file)
        except OSError as e:
            logger.warning(f"Could not save settings to {self._settings_file}: {e}")
            try:
                if temp_file.exists():
                    temp_file.unlink()
            except OSError:
                pass
            return False
        self._settings_cache = settings
        return True

    def load_settings(self, document_path: Optional[str]) -> Dict[str, Any]:
        """Settings for ``document_path``; empty when unknown or None."""
        if document_path is None:
            return {}
        doc_settings = self._load_all_settings().get(os.path.abspath(document_path), {})
        if not isinstance(doc_settings, dict):
            logger.warning(f"Settings for {document_path} are not a dict, ignoring")
            return {}
        return doc_settings.copy()

    def save_settings(self, document_path: Optional[str], settings: Dict[str, Any]) -> bool:
        if document_path is None:
            return False
        all_settings = dict(self._load_all_settings())
        all_settings[os.path.abspath(document_path)] = settings
        return self._save_all_settings(all_settings)

    def clear_cache(self) -> None:
        self._settings_cache = None


_persistence: Optional[SettingsPersistence] = None


def get_persistence() -> SettingsPersistence:
    """The process-wide persistence instance used by the CLI."""
    global _persistence
    if _persistence is None:
        _persistence = SettingsPersistence()
    return _persistence
