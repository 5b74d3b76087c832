"""Editor configuration loaded from the user's config directory.

The file is ``config.json`` in the platform config directory for markpane.
Missing files mean defaults; unreadable files and invalid values are logged
and ignored so a bad config never stops the editor from starting.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .constants import EditorConstants

logger = logging.getLogger(__name__)

APP_NAME = "markpane"
CONFIG_FILENAME = "config.json"

RENDERER_CHOICES = ("auto", "markdown", "c")
LAYOUT_CHOICES = ("edit", "split", "preview")


@dataclass(frozen=True)
class EditorConfig:
    tab_width: int = EditorConstants.TAB_WIDTH
    max_line_length: int = EditorConstants.MAX_LINE_LENGTH
    status_timeout: float = EditorConstants.STATUS_MESSAGE_TIMEOUT
    quit_confirmations: int = EditorConstants.QUIT_CONFIRMATIONS
    renderer: str = "auto"
    default_layout: str = "edit"

    def with_overrides(self, **overrides: Any) -> "EditorConfig":
        """Return a copy with the valid, non-None overrides applied."""
        valid = {k: v for k, v in overrides.items()
                 if v is not None and validate_setting(k, v)}
        return replace(self, **valid)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EditorConfig":
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            if key not in known:
                logger.warning(f"Unknown config key {key!r}, ignoring")
                continue
            if not validate_setting(key, value):
                logger.warning(f"Invalid value {value!r} for {key!r}, using default")
                continue
            values[key] = value
        return cls(**values)


def validate_setting(key: str, value: Any) -> bool:
    """Check a single config value against its expected type and range."""
    if key == 'tab_width':
        return isinstance(value, int) and not isinstance(value, bool) and 1 <= value <= 16
    if key == 'max_line_length':
        return isinstance(value, int) and not isinstance(value, bool) and value >= 1
    if key == 'status_timeout':
        return isinstance(value, (int, float)) and not isinstance(value, bool) and value >= 0
    if key == 'quit_confirmations':
        return isinstance(value, int) and not isinstance(value, bool) and value >= 0
    if key == 'renderer':
        return value in RENDERER_CHOICES
    if key == 'default_layout':
        return value in LAYOUT_CHOICES
    return False


def default_config_path() -> Path:
    return Path(platformdirs.user_config_dir(APP_NAME)) / CONFIG_FILENAME


def load_config(path: Optional[Path] = None) -> EditorConfig:
    """Read the config file, falling back to defaults on any problem."""
    path = Path(path) if path is not None else default_config_path()
    if not path.exists():
        return EditorConfig()
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Could not load config from {path}: {e}")
        return EditorConfig()
    if not isinstance(data, dict):
        logger.warning("Config file has invalid format (not a dict), ignoring")
        return EditorConfig()
    return EditorConfig.from_dict(data)
