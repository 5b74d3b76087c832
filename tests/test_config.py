"""Tests for the editor configuration file."""

import json
import logging
import tempfile
from pathlib import Path

import pytest

from markpane.config import EditorConfig, load_config, validate_setting


@pytest.fixture
def config_path():
    with tempfile.TemporaryDirectory() as d:
        yield Path(d) / "config.json"


def write_config(path, data):
    with open(path, 'w', encoding='utf-8') as f:
        f.write(data if isinstance(data, str) else json.dumps(data))


def test_defaults():
    config = EditorConfig()
    assert config.tab_width == 4
    assert config.max_line_length == 1000
    assert config.status_timeout == 5.0
    assert config.quit_confirmations == 1
    assert config.renderer == "auto"
    assert config.default_layout == "edit"


def test_missing_file_gives_defaults(config_path):
    assert load_config(config_path) == EditorConfig()


def test_values_are_read(config_path):
    write_config(config_path, {"tab_width": 8, "renderer": "c", "default_layout": "split"})
    config = load_config(config_path)
    assert config.tab_width == 8
    assert config.renderer == "c"
    assert config.default_layout == "split"


def test_invalid_values_fall_back(config_path, caplog):
    write_config(config_path, {"tab_width": 0, "renderer": "html", "quit_confirmations": True})
    with caplog.at_level(logging.WARNING, logger="markpane.config"):
        config = load_config(config_path)
    assert config == EditorConfig()
    assert "tab_width" in caplog.text


def test_unknown_keys_ignored(config_path):
    write_config(config_path, {"colour": "blue", "tab_width": 2})
    assert load_config(config_path).tab_width == 2


def test_corrupt_file_gives_defaults(config_path, caplog):
    write_config(config_path, "{not json")
    with caplog.at_level(logging.WARNING, logger="markpane.config"):
        assert load_config(config_path) == EditorConfig()
    assert "Could not load config" in caplog.text


def test_non_dict_file_gives_defaults(config_path):
    write_config(config_path, [1, 2])
    assert load_config(config_path) == EditorConfig()


def test_with_overrides_skips_none_and_invalid():
    config = EditorConfig().with_overrides(renderer="markdown", tab_width=None, default_layout="grid")
    assert config.renderer == "markdown"
    assert config.tab_width == 4
    assert config.default_layout == "edit"


def test_validate_setting():
    assert validate_setting("status_timeout", 2.5)
    assert not validate_setting("status_timeout", -1)
    assert not validate_setting("max_line_length", "100")
    assert not validate_setting("nonsense", 1)
