"""Tests for command line parsing and the version string."""

from unittest.mock import MagicMock, patch

import pytest

from markpane import __main__ as cli
from markpane.config import EditorConfig
from markpane.version import get_version, get_version_string, welcome_caption


def test_parse_filename():
    options = cli.parse_args(["notes.md"])
    assert options['filename'] == "notes.md"
    assert options['renderer'] is None


def test_parse_options():
    options = cli.parse_args(["--renderer", "c", "--log-file", "/tmp/mp.log", "main.c"])
    assert options['renderer'] == "c"
    assert options['log_file'] == "/tmp/mp.log"
    assert options['filename'] == "main.c"


@pytest.mark.parametrize("args", [
    ["--renderer"],
    ["--renderer", "html"],
    ["--bogus"],
    ["a.md", "b.md"],
])
def test_parse_errors(args):
    with pytest.raises(ValueError):
        cli.parse_args(args)


def test_version_flag(capsys):
    with patch('sys.argv', ['markpane', '--version']):
        cli.main()
    assert capsys.readouterr().out.strip() == get_version_string()


def test_bad_arguments_exit_with_usage(capsys):
    with patch('sys.argv', ['markpane', '--bogus']):
        with pytest.raises(SystemExit) as exc:
            cli.main()
    assert exc.value.code == 2
    assert "usage:" in capsys.readouterr().err


def test_main_opens_file_and_runs():
    editor = MagicMock()
    with patch('sys.argv', ['markpane', '--renderer', 'markdown', 'notes.md']), \
         patch('markpane.editor.Editor', return_value=editor) as editor_class, \
         patch('markpane.config.load_config', return_value=EditorConfig()):
        cli.main()
    config = editor_class.call_args.kwargs['config']
    assert config.renderer == "markdown"
    editor.load_file.assert_called_once_with("notes.md")
    editor.run.assert_called_once()


def test_version_strings():
    assert get_version()
    assert get_version_string() == f"markpane {get_version()}"
    assert welcome_caption() == f"Markpane editor -- version {get_version()}"
