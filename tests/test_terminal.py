"""Tests for translating marker streams into terminal sequences."""

from unittest.mock import MagicMock

import pytest

from markpane.styles import (
    Accent, ClearLine, ClearScreen, EndOfRow, HideCursor, MoveCursor, Reset,
    ShowCursor, Style, StyleOff, StyleOn, accent, header,
)
from markpane.terminal import TerminalInterface


@pytest.fixture
def terminal():
    term = MagicMock()
    term.normal = '<N>'
    term.bold = '<B>'
    term.italic = '<I>'
    term.reverse = '<R>'
    term.clear_eol = '<EOL>'
    term.home = '<HOME>'
    term.clear = '<CLR>'
    term.hide_cursor = '<HIDE>'
    term.normal_cursor = '<SHOW>'
    term.bold_underline_magenta = '<H1>'
    term.bold_magenta = '<H2>'
    term.yellow = '<KW>'
    term.move_yx.side_effect = lambda y, x: f'<{y},{x}>'
    term.width = 100
    term.height = 30
    return TerminalInterface(term)


def test_text_passes_through(terminal):
    assert terminal.translate(["hello", " world"]) == "hello world"


def test_style_on_and_reset(terminal):
    assert terminal.translate([StyleOn(Style.BOLD), "b", Reset()]) == "<B>b<N>"


def test_style_off_reapplies_remaining_styles(terminal):
    tokens = [StyleOn(Style.BOLD), StyleOn(Style.ITALIC), "x", StyleOff(Style.ITALIC), "y"]
    assert terminal.translate(tokens) == "<B><I>x<N><B>y"


def test_header_levels(terminal):
    assert terminal.translate([header(1)]) == "<H1>"
    assert terminal.translate([header(2)]) == "<H2>"


def test_accent_colour(terminal):
    assert terminal.translate([accent(Accent.KEYWORD), "if"]) == "<KW>if"
    assert terminal.translate([accent(Accent.STATUS_BAR)]) == "<R>"


def test_screen_markers(terminal):
    tokens = [HideCursor(), ClearScreen(), MoveCursor(2, 5), "x", ClearLine(), EndOfRow(), ShowCursor()]
    assert terminal.translate(tokens) == "<HIDE><HOME><CLR><2,5>x<EOL>\r\n<SHOW>"


def test_dimensions(terminal):
    assert terminal.width == 100
    assert terminal.height == 30


def test_get_key_without_input_returns_none(terminal):
    assert terminal.get_key(timeout=0) is None
