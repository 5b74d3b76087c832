"""Tests for the bounded styled output buffer."""

from markpane.styles import (
    Accent, EndOfRow, Reset, Style, StyleOff, StyleOn, StyledBuffer, accent,
)


def test_text_is_clipped_at_width():
    out = StyledBuffer(5)
    out.text("abc")
    out.text("defgh")
    assert out.tokens == ["abcde"]
    assert out.used == 5
    assert out.exhausted


def test_markers_dropped_once_exhausted():
    out = StyledBuffer(2)
    out.text("ab")
    out.on(StyleOn(Style.BOLD))
    out.off(Style.BOLD)
    assert out.tokens == ["ab"]


def test_close_resets_open_styles_even_when_exhausted():
    out = StyledBuffer(3)
    out.on(StyleOn(Style.ITALIC))
    out.text("abcdef")
    out.close()
    assert out.tokens == [StyleOn(Style.ITALIC), "abc", Reset()]


def test_close_without_open_styles_adds_nothing():
    out = StyledBuffer(10)
    out.text("x")
    out.close()
    assert out.tokens == ["x"]


def test_pad_to_absolute_column():
    out = StyledBuffer(10)
    out.text("ab")
    out.pad(5)
    assert out.plain() == "ab   "
    out.pad(3)
    assert out.used == 5


def test_unbounded_buffer():
    out = StyledBuffer()
    out.text("x" * 500)
    assert not out.exhausted
    assert out.remaining is None


def test_extend_respects_outer_bound_and_closes():
    inner = StyledBuffer(20)
    inner.on(accent(Accent.KEYWORD))
    inner.text("while")
    outer = StyledBuffer(8)
    outer.text("abcde")
    outer.extend(inner)
    assert outer.plain() == "abcdewhi"
    assert outer.tokens[-1] == Reset()


def test_non_style_markers_always_appended():
    out = StyledBuffer(1)
    out.text("abc")
    out.marker(EndOfRow())
    assert out.tokens == ["a", EndOfRow()]


def test_off_updates_open_styles():
    out = StyledBuffer(10)
    out.on(StyleOn(Style.BOLD))
    assert out.open_styles == frozenset({Style.BOLD})
    out.off(Style.BOLD)
    assert out.open_styles == frozenset()
    assert out.tokens[-1] == StyleOff(Style.BOLD)
