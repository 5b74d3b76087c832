"""Tests for tab expansion, column mapping and the viewport."""

from markpane.model import Document, Line, CursorPosition, Viewport, compute_viewport, expand_tabs


def test_expand_tabs_to_next_stop():
    assert expand_tabs("\tx", 4) == "    x"
    assert expand_tabs("ab\tx", 4) == "ab  x"
    assert expand_tabs("abc\tx", 4) == "abc x"
    assert expand_tabs("abcd\tx", 4) == "abcd    x"


def test_expand_tabs_length_bound():
    for raw in ["\t\t", "a\tb\tc", "abc\t", "\tabc\t\t"]:
        tabs = raw.count("\t")
        assert len(expand_tabs(raw, 4)) <= len(raw) + tabs * 3


def test_expand_tabs_bound_is_exact_on_tab_stops():
    raw = "\t\tx"
    assert len(expand_tabs(raw, 4)) == len(raw) + 2 * 3


def test_expand_tabs_is_idempotent():
    once = expand_tabs("a\tb\t\tc", 4)
    assert expand_tabs(once, 4) == once


def test_expand_tabs_respects_tab_width():
    assert expand_tabs("\tx", 8) == "        x"


def test_raw_to_render_column():
    line = Line("a\tb", 4)
    assert line.raw_to_render_column(0) == 0
    assert line.raw_to_render_column(1) == 1
    assert line.raw_to_render_column(2) == 4
    assert line.raw_to_render_column(3) == 5


def test_raw_to_render_column_is_monotonic():
    line = Line("\ta\t\tbc\td", 4)
    columns = [line.raw_to_render_column(i) for i in range(len(line) + 1)]
    assert columns == sorted(columns)
    assert columns[-1] == len(line.rendered)


def test_render_to_raw_column_inverts_mapping():
    line = Line("a\tb", 4)
    assert line.render_to_raw_column(0) == 0
    assert line.render_to_raw_column(2) == 1
    assert line.render_to_raw_column(4) == 2
    assert line.render_to_raw_column(99) == 3


def test_viewport_snaps_down_to_bottom_edge():
    assert compute_viewport(30, 0, 10, 80, Viewport(0, 0)) == Viewport(21, 0)


def test_viewport_snaps_up_to_top_edge():
    assert compute_viewport(5, 0, 10, 80, Viewport(20, 0)) == Viewport(5, 0)


def test_viewport_unchanged_when_cursor_visible():
    assert compute_viewport(12, 3, 10, 80, Viewport(8, 0)) == Viewport(8, 0)


def test_viewport_horizontal_snap():
    assert compute_viewport(0, 100, 10, 80, Viewport(0, 0)) == Viewport(0, 21)
    assert compute_viewport(0, 2, 10, 80, Viewport(0, 21)) == Viewport(0, 2)


def test_scroll_uses_render_column():
    doc = Document.from_lines(["\t\tx"], tab_width=4)
    doc.cursor = CursorPosition(0, 2)
    doc.scroll(10, 5)
    assert doc.render_column == 8
    assert doc.col_offset == 4


def test_scroll_on_past_end_row():
    doc = Document.from_lines(["a"])
    doc.cursor = CursorPosition(1, 0)
    doc.scroll(10, 80)
    assert doc.render_column == 0
    assert (doc.row_offset, doc.col_offset) == (0, 0)
