"""Tests for the line store operations on Document."""

from markpane.model import Document, Line, CursorPosition


def test_line_capacity_grows_by_doubling():
    line = Line("")
    assert line.capacity == 1
    line.insert(0, "a")
    assert line.capacity == 4
    for ch in "bcd":
        line.insert(len(line), ch)
    assert line.raw == "abcd"
    assert line.capacity == 8
    assert line.capacity >= len(line) + 1


def test_line_capacity_never_shrinks():
    line = Line("hello world")
    capacity = line.capacity
    line.truncate(2)
    assert line.raw == "he"
    assert line.capacity == capacity


def test_from_lines_is_clean():
    doc = Document.from_lines(["a", "b"])
    assert doc.num_lines == 2
    assert doc.dirty is False


def test_insert_line_clamps_position():
    doc = Document.from_lines(["a", "b"])
    doc.insert_line(99, "c")
    doc.insert_line(-5, "z")
    assert doc.texts() == ["z", "a", "b", "c"]
    assert doc.dirty is True


def test_delete_line_on_empty_document_is_noop():
    doc = Document()
    doc.delete_line(0)
    assert doc.num_lines == 0
    assert doc.dirty is False


def test_insert_char_on_empty_document_appends_line():
    doc = Document()
    doc.insert_char(0, 0, "x")
    assert doc.texts() == ["x"]
    assert doc.dirty is True


def test_insert_char_clamps_column():
    doc = Document.from_lines(["abc"])
    doc.insert_char(0, 100, "!")
    doc.insert_char(0, -3, "?")
    assert doc.texts() == ["?abc!"]


def test_delete_char_clamps_column():
    doc = Document.from_lines(["abc"])
    doc.delete_char(0, 10)
    assert doc.texts() == ["ab"]


def test_delete_char_on_empty_line_does_not_dirty():
    doc = Document.from_lines([""])
    doc.delete_char(0, 0)
    assert doc.texts() == [""]
    assert doc.dirty is False


def test_append_text():
    doc = Document.from_lines(["foo"])
    doc.append_text(0, "bar")
    assert doc.texts() == ["foobar"]
    assert doc.lines[0].rendered == "foobar"


def test_split_line_moves_suffix_down():
    doc = Document.from_lines(["hello world", "next"])
    doc.split_line(0, 5)
    assert doc.texts() == ["hello", " world", "next"]


def test_merge_with_previous_returns_joint():
    doc = Document.from_lines(["foo", "bar"])
    joint = doc.merge_with_previous(1)
    assert doc.texts() == ["foobar"]
    assert joint == CursorPosition(0, 3)


def test_merge_with_previous_at_first_row_is_noop():
    doc = Document.from_lines(["foo", "bar"])
    joint = doc.merge_with_previous(0)
    assert doc.texts() == ["foo", "bar"]
    assert joint == CursorPosition(0, 0)
    assert doc.dirty is False


def test_mutation_updates_render_text():
    doc = Document.from_lines(["a"], tab_width=4)
    doc.insert_char(0, 0, "\t")
    assert doc.lines[0].rendered == "    a"


def test_clamp_cursor_past_end_moves_to_last_line_end():
    doc = Document.from_lines(["one", "three"])
    doc.cursor = CursorPosition(5, 0)
    doc.clamp_cursor()
    assert doc.cursor == CursorPosition(1, 5)


def test_clamp_cursor_column_to_row_length():
    doc = Document.from_lines(["ab", "abcdef"])
    doc.cursor = CursorPosition(0, 9)
    doc.clamp_cursor()
    assert doc.cursor == CursorPosition(0, 2)


def test_clamp_cursor_on_empty_document():
    doc = Document()
    doc.cursor = CursorPosition(3, 3)
    doc.clamp_cursor()
    assert doc.cursor == CursorPosition(0, 0)
