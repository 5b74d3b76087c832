"""Tests for reading and writing documents."""

import os
import tempfile
from unittest.mock import patch

import pytest

from markpane.storage import read_lines, serialize, write_lines


@pytest.fixture
def temp_dir():
    with tempfile.TemporaryDirectory() as d:
        yield d


def write_bytes(path, data):
    with open(path, 'wb') as f:
        f.write(data)


def read_bytes(path):
    with open(path, 'rb') as f:
        return f.read()


def test_serialize_terminates_every_line():
    assert serialize(["a", "", "b"]) == b"a\n\nb\n"
    assert serialize([]) == b""


def test_save_load_round_trip(temp_dir):
    path = os.path.join(temp_dir, "doc.md")
    lines = ["# Title", "", "\tindented", "last"]
    written = write_lines(path, lines)
    assert written == len(b"# Title\n\n\tindented\nlast\n")
    assert read_lines(path).lines == lines


def test_load_strips_crlf(temp_dir):
    path = os.path.join(temp_dir, "dos.txt")
    write_bytes(path, b"one\r\ntwo\r\n")
    assert read_lines(path).lines == ["one", "two"]


def test_load_without_trailing_newline(temp_dir):
    path = os.path.join(temp_dir, "partial.txt")
    write_bytes(path, b"one\ntwo")
    assert read_lines(path).lines == ["one", "two"]


def test_lone_carriage_return_is_not_a_line_break(temp_dir):
    path = os.path.join(temp_dir, "cr.txt")
    write_bytes(path, b"a\rb\n")
    assert read_lines(path).lines == ["a\rb"]


def test_empty_file(temp_dir):
    path = os.path.join(temp_dir, "empty.txt")
    write_bytes(path, b"")
    result = read_lines(path)
    assert result.lines == []
    assert not result.truncated


def test_long_lines_are_truncated(temp_dir):
    path = os.path.join(temp_dir, "long.txt")
    write_bytes(path, b"short\n" + b"x" * 25 + b"\nafter\n")
    result = read_lines(path, max_line_length=10)
    assert result.lines == ["short", "x" * 10, "after"]
    assert result.truncated_rows == [1]
    assert result.truncated


def test_invalid_utf8_survives_round_trip(temp_dir):
    path = os.path.join(temp_dir, "bytes.bin")
    original = b"caf\xe9\n\xff\xfe\n"
    write_bytes(path, original)
    lines = read_lines(path).lines
    write_lines(path, lines)
    assert read_bytes(path) == original


def test_missing_file_raises(temp_dir):
    with pytest.raises(FileNotFoundError):
        read_lines(os.path.join(temp_dir, "nope.txt"))


def test_failed_save_keeps_original_and_removes_temp(temp_dir):
    path = os.path.join(temp_dir, "keep.txt")
    write_bytes(path, b"original\n")
    with patch('markpane.storage.os.replace', side_effect=OSError("boom")):
        with pytest.raises(OSError):
            write_lines(path, ["new"])
    assert read_bytes(path) == b"original\n"
    assert os.listdir(temp_dir) == ["keep.txt"]
