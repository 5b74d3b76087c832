from dataclasses import dataclass
from typing import Iterable, NamedTuple, Optional

from .constants import EditorConstants
from .layout import LayoutMode


@dataclass
class CursorPosition:
    row: int = 0
    column: int = 0


class Viewport(NamedTuple):
    row_offset: int
    col_offset: int


def expand_tabs(raw: str, tab_width: int = EditorConstants.TAB_WIDTH) -> str:
    """Expand tabs to the next multiple of ``tab_width``.

    A tab always produces at least one space.
    """
    out = []
    col = 0
    for ch in raw:
        if ch == '\t':
            out.append(' ')
            col += 1
            while col % tab_width != 0:
                out.append(' ')
                col += 1
        else:
            out.append(ch)
            col += 1
    return ''.join(out)


def compute_viewport(cursor_row: int, render_column: int, screen_rows: int,
                     screen_cols: int, current: Viewport) -> Viewport:
    """Snap the offsets so the cursor is visible.

    Each axis moves only as far as needed to bring the cursor to the nearest
    edge of the screen; the view is never re-centered.
    """
    row_offset, col_offset = current
    if cursor_row < row_offset:
        row_offset = cursor_row
    if cursor_row >= row_offset + screen_rows:
        row_offset = cursor_row - screen_rows + 1
    if render_column < col_offset:
        col_offset = render_column
    if render_column >= col_offset + screen_cols:
        col_offset = render_column - screen_cols + 1
    return Viewport(max(0, row_offset), max(0, col_offset))


class Line:
    """One row of the document: raw text plus its tab-expanded display form."""

    MIN_CAPACITY = 4

    def __init__(self, raw: str = "", tab_width: int = EditorConstants.TAB_WIDTH):
        self.tab_width = tab_width
        self._raw = raw
        self.capacity = len(raw) + 1
        self.rendered = ""
        self._update_render()

    def __repr__(self):
        return f"Line({self._raw!r})"

    def __len__(self):
        return len(self._raw)

    @property
    def raw(self) -> str:
        return self._raw

    def _set_raw(self, raw: str) -> None:
        needed = len(raw) + 1
        if needed > self.capacity:
            capacity = max(self.capacity, self.MIN_CAPACITY)
            while capacity < needed:
                capacity *= 2
            self.capacity = capacity
        self._raw = raw
        self._update_render()

    def _update_render(self) -> None:
        self.rendered = expand_tabs(self._raw, self.tab_width)

    def insert(self, at: int, ch: str) -> None:
        at = max(0, min(at, len(self._raw)))
        self._set_raw(self._raw[:at] + ch + self._raw[at:])

    def delete(self, at: int) -> None:
        if 0 <= at < len(self._raw):
            self._set_raw(self._raw[:at] + self._raw[at + 1:])

    def append(self, text: str) -> None:
        self._set_raw(self._raw + text)

    def truncate(self, at: int) -> str:
        """Cut the line at ``at`` and return the removed suffix."""
        at = max(0, min(at, len(self._raw)))
        suffix = self._raw[at:]
        self._set_raw(self._raw[:at])
        return suffix

    def raw_to_render_column(self, raw_col: int) -> int:
        rx = 0
        for ch in self._raw[:max(0, raw_col)]:
            if ch == '\t':
                rx += (self.tab_width - 1) - (rx % self.tab_width)
            rx += 1
        return rx

    def render_to_raw_column(self, render_col: int) -> int:
        rx = 0
        for cx, ch in enumerate(self._raw):
            if ch == '\t':
                rx += (self.tab_width - 1) - (rx % self.tab_width)
            rx += 1
            if rx > render_col:
                return cx
        return len(self._raw)


class Document:
    """The edited text and everything the screen needs to show it.

    Row indices captured before ``insert_line``, ``delete_line``,
    ``split_line`` or ``merge_with_previous`` are invalid afterwards if they
    point past the mutated row.
    """

    def __init__(self, tab_width: int = EditorConstants.TAB_WIDTH):
        self.tab_width = tab_width
        self.lines: list[Line] = []
        self.cursor = CursorPosition()
        self.render_column = 0
        self.row_offset = 0
        self.col_offset = 0
        self.dirty = False
        self.filename: Optional[str] = None
        self.layout_mode = LayoutMode.EDIT_ONLY
        self.status_message = ""
        self.status_time = 0.0

    @classmethod
    def from_lines(cls, texts: Iterable[str],
                   tab_width: int = EditorConstants.TAB_WIDTH) -> "Document":
        doc = cls(tab_width=tab_width)
        doc.lines = [Line(t, tab_width) for t in texts]
        return doc

    @property
    def num_lines(self) -> int:
        return len(self.lines)

    def texts(self) -> list[str]:
        return [line.raw for line in self.lines]

    def current_line(self) -> Optional[Line]:
        if 0 <= self.cursor.row < len(self.lines):
            return self.lines[self.cursor.row]
        return None

    def _clamp_row(self, row: int) -> int:
        return max(0, min(row, len(self.lines) - 1))

    # --- Line store ---

    def insert_line(self, at: int, text: str = "") -> Line:
        at = max(0, min(at, len(self.lines)))
        line = Line(text, self.tab_width)
        self.lines.insert(at, line)
        self.dirty = True
        return line

    def delete_line(self, at: int) -> None:
        if not self.lines:
            return
        del self.lines[self._clamp_row(at)]
        self.dirty = True

    def insert_char(self, row: int, col: int, ch: str) -> None:
        if not self.lines:
            self.insert_line(0)
        self.lines[self._clamp_row(row)].insert(col, ch)
        self.dirty = True

    def delete_char(self, row: int, col: int) -> None:
        if not self.lines:
            return
        line = self.lines[self._clamp_row(row)]
        if not len(line):
            return
        line.delete(max(0, min(col, len(line) - 1)))
        self.dirty = True

    def append_text(self, row: int, text: str) -> None:
        if not self.lines:
            self.insert_line(0)
        self.lines[self._clamp_row(row)].append(text)
        self.dirty = True

    def split_line(self, row: int, col: int) -> None:
        """Move the text after ``col`` onto a new line below ``row``."""
        if not self.lines:
            self.insert_line(0)
            return
        row = self._clamp_row(row)
        suffix = self.lines[row].truncate(col)
        self.insert_line(row + 1, suffix)

    def merge_with_previous(self, row: int) -> CursorPosition:
        """Append line ``row`` to the line above it and delete it.

        Returns the position where the two texts meet.
        """
        if not self.lines:
            return CursorPosition(0, 0)
        row = self._clamp_row(row)
        if row == 0:
            return CursorPosition(0, 0)
        previous = self.lines[row - 1]
        joint = CursorPosition(row - 1, len(previous))
        previous.append(self.lines[row].raw)
        self.delete_line(row)
        return joint

    # --- Cursor and viewport ---

    def clamp_cursor(self) -> None:
        if not self.lines:
            self.cursor = CursorPosition(0, 0)
            return
        if self.cursor.row >= len(self.lines):
            self.cursor.row = len(self.lines) - 1
            self.cursor.column = len(self.lines[self.cursor.row])
        self.cursor.row = max(0, self.cursor.row)
        self.cursor.column = max(0, min(self.cursor.column, len(self.lines[self.cursor.row])))

    def scroll(self, screen_rows: int, screen_cols: int) -> None:
        line = self.current_line()
        self.render_column = line.raw_to_render_column(self.cursor.column) if line else 0
        self.row_offset, self.col_offset = compute_viewport(
            self.cursor.row, self.render_column, max(1, screen_rows), max(1, screen_cols),
            Viewport(self.row_offset, self.col_offset),
        )

    # --- Status ---

    def set_status(self, message: str, now: float) -> None:
        self.status_message = message
        self.status_time = now

    def visible_status(self, now: float, timeout: float = EditorConstants.STATUS_MESSAGE_TIMEOUT) -> str:
        if self.status_message and now - self.status_time < timeout:
            return self.status_message
        return ""
