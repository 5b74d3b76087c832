"""Main editor controller."""

import errno
import logging
import os
import select
import signal
import time
from typing import List, Optional

from .commands import CommandRegistry, Intent, PREVIEW_INTENTS
from .config import EditorConfig
from .constants import EditorConstants
from .keyboard import KeyboardHandler, KeyEvent
from .layout import LayoutCompositor, LayoutMode, edit_width
from .markup import renderer_for
from .model import CursorPosition, Document
from .navigator import match_bracket
from .prompt import PromptSession, PromptState
from .search import SearchSession
from .settings_persistence import LAYOUT_KEY, SettingsPersistence
from .storage import read_lines, write_lines
from .styles import (
    Accent, ClearLine, EndOfRow, HideCursor, MoveCursor, ShowCursor, Style,
    StyledBuffer, Token, accent,
)
from .terminal import TerminalInterface
from .version import welcome_caption

logger = logging.getLogger(__name__)


class Editor:
    """Main editor application controller.

    The editor owns one :class:`Document`, the renderer that fills the
    preview column and the terminal. Every key ends up as an :class:`Intent`
    handled by :meth:`dispatch`.
    """

    def __init__(self, config: Optional[EditorConfig] = None,
                 persistence: Optional[SettingsPersistence] = None,
                 terminal: Optional[TerminalInterface] = None,
                 clock=time.monotonic):
        """Initialize the editor components."""
        self.config = config or EditorConfig()
        self.persistence = persistence
        self.terminal = terminal or TerminalInterface()
        self.keyboard = KeyboardHandler(self.terminal)
        self.command_registry = CommandRegistry()
        self.clock = clock
        self.document = Document(tab_width=self.config.tab_width)
        self.document.layout_mode = LayoutMode(self.config.default_layout)
        self.renderer = renderer_for(None, self.config.renderer, self.config.tab_width)
        self.compositor = LayoutCompositor(self.renderer, welcome_caption())
        self.prompt: Optional[PromptSession] = None
        self.show_welcome = True
        self.quit_times = self.config.quit_confirmations
        self.running = False
        self._resize_pipe_r: Optional[int] = None
        self._resize_pipe_w: Optional[int] = None
        self._handlers = {
            Intent.MOVE_LEFT: lambda value: self.move(Intent.MOVE_LEFT),
            Intent.MOVE_RIGHT: lambda value: self.move(Intent.MOVE_RIGHT),
            Intent.MOVE_UP: lambda value: self.move(Intent.MOVE_UP),
            Intent.MOVE_DOWN: lambda value: self.move(Intent.MOVE_DOWN),
            Intent.INSERT_CHAR: self.insert_char,
            Intent.INSERT_NEWLINE: lambda value: self.insert_newline(),
            Intent.DELETE_BACKWARD: lambda value: self.delete_backward(),
            Intent.DELETE_FORWARD: lambda value: self.delete_forward(),
            Intent.HOME: lambda value: self.home(),
            Intent.END: lambda value: self.end(),
            Intent.PAGE_UP: lambda value: self.page_up(),
            Intent.PAGE_DOWN: lambda value: self.page_down(),
            Intent.SAVE: lambda value: self.save(),
            Intent.OPEN: self.open_file,
            Intent.FIND: lambda value: self.find(),
            Intent.MATCH_BRACKET: lambda value: self.match_bracket(),
            Intent.CYCLE_LAYOUT: lambda value: self.cycle_layout(),
            Intent.QUIT: lambda value: self.quit(),
        }

    # --- Screen geometry ---

    @property
    def screen_rows(self) -> int:
        """Text rows; the status bar and message bar take the last two."""
        return max(1, self.terminal.height - 2)

    @property
    def screen_cols(self) -> int:
        return max(1, self.terminal.width)

    @property
    def modified(self) -> bool:
        return self.document.dirty

    def set_status(self, message: str) -> None:
        self.document.set_status(message, self.clock())

    # --- Main loop ---

    def _handle_resize(self, signum, frame):
        """Handle terminal resize signal."""
        del signum, frame  # Unused
        # Write to pipe to wake up select()
        os.write(self._resize_pipe_w, EditorConstants.RESIZE_PIPE_MARKER)

    def _next_key_event(self) -> Optional[KeyEvent]:
        """Wait for a key; None when a resize woke the loop instead."""
        if self._resize_pipe_r is not None:
            # Use file descriptor 0 for stdin to work in all environments
            ready, _, _ = select.select([0, self._resize_pipe_r], [], [])
            if self._resize_pipe_r in ready:
                os.read(self._resize_pipe_r, 1024)
                return None
        return self.keyboard.get_key_event()

    def run(self):
        """Run the main editor loop."""
        self.terminal.setup()
        self.running = True
        self._resize_pipe_r, self._resize_pipe_w = os.pipe()
        original_winch_handler = signal.signal(signal.SIGWINCH, self._handle_resize)
        old_settings = self.terminal.disable_flow_control()

        try:
            while self.running:
                self.refresh_screen()
                key_event = self._next_key_event()
                if key_event is not None:
                    self.handle_key_event(key_event)
        except MemoryError:
            logger.critical("Out of memory, exiting")
            raise SystemExit(1)
        finally:
            self.terminal.restore_settings(old_settings)
            signal.signal(signal.SIGWINCH, original_winch_handler)
            os.close(self._resize_pipe_r)
            os.close(self._resize_pipe_w)
            self._resize_pipe_r = self._resize_pipe_w = None
            self.terminal.cleanup()

    def handle_key_event(self, key_event: KeyEvent) -> None:
        self.command_registry.execute(self, key_event)

    def dispatch(self, intent: Intent, value: Optional[str] = None) -> None:
        """Run the handler for ``intent``.

        The preview layout is read-only: intents outside the preview set are
        ignored there. Anything but a quit resets the quit guard.
        """
        self.show_welcome = False
        if intent != Intent.QUIT:
            self.quit_times = self.config.quit_confirmations
        if self.document.layout_mode == LayoutMode.PREVIEW_ONLY and intent not in PREVIEW_INTENTS:
            return
        self._handlers[intent](value)

    # --- Cursor movement ---

    def move(self, direction: Intent) -> None:
        doc = self.document
        cursor = doc.cursor
        line = doc.current_line()
        if direction == Intent.MOVE_LEFT:
            if cursor.column > 0:
                cursor.column -= 1
            elif cursor.row > 0:
                cursor.row -= 1
                cursor.column = len(doc.lines[cursor.row])
        elif direction == Intent.MOVE_RIGHT:
            if line is not None and cursor.column < len(line):
                cursor.column += 1
            elif line is not None and cursor.column == len(line):
                cursor.row += 1
                cursor.column = 0
        elif direction == Intent.MOVE_UP:
            if cursor.row > 0:
                self._move_vertically(-1)
        elif direction == Intent.MOVE_DOWN:
            if cursor.row < doc.num_lines:
                self._move_vertically(1)

        # Snap to the end of a shorter row
        line = doc.current_line()
        row_length = len(line) if line is not None else 0
        if cursor.column > row_length:
            cursor.column = row_length

    def _move_vertically(self, step: int) -> None:
        """Change row, keeping the display column across tabs."""
        doc = self.document
        line = doc.current_line()
        render_col = line.raw_to_render_column(doc.cursor.column) if line is not None else 0
        doc.cursor.row += step
        target = doc.current_line()
        if target is not None:
            doc.cursor.column = target.render_to_raw_column(render_col)

    def home(self) -> None:
        self.document.cursor.column = 0

    def end(self) -> None:
        line = self.document.current_line()
        if line is not None:
            self.document.cursor.column = len(line)

    def page_up(self) -> None:
        """Jump to the top edge of the screen, then up one screenful."""
        self.document.cursor.row = self.document.row_offset
        for _ in range(self.screen_rows):
            self.move(Intent.MOVE_UP)

    def page_down(self) -> None:
        """Jump to the bottom edge of the screen, then down one screenful."""
        doc = self.document
        doc.cursor.row = min(doc.row_offset + self.screen_rows - 1, doc.num_lines)
        for _ in range(self.screen_rows):
            self.move(Intent.MOVE_DOWN)

    # --- Editing ---

    def insert_char(self, ch: Optional[str]) -> None:
        if not ch:
            return
        doc = self.document
        if doc.cursor.row == doc.num_lines:
            doc.insert_line(doc.num_lines)
        doc.insert_char(doc.cursor.row, doc.cursor.column, ch)
        doc.cursor.column += 1

    def insert_newline(self) -> None:
        doc = self.document
        if doc.cursor.column == 0:
            doc.insert_line(doc.cursor.row)
        else:
            doc.split_line(doc.cursor.row, doc.cursor.column)
        doc.cursor = CursorPosition(doc.cursor.row + 1, 0)

    def delete_backward(self) -> None:
        doc = self.document
        cursor = doc.cursor
        if cursor.row == doc.num_lines:
            return
        if cursor.row == 0 and cursor.column == 0:
            return
        if cursor.column > 0:
            doc.delete_char(cursor.row, cursor.column - 1)
            cursor.column -= 1
        else:
            doc.cursor = doc.merge_with_previous(cursor.row)

    def delete_forward(self) -> None:
        before = CursorPosition(self.document.cursor.row, self.document.cursor.column)
        self.move(Intent.MOVE_RIGHT)
        if self.document.cursor == before:
            return
        self.delete_backward()

    # --- Files ---

    def save(self) -> None:
        filename = self.document.filename
        if not filename:
            filename = self.run_prompt(PromptSession(EditorConstants.SAVE_AS_PROMPT))
            if filename is None:
                self.set_status("Save aborted.")
                return
        self.save_file(filename)

    def save_file(self, filename: str) -> bool:
        """Save the document to ``filename`` atomically.

        Returns:
            True if save succeeded, False otherwise
        """
        try:
            written = write_lines(filename, self.document.texts())
        except PermissionError:
            logger.warning(f"Permission denied saving {filename}")
            self.set_status(f"Can't save! Permission denied: {filename}")
            return False
        except OSError as e:
            logger.warning(f"Could not save {filename}: {e}")
            if e.errno == errno.ENOSPC:
                self.set_status("Can't save! No space left on device")
            else:
                self.set_status(f"Can't save! I/O error: {e.strerror or e}")
            return False

        if filename != self.document.filename:
            self.document.filename = filename
            self.renderer = renderer_for(filename, self.config.renderer, self.config.tab_width)
            self.compositor.renderer = self.renderer
        self.document.dirty = False
        self.set_status(f"{written} bytes written to disk")
        if self.persistence is not None:
            self.persistence.save_settings(filename, {LAYOUT_KEY: self.document.layout_mode.value})
        return True

    def open_file(self, filename: Optional[str] = None) -> None:
        if self.document.dirty:
            self.set_status("Unsaved changes! Save before opening another file.")
            return
        if not filename:
            filename = self.run_prompt(PromptSession(EditorConstants.OPEN_PROMPT))
            if filename is None:
                self.set_status("Open aborted.")
                return
        self.load_file(filename)

    def load_file(self, filename: str) -> bool:
        """Load a file into the editor.

        A missing file starts an empty document under that name. On any
        other error the current document is kept and False is returned.
        """
        try:
            result = read_lines(filename, self.config.max_line_length)
        except FileNotFoundError:
            lines, truncated_rows = [], []
            new_file = True
        except OSError as e:
            logger.warning(f"Could not open {filename}: {e}")
            self.set_status(f"Can't open {filename}: {e.strerror or e}")
            return False
        else:
            lines, truncated_rows = result.lines, result.truncated_rows
            new_file = False

        layout_mode = self.document.layout_mode
        document = Document.from_lines(lines, self.config.tab_width)
        document.filename = filename
        document.layout_mode = self._stored_layout(filename, layout_mode)
        self.document = document
        self.renderer = renderer_for(filename, self.config.renderer, self.config.tab_width)
        self.compositor.renderer = self.renderer

        if new_file:
            self.set_status(f"New file: {filename}")
        elif truncated_rows:
            self.set_status(f"Warning: {len(truncated_rows)} line(s) truncated to "
                            f"{self.config.max_line_length} characters")
        return True

    def _stored_layout(self, filename: str, default: LayoutMode) -> LayoutMode:
        if self.persistence is None:
            return default
        stored = self.persistence.load_settings(filename).get(LAYOUT_KEY)
        try:
            return LayoutMode(stored) if stored is not None else default
        except ValueError:
            logger.warning(f"Ignoring unknown layout mode {stored!r} for {filename}")
            return default

    # --- Search and navigation ---

    def find(self) -> None:
        doc = self.document
        saved_cursor = CursorPosition(doc.cursor.row, doc.cursor.column)
        saved_offsets = (doc.row_offset, doc.col_offset)
        query = self.run_prompt(PromptSession(EditorConstants.SEARCH_PROMPT, SearchSession(doc)))
        if query is None:
            doc.cursor = saved_cursor
            doc.row_offset, doc.col_offset = saved_offsets

    def match_bracket(self) -> None:
        if not match_bracket(self.document):
            self.set_status("No matching bracket found")

    def cycle_layout(self) -> None:
        self.document.layout_mode = self.document.layout_mode.cycle()
        self.set_status(f"Layout: {self.document.layout_mode.label}")

    def quit(self) -> None:
        if self.document.dirty and self.quit_times > 0:
            self.set_status("WARNING! File has unsaved changes. "
                            f"Press Ctrl-Q {self.quit_times} more time(s) to quit.")
            self.quit_times -= 1
            return
        self.running = False

    # --- Prompts ---

    def run_prompt(self, session: PromptSession) -> Optional[str]:
        """Show ``session`` in the message bar until it is confirmed or cancelled.

        Returns:
            The entered text, or None if the prompt was cancelled
        """
        self.prompt = session
        try:
            while session.state == PromptState.ACTIVE:
                self.refresh_screen()
                key_event = self._next_key_event()
                if key_event is not None:
                    session.handle_key(key_event)
        finally:
            self.prompt = None
        return session.result

    # --- Drawing ---

    def refresh_screen(self) -> None:
        self.terminal.write(self.compose_frame())

    def compose_frame(self) -> List[Token]:
        """Build the marker stream for one full screen."""
        doc = self.document
        rows, cols = self.screen_rows, self.screen_cols
        doc.clamp_cursor()
        doc.scroll(rows, max(1, edit_width(doc.layout_mode, cols)))

        frame = StyledBuffer()
        frame.marker(HideCursor())
        frame.marker(MoveCursor(0, 0))
        for row in self.compositor.compose_rows(doc, rows, cols, self.show_welcome):
            frame.extend(row)
            frame.marker(ClearLine())
            frame.marker(EndOfRow())
        frame.extend(self._status_bar(cols))
        frame.marker(EndOfRow())
        frame.extend(self._message_bar(cols))
        frame.marker(ClearLine())

        if self.prompt is not None:
            frame.marker(MoveCursor(rows + 1, min(len(self.prompt.status_text()), cols - 1)))
            frame.marker(ShowCursor())
        elif doc.layout_mode != LayoutMode.PREVIEW_ONLY:
            frame.marker(MoveCursor(doc.cursor.row - doc.row_offset,
                                    doc.render_column - doc.col_offset))
            frame.marker(ShowCursor())
        return frame.tokens

    def _status_bar(self, cols: int) -> StyledBuffer:
        doc = self.document
        name = (doc.filename or "[No Name]")[:EditorConstants.STATUS_FILENAME_WIDTH]
        left = f"{name} {'(modified)' if doc.dirty else ''}".rstrip()
        right = f"{doc.layout_mode.label} | {doc.cursor.row + 1}/{doc.num_lines}"
        out = StyledBuffer(cols)
        out.on(accent(Accent.STATUS_BAR))
        out.text(left)
        if len(left) + len(right) < cols:
            out.pad(cols - len(right))
            out.text(right)
        else:
            out.pad(cols)
        out.off(Style.ACCENT)
        out.close()
        return out

    def _message_bar(self, cols: int) -> StyledBuffer:
        if self.prompt is not None:
            message = self.prompt.status_text()
        else:
            message = (self.document.visible_status(self.clock(), self.config.status_timeout)
                       or EditorConstants.HELP_MESSAGE)
        out = StyledBuffer(cols)
        out.text(message)
        return out
