"""Terminal interface using Blessed for display and Curtsies for input."""

import blessed
from typing import Iterable, Optional
import sys
import select
import termios

from .styles import (
    Accent, ClearLine, ClearScreen, EndOfRow, HideCursor, MoveCursor, Reset,
    ShowCursor, Style, StyleOff, StyleOn, Token,
)


class TerminalInterface:
    """Handles terminal I/O using Blessed."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self.is_fullscreen = False
        self._curtsies_input: Optional[object] = None

    def setup(self):
        """Enter fullscreen mode and raw input."""
        print(self.term.enter_fullscreen + self.term.clear, end='', flush=True)
        self.is_fullscreen = True
        if self._curtsies_input is None:
            try:
                from curtsies import Input  # type: ignore
                self._curtsies_input = Input(keynames='curtsies')  # type: ignore
                self._curtsies_input.__enter__()
            except Exception:
                # curtsies cannot enter raw mode without a real tty (CI,
                # pipes); the editor then runs without input.
                self._curtsies_input = None

    def cleanup(self):
        """Leave fullscreen mode and restore the terminal."""
        if self._curtsies_input is not None:
            try:
                self._curtsies_input.__exit__(None, None, None)  # type: ignore
            finally:
                self._curtsies_input = None
        if self.is_fullscreen:
            print(self.term.clear + self.term.home + self.term.exit_fullscreen
                  + self.term.normal_cursor, end='', flush=True)
            self.is_fullscreen = False

    def disable_flow_control(self):
        """Let Ctrl-S, Ctrl-Q and Ctrl-O reach the editor.

        Returns the previous termios settings, or None if stdin is not a tty.
        """
        try:
            old_settings = termios.tcgetattr(sys.stdin)
            new_settings = list(old_settings)
            # IXON/IXOFF in the input flags (index 0) swallow Ctrl-S and Ctrl-Q
            new_settings[0] &= ~(termios.IXON | termios.IXOFF)
            # IEXTEN in the local flags (index 3) makes the tty intercept Ctrl-O and Ctrl-V
            new_settings[3] &= ~termios.IEXTEN
            termios.tcsetattr(sys.stdin, termios.TCSANOW, new_settings)
            return old_settings
        except (termios.error, AttributeError, OSError, ValueError):
            return None

    def restore_settings(self, old_settings) -> None:
        if old_settings is None:
            return
        try:
            termios.tcsetattr(sys.stdin, termios.TCSANOW, old_settings)
        except (termios.error, OSError):
            pass

    # --- Marker translation ---

    def _accent_sequence(self, kind: Optional[Accent]) -> str:
        term = self.term
        colors = {
            Accent.BULLET: term.bold_cyan,
            Accent.RULE: term.blue,
            Accent.FENCE: term.green,
            Accent.FILLER: term.blue,
            Accent.SEPARATOR: term.bright_black,
            Accent.STATUS_BAR: term.reverse,
            Accent.KEYWORD: term.yellow,
            Accent.TYPE: term.cyan,
            Accent.CONSTANT: term.color(208),
            Accent.COMMENT: term.color(70),
            Accent.STRING: term.bright_yellow,
            Accent.NUMBER: term.red,
            Accent.DIRECTIVE: term.magenta,
        }
        return str(colors.get(kind, ''))

    def _header_sequence(self, level: int) -> str:
        term = self.term
        if level <= 1:
            return str(term.bold_underline_magenta)
        if level == 2:
            return str(term.bold_magenta)
        if level == 3:
            return str(term.bold_blue)
        if level == 4:
            return str(term.bold)
        return str(term.underline)

    def _style_sequence(self, marker: StyleOn) -> str:
        if marker.style == Style.BOLD:
            return str(self.term.bold)
        if marker.style == Style.ITALIC:
            return str(self.term.italic)
        if marker.style == Style.CODE:
            return str(self.term.reverse)
        if marker.style == Style.HEADER:
            return self._header_sequence(marker.level)
        return self._accent_sequence(marker.accent)

    def translate(self, tokens: Iterable[Token]) -> str:
        """Turn a marker stream into a string of terminal sequences.

        Turning one style off resets all attributes and re-applies the
        styles that are still on.
        """
        term = self.term
        out = []
        active: dict = {}
        for token in tokens:
            if isinstance(token, str):
                out.append(token)
            elif isinstance(token, StyleOn):
                active[token.style] = token
                out.append(self._style_sequence(token))
            elif isinstance(token, StyleOff):
                active.pop(token.style, None)
                out.append(str(term.normal))
                out.extend(self._style_sequence(m) for m in active.values())
            elif isinstance(token, Reset):
                active.clear()
                out.append(str(term.normal))
            elif isinstance(token, EndOfRow):
                out.append('\r\n')
            elif isinstance(token, ClearLine):
                out.append(str(term.clear_eol))
            elif isinstance(token, ClearScreen):
                out.append(str(term.home) + str(term.clear))
            elif isinstance(token, MoveCursor):
                out.append(str(term.move_yx(token.row, token.col)))
            elif isinstance(token, HideCursor):
                out.append(str(term.hide_cursor))
            elif isinstance(token, ShowCursor):
                out.append(str(term.normal_cursor))
        return ''.join(out)

    def write(self, tokens: Iterable[Token]) -> None:
        print(self.translate(tokens), end='', flush=True)

    def get_key(self, timeout=None):
        """Get a single keypress token from curtsies.

        Args:
            timeout: Timeout in seconds (None for blocking, 0 for non-blocking)
        """
        if self._curtsies_input is None:
            return None
        if timeout is not None:
            r, _, _ = select.select([sys.stdin], [], [], float(timeout))
            if not r:
                return None
        return str(next(self._curtsies_input))

    @property
    def width(self):
        """Terminal width in columns."""
        return self.term.width

    @property
    def height(self):
        """Terminal height in rows."""
        return self.term.height
