"""Keyboard input handling using curtsies-style tokens."""

from typing import Optional
from dataclasses import dataclass
from enum import Enum


class KeyType(Enum):
    """Types of key events."""
    REGULAR = "regular"
    CTRL = "ctrl"
    SPECIAL = "special"


@dataclass
class KeyEvent:
    """Represents a parsed keyboard event."""
    key_type: KeyType
    value: str  # The base key (e.g., 'a', 'left', 'backspace')
    raw: str = ""


SPECIAL_KEYS = {
    'left', 'right', 'up', 'down', 'home', 'end', 'enter', 'backspace',
    'delete', 'page_up', 'page_down', 'escape',
}

# Aliases curtsies and terminals use for the same key
_ALIASES = {
    'pageup': 'page_up',
    'pagedown': 'page_down',
    'esc': 'escape',
    'return': 'enter',
    'del': 'delete',
}

# Control bytes outside Ctrl-A..Ctrl-Z that the editor binds
_CONTROL_PUNCTUATION = {0x1c: '\\', 0x1d: ']', 0x1e: '^', 0x1f: '_'}


class KeyboardHandler:
    """Turns terminal key tokens into :class:`KeyEvent` objects."""

    def __init__(self, terminal_interface):
        """Initialize with a terminal interface."""
        self.terminal = terminal_interface

    def get_key_event(self, timeout: Optional[float] = None) -> Optional[KeyEvent]:
        """Get the next key event, or None if nothing arrived."""
        key = self.terminal.get_key(timeout)
        if not key:
            return None
        return self.parse_key(key)

    def parse_key(self, key) -> KeyEvent:
        """Parse a curtsies token such as '<LEFT>' or '<Ctrl-s>', or a raw character."""
        key_str = str(key)

        if len(key_str) > 2 and key_str.startswith('<') and key_str.endswith('>'):
            name = key_str[1:-1].lower().replace('+', '-')
            parts = name.split('-') if '-' in name[:-1] else [name]
            base = _ALIASES.get(parts[-1], parts[-1])
            mods = set(parts[:-1])
            if base in ('space', 'spacebar') and not mods:
                return KeyEvent(KeyType.REGULAR, ' ', key_str)
            if base == 'tab' and not mods:
                return KeyEvent(KeyType.REGULAR, '\t', key_str)
            if 'ctrl' in mods and len(base) == 1:
                return self._ctrl(base, key_str)
            if base in SPECIAL_KEYS:
                return KeyEvent(KeyType.SPECIAL, base, key_str)
            # Unknown tokens (function keys, modified arrows) stay special
            return KeyEvent(KeyType.SPECIAL, base, key_str)

        if len(key_str) == 1:
            o = ord(key_str)
            if o == 0x1b:
                return KeyEvent(KeyType.SPECIAL, 'escape', key_str)
            if o == 0x7f:
                return KeyEvent(KeyType.SPECIAL, 'backspace', key_str)
            if 1 <= o <= 26:
                return self._ctrl(chr(ord('a') + o - 1), key_str)
            if o in _CONTROL_PUNCTUATION:
                return self._ctrl(_CONTROL_PUNCTUATION[o], key_str)

        return KeyEvent(KeyType.REGULAR, key_str, key_str)

    @staticmethod
    def _ctrl(ch: str, raw: str) -> KeyEvent:
        # Terminals send Ctrl-J/Ctrl-M for Enter and Ctrl-I for Tab
        if ch in ('j', 'm'):
            return KeyEvent(KeyType.SPECIAL, 'enter', raw)
        if ch == 'i':
            return KeyEvent(KeyType.REGULAR, '\t', raw)
        return KeyEvent(KeyType.CTRL, ch, raw)
