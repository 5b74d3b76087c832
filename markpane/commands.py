"""Command pattern mapping key events to editing intents."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Tuple, Optional, TYPE_CHECKING
from .keyboard import KeyType

if TYPE_CHECKING:
    from .editor import Editor
    from .keyboard import KeyEvent


class Intent(Enum):
    """Editing intents the editor exposes one handler for."""
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    INSERT_CHAR = "insert_char"
    INSERT_NEWLINE = "insert_newline"
    DELETE_BACKWARD = "delete_backward"
    DELETE_FORWARD = "delete_forward"
    HOME = "home"
    END = "end"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    SAVE = "save"
    OPEN = "open"
    FIND = "find"
    MATCH_BRACKET = "match_bracket"
    CYCLE_LAYOUT = "cycle_layout"
    QUIT = "quit"


# Intents that still work in the read-only preview layout; saving does not edit
PREVIEW_INTENTS = frozenset({
    Intent.MOVE_UP, Intent.MOVE_DOWN, Intent.PAGE_UP, Intent.PAGE_DOWN,
    Intent.SAVE, Intent.CYCLE_LAYOUT, Intent.QUIT,
})


class EditorCommand(ABC):
    """Base class for editor commands."""

    intent: Intent

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> None:
        editor.dispatch(self.intent, self._argument(key_event))

    def _argument(self, key_event: 'KeyEvent') -> Optional[str]:
        return None


class IntentCommand(EditorCommand):
    """A command that always maps to one fixed intent."""

    def __init__(self, intent: Intent):
        self.intent = intent


class InsertTextCommand(EditorCommand):
    intent = Intent.INSERT_CHAR

    def _argument(self, key_event):
        return key_event.value

    def execute(self, editor, key_event):
        char = key_event.value
        # Filter out control characters
        if char and (ord(char[0]) >= 32 or char == '\t'):
            super().execute(editor, key_event)


class CommandRegistry:
    """Registry for mapping key combinations to commands."""

    def __init__(self):
        self._commands: Dict[Tuple[KeyType, str], EditorCommand] = {}
        self._setup_default_commands()

    def _setup_default_commands(self):
        """Set up the default key bindings."""
        bindings = [
            # Movement
            ((KeyType.SPECIAL, 'left'), Intent.MOVE_LEFT),
            ((KeyType.SPECIAL, 'right'), Intent.MOVE_RIGHT),
            ((KeyType.SPECIAL, 'up'), Intent.MOVE_UP),
            ((KeyType.SPECIAL, 'down'), Intent.MOVE_DOWN),
            ((KeyType.SPECIAL, 'home'), Intent.HOME),
            ((KeyType.SPECIAL, 'end'), Intent.END),
            ((KeyType.SPECIAL, 'page_up'), Intent.PAGE_UP),
            ((KeyType.SPECIAL, 'page_down'), Intent.PAGE_DOWN),
            # Editing
            ((KeyType.SPECIAL, 'enter'), Intent.INSERT_NEWLINE),
            ((KeyType.SPECIAL, 'backspace'), Intent.DELETE_BACKWARD),
            ((KeyType.CTRL, 'h'), Intent.DELETE_BACKWARD),
            ((KeyType.SPECIAL, 'delete'), Intent.DELETE_FORWARD),
            # System
            ((KeyType.CTRL, 's'), Intent.SAVE),
            ((KeyType.CTRL, 'o'), Intent.OPEN),
            ((KeyType.CTRL, 'f'), Intent.FIND),
            ((KeyType.CTRL, ']'), Intent.MATCH_BRACKET),
            ((KeyType.CTRL, 'p'), Intent.CYCLE_LAYOUT),
            ((KeyType.CTRL, 'q'), Intent.QUIT),
        ]
        for key, intent in bindings:
            self.register(key, IntentCommand(intent))

    def register(self, key: Tuple[KeyType, str], command: EditorCommand):
        """Register a command for a key combination."""
        self._commands[key] = command

    def get_command(self, key_type: KeyType, value: str) -> Optional[EditorCommand]:
        """Get the command for a key combination."""
        return self._commands.get((key_type, value))

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """Execute the command bound to the key event.

        Returns:
            True if a command handled the key
        """
        command = self.get_command(key_event.key_type, key_event.value)
        if command is None and key_event.key_type == KeyType.REGULAR:
            command = InsertTextCommand()
        if command is None:
            return False
        command.execute(editor, key_event)
        return True
