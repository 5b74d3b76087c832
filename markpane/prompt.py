"""Single-line prompts shown in the message bar.

A :class:`PromptSession` collects text one key at a time. An optional
observer is told about every handled key, which is how incremental search
follows the query as it is typed; save-as and open use a session with no
observer.
"""

from enum import Enum
from typing import Callable, Optional

from .keyboard import KeyEvent, KeyType


class PromptIntent(Enum):
    """What a key did to the prompt, as reported to the observer."""
    EDIT = "edit"
    NEXT = "next"
    PREVIOUS = "previous"
    CONFIRM = "confirm"
    CANCEL = "cancel"
    NONE = "none"


class PromptState(Enum):
    ACTIVE = "active"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


PromptObserver = Callable[[str, PromptIntent], Optional[str]]


class PromptSession:
    """State of one prompt: the template, typed input and observer feedback."""

    def __init__(self, template: str, observer: Optional[PromptObserver] = None):
        self.template = template
        self.observer = observer
        self.input = ""
        self.feedback: Optional[str] = None
        self.state = PromptState.ACTIVE

    @property
    def result(self) -> Optional[str]:
        """The entered text once confirmed, otherwise None."""
        return self.input if self.state == PromptState.CONFIRMED else None

    def status_text(self) -> str:
        text = self.template.format(self.input)
        if self.feedback:
            text += f" [{self.feedback}]"
        return text

    def _classify(self, key_event: KeyEvent) -> PromptIntent:
        kt, value = key_event.key_type, key_event.value
        if kt == KeyType.SPECIAL:
            if value == 'escape':
                return PromptIntent.CANCEL
            if value == 'enter':
                return PromptIntent.CONFIRM if self.input else PromptIntent.NONE
            if value in ('backspace', 'delete'):
                if self.input:
                    self.input = self.input[:-1]
                return PromptIntent.EDIT
            if value in ('right', 'down'):
                return PromptIntent.NEXT
            if value in ('left', 'up'):
                return PromptIntent.PREVIOUS
            return PromptIntent.NONE
        if kt == KeyType.CTRL:
            if value == 'g':
                return PromptIntent.CANCEL
            if value == 'h':
                if self.input:
                    self.input = self.input[:-1]
                return PromptIntent.EDIT
            return PromptIntent.NONE
        if kt == KeyType.REGULAR and key_event.value and ord(key_event.value[0]) >= 32:
            self.input += key_event.value
            return PromptIntent.EDIT
        return PromptIntent.NONE

    def handle_key(self, key_event: KeyEvent) -> PromptState:
        """Apply one key and notify the observer."""
        intent = self._classify(key_event)
        if intent == PromptIntent.CANCEL:
            self.state = PromptState.CANCELLED
        elif intent == PromptIntent.CONFIRM:
            self.state = PromptState.CONFIRMED
        if intent != PromptIntent.NONE and self.observer is not None:
            self.feedback = self.observer(self.input, intent)
        return self.state
