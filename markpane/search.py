"""Incremental, bidirectional, wrap-around search over the document lines."""

import logging
from typing import Optional, Sequence

from .model import CursorPosition, Document
from .prompt import PromptIntent

logger = logging.getLogger(__name__)

FORWARD = 1
BACKWARD = -1


def find_in_lines(lines: Sequence[str], query: str, start: int,
                  direction: int = FORWARD) -> Optional[tuple[int, int]]:
    """Find ``query`` scanning from the row after ``start`` in ``direction``.

    The scan wraps around and visits every row exactly once, ``start`` itself
    last. Returns (row, column) of the leftmost occurrence in the first
    matching row, or None.
    """
    num_lines = len(lines)
    if not query or num_lines == 0:
        return None
    current = start
    for _ in range(num_lines):
        current = (current + direction) % num_lines
        col = lines[current].find(query)
        if col != -1:
            return current, col
    return None


class SearchSession:
    """Prompt observer that moves the cursor to matches as the query changes.

    ``last_match`` is the row of the current match (None before the first
    one) and ``direction`` the step applied to it on the next scan.
    """

    def __init__(self, document: Document):
        self.document = document
        self.last_match: Optional[int] = None
        self.direction = FORWARD

    def reset(self) -> None:
        self.last_match = None
        self.direction = FORWARD

    def __call__(self, query: str, intent: PromptIntent) -> Optional[str]:
        if intent in (PromptIntent.CONFIRM, PromptIntent.CANCEL):
            self.reset()
            return None
        if intent == PromptIntent.NEXT:
            self.direction = FORWARD
        elif intent == PromptIntent.PREVIOUS:
            self.direction = BACKWARD
        elif intent == PromptIntent.EDIT:
            self.reset()
        else:
            return None

        if self.last_match is None:
            self.direction = FORWARD
        start = self.last_match if self.last_match is not None else -1
        match = find_in_lines(self.document.texts(), query, start, self.direction)
        if match is None:
            if query:
                logger.debug("No match for %r", query)
                return "No match"
            return None

        row, col = match
        self.last_match = row
        self.document.cursor = CursorPosition(row, col)
        # Past every row, so the next scroll snaps the match to the top edge.
        self.document.row_offset = self.document.num_lines
        return None
