"""Bracket matching across lines."""

import logging
from typing import Optional, Sequence

from .model import CursorPosition, Document

logger = logging.getLogger(__name__)

OPENERS = {'(': ')', '[': ']', '{': '}'}
CLOSERS = {v: k for k, v in OPENERS.items()}


def find_matching_bracket(lines: Sequence[str], row: int, col: int) -> Optional[tuple[int, int]]:
    """Locate the counterpart of the bracket at (row, col).

    Opening brackets scan forward and closing brackets backward, one
    character at a time across line boundaries. The stack holds the
    brackets still waiting for their counterpart, so its size is the nesting
    depth; a counterpart of the wrong kind ends the scan without a match.
    """
    if not 0 <= row < len(lines) or not 0 <= col < len(lines[row]):
        return None
    ch = lines[row][col]
    if ch in OPENERS:
        direction, same, opposite = 1, OPENERS, CLOSERS
    elif ch in CLOSERS:
        direction, same, opposite = -1, CLOSERS, OPENERS
    else:
        return None

    stack = [same[ch]]
    y, x = row, col
    while True:
        x += direction
        while not 0 <= x < len(lines[y]):
            y += direction
            if not 0 <= y < len(lines):
                return None
            x = 0 if direction == 1 else len(lines[y]) - 1
        current = lines[y][x]
        if current in same:
            stack.append(same[current])
        elif current in opposite:
            if current != stack[-1]:
                return None
            stack.pop()
            if not stack:
                return y, x


def match_bracket(document: Document) -> bool:
    """Move the cursor to the bracket matching the one under it."""
    match = find_matching_bracket(document.texts(), document.cursor.row, document.cursor.column)
    if match is None:
        logger.debug("No matching bracket from %s", document.cursor)
        return False
    document.cursor = CursorPosition(*match)
    return True
