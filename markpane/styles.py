"""Style markers and the bounded styled output buffer.

The core never writes terminal control sequences. It emits a token stream of
literal text (plain ``str``) interleaved with the marker objects defined here;
the terminal adapter translates markers into concrete sequences.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Union


class Style(Enum):
    """Kinds of style that can be switched on and off."""
    BOLD = "bold"
    ITALIC = "italic"
    CODE = "code"
    HEADER = "header"
    ACCENT = "accent"


class Accent(Enum):
    """Fixed accent colours used by renderers and the compositor."""
    BULLET = "bullet"
    RULE = "rule"
    FENCE = "fence"
    FILLER = "filler"
    SEPARATOR = "separator"
    STATUS_BAR = "status_bar"
    KEYWORD = "keyword"
    TYPE = "type"
    CONSTANT = "constant"
    COMMENT = "comment"
    STRING = "string"
    NUMBER = "number"
    DIRECTIVE = "directive"


@dataclass(frozen=True)
class StyleOn:
    style: Style
    level: int = 0  # Header level, 1 (most prominent) to 6
    accent: Optional[Accent] = None


@dataclass(frozen=True)
class StyleOff:
    style: Style


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class EndOfRow:
    pass


@dataclass(frozen=True)
class HideCursor:
    pass


@dataclass(frozen=True)
class ShowCursor:
    pass


@dataclass(frozen=True)
class MoveCursor:
    row: int
    col: int


@dataclass(frozen=True)
class ClearLine:
    pass


@dataclass(frozen=True)
class ClearScreen:
    pass


Marker = Union[StyleOn, StyleOff, Reset, EndOfRow, HideCursor, ShowCursor,
               MoveCursor, ClearLine, ClearScreen]
Token = Union[str, Marker]


def header(level: int) -> StyleOn:
    return StyleOn(Style.HEADER, level=level)


def accent(kind: Accent) -> StyleOn:
    return StyleOn(Style.ACCENT, accent=kind)


class StyledBuffer:
    """Token buffer bounded by a number of visible columns.

    Text past the bound is dropped silently, and so are markers once the
    buffer is exhausted. ``close()`` always gets to emit the final reset so
    an open style never outlives its row.
    """

    def __init__(self, width: Optional[int] = None):
        self.width = width
        self.tokens: List[Token] = []
        self.used = 0
        self._open: set = set()

    @property
    def exhausted(self) -> bool:
        return self.width is not None and self.used >= self.width

    @property
    def remaining(self) -> Optional[int]:
        if self.width is None:
            return None
        return max(0, self.width - self.used)

    @property
    def open_styles(self) -> frozenset:
        return frozenset(self._open)

    def text(self, s: str) -> None:
        if not s or self.exhausted:
            return
        if self.width is not None:
            s = s[:self.width - self.used]
        self.used += len(s)
        if self.tokens and isinstance(self.tokens[-1], str):
            self.tokens[-1] += s
        else:
            self.tokens.append(s)

    def on(self, marker: StyleOn) -> None:
        if self.exhausted:
            return
        self._open.add(marker.style)
        self.tokens.append(marker)

    def off(self, style: Style) -> None:
        if self.exhausted:
            return
        self._open.discard(style)
        self.tokens.append(StyleOff(style))

    def reset(self) -> None:
        self._open.clear()
        self.tokens.append(Reset())

    def marker(self, marker: Marker) -> None:
        """Append a non-style marker (row end, cursor moves, clears)."""
        self.tokens.append(marker)

    def close(self) -> None:
        """Force-close any style still open."""
        if self._open:
            self.reset()

    def pad(self, width: int) -> None:
        """Pad with spaces up to ``width`` visible columns."""
        if self.used < width:
            self.text(" " * (width - self.used))

    def extend(self, other: "StyledBuffer") -> None:
        """Append another buffer's tokens, subject to this buffer's bound."""
        for token in other.tokens:
            if isinstance(token, str):
                self.text(token)
            elif isinstance(token, StyleOn):
                self.on(token)
            elif isinstance(token, StyleOff):
                self.off(token.style)
            elif isinstance(token, Reset):
                self.reset()
            else:
                self.marker(token)
        self.close()

    def plain(self) -> str:
        """The visible text with every marker stripped."""
        return "".join(t for t in self.tokens if isinstance(t, str))

    def __iter__(self) -> Iterator[Token]:
        return iter(self.tokens)

    def __len__(self) -> int:
        return len(self.tokens)
