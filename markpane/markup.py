"""Line renderers for the preview column.

Two interchangeable strategies share the :class:`Renderer` interface: a
line-local Markdown renderer and a lexical C syntax highlighter. Both read one
line of display text and fill a :class:`StyledBuffer` bounded by the target
width.
"""

import os
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .constants import EditorConstants
from .styles import Accent, Style, StyleOn, StyledBuffer, accent, header


class Renderer(ABC):
    """Turns one line of display text into styled output."""

    name: str = ""

    @abstractmethod
    def render(self, text: str, width: int) -> StyledBuffer:
        """Render ``text`` into a buffer at most ``width`` columns wide."""


# --- Markdown ---

class LineKind(Enum):
    HEADER = "header"
    LIST_ITEM = "list_item"
    RULE = "rule"
    CODE_FENCE = "code_fence"
    PLAIN = "plain"


@dataclass(frozen=True)
class LineClass:
    kind: LineKind
    level: int = 0  # Header level
    indent: str = ""  # Leading whitespace of a list item
    bullet: str = ""
    body: str = ""  # Text after the marker


_HEADER_RE = re.compile(r"^(#{1,6})[ \t](.*)$", re.DOTALL)
_LIST_RE = re.compile(r"^([ \t]*)([-*+])[ \t]+(.*)$", re.DOTALL)


def _is_rule(text: str) -> bool:
    stripped = text.strip()
    if not stripped or stripped[0] not in "-*_":
        return False
    symbol = stripped[0]
    count = 0
    for ch in stripped:
        if ch == symbol:
            count += 1
        elif ch not in " \t":
            return False
    return count >= 3


def classify_line(text: str) -> LineClass:
    """Classify a line of Markdown, trying each kind in priority order."""
    m = _HEADER_RE.match(text)
    if m:
        return LineClass(LineKind.HEADER, level=len(m.group(1)), body=m.group(2))
    m = _LIST_RE.match(text)
    if m:
        return LineClass(LineKind.LIST_ITEM, indent=m.group(1), bullet=m.group(2), body=m.group(3))
    if _is_rule(text):
        return LineClass(LineKind.RULE)
    if text.startswith("```"):
        return LineClass(LineKind.CODE_FENCE, body=text)
    return LineClass(LineKind.PLAIN, body=text)


def _tab_to_stop(column: int, tab_width: int) -> str:
    """Spaces that advance ``column`` to the next tab stop."""
    return " " * (tab_width - column % tab_width)


def scan_inline(text: str, out: StyledBuffer,
                tab_width: int = EditorConstants.TAB_WIDTH) -> StyledBuffer:
    """Render bold, italic and inline-code spans into ``out``.

    Each delimiter toggles its style; nothing is left open at the end of the
    line.
    """
    bold = italic = code = False
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == '*' and i + 1 < n and text[i + 1] == '*':
            if bold:
                out.off(Style.BOLD)
            else:
                out.on(StyleOn(Style.BOLD))
            bold = not bold
            i += 2
        elif ch == '*':
            if italic:
                out.off(Style.ITALIC)
            else:
                out.on(StyleOn(Style.ITALIC))
            italic = not italic
            i += 1
        elif ch == '`':
            if code:
                out.off(Style.CODE)
            else:
                out.on(StyleOn(Style.CODE))
            code = not code
            i += 1
        elif ch == '\t':
            out.text(_tab_to_stop(out.used, tab_width))
            i += 1
        else:
            out.text(ch)
            i += 1
    if bold or italic or code:
        out.reset()
    return out


class MarkdownRenderer(Renderer):
    name = "markdown"

    def __init__(self, tab_width: int = EditorConstants.TAB_WIDTH):
        self.tab_width = tab_width

    def render(self, text: str, width: int) -> StyledBuffer:
        out = StyledBuffer(width)
        info = classify_line(text)
        if info.kind == LineKind.HEADER:
            out.on(header(info.level))
            out.text("#" * info.level + " " + info.body)
            out.off(Style.HEADER)
        elif info.kind == LineKind.LIST_ITEM:
            out.text(expand_indent(info.indent, self.tab_width))
            out.on(accent(Accent.BULLET))
            out.text(info.bullet)
            out.off(Style.ACCENT)
            out.text(" ")
            scan_inline(info.body, out, self.tab_width)
        elif info.kind == LineKind.RULE:
            out.on(accent(Accent.RULE))
            out.text("-" * width)
            out.off(Style.ACCENT)
        elif info.kind == LineKind.CODE_FENCE:
            out.on(accent(Accent.FENCE))
            out.text(info.body)
            out.off(Style.ACCENT)
        else:
            scan_inline(info.body, out, self.tab_width)
        out.close()
        return out


def expand_indent(indent: str, tab_width: int) -> str:
    col = 0
    for ch in indent:
        col += len(_tab_to_stop(col, tab_width)) if ch == '\t' else 1
    return " " * col


# --- C syntax ---

C_KEYWORDS = frozenset({
    "auto", "break", "case", "const", "continue", "default", "do", "else",
    "enum", "extern", "for", "goto", "if", "register", "return", "sizeof",
    "static", "struct", "switch", "typedef", "union", "volatile", "while",
})

C_TYPES = frozenset({
    "char", "double", "float", "int", "long", "short", "signed", "unsigned",
    "void", "size_t", "FILE", "HANDLE", "DWORD", "BOOL", "boolean",
})

C_CONSTANTS = frozenset({"true", "false", "NULL", "BOOL", "boolean"})


def _is_ident(ch: str) -> bool:
    return ch.isalnum() or ch == '_'


class SyntaxHighlighter(Renderer):
    """Token classifier for C-like source; not a parser."""

    name = "c"

    def __init__(self, keywords=C_KEYWORDS, types=C_TYPES, constants=C_CONSTANTS):
        self.word_classes = (
            (keywords, Accent.KEYWORD),
            (types, Accent.TYPE),
            (constants, Accent.CONSTANT),
        )

    def classify_word(self, word: str) -> Optional[Accent]:
        for words, kind in self.word_classes:
            if word in words:
                return kind
        return None

    def _span(self, out: StyledBuffer, kind: Accent, text: str) -> None:
        out.on(accent(kind))
        out.text(text)
        out.reset()

    def render(self, text: str, width: int) -> StyledBuffer:
        out = StyledBuffer(width)
        if text.startswith('#'):
            self._span(out, Accent.DIRECTIVE, text)
            return out

        i = 0
        n = len(text)
        while i < n and not out.exhausted:
            ch = text[i]
            if text.startswith('//', i):
                self._span(out, Accent.COMMENT, text[i:])
                break
            if ch == '"':
                j = i + 1
                while j < n and text[j] != '"':
                    j += 2 if text[j] == '\\' else 1
                j = min(j + 1, n)
                self._span(out, Accent.STRING, text[i:j])
                i = j
            elif ch.isdigit():
                j = i
                while j < n and text[j].isdigit():
                    j += 1
                self._span(out, Accent.NUMBER, text[i:j])
                i = j
            elif ch.isalpha() or ch == '_':
                j = i
                while j < n and _is_ident(text[j]):
                    j += 1
                word = text[i:j]
                kind = None
                whole = (i == 0 or not _is_ident(text[i - 1])) and (j == n or not _is_ident(text[j]))
                if whole:
                    kind = self.classify_word(word)
                if kind is not None:
                    self._span(out, kind, word)
                else:
                    out.text(word)
                i = j
            else:
                out.text(ch)
                i += 1
        out.close()
        return out


C_EXTENSIONS = ('.c', '.h')


def renderer_for(filename: Optional[str], preference: str = "auto",
                 tab_width: int = EditorConstants.TAB_WIDTH) -> Renderer:
    """Pick the preview strategy for a file.

    ``preference`` is ``"markdown"``, ``"c"`` or ``"auto"``; auto picks the
    highlighter for C sources and Markdown for everything else.
    """
    if preference == "c":
        return SyntaxHighlighter()
    if preference == "markdown":
        return MarkdownRenderer(tab_width)
    if filename and os.path.splitext(filename)[1].lower() in C_EXTENSIONS:
        return SyntaxHighlighter()
    return MarkdownRenderer(tab_width)
