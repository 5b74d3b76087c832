"""Markpane - a terminal text editor with a live Markdown preview."""

__version__ = "1.0.0"

from .model import Document, Line, CursorPosition
from .layout import LayoutMode, LayoutCompositor
from .markup import MarkdownRenderer, SyntaxHighlighter, renderer_for

__all__ = [
    'Document',
    'Line',
    'CursorPosition',
    'LayoutMode',
    'LayoutCompositor',
    'MarkdownRenderer',
    'SyntaxHighlighter',
    'renderer_for',
]
