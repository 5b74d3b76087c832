"""Screen layouts: edit-only, split and preview-only row composition."""

from enum import Enum
from typing import TYPE_CHECKING, List

from .constants import EditorConstants
from .styles import Accent, Style, StyledBuffer, accent

if TYPE_CHECKING:
    from .markup import Renderer
    from .model import Document


class LayoutMode(Enum):
    EDIT_ONLY = "edit"
    SPLIT = "split"
    PREVIEW_ONLY = "preview"

    def cycle(self) -> "LayoutMode":
        order = [LayoutMode.EDIT_ONLY, LayoutMode.SPLIT, LayoutMode.PREVIEW_ONLY]
        return order[(order.index(self) + 1) % len(order)]

    @property
    def label(self) -> str:
        return {
            LayoutMode.EDIT_ONLY: "EDIT",
            LayoutMode.SPLIT: "SPLIT",
            LayoutMode.PREVIEW_ONLY: "PREVIEW",
        }[self]


def split_widths(screen_cols: int) -> tuple[int, int]:
    """Return (left, right) widths of the split layout, separator excluded."""
    left = max(0, screen_cols // 2 - EditorConstants.SEPARATOR_WIDTH)
    right = max(0, screen_cols - left - EditorConstants.SEPARATOR_WIDTH)
    return left, right


def edit_width(mode: LayoutMode, screen_cols: int) -> int:
    """Columns available to the editable text in ``mode``."""
    if mode == LayoutMode.SPLIT:
        return split_widths(screen_cols)[0]
    if mode == LayoutMode.PREVIEW_ONLY:
        return 0
    return screen_cols


class LayoutCompositor:
    """Builds the visible rows of a document for the current layout mode.

    Written against the :class:`Renderer` interface only; which strategy
    fills the preview column is the caller's choice.
    """

    def __init__(self, renderer: "Renderer", welcome: str = ""):
        self.renderer = renderer
        self.welcome = welcome

    def compose_rows(self, document: "Document", screen_rows: int, screen_cols: int,
                     show_welcome: bool = False) -> List[StyledBuffer]:
        rows = []
        mode = document.layout_mode
        for y in range(screen_rows):
            file_row = y + document.row_offset
            if file_row >= document.num_lines:
                welcome_row = show_welcome and document.num_lines == 0 and y == screen_rows // 3
                rows.append(self._filler_row(mode, screen_cols, welcome_row))
            else:
                rows.append(self.compose_row(document, file_row, screen_cols))
        return rows

    def compose_row(self, document: "Document", file_row: int, screen_cols: int) -> StyledBuffer:
        mode = document.layout_mode
        line = document.lines[file_row]
        if mode == LayoutMode.PREVIEW_ONLY:
            return self.renderer.render(line.rendered, screen_cols)

        scrolled = line.rendered[document.col_offset:]
        if mode == LayoutMode.EDIT_ONLY:
            out = StyledBuffer(screen_cols)
            out.text(scrolled)
            return out

        left, right = split_widths(screen_cols)
        out = StyledBuffer(screen_cols)
        out.text(scrolled[:left])
        out.pad(left)
        self._separator(out)
        out.extend(self.renderer.render(line.rendered, right))
        return out

    def _separator(self, out: StyledBuffer) -> None:
        out.on(accent(Accent.SEPARATOR))
        out.text("|" * EditorConstants.SEPARATOR_WIDTH)
        out.off(Style.ACCENT)

    def _filler(self, width: int, welcome_row: bool) -> StyledBuffer:
        out = StyledBuffer(width)
        out.on(accent(Accent.FILLER))
        out.text(EditorConstants.FILLER)
        out.off(Style.ACCENT)
        if welcome_row and self.welcome:
            caption = self.welcome[:width]
            padding = (width - len(caption)) // 2
            out.pad(max(1, padding))
            out.text(caption)
        return out

    def _filler_row(self, mode: LayoutMode, screen_cols: int, welcome_row: bool) -> StyledBuffer:
        if mode != LayoutMode.SPLIT:
            return self._filler(screen_cols, welcome_row)
        left, right = split_widths(screen_cols)
        out = StyledBuffer(screen_cols)
        out.extend(self._filler(left, welcome_row))
        out.pad(left)
        self._separator(out)
        return out
