from __future__ import annotations

from contextlib import suppress

from rich.style import Style
from rich.text import Text
from textual import events
from textual.widget import Widget

from hexnav.config import derive_bytes_per_row
from hexnav.core.highlight import HighlightCache, HighlightFlag
from hexnav.core.navigation import NavigationController
from hexnav.core.rows import CellView, RowView, build_rows, offset_width
from hexnav.core.search import SearchController
from hexnav.ui.palette import DARK, Palette

# (class bit, run-end bit) in separator precedence order
_RUNS = (
    (HighlightFlag.SELECTED, HighlightFlag.SELECTED_END),
    (HighlightFlag.HIGHLIGHT, HighlightFlag.HIGHLIGHT_END),
    (HighlightFlag.SEARCH, HighlightFlag.SEARCH_END),
)


def cell_style(cell: CellView, palette: Palette, *, ascii_column: bool = False) -> Style | None:
    """Style for one cell: cursor, then selection, auto-highlight, search."""
    flags = cell.flags
    if cell.is_cursor:
        if flags & HighlightFlag.SELECTED:
            return Style(color=palette.selection_fg, bgcolor=palette.selected_cursor_bg)
        if flags & HighlightFlag.SEARCH:
            return Style(color=palette.search_match_fg, bgcolor=palette.search_match_cursor_bg)
        return Style(color=palette.cursor_fg, bgcolor=palette.cursor_bg)
    if flags & HighlightFlag.SELECTED:
        return Style(color=palette.selection_fg, bgcolor=palette.selection_bg)
    if flags & HighlightFlag.HIGHLIGHT:
        return Style(color=palette.selection_match_fg, bgcolor=palette.selection_match_bg)
    if flags & HighlightFlag.SEARCH:
        return Style(color=palette.search_match_fg, bgcolor=palette.search_match_bg)
    if ascii_column and not cell.is_text:
        return Style(color=palette.non_ascii_fg)
    return None


def separator_style(flags: HighlightFlag, palette: Palette) -> Style | None:
    """Style of the gap after a cell: the first highlight whose run continues."""
    for klass, end in _RUNS:
        if flags & klass and not flags & end:
            if klass is HighlightFlag.SELECTED:
                return Style(bgcolor=palette.selection_bg)
            if klass is HighlightFlag.HIGHLIGHT:
                return Style(bgcolor=palette.selection_match_bg)
            return Style(bgcolor=palette.search_match_bg)
    return None


def render_row(row: RowView, bytes_per_row: int, palette: Palette) -> Text:
    line = Text()
    line.append(row.label, style=Style(color=palette.offsets_fg))
    line.append(" ")
    last = len(row.cells) - 1
    for idx, cell in enumerate(row.cells):
        line.append(cell.hex, style=cell_style(cell, palette))
        if idx < bytes_per_row - 1:
            sep = separator_style(cell.flags, palette) if idx < last else None
            line.append(" ", style=sep)
    # Pad a short final row so the ASCII column stays aligned
    for pad in range(len(row.cells), bytes_per_row):
        line.append("  ")
        if pad < bytes_per_row - 1:
            line.append(" ")
    line.append("  ")
    for cell in row.cells:
        line.append(cell.glyph, style=cell_style(cell, palette, ascii_column=True))
    return line


class HexView(Widget):
    """Scrolling hex/ASCII grid over a NavigationController.

    Geometry follows the widget size: bytes per row are derived from the
    width unless fixed by configuration, and every row of the widget height
    is a visible data row.
    """

    can_focus = True

    BINDINGS = [
        ("left", "cursor_left", "Left"),
        ("right", "cursor_right", "Right"),
        ("up", "cursor_up", "Up"),
        ("down", "cursor_down", "Down"),
        ("home", "row_start", "Line start"),
        ("end", "row_end", "Line end"),
        ("ctrl+home", "file_start", "Start"),
        ("ctrl+end", "file_end", "End"),
        ("pageup", "page_up", "PgUp"),
        ("pagedown", "page_down", "PgDn"),
    ]

    def __init__(
        self,
        nav: NavigationController,
        search: SearchController,
        *,
        palette: Palette = DARK,
        bytes_per_row: int | None = None,
        id: str | None = None,  # noqa: A002 - Textual API
    ) -> None:
        super().__init__(id=id)
        self.nav = nav
        self.search = search
        self.palette = palette
        self._fixed_bytes_per_row = bytes_per_row
        self._cache = HighlightCache(nav.reader)

    # ---- Geometry ----
    def relayout(self, width: int, height: int) -> None:
        digits = offset_width(self.nav.size)
        bpr = self._fixed_bytes_per_row or derive_bytes_per_row(width, digits)
        self.nav.resize(bpr, height)
        self._cache.invalidate()
        self.refresh()

    def on_resize(self, event: events.Resize) -> None:
        self.relayout(event.size.width, event.size.height)

    # ---- Rendering ----
    def rows(self) -> list[RowView]:
        nav = self.nav
        view = nav.viewport
        mask = self._cache.get(
            view.view_offset, view.view_size, nav.selection.as_tuple(), self.search.pattern
        )
        return build_rows(
            nav.reader, view.view_offset, view.view_size, view.bytes_per_row, mask, nav.cursor
        )

    def render(self) -> Text:
        nav = self.nav
        if nav.size == 0:
            return Text("<empty>")
        if nav.bytes_per_row == 0:
            return Text("Window too small!")
        text = Text()
        for i, row in enumerate(self.rows()):
            if i:
                text.append("\n")
            text.append(render_row(row, nav.bytes_per_row, self.palette))
        nav.need_redraw = False
        return text

    # ---- Actions (bound in BINDINGS) ----
    def _moved(self) -> None:
        if self.nav.need_redraw:
            self.refresh()
        if hasattr(self.app, "update_status"):
            with suppress(Exception):
                self.app.update_status()  # type: ignore[attr-defined]

    def action_cursor_left(self) -> None:
        self.nav.move_left()
        self._moved()

    def action_cursor_right(self) -> None:
        self.nav.move_right()
        self._moved()

    def action_cursor_up(self) -> None:
        self.nav.move_up()
        self._moved()

    def action_cursor_down(self) -> None:
        self.nav.move_down()
        self._moved()

    def action_row_start(self) -> None:
        self.nav.row_start()
        self._moved()

    def action_row_end(self) -> None:
        self.nav.row_end()
        self._moved()

    def action_file_start(self) -> None:
        self.nav.file_start()
        self._moved()

    def action_file_end(self) -> None:
        self.nav.file_end()
        self._moved()

    def action_page_up(self) -> None:
        self.nav.page_up()
        self._moved()

    def action_page_down(self) -> None:
        self.nav.page_down()
        self._moved()

    def on_key(self, event: events.Key) -> None:
        # An open prompt sees keys before any binding; it hands back what it does not use
        if hasattr(self.app, "route_prompt_key"):
            consumed = self.app.route_prompt_key(event.key, event.character)  # type: ignore[attr-defined]
            if consumed:
                event.stop()
                event.prevent_default()
