"""Cursor, selection and viewport state for the byte grid.

`NavigationController` is the single owner of the cursor position, the
selection range and the scroll offset. Every operation clamps instead of
failing; on an empty file they are all no-ops.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from hexnav.core.io import PagedReader
from hexnav.core.rows import is_printable_ascii

logger = logging.getLogger(__name__)

# Above this, (size - 1) * percent would not fit a 64-bit product.
PERCENT_PRODUCT_LIMIT = (2**64 - 1) // 100


@dataclass
class Selection:
    """Half-open byte range [start, end); start == end means nothing selected."""

    start: int = 0
    end: int = 0

    @property
    def is_empty(self) -> bool:
        return self.end <= self.start

    def __len__(self) -> int:
        return max(0, self.end - self.start)

    def as_tuple(self) -> tuple[int, int]:
        return (self.start, self.end)


@dataclass(frozen=True)
class Viewport:
    view_offset: int
    view_size: int
    bytes_per_row: int

    @property
    def end(self) -> int:
        return self.view_offset + self.view_size

    def contains(self, offset: int) -> bool:
        return self.view_offset <= offset < self.end


def extend_selection(old_cursor: int, new_cursor: int, start: int, end: int) -> tuple[int, int]:
    """Return the selection after moving the cursor while selecting.

    Behaves like selecting in a text editor: the edge under the cursor
    follows it, and dragging past the opposite edge flips which edge stays
    anchored.
    """
    if new_cursor > old_cursor:
        if old_cursor + 1 == end:
            end = new_cursor + 1
        elif new_cursor >= end:
            start = end - 1
            end = new_cursor + 1
        else:
            start = new_cursor
            if end <= start:
                end = new_cursor + 1
    elif new_cursor < old_cursor:
        if old_cursor == start:
            start = new_cursor
        elif new_cursor < start:
            end = start + 1
            start = new_cursor
        else:
            end = new_cursor + 1
            if end <= start:
                start = new_cursor
    return start, end


class NavigationController:
    def __init__(
        self,
        reader: PagedReader,
        *,
        bytes_per_row: int = 0,
        visible_rows: int = 0,
    ) -> None:
        self.reader = reader
        self.cursor = 0
        self.selection = Selection()
        self.selecting = False
        self.view_offset = 0
        self.bytes_per_row = 0
        self.view_size = 0
        self.need_redraw = True
        if bytes_per_row > 0:
            self.resize(bytes_per_row, visible_rows)

    @property
    def size(self) -> int:
        return self.reader.size

    @property
    def viewport(self) -> Viewport:
        return Viewport(self.view_offset, self.view_size, self.bytes_per_row)

    @property
    def max_view_offset(self) -> int:
        """Largest row-aligned view offset that still ends on the last data row."""
        bpr = self.bytes_per_row
        size = self.size
        if bpr <= 0 or self.view_size >= size:
            return 0
        last_row = (size - 1) - (size - 1) % bpr
        return max(0, last_row - (self.view_size - bpr))

    @property
    def percent(self) -> int:
        size = self.size
        if size > 1:
            return 100 * self.cursor // (size - 1)
        return 100

    # ---- Geometry ----
    def resize(self, bytes_per_row: int, visible_rows: int) -> None:
        if bytes_per_row <= 0 or visible_rows <= 0:
            self.bytes_per_row = 0
            self.view_size = 0
        else:
            self.bytes_per_row = bytes_per_row
            self.view_size = bytes_per_row * visible_rows
            self.view_offset -= self.view_offset % bytes_per_row
        logger.debug(
            "resize: bytes_per_row=%d view_size=%d", self.bytes_per_row, self.view_size
        )
        self.need_redraw = True
        self.adjust_view()

    def adjust_view(self) -> None:
        """Scroll so the cursor is visible, snapping to row boundaries."""
        bpr = self.bytes_per_row
        if bpr <= 0 or self.view_size <= 0:
            return
        max_offset = self.max_view_offset
        cursor = self.cursor
        row_start = cursor - cursor % bpr
        view = self.viewport
        if view.contains(cursor):
            if self.view_offset > max_offset:
                self.view_offset = max_offset
                self.need_redraw = True
        elif cursor >= view.end:
            self.view_offset = min(max_offset, row_start + bpr - self.view_size)
            self.need_redraw = True
        else:
            self.view_offset = min(max_offset, row_start)
            self.need_redraw = True

    # ---- Cursor ----
    def set_cursor(self, target: int) -> None:
        size = self.size
        if size == 0:
            return
        target = max(0, min(target, size - 1))
        if target == self.cursor:
            return
        if self.selecting:
            self.selection.start, self.selection.end = extend_selection(
                self.cursor, target, self.selection.start, self.selection.end
            )
        self.cursor = target
        self.need_redraw = True
        self.adjust_view()

    def move_left(self) -> None:
        if self.cursor > 0:
            self.set_cursor(self.cursor - 1)

    def move_right(self) -> None:
        self.set_cursor(self.cursor + 1)

    def move_up(self) -> None:
        if self.bytes_per_row > 0 and self.cursor >= self.bytes_per_row:
            self.set_cursor(self.cursor - self.bytes_per_row)

    def move_down(self) -> None:
        if self.bytes_per_row > 0 and self.cursor + self.bytes_per_row < self.size:
            self.set_cursor(self.cursor + self.bytes_per_row)

    def row_start(self) -> None:
        if self.bytes_per_row > 0:
            self.set_cursor(self.cursor - self.cursor % self.bytes_per_row)

    def row_end(self) -> None:
        bpr = self.bytes_per_row
        if self.size > 0 and bpr > 0:
            self.set_cursor(min(self.cursor + bpr - self.cursor % bpr, self.size) - 1)

    def file_start(self) -> None:
        self.set_cursor(0)

    def file_end(self) -> None:
        if self.size > 0:
            self.set_cursor(self.size - 1)

    def move_relative(self, delta: int) -> None:
        self.set_cursor(max(0, self.cursor + delta))

    def goto_percent(self, percent: int) -> None:
        """Jump to `percent` of the file, rounding up so 100 hits the last byte."""
        size = self.size
        if size == 0:
            return
        max_offset = size - 1
        if percent >= 100:
            target = max_offset
        elif percent <= 0:
            target = 0
        elif max_offset > PERCENT_PRODUCT_LIMIT:
            # divide first so the product stays within 64 bits
            target = (1 + (max_offset - 1) // 100) * percent
        else:
            target = 1 + (max_offset * percent - 1) // 100
        self.set_cursor(target)

    # ---- Paging ----
    def page_up(self) -> None:
        if self.size == 0 or self.view_size <= 0 or self.view_offset == 0:
            return
        delta = min(self.view_offset, self.view_size)
        self.view_offset -= delta
        self.need_redraw = True
        self.set_cursor(self.cursor - delta)

    def page_down(self) -> None:
        if self.size == 0 or self.view_size <= 0:
            return
        delta = min(self.view_size, self.max_view_offset - self.view_offset)
        if delta <= 0:
            return
        self.view_offset += delta
        self.need_redraw = True
        self.set_cursor(self.cursor + delta)

    # ---- Selection ----
    def toggle_selecting(self) -> None:
        if self.selecting:
            self.selecting = False
        elif self.size > 0:
            self.selection = Selection(self.cursor, self.cursor + 1)
            self.selecting = True
        self.need_redraw = True

    def finish_selection(self) -> None:
        self.selecting = False
        self.need_redraw = True

    def cancel_selection(self) -> bool:
        """Drop a selection that is still being extended; False if none is."""
        if not self.selecting:
            return False
        self.clear_selection()
        return True

    def clear_selection(self) -> None:
        self.selecting = False
        self.selection = Selection()
        self.need_redraw = True

    def select_ascii_run(self) -> bool:
        """Select the run of printable ASCII around the cursor.

        Returns False (and leaves the selection alone) when the byte under
        the cursor is not printable.
        """
        size = self.size
        if size == 0:
            return False
        byte = self.reader.byte_at(self.cursor)
        if byte is None or not is_printable_ascii(byte):
            self.selecting = False
            return False

        chunk = 4096
        start = self.cursor
        while start > 0:
            lo = max(0, start - chunk)
            data = self.reader.read(lo, start - lo)
            i = len(data)
            while i > 0 and is_printable_ascii(data[i - 1]):
                i -= 1
            start = lo + i
            if i > 0:
                break

        end = self.cursor + 1
        while end < size:
            data = self.reader.read(end, chunk)
            i = 0
            while i < len(data) and is_printable_ascii(data[i]):
                i += 1
            end += i
            if i < len(data):
                break

        self.selection = Selection(start, end)
        self.selecting = True
        self.cursor = end - 1
        self.need_redraw = True
        self.adjust_view()
        return True

    def selected_bytes(self) -> bytes:
        if self.selection.is_empty:
            return b""
        return self.reader.read(self.selection.start, len(self.selection))
