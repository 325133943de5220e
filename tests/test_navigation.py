from __future__ import annotations

from itertools import product

import pytest

from hexnav.core.io import PagedReader
from hexnav.core.navigation import (
    PERCENT_PRODUCT_LIMIT,
    NavigationController,
    Selection,
    extend_selection,
)


def make_nav(size: int, bytes_per_row: int = 4, rows: int = 3) -> NavigationController:
    reader = PagedReader.from_bytes(bytes(i % 256 for i in range(size)))
    return NavigationController(reader, bytes_per_row=bytes_per_row, visible_rows=rows)


class _HugeReader:
    """Only the size matters for percent jumps."""

    def __init__(self, size: int) -> None:
        self.size = size


def test_selection_follows_anchor_and_cursor() -> None:
    nav = make_nav(16)
    for anchor, first, second in product(range(16), repeat=3):
        nav.clear_selection()
        nav.set_cursor(anchor)
        nav.toggle_selecting()
        nav.set_cursor(first)
        nav.set_cursor(second)
        expected = (min(anchor, second), max(anchor, second) + 1)
        assert nav.selection.as_tuple() == expected, (anchor, first, second)


def test_extend_selection_flips_anchor() -> None:
    # selected [4, 6) with the cursor on 5; jump left past the anchor
    assert extend_selection(5, 2, 4, 6) == (2, 5)
    # selected [4, 6) with the cursor on 4; jump right past the anchor
    assert extend_selection(4, 8, 4, 6) == (5, 9)


def test_selection_dataclass() -> None:
    sel = Selection(3, 7)
    assert len(sel) == 4
    assert not sel.is_empty
    assert Selection().is_empty


@pytest.mark.parametrize(("size", "expected"), [(50, 40), (48, 36), (12, 0), (5, 0)])
def test_max_view_offset(size: int, expected: int) -> None:
    nav = make_nav(size, bytes_per_row=4, rows=3)
    assert nav.max_view_offset == expected


def test_cursor_stays_inside_viewport() -> None:
    nav = make_nav(50, bytes_per_row=4, rows=3)
    for target in (0, 13, 49, 20, 3, 37, 0):
        nav.set_cursor(target)
        vp = nav.viewport
        assert vp.contains(nav.cursor)
        assert nav.view_offset % 4 == 0
        assert 0 <= nav.view_offset <= nav.max_view_offset


def test_file_end_scrolls_to_last_page() -> None:
    nav = make_nav(50, bytes_per_row=4, rows=3)
    nav.file_end()
    assert nav.cursor == 49
    assert nav.view_offset == 40
    nav.file_start()
    assert (nav.cursor, nav.view_offset) == (0, 0)


def test_set_cursor_clamps() -> None:
    nav = make_nav(10)
    nav.set_cursor(1000)
    assert nav.cursor == 9
    nav.set_cursor(-3)
    assert nav.cursor == 0
    nav.move_left()
    assert nav.cursor == 0


def test_row_navigation() -> None:
    nav = make_nav(10, bytes_per_row=4)
    nav.set_cursor(5)
    nav.row_end()
    assert nav.cursor == 7
    nav.row_start()
    assert nav.cursor == 4
    nav.set_cursor(9)
    nav.row_end()
    assert nav.cursor == 9  # short last row


def test_move_down_past_eof_is_ignored() -> None:
    nav = make_nav(10, bytes_per_row=4)
    nav.set_cursor(6)
    nav.move_down()
    assert nav.cursor == 6
    nav.set_cursor(5)
    nav.move_down()
    assert nav.cursor == 9
    nav.move_up()
    assert nav.cursor == 5


def test_move_relative() -> None:
    nav = make_nav(100)
    nav.move_relative(30)
    assert nav.cursor == 30
    nav.move_relative(-50)
    assert nav.cursor == 0
    nav.move_relative(500)
    assert nav.cursor == 99


@pytest.mark.parametrize(
    ("size", "percent", "expected"),
    [(1001, 50, 500), (11, 15, 2), (11, 0, 0), (11, 100, 10), (1, 50, 0)],
)
def test_goto_percent(size: int, percent: int, expected: int) -> None:
    nav = make_nav(size)
    nav.goto_percent(percent)
    assert nav.cursor == expected


@pytest.mark.parametrize("percent", [1, 10, 50, 90, 99])
def test_goto_percent_huge_file_stays_close(percent: int) -> None:
    size = PERCENT_PRODUCT_LIMIT * 4
    nav = NavigationController(_HugeReader(size))  # type: ignore[arg-type]
    nav.goto_percent(percent)
    exact = (size - 1) * percent // 100
    assert exact <= nav.cursor < exact + percent


def test_percent_readout() -> None:
    nav = make_nav(11)
    nav.set_cursor(5)
    assert nav.percent == 50
    assert make_nav(1).percent == 100


def test_page_down_and_up() -> None:
    nav = make_nav(100, bytes_per_row=4, rows=5)
    nav.set_cursor(5)
    seen = []
    for _ in range(5):
        nav.page_down()
        seen.append((nav.view_offset, nav.cursor))
    assert seen == [(20, 25), (40, 45), (60, 65), (80, 85), (80, 85)]
    nav.page_up()
    assert (nav.view_offset, nav.cursor) == (60, 65)


def test_page_up_at_top_is_noop() -> None:
    nav = make_nav(100, bytes_per_row=4, rows=5)
    nav.set_cursor(3)
    nav.page_up()
    assert (nav.view_offset, nav.cursor) == (0, 3)


def test_resize_realigns_view() -> None:
    nav = make_nav(100, bytes_per_row=4, rows=5)
    nav.set_cursor(60)
    nav.resize(8, 2)
    assert nav.view_offset % 8 == 0
    assert nav.viewport.contains(60)
    nav.resize(0, 2)
    assert nav.bytes_per_row == 0
    assert nav.view_size == 0


def test_select_ascii_run() -> None:
    reader = PagedReader.from_bytes(b"\x00\x01hello world\x00xyz")
    nav = NavigationController(reader, bytes_per_row=4, visible_rows=4)
    nav.set_cursor(4)
    assert nav.select_ascii_run()
    assert nav.selection.as_tuple() == (2, 13)
    assert nav.cursor == 12
    assert nav.selecting
    assert nav.selected_bytes() == b"hello world"


def test_select_ascii_run_rejects_binary_byte() -> None:
    reader = PagedReader.from_bytes(b"\x00abc")
    nav = NavigationController(reader, bytes_per_row=4, visible_rows=1)
    assert not nav.select_ascii_run()
    assert nav.selection.is_empty


def test_select_ascii_run_crosses_chunks() -> None:
    data = b"\x00" + b"A" * 9000 + b"\x00"
    nav = NavigationController(PagedReader.from_bytes(data), bytes_per_row=16, visible_rows=4)
    nav.set_cursor(4500)
    assert nav.select_ascii_run()
    assert nav.selection.as_tuple() == (1, 9001)


def test_toggle_finish_cancel_clear() -> None:
    nav = make_nav(20)
    nav.set_cursor(2)
    nav.toggle_selecting()
    assert nav.selection.as_tuple() == (2, 3)
    nav.set_cursor(5)
    nav.finish_selection()
    assert not nav.selecting
    assert nav.selection.as_tuple() == (2, 6)
    # a finished selection survives cursor moves and cancel
    nav.set_cursor(10)
    assert not nav.cancel_selection()
    assert nav.selection.as_tuple() == (2, 6)

    nav.toggle_selecting()
    assert nav.cancel_selection()
    assert nav.selection.is_empty
    assert not nav.selecting

    nav.toggle_selecting()
    nav.clear_selection()
    assert nav.selection.is_empty
    assert nav.selected_bytes() == b""


def test_empty_file_is_inert() -> None:
    nav = NavigationController(PagedReader.from_bytes(b""), bytes_per_row=4, visible_rows=3)
    nav.move_right()
    nav.file_end()
    nav.goto_percent(50)
    nav.page_down()
    nav.toggle_selecting()
    assert nav.cursor == 0
    assert not nav.selecting
    assert nav.selection.is_empty
    assert not nav.select_ascii_run()
