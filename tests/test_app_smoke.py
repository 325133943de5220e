from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

textual = pytest.importorskip("textual")

from hexnav.config import ViewerConfig  # noqa: E402


def make_fixture_file(tmp_path: Path) -> Path:
    p = tmp_path / "tiny.bin"
    p.write_bytes(bytes(range(256)))
    return p


def test_app_constructs(tmp_path: Path) -> None:
    p = make_fixture_file(tmp_path)

    # Import here to avoid E402 when textual is absent
    from hexnav.app import HexnavApp

    app = HexnavApp(ViewerConfig(path=str(p)))
    # Do not run the app; just ensure construction doesn't crash
    assert app is not None
    assert app.nav is None


def test_app_select_and_search(tmp_path: Path) -> None:
    from hexnav.app import HexnavApp
    from hexnav.core.search import NOT_FOUND_FORWARD

    p = make_fixture_file(tmp_path)

    async def scenario() -> None:
        app = HexnavApp(ViewerConfig(path=str(p)))
        async with app.run_test(size=(100, 30)) as pilot:
            await pilot.press("right", "right")
            assert app.nav.cursor == 2

            await pilot.press("s", "right", "right", "enter")
            assert app.nav.selection.as_tuple() == (2, 5)
            assert not app.nav.selecting

            # non-printable selection prefills a binary term
            await pilot.press("f")
            assert app.search_field.has_focus()
            assert app.search_field.mode.is_binary
            assert app.search_field.text == "02 03 04 "

            await pilot.press("enter")
            assert app.search.pattern == b"\x02\x03\x04"
            assert app.search.message == NOT_FOUND_FORWARD

            # 'p' is not a hex digit, so it falls through to find-previous
            await pilot.press("p")
            assert app.nav.cursor == 2
            assert app.search_field.has_focus()

            await pilot.press("q")
            assert not app.search_field.has_focus()

    asyncio.run(scenario())


def test_app_offset_prompt(tmp_path: Path) -> None:
    from hexnav.app import HexnavApp

    p = make_fixture_file(tmp_path)

    async def scenario() -> None:
        app = HexnavApp(ViewerConfig(path=str(p), bytes_per_row=16))
        async with app.run_test(size=(100, 30)) as pilot:
            await pilot.press("o", "backspace", "0", "x", "4", "0", "enter")
            assert app.nav.cursor == 0x40
            await pilot.press("minus", "1", "6", "enter")
            assert app.nav.cursor == 0x30
            await pilot.press("5")
            assert app.nav.cursor == 1 + (255 * 50 - 1) // 100

    asyncio.run(scenario())


def test_hex_row_rendering() -> None:
    from rich.style import Style

    from hexnav.core.highlight import HighlightFlag
    from hexnav.core.rows import CellView, RowView
    from hexnav.ui.palette import DARK
    from hexnav.widgets.hex_view import cell_style, render_row, separator_style

    def row(values: bytes) -> RowView:
        cells = tuple(CellView(i, b, HighlightFlag.NONE, False) for i, b in enumerate(values))
        return RowView(0, "0:", cells)

    full = render_row(row(b"\x00\x01AB"), 4, DARK)
    short = render_row(row(b"\x00\x01"), 4, DARK)
    assert full.plain == "0: 00 01 41 42  ⬦.AB"
    # a short last row keeps the ASCII column aligned
    assert short.plain.index("⬦") == full.plain.index("⬦")

    selected = HighlightFlag.SELECTED
    cursor = CellView(0, 0x41, selected, True)
    assert cell_style(cursor, DARK) == Style(color=DARK.selection_fg, bgcolor=DARK.selected_cursor_bg)
    assert separator_style(selected, DARK) == Style(bgcolor=DARK.selection_bg)
    assert separator_style(selected | HighlightFlag.SELECTED_END, DARK) is None
    # a finished selection run hands the gap to the auto-highlight underneath
    both = selected | HighlightFlag.SELECTED_END | HighlightFlag.HIGHLIGHT
    assert separator_style(both, DARK) == Style(bgcolor=DARK.selection_match_bg)
