from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from hexnav.core.highlight import HighlightFlag
from hexnav.core.io import PagedReader


def is_sidebar_ascii(byte: int) -> bool:
    """Bytes drawn as themselves in the ASCII column."""
    return 0x20 <= byte <= 0x7E


def is_printable_ascii(byte: int) -> bool:
    """Bytes that count as text for selection and search prefill (incl. tab/VT)."""
    return 0x20 <= byte <= 0x7E or byte in (0x09, 0x0B)


def ascii_glyph(byte: int) -> str:
    if byte == 0x0A:
        return "⏎"
    if byte == 0x00:
        return "⬦"
    if byte == 0x09:
        return "»"
    if is_sidebar_ascii(byte):
        return chr(byte)
    return "."


def offset_width(size: int) -> int:
    """Number of hex digits needed for the largest offset label."""
    return max(1, (size.bit_length() + 3) // 4)


@dataclass(frozen=True)
class CellView:
    offset: int
    value: int
    flags: HighlightFlag
    is_cursor: bool

    @property
    def hex(self) -> str:
        return f"{self.value:02X}"

    @property
    def glyph(self) -> str:
        return ascii_glyph(self.value)

    @property
    def is_text(self) -> bool:
        return is_sidebar_ascii(self.value)


@dataclass(frozen=True)
class RowView:
    offset: int
    label: str
    cells: tuple[CellView, ...]


def build_rows(
    reader: PagedReader,
    view_offset: int,
    view_size: int,
    bytes_per_row: int,
    mask: Sequence[HighlightFlag],
    cursor: int,
) -> list[RowView]:
    """Slice the viewport into rows of cells for the presentation layer.

    Reads exactly the visible window once; rows past EOF are omitted and the
    last row may be short.
    """
    if bytes_per_row <= 0 or view_size <= 0:
        return []
    data = reader.read(view_offset, view_size)
    width = offset_width(reader.size)
    rows: list[RowView] = []
    for row_start in range(0, len(data), bytes_per_row):
        offset = view_offset + row_start
        cells = tuple(
            CellView(
                offset=offset + i,
                value=b,
                flags=mask[row_start + i] if row_start + i < len(mask) else HighlightFlag.NONE,
                is_cursor=offset + i == cursor,
            )
            for i, b in enumerate(data[row_start : row_start + bytes_per_row])
        )
        rows.append(RowView(offset=offset, label=f"{offset:0{width}X}:", cells=cells))
    return rows
