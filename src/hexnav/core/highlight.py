"""Per-cell highlight mask for the visible window.

Three independent sources paint the viewport: the selection, every other
occurrence of the selected bytes ("auto-highlight"), and matches of the
active search pattern. Each class has a companion run-end bit on the last
cell of every maximal contiguous run, which the renderer uses to decide
whether the separator after a cell keeps the highlight color.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from enum import IntFlag

from hexnav.core.io import PagedReader


class HighlightFlag(IntFlag):
    NONE = 0
    SEARCH = 1
    SEARCH_END = 2
    HIGHLIGHT = 4
    HIGHLIGHT_END = 8
    SELECTED = 16
    SELECTED_END = 32


# Bytes materialised per step when scanning for occurrences
SCAN_CHUNK = 64 * 1024
# Leading bytes of the needle used to locate candidate occurrences
PREFIX_LEN = 64


def mark_selection(
    mask: list[HighlightFlag], view_offset: int, start: int, end: int
) -> None:
    view_size = len(mask)
    first = max(start, view_offset) - view_offset
    last = min(end - view_offset, view_size)
    if first >= last:
        return
    for i in range(first, last):
        mask[i] = HighlightFlag.SELECTED
    mask[last - 1] = HighlightFlag.SELECTED | HighlightFlag.SELECTED_END


def same_range(reader: PagedReader, a: int, b: int, length: int) -> bool:
    """Compare reader[a:a+length] with reader[b:b+length] one chunk at a time."""
    if a == b:
        return True
    pos = 0
    while pos < length:
        n = min(SCAN_CHUNK, length - pos)
        if reader.slice(a + pos, n) != reader.slice(b + pos, n):
            return False
        pos += n
    return True


def find_occurrences(
    reader: PagedReader,
    prefix: bytes,
    lo: int,
    hi: int,
    matches_rest: Callable[[int], bool],
) -> Iterator[int]:
    """Yield offsets in [lo, hi) where `prefix` occurs and `matches_rest` agrees.

    The caller guarantees a whole needle fits at every offset below `hi`.
    """
    overlap = len(prefix) - 1
    pos = lo
    while pos < hi:
        n = min(SCAN_CHUNK, hi - pos)
        window = reader.read(pos, n + overlap)
        i = window.find(prefix)
        while i != -1 and i < n:
            if matches_rest(pos + i):
                yield pos + i
            i = window.find(prefix, i + 1)
        pos += n


def paint_occurrences(
    mask: list[HighlightFlag],
    view_offset: int,
    reader: PagedReader,
    needle_len: int,
    occurrences: Callable[[int, int], Iterable[int]],
    flag: HighlightFlag,
    end_flag: HighlightFlag,
) -> None:
    """Paint every occurrence that touches the viewport, then mark run ends.

    Occurrences starting before the viewport or ending after it paint their
    visible part. Touching or overlapping occurrences form one run, so only
    the last cell of each maximal run gets `end_flag`.
    """
    view_size = len(mask)
    size = reader.size
    if needle_len == 0 or view_size == 0 or needle_len > size:
        return
    view_end = min(view_offset + view_size, size)
    # occurrences may start up to needle_len - 1 bytes before the viewport
    # but must start inside it
    scan_start = max(0, view_offset - needle_len + 1)
    scan_end = min(view_end, size - needle_len + 1)
    if scan_start >= scan_end:
        return

    painted = False
    for offset in occurrences(scan_start, scan_end):
        first = max(view_offset, offset) - view_offset
        last = min(view_end, offset + needle_len) - view_offset
        for i in range(first, last):
            mask[i] |= flag
        painted = True
    if not painted:
        return
    for i in range(view_end - view_offset):
        if mask[i] & flag and (i + 1 == view_size or not mask[i + 1] & flag):
            mask[i] |= end_flag


def mark_pattern(
    mask: list[HighlightFlag],
    view_offset: int,
    reader: PagedReader,
    needle: bytes,
    flag: HighlightFlag,
    end_flag: HighlightFlag,
) -> None:
    """Mark every occurrence of `needle` that touches the viewport."""
    prefix, tail = needle[:PREFIX_LEN], needle[PREFIX_LEN:]
    skip = len(prefix)

    def matches_rest(offset: int) -> bool:
        return not tail or reader.slice(offset + skip, len(tail)) == tail

    paint_occurrences(
        mask,
        view_offset,
        reader,
        len(needle),
        lambda lo, hi: find_occurrences(reader, prefix, lo, hi, matches_rest),
        flag,
        end_flag,
    )


def mark_copies(
    mask: list[HighlightFlag], view_offset: int, reader: PagedReader, start: int, end: int
) -> None:
    """Auto-highlight every copy of the selected bytes that touches the viewport.

    The selection is compared in place through the reader, never copied.
    Only its first PREFIX_LEN bytes are read to locate candidates.
    """
    length = end - start
    if length <= 0:
        return
    prefix = reader.read(start, min(PREFIX_LEN, length))
    skip = len(prefix)

    def matches_rest(offset: int) -> bool:
        return same_range(reader, start + skip, offset + skip, length - skip)

    def occurrences(lo: int, hi: int) -> Iterable[int]:
        # the selection always matches itself, so no need to read it again
        if lo <= start < hi:
            yield from find_occurrences(reader, prefix, lo, start, matches_rest)
            yield start
            yield from find_occurrences(reader, prefix, start + 1, hi, matches_rest)
        else:
            yield from find_occurrences(reader, prefix, lo, hi, matches_rest)

    paint_occurrences(
        mask,
        view_offset,
        reader,
        length,
        occurrences,
        HighlightFlag.HIGHLIGHT,
        HighlightFlag.HIGHLIGHT_END,
    )


def build_mask(
    reader: PagedReader,
    view_offset: int,
    view_size: int,
    selection: tuple[int, int],
    search_pattern: bytes,
) -> list[HighlightFlag]:
    """Compute the highlight flags for every cell of the viewport."""
    mask = [HighlightFlag.NONE] * max(0, view_size)
    if not mask:
        return mask
    start, end = selection
    mark_selection(mask, view_offset, start, end)
    mark_copies(mask, view_offset, reader, start, end)
    mark_pattern(
        mask, view_offset, reader, search_pattern, HighlightFlag.SEARCH, HighlightFlag.SEARCH_END
    )
    return mask


@dataclass(frozen=True)
class _MaskKey:
    view_offset: int
    view_size: int
    selection: tuple[int, int]
    search_pattern: bytes


class HighlightCache:
    """Lazily rebuilt mask; recomputed only when one of its inputs changes."""

    def __init__(self, reader: PagedReader) -> None:
        self._reader = reader
        self._key: _MaskKey | None = None
        self._mask: list[HighlightFlag] = []

    def invalidate(self) -> None:
        self._key = None

    def get(
        self,
        view_offset: int,
        view_size: int,
        selection: tuple[int, int],
        search_pattern: bytes,
    ) -> list[HighlightFlag]:
        key = _MaskKey(view_offset, view_size, selection, bytes(search_pattern))
        if key != self._key:
            self._mask = build_mask(self._reader, view_offset, view_size, selection, search_pattern)
            self._key = key
        return self._mask
