from __future__ import annotations

import logging

from hexnav.core.io import PagedReader
from hexnav.core.navigation import NavigationController
from hexnav.core.search_term import SearchMode

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

NOT_FOUND_FORWARD = "Pattern not found searching forward"
NOT_FOUND_BACKWARD = "Pattern not found searching backward"


def find_bytes(reader: PagedReader, needle: bytes, start: int) -> int | None:
    """Find `needle` bytes at or after `start`. Returns offset or None.

    Efficient chunked scan without loading the entire file. Overlaps chunks by
    len(needle)-1 to catch boundary matches.
    """
    if start < 0:
        start = 0
    if not needle:
        return start if start <= reader.size else None
    if start >= reader.size:
        return None

    chunk_size = max(CHUNK_SIZE, 2 * len(needle))
    overlap = len(needle) - 1
    pos = start
    while pos < reader.size:
        end = min(reader.size, pos + chunk_size)
        data = reader.read(pos, end - pos)
        idx = data.find(needle)
        if idx != -1:
            return pos + idx
        if end >= reader.size:
            break
        # Advance with overlap to catch cross-boundary matches
        pos = end - overlap
    return None


def rfind_bytes(reader: PagedReader, needle: bytes, before: int) -> int | None:
    """Find the last `needle` that starts strictly before `before`.

    Mirror image of `find_bytes`: scans chunks backwards with the same overlap.
    """
    if not needle:
        return None
    n = len(needle)
    chunk_size = max(CHUNK_SIZE, 2 * n)
    hi = min(reader.size, before + n - 1)
    while hi >= n:
        lo = max(0, hi - chunk_size)
        data = reader.read(lo, hi - lo)
        idx = data.rfind(needle)
        if idx != -1:
            return lo + idx
        if lo == 0:
            break
        hi = lo + n - 1
    return None


class SearchController:
    """Linear search for the active pattern, moving the cursor on success.

    Searches never wrap around: they stop at the file boundaries and leave a
    not-found message in `message` for the status line.
    """

    def __init__(self, nav: NavigationController) -> None:
        self.nav = nav
        self.pattern = b""
        self.mode: SearchMode | None = None
        self.message: str | None = None

    @property
    def has_active_search(self) -> bool:
        return bool(self.pattern)

    def set_pattern(self, pattern: bytes, mode: SearchMode) -> None:
        self.pattern = bytes(pattern)
        self.mode = mode
        self.message = None
        self.nav.need_redraw = True
        logger.info("search pattern set: mode=%s length=%d", mode.short_label, len(self.pattern))

    def clear(self) -> None:
        self.pattern = b""
        self.mode = None
        self.message = None
        self.nav.need_redraw = True

    def _jump(self, offset: int) -> None:
        # A match ends an in-progress selection instead of stretching it to the hit.
        self.nav.selecting = False
        self.nav.set_cursor(offset)
        self.nav.need_redraw = True
        self.message = None

    def find_next(self) -> int | None:
        if not self.pattern:
            return None
        found = find_bytes(self.nav.reader, self.pattern, self.nav.cursor + 1)
        if found is None:
            self.message = NOT_FOUND_FORWARD
            logger.debug("no match after 0x%X", self.nav.cursor)
            return None
        self._jump(found)
        return found

    def find_previous(self) -> int | None:
        if not self.pattern:
            return None
        found = rfind_bytes(self.nav.reader, self.pattern, self.nav.cursor)
        if found is None:
            self.message = NOT_FOUND_BACKWARD
            logger.debug("no match before 0x%X", self.nav.cursor)
            return None
        self._jump(found)
        return found
