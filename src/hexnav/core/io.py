from __future__ import annotations

import logging
import os
from collections import OrderedDict
from contextlib import suppress
from typing import Any

try:
    import mmap as _mmap_mod  # type: ignore
except Exception:  # pragma: no cover - platform-specific
    _mmap_mod = None  # type: ignore

logger = logging.getLogger(__name__)


class InvalidOffset(ValueError):
    """Raised when an invalid (e.g., negative) offset is provided."""


class PagedReader:
    """Read-only, fixed-size byte source for the viewer.

    Bytes come from one of three backings: an mmap of the file (preferred),
    an in-memory buffer (`from_bytes`), or buffered reads through a small LRU
    page cache when mapping is impossible. Callers only ever ask for slices
    bounded by the viewport or a scan chunk, so the file is never loaded
    whole.
    """

    def __init__(
        self,
        path: str,
        *,
        page_size: int = 64 * 1024,
        cache_pages: int = 16,
        use_mmap: bool = True,
    ) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        if cache_pages <= 0:
            raise ValueError("cache_pages must be positive")
        try:
            size = os.stat(path).st_size
        except FileNotFoundError:
            raise FileNotFoundError(f"File not found: {path}") from None

        self._path = path
        self._size = int(size)
        self._page_size = int(page_size)
        self._cache_limit = int(cache_pages)
        self._pages: OrderedDict[int, bytes] = OrderedDict()
        self._fh = open(path, "rb", buffering=0)  # noqa: SIM115
        self._mmap = None
        self._buffer: Any = None  # the mmap once mapped

        # mmap refuses zero-length files, so an empty file stays on the paged path
        if use_mmap and _mmap_mod is not None and self._size > 0:
            try:
                self._mmap = _mmap_mod.mmap(self._fh.fileno(), length=0, access=_mmap_mod.ACCESS_READ)
            except (OSError, ValueError) as exc:
                logger.info("mmap failed for %s, using buffered reads: %s", path, exc)
            else:
                self._buffer = self._mmap
        logger.debug("opened %s (%d bytes, mmap=%s)", path, self._size, self._mmap is not None)

    @classmethod
    def from_bytes(cls, data: bytes, *, name: str = "<memory>") -> PagedReader:
        """Build a reader over an in-memory buffer."""
        reader = cls.__new__(cls)
        reader._path = name
        reader._size = len(data)
        reader._page_size = 64 * 1024
        reader._cache_limit = 1
        reader._pages = OrderedDict()
        reader._fh = None
        reader._mmap = None
        reader._buffer = bytes(data)
        return reader

    def close(self) -> None:
        if self._mmap is not None:
            with suppress(Exception):
                self._mmap.close()
            self._mmap = None
            self._buffer = None
        if self._fh is not None:
            with suppress(Exception):
                self._fh.close()
            self._fh = None

    def __enter__(self) -> PagedReader:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __len__(self) -> int:
        return self._size

    @property
    def size(self) -> int:
        """File size in bytes."""
        return self._size

    @property
    def path(self) -> str:
        return self._path

    def _end(self, offset: int, length: int) -> int:
        """Validate a request and return its end, truncated at EOF."""
        if offset < 0:
            raise InvalidOffset("offset must be >= 0")
        if length < 0:
            raise InvalidOffset("length must be >= 0")
        return min(self._size, offset + length)

    def _page(self, index: int) -> bytes:
        page = self._pages.pop(index, None)
        if page is None:
            start = index * self._page_size
            page = b""
            if start < self._size:
                self._fh.seek(start)  # type: ignore[union-attr]
                page = self._fh.read(min(self._page_size, self._size - start))  # type: ignore[union-attr]
            if len(self._pages) >= self._cache_limit:
                self._pages.popitem(last=False)
        self._pages[index] = page  # most recently used goes last
        return page

    def read(self, offset: int, length: int) -> bytes:
        """Read up to `length` bytes at `offset`; b"" at or past EOF.

        Raises:
            InvalidOffset: If `offset` or `length` is negative
        """
        end = self._end(offset, length)
        if offset >= end:
            return b""
        if self._buffer is not None:
            return bytes(self._buffer[offset:end])

        out = bytearray()
        pos = offset
        while pos < end:
            index, within = divmod(pos, self._page_size)
            chunk = self._page(index)[within : within + end - pos]
            if not chunk:
                break
            out += chunk
            pos += len(chunk)
        return bytes(out)

    def byte_at(self, offset: int) -> int | None:
        """Byte value at `offset`, or None at EOF."""
        self._end(offset, 0)
        if offset >= self._size:
            return None
        if self._buffer is not None:
            return self._buffer[offset]
        index, within = divmod(offset, self._page_size)
        page = self._page(index)
        return page[within] if within < len(page) else None

    def slice(self, offset: int, length: int) -> memoryview | bytes:
        """Zero-copy view of a range when the backing allows it, else bytes.

        The view is only valid while the reader is open.
        """
        end = self._end(offset, length)
        if offset >= end:
            return b""
        if self._buffer is not None:
            return memoryview(self._buffer)[offset:end]
        return self.read(offset, length)


def write_range(reader: PagedReader, start: int, end: int, path: str, *, chunk_size: int = 1 << 20) -> int:
    """Copy bytes [start, end) of `reader` into a new file at `path`.

    Returns the number of bytes written; OSError propagates to the caller.
    """
    written = 0
    with open(path, "wb") as out:
        pos = max(0, start)
        while pos < end:
            data = reader.read(pos, min(chunk_size, end - pos))
            if not data:
                break
            out.write(data)
            written += len(data)
            pos += len(data)
    logger.info("wrote %d bytes [0x%X, 0x%X) to %s", written, start, end, path)
    return written
