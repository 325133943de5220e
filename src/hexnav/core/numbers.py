from __future__ import annotations

import math
from dataclasses import dataclass

from hexnav.core.endian import Endian, decode_float32, decode_float64, decode_int
from hexnav.core.io import PagedReader

MISSING = "—"


@dataclass(frozen=True)
class NumCell:
    label: str
    text: str
    ok: bool  # False when insufficient bytes


def _have(reader: PagedReader, offset: int, width: int) -> bool:
    return offset >= 0 and offset + width <= reader.size


def read_int(
    reader: PagedReader, offset: int, *, bits: int, signed: bool, endian: Endian
) -> NumCell:
    label = f"int {bits:>2}"
    width = bits // 8
    if not _have(reader, offset, width):
        return NumCell(label, MISSING, False)
    value = decode_int(reader.read(offset, width), endian, signed)
    return NumCell(label, str(value), True)


def read_float(reader: PagedReader, offset: int, *, bits: int, endian: Endian) -> NumCell:
    label = f"float {bits}"
    width = bits // 8
    if not _have(reader, offset, width):
        return NumCell(label, MISSING, False)
    data = reader.read(offset, width)
    value = decode_float32(data, endian) if bits == 32 else decode_float64(data, endian)
    if math.isnan(value) or math.isinf(value):
        return NumCell(label, str(value), True)
    return NumCell(label, f"{value:.6e}", True)


def inspect_at(
    reader: PagedReader, offset: int, *, endian: Endian, signed: bool
) -> list[NumCell]:
    """Readouts shown under the grid for the byte under the cursor.

    Order is int 8/16/32/64 then float 32/64; cells that would run past EOF
    come back with ok=False.
    """
    cells = [
        read_int(reader, offset, bits=bits, signed=signed, endian=endian)
        for bits in (8, 16, 32, 64)
    ]
    cells.append(read_float(reader, offset, bits=32, endian=endian))
    cells.append(read_float(reader, offset, bits=64, endian=endian))
    return cells
