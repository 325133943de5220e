"""Runtime settings for one viewer session."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass

from hexnav.core.endian import Endian, normalize_endian
from hexnav.ui.palette import Palette, palette_for

# label + ": " before the hex cells and the two-space gap before the ASCII column
ROW_OVERHEAD = 5


@dataclass(frozen=True)
class ViewerConfig:
    path: str
    endian: Endian = "little"
    signed: bool = False
    theme: str = "dark"
    bytes_per_row: int | None = None
    log_file: str | None = None
    log_level: str = "INFO"

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> ViewerConfig:
        return cls(
            path=args.path,
            endian=normalize_endian(args.endian) or "little",
            signed=bool(args.signed),
            theme="light" if args.light_mode else "dark",
            bytes_per_row=args.bytes_per_row,
            log_file=args.log_file,
            log_level=args.log_level.upper(),
        )

    @property
    def palette(self) -> Palette:
        return palette_for(self.theme)

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level) if self.log_level else logging.INFO


def derive_bytes_per_row(columns: int, offset_digits: int) -> int:
    """Bytes that fit one terminal row: 3 columns of hex plus 1 of ASCII each."""
    return max(0, (columns - (offset_digits + ROW_OVERHEAD) + 1) // 4)
