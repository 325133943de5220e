from __future__ import annotations

import argparse
import logging
import os
import sys

from hexnav.config import ViewerConfig
from hexnav.core.endian import ENDIANS

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hexnav", description="hexnav terminal hex viewer (Textual)")
    parser.add_argument("path", help="Path to the file to view")
    parser.add_argument(
        "--endian",
        choices=ENDIANS,
        default="little",
        type=str.lower,
        help="Byte order of the value inspector (default: little)",
    )
    parser.add_argument(
        "--signed", action="store_true", help="Show inspector integers as signed"
    )
    theme = parser.add_mutually_exclusive_group()
    theme.add_argument("--light-mode", action="store_true", help="Use the light color theme")
    theme.add_argument("--dark-mode", action="store_true", help="Use the dark color theme (default)")
    parser.add_argument(
        "--bytes-per-row",
        type=int,
        default=None,
        help="Fixed number of bytes per row (default: fit the terminal width)",
    )
    parser.add_argument("--log-file", default=None, help="Write a debug log to this file")
    parser.add_argument(
        "--log-level", default="INFO", type=str.upper, choices=LOG_LEVELS, help="Log level"
    )
    return parser


def configure_logging(config: ViewerConfig) -> None:
    """The TUI owns the terminal, so logs only ever go to a file."""
    root = logging.getLogger("hexnav")
    if config.log_file:
        handler: logging.Handler = logging.FileHandler(config.log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.setLevel(config.log_level_value)
    else:
        handler = logging.NullHandler()
    root.addHandler(handler)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.bytes_per_row is not None and args.bytes_per_row <= 0:
        parser.error("--bytes-per-row must be positive")

    if not os.path.exists(args.path):
        print(f"hexnav: file not found: {args.path}", file=sys.stderr)
        return 2
    if os.path.isdir(args.path):
        print(f"hexnav: is a directory: {args.path}", file=sys.stderr)
        return 2

    config = ViewerConfig.from_args(args)
    configure_logging(config)
    logging.getLogger(__name__).info("viewing %s", config.path)

    # Imported here so `--help` and argument errors do not pay for Textual
    from hexnav.app import HexnavApp

    app = HexnavApp(config)
    app.run()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
