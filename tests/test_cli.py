from __future__ import annotations

import logging
from pathlib import Path

import pytest

from hexnav.cli import build_parser, configure_logging, main
from hexnav.config import ViewerConfig, derive_bytes_per_row
from hexnav.core.endian import normalize_endian
from hexnav.ui.palette import DARK, LIGHT, palette_for


def test_missing_file_exits_2(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main([str(tmp_path / "nope.bin")]) == 2
    assert "file not found" in capsys.readouterr().err


def test_directory_exits_2(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main([str(tmp_path)]) == 2
    assert "is a directory" in capsys.readouterr().err


def test_bytes_per_row_must_be_positive(tmp_path: Path) -> None:
    p = tmp_path / "a.bin"
    p.write_bytes(b"x")
    with pytest.raises(SystemExit):
        main([str(p), "--bytes-per-row", "0"])


def test_parser_defaults() -> None:
    args = build_parser().parse_args(["file.bin"])
    config = ViewerConfig.from_args(args)
    assert config == ViewerConfig(path="file.bin")
    assert config.palette is DARK
    assert config.log_level_value == logging.INFO


def test_parser_options() -> None:
    args = build_parser().parse_args(
        ["f.bin", "--endian", "BIG", "--signed", "--light-mode", "--log-level", "debug",
         "--bytes-per-row", "16"]
    )
    config = ViewerConfig.from_args(args)
    assert config.endian == "big"
    assert config.signed
    assert config.palette is LIGHT
    assert config.bytes_per_row == 16
    assert config.log_level_value == logging.DEBUG


def test_parser_rejects_conflicting_themes() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["f.bin", "--light-mode", "--dark-mode"])
    with pytest.raises(SystemExit):
        build_parser().parse_args(["f.bin", "--endian", "middle"])


def test_normalize_endian() -> None:
    assert normalize_endian("Little") == "little"
    assert normalize_endian(None) is None
    with pytest.raises(ValueError):
        normalize_endian("middle")


def test_unknown_theme() -> None:
    with pytest.raises(ValueError):
        palette_for("neon")


@pytest.mark.parametrize(("columns", "digits", "expected"), [(80, 8, 17), (20, 1, 3), (5, 8, 0)])
def test_derive_bytes_per_row(columns: int, digits: int, expected: int) -> None:
    assert derive_bytes_per_row(columns, digits) == expected


def test_configure_logging_to_file(tmp_path: Path) -> None:
    log_path = tmp_path / "hexnav.log"
    config = ViewerConfig(path="x", log_file=str(log_path), log_level="DEBUG")
    logger = logging.getLogger("hexnav")
    before = list(logger.handlers)
    try:
        configure_logging(config)
        logging.getLogger("hexnav.core.search").debug("probe %d", 7)
        for handler in logger.handlers:
            handler.flush()
        assert "probe 7" in log_path.read_text(encoding="utf-8")
    finally:
        for handler in logger.handlers[len(before):]:
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)
