from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

from comp_engine.errors import (
    ERR_NOT_IMPLEMENTED,
    ERR_UNKNOWN_ALGORITHM,
    ERROR_CODES,
    BadMagic,
    CompEngineError,
    CorruptPayload,
    ImageDecodeFailed,
    InputUnreadable,
    InvalidHeader,
    InvalidReference,
    MalformedImage,
    NotImplementedFeature,
    OutputUnwritable,
    TruncatedPayload,
    UnknownAlgorithm,
    UnsupportedChannels,
    error_code,
    error_code_info,
    render_error_codes_markdown,
)


@pytest.mark.parametrize("scope", ["huffman", "lzss"])
def test_byte_codec_codes(scope: str) -> None:
    assert error_code(scope, InputUnreadable("x")) == -1
    assert error_code(scope, OutputUnwritable("x")) == -2
    for exc in (CorruptPayload, BadMagic, InvalidHeader, TruncatedPayload, InvalidReference):
        assert error_code(scope, exc("x")) == -3


def test_dct_codes() -> None:
    assert error_code("dct", InputUnreadable("x")) == -1
    assert error_code("dct", MalformedImage("x")) == -2
    assert error_code("dct", OutputUnwritable("x")) == -3
    assert error_code("dct", BadMagic("x")) == -4
    assert error_code("dct", InvalidHeader("x")) == -4
    assert error_code("dct", UnsupportedChannels("x")) == -5
    assert error_code("dct", TruncatedPayload("x")) == -6
    assert error_code("dct", ImageDecodeFailed("x")) == -7
    assert error_code("dct", NotImplementedFeature("x")) == ERR_NOT_IMPLEMENTED
    assert error_code("dct", UnknownAlgorithm("x")) == ERR_UNKNOWN_ALGORITHM


def test_unmapped_errors_raise() -> None:
    with pytest.raises(KeyError):
        error_code("huffman", MalformedImage("x"))
    with pytest.raises(KeyError):
        error_code("zip", CompEngineError("x"))


def test_codes_are_unique_per_scope() -> None:
    seen: set[tuple[str, int]] = set()
    for e in ERROR_CODES:
        assert (e.scope, e.code) not in seen
        seen.add((e.scope, e.code))
        assert e.code <= 0


def test_error_code_info_lookup() -> None:
    info = error_code_info("dct", -5)
    assert info is not None and info.name == "UNSUPPORTED_CHANNELS"
    assert error_code_info("lzss", -98).name == "NOT_IMPLEMENTED"  # type: ignore[union-attr]
    assert error_code_info("huffman", -42) is None


def test_error_codes_doc_is_in_sync() -> None:
    """docs/error_codes.md must match the generator output."""
    doc = Path(__file__).resolve().parents[1] / "docs" / "error_codes.md"
    assert doc.read_text(encoding="utf-8") == render_error_codes_markdown()


def test_doc_generator_check_and_write(tmp_path: Path) -> None:
    script = Path(__file__).resolve().parents[1] / "scripts" / "gen_error_codes_md.py"

    r = subprocess.run([sys.executable, str(script), "--check"], text=True, capture_output=True)
    assert r.returncode == 0, (r.stdout, r.stderr)

    out = tmp_path / "codes.md"
    out.write_text("# vecchio\n", encoding="utf-8")
    r = subprocess.run(
        [sys.executable, str(script), "--check", "--out", str(out)], text=True, capture_output=True
    )
    assert r.returncode == 1
    assert "stale" in r.stderr

    r = subprocess.run([sys.executable, str(script), "--out", str(out)], text=True, capture_output=True)
    assert r.returncode == 0, (r.stdout, r.stderr)
    assert out.read_text(encoding="utf-8") == render_error_codes_markdown()
