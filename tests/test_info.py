from __future__ import annotations

import struct
from pathlib import Path

import pytest

from comp_engine.core.codec_huffman import huffman_compress
from comp_engine.core.codec_lzss import lzss_compress
from comp_engine.errors import BadMagic, InputUnreadable, InvalidHeader
from comp_engine.info import describe_bytes, describe_file


def test_describe_huffman() -> None:
    blob = huffman_compress(b"aab")
    assert describe_bytes(blob) == {
        "format": "HUF1",
        "original_size": 3,
        "n_symbols": 2,
        "freq_sum": 3,
        "bitstream_bytes": 1,
    }


def test_describe_dct_complete_and_truncated() -> None:
    head = b"DCT1" + struct.pack("<HHB", 20, 9, 1)
    full = head + b"\x00" * (3 * 2 * 128)
    info = describe_bytes(full)
    assert info["blocks"] == 6
    assert info["complete"] is True
    assert describe_bytes(full[:-1])["complete"] is False


def test_describe_jpeg_and_unknown(tmp_path: Path) -> None:
    assert describe_bytes(b"\xff\xd8\xff\xe0" + b"\x00" * 10) == {"format": "JPEG", "size": 14}
    with pytest.raises(BadMagic):
        describe_bytes(lzss_compress(b"hello"))
    with pytest.raises(InvalidHeader):
        describe_bytes(b"HUF1\x00")
    with pytest.raises(InputUnreadable):
        describe_file(tmp_path / "missing.huff")
