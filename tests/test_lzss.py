from __future__ import annotations

import random
from pathlib import Path

import pytest

from comp_engine.config import LzssParams
from comp_engine.core.codec_lzss import CodecLzss, lzss_compress, lzss_decompress
from comp_engine.errors import InvalidReference, TruncatedPayload


def _match(offset: int, length: int) -> bytes:
    return offset.to_bytes(2, "little") + bytes([length])


SAMPLES: list[bytes] = [
    b"",
    b"x",
    b"aaaaaaaaaa",
    b"abcabcabcabcabcabcabc",
    b"FATTURA 1001\nRIGA ARTICOLO: vite M3 qty=10 prezzo=1.20\nTOTALE 12.00\n" * 50,
    bytes(range(256)) * 20,
    random.Random(42).randbytes(3000),
    (b"0123456789" * 600) + random.Random(7).randbytes(500) + (b"0123456789" * 100),
]


@pytest.mark.parametrize("data", SAMPLES, ids=lambda d: f"len{len(d)}")
def test_file_roundtrip(tmp_path: Path, data: bytes) -> None:
    src = tmp_path / "in.dat"
    src.write_bytes(data)
    codec = CodecLzss()

    rc = codec.compress_file(src)
    assert rc.ok, rc
    assert rc.output == tmp_path / "in.dat.lzss"
    assert rc.bytes_in == len(data)

    rc.output.rename(tmp_path / "copy.dat.lzss")
    rd = codec.decompress_file(tmp_path / "copy.dat.lzss")
    assert rd.ok, rd
    assert rd.output == tmp_path / "copy.dat"
    assert rd.output.read_bytes() == data


def test_self_overlapping_run() -> None:
    blob = lzss_compress(b"aaaaaaaaaa")
    assert blob == b"\x02" + b"a" + _match(1, 9)
    assert lzss_decompress(blob) == b"aaaaaaaaaa"


def test_known_vector_abc() -> None:
    assert lzss_compress(b"abcabcabc") == b"\x08abc" + _match(3, 6)


def test_ties_go_to_oldest_position() -> None:
    blob = lzss_compress(b"abcXabcYabc")
    assert blob == b"\x50abcX" + _match(4, 3) + b"Y" + _match(8, 3)
    assert lzss_decompress(blob) == b"abcXabcYabc"


def test_max_match_length_caps_tokens() -> None:
    blob = lzss_compress(b"a" * 100)
    matches = [(1, 18), (19, 18), (37, 18), (55, 18), (73, 18), (91, 9)]
    assert blob == b"\x7e" + b"a" + b"".join(_match(o, n) for o, n in matches)
    assert lzss_decompress(blob) == b"a" * 100


def test_window_bounds_search() -> None:
    data = b"abcdefgabc"
    assert lzss_compress(data, LzssParams(window_size=4)) == b"\x00abcdefga\x00bc"
    assert lzss_compress(data) == b"\x80abcdefg" + _match(7, 3)


def test_min_match_rejects_short_matches() -> None:
    data = b"abXab"
    assert lzss_compress(data) == b"\x00abXab"
    params = LzssParams(min_match=2)
    blob = lzss_compress(data, params)
    assert blob == b"\x08abX" + _match(3, 2)
    assert lzss_decompress(blob) == data


def test_decoder_accepts_lone_trailing_flag_byte() -> None:
    assert lzss_decompress(b"\x00abcdefgh\x00") == b"abcdefgh"


@pytest.mark.parametrize(
    "blob, exc",
    [
        (b"\x01" + _match(0, 3), InvalidReference),
        (b"\x02a" + _match(2, 3), InvalidReference),
        (b"\x02a" + _match(1, 0), InvalidReference),
        (b"\x02a\x01\x00", TruncatedPayload),
        (b"\x01\x01", TruncatedPayload),
    ],
    ids=["offset0", "offset-beyond-output", "length0", "truncated-record", "truncated-offset"],
)
def test_decoder_rejects_bad_tokens(blob: bytes, exc: type[Exception]) -> None:
    with pytest.raises(exc):
        lzss_decompress(blob)


def test_file_error_codes(tmp_path: Path) -> None:
    codec = CodecLzss()
    assert codec.compress_file(tmp_path / "missing").error == -1

    bad = tmp_path / "bad.lzss"
    bad.write_bytes(b"\x01" + _match(0, 3))
    res = codec.decompress_file(bad)
    assert res.error == -3
    assert res.bytes_in == 4
    assert not (tmp_path / "bad").exists()


def test_decompress_without_suffix_appends_orig(tmp_path: Path) -> None:
    src = tmp_path / "stream.bin"
    src.write_bytes(lzss_compress(b"hello hello hello"))
    res = CodecLzss().decompress_file(src)
    assert res.ok
    assert res.output == tmp_path / "stream.bin.orig"
    assert res.output.read_bytes() == b"hello hello hello"


def test_unwritable_output(tmp_path: Path) -> None:
    src = tmp_path / "in.txt"
    src.write_bytes(b"hello")
    (tmp_path / "in.txt.lzss").mkdir()
    assert CodecLzss().compress_file(src).error == -2
