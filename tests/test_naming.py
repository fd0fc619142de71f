from __future__ import annotations

from pathlib import Path

import pytest

from comp_engine.errors import UnknownAlgorithm
from comp_engine.naming import output_path
from comp_engine.result import Algorithm


@pytest.mark.parametrize(
    "algo, op, src, expected",
    [
        (Algorithm.HUFFMAN, "compress", "docs/report.txt", "docs/report.txt.huff"),
        (Algorithm.HUFFMAN, "decompress", "docs/report.txt.huff", "docs/report_DC.txt"),
        (Algorithm.HUFFMAN, "decompress", "a.tar.gz.huff", "a.tar_DC.gz"),
        (Algorithm.HUFFMAN, "decompress", "README.huff", "README_DC"),
        (Algorithm.HUFFMAN, "decompress", "v1.2/data.huff", "v1.2/data_DC"),
        (Algorithm.HUFFMAN, "decompress", ".bashrc.huff", ".bashrc_DC"),
        (Algorithm.HUFFMAN, "decompress", "blob.bin", "blob.bin_DC"),
        (Algorithm.HUFFMAN, "decompress", ".huff", ".huff_DC"),
        (Algorithm.LZSS, "compress", "x/log.txt", "x/log.txt.lzss"),
        (Algorithm.LZSS, "decompress", "x/log.txt.lzss", "x/log.txt"),
        (Algorithm.LZSS, "decompress", "x/log.txt", "x/log.txt.orig"),
        (Algorithm.DCT, "compress", "img/cat.png", "img/cat.png.dct"),
        (Algorithm.DCT, "decompress", "img/cat.png.dct", "img/cat.png.dct.pgm"),
    ],
)
def test_output_path_table(algo: Algorithm, op: str, src: str, expected: str) -> None:
    assert output_path(algo, op, src) == Path(expected)  # type: ignore[arg-type]


def test_dct_jpeg_mode_suffix() -> None:
    assert output_path(Algorithm.DCT, "compress", "cat.png", dct_output="jpeg") == Path("cat.png.jpg")
    assert output_path(Algorithm.DCT, "decompress", "cat.png.jpg", dct_output="jpeg") == Path(
        "cat.png.jpg.pgm"
    )


def test_accepts_algorithm_names_and_ids() -> None:
    assert output_path("huffman", "compress", "f") == Path("f.huff")  # type: ignore[arg-type]
    assert output_path(1, "compress", "f") == Path("f.lzss")  # type: ignore[arg-type]


def test_rejects_unknown_inputs() -> None:
    with pytest.raises(ValueError):
        output_path(Algorithm.LZSS, "verify", "f")  # type: ignore[arg-type]
    with pytest.raises(UnknownAlgorithm):
        output_path(9, "compress", "f")  # type: ignore[arg-type]
