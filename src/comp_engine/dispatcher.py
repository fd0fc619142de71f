"""Algorithm dispatcher.

Maps an :class:`Algorithm` to its codec and returns a :class:`Result`.
Never raises for codec failures: every outcome travels in ``Result.error``.

Each call logs one ``RUN_SUMMARY`` line at INFO (algorithm, operation, input,
byte counts, ratio, elapsed microseconds).
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

from comp_engine.config import DEFAULT_CONFIG, CodecConfig
from comp_engine.core.codec_base import Codec
from comp_engine.core.codec_dct import CodecDct
from comp_engine.core.codec_huffman import CodecHuffman
from comp_engine.core.codec_lzss import CodecLzss
from comp_engine.errors import ERR_NOT_IMPLEMENTED, ERR_UNKNOWN_ALGORITHM, UnknownAlgorithm
from comp_engine.result import Algorithm, Result

logger = logging.getLogger(__name__)


def make_codec(algorithm: Algorithm, config: CodecConfig | None = None) -> Codec:
    cfg = config or DEFAULT_CONFIG
    if algorithm is Algorithm.HUFFMAN:
        return CodecHuffman()
    if algorithm is Algorithm.LZSS:
        return CodecLzss(cfg.lzss)
    if algorithm is Algorithm.DCT:
        return CodecDct(cfg.dct)
    raise UnknownAlgorithm(f"algoritmo non valido: {algorithm!r}")


def _run(
    op: str,
    algorithm: Algorithm | int | str,
    path: str | Path,
    config: CodecConfig | None,
) -> Result:
    try:
        algo = Algorithm.parse(algorithm)
    except UnknownAlgorithm as e:
        logger.warning("%s rejected: %s", op, e)
        return Result(error=ERR_UNKNOWN_ALGORITHM)

    codec = make_codec(algo, config)
    t0 = time.perf_counter()
    if op == "compress":
        res = codec.compress_file(path)
    else:
        res = codec.decompress_file(path)
    dt_us = int((time.perf_counter() - t0) * 1_000_000)

    logger.info(
        "RUN_SUMMARY: algo=%s, op=%s, in=%s, bytes_in=%d, bytes_out=%d, ratio=%.6f, dt_us=%d, error=%d",
        algo.name,
        op,
        path,
        res.bytes_in,
        res.bytes_out,
        res.ratio,
        dt_us,
        res.error,
    )
    return res


def compress_file(
    algorithm: Algorithm | int | str,
    path: str | Path,
    config: CodecConfig | None = None,
) -> Result:
    return _run("compress", algorithm, path, config)


def decompress_file(
    algorithm: Algorithm | int | str,
    path: str | Path,
    config: CodecConfig | None = None,
) -> Result:
    return _run("decompress", algorithm, path, config)


def compress_folder(algorithm: Algorithm | int | str, path: str | Path) -> Result:
    """Folder compression is not implemented: always fails, touches nothing.

    The algorithm is not even validated; every call gets ERR_NOT_IMPLEMENTED.
    """
    logger.warning("compress_folder not implemented (algo=%r, path=%s)", algorithm, path)
    return Result(error=ERR_NOT_IMPLEMENTED)
