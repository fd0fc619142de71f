"""LZSS dictionary coder.

Stream layout (no header): repeated groups of

    flags  u8            bit i set -> token i is a match
    up to 8 tokens       literal: 1 byte
                         match:   offset lo, offset hi, length (3 bytes)

``offset`` counts back from the current end of the output; matches may
overlap the bytes they produce.

The encoder is a greedy single pass (no lazy matching): the longest match in
the window wins, ties go to the oldest position.
"""

from __future__ import annotations

import logging
from bisect import bisect_left
from dataclasses import dataclass
from pathlib import Path

from comp_engine.config import LzssParams
from comp_engine.core.codec_base import Codec
from comp_engine.errors import InvalidReference, TruncatedPayload
from comp_engine.naming import output_path
from comp_engine.result import Algorithm

logger = logging.getLogger(__name__)

GROUP = 8


@dataclass(frozen=True)
class Match:
    offset: int = 0
    length: int = 0


def find_best_match(
    data: bytes,
    pos: int,
    candidates: list[int],
    params: LzssParams,
) -> Match:
    """Longest match for ``data[pos:]`` among ``candidates`` (ascending).

    Candidates are the window positions sharing the first ``min_match`` bytes;
    any other position would give a match shorter than ``min_match``.
    """
    n = len(data)
    max_len = min(params.max_match, n - pos)
    if max_len < params.min_match or not candidates:
        return Match()

    start = bisect_left(candidates, pos - params.window_size)
    best = Match()
    for j in candidates[start:]:
        k = params.min_match
        while k < max_len and data[j + k] == data[pos + k]:
            k += 1
        if k > best.length:
            best = Match(offset=pos - j, length=k)
            if k == max_len:
                break
    return best


def lzss_compress(data: bytes, params: LzssParams | None = None) -> bytes:
    if params is None:
        params = LzssParams()

    n = len(data)
    key_len = params.min_match
    chains: dict[bytes, list[int]] = {}
    indexed = 0  # positions < indexed are in chains

    out = bytearray()
    pos = 0
    n_matches = 0
    while pos < n:
        flag_index = len(out)
        out.append(0)
        flags = 0

        for bit in range(GROUP):
            if pos >= n:
                break

            while indexed < pos:
                if indexed + key_len <= n:
                    chains.setdefault(data[indexed : indexed + key_len], []).append(indexed)
                indexed += 1

            candidates = chains.get(data[pos : pos + key_len], []) if pos + key_len <= n else []
            best = find_best_match(data, pos, candidates, params)

            if best.length:
                flags |= 1 << bit
                out += best.offset.to_bytes(2, "little")
                out.append(best.length)
                pos += best.length
                n_matches += 1
            else:
                out.append(data[pos])
                pos += 1

        out[flag_index] = flags

    logger.debug("lzss: %d bytes -> %d bytes, %d matches", n, len(out), n_matches)
    return bytes(out)


def lzss_decompress(blob: bytes) -> bytes:
    out = bytearray()
    n = len(blob)
    pos = 0

    while pos < n:
        flags = blob[pos]
        pos += 1
        for bit in range(GROUP):
            if pos >= n:
                break

            if not (flags >> bit) & 1:
                out.append(blob[pos])
                pos += 1
                continue

            if pos + 3 > n:
                raise TruncatedPayload(f"match troncato all'offset {pos}")
            offset = blob[pos] | (blob[pos + 1] << 8)
            length = blob[pos + 2]
            pos += 3

            if offset == 0 or length == 0 or offset > len(out):
                raise InvalidReference(
                    f"riferimento non valido: offset={offset} length={length} out={len(out)}"
                )

            start = len(out) - offset
            if offset >= length:
                out += out[start : start + length]
            else:
                # sovrapposizione: copia byte per byte
                for k in range(length):
                    out.append(out[start + k])

    return bytes(out)


class CodecLzss(Codec):
    codec_id = "lzss"

    def __init__(self, params: LzssParams | None = None):
        self.params = params or LzssParams()

    def compress_bytes(self, data: bytes) -> bytes:
        return lzss_compress(data, self.params)

    def decompress_bytes(self, blob: bytes) -> bytes:
        return lzss_decompress(blob)

    def compressed_path(self, path: Path) -> Path:
        return output_path(Algorithm.LZSS, "compress", path)

    def decompressed_path(self, path: Path) -> Path:
        return output_path(Algorithm.LZSS, "decompress", path)
