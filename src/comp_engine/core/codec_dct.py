"""Block-transform (8x8 DCT) image codec.

Coefficient file layout ("DCT1", little-endian):

    magic      4 bytes  b"DCT1"
    width      u16      original width (not padded)
    height     u16      original height
    channels   u8       always 1 (grayscale)
    blocks     (ceil(h/8) * ceil(w/8)) x 64 int16, raster block order,
               each block row-major

In "jpeg" output mode the compressor re-encodes the original RGB pixels with
Pillow's JPEG writer instead. That artifact is one-way: the decoder only reads
DCT1 and reports a JPEG input as not implemented.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from comp_engine.config import DctParams
from comp_engine.core.codec_base import Codec
from comp_engine.core.dct import BLOCK_SIZE, decode_luma, encode_luma, padded_size, rgb_to_luma
from comp_engine.core.image_io import encode_jpeg, encode_pgm, load_rgb
from comp_engine.errors import (
    BadMagic,
    InputUnreadable,
    InvalidHeader,
    NotImplementedFeature,
    TruncatedPayload,
    UnsupportedChannels,
)
from comp_engine.naming import output_path
from comp_engine.result import Algorithm

logger = logging.getLogger(__name__)

MAGIC = b"DCT1"
JPEG_SOI = b"\xff\xd8\xff"
_HEADER = struct.Struct("<4sHHB")
_COEFF = np.dtype("<i2")
BLOCK_BYTES = BLOCK_SIZE * BLOCK_SIZE * _COEFF.itemsize


@dataclass(frozen=True)
class DctHeader:
    width: int
    height: int
    channels: int
    payload_offset: int = _HEADER.size

    @property
    def blocks_x(self) -> int:
        return padded_size(self.width) // BLOCK_SIZE

    @property
    def blocks_y(self) -> int:
        return padded_size(self.height) // BLOCK_SIZE

    @property
    def payload_size(self) -> int:
        return self.blocks_x * self.blocks_y * BLOCK_BYTES


def parse_header(blob: bytes) -> DctHeader:
    if blob[:3] == JPEG_SOI:
        raise NotImplementedFeature("artefatto JPEG: nessun decoder disponibile (solo DCT1)")
    if len(blob) < 4 or blob[:4] != MAGIC:
        raise BadMagic("non è un file DCT1")
    if len(blob) < _HEADER.size:
        raise InvalidHeader("header DCT1 troncato")
    _, width, height, channels = _HEADER.unpack_from(blob, 0)
    if width == 0 or height == 0:
        raise InvalidHeader(f"dimensioni non valide: {width}x{height}")
    if channels != 1:
        raise UnsupportedChannels(f"canali non supportati: {channels}")
    return DctHeader(width=width, height=height, channels=channels)


def dct_compress(data: bytes) -> bytes:
    """Image bytes -> DCT1 coefficient file."""
    if not data:
        raise InputUnreadable("input vuoto")
    rgb = load_rgb(data)
    height, width = rgb.shape[:2]
    qcoeffs = encode_luma(rgb_to_luma(rgb))
    logger.debug("dct: %dx%d -> %d blocks", width, height, qcoeffs.shape[0] * qcoeffs.shape[1])
    return _HEADER.pack(MAGIC, width, height, 1) + qcoeffs.astype(_COEFF).tobytes()


def dct_compress_jpeg(data: bytes, quality: int) -> bytes:
    """Image bytes -> JPEG (one-way preview)."""
    if not data:
        raise InputUnreadable("input vuoto")
    return encode_jpeg(load_rgb(data), quality)


def dct_decompress(blob: bytes) -> bytes:
    """DCT1 coefficient file -> binary PGM bytes."""
    if not blob:
        raise InputUnreadable("input vuoto")
    hdr = parse_header(blob)

    start = hdr.payload_offset
    body = blob[start : start + hdr.payload_size]
    if len(body) < hdr.payload_size:
        raise TruncatedPayload(f"coefficienti troncati: {len(body)} di {hdr.payload_size} byte")

    qcoeffs = np.frombuffer(body, dtype=_COEFF).reshape(
        hdr.blocks_y, hdr.blocks_x, BLOCK_SIZE, BLOCK_SIZE
    )
    return encode_pgm(decode_luma(qcoeffs, hdr.width, hdr.height))


class CodecDct(Codec):
    codec_id = "dct"

    def __init__(self, params: DctParams | None = None):
        self.params = params or DctParams()

    def compress_bytes(self, data: bytes) -> bytes:
        if self.params.output == "jpeg":
            return dct_compress_jpeg(data, self.params.jpeg_quality)
        return dct_compress(data)

    def decompress_bytes(self, blob: bytes) -> bytes:
        return dct_decompress(blob)

    def compressed_path(self, path: Path) -> Path:
        return output_path(Algorithm.DCT, "compress", path, dct_output=self.params.output)

    def decompressed_path(self, path: Path) -> Path:
        return output_path(Algorithm.DCT, "decompress", path)
