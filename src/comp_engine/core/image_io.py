from __future__ import annotations

import io
import logging

import numpy as np
from PIL import Image, UnidentifiedImageError

from comp_engine.errors import ImageDecodeFailed, MalformedImage

logger = logging.getLogger(__name__)

PPM_MAGIC = b"P6"
MAX_DIM = 0xFFFF

_WS = b" \t\r\n\x0b\x0c"


def _ppm_header(data: bytes) -> tuple[int, int, int, int]:
    """Parse a binary PPM header -> (width, height, maxval, raster offset)."""
    n = len(data)
    idx = len(PPM_MAGIC)
    fields: list[int] = []
    while len(fields) < 3:
        while idx < n:
            c = data[idx]
            if c in _WS:
                idx += 1
            elif c == 0x23:  # '#'
                nl = data.find(b"\n", idx)
                idx = n if nl < 0 else nl + 1
            else:
                break
        start = idx
        while idx < n and 0x30 <= data[idx] <= 0x39:
            idx += 1
        if start == idx:
            raise MalformedImage("PPM: header incompleto")
        fields.append(int(data[start:idx]))

    # esattamente un whitespace dopo maxval
    if idx >= n or data[idx] not in _WS:
        raise MalformedImage("PPM: manca il separatore dopo maxval")
    width, height, maxval = fields
    return width, height, maxval, idx + 1


def _check_dims(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise MalformedImage(f"dimensioni non valide: {width}x{height}")
    if width > MAX_DIM or height > MAX_DIM:
        raise MalformedImage(f"dimensioni oltre u16: {width}x{height}")


def load_ppm(data: bytes) -> np.ndarray:
    """Native fast path for 8-bit binary PPM ("P6") -> (H, W, 3) uint8."""
    width, height, maxval, offset = _ppm_header(data)
    _check_dims(width, height)
    if not (0 < maxval <= 255):
        raise MalformedImage(f"PPM: maxval non supportato: {maxval}")

    expected = width * height * 3
    raster = data[offset : offset + expected]
    if len(raster) != expected:
        raise MalformedImage(f"PPM: raster troncato ({len(raster)} di {expected} byte)")
    return np.frombuffer(raster, dtype=np.uint8).reshape(height, width, 3)


def load_rgb(data: bytes) -> np.ndarray:
    """Decode any supported image to an (H, W, 3) uint8 array."""
    if data[:2] == PPM_MAGIC:
        return load_ppm(data)

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            rgb = np.asarray(img.convert("RGB"), dtype=np.uint8)
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
        raise ImageDecodeFailed(f"decoder immagine: {e}") from e

    logger.debug("image decoded via Pillow: %dx%d", rgb.shape[1], rgb.shape[0])
    _check_dims(rgb.shape[1], rgb.shape[0])
    return rgb


def encode_pgm(gray: np.ndarray) -> bytes:
    """(H, W) uint8 -> binary PGM ("P5") bytes."""
    buf = io.BytesIO()
    Image.fromarray(np.ascontiguousarray(gray, dtype=np.uint8)).save(buf, format="PPM")
    return buf.getvalue()


def encode_jpeg(rgb: np.ndarray, quality: int) -> bytes:
    buf = io.BytesIO()
    Image.fromarray(np.ascontiguousarray(rgb, dtype=np.uint8)).save(
        buf, format="JPEG", quality=int(quality)
    )
    return buf.getvalue()
