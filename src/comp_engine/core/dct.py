"""8x8 block DCT, quantization and block-grid helpers (NumPy).

Forward transform per block, with samples centered by subtracting 128:

    F(u, v) = 0.25 * a(u) * a(v) * sum_x sum_y f(x, y)
              * cos((2x + 1) u pi / 16) * cos((2y + 1) v pi / 16)

    a(0) = 1 / sqrt(2), a(k) = 1 otherwise

which is the separable product ``C @ block @ C.T`` with the orthonormal
DCT-II basis ``C[u, x] = 0.5 * a(u) * cos((2x + 1) u pi / 16)``.
Coefficient (u, v) is stored at row v, column u (raster order).
"""

from __future__ import annotations

import numpy as np

BLOCK_SIZE = 8
LEVEL_SHIFT = 128.0

# JPEG luminance quantization matrix (ITU-T T.81 Annex K.1)
LUMA_QUANT = np.array(
    [
        [16, 11, 10, 16, 24, 40, 51, 61],
        [12, 12, 14, 19, 26, 58, 60, 55],
        [14, 13, 16, 24, 40, 57, 69, 56],
        [14, 17, 22, 29, 51, 87, 80, 62],
        [18, 22, 37, 56, 68, 109, 103, 77],
        [24, 35, 55, 64, 81, 104, 113, 92],
        [49, 64, 78, 87, 103, 121, 120, 101],
        [72, 92, 95, 98, 112, 100, 103, 99],
    ],
    dtype=np.float32,
)

LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float32)

_INT16_MIN = -32768
_INT16_MAX = 32767


def _dct_basis(n: int = BLOCK_SIZE) -> np.ndarray:
    k = np.arange(n, dtype=np.float64)
    alpha = np.where(k == 0, 1.0 / np.sqrt(2.0), 1.0)
    basis = np.cos(np.outer(k, 2.0 * k + 1.0) * np.pi / (2.0 * n))
    return np.sqrt(2.0 / n) * alpha[:, None] * basis


DCT_BASIS = _dct_basis()


def round_half_away(x: np.ndarray) -> np.ndarray:
    """Round to nearest, ties away from zero (np.round would round ties to even)."""
    return np.sign(x) * np.floor(np.abs(x) + 0.5)


def padded_size(n: int, block: int = BLOCK_SIZE) -> int:
    return (n + block - 1) // block * block


def rgb_to_luma(rgb: np.ndarray) -> np.ndarray:
    """(H, W, 3) uint8 -> (H, W) float32 luma."""
    return rgb.astype(np.float32) @ LUMA_WEIGHTS


def pad_to_blocks(gray: np.ndarray) -> np.ndarray:
    """Zero-pad a 2-D array to multiples of BLOCK_SIZE."""
    h, w = gray.shape
    padded = np.zeros((padded_size(h), padded_size(w)), dtype=np.float32)
    padded[:h, :w] = gray
    return padded


def to_blocks(padded: np.ndarray) -> np.ndarray:
    """(H, W) -> (H/8, W/8, 8, 8), blocks in raster order."""
    h, w = padded.shape
    by, bx = h // BLOCK_SIZE, w // BLOCK_SIZE
    return padded.reshape(by, BLOCK_SIZE, bx, BLOCK_SIZE).swapaxes(1, 2)


def from_blocks(blocks: np.ndarray) -> np.ndarray:
    by, bx = blocks.shape[:2]
    return blocks.swapaxes(1, 2).reshape(by * BLOCK_SIZE, bx * BLOCK_SIZE)


def forward_dct(blocks: np.ndarray) -> np.ndarray:
    """Forward 2-D DCT of every 8x8 block (last two axes), centered at 128."""
    centered = blocks.astype(np.float64) - LEVEL_SHIFT
    return (DCT_BASIS @ centered @ DCT_BASIS.T).astype(np.float32)


def inverse_dct(coeffs: np.ndarray) -> np.ndarray:
    """Inverse of :func:`forward_dct`, bias re-added."""
    spatial = DCT_BASIS.T @ coeffs.astype(np.float64) @ DCT_BASIS
    return spatial + LEVEL_SHIFT


def quantize(coeffs: np.ndarray) -> np.ndarray:
    q = round_half_away(coeffs.astype(np.float32) / LUMA_QUANT)
    return np.clip(q, _INT16_MIN, _INT16_MAX).astype(np.int16)


def dequantize(qcoeffs: np.ndarray) -> np.ndarray:
    return qcoeffs.astype(np.float32) * LUMA_QUANT


def encode_luma(gray: np.ndarray) -> np.ndarray:
    """(H, W) luma -> (H/8, W/8, 8, 8) int16 quantized coefficients (padded grid)."""
    return quantize(forward_dct(to_blocks(pad_to_blocks(gray))))


def decode_luma(qcoeffs: np.ndarray, width: int, height: int) -> np.ndarray:
    """Quantized block grid -> (height, width) uint8 samples."""
    spatial = from_blocks(inverse_dct(dequantize(qcoeffs)))
    cropped = spatial[:height, :width]
    return np.clip(round_half_away(cropped), 0, 255).astype(np.uint8)
