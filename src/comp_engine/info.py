"""Header summaries for comp-engine artifacts (no payload decoding).

Recognized by magic: HUF1 (Huffman), DCT1 (coefficients), JPEG previews.
LZSS streams carry no header and are reported as unrecognized.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from comp_engine.core import codec_dct, codec_huffman
from comp_engine.core.codec_base import read_input
from comp_engine.errors import BadMagic


def describe_bytes(blob: bytes) -> dict[str, Any]:
    if blob[:4] == codec_huffman.MAGIC:
        hdr = codec_huffman.parse_header(blob)
        return {
            "format": "HUF1",
            "original_size": hdr.original_size,
            "n_symbols": len(hdr.symbols),
            "freq_sum": sum(f for _, f in hdr.symbols),
            "bitstream_bytes": len(blob) - hdr.payload_offset,
        }

    if blob[:4] == codec_dct.MAGIC:
        dh = codec_dct.parse_header(blob)
        return {
            "format": "DCT1",
            "width": dh.width,
            "height": dh.height,
            "channels": dh.channels,
            "blocks": dh.blocks_x * dh.blocks_y,
            "complete": len(blob) - dh.payload_offset >= dh.payload_size,
        }

    if blob[:3] == codec_dct.JPEG_SOI:
        return {"format": "JPEG", "size": len(blob)}

    raise BadMagic("formato non riconosciuto (LZSS non ha header)")


def describe_file(path: str | Path) -> dict[str, Any]:
    return describe_bytes(read_input(Path(path)))
