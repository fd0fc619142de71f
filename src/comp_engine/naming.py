"""Output path derivation.

One total function, ``output_path(algorithm, operation, input_path)``, decides
where every codec writes. Rules:

  huffman compress     <in>.huff
  huffman decompress   strip ".huff", then insert "_DC" before the extension of
                       the last path component ("a/b.txt.huff" -> "a/b_DC.txt");
                       no extension -> append "_DC";
                       no ".huff" suffix at all -> "<in>_DC"
  lzss compress        <in>.lzss
  lzss decompress      strip ".lzss", else "<in>.orig"
  dct compress         <in>.dct (coefficients) or <in>.jpg (jpeg mode)
  dct decompress       <in>.pgm

Existing files at the derived path are overwritten.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from comp_engine.result import Algorithm

Operation = Literal["compress", "decompress"]
DctOutput = Literal["coefficients", "jpeg"]

HUFFMAN_SUFFIX = ".huff"
HUFFMAN_MARKER = "_DC"
HUFFMAN_FALLBACK = "_DC"

LZSS_SUFFIX = ".lzss"
LZSS_FALLBACK = ".orig"

DCT_SUFFIX = ".dct"
DCT_JPEG_SUFFIX = ".jpg"
DCT_DECODED_SUFFIX = ".pgm"


def _append(path: Path, suffix: str) -> Path:
    return path.with_name(path.name + suffix)


def _strip(path: Path, suffix: str) -> Path | None:
    name = path.name
    if len(name) > len(suffix) and name.endswith(suffix):
        return path.with_name(name[: -len(suffix)])
    return None


def huffman_decompressed_path(path: Path) -> Path:
    stripped = _strip(path, HUFFMAN_SUFFIX)
    if stripped is None:
        return _append(path, HUFFMAN_FALLBACK)
    # PurePath.suffix treats dot-files (".bashrc") as having no extension
    ext = stripped.suffix
    if not ext:
        return _append(stripped, HUFFMAN_MARKER)
    return stripped.with_name(stripped.name[: -len(ext)] + HUFFMAN_MARKER + ext)


def lzss_decompressed_path(path: Path) -> Path:
    stripped = _strip(path, LZSS_SUFFIX)
    if stripped is None:
        return _append(path, LZSS_FALLBACK)
    return stripped


def output_path(
    algorithm: Algorithm,
    operation: Operation,
    input_path: str | Path,
    *,
    dct_output: DctOutput = "coefficients",
) -> Path:
    p = Path(input_path)
    algo = Algorithm.parse(algorithm)

    if operation == "compress":
        if algo is Algorithm.HUFFMAN:
            return _append(p, HUFFMAN_SUFFIX)
        if algo is Algorithm.LZSS:
            return _append(p, LZSS_SUFFIX)
        return _append(p, DCT_JPEG_SUFFIX if dct_output == "jpeg" else DCT_SUFFIX)

    if operation == "decompress":
        if algo is Algorithm.HUFFMAN:
            return huffman_decompressed_path(p)
        if algo is Algorithm.LZSS:
            return lzss_decompressed_path(p)
        return _append(p, DCT_DECODED_SUFFIX)

    raise ValueError(f"operazione non supportata: {operation!r}")
