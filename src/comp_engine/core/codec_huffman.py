"""Static (per-file) Huffman coder.

File layout ("HUF1", all integers little-endian):

    magic        4 bytes  b"HUF1"
    orig_size    u32
    n_symbols    u16
    n_symbols x (symbol u8, freq u32)     ascending symbol order
    bitstream    MSB-first, last byte zero-padded

The header carries the whole frequency table, so the decoder rebuilds the
exact same tree with the same merge rule.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import struct
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

from comp_engine.core.codec_base import Codec
from comp_engine.errors import (
    BadMagic,
    CorruptPayload,
    InputUnreadable,
    InvalidHeader,
    TruncatedPayload,
)
from comp_engine.naming import output_path
from comp_engine.result import Algorithm

logger = logging.getLogger(__name__)

MAGIC = b"HUF1"
_HEADER = struct.Struct("<4sIH")
_ENTRY = struct.Struct("<BI")
MAX_ORIG_SIZE = 0xFFFFFFFF


# -------------------
# Albero Huffman (arena)
# -------------------
@dataclass
class HuffmanTree:
    """Nodes live in parallel lists and are addressed by integer handles.

    Leaves have ``symbol >= 0`` and no children; internal nodes have
    ``symbol == -1`` and carry only the aggregate weight.
    """

    weight: list[int] = field(default_factory=list)
    symbol: list[int] = field(default_factory=list)
    left: list[int] = field(default_factory=list)
    right: list[int] = field(default_factory=list)
    root: int = -1

    def add_leaf(self, sym: int, w: int) -> int:
        self.weight.append(w)
        self.symbol.append(sym)
        self.left.append(-1)
        self.right.append(-1)
        return len(self.weight) - 1

    def add_internal(self, a: int, b: int) -> int:
        self.weight.append(self.weight[a] + self.weight[b])
        self.symbol.append(-1)
        self.left.append(a)
        self.right.append(b)
        return len(self.weight) - 1

    def is_leaf(self, h: int) -> bool:
        return self.symbol[h] >= 0

    def __len__(self) -> int:
        return len(self.weight)


@dataclass(frozen=True)
class HuffmanHeader:
    original_size: int
    symbols: list[tuple[int, int]]  # (symbol, freq)
    payload_offset: int


def build_freq_table(data: bytes) -> list[int]:
    freq = [0] * 256
    for sym, n in Counter(data).items():
        freq[sym] = n
    return freq


def build_huffman_tree(freq: list[int]) -> HuffmanTree | None:
    """Merge the two lightest roots until one is left.

    Heap key is (weight, insertion order): leaves are pushed in ascending
    symbol order, merged nodes get increasing order numbers.
    """
    tree = HuffmanTree()
    heap: list[tuple[int, int, int]] = []
    counter = itertools.count()

    for sym, f in enumerate(freq):
        if f > 0:
            h = tree.add_leaf(sym, f)
            heapq.heappush(heap, (f, next(counter), h))

    if not heap:
        return None

    while len(heap) > 1:
        f1, _, a = heapq.heappop(heap)
        f2, _, b = heapq.heappop(heap)
        h = tree.add_internal(a, b)
        heapq.heappush(heap, (f1 + f2, next(counter), h))

    tree.root = heap[0][2]
    return tree


def build_code_table(tree: HuffmanTree) -> dict[int, tuple[int, int]]:
    """symbol -> (code value, code length); 0 = left, 1 = right."""
    if tree.is_leaf(tree.root):
        return {tree.symbol[tree.root]: (0, 1)}

    codes: dict[int, tuple[int, int]] = {}
    stack: list[tuple[int, int, int]] = [(tree.root, 0, 0)]
    while stack:
        h, value, length = stack.pop()
        if tree.is_leaf(h):
            codes[tree.symbol[h]] = (value, length)
            continue
        stack.append((tree.right[h], (value << 1) | 1, length + 1))
        stack.append((tree.left[h], value << 1, length + 1))
    return codes


def encode_data(data: bytes, codes: dict[int, tuple[int, int]]) -> bytes:
    out = bytearray()
    acc = 0
    nbits = 0
    for b in data:
        value, length = codes[b]
        acc = (acc << length) | value
        nbits += length
        while nbits >= 8:
            nbits -= 8
            out.append((acc >> nbits) & 0xFF)
        acc &= (1 << nbits) - 1

    if nbits > 0:
        out.append((acc << (8 - nbits)) & 0xFF)
    return bytes(out)


def decode_bitstream(tree: HuffmanTree, bitstream: bytes, n: int) -> bytes:
    """Decode exactly ``n`` symbols; extra trailing bits are ignored."""
    if n == 0:
        return b""

    root = tree.root
    if tree.is_leaf(root):
        # un solo simbolo: ogni occorrenza costa un bit
        if len(bitstream) * 8 < n:
            raise TruncatedPayload(f"bitstream esaurito: attesi {n} bit")
        return bytes([tree.symbol[root]]) * n

    left, right, symbol = tree.left, tree.right, tree.symbol
    out = bytearray()
    node = root
    for byte in bitstream:
        for shift in range(7, -1, -1):
            node = right[node] if (byte >> shift) & 1 else left[node]
            sym = symbol[node]
            if sym >= 0:
                out.append(sym)
                if len(out) == n:
                    return bytes(out)
                node = root

    raise TruncatedPayload(f"bitstream esaurito: decodificati {len(out)} di {n} simboli")


def pack_header(original_size: int, freq: list[int]) -> bytes:
    used = [(sym, f) for sym, f in enumerate(freq) if f > 0]
    out = bytearray(_HEADER.pack(MAGIC, original_size, len(used)))
    for sym, f in used:
        out += _ENTRY.pack(sym, f)
    return bytes(out)


def parse_header(blob: bytes) -> HuffmanHeader:
    if len(blob) < 4 or blob[:4] != MAGIC:
        raise BadMagic("non è un file HUF1")
    if len(blob) < _HEADER.size:
        raise InvalidHeader("header HUF1 troncato")
    _, original_size, n_symbols = _HEADER.unpack_from(blob, 0)
    if n_symbols > 256:
        raise InvalidHeader(f"n_symbols fuori range: {n_symbols}")

    idx = _HEADER.size
    if idx + n_symbols * _ENTRY.size > len(blob):
        raise InvalidHeader("tabella frequenze troncata")
    symbols: list[tuple[int, int]] = []
    for _ in range(n_symbols):
        sym, f = _ENTRY.unpack_from(blob, idx)
        idx += _ENTRY.size
        symbols.append((sym, f))

    return HuffmanHeader(original_size=original_size, symbols=symbols, payload_offset=idx)


def huffman_compress(data: bytes) -> bytes:
    if len(data) > MAX_ORIG_SIZE:
        raise InputUnreadable(f"input troppo grande per HUF1: {len(data)} byte")

    freq = build_freq_table(data)
    tree = build_huffman_tree(freq)
    if tree is None:
        # input vuoto: solo header
        return _HEADER.pack(MAGIC, 0, 0)
    codes = build_code_table(tree)
    return pack_header(len(data), freq) + encode_data(data, codes)


def huffman_decompress(blob: bytes) -> bytes:
    hdr = parse_header(blob)
    if hdr.original_size == 0:
        return b""

    freq = [0] * 256
    for sym, f in hdr.symbols:
        freq[sym] = f
    tree = build_huffman_tree(freq)
    if tree is None:
        raise CorruptPayload("orig_size > 0 ma nessun simbolo nell'header")

    logger.debug(
        "huffman: %d symbols, %d nodes, orig_size=%d",
        len(hdr.symbols),
        len(tree),
        hdr.original_size,
    )
    return decode_bitstream(tree, blob[hdr.payload_offset :], hdr.original_size)


class CodecHuffman(Codec):
    codec_id = "huffman"

    def compress_bytes(self, data: bytes) -> bytes:
        return huffman_compress(data)

    def decompress_bytes(self, blob: bytes) -> bytes:
        return huffman_decompress(blob)

    def compressed_path(self, path: Path) -> Path:
        return output_path(Algorithm.HUFFMAN, "compress", path)

    def decompressed_path(self, path: Path) -> Path:
        return output_path(Algorithm.HUFFMAN, "decompress", path)
