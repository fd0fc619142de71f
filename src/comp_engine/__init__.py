"""comp-engine: Huffman, LZSS and 8x8-DCT file codecs behind one result contract."""

from comp_engine.dispatcher import compress_file, compress_folder, decompress_file
from comp_engine.result import Algorithm, Result

__version__ = "0.1.0"

__all__ = [
    "Algorithm",
    "Result",
    "compress_file",
    "compress_folder",
    "decompress_file",
]
