from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path

from comp_engine.errors import (
    OK,
    CompEngineError,
    InputUnreadable,
    OutputUnwritable,
    error_code,
)
from comp_engine.result import Result

logger = logging.getLogger(__name__)


def read_input(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise InputUnreadable(f"input non leggibile: {path}: {e.strerror or e}") from e


def write_output(path: Path, data: bytes) -> None:
    try:
        path.write_bytes(data)
    except OSError as e:
        raise OutputUnwritable(f"output non scrivibile: {path}: {e.strerror or e}") from e


class Codec(ABC):
    """
    Minimal interface for whole-file codecs.

    Subclasses implement the pure bytes -> bytes transforms and the output
    naming; ``compress_file`` / ``decompress_file`` add file I/O and turn typed
    errors into ``Result.error`` codes (the scope is ``codec_id``).
    """

    codec_id: str

    @abstractmethod
    def compress_bytes(self, data: bytes) -> bytes:
        raise NotImplementedError

    @abstractmethod
    def decompress_bytes(self, blob: bytes) -> bytes:
        raise NotImplementedError

    @abstractmethod
    def compressed_path(self, path: Path) -> Path:
        raise NotImplementedError

    @abstractmethod
    def decompressed_path(self, path: Path) -> Path:
        raise NotImplementedError

    def compress_file(self, path: str | Path) -> Result:
        return self._run_file(Path(path), "compress", self.compress_bytes, self.compressed_path)

    def decompress_file(self, path: str | Path) -> Result:
        return self._run_file(Path(path), "decompress", self.decompress_bytes, self.decompressed_path)

    def _run_file(
        self,
        src: Path,
        op: str,
        transform: Callable[[bytes], bytes],
        out_path: Callable[[Path], Path],
    ) -> Result:
        bytes_in = 0
        try:
            data = read_input(src)
            bytes_in = len(data)
            payload = transform(data)
            dst = out_path(src)
            write_output(dst, payload)
        except CompEngineError as e:
            code = error_code(self.codec_id, e)
            logger.warning("%s %s failed (%d): %s", self.codec_id, op, code, e)
            return Result(bytes_in=bytes_in, bytes_out=0, error=code)

        return Result(bytes_in=bytes_in, bytes_out=len(payload), error=OK, output=dst)
