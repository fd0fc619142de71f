from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path

from comp_engine.errors import OK, UnknownAlgorithm


class Algorithm(IntEnum):
    """Closed set of codecs known to the dispatcher."""

    HUFFMAN = 0
    LZSS = 1
    DCT = 2

    @classmethod
    def parse(cls, value: Algorithm | int | str) -> Algorithm:
        """Accept a member, its integer value or its (case-insensitive) name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise UnknownAlgorithm(f"algoritmo non valido: {value!r}")
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError as e:
                raise UnknownAlgorithm(f"algoritmo non valido: {value!r}") from e
        if isinstance(value, str):
            key = value.strip().upper()
            if key in cls.__members__:
                return cls[key]
        raise UnknownAlgorithm(f"algoritmo non valido: {value!r}")


@dataclass(frozen=True)
class Result:
    """Outcome of one codec operation.

    ``error`` is 0 on success and a negative, codec-specific code otherwise
    (see :mod:`comp_engine.errors`).
    """

    bytes_in: int = 0
    bytes_out: int = 0
    error: int = OK
    output: Path | None = None

    @property
    def ok(self) -> bool:
        return self.error == OK

    @property
    def ratio(self) -> float:
        """bytes_out / bytes_in, 0.0 for empty input."""
        if self.bytes_in <= 0:
            return 0.0
        return self.bytes_out / self.bytes_in

    def as_dict(self) -> dict[str, object]:
        return {
            "bytes_in": int(self.bytes_in),
            "bytes_out": int(self.bytes_out),
            "ratio": float(self.ratio),
            "error": int(self.error),
            "output": str(self.output) if self.output is not None else None,
        }
