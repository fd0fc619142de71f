"""Typed errors and result codes for comp-engine.

Single source of truth for codec error codes and CLI exit codes lives here.

Policy:
- Codecs raise small typed exceptions internally.
- The file-level wrapper maps each exception to the codec's signed error code
  (see ERROR_CODES); nothing escapes to the caller.
- The CLI maps failures to stable exit codes (see EXIT_* constants).
- docs/error_codes.md is generated from this module (scripts/gen_error_codes_md.py).
"""

from __future__ import annotations

from dataclasses import dataclass

# -------------------------
# Exit codes (CLI)
# -------------------------

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_CODEC_FAILURE = 10
EXIT_NOT_IMPLEMENTED = 12

# -------------------------
# Result error codes
# -------------------------

OK = 0
ERR_NOT_IMPLEMENTED = -98
ERR_UNKNOWN_ALGORITHM = -99


@dataclass(frozen=True, slots=True)
class ErrorCodeInfo:
    scope: str
    code: int
    name: str
    description: str


# ---------------
# Typed exceptions
# ---------------


class CompEngineError(Exception):
    """Base error for comp-engine."""

    exit_code: int = EXIT_CODEC_FAILURE


class UsageError(CompEngineError):
    exit_code = EXIT_USAGE


class UnknownAlgorithm(UsageError):
    pass


class InputUnreadable(CompEngineError):
    pass


class OutputUnwritable(CompEngineError):
    pass


class CorruptPayload(CompEngineError):
    pass


class BadMagic(CorruptPayload):
    pass


class InvalidHeader(CorruptPayload):
    pass


class TruncatedPayload(CorruptPayload):
    pass


class InvalidReference(CorruptPayload):
    pass


class UnsupportedChannels(CorruptPayload):
    pass


class MalformedImage(CompEngineError):
    pass


class ImageDecodeFailed(CompEngineError):
    pass


class NotImplementedFeature(CompEngineError):
    exit_code = EXIT_NOT_IMPLEMENTED


# ------------------------
# Per-scope code tables
# ------------------------

_SHARED: tuple[ErrorCodeInfo, ...] = (
    ErrorCodeInfo("all", OK, "OK", "Success"),
    ErrorCodeInfo("all", ERR_NOT_IMPLEMENTED, "NOT_IMPLEMENTED", "Operation not implemented"),
    ErrorCodeInfo("dispatcher", ERR_UNKNOWN_ALGORITHM, "UNKNOWN_ALGORITHM", "Unknown algorithm selector"),
)

_BYTE_CODEC: tuple[tuple[int, str, str], ...] = (
    (-1, "INPUT_UNREADABLE", "Input file missing or unreadable"),
    (-2, "OUTPUT_UNWRITABLE", "Output file could not be written"),
    (-3, "CORRUPT_PAYLOAD", "Bad magic, short header, truncated or invalid stream"),
)

ERROR_CODES: tuple[ErrorCodeInfo, ...] = (
    *_SHARED,
    *(ErrorCodeInfo("huffman", c, n, d) for c, n, d in _BYTE_CODEC),
    *(ErrorCodeInfo("lzss", c, n, d) for c, n, d in _BYTE_CODEC),
    ErrorCodeInfo("dct", -1, "INPUT_UNREADABLE", "Input file missing, unreadable or empty"),
    ErrorCodeInfo("dct", -2, "MALFORMED_IMAGE", "Malformed recognized image or unsupported dimensions"),
    ErrorCodeInfo("dct", -3, "OUTPUT_UNWRITABLE", "Output file could not be written"),
    ErrorCodeInfo("dct", -4, "BAD_HEADER", "Bad DCT1 magic or invalid/zero dimensions"),
    ErrorCodeInfo("dct", -5, "UNSUPPORTED_CHANNELS", "Channel count other than 1"),
    ErrorCodeInfo("dct", -6, "TRUNCATED_COEFFICIENTS", "Coefficient data shorter than the block grid"),
    ErrorCodeInfo("dct", -7, "IMAGE_DECODE_FAILED", "External image decoder could not read the input"),
)

# Exception class -> code, per scope. Lookup walks the MRO, most specific first.
_BYTE_CODEC_MAP: dict[type[CompEngineError], int] = {
    InputUnreadable: -1,
    OutputUnwritable: -2,
    CorruptPayload: -3,
    NotImplementedFeature: ERR_NOT_IMPLEMENTED,
    UnknownAlgorithm: ERR_UNKNOWN_ALGORITHM,
}

_CODE_MAPS: dict[str, dict[type[CompEngineError], int]] = {
    "huffman": _BYTE_CODEC_MAP,
    "lzss": _BYTE_CODEC_MAP,
    "dct": {
        InputUnreadable: -1,
        MalformedImage: -2,
        OutputUnwritable: -3,
        BadMagic: -4,
        InvalidHeader: -4,
        UnsupportedChannels: -5,
        TruncatedPayload: -6,
        CorruptPayload: -4,
        ImageDecodeFailed: -7,
        NotImplementedFeature: ERR_NOT_IMPLEMENTED,
        UnknownAlgorithm: ERR_UNKNOWN_ALGORITHM,
    },
}


def error_code(scope: str, err: CompEngineError) -> int:
    """Map a typed error to the signed result code of ``scope``."""
    table = _CODE_MAPS.get(scope)
    if table is None:
        raise KeyError(f"unknown error scope: {scope!r}")
    for cls in type(err).__mro__:
        if cls in table:
            return table[cls]
    raise KeyError(f"{type(err).__name__} has no code in scope {scope!r}")


def error_code_info(scope: str, code: int) -> ErrorCodeInfo | None:
    for e in ERROR_CODES:
        if e.code == int(code) and e.scope in (scope, "all", "dispatcher"):
            return e
    return None


def render_error_codes_markdown() -> str:
    """Render docs/error_codes.md content."""
    lines: list[str] = []
    lines.append("# Error codes\n")
    lines.append("> GENERATED FILE: do not edit manually.\n")
    lines.append("> Source of truth: `src/comp_engine/errors.py` (ERROR_CODES).\n")
    lines.append("> Regenerate: `python scripts/gen_error_codes_md.py` (`--check` to verify).\n\n")
    lines.append("Every operation returns `Result.error`; 0 is success.\n\n")
    lines.append("| Scope | Code | Name | Meaning |\n")
    lines.append("|---|---:|---|---|\n")
    for e in ERROR_CODES:
        lines.append(f"| {e.scope} | {e.code} | `{e.name}` | {e.description} |\n")
    lines.append("\n## CLI exit codes\n\n")
    lines.append(f"- `{EXIT_OK}` success\n")
    lines.append(f"- `{EXIT_USAGE}` usage/config error (including unknown algorithm)\n")
    lines.append(f"- `{EXIT_CODEC_FAILURE}` codec failure (the result code is printed)\n")
    lines.append(f"- `{EXIT_NOT_IMPLEMENTED}` operation not implemented\n")
    return "".join(lines)
