"""Codec configuration spec (v1) for comp-engine.

Goal: make codec parameters reproducible and portable (CLI, tests, callers).

This module intentionally stays *small* and strict:
  - JSON only
  - explicit schema id
  - unknown keys are rejected
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from comp_engine.errors import UsageError

SPEC_ID_V1 = "comp-engine.config.v1"

DCT_OUTPUTS = ("coefficients", "jpeg")


class ConfigError(UsageError):
    pass


@dataclass(frozen=True)
class LzssParams:
    window_size: int = 4096
    max_match: int = 18
    min_match: int = 3


@dataclass(frozen=True)
class DctParams:
    output: str = "coefficients"
    jpeg_quality: int = 85


@dataclass(frozen=True)
class CodecConfig:
    lzss: LzssParams = field(default_factory=LzssParams)
    dct: DctParams = field(default_factory=DctParams)


DEFAULT_CONFIG = CodecConfig()


def _load_json_arg(config_arg: str) -> dict[str, Any]:
    s = config_arg.strip()
    if not s:
        raise ConfigError("config: argomento vuoto")

    if s.startswith("@"):
        p = Path(s[1:]).expanduser()
        if not p.exists() or not p.is_file():
            raise ConfigError(f"config: file non trovato: {p}")
        raw = p.read_text(encoding="utf-8")
        try:
            obj = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigError(f"config: JSON non valido in {p}: {e}") from e
        if not isinstance(obj, dict):
            raise ConfigError(f"config: il JSON in {p} deve essere un oggetto")
        return obj

    try:
        obj = json.loads(s)
    except json.JSONDecodeError as e:
        raise ConfigError(f"config: JSON inline non valido: {e}") from e
    if not isinstance(obj, dict):
        raise ConfigError("config: il JSON inline deve essere un oggetto")
    return obj


def _section(obj: dict[str, Any], key: str, allowed: set[str]) -> dict[str, Any]:
    v = obj.get(key)
    if v is None:
        return {}
    if not isinstance(v, dict):
        raise ConfigError(f"config: '{key}' deve essere un oggetto")
    extra = sorted(set(v.keys()) - allowed)
    if extra:
        raise ConfigError(f"config: chiavi non supportate in '{key}': {', '.join(extra)}")
    return v


def _int_in(sec: dict[str, Any], key: str, default: int, lo: int, hi: int, where: str) -> int:
    if key not in sec:
        return default
    v = sec[key]
    if isinstance(v, bool) or not isinstance(v, int):
        raise ConfigError(f"config: {where}.{key} deve essere un intero")
    if not (lo <= v <= hi):
        raise ConfigError(f"config: {where}.{key} fuori range ({lo}..{hi}): {v}")
    return v


def parse_config(obj: dict[str, Any]) -> CodecConfig:
    """Validate an already-decoded config object."""
    allowed = {"spec", "lzss", "dct"}
    extra = sorted(set(obj.keys()) - allowed)
    if extra:
        raise ConfigError(f"config: chiavi non supportate: {', '.join(extra)}")

    spec_id = obj.get("spec")
    if spec_id != SPEC_ID_V1:
        raise ConfigError(f"config: spec non supportata: {spec_id!r} (attesa {SPEC_ID_V1!r})")

    d_lz = LzssParams()
    lz = _section(obj, "lzss", {"window_size", "max_match", "min_match"})
    window_size = _int_in(lz, "window_size", d_lz.window_size, 1, 0xFFFF, "lzss")
    max_match = _int_in(lz, "max_match", d_lz.max_match, 1, 0xFF, "lzss")
    min_match = _int_in(lz, "min_match", d_lz.min_match, 1, max_match, "lzss")

    d_dct = DctParams()
    dct = _section(obj, "dct", {"output", "jpeg_quality"})
    output = dct.get("output", d_dct.output)
    if output not in DCT_OUTPUTS:
        raise ConfigError(f"config: dct.output deve essere uno tra {', '.join(DCT_OUTPUTS)}")
    jpeg_quality = _int_in(dct, "jpeg_quality", d_dct.jpeg_quality, 1, 100, "dct")

    return CodecConfig(
        lzss=LzssParams(window_size=window_size, max_match=max_match, min_match=min_match),
        dct=DctParams(output=output, jpeg_quality=jpeg_quality),
    )


def load_config(config_arg: str | None) -> CodecConfig:
    """Load and validate a codec config.

    config_arg:
      - None -> DEFAULT_CONFIG
      - '@file.json'
      - inline JSON object
    """
    if config_arg is None:
        return DEFAULT_CONFIG
    return parse_config(_load_json_arg(config_arg))
