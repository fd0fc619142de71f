from __future__ import annotations

import json
from pathlib import Path

import pytest

from comp_engine.config import (
    DEFAULT_CONFIG,
    SPEC_ID_V1,
    ConfigError,
    DctParams,
    LzssParams,
    load_config,
    parse_config,
)
from comp_engine.errors import EXIT_USAGE, UsageError


def test_defaults() -> None:
    assert load_config(None) is DEFAULT_CONFIG
    assert DEFAULT_CONFIG.lzss == LzssParams(window_size=4096, max_match=18, min_match=3)
    assert DEFAULT_CONFIG.dct == DctParams(output="coefficients", jpeg_quality=85)
    assert parse_config({"spec": SPEC_ID_V1}) == DEFAULT_CONFIG


def test_load_inline_and_file(tmp_path: Path) -> None:
    obj = {
        "spec": SPEC_ID_V1,
        "lzss": {"window_size": 1024, "max_match": 64, "min_match": 4},
        "dct": {"output": "jpeg", "jpeg_quality": 70},
    }
    cfg = load_config(json.dumps(obj))
    assert cfg.lzss == LzssParams(1024, 64, 4)
    assert cfg.dct == DctParams("jpeg", 70)

    p = tmp_path / "cfg.json"
    p.write_text(json.dumps(obj), encoding="utf-8")
    assert load_config(f"@{p}") == cfg


@pytest.mark.parametrize(
    "obj",
    [
        {},
        {"spec": "comp-engine.config.v2"},
        {"spec": SPEC_ID_V1, "extra": 1},
        {"spec": SPEC_ID_V1, "lzss": []},
        {"spec": SPEC_ID_V1, "lzss": {"window": 10}},
        {"spec": SPEC_ID_V1, "lzss": {"window_size": 0}},
        {"spec": SPEC_ID_V1, "lzss": {"window_size": 65536}},
        {"spec": SPEC_ID_V1, "lzss": {"max_match": 256}},
        {"spec": SPEC_ID_V1, "lzss": {"max_match": 4, "min_match": 5}},
        {"spec": SPEC_ID_V1, "lzss": {"window_size": "4096"}},
        {"spec": SPEC_ID_V1, "lzss": {"window_size": True}},
        {"spec": SPEC_ID_V1, "dct": {"output": "png"}},
        {"spec": SPEC_ID_V1, "dct": {"jpeg_quality": 0}},
        {"spec": SPEC_ID_V1, "dct": {"jpeg_quality": 101}},
    ],
)
def test_rejects_invalid(obj: dict) -> None:
    with pytest.raises(ConfigError):
        parse_config(obj)


@pytest.mark.parametrize("arg", ["", "   ", "{bad json", "[1, 2]", "@/nonexistent/cfg.json"])
def test_rejects_bad_arguments(arg: str) -> None:
    with pytest.raises(ConfigError):
        load_config(arg)


def test_config_error_is_usage_error() -> None:
    assert issubclass(ConfigError, UsageError)
    assert ConfigError("x").exit_code == EXIT_USAGE
