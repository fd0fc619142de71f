"""comp-engine CLI.

This is the stable CLI entrypoint (console-script: ``comp-engine``).

UX policy:
  - One subcommand per library operation; the algorithm is a positional name
    (huffman, lzss, dct) or its numeric id.
  - Codec failures print the signed result code and exit with EXIT_CODEC_FAILURE.
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import os
import sys
from pathlib import Path

from comp_engine.config import ConfigError, load_config
from comp_engine.dispatcher import compress_file, compress_folder, decompress_file
from comp_engine.errors import (
    ERR_NOT_IMPLEMENTED,
    ERR_UNKNOWN_ALGORITHM,
    EXIT_CODEC_FAILURE,
    EXIT_NOT_IMPLEMENTED,
    EXIT_OK,
    EXIT_USAGE,
    CompEngineError,
    error_code_info,
    render_error_codes_markdown,
)
from comp_engine.info import describe_file
from comp_engine.result import Algorithm, Result

LOG_LEVEL_ENV = "COMP_ENGINE_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_SCOPES = {Algorithm.HUFFMAN: "huffman", Algorithm.LZSS: "lzss", Algorithm.DCT: "dct"}


def _setup_logging(level_name: str | None) -> None:
    name = (level_name or os.environ.get(LOG_LEVEL_ENV) or "WARNING").upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ConfigError(f"log level non valido: {name}")
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--debug", action="store_true", help="Show stack traces on errors")
    p.add_argument(
        "--log-level",
        default=None,
        help=f"Logging level (default: ${LOG_LEVEL_ENV} or WARNING)",
    )


def _algo_arg(s: str) -> Algorithm | int | str:
    return int(s) if s.isdigit() else s


def _scope_for(algo_arg: str) -> str:
    try:
        return _SCOPES[Algorithm.parse(_algo_arg(algo_arg))]
    except CompEngineError:
        return "dispatcher"


def _report(op: str, algo_arg: str, res: Result, *, as_json: bool) -> int:
    if as_json:
        obj = {"algorithm": algo_arg, "operation": op, **res.as_dict()}
        stream = sys.stdout if res.ok else sys.stderr
        print(json.dumps(obj, sort_keys=True), file=stream)
    elif res.ok:
        print(
            f"OK {op} {algo_arg}: {res.bytes_in} -> {res.bytes_out} bytes "
            f"(ratio {res.ratio:.4f}) -> {res.output}"
        )
    else:
        info = error_code_info(_scope_for(algo_arg), res.error)
        name = info.name if info else "UNKNOWN"
        print(f"[comp-engine] {op} {algo_arg} failed: error={res.error} ({name})", file=sys.stderr)

    if res.ok:
        return EXIT_OK
    if res.error == ERR_UNKNOWN_ALGORITHM:
        return EXIT_USAGE
    if res.error == ERR_NOT_IMPLEMENTED:
        return EXIT_NOT_IMPLEMENTED
    return EXIT_CODEC_FAILURE


def _cmd_compress(ns: argparse.Namespace) -> int:
    cfg = load_config(ns.config)
    if ns.jpeg:
        cfg = dataclasses.replace(cfg, dct=dataclasses.replace(cfg.dct, output="jpeg"))
    res = compress_file(_algo_arg(ns.algorithm), ns.path, cfg)
    return _report("compress", ns.algorithm, res, as_json=ns.json)


def _cmd_decompress(ns: argparse.Namespace) -> int:
    cfg = load_config(ns.config)
    res = decompress_file(_algo_arg(ns.algorithm), ns.path, cfg)
    return _report("decompress", ns.algorithm, res, as_json=ns.json)


def _cmd_compress_folder(ns: argparse.Namespace) -> int:
    res = compress_folder(_algo_arg(ns.algorithm), ns.path)
    return _report("compress-folder", ns.algorithm, res, as_json=ns.json)


def _cmd_info(ns: argparse.Namespace) -> int:
    print(json.dumps(describe_file(ns.path), sort_keys=True))
    return EXIT_OK


def _cmd_config_validate(ns: argparse.Namespace) -> int:
    load_config(ns.config)
    print("OK")
    return EXIT_OK


def _cmd_error_codes(ns: argparse.Namespace) -> int:
    sys.stdout.write(render_error_codes_markdown())
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="comp-engine", description="Huffman / LZSS / DCT file compression engine"
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    p_c = sub.add_parser("compress", help="Compress a file (writes next to the input)")
    p_c.add_argument("algorithm", help="huffman | lzss | dct (or 0 | 1 | 2)")
    p_c.add_argument("path", type=Path)
    p_c.add_argument(
        "--config",
        default=None,
        help="Codec config JSON. Use '@file.json' to load from file, or pass JSON inline.",
    )
    p_c.add_argument(
        "--jpeg",
        action="store_true",
        help="dct only: write a one-way JPEG preview instead of DCT1 coefficients",
    )
    p_c.add_argument("--json", action="store_true", help="Print the result as JSON")
    p_c.set_defaults(func=_cmd_compress)
    _add_common_args(p_c)

    p_d = sub.add_parser("decompress", help="Decompress a file (writes next to the input)")
    p_d.add_argument("algorithm", help="huffman | lzss | dct (or 0 | 1 | 2)")
    p_d.add_argument("path", type=Path)
    p_d.add_argument("--config", default=None, help="Codec config JSON (@file.json or inline)")
    p_d.add_argument("--json", action="store_true", help="Print the result as JSON")
    p_d.set_defaults(func=_cmd_decompress)
    _add_common_args(p_d)

    p_f = sub.add_parser("compress-folder", help="Folder compression (not implemented)")
    p_f.add_argument("algorithm")
    p_f.add_argument("path", type=Path)
    p_f.add_argument("--json", action="store_true", help="Print the result as JSON")
    p_f.set_defaults(func=_cmd_compress_folder)
    _add_common_args(p_f)

    p_i = sub.add_parser("info", help="Show the header of a .huff / .dct artifact")
    p_i.add_argument("path", type=Path)
    p_i.set_defaults(func=_cmd_info)
    _add_common_args(p_i)

    p_v = sub.add_parser("config-validate", help="Validate a codec config (v1)")
    p_v.add_argument("config", help="Config JSON (@file.json or inline JSON)")
    p_v.set_defaults(func=_cmd_config_validate)
    _add_common_args(p_v)

    p_e = sub.add_parser("error-codes", help="Print the error code table (markdown)")
    p_e.set_defaults(func=_cmd_error_codes)
    _add_common_args(p_e)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    p = build_parser()
    ns = p.parse_args(argv)

    try:
        _setup_logging(ns.log_level)
        return int(ns.func(ns))
    except SystemExit:
        raise
    except CompEngineError as e:
        if getattr(ns, "debug", False):
            raise
        print(f"[comp-engine] {e}", file=sys.stderr)
        return int(getattr(e, "exit_code", EXIT_CODEC_FAILURE) or EXIT_CODEC_FAILURE)
    except Exception as e:
        if getattr(ns, "debug", False):
            raise
        print(f"[comp-engine] error: {e}", file=sys.stderr)
        return EXIT_CODEC_FAILURE


if __name__ == "__main__":
    raise SystemExit(main())
