#!/usr/bin/env python3
"""Layer report for src/comp_engine.

Classifies every module as ORCH (cli, dispatcher, info) or LOW (core, config,
errors, naming, result) using the rules in tests/test_arch_boundaries.py, then
prints, per layer, its modules and any forbidden LOW -> ORCH imports.
Modules that fit neither layer are listed too.

Exit codes: 0 clean, 2 violations or unclassified modules, 3 setup error.
"""

from __future__ import annotations

import argparse
import importlib.util
import json
import sys
from collections import defaultdict
from pathlib import Path
from types import ModuleType

REPO = Path(__file__).resolve().parents[1]
RULES_PATH = REPO / "tests" / "test_arch_boundaries.py"


def _load_rules() -> ModuleType:
    spec = importlib.util.spec_from_file_location("comp_engine_arch_rules", RULES_PATH)
    if spec is None or spec.loader is None:
        raise FileNotFoundError(RULES_PATH)
    mod = importlib.util.module_from_spec(spec)
    sys.modules[spec.name] = mod
    spec.loader.exec_module(mod)
    return mod


def build_report(rules: ModuleType, src_dir: Path) -> dict[str, object]:
    layers: dict[str, list[str]] = defaultdict(list)
    for py in sorted(src_dir.rglob("*.py")):
        mod = rules._module_name_from_path(src_dir, py)
        if not mod or mod == rules.PACKAGE_ROOT:
            continue
        if rules._is_orch(mod):
            layers["orch"].append(mod)
        elif rules._is_low(mod):
            layers["low"].append(mod)
        else:
            layers["unclassified"].append(mod)

    violations: dict[str, list[str]] = defaultdict(list)
    for edge in rules._iter_import_edges(src_dir):
        if edge.src != edge.dst and rules._is_low(edge.src) and rules._is_orch(edge.dst):
            layer = "core" if edge.src.startswith("comp_engine.core") else "low"
            rel = edge.file.relative_to(REPO)
            violations[layer].append(f"{rel}:{edge.lineno} {edge.src} -> {edge.dst}")

    return {
        "layers": {k: sorted(v) for k, v in layers.items()},
        "violations": {k: sorted(v) for k, v in violations.items()},
    }


def _print_text(report: dict[str, object]) -> None:
    layers: dict[str, list[str]] = report["layers"]  # type: ignore[assignment]
    violations: dict[str, list[str]] = report["violations"]  # type: ignore[assignment]
    for name in ("orch", "low", "unclassified"):
        mods = layers.get(name, [])
        if mods or name != "unclassified":
            print(f"{name}: {len(mods)} modules")
        if name == "unclassified":
            for m in mods:
                print(f"  {m}")
    for name, lines in sorted(violations.items()):
        print(f"{name} -> orch: {len(lines)} forbidden imports")
        for line in lines:
            print(f"  {line}")


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="comp_engine import-layer report")
    ap.add_argument("--json", action="store_true", help="Print the report as JSON")
    ns = ap.parse_args(argv)

    src_dir = REPO / "src"
    try:
        rules = _load_rules()
    except (OSError, SyntaxError) as e:
        print(f"[comp-engine] cannot load layer rules: {e}", file=sys.stderr)
        return 3
    if not src_dir.is_dir():
        print(f"[comp-engine] src/ not found at {src_dir}", file=sys.stderr)
        return 3

    report = build_report(rules, src_dir)
    if ns.json:
        print(json.dumps(report, sort_keys=True))
    else:
        _print_text(report)

    dirty = bool(report["violations"]) or bool(report["layers"].get("unclassified"))  # type: ignore[union-attr]
    if not dirty and not ns.json:
        print("OK: layers respected.")
    return 2 if dirty else 0


if __name__ == "__main__":
    raise SystemExit(main())
