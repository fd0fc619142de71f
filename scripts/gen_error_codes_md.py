#!/usr/bin/env python3
"""Write docs/error_codes.md from the ERROR_CODES table.

    python scripts/gen_error_codes_md.py           rewrite the doc
    python scripts/gen_error_codes_md.py --check   exit 1 if the doc is stale
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

REPO = Path(__file__).resolve().parents[1]
DOC = REPO / "docs" / "error_codes.md"


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Render the comp-engine error code table")
    ap.add_argument("--check", action="store_true", help="Compare only, do not write")
    ap.add_argument("--out", type=Path, default=DOC, help=f"Target file (default: {DOC})")
    ns = ap.parse_args(argv)

    sys.path.insert(0, str(REPO / "src"))
    from comp_engine.errors import ERROR_CODES, render_error_codes_markdown  # noqa: E402

    text = render_error_codes_markdown()
    if ns.check:
        current = ns.out.read_text(encoding="utf-8") if ns.out.is_file() else None
        if current != text:
            print(f"[comp-engine] {ns.out} is stale; rerun without --check", file=sys.stderr)
            return 1
        print(f"[comp-engine] {ns.out} up to date ({len(ERROR_CODES)} codes)")
        return 0

    ns.out.parent.mkdir(parents=True, exist_ok=True)
    ns.out.write_text(text, encoding="utf-8")
    print(f"[comp-engine] {len(ERROR_CODES)} codes -> {ns.out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
