#!/usr/bin/env python3
"""Maze structural diagnostics for specific seeds.

Usage:
  python scripts/diagnose_seeds.py 292372 730727
  MAZEGEN_VARIANT=anti_bot MAZEGEN_WIDTH=31 python scripts/diagnose_seeds.py 7

If no seeds are provided as CLI args, a default list is used. Size and
variant come from MAZEGEN_* environment variables (or .env).
Exits with non-zero status if structural issues are detected.
"""

from __future__ import annotations

import json
import os
import sys
from typing import List

from colorama import Fore, Style
from colorama import init as color_init

# Ensure project root on path if executed directly
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from mazegen import MazeConfig, generate_maze  # noqa: E402 import after path fix
from mazegen.debug_checks import analyze  # noqa: E402 import after path fix

DEFAULT_SEEDS = [292372, 730727]


def run_for_seed(seed: int) -> dict:
    cfg = MazeConfig.from_env(seed=seed)
    artifact = generate_maze(config=cfg)
    res = analyze(artifact)
    issues = {
        "endpoint_error": 0 if res["endpoint_error"] is None else 1,
        "unreachable_cells": len(res["unreachable_cells"]),
        "missing_path": 0 if res["path_length"] else 1,
    }
    return {
        "seed": seed,
        "variant": cfg.variant,
        "size": f"{cfg.width}x{cfg.height}",
        "tier": (artifact.metrics or {}).get("placement_tier"),
        "path_length": res["path_length"],
        "separated": res["separated"],
        "open_2x2_blocks": len(res["open_2x2_blocks"]),
        "issues": issues,
        "ok": all(v == 0 for v in issues.values()),
    }


def main(argv: List[str]) -> int:
    color_init(strip=not sys.stdout.isatty())
    seeds = [int(a) for a in argv] if argv else DEFAULT_SEEDS
    results = [run_for_seed(s) for s in seeds]
    print(json.dumps({"results": results}, indent=2))
    for r in results:
        colour = Fore.GREEN if r["ok"] else Fore.RED
        print(f"{colour}{r['seed']}: {'OK' if r['ok'] else 'FAIL'} tier={r['tier']} path={r['path_length']}{Style.RESET_ALL}")
    # Non-zero exit if any failure
    if not all(r["ok"] for r in results):
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
