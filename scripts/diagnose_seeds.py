#!/usr/bin/env python3
"""Map generation diagnostics for specific seeds.

Usage:
  python scripts/diagnose_seeds.py 292372 730727
  MAPGEN_MAX_ROOMS=12 MAPGEN_MIN_PATH_LENGTH=4 python scripts/diagnose_seeds.py

If no seeds are provided as CLI args, a default list is used. Each seed gets a
single attempt. Exits with non-zero status if any seed failed or aborted.
"""

from __future__ import annotations

import json
import os
import sys
from typing import List

# Ensure project root on path if executed directly
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from doorway.mapgen import GeneratorConfig, IterationBudgetExceeded, MapGenerator  # noqa: E402 import after path fix

DEFAULT_SEEDS = [292372, 730727, 11, 222, 3333]


def run_for_seed(generator: MapGenerator, seed: int) -> dict:
    try:
        result = generator.generate(seed=seed)
    except IterationBudgetExceeded as e:
        return {"seed": seed, "status": "aborted", "iterations": e.iterations, "ok": False}
    search = generator.last_search
    metrics = search.metrics or {}
    return {
        "seed": seed,
        "status": "success" if result.success else "exhausted",
        "iterations": result.iterations,
        "path_length": result.path_length,
        "max_depth": metrics.get("max_depth"),
        "leaf_failures": metrics.get("leaf_failures"),
        "ok": result.success,
    }


def main(argv: List[str]) -> int:
    seeds = [int(a) for a in argv] if argv else DEFAULT_SEEDS
    generator = MapGenerator(config=GeneratorConfig.from_env())
    results = [run_for_seed(generator, s) for s in seeds]
    summary = {
        "success": sum(1 for r in results if r["status"] == "success"),
        "exhausted": sum(1 for r in results if r["status"] == "exhausted"),
        "aborted": sum(1 for r in results if r["status"] == "aborted"),
    }
    print(json.dumps({"config": generator.config.to_dict(), "summary": summary, "results": results}, indent=2))
    return 0 if all(r["ok"] for r in results) else 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
