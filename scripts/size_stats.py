#!/usr/bin/env python3
"""Generate many puzzles per board size and summarise piece statistics."""

from __future__ import annotations

import argparse
import json
import random
import sys
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from dissection.engine import SUPPORTED_SIZES, run_generation


def _summarise(size: int, count: int, rng: random.Random, base: Optional[float]) -> Dict[str, object]:
    piece_counts: List[int] = []
    piece_areas: List[int] = []
    checks: List[int] = []
    unique = 0
    for index in range(1, count + 1):
        result = run_generation(size, rng=rng, evaluation_base=base)
        piece_counts.append(result.state.piece_count)
        piece_areas.extend(piece.area for piece in result.state.pieces)
        checks.append(result.uniqueness_checks)
        unique += int(result.is_unique)
        print(f"[{size}x{size} {index}/{count}] {result.state.piece_count} pieces, {result.outcome.value}")

    counts = np.asarray(piece_counts, dtype=np.float64)
    areas = np.asarray(piece_areas, dtype=np.float64)
    return {
        "size": size,
        "puzzles": count,
        "unique_rate": unique / count if count else 0.0,
        "piece_count_mean": float(counts.mean()) if count else 0.0,
        "piece_count_std": float(counts.std()) if count else 0.0,
        "piece_count_min": int(counts.min()) if count else 0,
        "piece_count_max": int(counts.max()) if count else 0,
        "piece_area_mean": float(areas.mean()) if areas.size else 0.0,
        "piece_area_max": int(areas.max()) if areas.size else 0,
        "uniqueness_checks_mean": float(np.mean(checks)) if checks else 0.0,
    }


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--count", type=int, default=20, help="Puzzles to generate per size")
    parser.add_argument(
        "--sizes",
        type=int,
        nargs="+",
        choices=SUPPORTED_SIZES,
        default=list(SUPPORTED_SIZES),
    )
    parser.add_argument("--evaluation-base", type=float, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--output", type=Path, default=None, help="Optional JSON file for the summary")
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    if args.count < 1:
        raise ValueError("--count must be at least 1")
    rng = random.Random(args.seed)
    summary = [_summarise(size, args.count, rng, args.evaluation_base) for size in args.sizes]
    text = json.dumps(summary, indent=2)
    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(text, encoding="utf-8")
        print(f"Wrote summary for {len(summary)} sizes to {args.output}")
    else:
        print(text)


if __name__ == "__main__":
    main()
