"""Adjacency detection and score-weighted pair selection for merging."""

from __future__ import annotations

import math
from typing import Dict, List, Sequence, Set, Tuple

import numpy as np

from .grid import Cell
from .models import GeneratorPiece, RandomSource, draw_uniform

Pair = Tuple[int, int]

# Largest argument math.exp accepts without overflowing.
_MAX_EXPONENT = 709.0


def compute_adjacent_pairs(pieces: Sequence[GeneratorPiece]) -> List[Pair]:
    """Return sorted index pairs ``(i, j)``, ``i < j``, of edge-adjacent pieces."""

    owner: Dict[Cell, int] = {}
    for index, piece in enumerate(pieces):
        for cell in piece.cells:
            owner[cell] = index

    pairs: Set[Pair] = set()
    for (x, y), index in owner.items():
        # Right and down neighbours are enough to see every shared edge once.
        for other_cell in ((x + 1, y), (x, y + 1)):
            other = owner.get(other_cell)
            if other is None or other == index:
                continue
            pairs.add((min(index, other), max(index, other)))
    return sorted(pairs)


def pair_score(piece_a: GeneratorPiece, piece_b: GeneratorPiece, base: float) -> float:
    """``base**-|A| + base**-|B|``; small pieces contribute more.

    Terms saturate near the float range instead of overflowing; use
    :func:`score_pairs` when the scores feed a selection.
    """

    log_base = math.log(base)
    return sum(math.exp(min(-area * log_base, _MAX_EXPONENT)) for area in (piece_a.area, piece_b.area))


def score_pairs(
    pieces: Sequence[GeneratorPiece],
    pairs: Sequence[Pair],
    base: float,
) -> List[float]:
    """Pair scores divided by a common factor so the largest term is 1.

    Ratios between pairs match :func:`pair_score`, but the values stay finite
    and positive for any base > 0.
    """

    if not pairs:
        return []
    areas = np.asarray(
        [(pieces[i].area, pieces[j].area) for i, j in pairs], dtype=np.float64
    )
    exponents = -areas * math.log(base)
    weights = np.exp(exponents - exponents.max())
    return [float(value) for value in weights.sum(axis=1)]


def select_pair_by_score(
    pairs: Sequence[Pair],
    scores: Sequence[float],
    rng: RandomSource,
) -> Pair:
    """Roulette-wheel pick of one pair, proportional to its score."""

    if not pairs:
        raise ValueError("Cannot select from an empty list of pairs")
    if len(pairs) != len(scores):
        raise ValueError("pairs and scores must have the same length")

    weights = np.asarray(scores, dtype=np.float64)
    total = float(weights.sum())
    if not np.isfinite(total) or total <= 0:
        raise ValueError(f"Scores must sum to a positive finite value, got {total!r}")
    cumulative = np.cumsum(weights / total)

    draw = draw_uniform(rng)
    # First index whose cumulative probability is >= draw.
    selected = int(np.searchsorted(cumulative, draw, side="left"))
    if selected >= len(pairs):
        selected = len(pairs) - 1
    return pairs[selected]


__all__ = [
    "Pair",
    "compute_adjacent_pairs",
    "pair_score",
    "score_pairs",
    "select_pair_by_score",
]
