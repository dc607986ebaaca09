"""Two-phase piece merging that stops once the pieces tile the board uniquely.

Generation starts from one piece per cell and repeatedly merges two
edge-adjacent pieces, chosen at random with a bias towards small pieces.
The first ``unconditional_merge_count(size)`` merges are taken blindly; after
that every merge is followed by an exact-cover check, and generation stops
at the first state whose pieces fit the board in exactly one way.
"""

from __future__ import annotations

import enum
import logging
import random
from dataclasses import dataclass
from typing import Dict, Optional

from .colors import assign_unique_colors
from .config import resolve_evaluation_base
from .formulation import count_solutions
from .grid import all_cells
from .models import GeneratorPiece, GeneratorState, Piece, Puzzle, RandomSource
from .scoring import compute_adjacent_pairs, score_pairs, select_pair_by_score

LOGGER = logging.getLogger(__name__)

# Blind merges per board size, roughly proportional to the cell count.
# Uniqueness checks dominate the cost: 6x6 takes well under a second, 8x8 can
# take from a few seconds to over a minute.
UNCONDITIONAL_MERGES: Dict[int, int] = {6: 24, 7: 34, 8: 45}
SUPPORTED_SIZES = tuple(sorted(UNCONDITIONAL_MERGES))


class GenerationOutcome(enum.Enum):
    FINALIZED = "finalized"
    EXHAUSTED = "exhausted"


@dataclass
class GenerationResult:
    """Final generator state plus how generation ended."""

    state: GeneratorState
    outcome: GenerationOutcome
    unconditional_merges: int
    conditional_merges: int
    uniqueness_checks: int

    @property
    def is_unique(self) -> bool:
        return self.outcome is GenerationOutcome.FINALIZED

    def to_puzzle(self) -> Puzzle:
        return state_to_puzzle(self.state)


def unconditional_merge_count(size: int) -> int:
    try:
        return UNCONDITIONAL_MERGES[size]
    except KeyError as exc:
        raise ValueError(
            f"Unsupported board size {size}; expected one of {', '.join(map(str, SUPPORTED_SIZES))}"
        ) from exc


def create_initial_state(size: int) -> GeneratorState:
    """One single-cell piece per board cell, ids 1..size*size in row-major order."""

    pieces = [
        GeneratorPiece(id=piece_id, cells=frozenset([cell]))
        for piece_id, cell in enumerate(all_cells(size), start=1)
    ]
    return GeneratorState(pieces=pieces, size=size, next_id=len(pieces) + 1)


def merge_pieces(first: GeneratorPiece, second: GeneratorPiece, new_id: int) -> GeneratorPiece:
    return GeneratorPiece(id=new_id, cells=first.cells | second.cells)


def perform_merge_step(
    state: GeneratorState,
    rng: RandomSource,
    evaluation_base: float,
) -> Optional[GeneratorState]:
    """Merge one adjacent pair and return the new state, or ``None`` if none is left."""

    pairs = compute_adjacent_pairs(state.pieces)
    if not pairs:
        return None

    scores = score_pairs(state.pieces, pairs, evaluation_base)
    first_index, second_index = select_pair_by_score(pairs, scores, rng)
    merged = merge_pieces(state.pieces[first_index], state.pieces[second_index], state.next_id)

    pieces = [
        piece
        for index, piece in enumerate(state.pieces)
        if index not in (first_index, second_index)
    ]
    pieces.append(merged)
    return GeneratorState(pieces=pieces, size=state.size, next_id=state.next_id + 1)


def run_generation(
    size: int = 6,
    *,
    rng: Optional[RandomSource] = None,
    evaluation_base: Optional[float] = None,
) -> GenerationResult:
    """Run both merge phases and return the colored final state."""

    target = unconditional_merge_count(size)
    base = resolve_evaluation_base(evaluation_base)
    rng = rng if rng is not None else random.Random()

    state = create_initial_state(size)
    LOGGER.debug("Generating %dx%d puzzle (base=%s, %d blind merges)", size, size, base, target)

    unconditional = 0
    while unconditional < target:
        merged = perform_merge_step(state, rng, base)
        if merged is None:
            break
        state = merged
        unconditional += 1
    LOGGER.debug("Blind phase done after %d merges, %d pieces", unconditional, state.piece_count)

    conditional = 0
    checks = 0
    outcome = GenerationOutcome.EXHAUSTED
    while True:
        merged = perform_merge_step(state, rng, base)
        if merged is None:
            break
        conditional += 1
        checks += 1
        state = merged
        solutions = count_solutions(state, limit=2)
        if solutions == 0:
            # The solved layout is always a solution; reaching this means the
            # partition is broken.
            raise RuntimeError(f"State with {state.piece_count} pieces has no tiling")
        if solutions == 1:
            outcome = GenerationOutcome.FINALIZED
            break

    if outcome is GenerationOutcome.EXHAUSTED:
        LOGGER.warning(
            "No unique tiling found for %dx%d board; returning %d-piece puzzle with multiple solutions",
            size,
            size,
            state.piece_count,
        )
    else:
        LOGGER.debug(
            "Unique tiling with %d pieces after %d checked merges", state.piece_count, conditional
        )

    colored = GeneratorState(
        pieces=assign_unique_colors(state.pieces, rng),
        size=state.size,
        next_id=state.next_id,
    )
    return GenerationResult(
        state=colored,
        outcome=outcome,
        unconditional_merges=unconditional,
        conditional_merges=conditional,
        uniqueness_checks=checks,
    )


def to_output_piece(piece: GeneratorPiece) -> Piece:
    if piece.color is None:
        raise ValueError(f"Piece {piece.id} has no color assigned")
    return Piece(id=piece.id, cells=piece.normalized_cells(), color=piece.color)


def state_to_puzzle(state: GeneratorState) -> Puzzle:
    """Strip board positions: each piece's cells become relative to its bounding box."""

    return Puzzle(size=state.size, pieces=[to_output_piece(piece) for piece in state.pieces])


def generate_puzzle(
    size: int = 6,
    *,
    rng: Optional[RandomSource] = None,
    evaluation_base: Optional[float] = None,
) -> Puzzle:
    """Generate a puzzle whose pieces tile a ``size`` x ``size`` board."""

    return run_generation(size, rng=rng, evaluation_base=evaluation_base).to_puzzle()


__all__ = [
    "UNCONDITIONAL_MERGES",
    "SUPPORTED_SIZES",
    "GenerationOutcome",
    "GenerationResult",
    "unconditional_merge_count",
    "create_initial_state",
    "merge_pieces",
    "perform_merge_step",
    "run_generation",
    "state_to_puzzle",
    "generate_puzzle",
]
