"""Exact-cover model of "place every piece on the board exactly once"."""

from __future__ import annotations

import logging
from typing import Iterator, List, Sequence, Tuple

from .exact_cover import ExactCoverSolver
from .grid import Cell, cell_index, normalize_cells, shape_extent
from .models import GeneratorPiece, GeneratorState

LOGGER = logging.getLogger(__name__)

# Row label: (piece index, start x, start y)
Placement = Tuple[int, int, int]


def iter_placements(shape: Sequence[Cell], size: int) -> Iterator[Tuple[int, int, List[Cell]]]:
    """Yield ``(start_x, start_y, cells)`` for every in-bounds translation of ``shape``.

    ``shape`` must already be normalized to a (0, 0) origin. Rotations and
    reflections are not generated.
    """

    width, height = shape_extent(shape)
    for start_y in range(size - height + 1):
        for start_x in range(size - width + 1):
            yield start_x, start_y, [(start_x + x, start_y + y) for x, y in shape]


def build_exact_cover(state: GeneratorState) -> ExactCoverSolver:
    """Build the solver for ``state``.

    Columns ``0..size*size-1`` are board cells (``y * size + x``); column
    ``size*size + i`` requires piece ``i`` to be used exactly once.
    """

    return build_exact_cover_for_pieces(state.pieces, state.size)


def build_exact_cover_for_pieces(pieces: Sequence[GeneratorPiece], size: int) -> ExactCoverSolver:
    cell_columns = size * size
    solver = ExactCoverSolver(cell_columns + len(pieces))
    for piece_index, piece in enumerate(pieces):
        shape = normalize_cells(piece.cells)
        piece_column = cell_columns + piece_index
        for start_x, start_y, cells in iter_placements(shape, size):
            columns = [cell_index(cell, size) for cell in cells]
            columns.append(piece_column)
            label: Placement = (piece_index, start_x, start_y)
            solver.add_constraint(label, columns)
    LOGGER.debug(
        "Exact cover for %d pieces on %dx%d: %d columns, %d rows",
        len(pieces),
        size,
        size,
        solver.columns,
        solver.rows,
    )
    return solver


def find_tilings(state: GeneratorState, limit: int = 2) -> List[List[Placement]]:
    """Return up to ``limit`` tilings, each a sorted list of piece placements."""

    return [sorted(solution) for solution in build_exact_cover(state).find(limit)]


def count_solutions(state: GeneratorState, limit: int = 2) -> int:
    """Count tilings of the board by ``state.pieces``, stopping at ``limit``."""

    return build_exact_cover(state).count(limit)


def has_unique_solution(state: GeneratorState) -> bool:
    return count_solutions(state, limit=2) == 1


__all__ = [
    "Placement",
    "iter_placements",
    "build_exact_cover",
    "build_exact_cover_for_pieces",
    "find_tilings",
    "count_solutions",
    "has_unique_solution",
]
