"""Cell addressing helpers for square grids."""

from __future__ import annotations

from typing import Iterable, List, Tuple

Cell = Tuple[int, int]

NEIGHBOUR_OFFSETS: Tuple[Cell, ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))


def all_cells(size: int) -> List[Cell]:
    """Return every cell of a ``size`` x ``size`` grid in row-major order."""

    return [(x, y) for y in range(size) for x in range(size)]


def are_adjacent(a: Cell, b: Cell) -> bool:
    """True when the cells share an edge (no diagonals)."""

    return abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1


def neighbours(cell: Cell) -> List[Cell]:
    x, y = cell
    return [(x + dx, y + dy) for dx, dy in NEIGHBOUR_OFFSETS]


def cell_index(cell: Cell, size: int) -> int:
    x, y = cell
    return y * size + x


def index_to_cell(index: int, size: int) -> Cell:
    return index % size, index // size


def bounding_origin(cells: Iterable[Cell]) -> Cell:
    cells = list(cells)
    if not cells:
        raise ValueError("A piece must contain at least one cell")
    return min(x for x, _ in cells), min(y for _, y in cells)


def normalize_cells(cells: Iterable[Cell]) -> List[Cell]:
    """Translate cells so the bounding box starts at (0, 0); result is sorted."""

    cells = list(cells)
    min_x, min_y = bounding_origin(cells)
    return sorted((x - min_x, y - min_y) for x, y in cells)


def shape_extent(cells: Iterable[Cell]) -> Tuple[int, int]:
    """Return (width, height) of the bounding box of ``cells``."""

    cells = list(cells)
    if not cells:
        return 0, 0
    xs = [x for x, _ in cells]
    ys = [y for _, y in cells]
    return max(xs) - min(xs) + 1, max(ys) - min(ys) + 1


__all__ = [
    "Cell",
    "NEIGHBOUR_OFFSETS",
    "all_cells",
    "are_adjacent",
    "neighbours",
    "cell_index",
    "index_to_cell",
    "bounding_origin",
    "normalize_cells",
    "shape_extent",
]
