"""Data types shared by the generator, its collaborators and the tests."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Dict, FrozenSet, List, Optional, Protocol

from .errors import InvalidRandomValue
from .grid import Cell, normalize_cells, shape_extent


class RandomSource(Protocol):
    """Anything with ``random() -> float`` in [0, 1); ``random.Random`` fits."""

    def random(self) -> float:
        ...


def draw_uniform(rng: RandomSource) -> float:
    """Draw one value from ``rng`` and reject anything outside [0, 1)."""

    value = rng.random()
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidRandomValue(f"Random source returned a non-number: {value!r}")
    value = float(value)
    if math.isnan(value) or not 0.0 <= value < 1.0:
        raise InvalidRandomValue(f"Random source returned {value!r}, expected a value in [0, 1)")
    return value


@dataclass(frozen=True)
class GeneratorPiece:
    """A connected group of board cells at its solved position."""

    id: int
    cells: FrozenSet[Cell]
    color: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.cells:
            raise ValueError("A piece must contain at least one cell")

    @property
    def area(self) -> int:
        return len(self.cells)

    def normalized_cells(self) -> List[Cell]:
        return normalize_cells(self.cells)


@dataclass
class GeneratorState:
    pieces: List[GeneratorPiece]
    size: int
    next_id: int

    @property
    def piece_count(self) -> int:
        return len(self.pieces)

    def cell_owner(self) -> Dict[Cell, int]:
        """Map each covered cell to the id of the piece holding it."""

        owner: Dict[Cell, int] = {}
        for piece in self.pieces:
            for cell in piece.cells:
                owner[cell] = piece.id
        return owner

    def solution_grid(self) -> List[List[Optional[int]]]:
        """Return ``grid[y][x]`` holding the id of the piece covering each cell."""

        owner = self.cell_owner()
        return [[owner.get((x, y)) for x in range(self.size)] for y in range(self.size)]


@dataclass
class Piece:
    """An output piece whose cells are relative to its bounding box."""

    id: int
    cells: List[Cell]
    color: str

    @property
    def width(self) -> int:
        return shape_extent(self.cells)[0]

    @property
    def height(self) -> int:
        return shape_extent(self.cells)[1]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "cells": [list(cell) for cell in self.cells],
            "color": self.color,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Piece":
        cells = [(int(cell[0]), int(cell[1])) for cell in payload["cells"]]
        if not cells:
            raise ValueError("A piece must contain at least one cell")
        return cls(id=int(payload["id"]), cells=cells, color=str(payload["color"]))


@dataclass
class Puzzle:
    """Generated pieces plus an empty board; placement is left to the caller."""

    size: int
    pieces: List[Piece]
    grid: List[List[Optional[int]]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.grid:
            self.grid = [[None for _ in range(self.size)] for _ in range(self.size)]

    @property
    def piece_count(self) -> int:
        return len(self.pieces)

    def total_area(self) -> int:
        return sum(len(piece.cells) for piece in self.pieces)

    def to_dict(self) -> dict:
        return {
            "size": self.size,
            "grid": [list(row) for row in self.grid],
            "pieces": [piece.to_dict() for piece in self.pieces],
        }


__all__ = [
    "RandomSource",
    "draw_uniform",
    "GeneratorPiece",
    "GeneratorState",
    "Piece",
    "Puzzle",
]
