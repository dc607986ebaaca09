"""Re-check stored dissection puzzles for a unique tiling."""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .base import AbstractPuzzleAuditor
from .formulation import build_exact_cover_for_pieces
from .grid import Cell
from .models import GeneratorPiece, Piece

LOGGER = logging.getLogger(__name__)


@dataclass
class AuditResult:
    puzzle_id: str
    piece_count: int
    covers_board: bool
    grid_consistent: bool
    solution_count: int
    is_unique: bool
    missing_images: List[str]
    message: str

    @property
    def images_present(self) -> bool:
        return not self.missing_images

    def to_dict(self) -> dict:
        return {
            "puzzle_id": self.puzzle_id,
            "piece_count": self.piece_count,
            "covers_board": self.covers_board,
            "grid_consistent": self.grid_consistent,
            "solution_count": self.solution_count,
            "is_unique": self.is_unique,
            "missing_images": list(self.missing_images),
            "message": self.message,
        }


class DissectionAuditor(AbstractPuzzleAuditor[AuditResult]):
    """Solve each stored puzzle again, report its tilings and check its rendered images."""

    def evaluate(self, puzzle_id: str) -> AuditResult:
        record = self.get_record(puzzle_id)
        size = int(record["size"])
        pieces = [Piece.from_dict(item) for item in record["pieces"]]

        covers_board = sum(len(piece.cells) for piece in pieces) == size * size
        grid_consistent = self._grid_matches_pieces(record.get("solution_grid"), pieces, size)
        missing_images = self._missing_images(record)

        solution_count = 0
        if covers_board:
            generator_pieces = [
                GeneratorPiece(id=piece.id, cells=frozenset(piece.cells), color=piece.color)
                for piece in pieces
            ]
            solver = build_exact_cover_for_pieces(generator_pieces, size)
            solution_count = solver.count(2)

        is_unique = solution_count == 1
        if not covers_board:
            message = "Piece areas do not add up to the board area."
        elif solution_count == 0:
            message = "Pieces cannot tile the board."
        elif not is_unique:
            message = "Pieces tile the board in more than one way."
        elif not grid_consistent:
            message = "Unique tiling, but the stored solution grid does not match the pieces."
        elif missing_images:
            message = f"Unique tiling, but rendered images are missing: {', '.join(missing_images)}"
        else:
            message = "Pieces tile the board in exactly one way."
        LOGGER.debug("Audited %s: %s", puzzle_id, message)

        return AuditResult(
            puzzle_id=puzzle_id,
            piece_count=len(pieces),
            covers_board=covers_board,
            grid_consistent=grid_consistent,
            solution_count=solution_count,
            is_unique=is_unique,
            missing_images=missing_images,
            message=message,
        )

    def _missing_images(self, record: Dict[str, Any]) -> List[str]:
        """Recorded image paths that do not resolve to a file under ``base_dir``."""

        missing: List[str] = []
        for key in ("puzzle_image_path", "solution_image_path"):
            value = record.get(key)
            if not value or not self.resolve_path(value).is_file():
                missing.append(str(value) if value else key)
        return missing

    @staticmethod
    def _grid_matches_pieces(grid: Any, pieces: List[Piece], size: int) -> bool:
        """Each piece id in the grid must occupy a translate of that piece's shape."""

        if not isinstance(grid, list) or len(grid) != size:
            return False
        cells_by_id: Dict[int, List[Cell]] = {}
        for y, row in enumerate(grid):
            if not isinstance(row, list) or len(row) != size:
                return False
            for x, piece_id in enumerate(row):
                if piece_id is None:
                    return False
                cells_by_id.setdefault(int(piece_id), []).append((x, y))

        shapes = {piece.id: sorted(piece.cells) for piece in pieces}
        if set(cells_by_id) != set(shapes):
            return False
        for piece_id, cells in cells_by_id.items():
            min_x = min(x for x, _ in cells)
            min_y = min(y for _, y in cells)
            if sorted((x - min_x, y - min_y) for x, y in cells) != shapes[piece_id]:
                return False
        return True


__all__ = ["DissectionAuditor", "AuditResult"]


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Check stored dissection puzzles for a unique solution")
    parser.add_argument("metadata", type=Path, help="Path to puzzles.json")
    parser.add_argument("puzzle_id", nargs="?", default=None, help="Audit a single puzzle (default: all)")
    parser.add_argument("--base-dir", type=Path, default=None, help="Directory image paths are relative to (default: metadata folder)")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    auditor = DissectionAuditor(args.metadata, base_dir=args.base_dir)
    if args.puzzle_id is not None:
        results = [auditor.evaluate(args.puzzle_id)]
    else:
        results = auditor.evaluate_all()
    print(json.dumps([result.to_dict() for result in results], indent=2))


if __name__ == "__main__":
    main()
