"""Dataset generator that renders unique-solution jigsaw dissections."""

from __future__ import annotations

import argparse
import logging
import random
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from PIL import Image, ImageDraw

from .base import AbstractPuzzleGenerator, PathLike
from .colors import hex_to_rgb
from .config import resolve_evaluation_base
from .engine import SUPPORTED_SIZES, GenerationResult, run_generation
from .models import Piece, Puzzle
from .share import encode_puzzle

LOGGER = logging.getLogger(__name__)

BACKGROUND_COLOR = (255, 255, 255)
BOARD_COLOR = (236, 236, 236)
GRID_LINE_COLOR = (190, 190, 190)
BORDER_COLOR = (40, 40, 40)


@dataclass
class DissectionPuzzleRecord:
    id: str
    size: int
    outcome: str
    is_unique: bool
    evaluation_base: float
    pieces: List[Piece]
    solution_grid: List[List[Optional[int]]]
    share_code: str
    puzzle_image_path: str
    solution_image_path: str

    @property
    def piece_count(self) -> int:
        return len(self.pieces)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "size": self.size,
            "outcome": self.outcome,
            "is_unique": self.is_unique,
            "evaluation_base": self.evaluation_base,
            "piece_count": self.piece_count,
            "pieces": [piece.to_dict() for piece in self.pieces],
            "solution_grid": [list(row) for row in self.solution_grid],
            "share_code": self.share_code,
            "puzzle_image_path": self.puzzle_image_path,
            "solution_image_path": self.solution_image_path,
        }


def layout_tray(
    pieces: Sequence[Piece],
    *,
    cell_size: int,
    width: int,
    padding: int,
) -> Tuple[List[Tuple[int, int]], int]:
    """Place pieces left to right in rows of at most ``width`` pixels.

    Returns the top-left pixel offset of each piece and the total height used.
    """

    offsets: List[Tuple[int, int]] = []
    x = y = 0
    row_height = 0
    for piece in pieces:
        piece_width = piece.width * cell_size
        piece_height = piece.height * cell_size
        if x > 0 and x + piece_width > width:
            x = 0
            y += row_height + padding
            row_height = 0
        offsets.append((x, y))
        x += piece_width + padding
        row_height = max(row_height, piece_height)
    return offsets, (y + row_height if pieces else 0)


class DissectionGenerator(AbstractPuzzleGenerator[DissectionPuzzleRecord]):
    """Generate jigsaw dissections of a square board that have a single solution."""

    def __init__(
        self,
        output_dir: PathLike = "data/dissection",
        *,
        size: int = 6,
        cell_size: int = 48,
        evaluation_base: Optional[float] = None,
        seed: Optional[int] = None,
    ) -> None:
        super().__init__(output_dir)
        if size not in SUPPORTED_SIZES:
            raise ValueError(f"size must be one of {SUPPORTED_SIZES}, got {size}")
        if cell_size < 8:
            raise ValueError("cell_size must be at least 8 pixels")
        self.size = size
        self.cell_size = cell_size
        self.evaluation_base = resolve_evaluation_base(evaluation_base)
        self._rng = random.Random(seed)

        self.puzzle_dir = self.output_dir / "puzzles"
        self.solution_dir = self.output_dir / "solutions"
        for directory in (self.puzzle_dir, self.solution_dir):
            directory.mkdir(parents=True, exist_ok=True)

    def create_puzzle(self, *, puzzle_id: Optional[str] = None) -> DissectionPuzzleRecord:
        puzzle_uuid = puzzle_id or str(uuid.uuid4())
        result = run_generation(self.size, rng=self._rng, evaluation_base=self.evaluation_base)
        puzzle = result.to_puzzle()
        LOGGER.info(
            "Puzzle %s: %d pieces, %s after %d checks",
            puzzle_uuid,
            puzzle.piece_count,
            result.outcome.value,
            result.uniqueness_checks,
        )

        puzzle_path = self.puzzle_dir / f"{puzzle_uuid}_puzzle.png"
        solution_path = self.solution_dir / f"{puzzle_uuid}_solution.png"
        self.render_puzzle(puzzle).save(puzzle_path)
        self.render_solution(result).save(solution_path)

        return DissectionPuzzleRecord(
            id=puzzle_uuid,
            size=self.size,
            outcome=result.outcome.value,
            is_unique=result.is_unique,
            evaluation_base=self.evaluation_base,
            pieces=puzzle.pieces,
            solution_grid=result.state.solution_grid(),
            share_code=encode_puzzle(puzzle),
            puzzle_image_path=self.relativize_path(puzzle_path),
            solution_image_path=self.relativize_path(solution_path),
        )

    def create_random_puzzle(self) -> DissectionPuzzleRecord:
        return self.create_puzzle()

    # ------------------------------------------------------------------

    @property
    def margin(self) -> int:
        return self.cell_size // 2

    def render_puzzle(self, puzzle: Puzzle) -> Image.Image:
        """Empty board on top, the loose pieces arranged in a tray below it."""

        board_px = puzzle.size * self.cell_size
        padding = max(4, self.cell_size // 4)
        offsets, tray_height = layout_tray(
            puzzle.pieces, cell_size=self.cell_size, width=board_px, padding=padding
        )
        width = board_px + 2 * self.margin
        tray_top = self.margin * 2 + board_px
        height = tray_top + tray_height + self.margin

        image = Image.new("RGB", (width, height), BACKGROUND_COLOR)
        draw = ImageDraw.Draw(image)
        self._draw_empty_board(draw, puzzle.size)
        for piece, (dx, dy) in zip(puzzle.pieces, offsets):
            self._draw_piece(draw, piece, self.margin + dx, tray_top + dy)
        return image

    def render_solution(self, result: GenerationResult) -> Image.Image:
        """Board filled with every piece at its solved position."""

        state = result.state
        board_px = state.size * self.cell_size
        width = board_px + 2 * self.margin
        image = Image.new("RGB", (width, width), BACKGROUND_COLOR)
        draw = ImageDraw.Draw(image)

        colors: Dict[int, Tuple[int, int, int]] = {
            piece.id: hex_to_rgb(piece.color or "#000000") for piece in state.pieces
        }
        grid = state.solution_grid()
        for y, row in enumerate(grid):
            for x, piece_id in enumerate(row):
                left, top = self._cell_origin(x, y)
                fill = colors.get(piece_id, BOARD_COLOR)
                draw.rectangle(
                    (left, top, left + self.cell_size - 1, top + self.cell_size - 1),
                    fill=fill,
                    outline=GRID_LINE_COLOR,
                )
        self._draw_piece_borders(draw, grid, self.margin, self.margin)
        return image

    def _cell_origin(self, x: int, y: int) -> Tuple[int, int]:
        return self.margin + x * self.cell_size, self.margin + y * self.cell_size

    def _draw_empty_board(self, draw: ImageDraw.ImageDraw, size: int) -> None:
        for y in range(size):
            for x in range(size):
                left, top = self._cell_origin(x, y)
                draw.rectangle(
                    (left, top, left + self.cell_size - 1, top + self.cell_size - 1),
                    fill=BOARD_COLOR,
                    outline=GRID_LINE_COLOR,
                )
        board_px = size * self.cell_size
        draw.rectangle(
            (self.margin - 1, self.margin - 1, self.margin + board_px, self.margin + board_px),
            outline=BORDER_COLOR,
            width=2,
        )

    def _draw_piece(self, draw: ImageDraw.ImageDraw, piece: Piece, left: int, top: int) -> None:
        fill = hex_to_rgb(piece.color)
        for x, y in piece.cells:
            x0 = left + x * self.cell_size
            y0 = top + y * self.cell_size
            draw.rectangle(
                (x0, y0, x0 + self.cell_size - 1, y0 + self.cell_size - 1),
                fill=fill,
                outline=GRID_LINE_COLOR,
            )
        grid: List[List[Optional[int]]] = [
            [None for _ in range(piece.width)] for _ in range(piece.height)
        ]
        for x, y in piece.cells:
            grid[y][x] = piece.id
        self._draw_piece_borders(draw, grid, left, top)

    def _draw_piece_borders(
        self,
        draw: ImageDraw.ImageDraw,
        grid: Sequence[Sequence[Optional[int]]],
        left: int,
        top: int,
    ) -> None:
        """Draw a thick edge wherever a cell meets a different piece or the outside."""

        rows = len(grid)
        cols = len(grid[0]) if rows else 0
        thickness = max(2, self.cell_size // 16)

        def owner(x: int, y: int) -> Optional[int]:
            if 0 <= x < cols and 0 <= y < rows:
                return grid[y][x]
            return None

        for y in range(rows):
            for x in range(cols):
                current = grid[y][x]
                if current is None:
                    continue
                x0 = left + x * self.cell_size
                y0 = top + y * self.cell_size
                x1 = x0 + self.cell_size - 1
                y1 = y0 + self.cell_size - 1
                if owner(x, y - 1) != current:
                    draw.line((x0, y0, x1, y0), fill=BORDER_COLOR, width=thickness)
                if owner(x, y + 1) != current:
                    draw.line((x0, y1, x1, y1), fill=BORDER_COLOR, width=thickness)
                if owner(x - 1, y) != current:
                    draw.line((x0, y0, x0, y1), fill=BORDER_COLOR, width=thickness)
                if owner(x + 1, y) != current:
                    draw.line((x1, y0, x1, y1), fill=BORDER_COLOR, width=thickness)


__all__ = ["DissectionGenerator", "DissectionPuzzleRecord", "layout_tray"]


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate unique-solution jigsaw dissection puzzles")
    parser.add_argument("count", type=int, help="Number of puzzles to generate")
    parser.add_argument("--output-dir", type=Path, default=Path("data/dissection"), help="Where to save assets")
    parser.add_argument("--size", type=int, choices=SUPPORTED_SIZES, default=6)
    parser.add_argument("--cell-size", type=int, default=48)
    parser.add_argument(
        "--evaluation-base",
        type=float,
        default=None,
        help="Merge score base; larger values favour absorbing small pieces (default 3)",
    )
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--verbose", action="store_true", help="Log progress for every puzzle")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    generator = DissectionGenerator(
        output_dir=args.output_dir,
        size=args.size,
        cell_size=args.cell_size,
        evaluation_base=args.evaluation_base,
        seed=args.seed,
    )
    metadata_path = generator.output_dir / "puzzles.json"
    generator.generate_dataset(args.count, metadata_path=metadata_path)


if __name__ == "__main__":
    main()
