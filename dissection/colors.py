"""Fixed piece palette and per-piece color assignment."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from .models import GeneratorPiece, RandomSource, draw_uniform

# Saturated hues first, then lighter complements that stay readable on a
# light board background.
COLOR_PALETTE: Tuple[str, ...] = (
    "#E74C3C",  # red
    "#FF5722",  # orange red
    "#F39C12",  # orange
    "#F1C40F",  # yellow
    "#CDDC39",  # lime
    "#2ECC71",  # green
    "#1ABC9C",  # turquoise
    "#3498DB",  # blue
    "#3F51B5",  # indigo
    "#9B59B6",  # purple
    "#E91E63",  # magenta
    "#FF6B35",  # light orange
    "#4FC3F7",  # light blue
    "#FFB74D",  # light amber
    "#FF9800",  # amber
    "#26A69A",  # light teal
)

PALETTE_SIZE = len(COLOR_PALETTE)


def shuffle_palette(rng: RandomSource) -> List[str]:
    """Fisher-Yates shuffle of the palette driven by ``rng.random()``."""

    shuffled = list(COLOR_PALETTE)
    for i in range(len(shuffled) - 1, 0, -1):
        j = int(draw_uniform(rng) * (i + 1))
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def assign_unique_colors(
    pieces: Sequence[GeneratorPiece],
    rng: RandomSource,
) -> List[GeneratorPiece]:
    """Return copies of ``pieces`` colored from a shuffled palette.

    Colors repeat (modulo the palette size) only past 16 pieces.
    """

    palette = shuffle_palette(rng)
    return [
        GeneratorPiece(id=piece.id, cells=piece.cells, color=palette[index % len(palette)])
        for index, piece in enumerate(pieces)
    ]


def color_to_index(color: str) -> int:
    """Palette index of ``color``; unknown colors map to 0."""

    try:
        return COLOR_PALETTE.index(color.upper())
    except (AttributeError, ValueError):
        return 0


def index_to_color(index: int) -> str:
    if 0 <= index < PALETTE_SIZE:
        return COLOR_PALETTE[index]
    return COLOR_PALETTE[0]


def hex_to_rgb(color: str) -> Tuple[int, int, int]:
    value = color.lstrip("#")
    if len(value) != 6:
        raise ValueError(f"Expected a #RRGGBB color, got {color!r}")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


__all__ = [
    "COLOR_PALETTE",
    "PALETTE_SIZE",
    "shuffle_palette",
    "assign_unique_colors",
    "color_to_index",
    "index_to_color",
    "hex_to_rgb",
]
