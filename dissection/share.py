"""Compact share codes for puzzles.

A share code is the URL-safe base64 (no padding) of this byte layout::

    size | piece count | piece* 

    piece  = header [extended count] first-cell delta*
    header = (palette index << 4) | cell count   (count >= 15 stores 15 and
             the real count in the next byte)

Cells are packed as ``y * size + x``, sorted, and stored as the first value
followed by deltas. A delta of 128 or more is written as the marker byte 128
followed by ``delta - 128``. Piece ids are not stored; decoding numbers the
pieces by position.
"""

from __future__ import annotations

import base64
import binascii
from typing import List, Optional
from urllib.parse import urldefrag

from .colors import PALETTE_SIZE, color_to_index, index_to_color
from .grid import Cell, cell_index, index_to_cell
from .models import Piece, Puzzle

EXTENDED_COUNT = 15
DELTA_MARKER = 128
FRAGMENT_PREFIX = "p="
MAX_SIZE = 16


def _pack_piece(piece: Piece, size: int) -> bytearray:
    out = bytearray()
    count = len(piece.cells)
    if count == 0:
        raise ValueError(f"Piece {piece.id} has no cells")
    color = color_to_index(piece.color)
    if count >= EXTENDED_COUNT:
        if count > 255:
            raise ValueError(f"Piece {piece.id} has too many cells to encode ({count})")
        out.append((color << 4) | EXTENDED_COUNT)
        out.append(count)
    else:
        out.append((color << 4) | count)

    packed = sorted(cell_index(cell, size) for cell in piece.cells)
    out.append(packed[0])
    for previous, current in zip(packed, packed[1:]):
        delta = current - previous
        if delta < DELTA_MARKER:
            out.append(delta)
        else:
            out.append(DELTA_MARKER)
            out.append(delta - DELTA_MARKER)
    return out


def encode_puzzle(puzzle: Puzzle) -> str:
    """Encode ``puzzle`` (size, piece shapes and palette colors) as a share code."""

    size = puzzle.size
    if not 1 <= size <= MAX_SIZE:
        raise ValueError(f"Board size {size} cannot be share-encoded")
    if len(puzzle.pieces) > 255:
        raise ValueError("Too many pieces to share-encode")
    for piece in puzzle.pieces:
        for x, y in piece.cells:
            if not (0 <= x < size and 0 <= y < size):
                raise ValueError(f"Piece {piece.id} cell {(x, y)} lies outside a {size}x{size} board")

    data = bytearray([size, len(puzzle.pieces)])
    for piece in puzzle.pieces:
        data.extend(_pack_piece(piece, size))
    return base64.urlsafe_b64encode(bytes(data)).decode("ascii").rstrip("=")


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = data
        self._offset = 0

    def byte(self) -> int:
        if self._offset >= len(self._data):
            raise ValueError("Share code is truncated")
        value = self._data[self._offset]
        self._offset += 1
        return value

    @property
    def exhausted(self) -> bool:
        return self._offset >= len(self._data)


def decode_puzzle(code: str) -> Puzzle:
    """Inverse of :func:`encode_puzzle`; raises ``ValueError`` on malformed input."""

    padded = code.strip() + "=" * (-len(code.strip()) % 4)
    try:
        data = base64.urlsafe_b64decode(padded.encode("ascii"))
    except (binascii.Error, UnicodeEncodeError, ValueError) as exc:
        raise ValueError(f"Share code is not valid base64: {exc}") from exc

    reader = _Reader(data)
    size = reader.byte()
    if not 1 <= size <= MAX_SIZE:
        raise ValueError(f"Share code has invalid board size {size}")
    piece_count = reader.byte()

    pieces: List[Piece] = []
    for piece_id in range(piece_count):
        header = reader.byte()
        color_index = (header >> 4) & 0x0F
        cell_count = header & 0x0F
        if cell_count == EXTENDED_COUNT:
            cell_count = reader.byte()
        if cell_count == 0:
            raise ValueError(f"Piece {piece_id} has no cells")

        packed = [reader.byte()]
        for _ in range(cell_count - 1):
            delta = reader.byte()
            if delta == DELTA_MARKER:
                delta = DELTA_MARKER + reader.byte()
            packed.append(packed[-1] + delta)
        if packed[-1] >= size * size:
            raise ValueError(f"Piece {piece_id} has a cell outside the board")

        cells: List[Cell] = sorted(index_to_cell(value, size) for value in packed)
        color = index_to_color(color_index if color_index < PALETTE_SIZE else 0)
        pieces.append(Piece(id=piece_id, cells=cells, color=color))

    if not reader.exhausted:
        raise ValueError("Share code has trailing bytes")
    return Puzzle(size=size, pieces=pieces)


def share_url(puzzle: Puzzle, base_url: str) -> str:
    """Return ``base_url`` with the puzzle's share code in the ``#p=`` fragment."""

    url, _ = urldefrag(base_url)
    return f"{url}#{FRAGMENT_PREFIX}{encode_puzzle(puzzle)}"


def code_from_url(url: str) -> Optional[str]:
    """Extract the share code from a URL, or ``None`` when it carries none."""

    _, fragment = urldefrag(url)
    if not fragment.startswith(FRAGMENT_PREFIX):
        return None
    code = fragment[len(FRAGMENT_PREFIX):]
    return code or None


__all__ = ["encode_puzzle", "decode_puzzle", "share_url", "code_from_url"]
