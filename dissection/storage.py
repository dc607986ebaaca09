"""Save and restore the current puzzle as a small JSON document."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .base import PathLike
from .models import Piece, Puzzle

LOGGER = logging.getLogger(__name__)

CURRENT_VERSION = "1.0.0"


@dataclass
class SavedGameState:
    version: str
    puzzle_size: int
    pieces: List[Piece]

    @classmethod
    def from_puzzle(cls, puzzle: Puzzle) -> "SavedGameState":
        return cls(version=CURRENT_VERSION, puzzle_size=puzzle.size, pieces=list(puzzle.pieces))

    def to_puzzle(self) -> Puzzle:
        return Puzzle(size=self.puzzle_size, pieces=list(self.pieces))

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "puzzle_size": self.puzzle_size,
            "pieces": [piece.to_dict() for piece in self.pieces],
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "SavedGameState":
        if not isinstance(payload, dict):
            raise ValueError("Saved game must be a JSON object")
        try:
            size = int(payload["puzzle_size"])
            pieces = [Piece.from_dict(item) for item in payload["pieces"]]
        except (KeyError, TypeError, IndexError) as exc:
            raise ValueError(f"Saved game is malformed: {exc!r}") from exc
        if size <= 0:
            raise ValueError(f"Saved game has invalid puzzle size {size}")
        if not pieces:
            raise ValueError("Saved game has no pieces")
        return cls(version=str(payload.get("version", CURRENT_VERSION)), puzzle_size=size, pieces=pieces)


def save_game(puzzle: Puzzle, path: PathLike) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    state = SavedGameState.from_puzzle(puzzle)
    target.write_text(json.dumps(state.to_dict(), indent=2), encoding="utf-8")
    LOGGER.debug("Saved %d-piece puzzle to %s", len(state.pieces), target)
    return target


def load_game(path: PathLike) -> Optional[Puzzle]:
    """Load a saved puzzle; ``None`` when nothing has been saved yet."""

    source = Path(path)
    if not source.exists():
        return None
    try:
        payload = json.loads(source.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Saved game {source} is not valid JSON") from exc
    state = SavedGameState.from_dict(payload)
    if state.version != CURRENT_VERSION:
        LOGGER.info("Loading saved game version %s (current %s)", state.version, CURRENT_VERSION)
    return state.to_puzzle()


def clear_game(path: PathLike) -> bool:
    """Remove a saved game; returns whether a file was deleted."""

    target = Path(path)
    if not target.exists():
        return False
    target.unlink()
    return True


__all__ = [
    "CURRENT_VERSION",
    "SavedGameState",
    "save_game",
    "load_game",
    "clear_game",
]
