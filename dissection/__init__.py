"""Unique-solution jigsaw dissection generator."""

__all__ = [
    "generate_puzzle",
    "run_generation",
    "GenerationOutcome",
    "GenerationResult",
    "get_evaluation_base",
    "set_evaluation_base",
    "InvalidConfiguration",
    "ExactCoverError",
    "InvalidRandomValue",
    "ExactCoverSolver",
    "has_unique_solution",
    "count_solutions",
    "Piece",
    "Puzzle",
    "GeneratorPiece",
    "GeneratorState",
    "COLOR_PALETTE",
    "AbstractPuzzleGenerator",
    "AbstractPuzzleAuditor",
    "DissectionGenerator",
    "DissectionPuzzleRecord",
    "DissectionAuditor",
    "AuditResult",
    "encode_puzzle",
    "decode_puzzle",
    "save_game",
    "load_game",
]

from .base import AbstractPuzzleGenerator, AbstractPuzzleAuditor
from .colors import COLOR_PALETTE
from .config import get_evaluation_base, set_evaluation_base
from .engine import GenerationOutcome, GenerationResult, generate_puzzle, run_generation
from .errors import ExactCoverError, InvalidConfiguration, InvalidRandomValue
from .exact_cover import ExactCoverSolver
from .formulation import count_solutions, has_unique_solution
from .models import GeneratorPiece, GeneratorState, Piece, Puzzle
from .generator import DissectionGenerator, DissectionPuzzleRecord
from .audit import DissectionAuditor, AuditResult
from .share import decode_puzzle, encode_puzzle
from .storage import load_game, save_game
