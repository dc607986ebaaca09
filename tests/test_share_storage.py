import json
import random
import tempfile
import unittest
from pathlib import Path

from dissection.colors import COLOR_PALETTE
from dissection.engine import generate_puzzle
from dissection.models import Piece, Puzzle
from dissection.share import code_from_url, decode_puzzle, encode_puzzle, share_url
from dissection.storage import CURRENT_VERSION, SavedGameState, clear_game, load_game, save_game


def shapes(puzzle: Puzzle):
    return [(sorted(piece.cells), piece.color) for piece in puzzle.pieces]


class ShareCodeTests(unittest.TestCase):
    def setUp(self) -> None:
        self.puzzle = generate_puzzle(6, rng=random.Random(21))

    def test_decode_restores_shapes_and_colors(self) -> None:
        code = encode_puzzle(self.puzzle)
        self.assertNotIn("=", code)
        self.assertTrue(all(ch.isalnum() or ch in "-_" for ch in code))
        decoded = decode_puzzle(code)
        self.assertEqual(decoded.size, 6)
        self.assertEqual(shapes(decoded), shapes(self.puzzle))
        self.assertEqual([piece.id for piece in decoded.pieces], list(range(len(self.puzzle.pieces))))

    def test_layout_of_small_puzzle(self) -> None:
        puzzle = Puzzle(
            size=2,
            pieces=[
                Piece(id=7, cells=[(0, 0), (1, 0), (0, 1)], color=COLOR_PALETTE[2]),
                Piece(id=8, cells=[(0, 0)], color=COLOR_PALETTE[15]),
            ],
        )
        code = encode_puzzle(puzzle)
        # size, count, (2<<4)|3, 0, 1, 1, (15<<4)|1, 0
        self.assertEqual(code, "AgIjAAEB8QA")

    def test_large_piece_uses_extended_count(self) -> None:
        cells = [(x, y) for y in range(6) for x in range(6)]
        puzzle = Puzzle(size=6, pieces=[Piece(id=1, cells=cells, color=COLOR_PALETTE[1])])
        decoded = decode_puzzle(encode_puzzle(puzzle))
        self.assertEqual(sorted(decoded.pieces[0].cells), sorted(cells))
        self.assertEqual(decoded.pieces[0].color, COLOR_PALETTE[1])

    def test_large_gap_uses_marker(self) -> None:
        puzzle = Puzzle(size=16, pieces=[Piece(id=1, cells=[(0, 0), (8, 12)], color=COLOR_PALETTE[0])])
        decoded = decode_puzzle(encode_puzzle(puzzle))
        self.assertEqual(decoded.pieces[0].cells, [(0, 0), (8, 12)])

    def test_malformed_codes(self) -> None:
        code = encode_puzzle(self.puzzle)
        for bad in (code[:-3], code + "AAAA", "A", ""):
            with self.subTest(code=bad):
                with self.assertRaises(ValueError):
                    decode_puzzle(bad)

    def test_cells_outside_board_are_rejected(self) -> None:
        puzzle = Puzzle(size=2, pieces=[Piece(id=1, cells=[(2, 0)], color=COLOR_PALETTE[0])])
        with self.assertRaises(ValueError):
            encode_puzzle(puzzle)

    def test_share_url(self) -> None:
        url = share_url(self.puzzle, "https://example.org/play#old")
        self.assertTrue(url.startswith("https://example.org/play#p="))
        self.assertEqual(code_from_url(url), encode_puzzle(self.puzzle))
        self.assertIsNone(code_from_url("https://example.org/play"))
        self.assertIsNone(code_from_url("https://example.org/play#p="))


class StorageTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "saves" / "game.json"
        self.puzzle = generate_puzzle(6, rng=random.Random(3))

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def test_save_and_load(self) -> None:
        save_game(self.puzzle, self.path)
        payload = json.loads(self.path.read_text(encoding="utf-8"))
        self.assertEqual(payload["version"], CURRENT_VERSION)
        self.assertEqual(payload["puzzle_size"], 6)
        loaded = load_game(self.path)
        self.assertEqual(loaded.to_dict(), self.puzzle.to_dict())

    def test_missing_file_loads_nothing(self) -> None:
        self.assertIsNone(load_game(self.path))

    def test_malformed_file(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{not json", encoding="utf-8")
        with self.assertRaises(ValueError):
            load_game(self.path)
        self.path.write_text(json.dumps({"version": "1.0.0", "pieces": []}), encoding="utf-8")
        with self.assertRaises(ValueError):
            load_game(self.path)

    def test_saved_state_conversion(self) -> None:
        state = SavedGameState.from_puzzle(self.puzzle)
        self.assertEqual(SavedGameState.from_dict(state.to_dict()).to_puzzle().to_dict(), self.puzzle.to_dict())

    def test_clear(self) -> None:
        self.assertFalse(clear_game(self.path))
        save_game(self.puzzle, self.path)
        self.assertTrue(clear_game(self.path))
        self.assertFalse(self.path.exists())


if __name__ == "__main__":
    unittest.main()
