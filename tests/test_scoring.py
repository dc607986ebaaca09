import math
import random
import unittest

from dissection.errors import InvalidRandomValue
from dissection.grid import are_adjacent, normalize_cells
from dissection.scoring import compute_adjacent_pairs, pair_score, score_pairs, select_pair_by_score

from tests.helpers import ScriptedRandom, make_state


class GridTests(unittest.TestCase):
    def test_adjacency_is_edge_only(self) -> None:
        self.assertTrue(are_adjacent((2, 2), (3, 2)))
        self.assertTrue(are_adjacent((2, 2), (2, 1)))
        self.assertFalse(are_adjacent((2, 2), (3, 3)))
        self.assertFalse(are_adjacent((2, 2), (2, 2)))
        self.assertFalse(are_adjacent((0, 0), (2, 0)))

    def test_normalize_moves_bounding_box_to_origin(self) -> None:
        self.assertEqual(normalize_cells([(3, 4), (2, 5), (3, 5)]), [(0, 1), (1, 0), (1, 1)])


class AdjacentPairTests(unittest.TestCase):
    def test_pairs_on_small_board(self) -> None:
        # 0 0 1
        # 2 3 1
        # 2 3 3
        state = make_state(
            3,
            [
                [(0, 0), (1, 0)],
                [(2, 0), (2, 1)],
                [(0, 1), (0, 2)],
                [(1, 1), (1, 2), (2, 2)],
            ],
        )
        pairs = compute_adjacent_pairs(state.pieces)
        self.assertEqual(pairs, [(0, 1), (0, 2), (0, 3), (1, 3), (2, 3)])

    def test_pairs_are_ordered_and_never_self(self) -> None:
        rng = random.Random(11)
        cells = [(x, y) for y in range(5) for x in range(5)]
        rng.shuffle(cells)
        # Irregular but valid partition: rows of the shuffled list are not
        # connected, which adjacency does not care about.
        state = make_state(5, [cells[i:i + 3] for i in range(0, 25, 3)])
        pairs = compute_adjacent_pairs(state.pieces)
        for i, j in pairs:
            self.assertLess(i, j)
        brute = set()
        for i, a in enumerate(state.pieces):
            for j, b in enumerate(state.pieces):
                if i != j and any(are_adjacent(p, q) for p in a.cells for q in b.cells):
                    brute.add((min(i, j), max(i, j)))
        self.assertEqual(set(pairs), brute)

    def test_single_piece_has_no_pairs(self) -> None:
        state = make_state(2, [[(0, 0), (1, 0), (0, 1), (1, 1)]])
        self.assertEqual(compute_adjacent_pairs(state.pieces), [])


class ScoreTests(unittest.TestCase):
    def test_score_formula(self) -> None:
        state = make_state(3, [[(0, 0)], [(1, 0), (2, 0)]])
        a, b = state.pieces
        self.assertAlmostEqual(pair_score(a, b, 3.0), 3 ** -1 + 3 ** -2)
        self.assertAlmostEqual(pair_score(a, b, 2.0), 0.5 + 0.25)

    def test_smaller_pieces_score_higher(self) -> None:
        state = make_state(
            4,
            [
                [(0, 0)],
                [(1, 0), (2, 0)],
                [(0, 1), (1, 1), (2, 1)],
            ],
        )
        small, medium, large = state.pieces
        for base in (1.5, 2.0, 3.0, math.e):
            self.assertGreater(pair_score(small, small, base), pair_score(small, medium, base))
            self.assertGreater(pair_score(small, medium, base), pair_score(medium, large, base))

    def test_score_pairs_matches_pair_score(self) -> None:
        state = make_state(2, [[(0, 0)], [(1, 0)], [(0, 1), (1, 1)]])
        pairs = compute_adjacent_pairs(state.pieces)
        scores = score_pairs(state.pieces, pairs, 3.0)
        self.assertEqual(len(scores), len(pairs))
        exact = [pair_score(state.pieces[i], state.pieces[j], 3.0) for i, j in pairs]
        self.assertAlmostEqual(max(scores), 2.0)
        for score, expected in zip(scores, exact):
            self.assertAlmostEqual(score / scores[0], expected / exact[0])

    def test_extreme_bases_give_usable_scores(self) -> None:
        state = make_state(
            6,
            [
                [(0, 0)],
                [(1, 0), (2, 0)],
                [(x, y) for y in range(1, 6) for x in range(6)] + [(3, 0), (4, 0), (5, 0)],
            ],
        )
        pairs = compute_adjacent_pairs(state.pieces)
        for base in (1e-12, 1e-3, 1e3, 1e100, 1e300):
            with self.subTest(base=base):
                scores = score_pairs(state.pieces, pairs, base)
                self.assertTrue(all(math.isfinite(score) and score >= 0 for score in scores))
                self.assertGreater(sum(scores), 0)
                self.assertIn(select_pair_by_score(pairs, scores, random.Random(1)), pairs)
                self.assertTrue(math.isfinite(pair_score(state.pieces[0], state.pieces[2], base)))


class SelectionTests(unittest.TestCase):
    PAIRS = [(0, 1), (1, 2)]

    def test_first_cumulative_at_or_above_draw_wins(self) -> None:
        scores = [1.0, 3.0]
        self.assertEqual(select_pair_by_score(self.PAIRS, scores, ScriptedRandom([0.0])), (0, 1))
        self.assertEqual(select_pair_by_score(self.PAIRS, scores, ScriptedRandom([0.25])), (0, 1))
        self.assertEqual(select_pair_by_score(self.PAIRS, scores, ScriptedRandom([0.2501])), (1, 2))
        self.assertEqual(select_pair_by_score(self.PAIRS, scores, ScriptedRandom([0.999999])), (1, 2))

    def test_frequency_follows_scores(self) -> None:
        rng = random.Random(2024)
        s1, s2 = 0.2, 0.6
        draws = 10_000
        first = sum(
            select_pair_by_score(self.PAIRS, [s1, s2], rng) == (0, 1) for _ in range(draws)
        )
        expected = s1 / (s1 + s2)
        self.assertAlmostEqual(first / draws, expected, delta=0.02)

    def test_invalid_random_values_are_rejected(self) -> None:
        for value in (1.0, -0.01, float("nan"), "0.5", None, True):
            with self.subTest(value=value):
                with self.assertRaises(InvalidRandomValue):
                    select_pair_by_score(self.PAIRS, [1.0, 1.0], ScriptedRandom([value]))

    def test_bad_arguments(self) -> None:
        with self.assertRaises(ValueError):
            select_pair_by_score([], [], ScriptedRandom([0.5]))
        with self.assertRaises(ValueError):
            select_pair_by_score(self.PAIRS, [1.0], ScriptedRandom([0.5]))
        with self.assertRaises(ValueError):
            select_pair_by_score(self.PAIRS, [0.0, 0.0], ScriptedRandom([0.5]))


if __name__ == "__main__":
    unittest.main()
