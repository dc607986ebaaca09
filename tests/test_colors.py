import random
import unittest

from dissection.colors import (
    COLOR_PALETTE,
    assign_unique_colors,
    color_to_index,
    hex_to_rgb,
    index_to_color,
    shuffle_palette,
)
from dissection.models import GeneratorPiece

from tests.helpers import ScriptedRandom


def pieces(count: int):
    return [GeneratorPiece(id=i + 1, cells=frozenset([(i, 0)])) for i in range(count)]


class PaletteTests(unittest.TestCase):
    def test_palette_has_sixteen_distinct_colors(self) -> None:
        self.assertEqual(len(COLOR_PALETTE), 16)
        self.assertEqual(len(set(COLOR_PALETTE)), 16)

    def test_shuffle_is_a_permutation(self) -> None:
        shuffled = shuffle_palette(random.Random(8))
        self.assertEqual(sorted(shuffled), sorted(COLOR_PALETTE))

    def test_zero_draws_rotate_palette(self) -> None:
        # j is always 0: each step swaps position i with the front.
        shuffled = shuffle_palette(ScriptedRandom([0.0]))
        self.assertEqual(shuffled[0], COLOR_PALETTE[1])
        self.assertEqual(shuffled[-1], COLOR_PALETTE[0])

    def test_high_draws_keep_order(self) -> None:
        self.assertEqual(shuffle_palette(ScriptedRandom([0.999999])), list(COLOR_PALETTE))

    def test_up_to_sixteen_pieces_get_distinct_colors(self) -> None:
        colored = assign_unique_colors(pieces(16), random.Random(4))
        self.assertEqual(len({piece.color for piece in colored}), 16)
        self.assertEqual([piece.id for piece in colored], list(range(1, 17)))

    def test_colors_cycle_past_palette_size(self) -> None:
        colored = assign_unique_colors(pieces(20), random.Random(4))
        colors = [piece.color for piece in colored]
        self.assertTrue(all(color in COLOR_PALETTE for color in colors))
        self.assertEqual(colors[16:], colors[:4])

    def test_index_helpers(self) -> None:
        self.assertEqual(color_to_index(COLOR_PALETTE[5]), 5)
        self.assertEqual(color_to_index(COLOR_PALETTE[5].lower()), 5)
        self.assertEqual(color_to_index("#123456"), 0)
        self.assertEqual(index_to_color(3), COLOR_PALETTE[3])
        self.assertEqual(index_to_color(99), COLOR_PALETTE[0])

    def test_hex_to_rgb(self) -> None:
        self.assertEqual(hex_to_rgb("#E74C3C"), (0xE7, 0x4C, 0x3C))
        with self.assertRaises(ValueError):
            hex_to_rgb("#fff")


if __name__ == "__main__":
    unittest.main()
