import random
import unittest

from termtint.color.conversion import (
    rgb256_to_cielab,
    rgb256_to_lightness,
    rgb256_to_srgb,
)
from termtint.color.difference import closest_lab, delta_e_lab
from termtint.color.lores import (
    ansi_to_rgb256,
    eight_bit_to_ansi,
    eight_bit_to_rgb256,
    eight_bit_to_rgb6,
    rgb256_to_ansi,
    rgb256_to_eight_bit,
    rgb6_to_eight_bit,
)


LEVELS = (0, 0x5F, 0x87, 0xAF, 0xD7, 0xFF)


def distance(
    rgb1: tuple[int, int, int], rgb2: tuple[int, int, int]
) -> float:
    return delta_e_lab(*rgb256_to_cielab(*rgb1), *rgb256_to_cielab(*rgb2))


class TestConversion(unittest.TestCase):

    def test_cielab(self) -> None:
        L, a, b = rgb256_to_cielab(255, 255, 255)
        self.assertAlmostEqual(L, 1.0, places=3)
        self.assertAlmostEqual(a, 0.0, places=3)
        self.assertAlmostEqual(b, 0.0, places=3)

        L, a, b = rgb256_to_cielab(0, 0, 0)
        self.assertAlmostEqual(L, 0.0)
        self.assertAlmostEqual(a, 0.0)
        self.assertAlmostEqual(b, 0.0)

        # Red per CIE Lab reference values, scaled by 1/100
        L, a, b = rgb256_to_cielab(255, 0, 0)
        self.assertAlmostEqual(L, 0.5324, places=3)
        self.assertAlmostEqual(a, 0.8009, places=2)
        self.assertAlmostEqual(b, 0.6720, places=2)

    def test_srgb(self) -> None:
        self.assertEqual(rgb256_to_srgb(255, 0, 51), (1.0, 0.0, 0.2))

    def test_lightness(self) -> None:
        self.assertEqual(rgb256_to_lightness(0, 0, 255), 0.5)
        self.assertEqual(rgb256_to_lightness(255, 255, 255), 1.0)

    def test_closest(self) -> None:
        candidates = [(0.5, 0.0, 0.0), (0.1, 0.0, 0.0), (0.3, 0.0, 0.0), (0.1, 0.0, 0.0)]
        index, ΔE = closest_lab((0.0, 0.0, 0.0), candidates)
        self.assertEqual(index, 1)
        self.assertAlmostEqual(ΔE, 0.1)

        self.assertEqual(closest_lab((0.0, 0.0, 0.0), []), (-1, float('inf')))


class TestPalette(unittest.TestCase):

    def test_reference_values(self) -> None:
        self.assertEqual(eight_bit_to_rgb256(0), (0, 0, 0))
        self.assertEqual(eight_bit_to_rgb256(7), (0xC0, 0xC0, 0xC0))
        self.assertEqual(eight_bit_to_rgb256(8), (0x80, 0x80, 0x80))
        self.assertEqual(eight_bit_to_rgb256(16), (0, 0, 0))
        self.assertEqual(eight_bit_to_rgb256(91), (0x87, 0x00, 0xAF))
        self.assertEqual(eight_bit_to_rgb256(231), (0xFF, 0xFF, 0xFF))
        self.assertEqual(eight_bit_to_rgb256(232), (8, 8, 8))
        self.assertEqual(eight_bit_to_rgb256(255), (238, 238, 238))

        with self.assertRaises(ValueError):
            eight_bit_to_rgb256(256)
        with self.assertRaises(ValueError):
            eight_bit_to_rgb256(-1)

    def test_rgb6(self) -> None:
        for index in range(16, 232):
            self.assertEqual(rgb6_to_eight_bit(*eight_bit_to_rgb6(index)), index)


class TestQuantizer(unittest.TestCase):

    def test_fixtures(self) -> None:
        for rgb, index in (
            ((0, 0, 0), 16),
            ((255, 255, 255), 231),
            ((0x87, 0x00, 0xAF), 91),
            ((0xAB, 0xCD, 0xEF), 153),
            ((255, 0, 0), 196),
            ((0xE8, 0x83, 0x88), 174),
        ):
            with self.subTest(rgb=rgb):
                self.assertEqual(rgb256_to_eight_bit(*rgb), index)

    def test_cube_colors_are_lossless(self) -> None:
        for index in range(16, 232):
            self.assertEqual(rgb256_to_eight_bit(*eight_bit_to_rgb256(index)), index)

    def test_grays(self) -> None:
        # The gray candidate derives from the average cube coordinate, which
        # selects the darkest gray.
        for rgb, index in (
            ((8, 8, 8), 232),
            ((18, 18, 18), 232),
            ((30, 30, 30), 232),
            ((128, 128, 128), 102),
            ((238, 238, 238), 231),
        ):
            with self.subTest(rgb=rgb):
                self.assertEqual(rgb256_to_eight_bit(*rgb), index)

    def test_quantizer_properties(self) -> None:
        rng = random.Random(8)
        for _ in range(300):
            rgb = (rng.randrange(256), rng.randrange(256), rng.randrange(256))
            result = rgb256_to_eight_bit(*rgb)
            self.assertTrue(16 <= result <= 255)

            # The cube candidate is the per-channel nearest level, rounding ties
            # up.
            r, g, b = (
                min(LEVELS, key=lambda level: (abs(level - c), -level)) for c in rgb
            )
            cube = (r, g, b)
            for c, level in zip(rgb, cube):
                self.assertTrue(all(abs(level - c) <= abs(l - c) for l in LEVELS))

            # The gray candidate is computed from the average cube coordinate.
            average = sum(LEVELS.index(level) for level in cube) // 3
            gray = 8 + 10 * (23 if average > 238 else int((average - 3) / 10))
            gray_distance = distance(rgb, (gray, gray, gray))
            cube_distance = distance(rgb, cube)

            actual = distance(rgb, eight_bit_to_rgb256(result))
            self.assertAlmostEqual(actual, min(cube_distance, gray_distance))
            if cube_distance <= gray_distance:
                self.assertLess(result, 232)

    def test_eight_bit_to_ansi(self) -> None:
        palette = [rgb256_to_cielab(*ansi_to_rgb256(i)) for i in range(16)]
        for index in range(256):
            origin = rgb256_to_cielab(*eight_bit_to_rgb256(index))
            distances = [delta_e_lab(*origin, *c) for c in palette]
            expected = distances.index(min(distances))
            with self.subTest(index=index):
                self.assertEqual(eight_bit_to_ansi(index), expected)

    def test_ansi_colors_map_to_themselves(self) -> None:
        for index in range(16):
            self.assertEqual(eight_bit_to_ansi(index), index)

    def test_rgb256_to_ansi(self) -> None:
        self.assertEqual(rgb256_to_ansi(0x5F, 0xFF, 0x00), 10)
        self.assertEqual(rgb256_to_ansi(255, 0, 0), 9)
        self.assertEqual(rgb256_to_ansi(0xE8, 0x83, 0x88), 8)
