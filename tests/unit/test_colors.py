import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from textimage_renderer.colors import (
    BACKGROUND_COLOR_PRESETS,
    TEXT_COLOR_PRESETS,
    is_valid_color,
    parse_color,
    to_hex,
)
from textimage_renderer.errors import InvalidColorError


class ColorTests(unittest.TestCase):
    def test_parse_long_and_short_hex(self):
        self.assertEqual(parse_color("#ff0000"), (255, 0, 0))
        self.assertEqual(parse_color("#0f0"), (0, 255, 0))
        self.assertEqual(parse_color("  #0000FF "), (0, 0, 255))

    def test_parse_css_name(self):
        self.assertEqual(parse_color("orange"), (255, 165, 0))

    def test_invalid_colors_raise(self):
        for value in ("", "#12", "not-a-color", "#gggggg"):
            with self.assertRaises(InvalidColorError):
                parse_color(value)
        self.assertFalse(is_valid_color("#12345"))

    def test_invalid_color_is_value_error(self):
        with self.assertRaises(ValueError):
            parse_color("nope")

    def test_to_hex_normalizes(self):
        self.assertEqual(to_hex("#ABC"), "#aabbcc")
        self.assertEqual(to_hex("white"), "#ffffff")

    def test_presets(self):
        self.assertEqual(len(TEXT_COLOR_PRESETS), 10)
        self.assertEqual(len(BACKGROUND_COLOR_PRESETS), 10)
        self.assertEqual(TEXT_COLOR_PRESETS[0], "#000000")
        self.assertEqual(BACKGROUND_COLOR_PRESETS[0], "#ffffff")
        self.assertTrue(all(is_valid_color(c) for c in TEXT_COLOR_PRESETS + BACKGROUND_COLOR_PRESETS))


if __name__ == "__main__":
    unittest.main()
