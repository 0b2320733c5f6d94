from __future__ import annotations

import unittest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from franken_tui.ansi import (  # noqa: E402
    ELLIPSIS,
    RESET,
    center,
    fit_to,
    pad_to,
    strip_ansi,
    truncate_to,
    visible_length,
)

RED = "\x1b[31m"
SAMPLES = [
    "",
    "plain",
    f"{RED}red{RESET} tail",
    "日本語テキスト",
    f"{RED}日本{RESET}abc\x1b[1;4mdef{RESET}",
    "a much longer line of text that will need to be cut somewhere",
]


class AnsiTextTests(unittest.TestCase):
    def test_visible_length_ignores_sgr(self):
        self.assertEqual(visible_length(f"{RED}red{RESET}"), 3)
        self.assertEqual(visible_length("\x1b[38;5;208morange\x1b[0m"), 6)

    def test_visible_length_counts_wide_cells(self):
        self.assertEqual(visible_length("日本"), 4)

    def test_strip_ansi(self):
        self.assertEqual(strip_ansi(f"{RED}a{RESET}b"), "ab")

    def test_pad_to_law(self):
        for text in SAMPLES:
            for width in (0, 1, 5, 12, 80):
                self.assertEqual(visible_length(pad_to(text, width)), max(width, visible_length(text)))

    def test_pad_to_leaves_wider_text_alone(self):
        self.assertEqual(pad_to("abcdef", 3), "abcdef")

    def test_truncate_to_law(self):
        for text in SAMPLES:
            for width in range(1, 20):
                self.assertLessEqual(visible_length(truncate_to(text, width)), width)

    def test_truncate_fitting_text_is_unchanged(self):
        self.assertEqual(truncate_to("short", 5), "short")
        self.assertEqual(truncate_to(f"{RED}ok{RESET}", 2), f"{RED}ok{RESET}")

    def test_truncate_appends_ellipsis(self):
        self.assertEqual(truncate_to("hello world", 5), "hell" + ELLIPSIS)

    def test_truncate_keeps_codes_and_resets(self):
        self.assertEqual(truncate_to(f"{RED}hello world{RESET}", 6), f"{RED}hello{ELLIPSIS}{RESET}")

    def test_truncate_does_not_split_wide_glyph(self):
        out = truncate_to("日本語", 4)
        self.assertEqual(out, "日" + ELLIPSIS)
        self.assertEqual(visible_length(out), 3)

    def test_truncate_to_zero_width(self):
        self.assertEqual(truncate_to("abc", 0), "")

    def test_fit_to_is_exact(self):
        for text in SAMPLES:
            for width in (1, 7, 30, 100):
                self.assertEqual(visible_length(fit_to(text, width)), width)

    def test_center(self):
        self.assertEqual(center("ab", 6), "  ab")
        self.assertEqual(center("abcdef", 4), "abcdef")


if __name__ == "__main__":
    unittest.main()
