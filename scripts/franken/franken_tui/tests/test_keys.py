from __future__ import annotations

import unittest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from franken_tui.keys import Key, KeyEvent, KeyKind, decode  # noqa: E402


class KeyDecoderTests(unittest.TestCase):
    def test_arrow_keys(self):
        self.assertEqual(
            decode(b"\x1b[A\x1b[B\x1b[C\x1b[D"),
            [KeyEvent.named(Key.UP), KeyEvent.named(Key.DOWN), KeyEvent.named(Key.RIGHT), KeyEvent.named(Key.LEFT)],
        )

    def test_home_end_letters(self):
        self.assertEqual(decode(b"\x1b[H\x1b[F"), [KeyEvent.named(Key.HOME), KeyEvent.named(Key.END)])

    def test_tilde_sequences(self):
        cases = {
            b"\x1b[1~": Key.HOME,
            b"\x1b[7~": Key.HOME,
            b"\x1b[4~": Key.END,
            b"\x1b[8~": Key.END,
            b"\x1b[5~": Key.PAGE_UP,
            b"\x1b[6~": Key.PAGE_DOWN,
        }
        for data, key in cases.items():
            self.assertEqual(decode(data), [KeyEvent.named(key)], data)

    def test_application_cursor_mode(self):
        self.assertEqual(decode(b"\x1bOA\x1bOB"), [KeyEvent.named(Key.UP), KeyEvent.named(Key.DOWN)])

    def test_unknown_csi_is_dropped_whole(self):
        self.assertEqual(decode(b"\x1b[2~x"), [KeyEvent.char("x")])
        self.assertEqual(decode(b"\x1b[1;5Cq"), [KeyEvent.char("q")])

    def test_bare_escape(self):
        self.assertEqual(decode(b"\x1b"), [KeyEvent.control(Key.ESCAPE)])

    def test_escape_followed_by_text(self):
        self.assertEqual(decode(b"\x1bq"), [KeyEvent.control(Key.ESCAPE), KeyEvent.char("q")])

    def test_control_bytes(self):
        self.assertEqual(decode(b"\x03"), [KeyEvent.control(Key.CTRL_C)])
        self.assertEqual(decode(b"\r"), [KeyEvent.control(Key.ENTER)])
        self.assertEqual(decode(b"\n"), [KeyEvent.control(Key.ENTER)])
        self.assertEqual(decode(b"\x7f\x08"), [KeyEvent.control(Key.BACKSPACE)] * 2)
        self.assertEqual(decode(b"\t"), [KeyEvent.control(Key.TAB)])

    def test_crlf_is_one_enter(self):
        self.assertEqual(decode(b"\r\n"), [KeyEvent.control(Key.ENTER)])

    def test_other_control_bytes_dropped(self):
        self.assertEqual(decode(b"\x01a\x02"), [KeyEvent.char("a")])

    def test_several_keys_in_one_chunk_keep_order(self):
        events = decode(b"ab\x1b[Bc")
        self.assertEqual(
            events,
            [KeyEvent.char("a"), KeyEvent.char("b"), KeyEvent.named(Key.DOWN), KeyEvent.char("c")],
        )

    def test_utf8_runes(self):
        self.assertEqual(decode("é日".encode("utf-8")), [KeyEvent.char("é"), KeyEvent.char("日")])

    def test_invalid_utf8_dropped(self):
        self.assertEqual(decode(b"\xffa"), [KeyEvent.char("a")])

    def test_event_predicates(self):
        event = KeyEvent.char("q")
        self.assertEqual(event.kind, KeyKind.CHAR)
        self.assertTrue(event.is_char())
        self.assertTrue(event.is_char("q"))
        self.assertFalse(event.is_key(Key.ENTER))
        self.assertTrue(KeyEvent.control(Key.ENTER).is_key(Key.ENTER))

    def test_empty_input(self):
        self.assertEqual(decode(b""), [])


if __name__ == "__main__":
    unittest.main()
