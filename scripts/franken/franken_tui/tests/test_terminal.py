from __future__ import annotations

import io
import os
import select
import unittest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from franken_tui.terminal import (  # noqa: E402
    ALT_SCREEN_OFF,
    ALT_SCREEN_ON,
    CURSOR_HIDE,
    CURSOR_SHOW,
    Terminal,
    TerminalError,
)

try:
    import termios
except ImportError:  # pragma: no cover
    termios = None


def drain(fd: int) -> bytes:
    out = b""
    while select.select([fd], [], [], 0.05)[0]:
        chunk = os.read(fd, 4096)
        if not chunk:
            break
        out += chunk
    return out


class TerminalAcquisitionTests(unittest.TestCase):
    def test_non_terminal_output_is_fatal(self):
        with self.assertRaises(TerminalError):
            Terminal(stdin=io.StringIO(), stdout=io.StringIO())


@unittest.skipUnless(termios is not None and hasattr(os, "openpty"), "needs a pseudo-terminal")
class PseudoTerminalTests(unittest.TestCase):
    def setUp(self):
        self.master, self.slave = os.openpty()
        self.stdin = open(self.slave, "rb", buffering=0, closefd=False)
        self.stdout = open(self.slave, "w", closefd=False)
        self.terminal = Terminal(stdin=self.stdin, stdout=self.stdout)

    def tearDown(self):
        self.stdin.close()
        self.stdout.close()
        os.close(self.slave)
        os.close(self.master)

    def lflag(self) -> int:
        return termios.tcgetattr(self.slave)[3]

    def test_session_enters_and_restores(self):
        before = termios.tcgetattr(self.slave)
        with self.terminal as term:
            self.assertTrue(term.raw)
            self.assertFalse(self.lflag() & termios.ICANON)
            self.assertFalse(self.lflag() & termios.ECHO)
        self.assertEqual(termios.tcgetattr(self.slave), before)
        output = drain(self.master).decode()
        self.assertIn(ALT_SCREEN_ON + CURSOR_HIDE, output)
        self.assertIn(CURSOR_SHOW + ALT_SCREEN_OFF, output)

    def test_restore_happens_once(self):
        self.terminal.enter()
        self.terminal.restore()
        drain(self.master)
        self.terminal.restore()
        self.assertEqual(drain(self.master), b"")

    def test_restore_without_enter_is_noop(self):
        self.terminal.restore()
        self.assertEqual(drain(self.master), b"")

    def test_failed_screen_setup_leaves_cooked_mode(self):
        class ClosedPipe:
            def __init__(self, fd):
                self.fd = fd

            def fileno(self):
                return self.fd

            def write(self, data):
                raise BrokenPipeError("reader went away")

            def flush(self):
                pass

        before = termios.tcgetattr(self.slave)
        terminal = Terminal(stdin=self.stdin, stdout=ClosedPipe(self.slave))
        with self.assertRaises(BrokenPipeError):
            with terminal:
                self.fail("body must not run")
        self.assertFalse(terminal.raw)
        self.assertFalse(terminal.active)
        self.assertEqual(termios.tcgetattr(self.slave), before)

    def test_read_returns_pending_bytes(self):
        with self.terminal as term:
            self.assertEqual(term.read(0), b"")
            os.write(self.master, b"\x1b[A")
            self.assertEqual(term.read(0.5), b"\x1b[A")


if __name__ == "__main__":
    unittest.main()
