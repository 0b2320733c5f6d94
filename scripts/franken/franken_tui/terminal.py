"""Terminal device ownership: raw mode, alternate screen, cursor, I/O.

Raw mode only turns off what the dashboard must own (line buffering, echo,
signal keys) and sets VMIN=0/VTIME=0 so reads never block; output
processing stays on. Without termios, or on a stream that is not a tty, the
session continues in cooked mode with a warning.
"""

from __future__ import annotations

import logging
import os
import select
import sys
import time
from typing import IO

try:
    import termios
except ImportError:  # pragma: no cover - non-POSIX platforms
    termios = None

logger = logging.getLogger(__name__)

ALT_SCREEN_ON = "\x1b[?1049h"
ALT_SCREEN_OFF = "\x1b[?1049l"
CURSOR_HIDE = "\x1b[?25l"
CURSOR_SHOW = "\x1b[?25h"
CLEAR_SCREEN = "\x1b[2J"
CURSOR_HOME = "\x1b[H"

READ_SIZE = 1024


class TerminalError(RuntimeError):
    """The terminal device could not be acquired at startup."""


class Terminal:
    def __init__(self, stdin: IO | None = None, stdout: IO | None = None) -> None:
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.raw = False
        self.active = False
        self._saved_attrs = None
        self._restored = False
        self._eof = False
        try:
            self.in_fd = self.stdin.fileno()
            self.out_fd = self.stdout.fileno()
        except (AttributeError, OSError, ValueError) as exc:
            raise TerminalError(f"cannot acquire terminal: {exc}") from exc
        if not os.isatty(self.out_fd):
            raise TerminalError("stdout is not a terminal")

    def enter(self) -> "Terminal":
        self._enter_raw_mode()
        self.active = True
        try:
            self.write(ALT_SCREEN_ON + CURSOR_HIDE + CLEAR_SCREEN + CURSOR_HOME)
        except BaseException:
            # __exit__ never runs when __enter__ raises
            self.restore()
            raise
        return self

    def _enter_raw_mode(self) -> None:
        if termios is None or not os.isatty(self.in_fd):
            logger.warning("raw mode unavailable, keyboard input stays line-buffered")
            return
        try:
            self._saved_attrs = termios.tcgetattr(self.in_fd)
            attrs = termios.tcgetattr(self.in_fd)
            attrs[3] &= ~(termios.ICANON | termios.ECHO | termios.ISIG | termios.IEXTEN)
            attrs[6][termios.VMIN] = 0
            attrs[6][termios.VTIME] = 0
            termios.tcsetattr(self.in_fd, termios.TCSADRAIN, attrs)
            self.raw = True
        except termios.error as exc:
            logger.warning("could not enter raw mode, continuing in cooked mode: %s", exc)
            self._saved_attrs = None

    def restore(self) -> None:
        """Undo :meth:`enter`. Safe to call any number of times."""
        if self._restored or not self.active:
            return
        self._restored = True
        try:
            self.write(CURSOR_SHOW + ALT_SCREEN_OFF)
        except OSError as exc:
            logger.warning("could not reset screen: %s", exc)
        if self._saved_attrs is not None:
            try:
                termios.tcsetattr(self.in_fd, termios.TCSADRAIN, self._saved_attrs)
            except termios.error as exc:
                logger.warning("could not restore terminal attributes: %s", exc)
        self.raw = False
        self.active = False

    def __enter__(self) -> "Terminal":
        return self.enter()

    def __exit__(self, *exc_info) -> None:
        self.restore()

    def read(self, timeout: float) -> bytes:
        """Return whatever input is pending within ``timeout`` seconds."""
        if self._eof:
            # closed input stays readable forever; keep the poll interval
            time.sleep(timeout)
            return b""
        try:
            ready, _, _ = select.select([self.in_fd], [], [], timeout)
        except InterruptedError:
            return b""
        if not ready:
            return b""
        try:
            data = os.read(self.in_fd, READ_SIZE)
        except OSError:
            return b""
        if not data:
            logger.warning("keyboard input closed")
            self._eof = True
        return data

    def write(self, data: str) -> None:
        self.stdout.write(data)
        self.stdout.flush()
