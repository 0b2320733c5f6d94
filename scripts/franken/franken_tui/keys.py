"""Raw terminal input decoding.

One non-blocking read may carry a single key or several queued keys. The
decoder scans the chunk left to right and never buffers across reads: an
escape sequence split over two reads decodes as a bare Escape followed by
stray characters being dropped or typed. At a 25ms poll interval this race is
rare and bounded, and holding bytes back would add latency to every Escape.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

ESC = 0x1B


class KeyKind(str, Enum):
    CHAR = "char"
    CONTROL = "control"
    NAMED = "named"


class Key(str, Enum):
    CTRL_C = "ctrl_c"
    ENTER = "enter"
    ESCAPE = "escape"
    BACKSPACE = "backspace"
    TAB = "tab"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    HOME = "home"
    END = "end"


@dataclass(frozen=True)
class KeyEvent:
    kind: KeyKind
    value: str

    @classmethod
    def char(cls, value: str) -> "KeyEvent":
        return cls(KeyKind.CHAR, value)

    @classmethod
    def control(cls, key: Key) -> "KeyEvent":
        return cls(KeyKind.CONTROL, key)

    @classmethod
    def named(cls, key: Key) -> "KeyEvent":
        return cls(KeyKind.NAMED, key)

    def is_char(self, value: str | None = None) -> bool:
        return self.kind is KeyKind.CHAR and (value is None or self.value == value)

    def is_key(self, key: Key) -> bool:
        return self.kind is not KeyKind.CHAR and self.value == key


# ESC [ <letter> and ESC O <letter>
LETTER_KEYS = {
    "A": Key.UP,
    "B": Key.DOWN,
    "C": Key.RIGHT,
    "D": Key.LEFT,
    "H": Key.HOME,
    "F": Key.END,
}

# ESC [ <digits> ~
TILDE_KEYS = {
    "1": Key.HOME,
    "4": Key.END,
    "5": Key.PAGE_UP,
    "6": Key.PAGE_DOWN,
    "7": Key.HOME,
    "8": Key.END,
}

CONTROL_BYTES = {
    0x03: Key.CTRL_C,
    0x08: Key.BACKSPACE,
    0x09: Key.TAB,
    0x0A: Key.ENTER,
    0x0D: Key.ENTER,
    0x7F: Key.BACKSPACE,
}


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


def _scan_csi(data: bytes, pos: int) -> int:
    """Return the index just past the CSI sequence whose body starts at ``pos``.

    Parameter bytes are 0x30-0x3F, intermediates 0x20-0x2F, and the final byte
    is 0x40-0x7E. A truncated sequence consumes the rest of the chunk.
    """
    while pos < len(data) and 0x20 <= data[pos] <= 0x3F:
        pos += 1
    if pos < len(data) and 0x40 <= data[pos] <= 0x7E:
        return pos + 1
    return len(data)


def _decode_escape(data: bytes, pos: int) -> tuple[KeyEvent | None, int]:
    """Decode the sequence starting at the ESC byte at ``pos``."""
    if pos + 1 >= len(data):
        return KeyEvent.control(Key.ESCAPE), pos + 1

    introducer = data[pos + 1]
    if introducer == ord("O"):
        if pos + 2 < len(data):
            key = LETTER_KEYS.get(chr(data[pos + 2]))
            if key is not None:
                return KeyEvent.named(key), pos + 3
            return None, pos + 3
        return None, len(data)

    if introducer != ord("["):
        return KeyEvent.control(Key.ESCAPE), pos + 1

    end = _scan_csi(data, pos + 2)
    body = data[pos + 2 : end].decode("ascii", errors="replace")
    if len(body) == 1:
        key = LETTER_KEYS.get(body)
    elif body.endswith("~") and body[:-1].isdigit():
        key = TILDE_KEYS.get(body[:-1])
    else:
        key = None
    if key is None:
        return None, end
    return KeyEvent.named(key), end


def decode(data: bytes) -> list[KeyEvent]:
    events: list[KeyEvent] = []
    pos = 0
    while pos < len(data):
        byte = data[pos]

        if byte == ESC:
            event, pos = _decode_escape(data, pos)
            if event is not None:
                events.append(event)
            continue

        if byte in CONTROL_BYTES:
            events.append(KeyEvent.control(CONTROL_BYTES[byte]))
            # \r\n from a cooked terminal is a single Enter.
            if byte == 0x0D and pos + 1 < len(data) and data[pos + 1] == 0x0A:
                pos += 1
            pos += 1
            continue

        if byte < 0x20:
            pos += 1
            continue

        size = _utf8_length(byte)
        chunk = data[pos : pos + size]
        try:
            text = chunk.decode("utf-8")
        except UnicodeDecodeError:
            pos += 1
            continue
        pos += size
        if text.isprintable():
            events.append(KeyEvent.char(text))
    return events
