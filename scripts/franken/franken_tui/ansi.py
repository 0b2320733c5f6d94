"""Width-aware helpers for strings carrying SGR color/style codes."""

from __future__ import annotations

import re

from rich.cells import cell_len, get_character_cell_size

SGR_RE = re.compile(r"\x1b\[[0-9;:]*m")
RESET = "\x1b[0m"
ELLIPSIS = "…"


def strip_ansi(text: str) -> str:
    return SGR_RE.sub("", text)


def visible_length(text: str) -> int:
    """Terminal cells occupied by ``text`` once SGR codes are removed."""
    return cell_len(strip_ansi(text))


def pad_to(text: str, width: int) -> str:
    missing = width - visible_length(text)
    if missing <= 0:
        return text
    return text + " " * missing


def truncate_to(text: str, width: int) -> str:
    """Cut ``text`` to ``width`` visible cells, ending with an ellipsis.

    Styling codes never count toward the width and are never split. Codes that
    appear before the cut point are kept; a reset is appended when any were,
    so a truncated colored cell does not bleed into the next column.
    """
    if visible_length(text) <= width:
        return text
    if width <= 0:
        return ""

    budget = width - 1
    used = 0
    out: list[str] = []
    styled = False
    pos = 0
    while pos < len(text):
        match = SGR_RE.match(text, pos)
        if match:
            out.append(match.group(0))
            styled = True
            pos = match.end()
            continue
        size = get_character_cell_size(text[pos])
        if used + size > budget:
            break
        out.append(text[pos])
        used += size
        pos += 1

    out.append(ELLIPSIS)
    if styled:
        out.append(RESET)
    return "".join(out)


def fit_to(text: str, width: int) -> str:
    """Truncate or pad so the result is exactly ``width`` cells wide."""
    return pad_to(truncate_to(text, width), width)


def center(text: str, width: int) -> str:
    length = visible_length(text)
    if length >= width:
        return text
    return " " * ((width - length) // 2) + text
