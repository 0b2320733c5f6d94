"""Responsive layout decisions: tab bar window and legend density."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from franken_tui.ansi import visible_length
from franken_tui.theme import Theme

# Room kept free for the "‹ N " / " N ›" overflow indicators.
OVERFLOW_MARGIN = 10


def select_layout_mode(width: int) -> str:
    if width < 80:
        return "narrow"
    if width < 120:
        return "medium"
    return "wide"


@dataclass(frozen=True)
class TabWindow:
    start: int
    end: int  # inclusive
    left_overflow: int
    right_overflow: int

    def __contains__(self, index: int) -> bool:
        return self.start <= index <= self.end

    @property
    def indices(self) -> range:
        return range(self.start, self.end + 1)


def compute_tab_window(
    widths: Sequence[int],
    focused: int,
    available: int,
    margin: int = OVERFLOW_MARGIN,
) -> TabWindow:
    """Grow a window of tabs outward from ``focused`` while it still fits.

    Each step adds the neighbour on the side closer to the focused tab; on a
    tie the left side grows first. When only one side has room, that side
    grows. The focused tab is always part of the window even if it alone is
    wider than ``available``.
    """
    count = len(widths)
    if count == 0:
        return TabWindow(0, -1, 0, 0)
    focused = max(0, min(focused, count - 1))

    start = end = focused
    used = widths[focused]
    while True:
        can_left = start > 0 and used + widths[start - 1] + margin <= available
        can_right = end < count - 1 and used + widths[end + 1] + margin <= available
        if not (can_left or can_right):
            break
        if can_left and can_right:
            grow_left = focused - (start - 1) <= (end + 1) - focused
        else:
            grow_left = can_left
        if grow_left:
            start -= 1
            used += widths[start]
        else:
            end += 1
            used += widths[end]

    return TabWindow(start, end, start, count - 1 - end)


def tab_text(index: int, label: str) -> str:
    return f" [{index + 1}] {label} "


def render_tab_bar(labels: Sequence[str], focused: int, width: int, theme: Theme) -> str:
    tabs = [
        theme.styled(tab_text(i, label), "focused_tab" if i == focused else "tab")
        for i, label in enumerate(labels)
    ]
    window = compute_tab_window([visible_length(t) for t in tabs], focused, width)

    parts: list[str] = []
    if window.left_overflow:
        parts.append(theme.styled(f"‹ {window.left_overflow} ", "muted"))
    parts.extend(tabs[i] for i in window.indices)
    if window.right_overflow:
        parts.append(theme.styled(f" {window.right_overflow} ›", "muted"))
    return "".join(parts)
