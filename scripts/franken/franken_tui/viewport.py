"""Scroll and selection bookkeeping shared by every list panel."""

from __future__ import annotations

from dataclasses import dataclass


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


@dataclass
class Viewport:
    """Selection/scroll state over ``total`` rows shown ``capacity`` at a time.

    After every operation:

    - ``0 <= selected_index < max(total, 1)``
    - ``0 <= scroll_offset <= max(0, total - capacity)``
    - ``scroll_offset <= selected_index < scroll_offset + capacity``

    An empty list is treated as a single virtual row at index 0. Operations
    never raise; the navigation methods return True when the selection moved.
    """

    total: int = 0
    capacity: int = 1
    selected_index: int = 0
    scroll_offset: int = 0

    def __post_init__(self) -> None:
        self.set_dimensions(self.total, self.capacity)

    @property
    def last_index(self) -> int:
        return max(self.total, 1) - 1

    @property
    def max_offset(self) -> int:
        return max(0, self.total - self.capacity)

    def visible_range(self) -> range:
        return range(self.scroll_offset, min(self.total, self.scroll_offset + self.capacity))

    def set_dimensions(self, total: int, capacity: int) -> None:
        self.total = max(0, int(total))
        self.capacity = max(1, int(capacity))
        self.selected_index = _clamp(self.selected_index, 0, self.last_index)
        self.scroll_offset = _clamp(self.scroll_offset, 0, self.max_offset)
        self._follow_selection()

    def _follow_selection(self) -> None:
        if self.selected_index < self.scroll_offset:
            self.scroll_offset = self.selected_index
        elif self.selected_index >= self.scroll_offset + self.capacity:
            self.scroll_offset = self.selected_index - self.capacity + 1

    def move_selection(self, delta: int) -> bool:
        before = self.selected_index
        self.selected_index = _clamp(self.selected_index + delta, 0, self.last_index)
        self._follow_selection()
        return self.selected_index != before

    def page_move(self, sign: int) -> bool:
        """Move the selection by one page; the window follows minimally."""
        return self.move_selection(self.capacity if sign >= 0 else -self.capacity)

    def jump_to_start(self) -> bool:
        return self.move_selection(-self.selected_index)

    def jump_to_end(self) -> bool:
        return self.move_selection(self.last_index - self.selected_index)

    def reset(self) -> None:
        self.selected_index = 0
        self.scroll_offset = 0
