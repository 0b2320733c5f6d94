"""Focus ownership and key dispatch across panels."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from franken_tui.config import Keymap
from franken_tui.keys import Key, KeyEvent, KeyKind
from franken_tui.panels import Panel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Dispatch:
    dirty: bool = False
    quit: bool = False
    refresh: bool = False


IGNORED = Dispatch()


class Dashboard:
    """Owns the panel list and the single focused index.

    Panels never track focus themselves; they are told through
    ``on_focus``/``on_blur`` when the index moves.
    """

    def __init__(self, panels: Sequence[Panel], keymap: Keymap | None = None) -> None:
        if not panels:
            raise ValueError("dashboard needs at least one panel")
        self.panels = list(panels)
        self.keymap = keymap or Keymap()
        self.focused_index = 0
        self.focused.on_focus()

    @property
    def focused(self) -> Panel:
        return self.panels[self.focused_index]

    # focus

    def switch_to(self, index: int) -> bool:
        if not 0 <= index < len(self.panels) or index == self.focused_index:
            return False
        self.focused.on_blur()
        self.focused_index = index
        self.focused.on_focus()
        logger.debug("focused panel %s", self.focused.key)
        return True

    def next_panel(self) -> bool:
        return self.switch_to((self.focused_index + 1) % len(self.panels))

    def previous_panel(self) -> bool:
        return self.switch_to((self.focused_index - 1) % len(self.panels))

    # data

    def refresh_all(self) -> None:
        for panel in self.panels:
            panel.refresh()

    # input

    def dispatch(self, event: KeyEvent) -> Dispatch:
        if event.is_key(Key.CTRL_C):
            return Dispatch(quit=True)

        panel = self.focused
        if panel.in_search:
            handled = self._dispatch_search(panel, event)
            if handled is not None:
                return handled

        keymap = self.keymap
        if event.is_char(keymap.quit):
            return Dispatch(quit=True)
        if event.is_char(keymap.refresh):
            return Dispatch(dirty=True, refresh=True)
        if event.kind is KeyKind.CHAR and event.value in "123456789":
            return Dispatch(dirty=self.switch_to(int(event.value) - 1))
        if event.is_key(Key.RIGHT) or event.is_key(Key.TAB):
            return Dispatch(dirty=self.next_panel())
        if event.is_key(Key.LEFT):
            return Dispatch(dirty=self.previous_panel())
        if event.is_char(keymap.search):
            return Dispatch(dirty=panel.enter_search())

        moved = self._navigate(panel, event)
        if moved is not None:
            return Dispatch(dirty=moved)

        # panel actions may change data, so they always repaint
        return Dispatch(dirty=panel.handle_key(event, keymap))

    def _dispatch_search(self, panel: Panel, event: KeyEvent) -> Dispatch | None:
        if event.is_key(Key.ENTER):
            panel.submit()
            panel.exit_search()
            return Dispatch(dirty=True)
        if event.is_key(Key.ESCAPE):
            return Dispatch(dirty=panel.exit_search())
        if event.is_key(Key.BACKSPACE):
            return Dispatch(dirty=panel.search_remove())
        if event.kind is KeyKind.CHAR:
            return Dispatch(dirty=panel.search_append(event.value))
        if event.kind is KeyKind.NAMED:
            moved = self._navigate(panel, event)
            return Dispatch(dirty=bool(moved))
        return IGNORED

    def _navigate(self, panel: Panel, event: KeyEvent) -> bool | None:
        keymap = self.keymap
        if event.is_key(Key.UP) or event.is_char(keymap.navigate_up):
            return panel.up()
        if event.is_key(Key.DOWN) or event.is_char(keymap.navigate_down):
            return panel.down()
        if event.is_key(Key.PAGE_UP):
            return panel.page_up()
        if event.is_key(Key.PAGE_DOWN):
            return panel.page_down()
        if event.is_key(Key.HOME):
            return panel.home()
        if event.is_key(Key.END):
            return panel.end()
        return None
