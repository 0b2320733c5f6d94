"""Cache panel with the clear-cache action."""

from __future__ import annotations

from franken_tui.actions import ArtisanActions
from franken_tui.config import Keymap
from franken_tui.keys import KeyEvent
from franken_tui.panels import KeyValuePanel


class CachePanel(KeyValuePanel):
    def __init__(self, *args, actions: ArtisanActions, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.actions = actions

    def handle_key(self, event: KeyEvent, keymap: Keymap) -> bool:
        if not event.is_char(keymap.clear_cache):
            return False
        self.show_result(self.actions.clear_cache())
        self.refresh()
        return True

    def hotkeys(self, keymap: Keymap) -> list[tuple[str, str]]:
        return [(keymap.clear_cache, "Clear cache")]
