"""Queues panel with the worker restart action."""

from __future__ import annotations

from rich.text import Text

from franken_tui.actions import ArtisanActions
from franken_tui.config import Keymap
from franken_tui.keys import KeyEvent
from franken_tui.panels import ListPanel


class QueuesPanel(ListPanel):
    search_fields = ("name",)

    def __init__(self, *args, actions: ArtisanActions, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.actions = actions

    def columns(self):
        return [
            ("Queue", {"ratio": 1}),
            ("Pending", {"justify": "right"}),
            ("Failed", {"justify": "right"}),
        ]

    def cells(self, item):
        failed = int(item.get("failed", 0))
        return [
            str(item.get("name", "-")),
            str(item.get("pending", 0)),
            Text(str(failed), style="error" if failed else "muted"),
        ]

    def position_detail(self, shown: int) -> str:
        workers = self.data.meta.get("workers") or []
        detail = super().position_detail(shown)
        label = f"{len(workers)} worker{'s' if len(workers) != 1 else ''}"
        return f"{detail}  {label}" if detail else label

    def handle_key(self, event: KeyEvent, keymap: Keymap) -> bool:
        if not event.is_char(keymap.restart_worker):
            return False
        self.show_result(self.actions.restart_worker())
        return True

    def hotkeys(self, keymap: Keymap) -> list[tuple[str, str]]:
        return [(keymap.restart_worker, "Restart worker")]
