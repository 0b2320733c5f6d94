"""Recent jobs panel with retry for failed jobs."""

from __future__ import annotations

from rich.text import Text

from franken_tui.actions import ArtisanActions
from franken_tui.config import Keymap
from franken_tui.keys import KeyEvent
from franken_tui.models import ActionResult
from franken_tui.panels import ListPanel
from franken_tui.theme import STATUS_ROLES


class JobsPanel(ListPanel):
    search_fields = ("class", "status", "queue")

    def __init__(self, *args, actions: ArtisanActions, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.actions = actions

    def columns(self):
        return [
            ("ID", {"justify": "right"}),
            ("Job", {"ratio": 1}),
            ("Queue", {}),
            ("Status", {}),
            ("When", {}),
        ]

    def cells(self, item):
        status = str(item.get("status", "-"))
        return [
            str(item.get("id", "-")),
            str(item.get("class", "-")),
            str(item.get("queue", "-")),
            Text(status, style=STATUS_ROLES.get(status, "default")),
            str(item.get("timestamp", "-")),
        ]

    def handle_key(self, event: KeyEvent, keymap: Keymap) -> bool:
        if not event.is_char(keymap.retry_job):
            return False
        job = self.selected_item()
        if job is None or job.get("status") != "failed":
            self.show_result(ActionResult(False, "select a failed job to retry"))
            return True
        self.show_result(self.actions.retry_job(job["id"]))
        self.refresh()
        return True

    def hotkeys(self, keymap: Keymap) -> list[tuple[str, str]]:
        return [(keymap.retry_job, "Retry job")]
