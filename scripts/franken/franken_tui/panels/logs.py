"""Log tail panel."""

from __future__ import annotations

from rich.text import Text

from franken_tui.panels import ListPanel
from franken_tui.theme import LEVEL_ROLES


class LogsPanel(ListPanel):
    search_fields = ("message", "level", "channel")

    def columns(self):
        return [
            ("Time", {}),
            ("Level", {}),
            ("Channel", {}),
            ("Message", {"ratio": 1}),
        ]

    def cells(self, item):
        level = str(item.get("level", "info"))
        message = str(item.get("message", ""))
        extra = int(item.get("extra", 0))
        if extra:
            message = f"{message} (+{extra} lines)"
        return [
            str(item.get("timestamp", "-")),
            Text(level.upper(), style=LEVEL_ROLES.get(level, "default")),
            str(item.get("channel", "-")),
            message,
        ]
