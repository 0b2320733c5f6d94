"""Scheduled tasks panel."""

from __future__ import annotations

from franken_tui.panels import ListPanel


class SchedulerPanel(ListPanel):
    search_fields = ("command", "expression")

    def columns(self):
        return [
            ("Schedule", {}),
            ("Command", {"ratio": 1}),
            ("Next due", {}),
        ]

    def cells(self, item):
        return [
            str(item.get("expression", "-")),
            str(item.get("command", "-")),
            str(item.get("next_due", "-")),
        ]
