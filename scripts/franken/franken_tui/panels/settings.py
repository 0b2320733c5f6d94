"""Effective configuration panel."""

from __future__ import annotations

from franken_tui.config import DashboardConfig
from franken_tui.panels import KeyValuePanel


class SettingsPanel(KeyValuePanel):
    def __init__(self, *args, config: DashboardConfig, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.config = config
        self.data.status = "ok"

    def rows(self) -> list[tuple[str, str]]:
        config = self.config
        rows = [
            ("Application", str(config.app_dir)),
            ("Polling interval", f"{config.polling_interval:g}s"),
            ("Theme", config.theme),
            ("Panels", ", ".join(config.panels)),
            ("Log levels", ", ".join(config.log_levels)),
            ("Log lines", str(config.log_limit)),
        ]
        rows.extend((f"Key {name}", key) for name, key in config.keymap.as_dict().items())
        return rows
