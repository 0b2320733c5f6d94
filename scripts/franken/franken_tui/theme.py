"""Color roles for the dashboard, rendered through rich styles."""

from __future__ import annotations

from functools import lru_cache

from rich.color import ColorSystem
from rich.style import Style
from rich.theme import Theme as RichTheme

THEMES: dict[str, dict[str, str]] = {
    "dark": {
        "primary": "cyan",
        "secondary": "yellow",
        "error": "red",
        "success": "green",
        "warning": "yellow",
        "info": "blue",
        "muted": "bright_black",
        "tab": "white",
        "focused_tab": "bold black on cyan",
        "selected": "reverse",
        "hotkey": "bold cyan",
    },
    "light": {
        "primary": "blue",
        "secondary": "magenta",
        "error": "red",
        "success": "green",
        "warning": "yellow",
        "info": "cyan",
        "muted": "bright_black",
        "tab": "black",
        "focused_tab": "bold white on blue",
        "selected": "reverse",
        "hotkey": "bold blue",
    },
}

LEVEL_ROLES = {
    "emergency": "error",
    "alert": "error",
    "critical": "error",
    "error": "error",
    "warning": "warning",
    "notice": "info",
    "info": "info",
    "debug": "muted",
}

STATUS_ROLES = {
    "ok": "success",
    "warn": "warning",
    "error": "error",
    "pending": "secondary",
    "failed": "error",
    "running": "success",
    "processing": "info",
}


@lru_cache(maxsize=None)
def _parse(style: str) -> Style:
    return Style.parse(style)


class Theme:
    def __init__(self, name: str = "dark") -> None:
        if name not in THEMES:
            raise ValueError(f"unknown theme: {name}")
        self.name = name
        self.colors = dict(THEMES[name])

    def style(self, role: str) -> str:
        return self.colors.get(role, "default")

    def styled(self, text: str, role: str) -> str:
        return _parse(self.style(role)).render(text, color_system=ColorSystem.STANDARD)

    def dim(self, text: str) -> str:
        return _parse("dim").render(text, color_system=ColorSystem.STANDARD)

    def bold(self, text: str) -> str:
        return _parse("bold").render(text, color_system=ColorSystem.STANDARD)

    def rich_theme(self) -> RichTheme:
        return RichTheme(self.colors)
