"""Frame assembly: tab bar, rule, active panel and hotkey legend.

Every frame is a full repaint. Each line is padded or truncated to the
current width and followed by an erase-to-end-of-line, so nothing from a
previous, wider frame or a previous panel survives a redraw.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from franken_tui.ansi import center, fit_to
from franken_tui.config import Keymap
from franken_tui.layout import render_tab_bar, select_layout_mode
from franken_tui.screen import ScreenCache, ScreenMetrics
from franken_tui.theme import Theme

if TYPE_CHECKING:
    from franken_tui.dashboard import Dashboard
    from franken_tui.panels import Panel

logger = logging.getLogger(__name__)

CURSOR_HOME = "\x1b[H"
CLEAR_LINE = "\x1b[K"

# tab bar + horizontal rule
HEADER_ROWS = 2
LEGEND_ROWS = 1
# below this height the legend row goes back to the panel
MIN_LEGEND_HEIGHT = 8


def legend_visible(screen: ScreenMetrics) -> bool:
    return screen.height >= MIN_LEGEND_HEIGHT


def compose_lines(
    screen: ScreenMetrics,
    tab_bar: str,
    block: Sequence[str],
    legend: str | None,
    rule: str | None = None,
) -> list[str]:
    """Lay out exactly ``screen.height`` lines of exactly ``screen.width`` cells."""
    width, height = screen.width, screen.height
    show_legend = legend is not None and legend_visible(screen)
    budget = height - HEADER_ROWS - (LEGEND_ROWS if show_legend else 0)

    rows = [tab_bar, rule if rule is not None else "─" * width]
    rows.extend(block[:budget])
    rows.extend([""] * (budget - min(len(block), budget)))
    if show_legend:
        rows.append(legend)
    return [fit_to(row, width) + CLEAR_LINE for row in rows[:height]]


def compose_frame(
    screen: ScreenMetrics,
    tab_bar: str,
    block: Sequence[str],
    legend: str | None,
    rule: str | None = None,
) -> str:
    return CURSOR_HOME + "\r\n".join(compose_lines(screen, tab_bar, block, legend, rule))


def build_legend(keymap: Keymap, panel: "Panel", mode: str) -> list[tuple[str, str]]:
    """Hotkeys for the legend, panel-local keys first, densest in wide mode."""
    entries: dict[str, str] = {}
    try:
        hotkeys = list(panel.hotkeys(keymap))
    except Exception:
        logger.exception("panel %s failed to list hotkeys", panel.key)
        hotkeys = []
    for key, label in hotkeys:
        entries.setdefault(key, label)
    if panel.searchable:
        entries.setdefault(keymap.search, "Search")
    if mode != "narrow":
        entries.setdefault("1-9", "Panel")
        entries.setdefault("←/→", "Tab")
    if mode == "wide":
        entries.setdefault(f"↑/↓ {keymap.navigate_up}/{keymap.navigate_down}", "Move")
        entries.setdefault("PgUp/PgDn", "Page")
    entries.setdefault(keymap.refresh, "Refresh")
    entries.setdefault(keymap.quit, "Quit")
    return list(entries.items())


class Compositor:
    def __init__(self, screen_cache: ScreenCache, theme: Theme) -> None:
        self.screen_cache = screen_cache
        self.theme = theme

    def content_size(self, screen: ScreenMetrics, with_legend: bool = True) -> tuple[int, int]:
        reserved = HEADER_ROWS + (LEGEND_ROWS if with_legend and legend_visible(screen) else 0)
        return screen.width, max(0, screen.height - reserved)

    def render_panel(self, panel: "Panel", width: int, height: int) -> list[str]:
        """Render one panel; a failing panel becomes a single placeholder line."""
        try:
            panel.fit(width, height)
            return list(panel.render(width, height))[:height]
        except Exception as exc:
            logger.exception("panel %s failed to render", panel.key)
            return [self.theme.styled(f"{panel.title}: render failed ({exc.__class__.__name__})", "error")]

    def legend_line(self, keymap: Keymap, panel: "Panel", width: int) -> str:
        parts = [
            self.theme.styled(key, "hotkey") + " " + self.theme.dim(label)
            for key, label in build_legend(keymap, panel, select_layout_mode(width))
        ]
        return center("  ".join(parts), width)

    def frame(self, dashboard: "Dashboard") -> str:
        screen = self.screen_cache.current()
        panel = dashboard.focused
        width, height = self.content_size(screen)
        tab_bar = render_tab_bar([p.title for p in dashboard.panels], dashboard.focused_index, width, self.theme)
        block = self.render_panel(panel, width, height)
        legend = self.legend_line(dashboard.keymap, panel, width)
        rule = self.theme.styled("─" * width, "muted")
        return compose_frame(screen, tab_bar, block, legend, rule)
