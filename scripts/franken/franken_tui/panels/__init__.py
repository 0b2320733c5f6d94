"""Panel base classes and rendering helpers.

Every panel answers the full navigation/search surface; panels without list
content simply inherit the no-op defaults, so the dashboard can forward any
key without probing for capabilities.
"""

from __future__ import annotations

import io
import time
from typing import Any, Callable

from rich.console import Console, RenderableType
from rich.table import Table
from rich.text import Text

from franken_tui.collectors import collect_safely
from franken_tui.config import Keymap
from franken_tui.keys import KeyEvent
from franken_tui.models import ActionResult, PanelData
from franken_tui.search import SearchState
from franken_tui.theme import STATUS_ROLES, Theme
from franken_tui.viewport import Viewport

NO_DATA = "no data"
NOTICE_SECONDS = 5.0


def render_lines(renderable: RenderableType, width: int, theme: Theme) -> list[str]:
    """Render a rich renderable to SGR-styled lines at most ``width`` cells wide."""
    console = Console(
        file=io.StringIO(),
        width=max(1, width),
        force_terminal=True,
        color_system="standard",
        theme=theme.rich_theme(),
        legacy_windows=False,
        highlight=False,
        emoji=False,
    )
    with console.capture() as capture:
        console.print(renderable, crop=True)
    return capture.get().splitlines()


def kv_table(rows: list[tuple[str, str]]) -> Table:
    table = Table(box=None, show_header=False, expand=True, pad_edge=False)
    table.add_column("key", style="bold", no_wrap=True)
    table.add_column("value", style="default", no_wrap=True, overflow="ellipsis", ratio=1)
    for key, value in rows:
        table.add_row(key, value)
    return table


def error_suffix(data: PanelData) -> str:
    if not data.errors:
        return ""
    return f" ({'; '.join(data.errors[:1])})"


class Panel:
    """A focusable dashboard tab.

    ``render`` must not touch navigation state. Sizing happens in ``fit``,
    which the compositor calls with the content area before every render.
    """

    searchable = False

    def __init__(
        self,
        key: str,
        title: str,
        theme: Theme,
        source: Callable[[], PanelData] | None = None,
    ) -> None:
        self.key = key
        self.title = title
        self.theme = theme
        self.source = source
        self.data = PanelData.empty(key, title)
        self._notice: tuple[str, bool, float] | None = None

    # data

    def refresh(self) -> None:
        if self.source is not None:
            self.data = collect_safely(self.key, self.source, self.title)

    # lifecycle

    def on_focus(self) -> None:
        pass

    def on_blur(self) -> None:
        pass

    # layout

    def fit(self, width: int, height: int) -> None:
        pass

    def render(self, width: int, height: int) -> list[str]:
        raise NotImplementedError

    # navigation

    def up(self) -> bool:
        return False

    def down(self) -> bool:
        return False

    def page_up(self) -> bool:
        return False

    def page_down(self) -> bool:
        return False

    def home(self) -> bool:
        return False

    def end(self) -> bool:
        return False

    # search

    @property
    def in_search(self) -> bool:
        return False

    def enter_search(self) -> bool:
        return False

    def exit_search(self) -> bool:
        return False

    def search_append(self, char: str) -> bool:
        return False

    def search_remove(self) -> bool:
        return False

    def submit(self) -> bool:
        return False

    # panel-local keys

    def handle_key(self, event: KeyEvent, keymap: Keymap) -> bool:
        return False

    def hotkeys(self, keymap: Keymap) -> list[tuple[str, str]]:
        return []

    # shared rendering

    def show_result(self, result: ActionResult) -> None:
        self._notice = (result.message, result.ok, time.monotonic() + NOTICE_SECONDS)

    def notice(self) -> str:
        if self._notice is None:
            return ""
        message, ok, until = self._notice
        if time.monotonic() >= until:
            return ""
        return self.theme.styled(f" {message} ", "success" if ok else "error")

    def title_line(self, detail: str = "") -> str:
        role = STATUS_ROLES.get(self.data.status, "primary")
        parts = [self.theme.styled(self.title, "primary"), " ", self.theme.styled("●", role)]
        if detail:
            parts.append(" " + self.theme.dim(detail))
        note = self.notice()
        if note:
            parts.append("  " + note)
        return "".join(parts)

    def no_data_line(self) -> str:
        return self.theme.dim(NO_DATA + error_suffix(self.data))


class KeyValuePanel(Panel):
    """Two-column key/value block fed by ``{"key": ..., "value": ...}`` items."""

    def rows(self) -> list[tuple[str, str]]:
        return [(str(item.get("key", "-")), str(item.get("value", "-"))) for item in self.data.items]

    def render(self, width: int, height: int) -> list[str]:
        lines = [self.title_line()]
        rows = self.rows()
        if not rows:
            lines.append(self.no_data_line())
            return lines
        lines.extend(render_lines(kv_table(rows), width, self.theme))
        return lines[:height]


class ListPanel(Panel):
    """Scrollable, searchable table of ``data.items``."""

    searchable = True
    search_fields: tuple[str, ...] = ()
    # title line + column header
    chrome_rows = 2

    def __init__(
        self,
        key: str,
        title: str,
        theme: Theme,
        source: Callable[[], PanelData] | None = None,
    ) -> None:
        super().__init__(key, title, theme, source)
        self.viewport = Viewport()
        self.search = SearchState()

    # content hooks

    def columns(self) -> list[tuple[str, dict[str, Any]]]:
        raise NotImplementedError

    def cells(self, item: dict[str, Any]) -> list[str | Text]:
        raise NotImplementedError

    def items(self) -> list[dict[str, Any]]:
        return self.data.items

    def visible_items(self) -> list[dict[str, Any]]:
        items = self.items()
        if not self.search.filtering:
            return items
        return [item for item in items if self.search.matches(item, self.search_fields)]

    def selected_item(self) -> dict[str, Any] | None:
        items = self.visible_items()
        index = self.viewport.selected_index
        return items[index] if index < len(items) else None

    # sizing

    def chrome_for(self, height: int) -> int:
        """Rows of title and column header that fit above at least one row."""
        return max(0, min(self.chrome_rows, height - 1))

    def capacity_for(self, height: int) -> int:
        return max(1, height - self.chrome_for(height))

    def fit(self, width: int, height: int) -> None:
        self.viewport.set_dimensions(len(self.visible_items()), self.capacity_for(height))

    # navigation

    def up(self) -> bool:
        return self.viewport.move_selection(-1)

    def down(self) -> bool:
        return self.viewport.move_selection(1)

    def page_up(self) -> bool:
        return self.viewport.page_move(-1)

    def page_down(self) -> bool:
        return self.viewport.page_move(1)

    def home(self) -> bool:
        return self.viewport.jump_to_start()

    def end(self) -> bool:
        return self.viewport.jump_to_end()

    # search

    @property
    def in_search(self) -> bool:
        return self.search.active

    def enter_search(self) -> bool:
        self.search.enter()
        self.viewport.reset()
        return True

    def exit_search(self) -> bool:
        if not self.search.active:
            return False
        self.search.exit()
        self.viewport.reset()
        return True

    def search_append(self, char: str) -> bool:
        changed = self.search.append_char(char)
        self.viewport.reset()
        return changed

    def search_remove(self) -> bool:
        changed = self.search.remove_char()
        self.viewport.reset()
        return changed

    def on_blur(self) -> None:
        self.exit_search()

    # rendering

    def position_detail(self, shown: int) -> str:
        if not shown:
            return ""
        rng = self.viewport.visible_range()
        first = rng.start + 1
        last = min(rng.stop, shown)
        return f"{first}-{last} of {shown}"

    def prompt(self) -> str:
        if not self.search.active:
            return ""
        return "  " + self.theme.styled(f"/{self.search.query}", "secondary") + self.theme.styled("_", "muted")

    def render(self, width: int, height: int) -> list[str]:
        items = self.visible_items()
        header = self.title_line(self.position_detail(len(items))) + self.prompt()
        if not items:
            if self.search.filtering:
                return [header, self.theme.dim(f"no matches for {self.search.query!r}")]
            return [header, self.no_data_line()]

        # short areas lose the column header first, then the title
        chrome = self.chrome_for(height)
        table = Table(box=None, expand=True, pad_edge=False, header_style="bold", show_header=chrome >= 2)
        for name, options in self.columns():
            table.add_column(name, no_wrap=True, overflow="ellipsis", **options)
        selected = self.viewport.selected_index
        for index in self.viewport.visible_range():
            if index >= len(items):
                break
            table.add_row(*self.cells(items[index]), style="selected" if index == selected else None)
        lines = render_lines(table, width, self.theme)
        if chrome >= 1:
            lines.insert(0, header)
        return lines[:height]
