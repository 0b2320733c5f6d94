"""Artisan command prompt with scrollable output.

The panel's search buffer doubles as the command line: the search key opens
the prompt, Enter runs ``php artisan <input>``, and leaving the panel
discards whatever was typed.
"""

from __future__ import annotations

from rich.text import Text

from franken_tui.actions import ArtisanActions
from franken_tui.ansi import strip_ansi
from franken_tui.config import Keymap
from franken_tui.panels import ListPanel

MAX_LINES = 500
LINE_ROLES = {"command": "secondary", "output": "default", "error": "error"}


class ShellPanel(ListPanel):
    def __init__(self, *args, actions: ArtisanActions, prompt_key: str = "/", **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.actions = actions
        self.prompt_key = prompt_key
        self.data.status = "ok"

    def visible_items(self):
        # the prompt never filters output
        return self.items()

    def columns(self):
        return [("Output", {"ratio": 1})]

    def cells(self, item):
        return [Text(item["line"], style=LINE_ROLES.get(item.get("kind"), "default"))]

    def _append(self, line: str, kind: str) -> None:
        self.data.items.append({"line": line, "kind": kind})
        del self.data.items[:-MAX_LINES]

    def submit(self) -> bool:
        line = self.search.query.strip()
        if not line:
            return False
        self._append(f"$ php artisan {line}", "command")
        result = self.actions.run_command_line(line)
        kind = "output" if result.ok else "error"
        for out in result.output.splitlines():
            self._append(strip_ansi(out), kind)
        if not result.ok and not result.output:
            self._append(result.message, "error")
        self.show_result(result)
        self.viewport.set_dimensions(len(self.data.items), self.viewport.capacity)
        self.viewport.jump_to_end()
        return True

    def exit_search(self) -> bool:
        if not self.search.active:
            return False
        self.search.exit()
        return True

    def render(self, width: int, height: int) -> list[str]:
        if not self.data.items:
            hint = f"press {self.prompt_key} to type an artisan command, Enter to run it"
            return [self.title_line() + self.prompt(), self.theme.dim(hint)]
        return super().render(width, height)

    def hotkeys(self, keymap: Keymap) -> list[tuple[str, str]]:
        return [(keymap.search, "Command")]
