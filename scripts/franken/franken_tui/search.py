"""Per-panel search text entry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping


@dataclass
class SearchState:
    active: bool = False
    query: str = ""

    def enter(self) -> None:
        self.active = True
        self.query = ""

    def exit(self) -> None:
        # Cleared so re-entering search always starts blank.
        self.active = False
        self.query = ""

    def append_char(self, char: str) -> bool:
        if not self.active or len(char) != 1 or not char.isprintable():
            return False
        self.query += char
        return True

    def remove_char(self) -> bool:
        if not self.query:
            return False
        self.query = self.query[:-1]
        return True

    @property
    def filtering(self) -> bool:
        return self.active and bool(self.query)

    def matches(self, record: Mapping[str, Any], fields: Iterable[str]) -> bool:
        needle = self.query.casefold()
        if not needle:
            return True
        for name in fields:
            value = record.get(name)
            if value is not None and needle in str(value).casefold():
                return True
        return False
