"""Shared model contracts for collector to panel data flow."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class PanelData:
    key: str
    title: str
    status: str = "ok"
    items: list[dict[str, Any]] = field(default_factory=list)
    meta: dict[str, Any] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)

    @classmethod
    def empty(cls, key: str, title: str = "", error: str | None = None) -> "PanelData":
        return cls(
            key=key,
            title=title or key.title(),
            status="error" if error else "warn",
            errors=[error] if error else [],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "title": self.title,
            "status": self.status,
            "items": self.items,
            "meta": self.meta,
            "errors": self.errors,
        }


@dataclass(frozen=True)
class ActionResult:
    ok: bool
    message: str
    output: str = ""
