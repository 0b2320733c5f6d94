"""Application log collector (Laravel single-file log format)."""

from __future__ import annotations

import re
from pathlib import Path

from franken_tui.collectors import tail_lines
from franken_tui.config import LOG_LEVELS
from franken_tui.models import PanelData

# [2024-05-01 12:00:00] local.ERROR: message
ENTRY_RE = re.compile(
    r"^\[(\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:[+\-]\d{2}:?\d{2}|Z)?)\]\s*"
    r"(?:(\w+)\.)?(\w+):\s*(.*)$"
)


def parse_lines(lines: list[str]) -> list[dict]:
    """Group raw lines into entries; unmatched lines continue the previous entry."""
    entries: list[dict] = []
    current: dict | None = None
    for raw in lines:
        line = raw.rstrip()
        if not line.strip():
            continue
        match = ENTRY_RE.match(line)
        if match:
            if current is not None:
                entries.append(current)
            timestamp, channel, level, message = match.groups()
            current = {
                "timestamp": timestamp,
                "channel": channel or "local",
                "level": level.lower(),
                "message": message.strip(),
                "extra": 0,
            }
        elif current is not None:
            # stack traces and wrapped context
            current["extra"] += 1
    if current is not None:
        entries.append(current)
    return entries


def collect(log_path: Path, limit: int = 100, levels: tuple[str, ...] = LOG_LEVELS) -> PanelData:
    if not log_path.is_file():
        return PanelData.empty("logs", "Logs", error=f"log file not found: {log_path}")

    lines = tail_lines(log_path, limit * 3)
    allowed = set(levels)
    entries = [e for e in parse_lines(lines) if e["level"] in allowed]
    entries = list(reversed(entries))[:limit]

    errors = len([e for e in entries if e["level"] in ("emergency", "alert", "critical", "error")])
    return PanelData(
        key="logs",
        title="Logs",
        status="warn" if errors else "ok",
        items=entries,
        meta={"shown": len(entries), "errors": errors, "path": str(log_path)},
        errors=[] if entries else ["no log lines available"],
    )
