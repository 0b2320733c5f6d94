"""Shared text, size and time formatting helpers for human-facing panels."""

from __future__ import annotations

from typing import Sequence

SPARK_BLOCKS = "▁▂▃▄▅▆▇█"
SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def compact_relative_age(age_seconds: float | int | None) -> str:
    if age_seconds is None:
        return "n/a"

    seconds = max(0, int(age_seconds))
    if seconds < 60:
        return f"{seconds}s ago"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    return f"{seconds // 86400}d ago"


def format_duration(seconds: float | None) -> str:
    if seconds is None:
        return "n/a"
    total = max(0, int(seconds))
    days, rest = divmod(total, 86400)
    hours, rest = divmod(rest, 3600)
    minutes = rest // 60
    if days:
        return f"{days}d {hours}h"
    if hours:
        return f"{hours}h {minutes:02d}m"
    return f"{minutes}m"


def human_size(size: int) -> str:
    value = float(max(0, size))
    if value < 1024:
        return f"{int(value)} B"
    for unit in SIZE_UNITS[1:]:
        value /= 1024
        if value < 1024:
            break
    return f"{value:.1f} {unit}"


def sparkline(samples: Sequence[float]) -> str:
    """Scale ``samples`` between their min and max onto eight block heights."""
    if not samples:
        return ""
    low = min(samples)
    high = max(samples)
    span = high - low
    if span <= 0:
        level = 0 if high <= 0 else len(SPARK_BLOCKS) // 2
        return SPARK_BLOCKS[level] * len(samples)
    top = len(SPARK_BLOCKS) - 1
    return "".join(SPARK_BLOCKS[round((value - low) / span * top)] for value in samples)
