"""Rolling metric samples for sparklines."""

from __future__ import annotations

import logging
import os
import sqlite3
from collections import deque
from contextlib import closing
from pathlib import Path
from typing import Callable

from franken_tui.collectors import connect_readonly, database_path, table_exists, tail_lines
from franken_tui.collectors.logs import parse_lines
from franken_tui.models import PanelData

logger = logging.getLogger(__name__)

HISTORY_SIZE = 30
ERROR_LEVELS = {"emergency", "alert", "critical", "error"}


def _count_rows(app_dir: Path, table: str) -> float:
    db_path = database_path(app_dir)
    if db_path is None:
        raise LookupError("queue database is not sqlite")
    with closing(connect_readonly(db_path)) as conn:
        if not table_exists(conn, table):
            return 0.0
        return float(conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0])


def _log_errors(path: Path) -> float:
    if not path.is_file():
        return 0.0
    entries = parse_lines(tail_lines(path, 300))
    return float(len([e for e in entries if e["level"] in ERROR_LEVELS]))


class MetricsCollector:
    """Keeps the last ``history`` samples of each series between refreshes.

    A probe that fails repeats its previous sample, so one bad read does not
    punch a hole in the sparkline.
    """

    def __init__(self, app_dir: Path, history: int = HISTORY_SIZE, log_path: Path | None = None) -> None:
        self.app_dir = app_dir
        self.log_path = log_path or app_dir / "storage" / "logs" / "laravel.log"
        self.probes: dict[str, Callable[[], float]] = {
            "load": lambda: os.getloadavg()[0],
            "pending jobs": lambda: _count_rows(self.app_dir, "jobs"),
            "failed jobs": lambda: _count_rows(self.app_dir, "failed_jobs"),
            "log errors": lambda: _log_errors(self.log_path),
        }
        self.series: dict[str, deque[float]] = {name: deque(maxlen=history) for name in self.probes}

    def sample(self) -> list[str]:
        failures: list[str] = []
        for name, probe in self.probes.items():
            samples = self.series[name]
            try:
                value = float(probe())
            except (OSError, LookupError, ValueError, AttributeError, sqlite3.Error) as exc:
                logger.debug("metric %s probe failed: %s", name, exc)
                failures.append(name)
                if not samples:
                    continue
                value = samples[-1]
            samples.append(value)
        return failures

    def collect(self) -> PanelData:
        failures = self.sample()
        items = []
        for name, samples in self.series.items():
            if not samples:
                continue
            values = list(samples)
            items.append(
                {
                    "name": name,
                    "samples": values,
                    "current": values[-1],
                    "average": sum(values) / len(values),
                    "max": max(values),
                }
            )
        if not items:
            status = "error"
        elif failures:
            status = "warn"
        else:
            status = "ok"
        return PanelData(
            key="metrics",
            title="Metrics",
            status=status,
            items=items,
            meta={"history": self.series[next(iter(self.series))].maxlen},
            errors=[f"unavailable: {', '.join(failures)}"] if failures else [],
        )
