"""Collector helpers and package exports."""

from __future__ import annotations

import logging
import os
import sqlite3
import subprocess
import time
from pathlib import Path
from typing import Callable

from dotenv import dotenv_values

from franken_tui.models import PanelData

logger = logging.getLogger(__name__)

SUBPROCESS_TIMEOUT = 5  # seconds


def collect_safely(key: str, collector: Callable[[], PanelData], title: str = "") -> PanelData:
    """Run ``collector`` and turn any failure into an empty result."""
    try:
        data = collector()
    except Exception as exc:  # noqa: BLE001 - collectors must never break the loop
        logger.warning("collector %s failed: %s", key, exc, exc_info=logger.isEnabledFor(logging.DEBUG))
        return PanelData.empty(key, title, error=f"{type(exc).__name__}: {exc}")
    if not isinstance(data, PanelData):
        logger.warning("collector %s returned %s, expected PanelData", key, type(data).__name__)
        return PanelData.empty(key, title, error="collector returned no panel data")
    return data


def read_env(app_dir: Path) -> dict[str, str]:
    env_path = app_dir / ".env"
    if not env_path.is_file():
        return {}
    return {k: v for k, v in dotenv_values(env_path).items() if v is not None}


def file_age_seconds(path: Path) -> float | None:
    try:
        return max(0.0, time.time() - path.stat().st_mtime)
    except OSError:
        return None


def tail_lines(path: Path, limit: int, chunk_size: int = 8192) -> list[str]:
    """Return the last ``limit`` lines of ``path`` reading backwards in chunks."""
    with path.open("rb") as handle:
        handle.seek(0, os.SEEK_END)
        pos = handle.tell()
        buffer = b""
        while pos > 0 and buffer.count(b"\n") <= limit:
            step = min(chunk_size, pos)
            pos -= step
            handle.seek(pos)
            buffer = handle.read(step) + buffer
    lines = buffer.decode("utf-8", errors="replace").splitlines()
    return lines[-limit:]


def database_path(app_dir: Path, env: dict[str, str] | None = None) -> Path | None:
    """Location of the application's SQLite database, or None for other drivers."""
    env = read_env(app_dir) if env is None else env
    if env.get("DB_CONNECTION", "sqlite") != "sqlite":
        return None
    configured = env.get("DB_DATABASE")
    if configured:
        path = Path(configured)
        return path if path.is_absolute() else app_dir / path
    return app_dir / "database" / "database.sqlite"


def connect_readonly(path: Path) -> sqlite3.Connection:
    if not path.is_file():
        raise FileNotFoundError(f"database not found: {path}")
    conn = sqlite3.connect(f"file:{path}?mode=ro", uri=True, timeout=1.0)
    conn.row_factory = sqlite3.Row
    return conn


def table_exists(conn: sqlite3.Connection, name: str) -> bool:
    row = conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?", (name,)
    ).fetchone()
    return row is not None


def run_command(cmd: list[str], cwd: Path | None = None, timeout: float = SUBPROCESS_TIMEOUT) -> subprocess.CompletedProcess:
    return subprocess.run(
        cmd,
        cwd=str(cwd) if cwd else None,
        capture_output=True,
        text=True,
        timeout=timeout,
        check=False,
    )
