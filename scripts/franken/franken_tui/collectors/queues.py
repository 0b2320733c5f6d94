"""Queue sizes and worker processes."""

from __future__ import annotations

import logging
import subprocess
from contextlib import closing
from pathlib import Path

from franken_tui.collectors import connect_readonly, database_path, read_env, run_command, table_exists
from franken_tui.models import PanelData

logger = logging.getLogger(__name__)


def _counts(conn, table: str) -> dict[str, int]:
    if not table_exists(conn, table):
        return {}
    rows = conn.execute(f"SELECT queue, COUNT(*) AS total FROM {table} GROUP BY queue").fetchall()
    return {str(row["queue"]): int(row["total"]) for row in rows}


def collect_workers() -> list[dict]:
    try:
        result = run_command(["pgrep", "-f", "queue:work"])
    except (OSError, subprocess.TimeoutExpired) as exc:
        logger.debug("worker probe failed: %s", exc)
        return []
    pids = [line.strip() for line in result.stdout.splitlines() if line.strip()]
    return [{"pid": pid, "status": "running"} for pid in pids]


def collect(app_dir: Path) -> PanelData:
    env = read_env(app_dir)
    db_path = database_path(app_dir, env)
    if db_path is None:
        connection = env.get("DB_CONNECTION", "?")
        return PanelData.empty("queues", "Queues", error=f"unsupported queue database: {connection}")

    with closing(connect_readonly(db_path)) as conn:
        pending = _counts(conn, "jobs")
        failed = _counts(conn, "failed_jobs")

    names = sorted(set(pending) | set(failed))
    items = [
        {"name": name, "pending": pending.get(name, 0), "failed": failed.get(name, 0)}
        for name in names
    ]
    workers = collect_workers()

    status = "ok"
    if any(item["failed"] for item in items):
        status = "warn"
    return PanelData(
        key="queues",
        title="Queues",
        status=status,
        items=items,
        meta={
            "pending": sum(pending.values()),
            "failed": sum(failed.values()),
            "workers": workers,
            "connection": env.get("QUEUE_CONNECTION", "sync"),
        },
        errors=[] if items else ["no queued or failed jobs"],
    )
