"""Recent pending and failed jobs."""

from __future__ import annotations

import json
from contextlib import closing
from datetime import datetime
from pathlib import Path

from franken_tui.collectors import connect_readonly, database_path, read_env, table_exists
from franken_tui.models import PanelData


def _display_name(payload: str | None) -> str:
    if not payload:
        return "Unknown"
    try:
        data = json.loads(payload)
    except (TypeError, json.JSONDecodeError):
        return "Unknown"
    if not isinstance(data, dict):
        return "Unknown"
    return str(data.get("displayName") or data.get("job") or "Unknown")


def _epoch_to_text(value) -> str:
    try:
        return datetime.fromtimestamp(int(value)).strftime("%Y-%m-%d %H:%M:%S")
    except (TypeError, ValueError, OverflowError, OSError):
        return "-"


def collect(app_dir: Path, limit: int = 50) -> PanelData:
    db_path = database_path(app_dir, read_env(app_dir))
    if db_path is None:
        return PanelData.empty("jobs", "Jobs", error="unsupported queue database")

    jobs: list[dict] = []
    with closing(connect_readonly(db_path)) as conn:
        if table_exists(conn, "jobs"):
            for row in conn.execute(
                "SELECT id, queue, payload, reserved_at, created_at FROM jobs ORDER BY id DESC LIMIT ?",
                (limit,),
            ):
                jobs.append(
                    {
                        "id": int(row["id"]),
                        "class": _display_name(row["payload"]),
                        "status": "processing" if row["reserved_at"] else "pending",
                        "queue": str(row["queue"]),
                        "timestamp": _epoch_to_text(row["created_at"]),
                        "_sort": int(row["created_at"] or 0),
                    }
                )
        if table_exists(conn, "failed_jobs"):
            for row in conn.execute(
                "SELECT id, queue, payload, failed_at FROM failed_jobs ORDER BY failed_at DESC LIMIT ?",
                (limit,),
            ):
                failed_at = str(row["failed_at"] or "-")
                try:
                    sort_key = int(datetime.fromisoformat(failed_at).timestamp())
                except ValueError:
                    sort_key = 0
                jobs.append(
                    {
                        "id": int(row["id"]),
                        "class": _display_name(row["payload"]),
                        "status": "failed",
                        "queue": str(row["queue"]),
                        "timestamp": failed_at,
                        "_sort": sort_key,
                    }
                )

    jobs.sort(key=lambda job: (job["_sort"], job["id"]), reverse=True)
    items = [{k: v for k, v in job.items() if k != "_sort"} for job in jobs[:limit]]
    failed = len([job for job in items if job["status"] == "failed"])
    return PanelData(
        key="jobs",
        title="Jobs",
        status="warn" if failed else "ok",
        items=items,
        meta={"shown": len(items), "failed": failed},
        errors=[] if items else ["no recent jobs"],
    )
