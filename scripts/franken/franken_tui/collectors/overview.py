"""Application and host summary."""

from __future__ import annotations

import json
import os
from pathlib import Path

from franken_tui.collectors import database_path, file_age_seconds, read_env
from franken_tui.formatting import compact_relative_age, format_duration
from franken_tui.models import PanelData


def _framework_version(app_dir: Path) -> str:
    try:
        lock = json.loads((app_dir / "composer.lock").read_text())
    except (OSError, json.JSONDecodeError):
        return "unknown"
    for package in lock.get("packages", []):
        if package.get("name") == "laravel/framework":
            return str(package.get("version", "unknown")).lstrip("v")
    return "unknown"


def _host_uptime() -> float | None:
    try:
        return float(Path("/proc/uptime").read_text().split()[0])
    except (OSError, ValueError, IndexError):
        return None


def _load_average() -> str:
    try:
        return " ".join(f"{value:.2f}" for value in os.getloadavg())
    except (OSError, AttributeError):
        return "n/a"


def collect(app_dir: Path) -> PanelData:
    env = read_env(app_dir)
    db_path = database_path(app_dir, env)
    if db_path is None:
        database = env.get("DB_CONNECTION", "unknown")
    elif db_path.is_file():
        database = f"sqlite ({compact_relative_age(file_age_seconds(db_path))} write)"
    else:
        database = "sqlite (missing)"

    items = [
        {"key": "Application", "value": env.get("APP_NAME", app_dir.name)},
        {"key": "Environment", "value": env.get("APP_ENV", "unknown")},
        {"key": "Debug", "value": env.get("APP_DEBUG", "false")},
        {"key": "Laravel", "value": _framework_version(app_dir)},
        {"key": "Database", "value": database},
        {"key": "Queue", "value": env.get("QUEUE_CONNECTION", "sync")},
        {"key": "Load", "value": _load_average()},
        {"key": "Host uptime", "value": format_duration(_host_uptime())},
    ]
    status = "ok" if (app_dir / "artisan").is_file() else "warn"
    return PanelData(
        key="overview",
        title="Overview",
        status=status,
        items=items,
        meta={"app_dir": str(app_dir)},
        errors=[] if status == "ok" else [f"no artisan script in {app_dir}"],
    )
