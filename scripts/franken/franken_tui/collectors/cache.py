"""Cache store details."""

from __future__ import annotations

import os
from pathlib import Path

from franken_tui.collectors import read_env
from franken_tui.formatting import human_size
from franken_tui.models import PanelData


def _directory_usage(path: Path) -> tuple[int, int]:
    total = 0
    files = 0
    for root, _dirs, names in os.walk(path):
        for name in names:
            if name == ".gitignore":
                continue
            try:
                total += (Path(root) / name).stat().st_size
            except OSError:
                continue
            files += 1
    return total, files


def collect(app_dir: Path) -> PanelData:
    env = read_env(app_dir)
    driver = env.get("CACHE_STORE") or env.get("CACHE_DRIVER") or "file"

    items = [{"key": "Driver", "value": driver}]
    status = "ok"
    errors: list[str] = []
    if driver == "file":
        cache_dir = app_dir / "storage" / "framework" / "cache" / "data"
        if cache_dir.is_dir():
            size, entries = _directory_usage(cache_dir)
            items.append({"key": "Size", "value": human_size(size)})
            items.append({"key": "Entries", "value": str(entries)})
            items.append({"key": "Path", "value": str(cache_dir)})
        else:
            status = "warn"
            errors.append(f"cache directory missing: {cache_dir}")
    else:
        items.append({"key": "Size", "value": "unknown"})

    config_cached = (app_dir / "bootstrap" / "cache" / "config.php").exists()
    routes_cached = any((app_dir / "bootstrap" / "cache").glob("routes*.php"))
    items.append({"key": "Config cached", "value": "yes" if config_cached else "no"})
    items.append({"key": "Routes cached", "value": "yes" if routes_cached else "no"})

    return PanelData(
        key="cache",
        title="Cache",
        status=status,
        items=items,
        meta={"driver": driver},
        errors=errors,
    )
