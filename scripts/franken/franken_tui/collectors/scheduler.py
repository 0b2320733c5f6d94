"""Scheduled task listing via ``php artisan schedule:list``."""

from __future__ import annotations

import re
from pathlib import Path

from franken_tui.ansi import strip_ansi
from franken_tui.collectors import run_command
from franken_tui.models import PanelData

# "  0 * * * *  php artisan inspire .......... Next Due: 12 minutes from now"
ROW_RE = re.compile(
    r"^\s*(?P<expression>(?:\S+\s+){4}\S+)\s+(?P<command>.+?)\s*\.{2,}\s*(?:Next Due:\s*)?(?P<next>.+?)\s*$"
)


def parse_schedule(output: str) -> list[dict]:
    rows: list[dict] = []
    for raw in strip_ansi(output).splitlines():
        match = ROW_RE.match(raw)
        if not match:
            continue
        rows.append(
            {
                "expression": match.group("expression"),
                "command": match.group("command"),
                "next_due": match.group("next"),
            }
        )
    return rows


def collect(app_dir: Path) -> PanelData:
    if not (app_dir / "artisan").is_file():
        return PanelData.empty("scheduler", "Scheduler", error=f"no artisan script in {app_dir}")

    result = run_command(["php", "artisan", "schedule:list", "--no-ansi"], cwd=app_dir)
    if result.returncode != 0:
        message = (result.stderr or result.stdout).strip().splitlines()
        return PanelData.empty(
            "scheduler",
            "Scheduler",
            error=message[-1] if message else f"schedule:list exited {result.returncode}",
        )

    rows = parse_schedule(result.stdout)
    return PanelData(
        key="scheduler",
        title="Scheduler",
        status="ok" if rows else "warn",
        items=rows,
        meta={"count": len(rows)},
        errors=[] if rows else ["no scheduled tasks"],
    )
