"""Artisan side-effects triggered from panels.

Every action returns an :class:`ActionResult`; failures to spawn, time-outs
and non-zero exits are reported in the result, never raised.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path

from franken_tui.collectors import run_command
from franken_tui.models import ActionResult

logger = logging.getLogger(__name__)

ACTION_TIMEOUT = 30  # seconds
CLEAR_COMMANDS = ("cache:clear", "config:clear", "view:clear", "route:clear")


class ArtisanActions:
    def __init__(self, app_dir: Path, php: str = "php", timeout: float = ACTION_TIMEOUT) -> None:
        self.app_dir = app_dir
        self.php = php
        self.timeout = timeout

    def run_artisan(self, args: list[str]) -> ActionResult:
        label = " ".join(args) or "list"
        cmd = [self.php, "artisan", *args, "--no-interaction"]
        try:
            result = run_command(cmd, cwd=self.app_dir, timeout=self.timeout)
        except subprocess.TimeoutExpired:
            logger.warning("artisan %s timed out after %ss", label, self.timeout)
            return ActionResult(False, f"{label}: timed out")
        except OSError as exc:
            logger.warning("artisan %s could not start: %s", label, exc)
            return ActionResult(False, f"{label}: {exc.strerror or exc}")

        output = (result.stdout + result.stderr).strip()
        if result.returncode != 0:
            logger.info("artisan %s exited %s", label, result.returncode)
            return ActionResult(False, f"{label}: exit {result.returncode}", output)
        logger.info("artisan %s ok", label)
        return ActionResult(True, f"{label}: done", output)

    def run_command_line(self, line: str) -> ActionResult:
        try:
            args = shlex.split(line)
        except ValueError as exc:
            return ActionResult(False, f"cannot parse command: {exc}")
        if args[:2] == ["php", "artisan"]:
            args = args[2:]
        elif args[:1] == ["artisan"]:
            args = args[1:]
        if not args:
            return ActionResult(False, "no command given")
        return self.run_artisan(args)

    def clear_cache(self) -> ActionResult:
        outputs: list[str] = []
        for command in CLEAR_COMMANDS:
            result = self.run_artisan([command])
            outputs.append(result.output)
            if not result.ok:
                return ActionResult(False, result.message, "\n".join(outputs))
        return ActionResult(True, "caches cleared", "\n".join(outputs))

    def restart_worker(self) -> ActionResult:
        result = self.run_artisan(["queue:restart"])
        if result.ok:
            return ActionResult(True, "worker restart signalled", result.output)
        return result

    def retry_job(self, job_id: int | str) -> ActionResult:
        result = self.run_artisan(["queue:retry", str(job_id)])
        if result.ok:
            return ActionResult(True, f"job {job_id} queued for retry", result.output)
        return result
