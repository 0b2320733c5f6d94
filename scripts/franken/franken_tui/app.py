"""Dashboard application entrypoint."""

from __future__ import annotations

import argparse
import json
import logging
import os
import signal
import sys
from datetime import datetime, timezone
from functools import partial
from typing import Callable

from rich.console import Console

from franken_tui.actions import ArtisanActions
from franken_tui.collectors import cache, jobs, logs, overview, queues, scheduler
from franken_tui.collectors.metrics import MetricsCollector
from franken_tui.compositor import Compositor
from franken_tui.config import DashboardConfig, resolve_config
from franken_tui.dashboard import Dashboard
from franken_tui.loop import EventLoop
from franken_tui.panels import KeyValuePanel, Panel
from franken_tui.panels.cache import CachePanel
from franken_tui.panels.jobs import JobsPanel
from franken_tui.panels.logs import LogsPanel
from franken_tui.panels.metrics import MetricsPanel
from franken_tui.panels.queues import QueuesPanel
from franken_tui.panels.scheduler import SchedulerPanel
from franken_tui.panels.settings import SettingsPanel
from franken_tui.panels.shell import ShellPanel
from franken_tui.screen import ScreenCache, console_probe
from franken_tui.terminal import Terminal, TerminalError
from franken_tui.theme import THEMES, Theme

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_TERMINAL = 1
EXIT_CONFIG = 2

PANEL_TITLES = {
    "overview": "Overview",
    "queues": "Queues",
    "jobs": "Jobs",
    "logs": "Logs",
    "cache": "Cache",
    "scheduler": "Scheduler",
    "metrics": "Metrics",
    "shell": "Shell",
    "settings": "Settings",
}


def build_panels(config: DashboardConfig, theme: Theme, actions: ArtisanActions | None = None) -> list[Panel]:
    app_dir = config.app_dir
    actions = actions or ArtisanActions(app_dir)
    metrics = MetricsCollector(app_dir, log_path=config.log_path)

    factories: dict[str, Callable[[str, str], Panel]] = {
        "overview": lambda key, title: KeyValuePanel(key, title, theme, partial(overview.collect, app_dir)),
        "queues": lambda key, title: QueuesPanel(key, title, theme, partial(queues.collect, app_dir), actions=actions),
        "jobs": lambda key, title: JobsPanel(key, title, theme, partial(jobs.collect, app_dir), actions=actions),
        "logs": lambda key, title: LogsPanel(
            key,
            title,
            theme,
            partial(logs.collect, config.log_path, config.log_limit, config.log_levels),
        ),
        "cache": lambda key, title: CachePanel(key, title, theme, partial(cache.collect, app_dir), actions=actions),
        "scheduler": lambda key, title: SchedulerPanel(key, title, theme, partial(scheduler.collect, app_dir)),
        "metrics": lambda key, title: MetricsPanel(key, title, theme, metrics.collect),
        "shell": lambda key, title: ShellPanel(key, title, theme, actions=actions, prompt_key=config.keymap.search),
        "settings": lambda key, title: SettingsPanel(key, title, theme, config=config),
    }
    return [factories[key](key, PANEL_TITLES[key]) for key in config.panels]


def _json_output(config: DashboardConfig, panels: list[Panel]) -> str:
    for panel in panels:
        panel.refresh()
    payload = {
        "app_dir": str(config.app_dir),
        "collected_at": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "panels": {panel.key: panel.data.to_dict() for panel in panels},
    }
    return json.dumps(payload, indent=2, default=str)


def configure_logging(log_file: str | None, debug: bool) -> None:
    if not log_file:
        return
    logging.basicConfig(
        filename=log_file,
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _install_signal_handlers(loop: EventLoop) -> dict[int, object]:
    previous: dict[int, object] = {}

    def stop(signum, frame):
        logger.info("received signal %s, stopping", signum)
        loop.stop()

    def redraw(signum, frame):
        loop.request_redraw()

    handlers = {"SIGTERM": stop, "SIGHUP": stop, "SIGWINCH": redraw}
    for name, handler in handlers.items():
        signum = getattr(signal, name, None)
        if signum is not None:
            previous[signum] = signal.signal(signum, handler)
    return previous


def _restore_signal_handlers(previous: dict[int, object]) -> None:
    for signum, handler in previous.items():
        signal.signal(signum, handler)


def run_dashboard(config: DashboardConfig, terminal: Terminal) -> int:
    theme = Theme(config.theme)
    dashboard = Dashboard(build_panels(config, theme), config.keymap)
    compositor = Compositor(ScreenCache(console_probe(Console(file=terminal.stdout))), theme)
    loop = EventLoop(dashboard, terminal, compositor, config.polling_interval)

    previous = _install_signal_handlers(loop)
    logger.info("dashboard started for %s", config.app_dir)
    try:
        with terminal:
            try:
                loop.run()
            except KeyboardInterrupt:
                loop.stop()
    finally:
        _restore_signal_handlers(previous)
    logger.info("dashboard stopped after %s frames", loop.frames)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Franken console: terminal dashboard for a Laravel application")
    parser.add_argument("--app-dir", help="Laravel application directory (default: FRANKEN_APP_DIR or cwd)")
    parser.add_argument("--config", help="Optional JSON config file")
    parser.add_argument("--refresh", type=float, help="Polling interval seconds override")
    parser.add_argument("--theme", choices=sorted(THEMES), help="Color theme")
    parser.add_argument("--log-file", default=os.environ.get("FRANKEN_LOG_FILE"), help="Write diagnostics to this file")
    parser.add_argument("--debug", action="store_true", help="Log at debug level")
    parser.add_argument("--json", action="store_true", help="Emit one JSON snapshot and exit")
    args = parser.parse_args(argv)

    configure_logging(args.log_file, args.debug)

    try:
        config = resolve_config(
            args.config,
            overrides={"app_dir": args.app_dir, "polling_interval": args.refresh, "theme": args.theme},
        )
    except ValueError as exc:
        parser.exit(EXIT_CONFIG, f"{parser.prog}: error: {exc}\n")

    if args.json:
        print(_json_output(config, build_panels(config, Theme(config.theme))))
        return EXIT_OK

    try:
        terminal = Terminal()
    except TerminalError as exc:
        logger.error("%s", exc)
        print(f"{parser.prog}: {exc}", file=sys.stderr)
        return EXIT_TERMINAL
    return run_dashboard(config, terminal)


if __name__ == "__main__":
    raise SystemExit(main())
