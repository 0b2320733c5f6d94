"""Single-threaded poll, dispatch, refresh and redraw loop."""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Callable

from franken_tui.compositor import Compositor
from franken_tui.dashboard import Dashboard
from franken_tui.keys import decode
from franken_tui.terminal import Terminal

logger = logging.getLogger(__name__)

POLL_TIMEOUT = 0.025  # seconds


class LoopState(str, Enum):
    RUNNING = "running"
    STOPPED = "stopped"


class EventLoop:
    """Drives one dashboard session.

    The input poll is the only wait. All input read in one iteration is
    dispatched before anything is drawn, and a frame is written only when
    something observable changed. ``stop`` and ``request_redraw`` only flip
    flags, so signal handlers may call them.
    """

    def __init__(
        self,
        dashboard: Dashboard,
        terminal: Terminal,
        compositor: Compositor,
        interval: float,
        clock: Callable[[], float] = time.monotonic,
        poll_timeout: float = POLL_TIMEOUT,
    ) -> None:
        self.dashboard = dashboard
        self.terminal = terminal
        self.compositor = compositor
        self.interval = interval
        self.clock = clock
        self.poll_timeout = poll_timeout
        self.state = LoopState.RUNNING
        self.dirty = True
        self.frames = 0
        self._refresh_requested = True
        self._last_refresh: float | None = None

    @property
    def running(self) -> bool:
        return self.state is LoopState.RUNNING

    def stop(self) -> None:
        self.state = LoopState.STOPPED

    def request_redraw(self) -> None:
        self.dirty = True

    def request_refresh(self) -> None:
        self._refresh_requested = True

    def step(self) -> None:
        data = self.terminal.read(self.poll_timeout)
        for event in decode(data) if data else ():
            result = self.dashboard.dispatch(event)
            if result.quit:
                logger.info("quit requested")
                self.stop()
                return
            if result.refresh:
                self._refresh_requested = True
            if result.dirty:
                self.dirty = True

        now = self.clock()
        if self._refresh_requested or self._last_refresh is None or now - self._last_refresh >= self.interval:
            self.dashboard.refresh_all()
            self._last_refresh = now
            self._refresh_requested = False
            self.dirty = True

        if self.dirty:
            self.compositor.screen_cache.invalidate()
            self.terminal.write(self.compositor.frame(self.dashboard))
            self.frames += 1
            self.dirty = False

    def run(self) -> None:
        while self.state is LoopState.RUNNING:
            self.step()
