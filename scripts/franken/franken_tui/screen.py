"""Terminal dimension detection with a short-lived cache."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from rich.console import Console

logger = logging.getLogger(__name__)

FALLBACK_SIZE = (80, 24)
MIN_WIDTH, MAX_WIDTH = 20, 1000
MIN_HEIGHT, MAX_HEIGHT = 4, 500
DEFAULT_TTL = 0.5


@dataclass(frozen=True)
class ScreenMetrics:
    width: int
    height: int
    captured_at: float

    @classmethod
    def clamped(cls, width: int, height: int, captured_at: float) -> "ScreenMetrics":
        return cls(
            width=max(MIN_WIDTH, min(int(width), MAX_WIDTH)),
            height=max(MIN_HEIGHT, min(int(height), MAX_HEIGHT)),
            captured_at=captured_at,
        )


def console_probe(console: Console | None = None) -> Callable[[], tuple[int, int]]:
    console = console or Console()

    def probe() -> tuple[int, int]:
        width, height = console.size
        return width, height

    return probe


class ScreenCache:
    """Caches :class:`ScreenMetrics` for ``ttl`` seconds.

    Metrics are replaced wholesale on refresh, never edited. A failing probe
    degrades to an 80x24 screen instead of aborting the session.
    """

    def __init__(
        self,
        probe: Callable[[], tuple[int, int]] | None = None,
        ttl: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._probe = probe or console_probe()
        self._ttl = ttl
        self._clock = clock
        self._metrics: ScreenMetrics | None = None

    def invalidate(self) -> None:
        self._metrics = None

    def current(self) -> ScreenMetrics:
        now = self._clock()
        if self._metrics is None or now - self._metrics.captured_at >= self._ttl:
            self._metrics = self._measure(now)
        return self._metrics

    def _measure(self, now: float) -> ScreenMetrics:
        try:
            width, height = self._probe()
        except (OSError, ValueError, TypeError) as exc:
            logger.warning("terminal size probe failed, using fallback: %s", exc)
            width, height = FALLBACK_SIZE
        return ScreenMetrics.clamped(width, height, now)
