"""Timer sources driving caption pacing.

The playback engine only talks to the `Clock` protocol so the scheduling
primitive can be swapped: `encore.ui.wx_clock.WxClock` runs timers on the wx
event loop, `ManualClock` advances virtual time on demand for tests and
headless tooling. This module is wx-free.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


class Clock(Protocol):
    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle: ...

    def call_every(self, interval_ms: float, callback: Callable[[], None]) -> TimerHandle: ...


@dataclass(eq=False)
class ManualTimer:
    interval_ms: Optional[float]
    callback: Callable[[], None] = field(repr=False)
    active: bool = True
    fired: int = 0

    def cancel(self) -> None:
        self.active = False


class ManualClock:
    """Deterministic clock: timers fire only inside `advance`."""

    def __init__(self) -> None:
        self.now_ms: float = 0.0
        self._queue: List[tuple[float, int, ManualTimer]] = []
        self._seq = itertools.count()

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(interval_ms=None, callback=callback)
        self._push(self.now_ms + max(0.0, delay_ms), timer)
        return timer

    def call_every(self, interval_ms: float, callback: Callable[[], None]) -> ManualTimer:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        timer = ManualTimer(interval_ms=interval_ms, callback=callback)
        self._push(self.now_ms + interval_ms, timer)
        return timer

    def _push(self, due_ms: float, timer: ManualTimer) -> None:
        heapq.heappush(self._queue, (due_ms, next(self._seq), timer))

    def active_timers(self) -> List[ManualTimer]:
        return [timer for _due, _seq, timer in self._queue if timer.active]

    def pending(self) -> int:
        return len(self.active_timers())

    def advance(self, ms: float) -> None:
        """Move virtual time forward by `ms`, firing every timer that comes due."""

        target = self.now_ms + ms
        while self._queue and self._queue[0][0] <= target:
            due, _seq, timer = heapq.heappop(self._queue)
            if not timer.active:
                continue
            self.now_ms = due
            if timer.interval_ms is None:
                timer.active = False
            timer.fired += 1
            timer.callback()
            if timer.active and timer.interval_ms is not None:
                self._push(due + timer.interval_ms, timer)
        self.now_ms = target

    def run_until_idle(self, *, max_steps: int = 100_000) -> int:
        """Fire timers in order until none remain; return the number of steps taken."""

        fired = 0
        while fired < max_steps:
            while self._queue and not self._queue[0][2].active:
                heapq.heappop(self._queue)
            if not self._queue:
                return fired
            self.advance(self._queue[0][0] - self.now_ms)
            fired += 1
        raise RuntimeError(f"Clock still busy after {max_steps} steps")
