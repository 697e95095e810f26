"""Word-by-word caption highlight timer."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from encore.core.captions import CaptionScreen, screen_for_word, total_words
from encore.playback.clock import Clock, TimerHandle

logger = logging.getLogger(__name__)

PositionCallback = Callable[[int, int], None]


class WordClock:
    """Advances a word cursor through caption screens at a fixed cadence.

    Word 0 counts as shown when the clock starts. Each tick moves the cursor
    one word forward and reports ``(screen_index, word_index)``; the tick that
    moves past the final word stops the clock and reports exhaustion instead.
    Only one run is alive at a time: `start` discards the previous run, and a
    generation counter drops ticks from runs that were already discarded.
    """

    def __init__(self, clock: Clock) -> None:
        self._clock = clock
        self._timer: Optional[TimerHandle] = None
        self._generation = 0

    @property
    def running(self) -> bool:
        return self._timer is not None and self._timer.active

    def start(
        self,
        screens: Sequence[CaptionScreen],
        interval_ms: float,
        on_position: PositionCallback,
        on_exhausted: Callable[[], None],
    ) -> None:
        self.stop()
        total = total_words(screens)
        if total <= 0 or interval_ms <= 0:
            raise ValueError("WordClock needs at least one word and a positive interval")
        generation = self._generation
        state = {"cursor": 0}

        def _tick() -> None:
            if generation != self._generation:
                logger.debug("Dropping tick from stale word clock run %d", generation)
                return
            state["cursor"] += 1
            cursor = state["cursor"]
            if cursor < total:
                on_position(screen_for_word(screens, cursor), cursor)
                return
            self.stop()
            on_exhausted()

        self._timer = self._clock.call_every(interval_ms, _tick)

    def stop(self) -> None:
        self._generation += 1
        timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()
