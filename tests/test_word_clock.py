from __future__ import annotations

import pytest

from encore.playback.clock import ManualClock
from encore.playback.word_clock import WordClock

SCREENS = [("one", "two", "three"), ("four", "five")]


def _recorder():
    positions: list[tuple[int, int]] = []
    exhausted: list[float] = []
    return positions, exhausted


def test_word_clock_reports_each_word_then_exhausts(clock: ManualClock) -> None:
    positions, exhausted = _recorder()
    word_clock = WordClock(clock)

    word_clock.start(SCREENS, 100, lambda s, w: positions.append((s, w)), lambda: exhausted.append(clock.now_ms))
    clock.run_until_idle()

    assert positions == [(0, 1), (0, 2), (1, 3), (1, 4)]
    assert exhausted == [500]
    assert not word_clock.running
    assert clock.pending() == 0


def test_restart_discards_previous_run(clock: ManualClock) -> None:
    first, first_done = _recorder()
    second, second_done = _recorder()
    word_clock = WordClock(clock)

    word_clock.start(SCREENS, 100, lambda s, w: first.append((s, w)), lambda: first_done.append(1))
    clock.advance(150)
    word_clock.start([("solo", "pair")], 40, lambda s, w: second.append((s, w)), lambda: second_done.append(1))
    clock.run_until_idle()

    assert first == [(0, 1)]
    assert first_done == []
    assert second == [(0, 1)]
    assert second_done == [1]


def test_stop_prevents_further_ticks(clock: ManualClock) -> None:
    positions, exhausted = _recorder()
    word_clock = WordClock(clock)
    word_clock.start(SCREENS, 100, lambda s, w: positions.append((s, w)), lambda: exhausted.append(1))

    clock.advance(200)
    word_clock.stop()
    clock.advance(1000)

    assert positions == [(0, 1), (0, 2)]
    assert exhausted == []
    assert not word_clock.running


def test_single_word_exhausts_on_first_tick(clock: ManualClock) -> None:
    exhausted: list[float] = []
    word_clock = WordClock(clock)

    word_clock.start([("hello",)], 250, lambda s, w: None, lambda: exhausted.append(clock.now_ms))
    clock.run_until_idle()

    assert exhausted == [250]


@pytest.mark.parametrize("screens, interval", [([], 100), (SCREENS, 0)])
def test_invalid_start_rejected(clock: ManualClock, screens, interval) -> None:
    with pytest.raises(ValueError):
        WordClock(clock).start(screens, interval, lambda s, w: None, lambda: None)
