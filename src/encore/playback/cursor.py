"""Playlist cursor: the replay state machine and its transport controls."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Callable, Iterator, List, Optional, Tuple

from encore.audio.channel import AudioChannel, AudioHandle
from encore.core.captions import DEFAULT_WORDS_PER_SCREEN, CaptionScreen, build_screens, total_words
from encore.core.replay_items import Playlist, ReplayItem
from encore.core.timing import (
    DEFAULT_ADVANCE_PAUSE_MS,
    DEFAULT_MS_PER_WORD,
    advance_pause_ms,
    estimate_duration_ms,
    next_speed,
    validate_speed,
    word_interval_ms,
)
from encore.playback.clock import Clock, TimerHandle
from encore.playback.word_clock import WordClock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaybackState:
    current_index: int = -1
    playing: bool = False
    speed: float = 1.0
    caption_screens: Tuple[CaptionScreen, ...] = ()
    caption_screen_index: int = 0
    caption_word_index: int = 0


StateListener = Callable[[PlaybackState], None]


class PlaylistCursor:
    """Drives replay of one playlist.

    The cursor is the only writer of `PlaybackState`. Views read `state` or
    subscribe to snapshots and call the transport methods (`toggle_play`,
    `skip_forward`, `skip_back`, `jump_to`, `cycle_speed`).

    Every item start tears down the previous item's word clock, pending
    advance timer and audio handle before creating new ones, and each
    callback carries the generation it was created for, so work belonging to
    an earlier item can never touch the state of the current one.
    """

    def __init__(
        self,
        playlist: Playlist,
        *,
        clock: Clock,
        audio: Optional[AudioChannel] = None,
        speed: float = 1.0,
        ms_per_word: float = DEFAULT_MS_PER_WORD,
        advance_pause_ms: float = DEFAULT_ADVANCE_PAUSE_MS,
        words_per_screen: int = DEFAULT_WORDS_PER_SCREEN,
    ) -> None:
        self._playlist = tuple(playlist)
        self._clock = clock
        self._audio = audio
        self._ms_per_word = ms_per_word
        self._advance_pause_ms = advance_pause_ms
        self._words_per_screen = words_per_screen
        self._state = PlaybackState(speed=validate_speed(speed))
        self._listeners: List[StateListener] = []
        self._word_clock = WordClock(clock)
        self._advance_timer: Optional[TimerHandle] = None
        self._audio_handle: Optional[AudioHandle] = None
        self._generation = 0
        self._batch_depth = 0
        self._dirty = False
        self._disposed = False

    # --- read side ---
    @property
    def playlist(self) -> Playlist:
        return self._playlist

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def current_item(self) -> Optional[ReplayItem]:
        index = self._state.current_index
        return self._playlist[index] if 0 <= index < len(self._playlist) else None

    @property
    def audio_handle(self) -> Optional[AudioHandle]:
        return self._audio_handle

    @property
    def word_clock_running(self) -> bool:
        return self._word_clock.running

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register `listener` for state snapshots; return an unsubscribe function."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # --- transport controls ---
    def toggle_play(self) -> None:
        if self._disposed:
            return
        with self._batch():
            if self._state.playing:
                self._teardown()
                self._update(playing=False)
            else:
                self._update(playing=True)
                self.play_item(max(self._state.current_index, 0))

    def skip_forward(self) -> None:
        target = self._state.current_index + 1
        if target < len(self._playlist):
            self.play_item(target)

    def skip_back(self) -> None:
        target = self._state.current_index - 1
        if target >= 0:
            self.play_item(target)

    def jump_to(self, index: int) -> None:
        if self._disposed or not 0 <= index < len(self._playlist):
            return
        with self._batch():
            self._update(playing=True)
            self.play_item(index)

    def cycle_speed(self) -> float:
        if self._disposed:
            return self._state.speed
        speed = next_speed(self._state.speed)
        if self._audio is not None and self._audio_handle is not None:
            self._audio.set_rate(self._audio_handle, speed)
        self._update(speed=speed)
        logger.debug("Playback speed set to %.1fx", speed)
        return speed

    # --- core primitive ---
    def play_item(self, index: int) -> None:
        """Start replaying item `index`; out-of-range indices stop playback."""

        if self._disposed:
            return
        with self._batch():
            self._teardown()
            if not 0 <= index < len(self._playlist):
                self._update(playing=False)
                return
            item = self._playlist[index]
            screens = tuple(build_screens(item.content, self._words_per_screen))
            self._update(
                current_index=index,
                caption_screens=screens,
                caption_screen_index=0,
                caption_word_index=0,
            )
            words = total_words(screens)
            speed = self._state.speed
            duration = estimate_duration_ms(
                words,
                item.audio_duration_ms,
                speed,
                ms_per_word=self._ms_per_word,
            )
            generation = self._generation
            logger.debug(
                "Replaying item %d (%s): %d words, %.0f ms at %.1fx",
                index,
                item.speaker_name,
                words,
                duration,
                speed,
            )

            if item.audio_url and self._audio is not None:
                self._audio_handle = self._audio.play(
                    item.audio_url,
                    speed,
                    on_complete=lambda: self._advance_from(generation, index),
                    on_failed=lambda: self._on_audio_failed(generation, index),
                )

            if words == 0:
                if self._audio_handle is None:
                    self._schedule_advance(generation, index)
                return

            self._word_clock.start(
                screens,
                word_interval_ms(duration, words),
                on_position=lambda screen, word: self._on_word(generation, screen, word),
                on_exhausted=lambda: self._on_captions_done(generation, index),
            )

    def dispose(self) -> None:
        """Release timers and audio; the cursor ignores every later call."""

        if self._disposed:
            return
        self._teardown()
        if self._audio is not None:
            self._audio.close()
        self._listeners.clear()
        self._disposed = True

    # --- internals ---
    def _teardown(self) -> None:
        self._generation += 1
        self._word_clock.stop()
        timer, self._advance_timer = self._advance_timer, None
        if timer is not None:
            timer.cancel()
        handle, self._audio_handle = self._audio_handle, None
        if handle is not None and self._audio is not None:
            self._audio.stop(handle)

    def _on_word(self, generation: int, screen_index: int, word_index: int) -> None:
        if generation != self._generation:
            return
        self._update(caption_screen_index=screen_index, caption_word_index=word_index)

    def _on_captions_done(self, generation: int, index: int) -> None:
        if generation != self._generation:
            return
        if self._audio_is_playing():
            # the audio end event advances
            return
        self._schedule_advance(generation, index)

    def _on_audio_failed(self, generation: int, index: int) -> None:
        if generation != self._generation or self._disposed:
            return
        self._audio_handle = None
        if self._word_clock.running:
            # exhaustion schedules the advance now that no audio is live
            return
        if self._advance_timer is None or not self._advance_timer.active:
            self._schedule_advance(generation, index)

    def _audio_is_playing(self) -> bool:
        if self._audio is None or self._audio_handle is None:
            return False
        return self._audio.is_playing(self._audio_handle)

    def _schedule_advance(self, generation: int, index: int) -> None:
        delay = advance_pause_ms(self._state.speed, base_pause_ms=self._advance_pause_ms)
        self._advance_timer = self._clock.call_later(delay, lambda: self._advance_from(generation, index))

    def _advance_from(self, generation: int, index: int) -> None:
        if generation != self._generation or self._disposed:
            logger.debug("Ignoring stale advance from item %d", index)
            return
        # play_item stops playback when index + 1 is past the end
        self.play_item(index + 1)

    @contextmanager
    def _batch(self) -> Iterator[None]:
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._dirty:
                self._dirty = False
                self._publish()

    def _update(self, **changes) -> None:
        new_state = replace(self._state, **changes)
        if new_state == self._state:
            return
        self._state = new_state
        if self._batch_depth:
            self._dirty = True
        else:
            self._publish()

    def _publish(self) -> None:
        snapshot = self._state
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:  # pylint: disable=broad-except
                logger.exception("Playback state listener failed")
