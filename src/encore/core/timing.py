"""Display-duration estimates for replayed messages.

Audio assets usually come with a known duration. When they do not (or the
message has no audio at all) the caption pace falls back to a fixed number of
milliseconds per word. Every value is scaled by the playback speed.
"""

from __future__ import annotations

from typing import Optional

PLAYBACK_SPEEDS: tuple[float, ...] = (1.0, 1.5, 2.0)
DEFAULT_MS_PER_WORD = 250.0
DEFAULT_ADVANCE_PAUSE_MS = 1000.0


def validate_speed(speed: float) -> float:
    value = float(speed)
    if value not in PLAYBACK_SPEEDS:
        raise ValueError(f"Unsupported playback speed: {speed!r}")
    return value


def next_speed(speed: float) -> float:
    """Return the speed following `speed`, wrapping after the fastest one."""

    index = PLAYBACK_SPEEDS.index(validate_speed(speed))
    return PLAYBACK_SPEEDS[(index + 1) % len(PLAYBACK_SPEEDS)]


def estimate_duration_ms(
    total_words: int,
    known_duration_ms: Optional[float],
    speed: float,
    *,
    ms_per_word: float = DEFAULT_MS_PER_WORD,
) -> float:
    """Return how long a message stays on screen at `speed`.

    A message without words is complete immediately, regardless of any audio
    duration reported for it.
    """

    speed = validate_speed(speed)
    if total_words <= 0:
        return 0.0
    if known_duration_ms is not None and known_duration_ms > 0:
        return float(known_duration_ms) / speed
    return (total_words * ms_per_word) / speed


def word_interval_ms(duration_ms: float, total_words: int) -> float:
    if total_words <= 0:
        return 0.0
    return duration_ms / total_words


def advance_pause_ms(speed: float, *, base_pause_ms: float = DEFAULT_ADVANCE_PAUSE_MS) -> float:
    """Pause on the final word of an audio-less message before moving on."""

    return base_pause_ms / validate_speed(speed)


__all__ = [
    "DEFAULT_ADVANCE_PAUSE_MS",
    "DEFAULT_MS_PER_WORD",
    "PLAYBACK_SPEEDS",
    "advance_pause_ms",
    "estimate_duration_ms",
    "next_speed",
    "validate_speed",
    "word_interval_ms",
]
