"""Caption screens: message text split into word chunks shown together."""

from __future__ import annotations

import re
from typing import List, Sequence, Tuple

CaptionScreen = Tuple[str, ...]

DEFAULT_WORDS_PER_SCREEN = 20

_SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s+")


def split_sentences(text: str) -> List[str]:
    return [sentence for sentence in _SENTENCE_BREAK.split(text) if sentence.strip()]


def build_screens(text: str, words_per_screen: int = DEFAULT_WORDS_PER_SCREEN) -> List[CaptionScreen]:
    """Split `text` into caption screens.

    Words are collected sentence by sentence. Once the collected words reach
    `words_per_screen` the screen is closed, so a screen never ends in the
    middle of a sentence and a single long sentence stays on one screen. Any
    remainder becomes a final, shorter screen.
    """

    if words_per_screen <= 0:
        raise ValueError("words_per_screen must be positive")
    screens: List[CaptionScreen] = []
    current: List[str] = []
    for sentence in split_sentences(text):
        current.extend(sentence.split())
        if len(current) >= words_per_screen:
            screens.append(tuple(current))
            current = []
    if current:
        screens.append(tuple(current))
    return screens


def total_words(screens: Sequence[CaptionScreen]) -> int:
    return sum(len(screen) for screen in screens)


def screen_start_word(screens: Sequence[CaptionScreen], screen_index: int) -> int:
    """Global index of the first word on `screens[screen_index]`."""

    return sum(len(screen) for screen in screens[: max(0, screen_index)])


def screen_for_word(screens: Sequence[CaptionScreen], word_index: int) -> int:
    """Return the index of the screen holding the global word `word_index`.

    Words past the end map to the last screen; an empty sequence maps to 0.
    """

    count = 0
    for index, screen in enumerate(screens):
        count += len(screen)
        if word_index < count:
            return index
    return max(0, len(screens) - 1)


__all__ = [
    "CaptionScreen",
    "DEFAULT_WORDS_PER_SCREEN",
    "build_screens",
    "screen_for_word",
    "screen_start_word",
    "split_sentences",
    "total_words",
]
