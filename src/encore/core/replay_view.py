"""Read-only projections of playback state used by the replay window.

Kept free of wx so the rendering rules can be unit-tested headless.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from encore.core.captions import screen_start_word
from encore.core.i18n import gettext as _
from encore.core.meeting import MeetingDetail, SenderType
from encore.core.replay_items import ReplayItem

if TYPE_CHECKING:  # pragma: no cover - typing only
    from encore.playback.cursor import PlaybackState


class WordState(Enum):
    SPOKEN = "spoken"
    ACTIVE = "active"
    UPCOMING = "upcoming"


def current_item(playlist: Sequence[ReplayItem], state: "PlaybackState") -> Optional[ReplayItem]:
    index = state.current_index
    return playlist[index] if 0 <= index < len(playlist) else None


def visible_items(playlist: Sequence[ReplayItem], state: "PlaybackState") -> List[ReplayItem]:
    """Chat thread contents: every item up to and including the current one."""

    return list(playlist[: state.current_index + 1])


def caption_words(state: "PlaybackState") -> List[Tuple[str, WordState]]:
    screens = state.caption_screens
    if not 0 <= state.caption_screen_index < len(screens):
        return []
    start = screen_start_word(screens, state.caption_screen_index)
    words: List[Tuple[str, WordState]] = []
    for offset, word in enumerate(screens[state.caption_screen_index]):
        position = start + offset
        if position == state.caption_word_index:
            words.append((word, WordState.ACTIVE))
        elif position < state.caption_word_index:
            words.append((word, WordState.SPOKEN))
        else:
            words.append((word, WordState.UPCOMING))
    return words


_CURRENT_MARKER = "\u25b6 "
_HUMAN_INDENT = "        "


def thread_entry(item: ReplayItem, *, current: bool) -> str:
    """One chat thread line.

    The current item carries a marker, human messages are indented to set
    them apart from agent turns, and system messages are tagged.
    """

    marker = _CURRENT_MARKER if current else "  "
    if item.sender_type is SenderType.HUMAN:
        return f"{marker}{_HUMAN_INDENT}{item.speaker_name}: {item.content}"
    if item.sender_type is SenderType.SYSTEM:
        return f"{marker}[{_('system')}] {item.content}"
    return f"{marker}{item.speaker_name}: {item.content}"


def show_speaker_banner(item: Optional[ReplayItem]) -> bool:
    return item is not None and item.sender_type is SenderType.AGENT


def show_summary(meeting: MeetingDetail, state: "PlaybackState") -> bool:
    return bool(meeting.summary) and state.current_index < 0


def progress_fraction(playlist_length: int, state: "PlaybackState") -> float:
    if playlist_length <= 0:
        return 0.0
    return (state.current_index + 1) / playlist_length


def progress_label(playlist_length: int, state: "PlaybackState") -> str:
    return _("{position} / {total} messages").format(position=state.current_index + 1, total=playlist_length)


def speed_label(speed: float) -> str:
    return f"{speed:g}x"


def can_skip_back(state: "PlaybackState") -> bool:
    return state.current_index > 0


def can_skip_forward(playlist_length: int, state: "PlaybackState") -> bool:
    return state.current_index < playlist_length - 1


__all__ = [
    "WordState",
    "can_skip_back",
    "can_skip_forward",
    "caption_words",
    "current_item",
    "progress_fraction",
    "progress_label",
    "show_speaker_banner",
    "show_summary",
    "speed_label",
    "thread_entry",
    "visible_items",
]
