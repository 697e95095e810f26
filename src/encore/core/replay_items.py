"""Replay playlist: the per-message projection used during playback."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Optional, Tuple

from encore.core.meeting import MeetingDetail, SenderType, TranscriptMessage
from encore.core.meeting_io import resolve_audio_url

logger = logging.getLogger(__name__)

HUMAN_SPEAKER_NAME = "You"
HUMAN_ICON = "person"
HUMAN_COLOR = "#6B7280"
AGENT_ICON = "smart_toy"
AGENT_COLOR = "#0F4D26"


@dataclass(frozen=True)
class ReplayItem:
    index: int
    speaker_name: str
    speaker_icon: str
    speaker_color: str
    sender_type: SenderType
    content: str
    audio_url: Optional[str] = None
    audio_duration_ms: Optional[float] = None
    created_at: str = ""

    @property
    def has_audio(self) -> bool:
        return bool(self.audio_url)


Playlist = Tuple[ReplayItem, ...]

AudioResolver = Callable[[Optional[str]], Optional[str]]
DurationProbe = Callable[[str], Optional[float]]


def build_playlist(
    meeting: MeetingDetail,
    messages: Iterable[TranscriptMessage],
    *,
    resolve_audio: AudioResolver | None = None,
    probe_duration: DurationProbe | None = None,
) -> Playlist:
    """Map transcript messages, in order, onto replay items.

    Speakers come from the meeting's agent list; senders not listed there fall
    back to a generic human or bot identity. `probe_duration` is consulted only
    for messages that carry audio without a known duration.
    """

    agents = meeting.agent_map()
    resolver = resolve_audio or (lambda key: resolve_audio_url(key, Path.cwd()))
    items = []
    for index, message in enumerate(messages):
        agent = agents.get(message.sender_id)
        is_human = message.sender_type is SenderType.HUMAN
        if agent is not None:
            name = agent.name
        else:
            name = HUMAN_SPEAKER_NAME if is_human else message.sender_id
        icon = (agent.icon_name if agent else None) or (HUMAN_ICON if is_human else AGENT_ICON)
        color = (agent.icon_color if agent else None) or (HUMAN_COLOR if is_human else AGENT_COLOR)

        audio_url = resolver(message.audio_key) if message.audio_key else None
        duration = message.audio_duration_ms
        if audio_url and duration is None and probe_duration is not None:
            duration = probe_duration(audio_url)
            if duration is not None:
                logger.debug("Probed duration %.0f ms for message %s", duration, message.id)

        items.append(
            ReplayItem(
                index=index,
                speaker_name=name,
                speaker_icon=icon,
                speaker_color=color,
                sender_type=message.sender_type,
                content=message.content,
                audio_url=audio_url,
                audio_duration_ms=duration,
                created_at=message.created_at,
            )
        )
    return tuple(items)


__all__ = ["Playlist", "ReplayItem", "build_playlist"]
