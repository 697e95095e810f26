"""Loading meeting documents (YAML or JSON) from disk."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Optional

import yaml

from encore.core.meeting import (
    ActionItem,
    MeetingAgent,
    MeetingDetail,
    MeetingTranscript,
    SenderType,
    TranscriptMessage,
)

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE_LIMIT = 500


class MeetingNotFoundError(LookupError):
    """Raised when a meeting document is missing or unusable."""


def _pick(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_agents(entries: Iterable[Any]) -> list[MeetingAgent]:
    agents: list[MeetingAgent] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        agent_id = _optional_str(_pick(entry, "id"))
        if not agent_id:
            logger.debug("Skipping agent without id: %r", entry)
            continue
        agents.append(
            MeetingAgent(
                id=agent_id,
                name=str(_pick(entry, "name", default=agent_id)),
                icon_name=_optional_str(_pick(entry, "icon_name", "iconName")),
                icon_color=_optional_str(_pick(entry, "icon_color", "iconColor")),
            )
        )
    return agents


def _parse_action_items(entries: Iterable[Any]) -> list[ActionItem]:
    items: list[ActionItem] = []
    for entry in entries:
        if isinstance(entry, dict):
            description = _optional_str(_pick(entry, "description"))
            if description:
                items.append(ActionItem(description=description, assignee=str(_pick(entry, "assignee", default=""))))
        elif isinstance(entry, str) and entry.strip():
            items.append(ActionItem(description=entry.strip()))
    return items


def parse_meeting(data: dict[str, Any]) -> MeetingDetail:
    meeting_id = _optional_str(_pick(data, "id"))
    if not meeting_id:
        raise MeetingNotFoundError("Meeting document has no id")
    return MeetingDetail(
        id=meeting_id,
        title=str(_pick(data, "title", default="")),
        started_at=str(_pick(data, "started_at", "startedAt", default="")),
        summary=_optional_str(_pick(data, "summary")),
        action_items=_parse_action_items(_pick(data, "action_items", "actionItems", default=[]) or []),
        agents=_parse_agents(_pick(data, "agents", default=[]) or []),
    )


def parse_messages(entries: Iterable[Any], *, limit: int = DEFAULT_MESSAGE_LIMIT) -> list[TranscriptMessage]:
    messages: list[TranscriptMessage] = []
    for position, entry in enumerate(entries):
        if len(messages) >= limit:
            logger.info("Transcript truncated to %d messages", limit)
            break
        if not isinstance(entry, dict):
            logger.debug("Skipping malformed message at position %d", position)
            continue
        messages.append(
            TranscriptMessage(
                id=str(_pick(entry, "id", default=position)),
                sender_type=SenderType.parse(_pick(entry, "sender_type", "senderType", default="system")),
                sender_id=str(_pick(entry, "sender_id", "senderId", default="")),
                content=str(_pick(entry, "content", default="")),
                created_at=str(_pick(entry, "created_at", "createdAt", default="")),
                audio_key=_optional_str(_pick(entry, "audio_key", "audioKey")),
                audio_duration_ms=_optional_float(_pick(entry, "audio_duration_ms", "audioDurationMs")),
            )
        )
    return messages


def _read_document(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as file:
        if path.suffix.lower() == ".json":
            return json.load(file)
        return yaml.safe_load(file)


def load_meeting(path: Path, *, message_limit: int = DEFAULT_MESSAGE_LIMIT) -> MeetingTranscript:
    """Read a meeting document and its transcript.

    Any problem that leaves no usable meeting (missing file, parse error, no
    ``meeting`` mapping) is reported as `MeetingNotFoundError`.
    """

    path = Path(path)
    if not path.is_file():
        raise MeetingNotFoundError(f"Meeting file not found: {path}")
    try:
        document = _read_document(path)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise MeetingNotFoundError(f"Cannot read meeting file {path}: {exc}") from exc
    if not isinstance(document, dict) or not isinstance(document.get("meeting"), dict):
        raise MeetingNotFoundError(f"No meeting found in {path}")
    meeting = parse_meeting(document["meeting"])
    raw_messages = document.get("messages") or []
    if not isinstance(raw_messages, list):
        logger.warning("Ignoring non-list messages in %s", path)
        raw_messages = []
    messages = parse_messages(raw_messages, limit=message_limit)
    logger.debug("Loaded meeting %s with %d messages from %s", meeting.id, len(messages), path)
    return MeetingTranscript(meeting=meeting, messages=messages)


def resolve_audio_url(audio_key: Optional[str], base_dir: Path) -> Optional[str]:
    """Map an audio asset key to a playable path.

    Existence is not checked; a missing asset makes playback fall back to
    caption pacing.
    """

    if not audio_key:
        return None
    candidate = Path(audio_key)
    if not candidate.is_absolute():
        candidate = Path(base_dir) / candidate
    return str(candidate.resolve())


__all__ = [
    "DEFAULT_MESSAGE_LIMIT",
    "MeetingNotFoundError",
    "load_meeting",
    "parse_meeting",
    "parse_messages",
    "resolve_audio_url",
]
