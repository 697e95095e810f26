from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from encore.core.meeting import SenderType
from encore.core.meeting_io import (
    MeetingNotFoundError,
    load_meeting,
    parse_messages,
    resolve_audio_url,
)


def _write_yaml(path: Path, document) -> Path:
    path.write_text(yaml.safe_dump(document), encoding="utf-8")
    return path


def test_load_yaml_meeting_with_snake_case_keys(tmp_path: Path) -> None:
    path = _write_yaml(
        tmp_path / "meeting.yaml",
        {
            "meeting": {
                "id": "m-1",
                "title": "Weekly sync",
                "started_at": "2024-05-01T10:00:00Z",
                "summary": "Shipped the release.",
                "action_items": [{"description": "Write notes", "assignee": "Ana"}, "Book room"],
                "agents": [{"id": "bot", "name": "Scribe", "icon_name": "edit", "icon_color": "#112233"}],
            },
            "messages": [
                {"id": "1", "sender_type": "agent", "sender_id": "bot", "content": "Hello.", "audio_key": "a.wav"},
                {"id": "2", "sender_type": "human", "sender_id": "u1", "content": "Hi."},
            ],
        },
    )

    transcript = load_meeting(path)

    assert transcript.meeting.id == "m-1"
    assert transcript.meeting.summary == "Shipped the release."
    assert [item.description for item in transcript.meeting.action_items] == ["Write notes", "Book room"]
    assert transcript.meeting.action_items[0].assignee == "Ana"
    assert transcript.meeting.agent_map()["bot"].icon_color == "#112233"
    assert [m.sender_type for m in transcript.messages] == [SenderType.AGENT, SenderType.HUMAN]
    assert transcript.messages[0].audio_key == "a.wav"
    assert transcript.messages[1].audio_key is None


def test_load_json_meeting_with_camel_case_keys(tmp_path: Path) -> None:
    path = tmp_path / "meeting.json"
    path.write_text(
        json.dumps(
            {
                "meeting": {
                    "id": "m-2",
                    "title": "Retro",
                    "startedAt": "2024-05-02",
                    "actionItems": [],
                    "agents": [{"id": "bot", "name": "Scribe", "iconName": "mic"}],
                    "channelId": "c-9",
                },
                "messages": [
                    {
                        "senderType": "AGENT",
                        "senderId": "bot",
                        "content": "Notes follow.",
                        "audioKey": "clips/1.mp3",
                        "audioDurationMs": 1800,
                        "createdAt": "2024-05-02T09:00:00Z",
                    }
                ],
            }
        ),
        encoding="utf-8",
    )

    transcript = load_meeting(path)

    assert transcript.meeting.started_at == "2024-05-02"
    assert not hasattr(transcript.meeting, "channel_id")
    assert transcript.meeting.summary is None
    assert transcript.meeting.agents[0].icon_name == "mic"
    message = transcript.messages[0]
    assert message.id == "0"
    assert message.sender_type is SenderType.AGENT
    assert message.audio_duration_ms == 1800.0
    assert message.created_at == "2024-05-02T09:00:00Z"


def test_missing_file_raises_not_found(tmp_path: Path) -> None:
    with pytest.raises(MeetingNotFoundError):
        load_meeting(tmp_path / "absent.yaml")


@pytest.mark.parametrize(
    "content",
    [
        "just a string",
        "messages: []\n",
        "meeting: [1, 2]\n",
        "meeting:\n  title: No id\n",
        "meeting: {id: x\n",
    ],
)
def test_unusable_documents_raise_not_found(tmp_path: Path, content: str) -> None:
    path = tmp_path / "meeting.yaml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(MeetingNotFoundError):
        load_meeting(path)


def test_non_list_messages_are_ignored(tmp_path: Path) -> None:
    path = _write_yaml(tmp_path / "meeting.yaml", {"meeting": {"id": "m"}, "messages": {"id": "1"}})

    assert load_meeting(path).messages == []


def test_message_limit_and_malformed_entries() -> None:
    entries = ["garbage", {"content": "a"}, None, {"content": "b"}, {"content": "c"}]

    messages = parse_messages(entries, limit=2)

    assert [m.content for m in messages] == ["a", "b"]
    assert [m.id for m in messages] == ["1", "3"]


def test_unknown_sender_type_and_bad_duration() -> None:
    messages = parse_messages(
        [
            {"sender_type": "robot", "content": "x", "audio_duration_ms": "soon"},
            {"sender_type": "human", "content": "y", "audio_duration_ms": 0},
        ]
    )

    assert messages[0].sender_type is SenderType.SYSTEM
    assert messages[0].audio_duration_ms is None
    assert messages[1].audio_duration_ms is None


def test_resolve_audio_url(tmp_path: Path) -> None:
    assert resolve_audio_url(None, tmp_path) is None
    assert resolve_audio_url("", tmp_path) is None
    assert resolve_audio_url("clips/a.wav", tmp_path) == str((tmp_path / "clips" / "a.wav").resolve())
    absolute = tmp_path / "b.wav"
    assert resolve_audio_url(str(absolute), Path("/elsewhere")) == str(absolute.resolve())
