"""Meeting and transcript data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class SenderType(Enum):
    AGENT = "agent"
    HUMAN = "human"
    SYSTEM = "system"

    @classmethod
    def parse(cls, value: object) -> "SenderType":
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.SYSTEM


@dataclass(frozen=True)
class MeetingAgent:
    id: str
    name: str
    icon_name: Optional[str] = None
    icon_color: Optional[str] = None


@dataclass(frozen=True)
class ActionItem:
    description: str
    assignee: str = ""


@dataclass
class MeetingDetail:
    id: str
    title: str
    started_at: str
    summary: Optional[str] = None
    action_items: List[ActionItem] = field(default_factory=list)
    agents: List[MeetingAgent] = field(default_factory=list)

    def agent_map(self) -> Dict[str, MeetingAgent]:
        return {agent.id: agent for agent in self.agents}


@dataclass(frozen=True)
class TranscriptMessage:
    id: str
    sender_type: SenderType
    sender_id: str
    content: str
    created_at: str = ""
    audio_key: Optional[str] = None
    audio_duration_ms: Optional[float] = None


@dataclass
class MeetingTranscript:
    """A meeting together with its ordered messages, as loaded from disk."""

    meeting: MeetingDetail
    messages: List[TranscriptMessage] = field(default_factory=list)
