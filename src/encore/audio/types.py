"""Audio type definitions shared by the backends and the channel."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Protocol


class BackendType(Enum):
    SOUNDDEVICE = "sounddevice"
    MOCK = "mock"


@dataclass
class AudioDevice:
    id: str
    name: str
    backend: BackendType
    raw_index: Optional[int] = None
    is_default: bool = False


class Player(Protocol):
    def play(self, item_id: str, source_path: str, *, rate: float = 1.0) -> None: ...

    def is_active(self) -> bool: ...

    def stop(self) -> None: ...

    def set_rate(self, rate: float) -> None: ...

    def set_finished_callback(self, callback: Optional[Callable[[str], None]]) -> None: ...

    def set_failed_callback(self, callback: Optional[Callable[[str], None]]) -> None: ...


class BackendProvider(Protocol):
    backend: BackendType

    def list_devices(self) -> List[AudioDevice]: ...

    def create_player(self, device: AudioDevice) -> Player: ...
