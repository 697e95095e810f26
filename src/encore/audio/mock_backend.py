"""Mock audio backend used by tests and fallback flows."""

from __future__ import annotations

import logging
from threading import Lock, Timer
from typing import Callable, List, Optional

from encore.audio.types import AudioDevice, BackendType, Player

logger = logging.getLogger(__name__)

_TICK_SECONDS = 0.1


class MockPlayer:
    """Silent player that pretends to play for `length_seconds` of media time."""

    def __init__(self, device: AudioDevice, *, length_seconds: float = 1.0):
        self.device = device
        self.length_seconds = max(0.0, length_seconds)
        self._lock = Lock()
        self._current_item: Optional[str] = None
        self._timer: Optional[Timer] = None
        self._on_finished: Optional[Callable[[str], None]] = None
        self._on_failed: Optional[Callable[[str], None]] = None
        self._position: float = 0.0
        self._rate: float = 1.0

    def play(self, item_id: str, source_path: str, *, rate: float = 1.0) -> None:
        self.stop()
        with self._lock:
            self._current_item = item_id
            self._position = 0.0
            self._rate = rate
            logger.info("[MOCK] Playing %s on %s (%s) at %.2fx", source_path, self.device.name, item_id, rate)
            self._schedule_locked()

    def is_active(self) -> bool:
        return bool(self._current_item)

    def stop(self) -> None:
        with self._lock:
            if self._timer:
                self._timer.cancel()
                self._timer = None
            if self._current_item:
                logger.info("[MOCK] Stop %s", self._current_item)
                self._current_item = None

    def set_rate(self, rate: float) -> None:
        with self._lock:
            self._rate = rate

    @property
    def rate(self) -> float:
        return self._rate

    @property
    def position_seconds(self) -> float:
        return self._position

    def set_finished_callback(self, callback: Optional[Callable[[str], None]]) -> None:
        self._on_finished = callback

    def set_failed_callback(self, callback: Optional[Callable[[str], None]]) -> None:
        self._on_failed = callback

    def _schedule_locked(self) -> None:
        self._timer = Timer(_TICK_SECONDS, self._tick)
        self._timer.daemon = True
        self._timer.start()

    def _tick(self) -> None:
        with self._lock:
            item_id = self._current_item
            if not item_id:
                return
            self._position += _TICK_SECONDS * self._rate
            if self._position < self.length_seconds:
                self._schedule_locked()
                return
            self._current_item = None
            self._timer = None
            callback = self._on_finished
        if callback:
            try:
                callback(item_id)
            except Exception as exc:  # pylint: disable=broad-except
                logger.error("Playback finished callback failed: %s", exc)


class MockBackendProvider:
    """Backend without real audio devices."""

    backend = BackendType.MOCK

    def __init__(self, label: str = "Mock Device", *, length_seconds: float = 1.0) -> None:
        self._label = label
        self._length_seconds = length_seconds

    def list_devices(self) -> List[AudioDevice]:
        return [
            AudioDevice(
                id="mock:default",
                name=self._label,
                backend=self.backend,
                raw_index=None,
                is_default=True,
            )
        ]

    def create_player(self, device: AudioDevice) -> Player:
        return MockPlayer(device, length_seconds=self._length_seconds)
