from __future__ import annotations

import pytest

from fakes import FakePlayer

from encore.audio.channel import AudioChannel
from encore.playback.clock import ManualClock


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    for name in ("ENCORE_CONFIG_PATH", "ENCORE_CONFIG_DIR", "ENCORE_E2E", "ENCORE_FORCE_MOCK_AUDIO"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def player() -> FakePlayer:
    return FakePlayer()


@pytest.fixture
def channel(player: FakePlayer) -> AudioChannel:
    return AudioChannel(lambda: player)
