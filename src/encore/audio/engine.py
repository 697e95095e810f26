"""Audio device/backend selection."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from encore.audio.mock_backend import MockBackendProvider
from encore.audio.sounddevice_player import SoundDeviceBackend
from encore.audio.types import AudioDevice, BackendProvider, BackendType, Player
from encore.core.env import force_mock_audio, is_e2e_mode

logger = logging.getLogger(__name__)


class AudioEngine:
    """Manages device discovery and player creation."""

    def __init__(self, providers: Optional[List[BackendProvider]] = None) -> None:
        self._providers: List[BackendProvider] = list(providers or [])
        if not self._providers:
            if is_e2e_mode() or force_mock_audio():
                self._providers.append(MockBackendProvider(label="Encore Mock"))
            else:
                backend = SoundDeviceBackend()
                if backend.is_available:
                    self._providers.append(backend)
                else:
                    logger.error("sounddevice backend unavailable")
        if not self._providers:
            logger.warning("No audio backends available - falling back to mock output")
            self._providers.append(MockBackendProvider(label="Mock fallback"))
        self._devices: Dict[str, AudioDevice] = {}

    def refresh_devices(self) -> None:
        self._devices.clear()
        for provider in self._providers:
            devices = provider.list_devices()
            if not devices:
                logger.debug("Provider %s returned no devices", getattr(provider, "backend", provider))
                continue
            for device in devices:
                self._devices[device.id] = device
        if self._devices:
            logger.debug(
                "Registered %d audio devices: %s",
                len(self._devices),
                ", ".join(f"{d.backend.value}:{d.name}" for d in self._devices.values()),
            )
        else:
            logger.debug("No audio devices detected")

    def get_devices(self) -> List[AudioDevice]:
        if not self._devices:
            self.refresh_devices()
        return list(self._devices.values())

    def default_device(self) -> Optional[AudioDevice]:
        devices = self.get_devices()
        for device in devices:
            if device.is_default:
                return device
        return devices[0] if devices else None

    def create_player(self, device_id: Optional[str] = None) -> Player:
        if not self._devices:
            self.refresh_devices()
        device = self._devices.get(device_id) if device_id else self.default_device()
        if device is None:
            raise ValueError(f"Unknown audio device: {device_id}")
        provider = self._get_provider(device.backend)
        return provider.create_player(device)

    def _get_provider(self, backend: BackendType) -> BackendProvider:
        for provider in self._providers:
            if provider.backend is backend:
                return provider
        raise ValueError(f"No provider for backend {backend}")
