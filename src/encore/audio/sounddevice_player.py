"""Player rendering audio files through sounddevice + soundfile."""

from __future__ import annotations

import logging
from pathlib import Path
from threading import Event, Lock, Thread, current_thread
from typing import Callable, List, Optional

from encore.audio.resampling import RateStepper, resample_to_length
from encore.audio.types import AudioDevice, BackendType, Player

logger = logging.getLogger(__name__)

try:
    import sounddevice as sd
except (ImportError, OSError):  # pragma: no cover - PortAudio missing
    sd = None

try:
    import soundfile as sf
except (ImportError, OSError):  # pragma: no cover - libsndfile missing
    sf = None

_BLOCK_FRAMES = 4096


class SoundDevicePlayer:
    """Plays one file at a time with a variable playback rate.

    Rate changes resample each block on the fly, so the pitch follows the
    speed (no time-stretching). Callbacks fire from the playback thread:
    the finished callback when the file ran to its end, the failed callback
    when the stream broke off with an error. Neither fires after `stop`.
    """

    def __init__(self, device: AudioDevice, stream_kwargs: Optional[dict] = None):
        if sd is None:
            raise RuntimeError("sounddevice is not available")
        if sf is None:
            raise RuntimeError("soundfile is not available")
        self.device = device
        self._stream_kwargs = stream_kwargs or {}
        self._lock = Lock()
        self._thread: Optional[Thread] = None
        self._stop_event: Optional[Event] = None
        self._current_item: Optional[str] = None
        self._stepper = RateStepper()
        self._on_finished: Optional[Callable[[str], None]] = None
        self._on_failed: Optional[Callable[[str], None]] = None

    def play(self, item_id: str, source_path: str, *, rate: float = 1.0) -> None:
        self.stop()
        path = Path(source_path)
        try:
            sound_file = sf.SoundFile(str(path))
        except Exception as exc:  # pylint: disable=broad-except
            raise RuntimeError(f"Cannot open audio file {path}: {exc}") from exc

        stop_event = Event()
        with self._lock:
            self._stop_event = stop_event
            self._current_item = item_id
            self._stepper = RateStepper(rate)
            stepper = self._stepper

        def _run() -> None:
            completed = False
            try:
                with sound_file, sd.OutputStream(
                    device=self.device.raw_index,
                    samplerate=sound_file.samplerate,
                    channels=sound_file.channels,
                    dtype="float32",
                    **self._stream_kwargs,
                ) as stream:
                    while not stop_event.is_set():
                        with self._lock:
                            frames = stepper.source_frames(_BLOCK_FRAMES)
                            rate = stepper.rate
                        data = sound_file.read(frames, dtype="float32", always_2d=True)
                        if data.size == 0:
                            completed = True
                            break
                        output_frames = max(1, int(round(len(data) / rate)))
                        stream.write(resample_to_length(data, output_frames))
            except Exception as exc:  # pylint: disable=broad-except
                logger.error("sounddevice playback failed for %s: %s", path, exc)
            with self._lock:
                if self._current_item == item_id and self._stop_event is stop_event:
                    self._current_item = None
                callback = self._on_finished if completed else self._on_failed
            if stop_event.is_set() or callback is None:
                return
            try:
                callback(item_id)
            except Exception as exc:  # pylint: disable=broad-except
                logger.error("Playback %s callback failed: %s", "finished" if completed else "failure", exc)

        thread = Thread(target=_run, daemon=True, name=f"encore-audio-{item_id}")
        self._thread = thread
        thread.start()

    def is_active(self) -> bool:
        return bool(self._current_item)

    def stop(self) -> None:
        with self._lock:
            thread = self._thread
            if self._stop_event is not None:
                self._stop_event.set()
            self._thread = None
            self._stop_event = None
            self._current_item = None
        if thread and thread.is_alive() and thread is not current_thread():
            thread.join(timeout=1.5)

    def set_rate(self, rate: float) -> None:
        with self._lock:
            self._stepper.rate = rate

    def set_finished_callback(self, callback: Optional[Callable[[str], None]]) -> None:
        with self._lock:
            self._on_finished = callback

    def set_failed_callback(self, callback: Optional[Callable[[str], None]]) -> None:
        with self._lock:
            self._on_failed = callback


class SoundDeviceBackend:
    """Enumerates PortAudio output devices."""

    backend = BackendType.SOUNDDEVICE

    @property
    def is_available(self) -> bool:
        return sd is not None and sf is not None

    def list_devices(self) -> List[AudioDevice]:
        if not self.is_available:
            return []
        devices: List[AudioDevice] = []
        try:
            default_output = sd.default.device[1]
            for index, info in enumerate(sd.query_devices()):
                if int(info.get("max_output_channels", 0)) <= 0:
                    continue
                devices.append(
                    AudioDevice(
                        id=f"{self.backend.value}:{index}",
                        name=str(info.get("name", f"Device {index}")),
                        backend=self.backend,
                        raw_index=index,
                        is_default=index == default_output,
                    )
                )
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("sounddevice device enumeration failed: %s", exc)
        return devices

    def create_player(self, device: AudioDevice) -> Player:
        return SoundDevicePlayer(device)
