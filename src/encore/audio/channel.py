"""Single-stream audio output for replayed messages."""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from encore.audio.types import Player

logger = logging.getLogger(__name__)

Dispatch = Callable[..., None]


def _call_now(func: Callable[..., None], *args) -> None:
    func(*args)


@dataclass(eq=False)
class AudioHandle:
    """Identity of one started asset. Only the live handle is honoured."""

    id: str
    asset_url: str
    rate: float
    on_complete: Optional[Callable[[], None]] = field(default=None, repr=False)
    on_failed: Optional[Callable[[], None]] = field(default=None, repr=False)


class AudioChannel:
    """Owns at most one live playback handle.

    Starting a new asset stops the previous one first. Failures to start are
    logged and reported as a ``None`` handle so callers continue with caption
    pacing only. Player completion and failure events are forwarded through
    `dispatch` (e.g. ``wx.CallAfter``); only the first event of the live
    handle is honoured, and it runs either `on_complete` or `on_failed`.
    """

    def __init__(
        self,
        player_factory: Callable[[], Player],
        *,
        dispatch: Dispatch | None = None,
    ) -> None:
        self._player_factory = player_factory
        self._dispatch = dispatch or _call_now
        self._player: Optional[Player] = None
        self._live: Optional[AudioHandle] = None
        self._ids = itertools.count(1)

    @property
    def live_handle(self) -> Optional[AudioHandle]:
        return self._live

    def is_playing(self, handle: Optional[AudioHandle]) -> bool:
        """True while `handle` is live and its player is still producing audio."""

        if handle is None or handle is not self._live or self._player is None:
            return False
        try:
            return bool(self._player.is_active())
        except Exception as exc:  # pylint: disable=broad-except
            logger.debug("Player state query failed for %s: %s", handle.id, exc)
            return False

    def _ensure_player(self) -> Player:
        if self._player is None:
            self._player = self._player_factory()
        return self._player

    def play(
        self,
        asset_url: str,
        rate: float,
        on_complete: Callable[[], None],
        on_failed: Optional[Callable[[], None]] = None,
    ) -> Optional[AudioHandle]:
        self.stop()
        handle = AudioHandle(
            id=f"audio-{next(self._ids)}",
            asset_url=asset_url,
            rate=rate,
            on_complete=on_complete,
            on_failed=on_failed,
        )
        try:
            player = self._ensure_player()
            player.set_finished_callback(lambda item_id, h=handle: self._dispatch(self._handle_finished, h, item_id))
            player.set_failed_callback(lambda item_id, h=handle: self._dispatch(self._handle_failed, h, item_id))
            player.play(handle.id, asset_url, rate=rate)
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Audio playback unavailable for %s: %s", asset_url, exc)
            handle.on_complete = handle.on_failed = None
            return None
        self._live = handle
        logger.debug("Audio %s started: %s at %.2fx", handle.id, asset_url, rate)
        return handle

    def stop(self, handle: Optional[AudioHandle] = None) -> None:
        live = self._live
        if live is None or (handle is not None and handle is not live):
            return
        self._live = None
        live.on_complete = live.on_failed = None
        if self._player is None:
            return
        try:
            self._player.stop()
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Failed to stop audio %s: %s", live.id, exc)

    def set_rate(self, handle: Optional[AudioHandle], rate: float) -> None:
        if handle is None or handle is not self._live or self._player is None:
            return
        handle.rate = rate
        try:
            self._player.set_rate(rate)
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Failed to change audio rate for %s: %s", handle.id, exc)

    def close(self) -> None:
        self.stop()
        if self._player is not None:
            try:
                self._player.set_finished_callback(None)
                self._player.set_failed_callback(None)
            except Exception as exc:  # pylint: disable=broad-except
                logger.debug("Failed to clear player callbacks: %s", exc)
        self._player = None

    def _handle_finished(self, handle: AudioHandle, item_id: str) -> None:
        self._settle(handle, item_id, failed=False)

    def _handle_failed(self, handle: AudioHandle, item_id: str) -> None:
        self._settle(handle, item_id, failed=True)

    def _settle(self, handle: AudioHandle, item_id: str, *, failed: bool) -> None:
        if item_id != handle.id or handle is not self._live:
            logger.debug("Ignoring event from stale audio %s", item_id)
            return
        self._live = None
        callback = handle.on_failed if failed else handle.on_complete
        handle.on_complete = handle.on_failed = None
        if failed:
            logger.warning("Audio %s stopped with an error: %s", handle.id, handle.asset_url)
        if callback is None:
            return
        try:
            callback()
        except Exception:  # pylint: disable=broad-except
            logger.exception("Audio %s handler failed for %s", "failure" if failed else "completion", handle.id)
