"""Clock implementation running timers on the wx event loop."""

from __future__ import annotations

import logging
from typing import Callable, Optional

import wx

logger = logging.getLogger(__name__)


class WxTimer:
    """One-shot or repeating timer built on `wx.CallLater`."""

    def __init__(self, delay_ms: float, callback: Callable[[], None], *, repeat: bool) -> None:
        self._delay_ms = max(1, int(round(delay_ms)))
        self._callback = callback
        self._repeat = repeat
        self._active = True
        self._call: Optional[wx.CallLater] = wx.CallLater(self._delay_ms, self._fire)

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        self._active = False
        call, self._call = self._call, None
        if call is not None and call.IsRunning():
            call.Stop()

    def _fire(self) -> None:
        if not self._active:
            return
        if not self._repeat:
            self._active = False
            self._call = None
        try:
            self._callback()
        except Exception:  # pylint: disable=broad-except
            logger.exception("Timer callback failed")
        if self._repeat and self._active and self._call is not None:
            self._call.Restart(self._delay_ms)


class WxClock:
    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> WxTimer:
        return WxTimer(delay_ms, callback, repeat=False)

    def call_every(self, interval_ms: float, callback: Callable[[], None]) -> WxTimer:
        return WxTimer(interval_ms, callback, repeat=True)
