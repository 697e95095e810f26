"""Entry point for the Encore meeting replay application."""

from __future__ import annotations

import argparse
import logging
import os
import sys
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

import wx

from encore.audio.channel import AudioChannel
from encore.audio.engine import AudioEngine
from encore.core.config import SettingsManager
from encore.core.env import is_e2e_mode
from encore.core.i18n import gettext as _
from encore.core.i18n import set_language
from encore.core.media_metadata import probe_duration_ms
from encore.core.meeting_io import MeetingNotFoundError, load_meeting, resolve_audio_url
from encore.core.replay_items import build_playlist
from encore.playback.cursor import PlaylistCursor

logger = logging.getLogger(__name__)


def _configure_logging(level_override: Optional[str] = None) -> Optional[Path]:
    env_level = os.environ.get("LOGLEVEL")
    level_name = (env_level or level_override or "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)

    primary_dir = Path.cwd() / "logs"
    if is_e2e_mode():
        primary_dir = Path(tempfile.gettempdir()) / "encore_e2e_logs"
    fallback_dir = Path(tempfile.gettempdir()) / "encore_logs"
    logs_dir = primary_dir
    log_path: Path | None = None

    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
    except OSError:
        logs_dir = fallback_dir
        try:
            logs_dir.mkdir(parents=True, exist_ok=True)
        except OSError:
            logging.basicConfig(level=level)
            return None

    try:
        timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        log_path = logs_dir / f"encore-{timestamp}.log"
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        file_handler.setFormatter(formatter)
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        logging.basicConfig(level=level, handlers=[file_handler, stream_handler])
    except OSError:
        logging.basicConfig(level=level)
        log_path = None
    if log_path:
        logger.info("Writing log to %s", log_path)
        if logs_dir is fallback_dir:
            logger.warning("Using fallback log directory %s", logs_dir)
    return log_path


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="encore", description="Replay a recorded meeting.")
    parser.add_argument("meeting", type=Path, help="meeting document (YAML or JSON)")
    parser.add_argument("--no-audio", action="store_true", help="replay captions only")
    return parser.parse_args(argv)


def build_cursor(
    meeting_path: Path,
    settings: SettingsManager,
    *,
    clock,
    audio: Optional[AudioChannel] = None,
):
    """Load a meeting and bind a playback cursor to its transcript.

    Raises `MeetingNotFoundError` before any playback state exists when the
    meeting cannot be loaded.
    """

    transcript = load_meeting(meeting_path, message_limit=settings.get_message_limit())
    base_dir = Path(meeting_path).resolve().parent
    playlist = build_playlist(
        transcript.meeting,
        transcript.messages,
        resolve_audio=lambda key: resolve_audio_url(key, base_dir),
        probe_duration=probe_duration_ms,
    )
    cursor = PlaylistCursor(
        playlist,
        clock=clock,
        audio=audio,
        speed=settings.get_default_speed(),
        ms_per_word=settings.get_ms_per_word(),
        advance_pause_ms=settings.get_advance_pause_ms(),
        words_per_screen=settings.get_words_per_screen(),
    )
    return transcript.meeting, cursor


def run(argv: Optional[Sequence[str]] = None) -> int:
    """Start the wxPython event loop replaying the given meeting."""
    args = _parse_args(argv)
    settings = SettingsManager()
    _configure_logging(settings.get_diagnostics_log_level())
    set_language(settings.get_language())
    app = wx.App()

    # wx-dependent modules are imported only after the App exists
    from encore.ui.replay_frame import ReplayFrame  # pylint: disable=import-outside-toplevel
    from encore.ui.wx_clock import WxClock  # pylint: disable=import-outside-toplevel

    audio: Optional[AudioChannel] = None
    if settings.get_audio_enabled() and not args.no_audio:
        engine = AudioEngine()
        audio = AudioChannel(lambda: engine.create_player(settings.get_audio_device()), dispatch=wx.CallAfter)

    try:
        meeting, cursor = build_cursor(args.meeting, settings, clock=WxClock(), audio=audio)
    except MeetingNotFoundError as exc:
        logger.error("Meeting not found: %s", exc)
        wx.MessageBox(_("Meeting not found"), _("Meeting replay"), wx.OK | wx.ICON_ERROR)
        return 1

    logger.info("Replaying meeting %s (%d messages)", meeting.id, len(cursor.playlist))
    frame = ReplayFrame(meeting, cursor)
    frame.Show()
    app.MainLoop()
    return 0


if __name__ == "__main__":
    sys.exit(run())
