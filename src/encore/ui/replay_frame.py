"""Main window replaying a meeting with captions and a chat thread."""

from __future__ import annotations

import logging
from typing import Optional

import wx

from encore.core import replay_view
from encore.core.i18n import gettext as _
from encore.core.meeting import MeetingDetail
from encore.core.replay_view import WordState
from encore.playback.cursor import PlaybackState, PlaylistCursor

logger = logging.getLogger(__name__)

_GAUGE_RANGE = 1000
_WORD_COLOURS = {
    WordState.SPOKEN: wx.Colour(255, 255, 255),
    WordState.ACTIVE: wx.Colour(251, 191, 36),
    WordState.UPCOMING: wx.Colour(120, 120, 120),
}


class ReplayFrame(wx.Frame):
    """Replay window: speaker banner, captions, thread and transport buttons."""

    def __init__(self, meeting: MeetingDetail, cursor: PlaylistCursor) -> None:
        super().__init__(None, title=meeting.title or _("Meeting replay"), size=(900, 680))
        self._meeting = meeting
        self._cursor = cursor
        self._rendered_index: Optional[int] = None

        panel = wx.Panel(self)
        main_sizer = wx.BoxSizer(wx.VERTICAL)

        self._banner = wx.Panel(panel)
        self._banner.SetBackgroundColour(wx.Colour(17, 24, 39))
        banner_sizer = wx.BoxSizer(wx.VERTICAL)
        self._speaker_label = wx.StaticText(self._banner, label="")
        self._speaker_label.SetForegroundColour(wx.WHITE)
        speaker_font = self._speaker_label.GetFont()
        speaker_font.SetWeight(wx.FONTWEIGHT_BOLD)
        speaker_font.SetPointSize(speaker_font.GetPointSize() + 3)
        self._speaker_label.SetFont(speaker_font)
        self._status_label = wx.StaticText(self._banner, label="")
        self._status_label.SetForegroundColour(_WORD_COLOURS[WordState.ACTIVE])
        self._caption_ctrl = wx.TextCtrl(
            self._banner,
            style=wx.TE_MULTILINE | wx.TE_READONLY | wx.TE_RICH2 | wx.BORDER_NONE,
            size=(-1, 80),
        )
        self._caption_ctrl.SetBackgroundColour(self._banner.GetBackgroundColour())
        banner_sizer.Add(self._speaker_label, 0, wx.ALL, 8)
        banner_sizer.Add(self._status_label, 0, wx.LEFT | wx.BOTTOM, 8)
        banner_sizer.Add(self._caption_ctrl, 0, wx.EXPAND | wx.ALL, 8)
        self._banner.SetSizer(banner_sizer)

        self._header = wx.StaticText(panel, label=self._header_text())
        self._summary = wx.StaticText(panel, label=self._summary_text())
        self._summary.Wrap(840)

        self._thread = wx.ListBox(panel, style=wx.LB_SINGLE)
        self._thread.Bind(wx.EVT_LISTBOX_DCLICK, self._on_thread_activate)

        self._gauge = wx.Gauge(panel, range=_GAUGE_RANGE)
        controls = wx.BoxSizer(wx.HORIZONTAL)
        self._back_button = wx.Button(panel, label=_("Previous"))
        self._play_button = wx.Button(panel, label=_("Play"))
        self._forward_button = wx.Button(panel, label=_("Next"))
        self._speed_button = wx.Button(panel, label=replay_view.speed_label(cursor.state.speed))
        self._progress_label = wx.StaticText(panel, label="")
        self._back_button.Bind(wx.EVT_BUTTON, lambda _evt: self._cursor.skip_back())
        self._play_button.Bind(wx.EVT_BUTTON, lambda _evt: self._cursor.toggle_play())
        self._forward_button.Bind(wx.EVT_BUTTON, lambda _evt: self._cursor.skip_forward())
        self._speed_button.Bind(wx.EVT_BUTTON, lambda _evt: self._cursor.cycle_speed())
        for control in (self._back_button, self._play_button, self._forward_button, self._speed_button):
            controls.Add(control, 0, wx.RIGHT, 6)
        controls.Add(self._progress_label, 0, wx.ALIGN_CENTER_VERTICAL | wx.LEFT, 6)

        main_sizer.Add(self._banner, 0, wx.EXPAND)
        main_sizer.Add(self._header, 0, wx.ALL, 8)
        main_sizer.Add(self._summary, 0, wx.LEFT | wx.RIGHT | wx.BOTTOM, 8)
        main_sizer.Add(self._thread, 1, wx.EXPAND | wx.LEFT | wx.RIGHT, 8)
        main_sizer.Add(self._gauge, 0, wx.EXPAND | wx.ALL, 8)
        main_sizer.Add(controls, 0, wx.ALIGN_CENTER | wx.BOTTOM, 8)
        panel.SetSizer(main_sizer)

        self.Bind(wx.EVT_CHAR_HOOK, self._on_char_hook)
        self.Bind(wx.EVT_CLOSE, self._on_close)
        self._unsubscribe = cursor.subscribe(self._render)
        self._render(cursor.state)

    def _header_text(self) -> str:
        if self._meeting.started_at:
            return f"{self._meeting.title} ({self._meeting.started_at})"
        return self._meeting.title

    def _summary_text(self) -> str:
        if not self._meeting.summary:
            return ""
        lines = [_("Meeting summary"), self._meeting.summary]
        if self._meeting.action_items:
            lines.append(_("Action items"))
            for item in self._meeting.action_items:
                lines.append(f"- {item.description} ({item.assignee})" if item.assignee else f"- {item.description}")
        return "\n".join(lines)

    def _render(self, state: PlaybackState) -> None:
        playlist = self._cursor.playlist
        item = replay_view.current_item(playlist, state)
        banner = replay_view.show_speaker_banner(item)
        self._banner.Show(banner)
        self._header.Show(not banner)
        self._summary.Show(replay_view.show_summary(self._meeting, state))
        if item is not None:
            self._speaker_label.SetLabel(item.speaker_name)
            self._status_label.SetLabel(_("Replaying"))
        self._render_captions(state)

        if state.current_index != self._rendered_index:
            self._rendered_index = state.current_index
            self._render_thread(state)

        self._gauge.SetValue(int(replay_view.progress_fraction(len(playlist), state) * _GAUGE_RANGE))
        self._progress_label.SetLabel(replay_view.progress_label(len(playlist), state))
        self._play_button.SetLabel(_("Pause") if state.playing else _("Play"))
        self._speed_button.SetLabel(replay_view.speed_label(state.speed))
        self._back_button.Enable(replay_view.can_skip_back(state))
        self._forward_button.Enable(replay_view.can_skip_forward(len(playlist), state))
        self.Layout()

    def _render_captions(self, state: PlaybackState) -> None:
        self._caption_ctrl.Freeze()
        try:
            self._caption_ctrl.Clear()
            for word, word_state in replay_view.caption_words(state):
                attr = wx.TextAttr(_WORD_COLOURS[word_state], self._caption_ctrl.GetBackgroundColour())
                if word_state is WordState.ACTIVE:
                    font = self._caption_ctrl.GetFont()
                    font.SetWeight(wx.FONTWEIGHT_BOLD)
                    attr.SetFont(font)
                self._caption_ctrl.SetDefaultStyle(attr)
                self._caption_ctrl.AppendText(f"{word} ")
        finally:
            self._caption_ctrl.Thaw()

    def _render_thread(self, state: PlaybackState) -> None:
        entries = [
            replay_view.thread_entry(item, current=item.index == state.current_index)
            for item in replay_view.visible_items(self._cursor.playlist, state)
        ]
        self._thread.Set(entries)
        if entries:
            self._thread.SetSelection(len(entries) - 1)
            self._thread.EnsureVisible(len(entries) - 1)

    def _on_thread_activate(self, event: wx.CommandEvent) -> None:
        index = event.GetSelection()
        if index != wx.NOT_FOUND:
            self._cursor.jump_to(index)

    def _on_char_hook(self, event: wx.KeyEvent) -> None:
        key = event.GetKeyCode()
        if key == wx.WXK_SPACE and not self._thread.HasFocus():
            self._cursor.toggle_play()
        elif key == wx.WXK_RIGHT and event.ControlDown():
            self._cursor.skip_forward()
        elif key == wx.WXK_LEFT and event.ControlDown():
            self._cursor.skip_back()
        elif key == ord("S") and event.ControlDown():
            self._cursor.cycle_speed()
        else:
            event.Skip()

    def _on_close(self, event: wx.CloseEvent) -> None:
        self._unsubscribe()
        self._cursor.dispose()
        logger.debug("Replay window closed")
        event.Skip()
