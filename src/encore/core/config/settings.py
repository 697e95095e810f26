"""Application configuration management module."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .defaults import DEFAULT_CONFIG
from .merge import _deep_merge
from encore.core.env import resolve_config_path
from encore.core.timing import PLAYBACK_SPEEDS

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class SettingsManager:
    """YAML-backed settings with default values for every key."""

    config_path: Path = Path("config/settings.yaml")

    def __post_init__(self) -> None:
        self.config_path = resolve_config_path(self.config_path)
        self._data: Dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        if self.config_path.exists():
            with self.config_path.open("r", encoding="utf-8") as file:
                user_config = yaml.safe_load(file) or {}
            if not isinstance(user_config, dict):
                user_config = {}
            self._data = _deep_merge(DEFAULT_CONFIG, user_config)
        else:
            self._data = copy.deepcopy(DEFAULT_CONFIG)

    def save(self) -> None:
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with self.config_path.open("w", encoding="utf-8") as file:
            yaml.safe_dump(self._data, file, allow_unicode=False, sort_keys=True)

    def get_raw(self) -> Dict[str, Any]:
        return copy.deepcopy(self._data)

    def _section(self, name: str) -> Dict[str, Any]:
        section = self._data.get(name, {})
        return section if isinstance(section, dict) else {}

    def _positive_float(self, section: str, key: str) -> float:
        default = DEFAULT_CONFIG[section][key]
        value = self._section(section).get(key, default)
        try:
            number = float(value)
        except (TypeError, ValueError):
            return default
        return number if number > 0.0 else default

    # --- general ---
    def get_language(self) -> str:
        return str(self._section("general").get("language", DEFAULT_CONFIG["general"]["language"]))

    def set_language(self, language: str) -> None:
        general = self._data.setdefault("general", {})
        general["language"] = str(language)

    # --- playback ---
    def get_default_speed(self) -> float:
        value = self._section("playback").get("default_speed", DEFAULT_CONFIG["playback"]["default_speed"])
        try:
            speed = float(value)
        except (TypeError, ValueError):
            return DEFAULT_CONFIG["playback"]["default_speed"]
        return speed if speed in PLAYBACK_SPEEDS else DEFAULT_CONFIG["playback"]["default_speed"]

    def set_default_speed(self, speed: float) -> None:
        if float(speed) not in PLAYBACK_SPEEDS:
            raise ValueError(f"Unsupported playback speed: {speed!r}")
        playback = self._data.setdefault("playback", {})
        playback["default_speed"] = float(speed)

    def get_ms_per_word(self) -> float:
        return self._positive_float("playback", "ms_per_word")

    def set_ms_per_word(self, value: float) -> None:
        playback = self._data.setdefault("playback", {})
        playback["ms_per_word"] = max(1.0, float(value))

    def get_advance_pause_ms(self) -> float:
        playback = self._section("playback")
        value = playback.get("advance_pause_ms", DEFAULT_CONFIG["playback"]["advance_pause_ms"])
        try:
            return max(0.0, float(value))
        except (TypeError, ValueError):
            return DEFAULT_CONFIG["playback"]["advance_pause_ms"]

    def set_advance_pause_ms(self, value: float) -> None:
        playback = self._data.setdefault("playback", {})
        playback["advance_pause_ms"] = max(0.0, float(value))

    def get_words_per_screen(self) -> int:
        value = self._section("playback").get("words_per_screen", DEFAULT_CONFIG["playback"]["words_per_screen"])
        try:
            count = int(value)
        except (TypeError, ValueError):
            return DEFAULT_CONFIG["playback"]["words_per_screen"]
        return count if count > 0 else DEFAULT_CONFIG["playback"]["words_per_screen"]

    # --- audio ---
    def get_audio_enabled(self) -> bool:
        return bool(self._section("audio").get("enabled", DEFAULT_CONFIG["audio"]["enabled"]))

    def set_audio_enabled(self, enabled: bool) -> None:
        audio = self._data.setdefault("audio", {})
        audio["enabled"] = bool(enabled)

    def get_audio_device(self) -> Optional[str]:
        value = self._section("audio").get("device")
        return str(value) if value else None

    def set_audio_device(self, device_id: Optional[str]) -> None:
        audio = self._data.setdefault("audio", {})
        audio["device"] = device_id or None

    # --- transcript ---
    def get_message_limit(self) -> int:
        value = self._section("transcript").get("message_limit", DEFAULT_CONFIG["transcript"]["message_limit"])
        try:
            limit = int(value)
        except (TypeError, ValueError):
            return DEFAULT_CONFIG["transcript"]["message_limit"]
        return limit if limit > 0 else DEFAULT_CONFIG["transcript"]["message_limit"]

    # --- diagnostics ---
    def get_diagnostics_log_level(self) -> str:
        diagnostics = self._section("diagnostics")
        level = str(diagnostics.get("log_level", DEFAULT_CONFIG["diagnostics"]["log_level"])).upper()
        return level if level in _LOG_LEVELS else DEFAULT_CONFIG["diagnostics"]["log_level"]

    def set_diagnostics_log_level(self, level: str) -> None:
        diagnostics = self._data.setdefault("diagnostics", {})
        diagnostics["log_level"] = str(level).upper()
