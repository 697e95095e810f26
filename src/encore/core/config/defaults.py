"""Default configuration values."""

from __future__ import annotations

from typing import Any, Dict

DEFAULT_CONFIG: Dict[str, Any] = {
    "general": {
        "language": "en",
    },
    "playback": {
        "default_speed": 1.0,
        "ms_per_word": 250.0,
        "advance_pause_ms": 1000.0,
        "words_per_screen": 20,
    },
    "audio": {
        "enabled": True,
        "device": None,
    },
    "transcript": {
        "message_limit": 500,
    },
    "diagnostics": {
        "log_level": "WARNING",
    },
}
