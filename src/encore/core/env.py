"""Helpers for environment flags shared across the app."""

from __future__ import annotations

import os
from pathlib import Path

_TRUTHY = {"1", "true", "yes", "on"}


def is_e2e_mode() -> bool:
    """Return True when end-to-end (UI) tests should run with mock dependencies."""

    flag = os.environ.get("ENCORE_E2E", "")
    return str(flag).strip().lower() in _TRUTHY


def force_mock_audio() -> bool:
    flag = os.environ.get("ENCORE_FORCE_MOCK_AUDIO", "")
    return str(flag).strip().lower() in _TRUTHY


def resolve_config_path(default_path: Path) -> Path:
    """Pick config path based on environment overrides."""

    env_path = os.environ.get("ENCORE_CONFIG_PATH")
    if env_path:
        return Path(env_path)
    env_dir = os.environ.get("ENCORE_CONFIG_DIR")
    if env_dir:
        return Path(env_dir) / "settings.yaml"
    return default_path
