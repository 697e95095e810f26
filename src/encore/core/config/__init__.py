"""Application configuration management package.

The public API is available as `encore.core.config` while implementation is
split into focused modules.
"""

from __future__ import annotations

from .defaults import DEFAULT_CONFIG
from .settings import SettingsManager

__all__ = [
    "DEFAULT_CONFIG",
    "SettingsManager",
]
