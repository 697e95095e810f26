"""Audio metadata helpers."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from mutagen import File as MutagenFile

logger = logging.getLogger(__name__)


def probe_duration_ms(path: str | Path) -> Optional[float]:
    """Return the length of an audio file in milliseconds, or None if unknown."""

    source = Path(path)
    if not source.is_file():
        return None
    try:
        audio = MutagenFile(source)
    except Exception as exc:  # pylint: disable=broad-except
        logger.warning("Failed to read metadata %s: %s", source, exc)
        return None
    if audio is None:
        return None
    length = getattr(getattr(audio, "info", None), "length", None)
    if not length:
        return None
    return float(length) * 1000.0
