"""Small resampling helpers shared by audio components."""

from __future__ import annotations

import numpy as np


def resample_to_length(block, target_frames: int):
    """Linearly stretch or squeeze `block` (frames x channels) to `target_frames`."""

    if target_frames <= 0:
        return block[:0]
    src_frames = block.shape[0]
    if src_frames == 0 or src_frames == target_frames:
        return block
    if src_frames == 1:
        return np.repeat(block, target_frames, axis=0).astype(block.dtype, copy=False)
    src_idx = np.arange(src_frames, dtype=np.float64)
    target_idx = np.linspace(0.0, src_frames - 1, target_frames, dtype=np.float64)
    resampled = np.empty((target_frames, block.shape[1]), dtype=np.float32)
    for channel in range(block.shape[1]):
        resampled[:, channel] = np.interp(target_idx, src_idx, block[:, channel])
    return resampled.astype(block.dtype, copy=False)


class RateStepper:
    """Tracks how many source frames to read per output block at a given rate.

    Fractional frames are carried over between blocks so the long-run
    playback speed matches `rate` exactly.
    """

    def __init__(self, rate: float = 1.0) -> None:
        self.rate = rate
        self._carry = 0.0

    def source_frames(self, output_frames: int) -> int:
        wanted = output_frames * self.rate + self._carry
        frames = max(1, int(wanted))
        self._carry = wanted - frames
        return frames
