"""Per-pixel min/max envelope for static waveform drawing."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .models import SampleBuffer


@dataclass(frozen=True)
class Envelope:
    """Downsampled waveform: one ``(min, max)`` pair per chart column."""
    mins: np.ndarray
    maxs: np.ndarray
    step: int

    def __len__(self) -> int:
        return len(self.mins)

    def column(self, index: int) -> tuple[float, float]:
        return float(self.mins[index]), float(self.maxs[index])


def envelope_step(sample_count: int, chart_width: int) -> int:
    """Samples scanned per column: ``ceil(sample_count / chart_width)``."""
    if chart_width <= 0:
        raise ValueError(f"chart_width must be positive, got {chart_width}")
    return max(1, math.ceil(sample_count / chart_width))


def build_envelope(samples: SampleBuffer, chart_width: int,
                   channel: int = 0) -> Envelope:
    """Downsample one channel of *samples* to exactly *chart_width* columns.

    Column ``i`` covers ``[i*step, (i+1)*step)``.  Windows running past the
    end of the data are clamped to the last sample, so every column holds a
    defined pair even when there are fewer samples than columns.
    """
    chart_width = int(chart_width)
    data = samples.channel(channel)
    n = len(data)
    step = envelope_step(n, chart_width)
    total = chart_width * step
    # Edge padding repeats the last sample, which never alters the min/max
    # of the final partial window and fills windows past the end with it.
    if total > n:
        padded = np.pad(data, (0, total - n), mode="edge")
    else:
        padded = data[:total]
    rows = padded.reshape(chart_width, step)
    mins = rows.min(axis=1).astype(np.float32)
    maxs = rows.max(axis=1).astype(np.float32)
    mins.flags.writeable = False
    maxs.flags.writeable = False
    return Envelope(mins=mins, maxs=maxs, step=step)
