"""Pure plotting math shared by the static and live renderers.

Everything here works in logical (CSS) pixels and returns plain numbers or
numpy arrays, so the Qt renderers only translate results into paint calls.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .envelope import Envelope
from .geometry import ViewportGeometry

AMPLITUDE_LABELS: list[tuple[float, str]] = [
    (1.0, "1.0"),
    (0.5, "0.5"),
    (0.0, "0"),
    (-0.5, "-0.5"),
    (-1.0, "-1.0"),
]

MAX_TIME_MARKERS = 12
SECONDS_PER_MARKER = 5.0
MAX_SPECTRUM_BARS = 150


def format_time(seconds: float) -> str:
    """Format seconds as ``mm:ss`` (truncating fractions)."""
    if not math.isfinite(seconds) or seconds < 0:
        seconds = 0.0
    mins = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{mins:02d}:{secs:02d}"


def amplitude_y(geometry: ViewportGeometry, value: float) -> float:
    """Y coordinate of amplitude *value* in [-1, 1] on the chart."""
    return geometry.chart_mid_y - value * geometry.chart_height / 2.0


def amplitude_ticks(geometry: ViewportGeometry) -> list[tuple[float, float, str]]:
    """Return ``(value, y, label)`` for the fixed horizontal gridlines."""
    return [(value, amplitude_y(geometry, value), label)
            for value, label in AMPLITUDE_LABELS]


def time_marker_count(duration: float, *,
                      max_markers: int = MAX_TIME_MARKERS,
                      seconds_per_marker: float = SECONDS_PER_MARKER) -> int:
    """Number of divisions on the time axis: ``min(12, ceil(duration / 5))``."""
    if duration <= 0 or seconds_per_marker <= 0:
        return 0
    return max(1, min(max_markers, math.ceil(duration / seconds_per_marker)))


def time_ticks(geometry: ViewportGeometry, duration: float, *,
               max_markers: int = MAX_TIME_MARKERS,
               seconds_per_marker: float = SECONDS_PER_MARKER,
               ) -> list[tuple[float, str]]:
    """Return ``(x, label)`` for each vertical gridline, both ends included."""
    n = time_marker_count(duration, max_markers=max_markers,
                          seconds_per_marker=seconds_per_marker)
    if n == 0:
        return []
    ticks = []
    for i in range(n + 1):
        x = geometry.chart_left + geometry.chart_width / n * i
        ticks.append((x, format_time(duration / n * i)))
    return ticks


def envelope_polygon(geometry: ViewportGeometry,
                     envelope: Envelope) -> tuple[np.ndarray, np.ndarray]:
    """Closed outline of the envelope: max edge left-to-right, min edge back."""
    n = len(envelope)
    amp = geometry.chart_height / 2.0
    mid = geometry.chart_mid_y
    xs = np.arange(n, dtype=np.float64) + geometry.chart_left
    ys_top = mid - envelope.maxs.astype(np.float64) * amp
    ys_bot = mid - envelope.mins.astype(np.float64) * amp
    return (np.concatenate([xs, xs[::-1]]),
            np.concatenate([ys_top, ys_bot[::-1]]))


def live_waveform_points(geometry: ViewportGeometry,
                         data: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Polyline for a time-domain byte buffer.

    Byte ``b`` maps to ``top + (b / 128) * chart_height / 2``; the line is
    closed at the chart's right edge on the midline.
    """
    n = len(data)
    if n == 0:
        return np.zeros(0), np.zeros(0)
    slice_w = geometry.chart_width / n
    xs = geometry.chart_left + np.arange(n, dtype=np.float64) * slice_w
    ys = geometry.chart_top + (np.asarray(data, dtype=np.float64) / 128.0) \
        * geometry.chart_height / 2.0
    xs = np.append(xs, float(geometry.chart_right))
    ys = np.append(ys, geometry.chart_mid_y)
    return xs, ys


@dataclass(frozen=True)
class SpectrumBars:
    """Bar rectangles for the spectrum view (parallel arrays)."""
    x: np.ndarray
    y: np.ndarray
    width: float
    height: np.ndarray
    hue: np.ndarray

    def __len__(self) -> int:
        return len(self.x)


def spectrum_bars(geometry: ViewportGeometry, data: np.ndarray, *,
                  max_bars: int = MAX_SPECTRUM_BARS) -> SpectrumBars:
    """Partition a frequency byte buffer into at most *max_bars* bars."""
    n = len(data)
    count = min(n, max_bars)
    if count <= 0:
        empty = np.zeros(0)
        return SpectrumBars(empty, empty, 0.0, empty, empty)
    bar_w = geometry.chart_width / count
    idx = np.arange(count)
    sample_idx = (idx * n) // count
    heights = np.asarray(data, dtype=np.float64)[sample_idx] / 255.0 \
        * geometry.chart_height
    xs = geometry.chart_left + idx * bar_w
    ys = geometry.chart_bottom - heights
    hues = idx / count * 360.0
    return SpectrumBars(x=xs.astype(np.float64), y=ys, width=bar_w - 1.0,
                        height=heights, hue=hues.astype(np.float64))
