import numpy as np
import pytest

from wavescopelib.envelope import build_envelope
from wavescopelib.geometry import compute_geometry
from wavescopelib.plot import (
    amplitude_ticks,
    envelope_polygon,
    format_time,
    live_waveform_points,
    spectrum_bars,
    time_marker_count,
    time_ticks,
)


@pytest.fixture
def geometry():
    return compute_geometry(1000, 400)


@pytest.mark.parametrize("seconds, text", [
    (0, "00:00"), (5.9, "00:05"), (65, "01:05"), (600, "10:00"),
    (-3, "00:00"), (float("nan"), "00:00"),
])
def test_format_time(seconds, text):
    assert format_time(seconds) == text


def test_amplitude_ticks_span_chart(geometry):
    ticks = amplitude_ticks(geometry)
    assert [label for _, _, label in ticks] == ["1.0", "0.5", "0", "-0.5", "-1.0"]
    ys = {value: y for value, y, _ in ticks}
    assert ys[1.0] == pytest.approx(geometry.chart_top)
    assert ys[0.0] == pytest.approx(geometry.chart_mid_y)
    assert ys[-1.0] == pytest.approx(geometry.chart_bottom)


@pytest.mark.parametrize("duration, count", [
    (0, 0), (1, 1), (5, 1), (5.1, 2), (30, 6), (60, 12), (3600, 12),
])
def test_time_marker_count(duration, count):
    assert time_marker_count(duration) == count


def test_time_ticks_include_both_ends(geometry):
    ticks = time_ticks(geometry, 30.0)
    assert len(ticks) == 7
    assert ticks[0] == (geometry.chart_left, "00:00")
    assert ticks[-1][0] == pytest.approx(geometry.chart_right)
    assert ticks[-1][1] == "00:30"


def test_no_time_ticks_without_duration(geometry):
    assert time_ticks(geometry, 0.0) == []


def test_envelope_polygon_is_closed_outline(geometry, ramp_buffer):
    env = build_envelope(ramp_buffer, geometry.chart_width)
    xs, ys = envelope_polygon(geometry, env)
    n = geometry.chart_width
    assert len(xs) == len(ys) == 2 * n
    assert xs[0] == geometry.chart_left
    assert xs[n - 1] == xs[n] == geometry.chart_left + n - 1
    assert xs[-1] == geometry.chart_left
    # top edge never below the bottom edge
    assert np.all(ys[:n] <= ys[n:][::-1] + 1e-9)


def test_live_waveform_silence_sits_on_midline(geometry):
    data = np.full(2048, 128, dtype=np.uint8)
    xs, ys = live_waveform_points(geometry, data)
    assert len(xs) == 2049
    assert np.allclose(ys, geometry.chart_mid_y)
    assert xs[0] == geometry.chart_left
    assert xs[-1] == geometry.chart_right


def test_live_waveform_byte_mapping(geometry):
    xs, ys = live_waveform_points(geometry, np.array([0, 255], dtype=np.uint8))
    assert ys[0] == pytest.approx(geometry.chart_top)
    assert ys[1] == pytest.approx(
        geometry.chart_top + 255 / 128 * geometry.chart_height / 2)
    assert xs[1] == pytest.approx(geometry.chart_left + geometry.chart_width / 2)


def test_live_waveform_empty(geometry):
    xs, ys = live_waveform_points(geometry, np.zeros(0, dtype=np.uint8))
    assert len(xs) == len(ys) == 0


def test_spectrum_bar_count_is_capped(geometry):
    bars = spectrum_bars(geometry, np.full(1024, 255, dtype=np.uint8))
    assert len(bars) == 150
    assert bars.width == pytest.approx(geometry.chart_width / 150 - 1)
    assert bars.hue[0] == 0.0
    assert bars.hue[-1] == pytest.approx(149 / 150 * 360)
    assert np.allclose(bars.height, geometry.chart_height)
    assert np.allclose(bars.y, geometry.chart_top)


def test_spectrum_bars_sample_bins_evenly(geometry):
    data = np.arange(300, dtype=np.float64) % 256
    bars = spectrum_bars(geometry, data.astype(np.uint8), max_bars=150)
    # bar i reads bin floor(i * 300 / 150) = 2i
    expected = data[::2] / 255 * geometry.chart_height
    assert np.allclose(bars.height, expected)


def test_short_spectrum_uses_one_bar_per_bin(geometry):
    bars = spectrum_bars(geometry, np.array([0, 255, 51], dtype=np.uint8))
    assert len(bars) == 3
    assert bars.height[0] == 0
    assert bars.y[1] == pytest.approx(geometry.chart_top)
    assert bars.height[2] == pytest.approx(0.2 * geometry.chart_height)
