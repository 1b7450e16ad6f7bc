import numpy as np
import pytest

from wavescopelib.models import PlaybackState, SampleBuffer, VisualizationMode


def test_from_stereo_array():
    data = np.column_stack([np.ones(10), -np.ones(10)])
    buf = SampleBuffer.from_array(data, 10)
    assert buf.channel_count == 2
    assert buf.sample_count == 10
    assert buf.duration == 1.0
    assert buf.channel(1)[0] == -1.0
    assert buf.interleaved().shape == (10, 2)


def test_channels_are_read_only_copies():
    source = np.zeros(4, dtype=np.float32)
    buf = SampleBuffer.from_array(source, 4)
    source[0] = 1.0
    assert buf.channel(0)[0] == 0.0
    with pytest.raises(ValueError):
        buf.channel(0)[0] = 1.0


@pytest.mark.parametrize("kwargs", [
    {"channels": (np.zeros(4),), "sample_rate": 0},
    {"channels": (), "sample_rate": 100},
    {"channels": (np.zeros(4), np.zeros(5)), "sample_rate": 100},
    {"channels": (np.zeros(0),), "sample_rate": 100},
])
def test_invalid_buffers_rejected(kwargs):
    with pytest.raises(ValueError):
        SampleBuffer(**kwargs)


def test_three_dimensional_array_rejected():
    with pytest.raises(ValueError):
        SampleBuffer.from_array(np.zeros((2, 2, 2)), 100)


@pytest.mark.parametrize("value, mode", [
    ("waveform", VisualizationMode.WAVEFORM),
    ("Spectrum", VisualizationMode.SPECTRUM),
    ("bars", VisualizationMode.SPECTRUM),
    (VisualizationMode.WAVEFORM, VisualizationMode.WAVEFORM),
])
def test_mode_parse(value, mode):
    assert VisualizationMode.parse(value) is mode


def test_mode_parse_rejects_unknown():
    with pytest.raises(ValueError):
        VisualizationMode.parse("oscilloscope")


def test_playback_state_clamps():
    assert PlaybackState(current_time=12.0, duration=10.0).clamped_time() == 10.0
    assert PlaybackState(current_time=-1.0, duration=10.0).clamped_time() == 0.0
    assert PlaybackState(current_time=5.0, duration=0.0).clamped_time() == 0.0
