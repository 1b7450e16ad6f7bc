import numpy as np
import pytest

from wavescopelib.livetap import LiveTap, LiveTapUnavailable


def _tone(bin_index, fft_size=2048, amplitude=0.9):
    n = np.arange(fft_size)
    return (amplitude * np.sin(2 * np.pi * bin_index * n / fft_size)).astype(np.float32)


@pytest.mark.parametrize("size", [0, 16, 1000, 3000])
def test_rejects_bad_fft_size(size):
    with pytest.raises(ValueError):
        LiveTap(size)


def test_rejects_inverted_decibel_range():
    with pytest.raises(ValueError):
        LiveTap(min_decibels=-30, max_decibels=-100)


def test_attach_without_capability_is_unavailable(transport):
    tap = LiveTap()
    with pytest.raises(LiveTapUnavailable):
        tap.attach(transport)
    assert not tap.attached


def test_attach_failure_is_unavailable():
    class Broken:
        def add_output_listener(self, listener):
            raise RuntimeError("device busy")

    tap = LiveTap()
    with pytest.raises(LiveTapUnavailable, match="device busy"):
        tap.attach(Broken())
    assert not tap.attached


def test_attach_and_detach(tappable_transport):
    tap = LiveTap(32)
    tap.attach(tappable_transport)
    tap.attach(tappable_transport)
    assert tap.attached
    assert len(tappable_transport.listeners) == 1

    tappable_transport.push(np.full((32, 2), 0.5, dtype=np.float32))
    assert np.all(tap.read_time_domain() == 192)

    tap.detach()
    tap.detach()
    assert not tap.attached
    assert tappable_transport.listeners == []
    assert np.all(tap.read_time_domain() == 128)


def test_time_domain_byte_mapping():
    tap = LiveTap(32)
    assert np.all(tap.read_time_domain() == 128)
    tap.feed(np.array([-1.0, -0.5, 0.0, 0.5, 1.0, 2.0] + [0.0] * 26, dtype=np.float32))
    data = tap.read_time_domain()
    assert data.dtype == np.uint8
    assert len(data) == 32
    assert list(data[:6]) == [0, 64, 128, 192, 255, 255]


def test_stereo_frames_are_mixed_to_mono():
    tap = LiveTap(32)
    frames = np.column_stack([np.full(32, 0.5), np.full(32, -0.5)])
    tap.feed(frames)
    assert np.all(tap.read_time_domain() == 128)


def test_ring_keeps_most_recent_samples_in_order():
    values = (np.arange(40, dtype=np.float32) - 20) / 40
    whole = LiveTap(32)
    whole.feed(values)
    chunked = LiveTap(32)
    for chunk in np.array_split(values, [7, 20, 33]):
        chunked.feed(chunk)
    a = whole.read_time_domain()
    b = chunked.read_time_domain()
    assert np.array_equal(a, b)
    assert np.all(np.diff(a.astype(int)) >= 0)
    assert a[-1] == int(np.floor(128 * (1 + values[-1])))


def test_frequency_domain_peaks_at_tone_bin():
    tap = LiveTap(2048, smoothing=0.0)
    tap.feed(_tone(64))
    spectrum = tap.read_frequency_domain()
    assert len(spectrum) == 1024
    assert spectrum.dtype == np.uint8
    # the window main lobe saturates the neighbouring bins too
    assert spectrum[64] == 255
    assert spectrum.max() == 255
    assert np.array_equal(spectrum[62:67], spectrum[62:67][::-1])
    assert spectrum[60] < spectrum[64]
    assert spectrum[900] < spectrum[64]


def test_silence_reads_as_zero():
    tap = LiveTap(256)
    assert np.all(tap.read_frequency_domain() == 0)


def test_smoothing_carries_energy_between_reads():
    smooth = LiveTap(2048, smoothing=0.8)
    sharp = LiveTap(2048, smoothing=0.0)
    for tap in (smooth, sharp):
        tap.feed(_tone(64))
        tap.read_frequency_domain()
        tap.feed(np.zeros(2048, dtype=np.float32))
    assert smooth.read_frequency_domain()[64] > 0
    assert sharp.read_frequency_domain()[64] == 0


def test_frequency_bin_count():
    assert LiveTap(4096).frequency_bin_count == 2048
