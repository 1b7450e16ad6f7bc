"""Shared fixtures: fake host collaborators and synthetic sample buffers."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from wavescopelib.frames import FrameClock, Surface  # noqa: E402
from wavescopelib.models import SampleBuffer  # noqa: E402


class ManualFrameClock(FrameClock):
    """Frame clock driven by the test: ``tick()`` fires pending callbacks."""

    def __init__(self):
        self._next = 0
        self.pending: dict[int, object] = {}
        self.requests = 0

    def request(self, callback):
        self._next += 1
        self.requests += 1
        self.pending[self._next] = callback
        return self._next

    def cancel(self, handle):
        self.pending.pop(handle, None)

    def tick(self, count: int = 1) -> int:
        """Deliver *count* rounds of pending callbacks; return how many ran."""
        fired = 0
        for _ in range(count):
            due, self.pending = self.pending, {}
            for callback in due.values():
                callback()
                fired += 1
        return fired

    def deliver_stale(self, callback) -> None:
        """Simulate a tick the host delivered even though it was cancelled."""
        callback()


class FakeTransport:
    """In-memory transport; positions only change when the test says so."""

    def __init__(self, duration: float = 10.0):
        self.current_time = 0.0
        self.duration = duration
        self.is_playing = False
        self.seeks: list[float] = []
        self.plays = 0
        self.pauses = 0

    def play(self):
        self.plays += 1
        self.is_playing = True

    def pause(self):
        self.pauses += 1
        self.is_playing = False

    def seek(self, t):
        self.seeks.append(t)
        self.current_time = t


class TappableTransport(FakeTransport):
    """FakeTransport that also offers the output-listener capability."""

    def __init__(self, duration: float = 10.0):
        super().__init__(duration)
        self.listeners: list = []

    def add_output_listener(self, listener):
        self.listeners.append(listener)

    def remove_output_listener(self, listener):
        self.listeners.remove(listener)

    def push(self, frames):
        for listener in list(self.listeners):
            listener(frames)


class RecordingSurface(Surface):
    """Surface that records every call instead of painting."""

    def __init__(self):
        self.configured: list = []
        self.static_frames: list = []
        self.live_frames: list = []
        self.clears = 0

    def configure(self, geometry):
        self.configured.append(geometry)

    def draw_static(self, frame):
        self.static_frames.append(frame)

    def draw_live(self, frame):
        self.live_frames.append(frame)

    def clear(self):
        self.clears += 1

    @property
    def draws(self) -> int:
        return len(self.static_frames) + len(self.live_frames)


def sine(freq: float = 440.0, seconds: float = 1.0, sample_rate: int = 44100,
         amplitude: float = 0.5, channels: int = 1) -> SampleBuffer:
    t = np.arange(int(seconds * sample_rate)) / sample_rate
    mono = (amplitude * np.sin(2 * np.pi * freq * t)).astype(np.float32)
    data = np.column_stack([mono] * channels) if channels > 1 else mono
    return SampleBuffer.from_array(data, sample_rate)


@pytest.fixture
def clock():
    return ManualFrameClock()


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def tappable_transport():
    return TappableTransport()


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def sine_buffer():
    return sine()


@pytest.fixture
def ramp_buffer():
    """100 samples rising linearly from -1 to 1 at 100 Hz (1 s)."""
    return SampleBuffer.from_array(np.linspace(-1.0, 1.0, 100, dtype=np.float32), 100)


@pytest.fixture(scope="session")
def qapp():
    pytest.importorskip("PySide6")
    from PySide6.QtWidgets import QApplication
    app = QApplication.instance() or QApplication([])
    yield app
