"""Real-time time/frequency feed from the playing audio.

Mirrors the behaviour of a Web Audio ``AnalyserNode``: the most recent
``fft_size`` output samples are kept in a ring buffer, time-domain reads
return unsigned bytes centred on 128, and frequency reads return a
Blackman-windowed, temporally smoothed magnitude spectrum scaled from
``[min_decibels, max_decibels]`` to ``[0, 255]``.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

import numpy as np
from scipy.signal import get_window

log = logging.getLogger(__name__)

DEFAULT_FFT_SIZE = 2048
DEFAULT_SMOOTHING = 0.8
DEFAULT_MIN_DECIBELS = -100.0
DEFAULT_MAX_DECIBELS = -30.0


class LiveTapUnavailable(Exception):
    """Raised when the audio source cannot provide a live feed."""
    pass


class LiveTap:
    """Analyser-style tap attached to a transport's output.

    ``feed`` is called from the audio thread; the ``read_*`` methods are
    called from the render loop.  The ring buffer is shared under a lock.
    """

    def __init__(self, fft_size: int = DEFAULT_FFT_SIZE, *,
                 smoothing: float = DEFAULT_SMOOTHING,
                 min_decibels: float = DEFAULT_MIN_DECIBELS,
                 max_decibels: float = DEFAULT_MAX_DECIBELS):
        if fft_size < 32 or fft_size & (fft_size - 1):
            raise ValueError(f"fft_size must be a power of two >= 32, got {fft_size}")
        if not 0.0 <= smoothing <= 1.0:
            raise ValueError(f"smoothing must be within [0, 1], got {smoothing}")
        if min_decibels >= max_decibels:
            raise ValueError("min_decibels must be below max_decibels")
        self._fft_size = fft_size
        self._smoothing = smoothing
        self._min_db = min_decibels
        self._max_db = max_decibels
        self._window = get_window("blackman", fft_size).astype(np.float64)
        self._ring = np.zeros(fft_size, dtype=np.float32)
        self._write_index = 0
        self._lock = threading.Lock()
        self._smoothed = np.zeros(fft_size // 2, dtype=np.float64)
        self._source: Any = None

    @property
    def fft_size(self) -> int:
        return self._fft_size

    @property
    def frequency_bin_count(self) -> int:
        return self._fft_size // 2

    @property
    def attached(self) -> bool:
        return self._source is not None

    # ── Lifecycle ──────────────────────────────────────────────────────────

    def attach(self, source) -> None:
        """Register on *source*'s output feed.  No-op if already attached."""
        if self._source is not None:
            return
        add = getattr(source, "add_output_listener", None)
        if add is None:
            raise LiveTapUnavailable(
                f"{type(source).__name__} provides no output feed")
        try:
            add(self.feed)
        except Exception as exc:
            raise LiveTapUnavailable(str(exc)) from exc
        self._source = source
        log.debug("live tap attached to %s", type(source).__name__)

    def detach(self) -> None:
        """Unregister and reset buffers.  Safe to call repeatedly."""
        source, self._source = self._source, None
        if source is not None:
            remove = getattr(source, "remove_output_listener", None)
            if remove is not None:
                remove(self.feed)
            log.debug("live tap detached")
        self.reset()

    def reset(self) -> None:
        with self._lock:
            self._ring[:] = 0.0
            self._write_index = 0
        self._smoothed[:] = 0.0

    # ── Audio thread ───────────────────────────────────────────────────────

    def feed(self, frames: np.ndarray) -> None:
        """Append output frames (``(n,)`` or ``(n, channels)``)."""
        frames = np.asarray(frames, dtype=np.float32)
        if frames.ndim == 2:
            mono = frames.mean(axis=1) if frames.shape[1] > 1 else frames[:, 0]
        else:
            mono = frames.reshape(-1)
        n = len(mono)
        if n == 0:
            return
        size = self._fft_size
        if n >= size:
            with self._lock:
                self._ring[:] = mono[-size:]
                self._write_index = 0
            return
        with self._lock:
            start = self._write_index
            end = start + n
            if end <= size:
                self._ring[start:end] = mono
            else:
                split = size - start
                self._ring[start:] = mono[:split]
                self._ring[:end - size] = mono[split:]
            self._write_index = end % size

    # ── Render loop ────────────────────────────────────────────────────────

    def _snapshot(self) -> np.ndarray:
        with self._lock:
            return np.roll(self._ring, -self._write_index).astype(np.float64)

    def read_time_domain(self) -> np.ndarray:
        """Most recent ``fft_size`` samples as bytes (128 = silence)."""
        samples = self._snapshot()
        return np.clip(np.floor(128.0 * (samples + 1.0)), 0, 255).astype(np.uint8)

    def read_frequency_domain(self) -> np.ndarray:
        """Smoothed magnitude spectrum, ``fft_size // 2`` bytes."""
        samples = self._snapshot() * self._window
        spectrum = np.fft.rfft(samples)[: self.frequency_bin_count]
        magnitude = np.abs(spectrum) / self._fft_size
        tau = self._smoothing
        self._smoothed = tau * self._smoothed + (1.0 - tau) * magnitude
        with np.errstate(divide="ignore"):
            db = 20.0 * np.log10(self._smoothed)
        scaled = 255.0 / (self._max_db - self._min_db) * (db - self._min_db)
        return np.clip(np.floor(scaled), 0, 255).astype(np.uint8)
