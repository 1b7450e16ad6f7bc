"""Audio transport using sounddevice.

:class:`PlaybackTransport` is the player the visualizer reads from.  It also
offers the optional output-listener capability the live tap attaches to:
listeners receive every block of frames written to the output stream, on the
audio thread.
"""

from __future__ import annotations

import threading
from typing import Callable

import numpy as np
import sounddevice as sd

from PySide6.QtCore import QObject, QTimer, Signal, Slot

from wavescopelib.models import SampleBuffer

from .log import dbg

# Maximum output channels; wider files are folded down to stereo
_MAX_OUTPUT_CHANNELS = 2


class PlaybackTransport(QObject):
    """Play/pause/seek over a loaded :class:`SampleBuffer`.

    Signals:
        loaded_metadata(): Emitted once a buffer is loaded and its duration known.
        time_update(float): Emitted ~30fps while playing, and after seeks.
        ended(): Emitted when playback reaches the end of the audio,
            including a seek to the end while playing.
        error(str): Emitted when the output stream cannot be opened.
    """

    loaded_metadata = Signal()
    time_update = Signal(float)
    ended = Signal()
    error = Signal(str)

    # audio thread -> main thread (queued across threads)
    _stream_finished = Signal(int)

    def __init__(self, parent=None, update_interval_ms: int = 30):
        super().__init__(parent)
        self._stream: sd.OutputStream | None = None
        self._audio: np.ndarray | None = None  # (frames, channels) float32
        self._samplerate: int = 44100
        self._position: int = 0
        self._play_start_sample: int = 0
        self._play_frame_count: list[int] = [0]
        self._reached_end: list[bool] = [False]
        self._playing: bool = False
        self._generation: int = 0
        self._listeners: list[Callable[[np.ndarray], None]] = []
        self._listeners_lock = threading.Lock()

        self._stream_finished.connect(self._on_finished_main)

        self._timer = QTimer(self)
        self._timer.setInterval(update_interval_ms)
        self._timer.timeout.connect(self._on_timer)

    # ── Transport ──────────────────────────────────────────────────────────

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def duration(self) -> float:
        if self._audio is None:
            return 0.0
        return self._audio.shape[0] / self._samplerate

    @property
    def current_time(self) -> float:
        return self.current_sample() / self._samplerate

    @property
    def samplerate(self) -> int:
        return self._samplerate

    def current_sample(self) -> int:
        """Return the current playback sample position."""
        if self._playing:
            return self._play_start_sample + self._play_frame_count[0]
        return self._position

    def load(self, samples: SampleBuffer) -> None:
        """Make *samples* the current audio, positioned at the start."""
        self.unload()
        audio = samples.interleaved()
        if audio.shape[1] > _MAX_OUTPUT_CHANNELS:
            audio = np.ascontiguousarray(
                np.stack([audio[:, 0::2].mean(axis=1),
                          audio[:, 1::2].mean(axis=1)], axis=1),
                dtype=np.float32)
        self._audio = audio
        self._samplerate = samples.sample_rate
        self._position = 0
        dbg(f"loaded {audio.shape[0]} frames x {audio.shape[1]} ch "
            f"@ {self._samplerate} Hz")
        self.loaded_metadata.emit()

    def unload(self) -> None:
        """Stop playback and drop the audio."""
        self._stop_stream()
        self._playing = False
        self._audio = None
        self._position = 0

    def play(self) -> None:
        if self._audio is None or self._playing:
            return
        start = self._position
        if start >= self._audio.shape[0]:
            start = 0
        self._start_stream(start)

    def pause(self) -> None:
        if not self._playing:
            return
        pos = self.current_sample()
        self._stop_stream()
        self._playing = False
        self._position = pos
        self.time_update.emit(self.current_time)

    def seek(self, t: float) -> None:
        if self._audio is None:
            return
        total = self._audio.shape[0]
        sample = max(0, min(int(round(float(t) * self._samplerate)), total))
        was_playing = self._playing
        if was_playing:
            self._stop_stream()
            self._playing = False
            self._position = sample
            if sample < total:
                self._start_stream(sample)
        else:
            self._position = sample
        self.time_update.emit(self.current_time)
        if was_playing and sample >= total:
            self.ended.emit()

    # ── Output listeners (live tap capability) ─────────────────────────────

    def add_output_listener(self, listener: Callable[[np.ndarray], None]) -> None:
        with self._listeners_lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def remove_output_listener(self, listener: Callable[[np.ndarray], None]) -> None:
        with self._listeners_lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    # ── Stream lifecycle ───────────────────────────────────────────────────

    def _start_stream(self, start_sample: int) -> None:
        self._generation += 1
        generation = self._generation
        self._play_start_sample = start_sample
        self._play_frame_count = [0]
        self._reached_end = [False]
        play_data = self._audio[start_sample:]

        frame_count = self._play_frame_count
        reached_end = self._reached_end
        listeners = self._listeners
        lock = self._listeners_lock

        def callback(outdata, frames, time_info, status):
            pos = frame_count[0]
            end = pos + frames
            stop = False
            if end <= len(play_data):
                outdata[:] = play_data[pos:end]
                frame_count[0] = end
            else:
                remaining = len(play_data) - pos
                if remaining > 0:
                    outdata[:remaining] = play_data[pos:]
                outdata[remaining:] = 0
                frame_count[0] = len(play_data)
                reached_end[0] = True
                stop = True
            with lock:
                current = list(listeners)
            for listener in current:
                listener(outdata)
            if stop:
                raise sd.CallbackStop()

        def finished():
            self._stream_finished.emit(generation)

        self._playing = True
        try:
            self._stream = sd.OutputStream(
                samplerate=self._samplerate,
                channels=self._audio.shape[1],
                dtype="float32",
                callback=callback,
                finished_callback=finished,
            )
            self._stream.start()
            self._timer.start()
        except (sd.PortAudioError, ValueError) as e:
            self._stream = None
            self._playing = False
            self._position = start_sample
            self.error.emit(str(e))

    def _stop_stream(self) -> None:
        # bump first so the finished callback of this stream is ignored
        self._generation += 1
        self._timer.stop()
        if self._stream is not None:
            try:
                self._stream.stop()
                self._stream.close()
            except sd.PortAudioError as e:
                dbg(f"stream close failed: {e}")
            self._stream = None

    @Slot(int)
    def _on_finished_main(self, generation: int):
        """Handle stream completion on the main thread."""
        if generation != self._generation:
            return
        self._timer.stop()
        self._stream = None
        if not self._reached_end[0]:
            # aborted by the device; keep the position
            self._position = self.current_sample()
            self._playing = False
            self.time_update.emit(self.current_time)
            return
        self._playing = False
        self._position = self._audio.shape[0] if self._audio is not None else 0
        self.time_update.emit(self.current_time)
        self.ended.emit()

    @Slot()
    def _on_timer(self):
        """Emit position updates during playback."""
        if self._playing:
            self.time_update.emit(self.current_time)
