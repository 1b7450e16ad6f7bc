from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np


class VisualizationMode(Enum):
    WAVEFORM = "waveform"
    SPECTRUM = "spectrum"

    @classmethod
    def parse(cls, value: VisualizationMode | str) -> VisualizationMode:
        """Accept an enum member, its value, or the legacy ``"bars"`` alias."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        if key == "bars":
            return cls.SPECTRUM
        return cls(key)


@dataclass(frozen=True)
class SampleBuffer:
    """Decoded multi-channel audio.

    Attributes:
        channels:    One contiguous float32 array per channel.  The arrays
                     are marked read-only on construction.
        sample_rate: Samples per second.
    """
    channels: tuple[np.ndarray, ...]
    sample_rate: int

    def __post_init__(self):
        if self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")
        if not self.channels:
            raise ValueError("SampleBuffer needs at least one channel")
        lengths = {len(ch) for ch in self.channels}
        if len(lengths) != 1:
            raise ValueError(f"channel lengths differ: {sorted(lengths)}")
        if lengths.pop() == 0:
            raise ValueError("SampleBuffer contains no samples")
        frozen = []
        for ch in self.channels:
            arr = np.array(ch, dtype=np.float32, copy=True)
            arr.flags.writeable = False
            frozen.append(arr)
        object.__setattr__(self, "channels", tuple(frozen))

    @classmethod
    def from_array(cls, data: np.ndarray, sample_rate: int) -> SampleBuffer:
        """Split a ``(frames,)`` or ``(frames, channels)`` array."""
        data = np.asarray(data)
        if data.ndim == 1:
            channels = (np.ascontiguousarray(data),)
        elif data.ndim == 2:
            channels = tuple(np.ascontiguousarray(data[:, ch])
                             for ch in range(data.shape[1]))
        else:
            raise ValueError(f"expected 1-D or 2-D audio data, got {data.ndim}-D")
        return cls(channels=channels, sample_rate=int(sample_rate))

    @property
    def channel_count(self) -> int:
        return len(self.channels)

    @property
    def sample_count(self) -> int:
        return len(self.channels[0])

    @property
    def duration(self) -> float:
        return self.sample_count / self.sample_rate

    def channel(self, index: int = 0) -> np.ndarray:
        return self.channels[index]

    def interleaved(self) -> np.ndarray:
        """Return a ``(frames, channels)`` array for output streams."""
        return np.column_stack(self.channels)


@dataclass
class PlaybackState:
    """Mutable transport snapshot, read directly at each frame.

    Can serve as the externally-owned state handle that the scheduler and
    live renderer read at draw time.
    """
    current_time: float = 0.0
    duration: float = 0.0
    is_playing: bool = False

    def clamped_time(self) -> float:
        if self.duration <= 0:
            return 0.0
        return max(0.0, min(self.current_time, self.duration))
