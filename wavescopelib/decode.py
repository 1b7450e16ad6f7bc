from __future__ import annotations

import io
import logging
import os

import numpy as np
import soundfile as sf

from .models import SampleBuffer

log = logging.getLogger(__name__)

AUDIO_EXTENSIONS = (".wav", ".aif", ".aiff", ".flac", ".ogg", ".mp3")


class DecodeError(Exception):
    """Raised when audio data cannot be decoded into a SampleBuffer."""
    pass


def _to_buffer(data: np.ndarray, samplerate: int, origin: str) -> SampleBuffer:
    if data.size == 0:
        raise DecodeError(f"{origin} contains no audio frames")
    try:
        return SampleBuffer.from_array(data, samplerate)
    except ValueError as e:
        raise DecodeError(f"{origin}: {e}") from e


def decode(data: bytes) -> SampleBuffer:
    """Decode an in-memory audio file (any format libsndfile reads)."""
    if not data:
        raise DecodeError("No audio data")
    try:
        samples, samplerate = sf.read(io.BytesIO(data), dtype="float32",
                                      always_2d=True)
    except (RuntimeError, TypeError, ValueError) as e:
        # soundfile raises LibsndfileError (a RuntimeError) for unknown formats
        raise DecodeError(f"Unsupported or corrupt audio data: {e}") from e
    buffer = _to_buffer(samples, samplerate, "audio data")
    log.debug("decoded %d bytes: %d ch, %d Hz, %.3f s", len(data),
              buffer.channel_count, buffer.sample_rate, buffer.duration)
    return buffer


def decode_file(filepath: str) -> SampleBuffer:
    """Read and decode an audio file from disk."""
    if not os.path.isfile(filepath):
        raise DecodeError(f"File not found: {filepath}")
    try:
        samples, samplerate = sf.read(filepath, dtype="float32", always_2d=True)
    except (RuntimeError, TypeError, ValueError) as e:
        raise DecodeError(
            f"Cannot decode {os.path.basename(filepath)}: {e}") from e
    return _to_buffer(samples, samplerate, os.path.basename(filepath))
