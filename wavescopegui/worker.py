"""Background decode thread."""

from __future__ import annotations

import threading

from PySide6.QtCore import QThread, Signal

from wavescopelib.decode import DecodeError, decode

from .log import dbg


class DecodeWorker(QThread):
    """Read and decode one audio file off the main thread.

    Emits ``decoded`` with the :class:`SampleBuffer` and the path on
    success, or ``error`` with a user-visible message.  Nothing is emitted
    once :meth:`cancel` has been called.
    """

    decoded = Signal(object, str)   # SampleBuffer, path
    error = Signal(str)

    def __init__(self, path: str, parent=None):
        super().__init__(parent)
        self._path = path
        self._cancelled = threading.Event()

    @property
    def path(self) -> str:
        return self._path

    def cancel(self):
        self._cancelled.set()

    def is_cancelled(self) -> bool:
        return self._cancelled.is_set()

    def run(self):
        try:
            with open(self._path, "rb") as f:
                data = f.read()
            if self._cancelled.is_set():
                return
            samples = decode(data)
        except OSError as exc:
            if not self._cancelled.is_set():
                self.error.emit(f"Cannot read {self._path}: {exc.strerror or exc}")
            return
        except DecodeError as exc:
            if not self._cancelled.is_set():
                self.error.emit(str(exc))
            return
        if self._cancelled.is_set():
            dbg(f"decode of {self._path} cancelled")
            return
        self.decoded.emit(samples, self._path)
