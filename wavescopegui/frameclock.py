from __future__ import annotations

from typing import Any, Callable

from PySide6.QtCore import QObject, Qt, QTimer

from wavescopelib.frames import FrameClock


class QtFrameClock(FrameClock):
    """Single-shot ``QTimer`` ticking at roughly the display refresh rate.

    Holds at most one pending callback; a new request replaces the old one.
    """

    def __init__(self, interval_ms: int = 16, parent: QObject | None = None):
        self._timer = QTimer(parent)
        self._timer.setSingleShot(True)
        self._timer.setTimerType(Qt.PreciseTimer)
        self._timer.setInterval(max(1, int(interval_ms)))
        self._timer.timeout.connect(self._fire)
        self._serial = 0
        self._pending: tuple[int, Callable[[], None]] | None = None

    @property
    def interval_ms(self) -> int:
        return self._timer.interval()

    @property
    def is_pending(self) -> bool:
        return self._pending is not None

    def request(self, callback: Callable[[], None]) -> Any:
        self._serial += 1
        self._pending = (self._serial, callback)
        self._timer.start()
        return self._serial

    def cancel(self, handle: Any) -> None:
        if self._pending is not None and self._pending[0] == handle:
            self._pending = None
            self._timer.stop()

    def _fire(self) -> None:
        pending, self._pending = self._pending, None
        if pending is not None:
            pending[1]()
