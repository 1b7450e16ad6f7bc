"""Pointer press/drag/release interpretation for timeline seeking."""

from __future__ import annotations

from enum import Enum
from typing import Callable

from .geometry import CoordinateMapper
from .frames import Transport


class PointerState(Enum):
    RELEASED = "released"
    PRESSED = "pressed"
    DRAGGING = "dragging"


class ScrubberController:
    """Turns pointer events into transport seeks.

    Parameters
    ----------
    mapper : callable
        Returns the current :class:`CoordinateMapper` or ``None`` when no
        mapping exists (nothing loaded, zero-size surface).
    transport : Transport
        Receives ``seek(t)`` for every valid press or drag position.
    is_running : callable
        Whether the render loop is active.  When it is, the next tick shows
        the new position and no extra draw is requested.
    redraw : callable
        Draws one static frame; called only while the loop is idle.
    """

    def __init__(self, mapper: Callable[[], CoordinateMapper | None],
                 transport: Transport,
                 is_running: Callable[[], bool],
                 redraw: Callable[[], None]):
        self._mapper = mapper
        self._transport = transport
        self._is_running = is_running
        self._redraw = redraw
        self._state = PointerState.RELEASED

    @property
    def state(self) -> PointerState:
        return self._state

    def press(self, x: float) -> bool:
        self._state = PointerState.PRESSED
        return self.seek_to_x(x)

    def move(self, x: float) -> bool:
        if self._state is PointerState.RELEASED:
            return False
        self._state = PointerState.DRAGGING
        return self.seek_to_x(x)

    def release(self) -> None:
        self._state = PointerState.RELEASED

    def leave(self) -> None:
        # leaving the surface mid-drag ends the drag
        self._state = PointerState.RELEASED

    def seek_to_x(self, x: float) -> bool:
        """Seek to the time under *x*.  Returns False if *x* is ignored."""
        mapper = self._mapper()
        if mapper is None:
            return False
        t = mapper.x_to_time(x)
        if t is None:
            return False
        self._transport.seek(t)
        if not self._is_running():
            self._redraw()
        return True
