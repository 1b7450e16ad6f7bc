"""Cooperative, frame-driven render loop."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable

from .frames import FrameClock, Transport

log = logging.getLogger(__name__)


class SchedulerState(Enum):
    IDLE = "idle"
    RUNNING = "running"


class RenderScheduler:
    """Invokes *draw* once per display tick while the transport is playing.

    The loop reads ``transport.is_playing`` on every tick instead of
    capturing it at :meth:`start`, so a pause takes effect on the next tick
    without any outside cancellation.  At most one tick is pending at a
    time.  When a tick finds the transport stopped, *on_stopped* (if given)
    is called once after the loop has gone Idle.
    """

    def __init__(self, clock: FrameClock, transport: Transport,
                 draw: Callable[[], None],
                 on_stopped: Callable[[], None] | None = None):
        self._clock = clock
        self._transport = transport
        self._draw = draw
        self._on_stopped = on_stopped
        self._state = SchedulerState.IDLE
        self._handle: Any = None
        self._frames_drawn = 0

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is SchedulerState.RUNNING

    @property
    def has_pending_tick(self) -> bool:
        return self._handle is not None

    @property
    def frames_drawn(self) -> int:
        return self._frames_drawn

    def start(self) -> None:
        """Enter Running and request the first tick.  No-op if running."""
        if self._state is SchedulerState.RUNNING:
            return
        self._state = SchedulerState.RUNNING
        self._handle = self._clock.request(self._tick)
        log.debug("render loop started")

    def stop(self) -> None:
        """Cancel the pending tick and return to Idle.  Safe to repeat."""
        if self._handle is not None:
            self._clock.cancel(self._handle)
            self._handle = None
        if self._state is SchedulerState.RUNNING:
            log.debug("render loop stopped after %d frames", self._frames_drawn)
        self._state = SchedulerState.IDLE

    def _tick(self) -> None:
        self._handle = None
        if self._state is not SchedulerState.RUNNING:
            return
        if not self._transport.is_playing:
            self._state = SchedulerState.IDLE
            log.debug("transport stopped under the render loop")
            if self._on_stopped is not None:
                self._on_stopped()
            return
        self._draw()
        self._frames_drawn += 1
        # draw() may have stopped the loop (e.g. teardown from a callback)
        if self._state is SchedulerState.RUNNING and self._handle is None:
            self._handle = self._clock.request(self._tick)
