"""Contracts between the visualizer core and its host.

The core never touches a paint device, a timer or an audio stream
directly.  It talks to:

* a :class:`Surface` that owns the drawable buffer and the renderers,
* a :class:`FrameClock` that delivers display-refresh ticks,
* a :class:`Transport` (duck-typed) that plays audio.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Protocol

from .envelope import Envelope
from .geometry import ViewportGeometry
from .models import VisualizationMode


class Transport(Protocol):
    """Playback transport as seen by the core (read + seek/play/pause).

    ``add_output_listener`` / ``remove_output_listener`` are optional;
    their absence means no live tap can be attached.
    """
    current_time: float
    duration: float
    is_playing: bool

    def play(self) -> None: ...
    def pause(self) -> None: ...
    def seek(self, t: float) -> None: ...


@dataclass(frozen=True)
class StaticFrame:
    """Snapshot for one static draw: envelope plus playhead at *time*."""
    geometry: ViewportGeometry
    envelope: Envelope | None
    duration: float
    time: float


@dataclass(frozen=True)
class LiveFrame:
    """Inputs for one live draw.

    ``transport`` is read by the renderer at draw time for the playhead;
    ``tap`` is ``None`` when live data is unavailable, in which case the
    envelope is drawn instead.
    """
    geometry: ViewportGeometry
    mode: VisualizationMode
    tap: Any
    envelope: Envelope | None
    transport: Transport
    duration: float


class Surface(ABC):
    """Drawable area owned exclusively by whichever renderer is invoked."""

    @abstractmethod
    def configure(self, geometry: ViewportGeometry) -> None:
        """(Re)allocate the backing buffer for *geometry*."""
        ...

    @abstractmethod
    def draw_static(self, frame: StaticFrame) -> None:
        ...

    @abstractmethod
    def draw_live(self, frame: LiveFrame) -> None:
        ...

    def clear(self) -> None:
        """Blank the surface (no file loaded)."""


class FrameClock(ABC):
    """Source of display-refresh-aligned callbacks."""

    @abstractmethod
    def request(self, callback: Callable[[], None]) -> Any:
        """Schedule *callback* for the next tick and return a handle."""
        ...

    @abstractmethod
    def cancel(self, handle: Any) -> None:
        """Cancel a pending request.  Unknown or spent handles are ignored."""
        ...
