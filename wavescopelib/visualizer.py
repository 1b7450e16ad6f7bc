"""Waveform/spectrum visualizer with synchronized playback scrubbing.

:class:`WaveformVisualizer` is the component the host talks to.  It owns
the viewport geometry, the envelope, the render loop and the live tap,
and only *reads* the sample buffer and the transport.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from . import events as ev
from .config import margins_from_config, resolve_config
from .decode import DecodeError, decode
from .envelope import Envelope, build_envelope
from .events import EventBus
from .frames import FrameClock, LiveFrame, StaticFrame, Surface, Transport
from .geometry import CoordinateMapper, ViewportGeometry, compute_geometry
from .livetap import LiveTap, LiveTapUnavailable
from .models import SampleBuffer, VisualizationMode
from .scheduler import RenderScheduler
from .scrubber import ScrubberController

log = logging.getLogger(__name__)


class WaveformVisualizer:
    """Keeps the static envelope, the live feed and pointer seeking in sync.

    Parameters
    ----------
    surface : Surface
        Drawable target; receives at most one draw call per frame.
    transport : Transport
        External player.  ``is_playing`` and ``current_time`` are read
        directly whenever a frame is drawn.
    clock : FrameClock
        Display tick source for the render loop.
    config : dict, optional
        Overrides for :data:`wavescopelib.config.VISUALIZER_PARAMS`.
    events : EventBus, optional
        Receives host notifications (see :mod:`wavescopelib.events`).
    tap_factory : callable, optional
        Builds the :class:`LiveTap` on first play.
    """

    def __init__(self, surface: Surface, transport: Transport,
                 clock: FrameClock, *,
                 config: dict[str, Any] | None = None,
                 events: EventBus | None = None,
                 tap_factory: Callable[[], LiveTap] | None = None):
        self._config = resolve_config(config)
        self._margins = margins_from_config(self._config)
        self._surface = surface
        self._transport = transport
        self._events = events if events is not None else EventBus()
        self._tap_factory = tap_factory or self._default_tap
        self._samples: SampleBuffer | None = None
        self._geometry: ViewportGeometry | None = None
        self._envelope: Envelope | None = None
        self._duration: float = 0.0
        self._mode = VisualizationMode.parse(self._config["default_mode"])
        self._tap: LiveTap | None = None
        self._tap_unavailable: bool = False
        self._scheduler = RenderScheduler(clock, transport, self._draw_live,
                                          self._on_transport_stopped)
        self._scrubber = ScrubberController(
            self.mapper, transport,
            lambda: self._scheduler.is_running,
            self._redraw_at_transport_time,
        )

    def _default_tap(self) -> LiveTap:
        cfg = self._config
        return LiveTap(
            cfg["fft_size"],
            smoothing=float(cfg["smoothing"]),
            min_decibels=float(cfg["min_decibels"]),
            max_decibels=float(cfg["max_decibels"]),
        )

    # ── Read-only state ────────────────────────────────────────────────────

    @property
    def config(self) -> dict[str, Any]:
        return dict(self._config)

    @property
    def events(self) -> EventBus:
        return self._events

    @property
    def samples(self) -> SampleBuffer | None:
        return self._samples

    @property
    def geometry(self) -> ViewportGeometry | None:
        return self._geometry

    @property
    def envelope(self) -> Envelope | None:
        return self._envelope

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def mode(self) -> VisualizationMode:
        return self._mode

    @property
    def scheduler(self) -> RenderScheduler:
        return self._scheduler

    @property
    def scrubber(self) -> ScrubberController:
        return self._scrubber

    @property
    def tap(self) -> LiveTap | None:
        return self._tap

    @property
    def live_tap_unavailable(self) -> bool:
        return self._tap_unavailable

    @property
    def is_running(self) -> bool:
        return self._scheduler.is_running

    def mapper(self) -> CoordinateMapper | None:
        """Current pixel/time mapping, or ``None`` if undefined."""
        if self._geometry is None or self._duration <= 0:
            return None
        mapper = CoordinateMapper(self._geometry, self._duration)
        return mapper if mapper.is_defined else None

    def current_time(self) -> float:
        """Transport position clamped to ``[0, duration]``."""
        if self._duration <= 0:
            return 0.0
        t = float(self._transport.current_time or 0.0)
        return max(0.0, min(t, self._duration))

    # ── Host API ───────────────────────────────────────────────────────────

    def on_load(self, samples: SampleBuffer) -> None:
        """Show a newly decoded buffer, replacing anything loaded before."""
        self._release()
        self._samples = samples
        self._duration = samples.duration
        self._tap_unavailable = False
        self._rebuild_envelope()
        self._draw_static(self.current_time())
        log.debug("loaded %d ch, %.3f s", samples.channel_count, samples.duration)
        self._events.emit(ev.LOADED, samples=samples)

    def load_bytes(self, data: bytes) -> bool:
        """Decode *data* and load it.  Decode failures become an error event."""
        try:
            samples = decode(data)
        except DecodeError as e:
            self.on_load_failed(str(e))
            return False
        self.on_load(samples)
        return True

    def on_load_failed(self, message: str) -> None:
        """Clear prior state and report *message* upward."""
        log.warning("audio load failed: %s", message)
        self.clear()
        self._events.emit(ev.ERROR, message=message)

    def on_resize(self, width: int, height: int, dpr: float = 1.0) -> bool:
        """Recompute the layout.  Returns False when the size is unusable."""
        geometry = compute_geometry(width, height, dpr, self._margins)
        if not geometry.is_drawable:
            log.debug("ignoring resize to %dx%d (chart %dx%d)", width, height,
                      geometry.chart_width, geometry.chart_height)
            return False
        width_changed = (self._geometry is None
                         or self._geometry.chart_width != geometry.chart_width)
        self._geometry = geometry
        self._surface.configure(geometry)
        if width_changed or self._envelope is None:
            self._rebuild_envelope()
        if not self._scheduler.is_running:
            self._draw_static(self.current_time())
        return True

    def on_play_toggle(self) -> None:
        if self._samples is None:
            return
        if self._transport.is_playing:
            self.pause()
        else:
            self.play()

    def play(self) -> None:
        if self._samples is None:
            return
        self._ensure_tap()
        self._transport.play()
        if not self._transport.is_playing:
            log.debug("transport refused to start")
            return
        self._scheduler.start()
        self._events.emit(ev.PLAYING, is_playing=True)

    def pause(self) -> None:
        self._transport.pause()
        self._scheduler.stop()
        self._draw_static(self.current_time())
        self._events.emit(ev.PLAYING, is_playing=False)

    def on_seek(self, x: float) -> bool:
        """Seek to the time under surface-local *x*; out-of-range x is ignored."""
        return self._after_seek(self._scrubber.seek_to_x(x))

    def seek_time(self, t: float) -> bool:
        """Seek to *t* seconds (slider input)."""
        if self._samples is None or self._duration <= 0:
            return False
        t = max(0.0, min(float(t), self._duration))
        self._transport.seek(t)
        if not self._scheduler.is_running:
            self._draw_static(t)
        self._events.emit(ev.SEEKED, time=t)
        return True

    def on_pointer_press(self, x: float) -> bool:
        return self._after_seek(self._scrubber.press(x))

    def on_pointer_move(self, x: float) -> bool:
        return self._after_seek(self._scrubber.move(x))

    def on_pointer_release(self) -> None:
        self._scrubber.release()

    def on_pointer_leave(self) -> None:
        self._scrubber.leave()

    def on_mode_change(self, mode: VisualizationMode | str) -> None:
        mode = VisualizationMode.parse(mode)
        if mode is self._mode:
            return
        self._mode = mode
        # the running loop picks the new mode up on its next tick
        self._events.emit(ev.MODE, mode=mode)

    def on_loaded_metadata(self) -> None:
        """Adopt the transport's duration once it is known."""
        duration = float(self._transport.duration or 0.0)
        if duration > 0 and duration != self._duration:
            self._duration = duration
            if not self._scheduler.is_running:
                self._draw_static(self.current_time())

    def on_time_update(self) -> float:
        """Return the clamped transport time for host-side labels."""
        return self.current_time()

    def on_ended(self) -> None:
        """Stop the loop and settle the playhead at the end position."""
        self._scheduler.stop()
        self._draw_static(self._duration)
        self._events.emit(ev.PLAYING, is_playing=False)

    def clear(self) -> None:
        """Forget the loaded file.  Idempotent."""
        if self._transport.is_playing:
            self._transport.pause()
        self._release()
        self._surface.clear()
        self._events.emit(ev.CLEARED)

    def on_teardown(self) -> None:
        """Release everything before the host drops this component."""
        self._scrubber.leave()
        self._release()

    # ── Internals ──────────────────────────────────────────────────────────

    def _release(self) -> None:
        self._scheduler.stop()
        if self._tap is not None:
            self._tap.detach()
            self._tap = None
        self._samples = None
        self._envelope = None
        self._duration = 0.0

    def _after_seek(self, seeked: bool) -> bool:
        if seeked:
            self._events.emit(ev.SEEKED, time=self.current_time())
        return seeked

    def _ensure_tap(self) -> None:
        if self._tap is not None or self._tap_unavailable:
            return
        tap = self._tap_factory()
        try:
            tap.attach(self._transport)
        except LiveTapUnavailable as e:
            log.debug("live tap unavailable, static playhead only: %s", e)
            self._tap_unavailable = True
            return
        self._tap = tap

    def _rebuild_envelope(self) -> None:
        if self._samples is None or self._geometry is None \
                or not self._geometry.is_drawable:
            return
        envelope = build_envelope(self._samples, self._geometry.chart_width)
        self._envelope = envelope

    def _on_transport_stopped(self) -> None:
        # the player stopped without pause() or ended (e.g. device abort)
        self._draw_static(self.current_time())
        self._events.emit(ev.PLAYING, is_playing=False)

    def _redraw_at_transport_time(self) -> None:
        self._draw_static(self.current_time())

    def _draw_static(self, t: float) -> None:
        geometry = self._geometry
        if self._samples is None or geometry is None or not geometry.is_drawable:
            return
        t = max(0.0, min(t, self._duration))
        self._surface.draw_static(StaticFrame(
            geometry=geometry, envelope=self._envelope,
            duration=self._duration, time=t,
        ))

    def _draw_live(self) -> None:
        geometry = self._geometry
        if geometry is None or not geometry.is_drawable:
            return
        self._surface.draw_live(LiveFrame(
            geometry=geometry, mode=self._mode, tap=self._tap,
            envelope=self._envelope, transport=self._transport,
            duration=self._duration,
        ))
