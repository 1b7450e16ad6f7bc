"""QImage-backed drawable surface shared by the static and live renderers."""

from __future__ import annotations

from typing import Callable

from PySide6.QtGui import QColor, QImage, QPainter

from wavescopelib.frames import LiveFrame, StaticFrame, Surface
from wavescopelib.geometry import ViewportGeometry

from .log import dbg
from .renderer import AxisOptions, LiveRenderer, StaticRenderer
from .theme import COLORS


class CanvasSurface(Surface):
    """Offscreen image sized in device pixels.

    Renderers paint in logical pixels; the painter is scaled by the device
    pixel ratio up front, so the widget only has to blit :attr:`image` into
    its logical rect.  ``on_updated`` is called after every completed draw.
    """

    def __init__(self, config: dict | None = None,
                 on_updated: Callable[[], None] | None = None):
        options = AxisOptions.from_config(config)
        self._static = StaticRenderer(options)
        self._live = LiveRenderer(options)
        self._on_updated = on_updated
        self._geometry: ViewportGeometry | None = None
        self._image: QImage | None = None
        self._has_content = False
        self._painting = False

    @property
    def image(self) -> QImage | None:
        return self._image

    @property
    def geometry(self) -> ViewportGeometry | None:
        return self._geometry

    @property
    def has_content(self) -> bool:
        """True once a frame has been drawn since the last clear."""
        return self._has_content

    def configure(self, geometry: ViewportGeometry) -> None:
        if geometry == self._geometry and self._image is not None:
            return
        self._geometry = geometry
        self._image = QImage(max(1, geometry.device_width),
                             max(1, geometry.device_height),
                             QImage.Format_ARGB32_Premultiplied)
        self._image.fill(QColor(COLORS["bg"]))
        self._has_content = False
        dbg(f"surface {geometry.surface_width}x{geometry.surface_height} "
            f"@ {geometry.device_pixel_ratio:g}x")

    def draw_static(self, frame: StaticFrame) -> None:
        self._draw(frame.geometry, lambda p: self._static.paint(p, frame))

    def draw_live(self, frame: LiveFrame) -> None:
        self._draw(frame.geometry, lambda p: self._live.paint(p, frame))

    def clear(self) -> None:
        if self._image is not None:
            self._image.fill(QColor(COLORS["bg"]))
        self._has_content = False
        self._notify()

    def _draw(self, geometry: ViewportGeometry, paint) -> None:
        if self._painting:
            dbg("draw requested while painting; dropped")
            return
        self.configure(geometry)
        painter = QPainter(self._image)
        self._painting = True
        try:
            painter.scale(geometry.device_pixel_ratio,
                          geometry.device_pixel_ratio)
            paint(painter)
        finally:
            painter.end()
            self._painting = False
        self._has_content = True
        self._notify()

    def _notify(self) -> None:
        if self._on_updated is not None:
            self._on_updated()
