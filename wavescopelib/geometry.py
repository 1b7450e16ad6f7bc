"""Viewport layout and pixel <-> time mapping."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Margins:
    """Space reserved around the chart for axis labels (logical pixels)."""
    left: int = 60
    top: int = 20
    right: int = 20
    bottom: int = 50


@dataclass(frozen=True)
class ViewportGeometry:
    surface_width: int
    surface_height: int
    margins: Margins = field(default_factory=Margins)
    device_pixel_ratio: float = 1.0

    @property
    def chart_left(self) -> int:
        return self.margins.left

    @property
    def chart_top(self) -> int:
        return self.margins.top

    @property
    def chart_right(self) -> int:
        return self.surface_width - self.margins.right

    @property
    def chart_bottom(self) -> int:
        return self.surface_height - self.margins.bottom

    @property
    def chart_width(self) -> int:
        return self.surface_width - self.margins.left - self.margins.right

    @property
    def chart_height(self) -> int:
        return self.surface_height - self.margins.top - self.margins.bottom

    @property
    def chart_mid_y(self) -> float:
        return self.chart_top + self.chart_height / 2.0

    @property
    def device_width(self) -> int:
        return int(round(self.surface_width * self.device_pixel_ratio))

    @property
    def device_height(self) -> int:
        return int(round(self.surface_height * self.device_pixel_ratio))

    @property
    def is_drawable(self) -> bool:
        return self.chart_width > 0 and self.chart_height > 0


def compute_geometry(width: int, height: int, dpr: float = 1.0,
                     margins: Margins | None = None) -> ViewportGeometry:
    """Lay out a surface of *width* x *height* logical pixels.

    Always returns a geometry; callers check :attr:`ViewportGeometry.is_drawable`
    before building envelopes or drawing.
    """
    if not dpr or dpr <= 0:
        dpr = 1.0
    return ViewportGeometry(
        surface_width=int(width),
        surface_height=int(height),
        margins=margins or Margins(),
        device_pixel_ratio=float(dpr),
    )


class CoordinateMapper:
    """Bidirectional mapping between chart x and playback time.

    Both directions return ``None`` when the mapping is undefined
    (no duration, non-drawable geometry, or x outside the chart).
    """

    def __init__(self, geometry: ViewportGeometry, duration: float):
        self._geometry = geometry
        self._duration = float(duration)

    @property
    def geometry(self) -> ViewportGeometry:
        return self._geometry

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def is_defined(self) -> bool:
        return self._duration > 0 and self._geometry.is_drawable

    @property
    def time_resolution(self) -> float:
        """Seconds covered by one chart pixel."""
        if not self.is_defined:
            return 0.0
        return self._duration / self._geometry.chart_width

    def contains_x(self, x: float) -> bool:
        g = self._geometry
        return g.chart_left <= x <= g.chart_right

    def time_to_x(self, t: float) -> float | None:
        if not self.is_defined:
            return None
        g = self._geometry
        return g.chart_left + g.chart_width * (t / self._duration)

    def x_to_time(self, x: float) -> float | None:
        if not self.is_defined or not self.contains_x(x):
            return None
        g = self._geometry
        frac = (x - g.chart_left) / g.chart_width
        return max(0.0, min(frac, 1.0)) * self._duration
