"""Static and live renderers: axes, envelope, live waveform, spectrum, playhead."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np

from PySide6.QtCore import QLineF, QPointF, QRectF, Qt
from PySide6.QtGui import (QColor, QFont, QLinearGradient, QPainter,
                           QPen, QPolygonF)

from wavescopelib.frames import LiveFrame, StaticFrame
from wavescopelib.geometry import CoordinateMapper, ViewportGeometry
from wavescopelib.models import VisualizationMode
from wavescopelib.plot import (
    MAX_SPECTRUM_BARS,
    MAX_TIME_MARKERS,
    SECONDS_PER_MARKER,
    amplitude_ticks,
    envelope_polygon,
    live_waveform_points,
    spectrum_bars,
    time_ticks,
)

from .theme import AXIS_ALPHA, COLORS, GRID_ALPHA, GRID_ZERO_ALPHA, label_color

PLAYHEAD_MARKER_RADIUS = 7
PLAYHEAD_INNER_RADIUS = 3
PLAYHEAD_MARKER_OFFSET = 8


@dataclass
class AxisOptions:
    """Time-axis density and spectrum bar limit, taken from the config."""
    max_time_markers: int = MAX_TIME_MARKERS
    seconds_per_marker: float = SECONDS_PER_MARKER
    max_bars: int = MAX_SPECTRUM_BARS

    @classmethod
    def from_config(cls, config: dict | None) -> AxisOptions:
        if not config:
            return cls()
        return cls(
            max_time_markers=int(config.get("max_time_markers", MAX_TIME_MARKERS)),
            seconds_per_marker=float(config.get("seconds_per_marker",
                                                SECONDS_PER_MARKER)),
            max_bars=int(config.get("max_bars", MAX_SPECTRUM_BARS)),
        )


def _polygon(xs: np.ndarray, ys: np.ndarray) -> QPolygonF:
    return QPolygonF([QPointF(float(xs[i]), float(ys[i])) for i in range(len(xs))])


# ---------------------------------------------------------------------------
# Shared drawing
# ---------------------------------------------------------------------------

def draw_background_and_axes(painter: QPainter, geometry: ViewportGeometry,
                             duration: float, options: AxisOptions) -> None:
    """Background, amplitude/time gridlines with labels, and the axis border."""
    g = geometry
    painter.fillRect(QRectF(0, 0, g.surface_width, g.surface_height),
                     QColor(COLORS["bg"]))

    font = QFont()
    font.setPixelSize(11)
    painter.setFont(font)

    for value, y, label in amplitude_ticks(g):
        alpha = GRID_ZERO_ALPHA if value == 0 else GRID_ALPHA
        painter.setPen(QPen(label_color(alpha), 1))
        painter.drawLine(QLineF(g.chart_left, y, g.chart_right, y))
        painter.setPen(label_color())
        painter.drawText(QRectF(0, y - 8, g.chart_left - 10, 16),
                         Qt.AlignRight | Qt.AlignVCenter, label)

    ticks = time_ticks(g, duration,
                       max_markers=options.max_time_markers,
                       seconds_per_marker=options.seconds_per_marker)
    for x, label in ticks:
        painter.setPen(QPen(label_color(GRID_ALPHA), 1))
        painter.drawLine(QLineF(x, g.chart_top, x, g.chart_bottom))
        painter.setPen(label_color())
        painter.drawText(QRectF(x - 30, g.chart_bottom + 10, 60, 16),
                         Qt.AlignHCenter | Qt.AlignTop, label)

    painter.setPen(QPen(label_color(AXIS_ALPHA), 1.5))
    painter.setBrush(Qt.NoBrush)
    painter.drawPolyline(QPolygonF([
        QPointF(g.chart_left, g.chart_top),
        QPointF(g.chart_left, g.chart_bottom),
        QPointF(g.chart_right, g.chart_bottom),
    ]))


def draw_playhead(painter: QPainter, geometry: ViewportGeometry, x: float) -> None:
    """Vertical line with a round marker on top and a triangle below the axis."""
    g = geometry
    red = QColor(COLORS["playhead"])

    glow = QColor(red)
    glow.setAlpha(80)
    painter.setBrush(Qt.NoBrush)
    painter.setPen(QPen(glow, 6))
    painter.drawLine(QLineF(x, g.chart_top, x, g.chart_bottom))
    painter.setPen(QPen(red, 2))
    painter.drawLine(QLineF(x, g.chart_top, x, g.chart_bottom))

    painter.setPen(Qt.NoPen)
    painter.setBrush(red)
    center = QPointF(x, g.chart_top + PLAYHEAD_MARKER_OFFSET)
    painter.drawEllipse(center, PLAYHEAD_MARKER_RADIUS, PLAYHEAD_MARKER_RADIUS)
    painter.setBrush(QColor(COLORS["playhead_inner"]))
    painter.drawEllipse(center, PLAYHEAD_INNER_RADIUS, PLAYHEAD_INNER_RADIUS)

    painter.setBrush(red)
    painter.drawPolygon(QPolygonF([
        QPointF(x, g.chart_bottom),
        QPointF(x - 5, g.chart_bottom + 8),
        QPointF(x + 5, g.chart_bottom + 8),
    ]))


# ---------------------------------------------------------------------------
# Content strategies
# ---------------------------------------------------------------------------

class ContentRenderer(ABC):
    """Draws the chart content between the axes and the playhead."""

    @abstractmethod
    def paint(self, painter: QPainter, geometry: ViewportGeometry, frame) -> None:
        ...


class EnvelopeContent(ContentRenderer):
    """Filled min/max polygon of the whole file."""

    def paint(self, painter, geometry, frame):
        envelope = frame.envelope
        if envelope is None or len(envelope) == 0:
            return
        xs, ys = envelope_polygon(geometry, envelope)
        poly = _polygon(xs, ys)

        color = QColor(COLORS["waveform"])
        grad = QLinearGradient(0, geometry.chart_top, 0, geometry.chart_bottom)
        edge = QColor(color)
        edge.setAlpha(90)
        mid = QColor(color)
        mid.setAlpha(200)
        grad.setColorAt(0.0, edge)
        grad.setColorAt(0.5, mid)
        grad.setColorAt(1.0, edge)

        painter.setPen(Qt.NoPen)
        painter.setBrush(grad)
        painter.drawPolygon(poly)
        painter.setBrush(Qt.NoBrush)
        painter.setPen(QPen(color, 1))
        painter.drawPolygon(poly)


class LiveWaveformContent(ContentRenderer):
    """Polyline of the tap's current time-domain window."""

    def paint(self, painter, geometry, frame):
        data = frame.tap.read_time_domain()
        xs, ys = live_waveform_points(geometry, data)
        if len(xs) == 0:
            return
        pen = QPen(QColor(COLORS["waveform"]), 1.5)
        pen.setCapStyle(Qt.RoundCap)
        pen.setJoinStyle(Qt.RoundJoin)
        painter.setBrush(Qt.NoBrush)
        painter.setPen(pen)
        painter.drawPolyline(_polygon(xs, ys))


class SpectrumContent(ContentRenderer):
    """Hue-graded bars of the tap's frequency magnitudes."""

    def __init__(self, max_bars: int = MAX_SPECTRUM_BARS):
        self.max_bars = max_bars

    def paint(self, painter, geometry, frame):
        data = frame.tap.read_frequency_domain()
        bars = spectrum_bars(geometry, data, max_bars=self.max_bars)
        if len(bars) == 0 or bars.width <= 0:
            return
        painter.setPen(Qt.NoPen)
        for i in range(len(bars)):
            if bars.height[i] <= 0:
                continue
            painter.setBrush(QColor.fromHslF(bars.hue[i] / 360.0, 0.75, 0.55))
            painter.drawRect(QRectF(bars.x[i], bars.y[i],
                                    bars.width, bars.height[i]))


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------

class StaticRenderer:
    """Envelope plus a playhead at the frame's time."""

    def __init__(self, options: AxisOptions | None = None):
        self.options = options or AxisOptions()
        self._content = EnvelopeContent()

    def paint(self, painter: QPainter, frame: StaticFrame) -> None:
        g = frame.geometry
        painter.setRenderHint(QPainter.Antialiasing, True)
        draw_background_and_axes(painter, g, frame.duration, self.options)
        self._content.paint(painter, g, frame)
        x = CoordinateMapper(g, frame.duration).time_to_x(frame.time)
        if x is not None:
            draw_playhead(painter, g, x)


class LiveRenderer:
    """Live waveform or spectrum, with the playhead at the transport's time."""

    def __init__(self, options: AxisOptions | None = None):
        self.options = options or AxisOptions()
        self._envelope = EnvelopeContent()
        self._contents: dict[VisualizationMode, ContentRenderer] = {
            VisualizationMode.WAVEFORM: LiveWaveformContent(),
            VisualizationMode.SPECTRUM: SpectrumContent(self.options.max_bars),
        }

    def content_for(self, frame: LiveFrame) -> ContentRenderer:
        if frame.tap is None:
            return self._envelope
        return self._contents[frame.mode]

    def paint(self, painter: QPainter, frame: LiveFrame) -> None:
        g = frame.geometry
        painter.setRenderHint(QPainter.Antialiasing, True)
        draw_background_and_axes(painter, g, frame.duration, self.options)
        self.content_for(frame).paint(painter, g, frame)

        # read the transport now, not when the frame was built
        mapper = CoordinateMapper(g, frame.duration)
        t = float(frame.transport.current_time or 0.0)
        x = mapper.time_to_x(max(0.0, min(t, frame.duration)))
        if x is not None:
            draw_playhead(painter, g, x)
