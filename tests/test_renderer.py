"""Offscreen paint checks for the Qt renderers and the canvas surface."""

import numpy as np
import pytest

pytest.importorskip("PySide6")

from PySide6.QtGui import QColor, QImage, QPainter  # noqa: E402

from wavescopegui.renderer import LiveRenderer, StaticRenderer  # noqa: E402
from wavescopegui.surface import CanvasSurface  # noqa: E402
from wavescopegui.theme import COLORS  # noqa: E402
from wavescopelib.envelope import build_envelope  # noqa: E402
from wavescopelib.frames import LiveFrame, StaticFrame  # noqa: E402
from wavescopelib.geometry import compute_geometry  # noqa: E402
from wavescopelib.models import VisualizationMode  # noqa: E402

from conftest import FakeTransport, sine  # noqa: E402

pytestmark = pytest.mark.qt

GEOMETRY = compute_geometry(1000, 400)  # chart x 60..980, y 20..350, mid 185


class ConstantTap:
    def __init__(self, time_value=128, freq_value=255):
        self.time_value = time_value
        self.freq_value = freq_value

    def read_time_domain(self):
        return np.full(2048, self.time_value, dtype=np.uint8)

    def read_frequency_domain(self):
        return np.full(1024, self.freq_value, dtype=np.uint8)


def _paint(renderer, frame, geometry=GEOMETRY):
    image = QImage(geometry.surface_width, geometry.surface_height,
                   QImage.Format_ARGB32_Premultiplied)
    image.fill(0)
    painter = QPainter(image)
    renderer.paint(painter, frame)
    painter.end()
    return image


def _static_frame(t=0.5):
    samples = sine(seconds=1.0)
    return StaticFrame(geometry=GEOMETRY,
                       envelope=build_envelope(samples, GEOMETRY.chart_width),
                       duration=1.0, time=t)


def _live_frame(tap, mode, t=0.0):
    transport = FakeTransport(duration=1.0)
    transport.current_time = t
    samples = sine(seconds=1.0)
    return LiveFrame(geometry=GEOMETRY, mode=mode, tap=tap,
                     envelope=build_envelope(samples, GEOMETRY.chart_width),
                     transport=transport, duration=1.0)


def test_static_background_and_playhead(qapp):
    image = _paint(StaticRenderer(), _static_frame(0.5))
    bg = QColor(COLORS["bg"])
    corner = image.pixelColor(3, 3)
    assert (corner.red(), corner.green(), corner.blue()) == (bg.red(), bg.green(), bg.blue())

    # playhead at 0.5 s is x = 60 + 460; marker circle centred at y = 28
    ring = image.pixelColor(525, 28)
    assert ring.red() > 200 and ring.green() < 100
    inner = image.pixelColor(520, 28)
    assert min(inner.red(), inner.green(), inner.blue()) > 200


def test_static_envelope_is_filled(qapp):
    image = _paint(StaticRenderer(), _static_frame(0.0))
    inside = image.pixelColor(300, 185)
    assert inside.blue() > inside.red()
    assert inside.blue() > QColor(COLORS["bg"]).blue()


def test_live_spectrum_bars(qapp):
    image = _paint(LiveRenderer(), _live_frame(ConstantTap(), VisualizationMode.SPECTRUM))
    # bar 75 of 150 starts at x ~ 520 with hue 180 (cyan)
    pixel = image.pixelColor(522, 200)
    assert pixel.green() > 180 and pixel.blue() > 180 and pixel.red() < 100


def test_live_waveform_line(qapp):
    image = _paint(LiveRenderer(), _live_frame(ConstantTap(), VisualizationMode.WAVEFORM))
    on_line = image.pixelColor(300, 185)
    assert on_line.blue() > 150


def test_live_without_tap_draws_envelope(qapp):
    renderer = LiveRenderer()
    frame = _live_frame(None, VisualizationMode.SPECTRUM)
    assert type(renderer.content_for(frame)).__name__ == "EnvelopeContent"
    image = _paint(renderer, frame)
    assert image.pixelColor(300, 185).blue() > image.pixelColor(300, 185).red()


def test_live_playhead_reads_transport_at_draw_time(qapp):
    frame = _live_frame(ConstantTap(freq_value=0), VisualizationMode.SPECTRUM, t=0.0)
    frame.transport.current_time = 0.5
    image = _paint(LiveRenderer(), frame)
    ring = image.pixelColor(525, 28)
    assert ring.red() > 200 and ring.green() < 100


def test_canvas_surface_scales_to_device_pixels(qapp):
    updates = []
    canvas = CanvasSurface(on_updated=lambda: updates.append(1))
    geometry = compute_geometry(1000, 400, dpr=2.0)
    canvas.configure(geometry)
    assert (canvas.image.width(), canvas.image.height()) == (2000, 800)
    assert not canvas.has_content

    samples = sine(seconds=1.0)
    canvas.draw_static(StaticFrame(
        geometry=geometry, envelope=build_envelope(samples, geometry.chart_width),
        duration=1.0, time=0.5))
    assert canvas.has_content
    assert updates == [1]
    ring = canvas.image.pixelColor(1050, 56)
    assert ring.red() > 200 and ring.green() < 100

    canvas.clear()
    assert not canvas.has_content
    assert len(updates) == 2
