"""Visualizer display widget: blits the canvas and forwards pointer input."""

from __future__ import annotations

from PySide6.QtCore import QRectF, Qt, Signal
from PySide6.QtGui import QColor, QPainter, QPen
from PySide6.QtWidgets import QSizePolicy, QWidget

from .surface import CanvasSurface
from .theme import COLORS


class WaveformWidget(QWidget):
    """Shows the :class:`CanvasSurface` image and reports input in local x.

    The widget does no layout math of its own; size changes and pointer
    positions go out as signals and the visualizer decides what they mean.
    """

    resized = Signal(int, int, float)   # width, height, device pixel ratio
    pointer_pressed = Signal(float)     # x
    pointer_moved = Signal(float)       # x
    pointer_released = Signal()
    pointer_left = Signal()

    def __init__(self, config: dict | None = None, parent=None):
        super().__init__(parent)
        self._surface = CanvasSurface(config, on_updated=self.update)
        self._loading: bool = False
        self._pressed: bool = False
        height = int((config or {}).get("surface_height", 400))
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)
        self.setFixedHeight(height)
        self.setMouseTracking(True)
        self.setCursor(Qt.PointingHandCursor)

    @property
    def surface(self) -> CanvasSurface:
        return self._surface

    def set_loading(self, loading: bool):
        self._loading = loading
        self.update()

    # ── Qt events ──────────────────────────────────────────────────────────

    def paintEvent(self, event):
        painter = QPainter(self)
        image = self._surface.image
        if self._loading or image is None or not self._surface.has_content:
            painter.fillRect(self.rect(), QColor(COLORS["bg"]))
            painter.setPen(QPen(QColor(COLORS["dim"])))
            text = "Decoding…" if self._loading else "No audio loaded"
            painter.drawText(self.rect(), Qt.AlignCenter, text)
            painter.end()
            return
        geometry = self._surface.geometry
        painter.drawImage(QRectF(0, 0, geometry.surface_width,
                                 geometry.surface_height), image)
        painter.end()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.resized.emit(self.width(), self.height(), self.devicePixelRatioF())

    def showEvent(self, event):
        super().showEvent(event)
        self.resized.emit(self.width(), self.height(), self.devicePixelRatioF())

    def mousePressEvent(self, event):
        if event.button() != Qt.LeftButton:
            super().mousePressEvent(event)
            return
        self._pressed = True
        self.setCursor(Qt.ClosedHandCursor)
        self.pointer_pressed.emit(event.position().x())

    def mouseMoveEvent(self, event):
        if self._pressed:
            self.pointer_moved.emit(event.position().x())

    def mouseReleaseEvent(self, event):
        if event.button() != Qt.LeftButton:
            super().mouseReleaseEvent(event)
            return
        self._pressed = False
        self.setCursor(Qt.PointingHandCursor)
        self.pointer_released.emit()

    def leaveEvent(self, event):
        if self._pressed:
            self._pressed = False
            self.setCursor(Qt.PointingHandCursor)
        self.pointer_left.emit()
        super().leaveEvent(event)
