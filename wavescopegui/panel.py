"""Visualizer panel: mode toolbar + WaveformWidget + transport bar."""

from __future__ import annotations

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QActionGroup
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QMenu,
    QPushButton,
    QSlider,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from wavescopelib import events as ev
from wavescopelib.config import resolve_config
from wavescopelib.events import EventBus
from wavescopelib.models import SampleBuffer, VisualizationMode
from wavescopelib.plot import format_time
from wavescopelib.visualizer import WaveformVisualizer

from .frameclock import QtFrameClock
from .log import dbg
from .playback import PlaybackTransport
from .widget import WaveformWidget

# Seek slider resolution (ticks per second)
_SLIDER_STEPS_PER_SECOND = 10

_MODE_LABELS = {
    VisualizationMode.WAVEFORM: "Waveform",
    VisualizationMode.SPECTRUM: "Spectrum",
}


class WaveformPanel(QWidget):
    """Composite widget wiring the visualizer to Qt playback and input.

    The panel owns the transport, the frame clock and the display widget,
    and forwards every host event to :class:`WaveformVisualizer`.
    """

    error_occurred = Signal(str)
    mode_changed = Signal(str)

    def __init__(self, config: dict | None = None, parent=None):
        super().__init__(parent)
        self._config = resolve_config(config)
        self._slider_updating = False

        self.events = EventBus()
        self.transport = PlaybackTransport(self)
        self.clock = QtFrameClock(self._config["frame_interval_ms"], self)
        self.waveform = WaveformWidget(self._config)
        self.visualizer = WaveformVisualizer(
            self.waveform.surface, self.transport, self.clock,
            config=self._config, events=self.events,
        )

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)
        layout.addWidget(self._build_toolbar())
        layout.addWidget(self.waveform)
        layout.addWidget(self._build_transport())
        layout.addStretch(1)

        self._connect()
        self._sync_mode_actions(self.visualizer.mode)
        self._update_controls()

    # ------------------------------------------------------------------
    # Toolbar
    # ------------------------------------------------------------------

    def _build_toolbar(self) -> QWidget:
        bar = QWidget()
        toolbar = QHBoxLayout(bar)
        toolbar.setContentsMargins(4, 2, 4, 2)

        dropdown_style = (
            "QToolButton { padding-right: 30px; }"
            "QToolButton::menu-indicator { subcontrol-position: right center;"
            " subcontrol-origin: padding; right: 5px; }")

        self.display_mode_btn = QToolButton()
        self.display_mode_btn.setToolTip(
            "Switch between live Waveform and Spectrum display")
        self.display_mode_btn.setPopupMode(QToolButton.InstantPopup)
        self.display_mode_btn.setAutoRaise(True)
        self.display_mode_btn.setStyleSheet(dropdown_style)
        display_menu = QMenu(self.display_mode_btn)
        self.wf_action = display_menu.addAction("Waveform")
        self.spec_action = display_menu.addAction("Spectrum")
        self.wf_action.setCheckable(True)
        self.spec_action.setCheckable(True)
        self.wf_action.setData(VisualizationMode.WAVEFORM.value)
        self.spec_action.setData(VisualizationMode.SPECTRUM.value)
        self._display_group = QActionGroup(self)
        self._display_group.addAction(self.wf_action)
        self._display_group.addAction(self.spec_action)
        self._display_group.triggered.connect(self._on_display_mode_changed)
        self.display_mode_btn.setMenu(display_menu)
        toolbar.addWidget(self.display_mode_btn)

        toolbar.addStretch()
        return bar

    def _on_display_mode_changed(self, action):
        self.visualizer.on_mode_change(action.data())

    def _sync_mode_actions(self, mode: VisualizationMode):
        self.display_mode_btn.setText(_MODE_LABELS[mode])
        action = self.wf_action if mode is VisualizationMode.WAVEFORM \
            else self.spec_action
        action.setChecked(True)

    # ------------------------------------------------------------------
    # Transport bar
    # ------------------------------------------------------------------

    def _build_transport(self) -> QWidget:
        transport = QWidget()
        transport.setObjectName("wfTransport")
        transport.setFixedHeight(32)
        transport.setStyleSheet(
            "#wfTransport { background-color: #2d2d2d;"
            " border-top: 1px solid #555; }")
        layout = QHBoxLayout(transport)
        layout.setContentsMargins(4, 2, 4, 2)
        layout.setSpacing(4)

        _BTN_H = 24

        self.play_btn = QPushButton("▶ Play")
        self.play_btn.setFixedHeight(_BTN_H)
        self.play_btn.clicked.connect(self.visualizer.on_play_toggle)
        layout.addWidget(self.play_btn)

        self.time_label = QLabel("00:00 / 00:00")
        self.time_label.setStyleSheet(
            "color: #888888; font-family: Consolas, monospace;"
            " font-size: 9pt; padding: 0 8px;")
        layout.addWidget(self.time_label)

        self.seek_slider = QSlider(Qt.Horizontal)
        self.seek_slider.setRange(0, 0)
        self.seek_slider.setToolTip("Seek")
        self.seek_slider.valueChanged.connect(self._on_slider_changed)
        layout.addWidget(self.seek_slider, 1)

        self.clear_btn = QPushButton("Clear")
        self.clear_btn.setFixedHeight(_BTN_H)
        self.clear_btn.clicked.connect(self.clear)
        layout.addWidget(self.clear_btn)

        return transport

    # ------------------------------------------------------------------
    # Wiring
    # ------------------------------------------------------------------

    def _connect(self):
        vis = self.visualizer
        self.waveform.resized.connect(vis.on_resize)
        self.waveform.pointer_pressed.connect(vis.on_pointer_press)
        self.waveform.pointer_moved.connect(vis.on_pointer_move)
        self.waveform.pointer_released.connect(vis.on_pointer_release)
        self.waveform.pointer_left.connect(vis.on_pointer_leave)

        self.transport.loaded_metadata.connect(self._on_loaded_metadata)
        self.transport.time_update.connect(self._on_time_update)
        self.transport.ended.connect(vis.on_ended)
        self.transport.error.connect(self._on_transport_error)

        self.events.subscribe(ev.PLAYING, self._on_playing)
        self.events.subscribe(ev.MODE, self._on_mode)
        self.events.subscribe(ev.SEEKED, self._on_seeked)
        self.events.subscribe(ev.CLEARED, self._on_cleared)
        self.events.subscribe(ev.LOADED, self._on_loaded)
        self.events.subscribe(ev.ERROR, self._on_error)

    def _on_loaded_metadata(self):
        self.visualizer.on_loaded_metadata()
        self._update_controls()

    def _on_time_update(self, _t: float):
        self._show_time(self.visualizer.on_time_update())

    def _on_error(self, message: str):
        self.error_occurred.emit(message)

    def _on_transport_error(self, message: str):
        dbg(f"transport error: {message}")
        self.visualizer.pause()
        self.error_occurred.emit(message)

    def _on_playing(self, is_playing: bool):
        self.play_btn.setText("⏸ Pause" if is_playing else "▶ Play")
        self._show_time(self.visualizer.current_time())

    def _on_mode(self, mode: VisualizationMode):
        self._sync_mode_actions(mode)
        self.mode_changed.emit(mode.value)

    def _on_seeked(self, time: float):
        self._show_time(time)

    def _on_loaded(self, samples: SampleBuffer):
        self._update_controls()
        self._show_time(self.visualizer.current_time())

    def _on_cleared(self):
        self.play_btn.setText("▶ Play")
        self._update_controls()
        self._show_time(0.0)

    def _on_slider_changed(self, value: int):
        if self._slider_updating:
            return
        self.visualizer.seek_time(value / _SLIDER_STEPS_PER_SECOND)

    def _show_time(self, t: float):
        duration = self.visualizer.duration
        self.time_label.setText(f"{format_time(t)} / {format_time(duration)}")
        self._slider_updating = True
        try:
            self.seek_slider.setValue(int(round(t * _SLIDER_STEPS_PER_SECOND)))
        finally:
            self._slider_updating = False

    def _update_controls(self):
        loaded = self.visualizer.samples is not None
        self.play_btn.setEnabled(loaded)
        self.clear_btn.setEnabled(loaded)
        self.seek_slider.setEnabled(loaded)
        self._slider_updating = True
        try:
            self.seek_slider.setRange(
                0, int(self.visualizer.duration * _SLIDER_STEPS_PER_SECOND))
        finally:
            self._slider_updating = False

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def mode(self) -> VisualizationMode:
        return self.visualizer.mode

    def set_mode(self, mode: VisualizationMode | str):
        self.visualizer.on_mode_change(mode)

    def set_loading(self, loading: bool):
        self.waveform.set_loading(loading)

    def load_samples(self, samples: SampleBuffer):
        """Show *samples* and make them the transport's audio."""
        self.waveform.set_loading(False)
        # drop the old audio first so the first frame draws at t=0
        self.transport.unload()
        self.visualizer.on_load(samples)
        self.transport.load(samples)

    def load_failed(self, message: str):
        self.waveform.set_loading(False)
        self.visualizer.on_load_failed(message)
        self.transport.unload()

    def clear(self):
        self.visualizer.clear()
        self.transport.unload()

    def teardown(self):
        self.visualizer.on_teardown()
        self.transport.unload()
