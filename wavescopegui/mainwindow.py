"""Main application window for the Wavescope GUI."""

from __future__ import annotations

import argparse
import os
import sys
import time

from PySide6.QtCore import Slot
from PySide6.QtGui import QAction, QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QMainWindow,
    QMessageBox,
    QStatusBar,
)

from wavescopelib import events as ev
from wavescopelib._version import __version__
from wavescopelib.decode import AUDIO_EXTENSIONS
from wavescopelib.models import SampleBuffer

from .log import configure_library_logging, dbg
from .panel import WaveformPanel
from .settings import load_config, save_config
from .theme import apply_dark_theme
from .worker import DecodeWorker


class WavescopeWindow(QMainWindow):
    def __init__(self, config: dict | None = None):
        super().__init__()
        self.setWindowTitle("Wavescope")
        self._config = config if config is not None else load_config()
        self._worker: DecodeWorker | None = None
        self._current_path: str | None = None
        self._decode_t0: float = 0.0

        gui = self._config.get("gui", {})
        self.resize(int(gui.get("window_width", 1100)),
                    int(gui.get("window_height", 560)))

        self._init_ui()
        apply_dark_theme(self)

    # ── UI setup ──────────────────────────────────────────────────────────

    def _init_ui(self):
        self._init_menus()

        self._panel = WaveformPanel(self._config.get("visualizer"))
        self._panel.error_occurred.connect(self._on_error)
        self._panel.events.subscribe(ev.CLEARED, self._on_cleared)
        self.setCentralWidget(self._panel)

        play_shortcut = QShortcut(QKeySequence("Space"), self)
        play_shortcut.activated.connect(self._panel.visualizer.on_play_toggle)

        self._status_bar = QStatusBar()
        self._status_bar.setStyleSheet(
            "QStatusBar { background-color: #1e1e1e; border-top: 1px solid #444; }"
            "QStatusBar::item { border: none; }")
        self.setStatusBar(self._status_bar)
        self._status_bar.showMessage("Open an audio file to begin.")

    def _init_menus(self):
        file_menu = self.menuBar().addMenu("&File")

        open_action = QAction("&Open Audio...", self)
        open_action.setShortcut(QKeySequence.Open)
        open_action.triggered.connect(self._on_open_file)
        file_menu.addAction(open_action)

        clear_action = QAction("&Clear", self)
        clear_action.triggered.connect(self._on_clear)
        file_menu.addAction(clear_action)

        file_menu.addSeparator()

        about_action = QAction("&About Wavescope", self)
        about_action.setMenuRole(QAction.MenuRole.AboutRole)
        about_action.triggered.connect(self._on_about)
        file_menu.addAction(about_action)

        quit_action = QAction("&Quit", self)
        quit_action.setShortcut("Ctrl+Q")
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

    @property
    def panel(self) -> WaveformPanel:
        return self._panel

    # ── File loading ──────────────────────────────────────────────────────

    @Slot()
    def _on_open_file(self):
        gui = self._config.setdefault("gui", {})
        start_dir = gui.get("last_directory", "") or ""
        patterns = " ".join(f"*{ext}" for ext in AUDIO_EXTENSIONS)
        path, _ = QFileDialog.getOpenFileName(
            self, "Open Audio", start_dir,
            f"Audio Files ({patterns});;All Files (*)",
        )
        if not path:
            return
        gui["last_directory"] = os.path.dirname(path)
        self.open_file(path)

    def open_file(self, path: str):
        """Decode *path* in the background and show it when done."""
        self._cancel_worker()
        self._current_path = path
        self._panel.set_loading(True)
        self._status_bar.showMessage(f"Decoding {os.path.basename(path)}…")
        self._decode_t0 = time.perf_counter()

        worker = DecodeWorker(path, self)
        worker.decoded.connect(self._on_decoded)
        worker.error.connect(self._on_decode_error)
        worker.finished.connect(worker.deleteLater)
        self._worker = worker
        worker.start()

    def _cancel_worker(self):
        if self._worker is not None:
            self._worker.cancel()
            self._worker = None

    @Slot(object, str)
    def _on_decoded(self, samples: SampleBuffer, path: str):
        if path != self._current_path:
            return
        self._worker = None
        dbg(f"decoded {path}: {(time.perf_counter() - self._decode_t0) * 1000:.1f} ms")
        self._panel.load_samples(samples)
        self._status_bar.showMessage(
            f"{os.path.basename(path)} — {samples.channel_count} ch, "
            f"{samples.sample_rate} Hz, {samples.duration:.2f} s")

    @Slot(str)
    def _on_decode_error(self, message: str):
        self._worker = None
        self._panel.load_failed(message)

    @Slot(str)
    def _on_error(self, message: str):
        self._status_bar.showMessage(f"Error: {message}")
        QMessageBox.warning(self, "Wavescope", message)

    @Slot()
    def _on_clear(self):
        self._cancel_worker()
        self._current_path = None
        self._panel.set_loading(False)
        self._panel.clear()

    def _on_cleared(self):
        self._status_bar.showMessage("Open an audio file to begin.")

    def _on_about(self):
        QMessageBox.about(
            self,
            "About Wavescope",
            f"<h2>Wavescope</h2>"
            f"<p>Version {__version__}</p>"
            f"<p>Audio waveform and spectrum viewer<br/>"
            f"with synchronized playback scrubbing.</p>",
        )

    def closeEvent(self, event):
        self._cancel_worker()
        for worker in self.findChildren(DecodeWorker):
            worker.wait(2000)
        self._panel.teardown()
        gui = self._config.setdefault("gui", {})
        gui["window_width"] = self.width()
        gui["window_height"] = self.height()
        try:
            save_config(self._config)
        except OSError as exc:
            dbg(f"could not save config: {exc}")
        super().closeEvent(event)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main():
    t_main = time.perf_counter()

    parser = argparse.ArgumentParser(prog="wavescope-gui",
                                     description="Wavescope audio visualizer")
    parser.add_argument("file", nargs="?", help="Audio file to open")
    args, qt_args = parser.parse_known_args()

    configure_library_logging()

    t0 = time.perf_counter()
    app = QApplication([sys.argv[0], *qt_args])
    app.setStyle("Fusion")
    dbg(f"QApplication created: {(time.perf_counter() - t0) * 1000:.1f} ms")

    t0 = time.perf_counter()
    window = WavescopeWindow()
    dbg(f"WavescopeWindow created: {(time.perf_counter() - t0) * 1000:.1f} ms")

    window.show()
    if args.file:
        window.open_file(args.file)

    dbg(f"main() total: {(time.perf_counter() - t_main) * 1000:.1f} ms")
    sys.exit(app.exec())
