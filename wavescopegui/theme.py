"""Color palette and dark-theme application."""

from __future__ import annotations

from PySide6.QtGui import QColor, QPalette
from PySide6.QtWidgets import QApplication


# ---------------------------------------------------------------------------
# Color palette
# ---------------------------------------------------------------------------

COLORS = {
    "bg": "#1e293b",
    "panel": "#2d2d2d",
    "text": "#dddddd",
    "dim": "#888888",
    "label": "#94a3b8",
    "waveform": "#3b82f6",
    "playhead": "#ef4444",
    "playhead_inner": "#ffffff",
}

# Gridline / axis strokes are the label color at reduced opacity
GRID_ALPHA = 38          # ~0.15
GRID_ZERO_ALPHA = 102    # ~0.4
AXIS_ALPHA = 128         # ~0.5


def label_color(alpha: int = 255) -> QColor:
    color = QColor(COLORS["label"])
    color.setAlpha(alpha)
    return color


# ---------------------------------------------------------------------------
# Dark theme
# ---------------------------------------------------------------------------

STYLESHEET = """
    QMainWindow { background-color: #1e1e1e; }
    QMenuBar { background-color: #252525; color: #dddddd; }
    QMenuBar::item:selected { background-color: #3a3a3a; }
    QMenu { background-color: #2d2d2d; color: #dddddd; border: 1px solid #555; }
    QMenu::item:selected { background-color: #2a6db5; }
    QToolBar { background-color: #2d2d2d; border-bottom: 1px solid #555; spacing: 6px; padding: 2px; }
    QToolBar QToolButton { color: #dddddd; padding: 4px 8px; }
    QToolBar QToolButton:hover { background-color: #3a3a3a; }
    QToolBar QToolButton:disabled { color: #666666; }
    QPushButton { background-color: #3a3a3a; color: #dddddd; border: 1px solid #555; padding: 4px 12px; border-radius: 2px; }
    QPushButton:hover { background-color: #4a4a4a; }
    QPushButton:pressed { background-color: #2a6db5; }
    QPushButton:disabled { color: #666666; background-color: #2d2d2d; }
    QSlider::groove:horizontal { height: 4px; background: #3a3a3a; border-radius: 2px; }
    QSlider::sub-page:horizontal { background: #2a6db5; border-radius: 2px; }
    QSlider::handle:horizontal { background: #dddddd; width: 12px; margin: -5px 0; border-radius: 6px; }
    QStatusBar { background-color: #2d2d2d; color: #888888; }
"""


def apply_dark_theme(window) -> None:
    """Apply the dark palette and stylesheet to the application and window."""
    app = QApplication.instance()

    palette = QPalette()
    bg = QColor("#1e1e1e")
    bg_alt = QColor("#252525")
    accent = QColor("#3a3a3a")
    text = QColor(COLORS["text"])

    palette.setColor(QPalette.Window, bg)
    palette.setColor(QPalette.WindowText, text)
    palette.setColor(QPalette.Base, bg_alt)
    palette.setColor(QPalette.AlternateBase, accent)
    palette.setColor(QPalette.ToolTipBase, bg_alt)
    palette.setColor(QPalette.ToolTipText, text)
    palette.setColor(QPalette.Text, text)
    palette.setColor(QPalette.Button, accent)
    palette.setColor(QPalette.ButtonText, text)
    palette.setColor(QPalette.Highlight, QColor("#2a6db5"))
    palette.setColor(QPalette.HighlightedText, QColor("#ffffff"))
    palette.setColor(QPalette.Disabled, QPalette.Text, QColor("#666666"))
    palette.setColor(QPalette.Disabled, QPalette.ButtonText, QColor("#666666"))

    app.setPalette(palette)
    window.setStyleSheet(STYLESHEET)
