"""
Wavescope GUI — PySide6 front-end for the waveform/spectrum visualizer.

Usage:
    python wavescope-gui.py [FILE]

Requires: PySide6, sounddevice
"""


def main():
    from .mainwindow import main as _main
    _main()
