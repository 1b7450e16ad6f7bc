"""
Wavescope GUI — audio waveform/spectrum viewer with playback scrubbing.

Usage:
    python wavescope-gui.py [FILE]

Requires: PySide6 and sounddevice (install via `pip install -e .`)
"""

from wavescopegui import main

if __name__ == "__main__":
    main()
