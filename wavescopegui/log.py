"""Lightweight debug logging for Wavescope.

Usage::

    from wavescopegui.log import dbg

    dbg("Render loop started")

Output is only emitted when the environment variable ``WAVESCOPE_DEBUG``
is set to ``1`` or ``true`` (case-insensitive).  Each message is prefixed
with a timestamp and the calling class/module.  When enabled, the
``wavescopelib`` loggers are routed to stderr at DEBUG level as well.
"""

from __future__ import annotations

import inspect
import logging
import os
import sys
import time

_ENABLED: bool | None = None


def _is_enabled() -> bool:
    global _ENABLED
    if _ENABLED is None:
        val = os.environ.get("WAVESCOPE_DEBUG", "").strip().lower()
        _ENABLED = val in ("1", "true")
    return _ENABLED


def _caller_name() -> str:
    """Return the class name (or module name) of the caller's caller."""
    frame = inspect.currentframe()
    try:
        caller = frame.f_back.f_back if frame and frame.f_back else None
        if caller is None:
            return "?"
        self_obj = caller.f_locals.get("self")
        if self_obj is not None:
            return type(self_obj).__name__
        mod = caller.f_globals.get("__name__", "")
        return mod.rsplit(".", 1)[-1] if mod else "?"
    finally:
        del frame


def dbg(msg: str) -> None:
    """Print ``[HH:MM:SS.mmm Caller] message`` to stderr when enabled."""
    if not _is_enabled():
        return
    t = time.strftime("%H:%M:%S")
    ms = int((time.time() % 1) * 1000)
    print(f"[{t}.{ms:03d} {_caller_name()}] {msg}", file=sys.stderr, flush=True)


def configure_library_logging() -> None:
    """Send ``wavescopelib`` log records to stderr (debug when enabled)."""
    logger = logging.getLogger("wavescopelib")
    if logger.handlers:
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(
        "[%(asctime)s.%(msecs)03d %(name)s] %(message)s", "%H:%M:%S"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if _is_enabled() else logging.WARNING)
