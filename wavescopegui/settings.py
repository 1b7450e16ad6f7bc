"""Persistent GUI configuration (wavescope.config.json).

On first launch the file is created in the OS-specific user preferences
directory with all built-in defaults.  On subsequent launches it is loaded,
merged with the current defaults so that newly added keys always receive a
value, and validated.

The config file has two sections::

    {
        "visualizer": { ... },   # keys of wavescopelib.config.VISUALIZER_PARAMS
        "gui":        { ... },   # window / dialog state
    }

Locations:
    Windows : %APPDATA%\\wavescope\\wavescope.config.json
    macOS   : ~/Library/Application Support/wavescope/wavescope.config.json
    Linux   : $XDG_CONFIG_HOME/wavescope/wavescope.config.json
              (defaults to ~/.config/wavescope/wavescope.config.json)
"""

from __future__ import annotations

import copy
import json
import logging
import os
import platform
from typing import Any

from wavescopelib.config import default_config, validate_config_fields

log = logging.getLogger(__name__)

CONFIG_FILENAME = "wavescope.config.json"

_GUI_DEFAULTS: dict[str, Any] = {
    "last_directory": "",
    "window_width": 1100,
    "window_height": 560,
}


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

def _config_dir() -> str:
    """Return the OS-specific configuration directory for Wavescope."""
    system = platform.system()
    if system == "Windows":
        base = os.environ.get("APPDATA")
        if not base:
            base = os.path.expanduser("~")
        return os.path.join(base, "wavescope")
    elif system == "Darwin":
        return os.path.join(
            os.path.expanduser("~"),
            "Library",
            "Application Support",
            "wavescope",
        )
    else:  # Linux / BSD / …
        base = os.environ.get("XDG_CONFIG_HOME")
        if not base:
            base = os.path.join(os.path.expanduser("~"), ".config")
        return os.path.join(base, "wavescope")


def config_path() -> str:
    """Return the full path to the GUI config file."""
    return os.path.join(_config_dir(), CONFIG_FILENAME)


def build_defaults() -> dict[str, Any]:
    return {
        "visualizer": default_config(),
        "gui": copy.deepcopy(_GUI_DEFAULTS),
    }


# ---------------------------------------------------------------------------
# Load / Save
# ---------------------------------------------------------------------------

def load_config() -> dict[str, Any]:
    """Load the GUI config, creating it with defaults if needed.

    If the file is corrupt, or the visualizer section fails validation, it
    is backed up as ``*.bak`` and the visualizer section is reset to
    defaults (the gui section is kept when readable).
    """
    path = config_path()
    defaults = build_defaults()

    if not os.path.isfile(path):
        log.info("Config file not found — creating %s", path)
        save_config(defaults)
        return copy.deepcopy(defaults)

    # -- Read --
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as exc:
        log.warning("Cannot read config (%s) — recreating from defaults", exc)
        _backup_corrupt(path)
        save_config(defaults)
        return copy.deepcopy(defaults)

    if not isinstance(data, dict):
        log.warning("Config root is %s, expected object — recreating",
                    type(data).__name__)
        _backup_corrupt(path)
        save_config(defaults)
        return copy.deepcopy(defaults)

    # -- Merge: defaults ← file overrides (section by section) --
    merged = _merge_sections(defaults, data)

    # -- Validate --
    errors = validate_config_fields(merged["visualizer"])
    if errors:
        msgs = "; ".join(e.message for e in errors)
        log.warning("Config validation failed (%s) — resetting visualizer section",
                    msgs)
        _backup_corrupt(path)
        defaults["gui"] = copy.deepcopy(merged["gui"])
        save_config(defaults)
        return copy.deepcopy(defaults)

    # Persist if merge introduced new keys (e.g. new defaults)
    if merged != data:
        save_config(merged)

    return merged


def save_config(config: dict[str, Any]) -> str:
    """Save *config* to the user preferences file.

    Returns the path written.
    """
    path = config_path()
    os.makedirs(os.path.dirname(path), exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=4, ensure_ascii=False)
        f.write("\n")

    log.info("Config saved to %s", path)
    return path


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _merge_sections(
    defaults: dict[str, Any],
    overrides: dict[str, Any],
) -> dict[str, Any]:
    """Merge *overrides* into *defaults* one section at a time.

    Unknown visualizer keys are dropped; the gui section accepts any key.
    """
    merged = copy.deepcopy(defaults)

    vis = overrides.get("visualizer")
    if isinstance(vis, dict):
        section = merged["visualizer"]
        for k, v in vis.items():
            if k in section:
                section[k] = v

    gui = overrides.get("gui")
    if isinstance(gui, dict):
        merged["gui"].update(gui)

    return merged


def _backup_corrupt(path: str) -> None:
    """Rename a corrupt config file to ``*.bak`` (best-effort)."""
    backup = path + ".bak"
    try:
        if os.path.isfile(backup):
            os.remove(backup)
        os.rename(path, backup)
        log.info("Backed up corrupt config to %s", backup)
    except OSError as exc:
        log.warning("Could not back up %s: %s", path, exc)
