from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .geometry import Margins


class ConfigError(Exception):
    """Raised when configuration validation fails."""
    pass


@dataclass
class ConfigFieldError:
    """A single validation error for one configuration field.

    Attributes:
        key:     The config key that failed validation.
        value:   The offending value.
        message: Human-readable explanation of what is wrong.
    """
    key: str
    value: Any
    message: str


@dataclass(frozen=True)
class ParamSpec:
    """Declarative specification for a single configuration parameter."""
    key: str
    type: type | tuple              # expected Python type(s)
    default: Any
    label: str                       # short UI label
    description: str = ""            # longer tooltip / help text
    min: float | int | None = None   # inclusive lower bound (unless min_exclusive)
    max: float | int | None = None   # inclusive upper bound (unless max_exclusive)
    min_exclusive: bool = False
    max_exclusive: bool = False
    choices: list | None = None      # allowed values


_FFT_SIZES = [2 ** k for k in range(5, 16)]  # 32 .. 32768


VISUALIZER_PARAMS: list[ParamSpec] = [
    # -- Layout --------------------------------------------------------------
    ParamSpec(
        key="margin_left", type=int, default=60, min=0,
        label="Left margin (px)",
        description="Space left of the chart reserved for amplitude labels.",
    ),
    ParamSpec(
        key="margin_right", type=int, default=20, min=0,
        label="Right margin (px)",
    ),
    ParamSpec(
        key="margin_top", type=int, default=20, min=0,
        label="Top margin (px)",
    ),
    ParamSpec(
        key="margin_bottom", type=int, default=50, min=0,
        label="Bottom margin (px)",
        description="Space below the chart reserved for time labels.",
    ),
    ParamSpec(
        key="surface_height", type=int, default=400, min=80,
        label="Surface height (px)",
    ),
    ParamSpec(
        key="max_time_markers", type=int, default=12, min=1,
        label="Max time markers",
        description="Upper bound on vertical gridlines along the time axis.",
    ),
    ParamSpec(
        key="seconds_per_marker", type=(int, float), default=5.0,
        min=0.0, min_exclusive=True,
        label="Seconds per marker",
        description=(
            "Target spacing of time gridlines. The marker count is "
            "min(max markers, ceil(duration / spacing))."
        ),
    ),
    # -- Live analysis -------------------------------------------------------
    ParamSpec(
        key="fft_size", type=int, default=2048, choices=_FFT_SIZES,
        label="FFT size",
        description=(
            "Number of time-domain samples held by the live tap. The "
            "spectrum view has half as many frequency bins."
        ),
    ),
    ParamSpec(
        key="smoothing", type=(int, float), default=0.8, min=0.0, max=1.0,
        label="Spectrum smoothing",
        description="Averaging constant between successive spectrum reads.",
    ),
    ParamSpec(
        key="min_decibels", type=(int, float), default=-100.0,
        label="Spectrum floor (dB)",
    ),
    ParamSpec(
        key="max_decibels", type=(int, float), default=-30.0,
        label="Spectrum ceiling (dB)",
    ),
    ParamSpec(
        key="max_bars", type=int, default=150, min=1,
        label="Max spectrum bars",
    ),
    # -- Loop / display ------------------------------------------------------
    ParamSpec(
        key="frame_interval_ms", type=int, default=16, min=1, max=1000,
        label="Frame interval (ms)",
        description="Delay between render-loop ticks while playing.",
    ),
    ParamSpec(
        key="default_mode", type=str, default="waveform",
        choices=["waveform", "spectrum"],
        label="Default view",
    ),
]


def default_config() -> dict[str, Any]:
    """Returns the built-in visualizer defaults."""
    return {p.key: p.default for p in VISUALIZER_PARAMS}


def validate_param_values(
    params: list[ParamSpec],
    values: dict[str, Any],
) -> list[ConfigFieldError]:
    """Validate *values* against a list of :class:`ParamSpec` definitions.

    Only keys present in *values* are checked; missing keys are not errors
    (they will receive their default).
    """
    errors: list[ConfigFieldError] = []

    for spec in params:
        if spec.key not in values:
            continue
        value = values[spec.key]

        # bool is an int subclass; reject it for numeric fields
        expected = spec.type
        if expected is not bool and isinstance(value, bool):
            errors.append(ConfigFieldError(
                spec.key, value,
                f"{spec.label} must be {_type_label(expected)}, got boolean.",
            ))
            continue
        if not isinstance(value, expected):
            errors.append(ConfigFieldError(
                spec.key, value,
                f"{spec.label} must be {_type_label(expected)}, "
                f"got {type(value).__name__}.",
            ))
            continue

        if spec.choices is not None and value not in spec.choices:
            opts = ", ".join(repr(c) for c in spec.choices)
            errors.append(ConfigFieldError(
                spec.key, value,
                f"{spec.label} must be one of {opts}.",
            ))
            continue

        if isinstance(value, (int, float)):
            if spec.min is not None:
                if spec.min_exclusive and value <= spec.min:
                    errors.append(ConfigFieldError(
                        spec.key, value,
                        f"{spec.label} must be greater than {spec.min}.",
                    ))
                    continue
                if not spec.min_exclusive and value < spec.min:
                    errors.append(ConfigFieldError(
                        spec.key, value,
                        f"{spec.label} must be at least {spec.min}.",
                    ))
                    continue
            if spec.max is not None:
                if spec.max_exclusive and value >= spec.max:
                    errors.append(ConfigFieldError(
                        spec.key, value,
                        f"{spec.label} must be less than {spec.max}.",
                    ))
                    continue
                if not spec.max_exclusive and value > spec.max:
                    errors.append(ConfigFieldError(
                        spec.key, value,
                        f"{spec.label} must be at most {spec.max}.",
                    ))
                    continue

    return errors


def validate_config_fields(config: dict[str, Any]) -> list[ConfigFieldError]:
    """Validate a visualizer config dict, including cross-field rules.

    Returns structured errors.  Never raises.
    """
    errors = validate_param_values(VISUALIZER_PARAMS, config)
    bad = {e.key for e in errors}
    lo, hi = config.get("min_decibels"), config.get("max_decibels")
    if (lo is not None and hi is not None
            and "min_decibels" not in bad and "max_decibels" not in bad
            and lo >= hi):
        errors.append(ConfigFieldError(
            "min_decibels", lo,
            "Spectrum floor (dB) must be below the spectrum ceiling.",
        ))
    return errors


def resolve_config(overrides: dict[str, Any] | None = None) -> dict[str, Any]:
    """Merge *overrides* over the defaults and validate the result.

    Unknown keys are dropped.  Raises :class:`ConfigError` listing every
    invalid field.
    """
    config = default_config()
    for k, v in (overrides or {}).items():
        if k in config:
            config[k] = v
    errors = validate_config_fields(config)
    if errors:
        lines = [e.message for e in errors]
        raise ConfigError(
            "Configuration has invalid values:\n  • " + "\n  • ".join(lines)
        )
    return config


def margins_from_config(config: dict[str, Any]) -> Margins:
    return Margins(
        left=int(config.get("margin_left", 60)),
        top=int(config.get("margin_top", 20)),
        right=int(config.get("margin_right", 20)),
        bottom=int(config.get("margin_bottom", 50)),
    )


def _type_label(t) -> str:
    """Human-readable label for an expected type or tuple of types."""
    if isinstance(t, tuple):
        return " or ".join(x.__name__ for x in t)
    return t.__name__
