from ._version import __version__
from .models import SampleBuffer, PlaybackState, VisualizationMode
from .envelope import Envelope, build_envelope, envelope_step
from .geometry import Margins, ViewportGeometry, CoordinateMapper, compute_geometry
from .frames import FrameClock, LiveFrame, StaticFrame, Surface, Transport
from .livetap import LiveTap, LiveTapUnavailable
from .scheduler import RenderScheduler, SchedulerState
from .scrubber import PointerState, ScrubberController
from .decode import DecodeError, decode, decode_file
from .config import (
    default_config,
    resolve_config,
    validate_config_fields,
    validate_param_values,
    ConfigError,
    ConfigFieldError,
    ParamSpec,
    VISUALIZER_PARAMS,
)
from .events import EventBus
from .visualizer import WaveformVisualizer

__all__ = [
    "__version__",
    "SampleBuffer",
    "PlaybackState",
    "VisualizationMode",
    "Envelope",
    "build_envelope",
    "envelope_step",
    "Margins",
    "ViewportGeometry",
    "CoordinateMapper",
    "compute_geometry",
    "FrameClock",
    "LiveFrame",
    "StaticFrame",
    "Surface",
    "Transport",
    "LiveTap",
    "LiveTapUnavailable",
    "RenderScheduler",
    "SchedulerState",
    "PointerState",
    "ScrubberController",
    "DecodeError",
    "decode",
    "decode_file",
    "default_config",
    "resolve_config",
    "validate_config_fields",
    "validate_param_values",
    "ConfigError",
    "ConfigFieldError",
    "ParamSpec",
    "VISUALIZER_PARAMS",
    "EventBus",
    "WaveformVisualizer",
]
