"""Screen-rotation-aware device tilt estimation from motion sensors."""

from .core import (
    Config,
    load_config,
    OrientationMode,
    ScreenRotation,
    SensorKind,
    SensorTier,
    TiltAngles,
)
from .filters import ExponentialSmoothingFilter, MovingAverageFilter
from .fusion import TiltSensor, TiltSensorError, TrackingStateError

__version__ = "0.1.0"

__all__ = [
    "Config",
    "load_config",
    "OrientationMode",
    "ScreenRotation",
    "SensorKind",
    "SensorTier",
    "TiltAngles",
    "ExponentialSmoothingFilter",
    "MovingAverageFilter",
    "TiltSensor",
    "TiltSensorError",
    "TrackingStateError",
]
