"""Core module for device tilt estimation."""

from .types import (
    SensorKind,
    SensorTier,
    OrientationMode,
    ScreenRotation,
    RawSample,
    SourceAvailability,
    Quaternion,
    TiltAngles,
    ValidationResult,
    SolveStats,
)
from .validation import SampleValidator, make_sample
from .quaternion import QuaternionOps
from .rotation import RotationOps
from .config import Config, load_config

__all__ = [
    "SensorKind",
    "SensorTier",
    "OrientationMode",
    "ScreenRotation",
    "RawSample",
    "SourceAvailability",
    "Quaternion",
    "TiltAngles",
    "ValidationResult",
    "SolveStats",
    "SampleValidator",
    "make_sample",
    "QuaternionOps",
    "RotationOps",
    "Config",
    "load_config",
]
