"""Tilt fusion engine: arbitration, remapping, solving and smoothing."""

from .remap import remap_matrix, remap_quaternion
from .solver import (
    RotationRepresentation,
    MatrixRotation,
    QuaternionRotation,
    OrientationSolver,
)
from .state import AxisFilters, FusionState, TiltListener
from .arbiter import SourceArbiter, ArbiterDecision
from .tilt_sensor import TiltSensor, TiltSensorError, TrackingStateError

__all__ = [
    "remap_matrix",
    "remap_quaternion",
    "RotationRepresentation",
    "MatrixRotation",
    "QuaternionRotation",
    "OrientationSolver",
    "AxisFilters",
    "FusionState",
    "TiltListener",
    "SourceArbiter",
    "ArbiterDecision",
    "TiltSensor",
    "TiltSensorError",
    "TrackingStateError",
]
