"""Shared mutable fusion state.

Everything a sample solve reads or writes, and everything a control
call resets, lives in one FusionState guarded by one lock. Callers hold
``state.lock`` around each read-modify-write sequence; the lock is not
re-entrant.
"""

import threading
from dataclasses import dataclass, field
from typing import Callable, List, Optional
import numpy as np
from numpy.typing import NDArray

from ..core.types import (
    OrientationMode,
    Quaternion,
    SolveStats,
    SourceAvailability,
    TiltAngles,
)
from ..filters import Filter
from .solver import RotationRepresentation

TiltListener = Callable[[float, float, float], None]


@dataclass
class AxisFilters:
    """One smoothing filter per tilt axis."""
    yaw: Filter
    pitch: Filter
    roll: Filter

    def push(self, angles: TiltAngles) -> TiltAngles:
        """Filter each axis and return the smoothed angles."""
        return TiltAngles(
            yaw=self.yaw.push(angles.yaw),
            pitch=self.pitch.push(angles.pitch),
            roll=self.roll.push(angles.roll),
        )

    def reset(self, value: float = 0.0) -> None:
        """Reset all three filters to value."""
        self.yaw.reset(value)
        self.pitch.reset(value)
        self.roll.reset(value)

    def current(self) -> TiltAngles:
        """Current smoothed angles."""
        return TiltAngles(yaw=self.yaw.get(), pitch=self.pitch.get(), roll=self.roll.get())


@dataclass
class FusionState:
    """Latest samples, availability, origin, filters and listeners."""
    mode: OrientationMode
    filters: AxisFilters
    availability: SourceAvailability = field(default_factory=SourceAvailability)
    latest_quaternion: Optional[Quaternion] = None
    latest_up: Optional[NDArray[np.float64]] = None
    latest_magnetic: Optional[NDArray[np.float64]] = None
    origin: Optional[RotationRepresentation] = None
    latest: Optional[TiltAngles] = None
    tracking: bool = False
    has_tracked: bool = False
    listeners: List[TiltListener] = field(default_factory=list)
    stats: SolveStats = field(default_factory=SolveStats)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def clear_samples(self) -> None:
        """Forget cached samples and which sources delivered them."""
        self.availability.clear()
        self.latest_quaternion = None
        self.latest_up = None
        self.latest_magnetic = None
