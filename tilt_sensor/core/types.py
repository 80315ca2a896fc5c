"""Data types for device tilt estimation."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple
import numpy as np
from numpy.typing import NDArray


class SensorKind(Enum):
    """Logical motion sensor sources understood by the fusion engine."""
    ROTATION_VECTOR = "rotation_vector"
    GRAVITY = "gravity"
    ACCELEROMETER = "accelerometer"
    MAGNETIC_FIELD = "magnetic_field"


class SensorTier(Enum):
    """Sensor combination currently used to compute orientation."""
    NONE = "none"
    ROTATION_VECTOR = "rotation_vector"
    GRAVITY_MAGNETIC = "gravity_magnetic"
    ACCELEROMETER_MAGNETIC = "accelerometer_magnetic"


class OrientationMode(Enum):
    """Reference basis for reported angles."""
    ABSOLUTE = "absolute"
    RELATIVE = "relative"


class ScreenRotation(Enum):
    """Rotation of the display from the device's natural orientation.

    Values are counter-clockwise degrees, as reported by the host display.
    """
    ROTATION_0 = 0
    ROTATION_90 = 90
    ROTATION_180 = 180
    ROTATION_270 = 270

    @classmethod
    def from_degrees(cls, degrees: int) -> "ScreenRotation":
        """Look up the rotation for a degree value.

        Raises:
            ValueError: If degrees is not one of 0, 90, 180, 270.
        """
        try:
            return cls(int(degrees))
        except ValueError:
            raise ValueError(
                f"Unsupported screen rotation: {degrees} "
                "(expected 0, 90, 180 or 270)"
            ) from None


@dataclass(frozen=True)
class RawSample:
    """Single sample pushed by the host sensor subsystem.

    Rotation vector values are [x, y, z], [x, y, z, w] or
    [x, y, z, w, heading_accuracy]. All other kinds carry a 3-vector:
    - Gravity / accelerometer: m/s^2
    - Magnetic field: uT (microtesla)
    """
    kind: SensorKind
    values: Tuple[float, ...]
    accuracy: Optional[int] = None
    timestamp: Optional[float] = None

    @property
    def vector(self) -> NDArray[np.float64]:
        """First three values as a numpy vector."""
        return np.array(self.values[:3], dtype=np.float64)


@dataclass
class SourceAvailability:
    """Which sources have delivered accepted data in this session."""
    have_rotation_vector: bool = False
    have_gravity: bool = False
    have_accelerometer: bool = False
    have_magnetic: bool = False

    def clear(self) -> None:
        """Forget all sources."""
        self.have_rotation_vector = False
        self.have_gravity = False
        self.have_accelerometer = False
        self.have_magnetic = False

    @property
    def tier(self) -> SensorTier:
        """Authoritative sensor combination for the flags set so far."""
        if self.have_rotation_vector:
            return SensorTier.ROTATION_VECTOR
        if self.have_magnetic and self.have_gravity:
            return SensorTier.GRAVITY_MAGNETIC
        if self.have_magnetic and self.have_accelerometer:
            return SensorTier.ACCELEROMETER_MAGNETIC
        return SensorTier.NONE


@dataclass
class Quaternion:
    """Unit quaternion representing orientation.

    Convention: [w, x, y, z] where w is the scalar component.
    """
    w: float
    x: float
    y: float
    z: float

    @classmethod
    def identity(cls) -> "Quaternion":
        """Return identity quaternion (no rotation)."""
        return cls(w=1.0, x=0.0, y=0.0, z=0.0)

    def to_array(self) -> NDArray[np.float64]:
        """Convert to numpy array [w, x, y, z]."""
        return np.array([self.w, self.x, self.y, self.z], dtype=np.float64)

    @property
    def norm(self) -> float:
        """Euclidean norm of quaternion."""
        return float(np.sqrt(self.w**2 + self.x**2 + self.y**2 + self.z**2))

    def is_finite(self) -> bool:
        """Check all components are finite."""
        return all(np.isfinite([self.w, self.x, self.y, self.z]))

    def normalized(self) -> "Quaternion":
        """Return normalized copy."""
        n = self.norm
        if n < 1e-10:
            return Quaternion.identity()
        return Quaternion(w=self.w/n, x=self.x/n, y=self.y/n, z=self.z/n)


@dataclass(frozen=True)
class TiltAngles:
    """Device tilt in degrees.

    - yaw: rotation around -Z, (-180, 180]
    - pitch: rotation around -X, [-90, 90]
    - roll: rotation around Y, (-180, 180]
    """
    yaw: float
    pitch: float
    roll: float

    @classmethod
    def zero(cls) -> "TiltAngles":
        """No tilt."""
        return cls(yaw=0.0, pitch=0.0, roll=0.0)

    def as_tuple(self) -> Tuple[float, float, float]:
        """Angles in listener argument order."""
        return (self.yaw, self.pitch, self.roll)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "yaw": self.yaw,
            "pitch": self.pitch,
            "roll": self.roll,
        }


@dataclass
class ValidationResult:
    """Result of raw sample validation."""
    is_valid: bool
    errors: list = field(default_factory=list)
    warnings: list = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add validation error."""
        self.is_valid = False
        self.errors.append(message)

    def add_warning(self, message: str) -> None:
        """Add validation warning."""
        self.warnings.append(message)


@dataclass
class SolveStats:
    """Counters describing what happened to incoming samples."""
    samples_received: int = 0
    samples_ignored: int = 0
    insufficient_data: int = 0
    degenerate: int = 0
    solves: int = 0
    tier_upgrades: int = 0

    @property
    def solve_rate(self) -> float:
        """Fraction of received samples that produced an update."""
        if self.samples_received == 0:
            return 0.0
        return self.solves / self.samples_received

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "samples_received": self.samples_received,
            "samples_ignored": self.samples_ignored,
            "insufficient_data": self.insufficient_data,
            "degenerate": self.degenerate,
            "solves": self.solves,
            "tier_upgrades": self.tier_upgrades,
        }
