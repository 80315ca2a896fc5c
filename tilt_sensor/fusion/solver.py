"""Orientation solving for matrix and quaternion rotations.

A rotation arrives either as a rotation matrix (gravity / accelerometer
plus magnetometer) or as a quaternion (rotation vector sensor). Both
variants implement the same small contract so that the absolute /
relative state machine exists only once, in :class:`OrientationSolver`.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from ..core.quaternion import QuaternionOps
from ..core.rotation import RotationOps
from ..core.types import OrientationMode, Quaternion, ScreenRotation, TiltAngles
from .remap import remap_matrix, remap_quaternion

if TYPE_CHECKING:
    from .state import FusionState

logger = logging.getLogger(__name__)


class RotationRepresentation(Protocol):
    """Contract shared by the matrix and quaternion solve paths."""

    def remapped(self, rotation: ScreenRotation) -> "RotationRepresentation":
        """Same rotation expressed in the rotated screen frame."""
        ...

    def is_finite(self) -> bool:
        """Whether every component is finite."""
        ...

    def angles(self) -> TiltAngles:
        """Absolute tilt in degrees."""
        ...

    def origin(self) -> "RotationRepresentation":
        """Snapshot of this rotation to keep as the relative origin."""
        ...

    def angles_from(self, origin: "RotationRepresentation") -> TiltAngles:
        """Tilt in degrees relative to a snapshot taken by origin()."""
        ...


@dataclass(frozen=True, eq=False)
class MatrixRotation:
    """Device-to-world rotation matrix."""
    matrix: NDArray[np.float64]

    def remapped(self, rotation: ScreenRotation) -> "MatrixRotation":
        return MatrixRotation(remap_matrix(self.matrix, rotation))

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self.matrix)))

    def angles(self) -> TiltAngles:
        return RotationOps.orientation(self.matrix)

    def origin(self) -> "MatrixRotation":
        return MatrixRotation(self.matrix.copy())

    def angles_from(self, origin: "MatrixRotation") -> TiltAngles:
        return RotationOps.angle_change(self.matrix, origin.matrix)


@dataclass(frozen=True)
class QuaternionRotation:
    """Orientation quaternion from the rotation vector sensor.

    The origin snapshot stores the inverse (conjugate) so that the
    relative rotation is a single product.
    """
    quaternion: Quaternion

    def remapped(self, rotation: ScreenRotation) -> "QuaternionRotation":
        return QuaternionRotation(remap_quaternion(self.quaternion, rotation))

    def is_finite(self) -> bool:
        return self.quaternion.is_finite()

    def angles(self) -> TiltAngles:
        return QuaternionOps.to_tilt(self.quaternion)

    def origin(self) -> "QuaternionRotation":
        return QuaternionRotation(QuaternionOps.conjugate(self.quaternion))

    def angles_from(self, origin: "QuaternionRotation") -> TiltAngles:
        delta = QuaternionOps.multiply(origin.quaternion, self.quaternion)
        return QuaternionOps.to_tilt(delta)


def _angles_finite(angles: TiltAngles) -> bool:
    return bool(np.all(np.isfinite(angles.as_tuple())))


class OrientationSolver:
    """Converts rotations to tilt angles in absolute or relative basis.

    In relative mode the first successful solve after a mode change or
    origin reset captures the origin and reports zero tilt. The origin
    lives in the shared FusionState so that resets and solves are
    serialized by the same lock.
    """

    def __init__(self, screen_rotation: ScreenRotation):
        """Initialize solver.

        Args:
            screen_rotation: Fixed screen rotation of this session.
        """
        self._screen_rotation = screen_rotation

    @property
    def screen_rotation(self) -> ScreenRotation:
        """Screen rotation applied before solving."""
        return self._screen_rotation

    def solve(
        self,
        state: "FusionState",
        rotation: RotationRepresentation,
    ) -> Optional[TiltAngles]:
        """Solve tilt angles for a rotation.

        Must be called with the state lock held.

        Args:
            state: Shared fusion state (mode and origin).
            rotation: Rotation in the natural device frame.

        Returns:
            Tilt angles in degrees, or None if the rotation is
            degenerate. A degenerate rotation never captures an origin.
        """
        remapped = rotation.remapped(self._screen_rotation)
        if not remapped.is_finite():
            return None

        if state.mode is OrientationMode.ABSOLUTE:
            angles = remapped.angles()
            return angles if _angles_finite(angles) else None

        origin = state.origin
        if origin is None or type(origin) is not type(remapped):
            if origin is not None:
                logger.info(
                    "Rotation source changed to %s, recapturing origin",
                    type(remapped).__name__,
                )
            state.origin = remapped.origin()
            logger.debug("Relative origin captured: %s", remapped.angles())
            return TiltAngles.zero()

        angles = remapped.angles_from(origin)
        return angles if _angles_finite(angles) else None
