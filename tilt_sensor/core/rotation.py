"""Rotation matrix primitives for gravity / magnetometer orientation."""

from typing import Optional
import numpy as np
from numpy.typing import NDArray

from .types import TiltAngles

STANDARD_GRAVITY = 9.80665


def half_turn_degrees(angle: float) -> float:
    """Convert an atan2 result to degrees in (-180, 180].

    atan2 gives -pi for a negative-zero numerator; that is folded to +180.
    """
    degrees = float(np.degrees(angle))
    return 180.0 if degrees <= -180.0 else degrees


class RotationOps:
    """Static methods for device-to-world rotation matrices.

    World frame is East-North-Up. Matrices map device coordinates to
    world coordinates (rows are the world axes seen from the device).
    """

    @staticmethod
    def from_gravity_magnetic(
        gravity: NDArray[np.float64],
        magnetic: NDArray[np.float64],
        free_fall_ratio: float = 0.1,
        min_horizontal_field: float = 0.1,
    ) -> Optional[NDArray[np.float64]]:
        """Compute the rotation matrix from gravity and geomagnetic vectors.

        Args:
            gravity: Up vector in device frame (gravity sensor or
                accelerometer reading) in m/s^2.
            magnetic: Geomagnetic field in device frame in uT.
            free_fall_ratio: Fraction of standard gravity below which
                the device is considered in free fall.
            min_horizontal_field: Minimum norm of magnetic x gravity.

        Returns:
            3x3 rotation matrix, or None when the inputs are degenerate
            (free fall, or field parallel to gravity).
        """
        normsq_a = float(np.dot(gravity, gravity))
        free_fall = (free_fall_ratio * STANDARD_GRAVITY) ** 2
        if not np.isfinite(normsq_a) or normsq_a < free_fall:
            return None

        east = np.cross(magnetic, gravity)
        norm_h = float(np.linalg.norm(east))
        if not np.isfinite(norm_h) or norm_h < min_horizontal_field:
            return None

        east = east / norm_h
        up = gravity / np.sqrt(normsq_a)
        north = np.cross(up, east)

        return np.vstack([east, north, up])

    @staticmethod
    def orientation(R: NDArray[np.float64]) -> TiltAngles:
        """Extract yaw / pitch / roll in degrees from a rotation matrix.

        Args:
            R: 3x3 device-to-world rotation matrix.

        Returns:
            Tilt angles in degrees.
        """
        yaw = np.arctan2(R[0, 1], R[1, 1])
        pitch = np.arcsin(np.clip(-R[2, 1], -1.0, 1.0))
        roll = np.arctan2(-R[2, 0], R[2, 2])
        return TiltAngles(
            yaw=half_turn_degrees(yaw),
            pitch=float(np.degrees(pitch)),
            roll=half_turn_degrees(roll),
        )

    @staticmethod
    def angle_change(
        R: NDArray[np.float64],
        R_prev: NDArray[np.float64],
    ) -> TiltAngles:
        """Angles of the rotation from R_prev to R.

        Decomposes R_prev^T * R with the same convention as
        :meth:`orientation`.

        Args:
            R: Current rotation matrix.
            R_prev: Reference rotation matrix.

        Returns:
            Tilt angles in degrees.
        """
        return RotationOps.orientation(R_prev.T @ R)
