"""Quaternion operations and utilities."""

from typing import Sequence
import numpy as np
from numpy.typing import NDArray

from .rotation import half_turn_degrees
from .types import Quaternion, TiltAngles


class QuaternionOps:
    """Static methods for quaternion operations."""

    @staticmethod
    def from_rotation_vector(values: Sequence[float]) -> Quaternion:
        """Convert rotation vector sensor values to a quaternion.

        The sensor reports the vector part [x, y, z] and, on most
        devices, the scalar part as a fourth value. When the scalar
        part is missing it is recovered from the unit norm constraint.

        Args:
            values: [x, y, z], [x, y, z, w] or [x, y, z, w, accuracy].

        Returns:
            Quaternion [w, x, y, z] (not renormalized).
        """
        x, y, z = float(values[0]), float(values[1]), float(values[2])
        if len(values) >= 4:
            w = float(values[3])
        else:
            w = 1.0 - x * x - y * y - z * z
            w = float(np.sqrt(w)) if w > 0 else 0.0
        return Quaternion(w=w, x=x, y=y, z=z)

    @staticmethod
    def to_rotation_matrix(q: Quaternion) -> NDArray[np.float64]:
        """Convert unit quaternion to a device-to-world rotation matrix.

        Args:
            q: Unit quaternion.

        Returns:
            3x3 rotation matrix.
        """
        w, x, y, z = q.w, q.x, q.y, q.z
        return np.array([
            [1.0 - 2.0 * (y * y + z * z), 2.0 * (x * y - w * z), 2.0 * (x * z + w * y)],
            [2.0 * (x * y + w * z), 1.0 - 2.0 * (x * x + z * z), 2.0 * (y * z - w * x)],
            [2.0 * (x * z - w * y), 2.0 * (y * z + w * x), 1.0 - 2.0 * (x * x + y * y)],
        ], dtype=np.float64)

    @staticmethod
    def to_tilt(q: Quaternion) -> TiltAngles:
        """Convert quaternion to yaw / pitch / roll in degrees.

        Uses the same decomposition as the rotation-matrix path
        (yaw around -Z, pitch around -X, roll around Y), evaluated
        directly from the quaternion components. For single-axis
        rotations this reduces to the textbook ZYX formulas with yaw
        and pitch negated.

        Args:
            q: Unit quaternion.

        Returns:
            Tilt angles in degrees.
        """
        w, x, y, z = q.w, q.x, q.y, q.z

        yaw = np.arctan2(2.0 * (x * y - w * z), 1.0 - 2.0 * (x * x + z * z))

        sinp = -2.0 * (y * z + w * x)
        pitch = np.arcsin(np.clip(sinp, -1.0, 1.0))

        roll = np.arctan2(2.0 * (w * y - x * z), 1.0 - 2.0 * (x * x + y * y))

        return TiltAngles(
            yaw=half_turn_degrees(yaw),
            pitch=float(np.degrees(pitch)),
            roll=half_turn_degrees(roll),
        )

    @staticmethod
    def from_tilt(angles: TiltAngles) -> Quaternion:
        """Build the quaternion whose tilt is the given angles.

        Inverse of :meth:`to_tilt` away from pitch = +/-90 degrees.

        Args:
            angles: Tilt angles in degrees.

        Returns:
            Unit quaternion.
        """
        half_yaw = -np.radians(angles.yaw) / 2.0
        half_pitch = -np.radians(angles.pitch) / 2.0
        half_roll = np.radians(angles.roll) / 2.0

        qz = Quaternion(w=float(np.cos(half_yaw)), x=0.0, y=0.0, z=float(np.sin(half_yaw)))
        qx = Quaternion(w=float(np.cos(half_pitch)), x=float(np.sin(half_pitch)), y=0.0, z=0.0)
        qy = Quaternion(w=float(np.cos(half_roll)), x=0.0, y=float(np.sin(half_roll)), z=0.0)

        return QuaternionOps.multiply(QuaternionOps.multiply(qz, qx), qy)

    @staticmethod
    def multiply(q1: Quaternion, q2: Quaternion) -> Quaternion:
        """Multiply two quaternions (Hamilton product).

        Args:
            q1: First quaternion.
            q2: Second quaternion.

        Returns:
            Product quaternion q1 * q2.
        """
        w = q1.w * q2.w - q1.x * q2.x - q1.y * q2.y - q1.z * q2.z
        x = q1.w * q2.x + q1.x * q2.w + q1.y * q2.z - q1.z * q2.y
        y = q1.w * q2.y - q1.x * q2.z + q1.y * q2.w + q1.z * q2.x
        z = q1.w * q2.z + q1.x * q2.y - q1.y * q2.x + q1.z * q2.w
        return Quaternion(w=w, x=x, y=y, z=z)

    @staticmethod
    def conjugate(q: Quaternion) -> Quaternion:
        """Compute quaternion conjugate.

        For a unit quaternion this is also its inverse.

        Args:
            q: Input quaternion.

        Returns:
            Conjugate quaternion.
        """
        return Quaternion(w=q.w, x=-q.x, y=-q.y, z=-q.z)
