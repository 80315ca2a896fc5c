"""Screen-rotation coordinate remapping.

Sensors report in the device's natural frame. When the display is
rotated, the axes the user perceives as "right" and "up" change, so
rotations are remapped into the frame of the rotated screen. Both
remaps are a conjugation by the screen rotation about the device Z
axis: tilt directions follow the screen while pure-yaw rotations are
reported unchanged.
"""

import numpy as np
from numpy.typing import NDArray

from ..core.types import Quaternion, ScreenRotation

# Column remap for each rotation, matching the platform's axis choices:
#   0:   X,  Y
#   90:  Y, -X
#   180: -X, -Y
#   270: -Y,  X
_AXIS_REMAP = {
    ScreenRotation.ROTATION_0: np.eye(3),
    ScreenRotation.ROTATION_90: np.array([
        [0.0, 1.0, 0.0],
        [-1.0, 0.0, 0.0],
        [0.0, 0.0, 1.0],
    ]),
    ScreenRotation.ROTATION_180: np.array([
        [-1.0, 0.0, 0.0],
        [0.0, -1.0, 0.0],
        [0.0, 0.0, 1.0],
    ]),
    ScreenRotation.ROTATION_270: np.array([
        [0.0, -1.0, 0.0],
        [1.0, 0.0, 0.0],
        [0.0, 0.0, 1.0],
    ]),
}


def remap_matrix(R: NDArray[np.float64], rotation: ScreenRotation) -> NDArray[np.float64]:
    """Remap a device-to-world rotation matrix to the screen frame.

    Args:
        R: 3x3 rotation matrix in the natural device frame.
        rotation: Current screen rotation.

    Returns:
        New 3x3 rotation matrix.
    """
    M = _AXIS_REMAP[rotation]
    return M.T @ R @ M


def remap_quaternion(q: Quaternion, rotation: ScreenRotation) -> Quaternion:
    """Remap an orientation quaternion to the screen frame.

    Only x and y change; w and z are preserved.

    Args:
        q: Quaternion [w, x, y, z] in the natural device frame.
        rotation: Current screen rotation.

    Returns:
        New quaternion.
    """
    x, y = q.x, q.y
    if rotation is ScreenRotation.ROTATION_90:
        x, y = -y, x
    elif rotation is ScreenRotation.ROTATION_180:
        x, y = -x, -y
    elif rotation is ScreenRotation.ROTATION_270:
        x, y = y, -x
    return Quaternion(w=q.w, x=x, y=y, z=q.z)
