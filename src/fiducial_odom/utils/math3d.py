"""
3D math utilities for fiducial_odom.

Provides rotation conversions and quaternion algebra. Quaternions are stored in
(x, y, z, w) order throughout the package.
"""

import numpy as np
from numpy.typing import NDArray

IDENTITY_QUATERNION = np.array([0.0, 0.0, 0.0, 1.0], dtype=np.float64)


def is_zero_quaternion(q: NDArray[np.float64]) -> bool:
    """Check whether all four quaternion components are exactly zero."""
    return bool(np.all(np.asarray(q) == 0.0))


def normalize_quaternion(q: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Normalize a quaternion to unit length.

    Args:
        q: Quaternion [x, y, z, w].

    Returns:
        Unit quaternion [x, y, z, w].

    Raises:
        ValueError: If the quaternion has (near) zero norm.
    """
    q = np.asarray(q, dtype=np.float64)
    norm = np.linalg.norm(q)
    if norm < 1e-12:
        raise ValueError("cannot normalize a zero quaternion")
    return q / norm


def quaternion_multiply(
    q1: NDArray[np.float64], q2: NDArray[np.float64]
) -> NDArray[np.float64]:
    """
    Hamilton product q1 * q2.

    Args:
        q1: Left quaternion [x, y, z, w].
        q2: Right quaternion [x, y, z, w].

    Returns:
        Product quaternion [x, y, z, w].
    """
    x1, y1, z1, w1 = q1
    x2, y2, z2, w2 = q2

    return np.array(
        [
            w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
            w1 * y2 + y1 * w2 + z1 * x2 - x1 * z2,
            w1 * z2 + z1 * w2 + x1 * y2 - y1 * x2,
            w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
        ],
        dtype=np.float64,
    )


def quaternion_inverse(q: NDArray[np.float64]) -> NDArray[np.float64]:
    """Inverse of a (not necessarily unit) quaternion."""
    q = np.asarray(q, dtype=np.float64)
    norm_sq = float(np.dot(q, q))
    if norm_sq < 1e-24:
        raise ValueError("cannot invert a zero quaternion")
    return np.array([-q[0], -q[1], -q[2], q[3]], dtype=np.float64) / norm_sq


def quaternion_to_rotation_matrix(q: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Convert quaternion to rotation matrix.

    The quaternion is normalized first, so slightly denormalized inputs from
    upstream detectors still produce an orthonormal matrix.

    Args:
        q: Quaternion [x, y, z, w].

    Returns:
        3x3 rotation matrix.
    """
    x, y, z, w = normalize_quaternion(q)

    R = np.array(
        [
            [1 - 2 * (y**2 + z**2), 2 * (x * y - z * w), 2 * (x * z + y * w)],
            [2 * (x * y + z * w), 1 - 2 * (x**2 + z**2), 2 * (y * z - x * w)],
            [2 * (x * z - y * w), 2 * (y * z + x * w), 1 - 2 * (x**2 + y**2)],
        ],
        dtype=np.float64,
    )

    return R


def rotation_matrix_to_quaternion(R: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Convert rotation matrix to quaternion.

    Args:
        R: 3x3 rotation matrix.

    Returns:
        Quaternion [x, y, z, w].
    """
    trace = np.trace(R)

    if trace > 0:
        s = 0.5 / np.sqrt(trace + 1.0)
        w = 0.25 / s
        x = (R[2, 1] - R[1, 2]) * s
        y = (R[0, 2] - R[2, 0]) * s
        z = (R[1, 0] - R[0, 1]) * s
    elif R[0, 0] > R[1, 1] and R[0, 0] > R[2, 2]:
        s = 2.0 * np.sqrt(1.0 + R[0, 0] - R[1, 1] - R[2, 2])
        w = (R[2, 1] - R[1, 2]) / s
        x = 0.25 * s
        y = (R[0, 1] + R[1, 0]) / s
        z = (R[0, 2] + R[2, 0]) / s
    elif R[1, 1] > R[2, 2]:
        s = 2.0 * np.sqrt(1.0 + R[1, 1] - R[0, 0] - R[2, 2])
        w = (R[0, 2] - R[2, 0]) / s
        x = (R[0, 1] + R[1, 0]) / s
        y = 0.25 * s
        z = (R[1, 2] + R[2, 1]) / s
    else:
        s = 2.0 * np.sqrt(1.0 + R[2, 2] - R[0, 0] - R[1, 1])
        w = (R[1, 0] - R[0, 1]) / s
        x = (R[0, 2] + R[2, 0]) / s
        y = (R[1, 2] + R[2, 1]) / s
        z = 0.25 * s

    return np.array([x, y, z, w], dtype=np.float64)


def rotation_matrix_to_rpy(R: NDArray[np.float64]) -> tuple[float, float, float]:
    """
    Convert rotation matrix to roll, pitch, yaw.

    Decomposes R = Rz(yaw) @ Ry(pitch) @ Rx(roll), the fixed-axis convention
    used by odometry messages. Pitch is returned in [-pi/2, pi/2].

    Args:
        R: 3x3 rotation matrix.

    Returns:
        Tuple of (roll, pitch, yaw) in radians.
    """
    sy = np.sqrt(R[0, 0] ** 2 + R[1, 0] ** 2)

    singular = sy < 1e-6

    if not singular:
        roll = np.arctan2(R[2, 1], R[2, 2])
        pitch = np.arctan2(-R[2, 0], sy)
        yaw = np.arctan2(R[1, 0], R[0, 0])
    else:
        # Gimbal lock: yaw folded into roll
        roll = np.arctan2(-R[1, 2], R[1, 1])
        pitch = np.arctan2(-R[2, 0], sy)
        yaw = 0.0

    return float(roll), float(pitch), float(yaw)


def rpy_to_rotation_matrix(roll: float, pitch: float, yaw: float) -> NDArray[np.float64]:
    """
    Convert roll, pitch, yaw to rotation matrix.

    Inverse of rotation_matrix_to_rpy.

    Args:
        roll: Roll angle in radians.
        pitch: Pitch angle in radians.
        yaw: Yaw angle in radians.

    Returns:
        3x3 rotation matrix.
    """
    cr, sr = np.cos(roll), np.sin(roll)
    cp, sp = np.cos(pitch), np.sin(pitch)
    cy, sy = np.cos(yaw), np.sin(yaw)

    R = np.array(
        [
            [cy * cp, cy * sp * sr - sy * cr, cy * sp * cr + sy * sr],
            [sy * cp, sy * sp * sr + cy * cr, sy * sp * cr - cy * sr],
            [-sp, cp * sr, cp * cr],
        ],
        dtype=np.float64,
    )

    return R


def quaternion_from_rpy(roll: float, pitch: float, yaw: float) -> NDArray[np.float64]:
    """Build a unit quaternion [x, y, z, w] from roll, pitch, yaw."""
    return rotation_matrix_to_quaternion(rpy_to_rotation_matrix(roll, pitch, yaw))


def quaternion_to_rpy(q: NDArray[np.float64]) -> tuple[float, float, float]:
    """Decompose a quaternion [x, y, z, w] into roll, pitch, yaw."""
    return rotation_matrix_to_rpy(quaternion_to_rotation_matrix(q))


def rodrigues_to_rotation_matrix(rvec: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Convert Rodrigues vector to rotation matrix.

    Args:
        rvec: 3-element Rodrigues vector.

    Returns:
        3x3 rotation matrix.
    """
    import cv2

    R, _ = cv2.Rodrigues(np.asarray(rvec, dtype=np.float64).reshape(3, 1))
    return R  # type: ignore[return-value]
