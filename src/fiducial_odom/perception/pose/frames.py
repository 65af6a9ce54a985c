"""
Rigid-body frame types for fiducial_odom.

Provides stamped poses, stamped transforms and twists, and the operations the
odometry pipeline needs on them: applying a transform to a pose, inversion,
composition and relative transforms between two poses.
"""

from dataclasses import dataclass, field
from typing import Any

import numpy as np
from numpy.typing import NDArray

from fiducial_odom.utils.math3d import (
    IDENTITY_QUATERNION,
    is_zero_quaternion,
    normalize_quaternion,
    quaternion_inverse,
    quaternion_multiply,
    quaternion_to_rotation_matrix,
    rodrigues_to_rotation_matrix,
    rotation_matrix_to_quaternion,
)


def _as_vector(values: Any, size: int, name: str) -> NDArray[np.float64]:
    vec = np.asarray(values, dtype=np.float64).reshape(-1)
    if vec.shape != (size,):
        raise ValueError(f"{name} must have {size} elements, got {vec.shape}")
    return vec


@dataclass
class RigidTransform:
    """
    Stamped rigid transformation from child_frame_id into frame_id.

    p_frame = R(rotation) @ p_child + translation

    Attributes:
        translation: 3-element translation vector.
        rotation: Quaternion (x, y, z, w).
        frame_id: Parent (target) frame name.
        child_frame_id: Child (source) frame name.
        stamp: Timestamp in seconds.
    """

    translation: NDArray[np.float64]
    rotation: NDArray[np.float64] = field(
        default_factory=lambda: IDENTITY_QUATERNION.copy()
    )
    frame_id: str = ""
    child_frame_id: str = ""
    stamp: float = 0.0

    def __post_init__(self) -> None:
        self.translation = _as_vector(self.translation, 3, "translation")
        self.rotation = normalize_quaternion(_as_vector(self.rotation, 4, "rotation"))

    @classmethod
    def identity(
        cls, frame_id: str = "", child_frame_id: str = "", stamp: float = 0.0
    ) -> "RigidTransform":
        """Create identity transform."""
        return cls(
            translation=np.zeros(3),
            rotation=IDENTITY_QUATERNION.copy(),
            frame_id=frame_id,
            child_frame_id=child_frame_id,
            stamp=stamp,
        )

    @property
    def R(self) -> NDArray[np.float64]:
        """3x3 rotation matrix."""
        return quaternion_to_rotation_matrix(self.rotation)

    def apply(self, point: NDArray[np.float64]) -> NDArray[np.float64]:
        """Apply transform to a point: p_out = R @ p_in + t."""
        return self.R @ np.asarray(point, dtype=np.float64) + self.translation

    def inverse(self) -> "RigidTransform":
        """Return inverse transform with frame ids swapped."""
        R_inv = self.R.T
        return RigidTransform(
            translation=-R_inv @ self.translation,
            rotation=quaternion_inverse(self.rotation),
            frame_id=self.child_frame_id,
            child_frame_id=self.frame_id,
            stamp=self.stamp,
        )

    def compose(self, other: "RigidTransform") -> "RigidTransform":
        """Compose with another transform: T_out = self * other."""
        return RigidTransform(
            translation=self.R @ other.translation + self.translation,
            rotation=quaternion_multiply(self.rotation, other.rotation),
            frame_id=self.frame_id,
            child_frame_id=other.child_frame_id,
            stamp=max(self.stamp, other.stamp),
        )

    def transform_pose(self, pose: "RigidPose") -> "RigidPose":
        """
        Re-express a pose given in child_frame_id in frame_id.

        The pose keeps its timestamp; position becomes R @ p + t and
        orientation becomes q_transform * q_pose.
        """
        return RigidPose(
            position=self.apply(pose.position),
            orientation=quaternion_multiply(self.rotation, pose.orientation),
            timestamp=pose.timestamp,
            frame_id=self.frame_id,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "stamp": self.stamp,
            "frame_id": self.frame_id,
            "child_frame_id": self.child_frame_id,
            "translation": [float(v) for v in self.translation],
            "rotation": [float(v) for v in self.rotation],
        }


@dataclass
class RigidPose:
    """
    Stamped 3D pose (position + orientation) in a named frame.

    The all-zero orientation is accepted and left untouched; it marks a pose
    whose orientation was never initialized. Any other orientation is
    normalized to a unit quaternion.

    Attributes:
        position: Position in meters (x, y, z).
        orientation: Quaternion orientation (x, y, z, w).
        timestamp: Timestamp in seconds.
        frame_id: Reference frame name.
    """

    position: NDArray[np.float64]
    orientation: NDArray[np.float64] = field(
        default_factory=lambda: IDENTITY_QUATERNION.copy()
    )
    timestamp: float = 0.0
    frame_id: str = ""

    def __post_init__(self) -> None:
        self.position = _as_vector(self.position, 3, "position")
        orientation = _as_vector(self.orientation, 4, "orientation")
        if not is_zero_quaternion(orientation):
            orientation = normalize_quaternion(orientation)
        self.orientation = orientation
        self.timestamp = float(self.timestamp)

    @classmethod
    def from_rvec_tvec(
        cls,
        rvec: NDArray[np.float64],
        tvec: NDArray[np.float64],
        timestamp: float = 0.0,
        frame_id: str = "",
    ) -> "RigidPose":
        """
        Create pose from an OpenCV Rodrigues rotation and translation.

        Args:
            rvec: Rodrigues rotation vector (3,).
            tvec: Translation vector (3,) in the camera frame.
            timestamp: Timestamp in seconds.
            frame_id: Reference frame name.
        """
        R = rodrigues_to_rotation_matrix(np.asarray(rvec, dtype=np.float64))
        return cls(
            position=np.asarray(tvec, dtype=np.float64).reshape(3),
            orientation=rotation_matrix_to_quaternion(R),
            timestamp=timestamp,
            frame_id=frame_id,
        )

    @property
    def x(self) -> float:
        """X position."""
        return float(self.position[0])

    @property
    def y(self) -> float:
        """Y position."""
        return float(self.position[1])

    @property
    def z(self) -> float:
        """Z position."""
        return float(self.position[2])

    @property
    def has_orientation(self) -> bool:
        """False when orientation is the uninitialized zero quaternion."""
        return not is_zero_quaternion(self.orientation)

    def as_transform(self, child_frame_id: str = "") -> RigidTransform:
        """View this pose as the transform from child_frame_id into frame_id."""
        orientation = (
            self.orientation if self.has_orientation else IDENTITY_QUATERNION.copy()
        )
        return RigidTransform(
            translation=self.position.copy(),
            rotation=orientation,
            frame_id=self.frame_id,
            child_frame_id=child_frame_id,
            stamp=self.timestamp,
        )

    def relative_to(self, previous: "RigidPose") -> RigidTransform:
        """
        Relative transform previous^-1 * self.

        Translation is expressed in the previous pose's local frame.
        """
        return previous.as_transform().inverse().compose(self.as_transform())

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "timestamp": self.timestamp,
            "frame_id": self.frame_id,
            "position": [float(v) for v in self.position],
            "orientation": [float(v) for v in self.orientation],
        }


@dataclass
class Twist:
    """
    Linear and angular velocity.

    Attributes:
        linear: Linear velocity (vx, vy, vz) in m/s.
        angular: Roll, pitch, yaw rates in rad/s.
    """

    linear: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))
    angular: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self) -> None:
        self.linear = _as_vector(self.linear, 3, "linear")
        self.angular = _as_vector(self.angular, 3, "angular")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "linear": [float(v) for v in self.linear],
            "angular": [float(v) for v in self.angular],
        }
