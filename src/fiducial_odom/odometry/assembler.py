"""
Odometry assembly for fiducial_odom.

Combines a corrected pose, the twist against the last accepted pose and the
fixed covariance model into one odometry estimate, and owns the estimator
state that links consecutive cycles.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

import numpy as np
from numpy.typing import NDArray

from fiducial_odom.logging.setup import get_logger
from fiducial_odom.odometry.corrector import PoseCorrector
from fiducial_odom.odometry.velocity import VelocityEstimator
from fiducial_odom.perception.fiducials.base import DetectionResult
from fiducial_odom.perception.pose.frames import RigidPose, RigidTransform, Twist

logger = get_logger(__name__)

# Diagonal entry for x, y, z, roll, pitch, yaw in both covariance matrices
COVARIANCE_DIAGONAL = 5e-3


def fixed_covariance() -> NDArray[np.float64]:
    """Static 6x6 covariance used for every pose and twist estimate."""
    return np.eye(6, dtype=np.float64) * COVARIANCE_DIAGONAL


class SkipReason(str, Enum):
    """Why a cycle produced no estimate."""

    NO_DETECTIONS = "no_detections"
    DETECTION_FAILED = "detection_failed"
    TRANSFORM_UNAVAILABLE = "transform_unavailable"
    DEGENERATE_TIMING = "degenerate_timing"


@dataclass(frozen=True)
class Skipped:
    """
    Cycle outcome without an estimate.

    Attributes:
        reason: Skip reason.
        detail: Human readable detail (error message).
    """

    reason: SkipReason
    detail: str = ""


@dataclass
class OdometryEstimate:
    """
    Odometry of the footprint frame relative to the bin frame.

    Attributes:
        frame_id: Reference frame of the pose (bin frame).
        child_frame_id: Frame being tracked (footprint frame).
        timestamp: Estimate timestamp in seconds.
        pose: Corrected pose.
        twist: Estimated velocity.
        pose_covariance: 6x6 pose covariance (x, y, z, roll, pitch, yaw).
        twist_covariance: 6x6 twist covariance.
    """

    frame_id: str
    child_frame_id: str
    timestamp: float
    pose: RigidPose
    twist: Twist
    pose_covariance: NDArray[np.float64] = field(default_factory=fixed_covariance)
    twist_covariance: NDArray[np.float64] = field(default_factory=fixed_covariance)

    def to_transform(self) -> RigidTransform:
        """Same estimate as a frame_id -> child_frame_id transform."""
        return RigidTransform(
            translation=self.pose.position.copy(),
            rotation=self.pose.orientation.copy(),
            frame_id=self.frame_id,
            child_frame_id=self.child_frame_id,
            stamp=self.timestamp,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "frame_id": self.frame_id,
            "child_frame_id": self.child_frame_id,
            "timestamp": self.timestamp,
            "pose": {
                "position": [float(v) for v in self.pose.position],
                "orientation": [float(v) for v in self.pose.orientation],
                "covariance": [float(v) for v in self.pose_covariance.flatten()],
            },
            "twist": {
                **self.twist.to_dict(),
                "covariance": [float(v) for v in self.twist_covariance.flatten()],
            },
        }


@dataclass
class EstimatorState:
    """
    State carried between cycles.

    Attributes:
        last_pose: Last accepted corrected pose, None until the first estimate.
    """

    last_pose: Optional[RigidPose] = None

    @property
    def is_initialized(self) -> bool:
        """True once an estimate has been accepted."""
        return self.last_pose is not None

    def reset(self) -> None:
        """Forget the last accepted pose."""
        self.last_pose = None


AssemblyResult = Union[OdometryEstimate, Skipped]


class OdometryAssembler:
    """
    Builds odometry estimates and tracks the last accepted pose.

    Not thread-safe: calls must be serialized by the owner.
    """

    def __init__(
        self,
        bin_frame: str = "bin_link",
        footprint_frame: str = "footprint",
        corrector: Optional[PoseCorrector] = None,
        estimator: Optional[VelocityEstimator] = None,
        state: Optional[EstimatorState] = None,
    ) -> None:
        """
        Initialize assembler.

        Args:
            bin_frame: Frame the estimate is reported in.
            footprint_frame: Frame being tracked.
            corrector: Pose corrector (default writes poses in bin_frame).
            estimator: Velocity estimator.
            state: Initial estimator state.
        """
        self._bin_frame = bin_frame
        self._footprint_frame = footprint_frame
        self._corrector = corrector or PoseCorrector(output_frame=bin_frame)
        self._estimator = estimator or VelocityEstimator()
        self._state = state or EstimatorState()

    def assemble(
        self,
        detection: DetectionResult,
        camera_to_footprint: RigidTransform,
        now: Optional[float] = None,
    ) -> AssemblyResult:
        """
        Turn a detection into an odometry estimate.

        Args:
            detection: Detection result in the camera frame.
            camera_to_footprint: Latest camera to footprint transform.
            now: Processing time; defaults to the corrector clock.

        Returns:
            OdometryEstimate, or Skipped when nothing can be emitted. The
            estimator state is only updated when an estimate is returned.
        """
        if not detection.found or detection.pose is None:
            logger.debug("no_detections")
            return Skipped(SkipReason.NO_DETECTIONS)

        corrected = self._corrector.correct(detection.pose, camera_to_footprint, now)

        last_pose = self._state.last_pose
        previous_stamp = last_pose.timestamp if last_pose is not None else 0.0
        if corrected.timestamp <= previous_stamp:
            logger.warning(
                "degenerate_timing",
                previous_s=previous_stamp,
                current_s=corrected.timestamp,
            )
            return Skipped(
                SkipReason.DEGENERATE_TIMING,
                f"timestamp {corrected.timestamp} not after {previous_stamp}",
            )

        twist = self._estimator.estimate(last_pose, corrected)

        estimate = OdometryEstimate(
            frame_id=self._bin_frame,
            child_frame_id=self._footprint_frame,
            timestamp=corrected.timestamp,
            pose=corrected,
            twist=twist,
        )

        self._state.last_pose = corrected

        logger.debug(
            "odometry_assembled",
            timestamp=estimate.timestamp,
            x=corrected.x,
            y=corrected.y,
            z=corrected.z,
        )
        return estimate

    @property
    def state(self) -> EstimatorState:
        """Estimator state."""
        return self._state

    @property
    def bin_frame(self) -> str:
        """Frame estimates are reported in."""
        return self._bin_frame

    @property
    def footprint_frame(self) -> str:
        """Frame being tracked."""
        return self._footprint_frame
