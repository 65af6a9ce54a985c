"""
Velocity estimation for fiducial_odom.

Estimates linear and angular velocity from two timestamped poses by taking
the relative rigid transform between them and dividing by the elapsed time.
"""

from typing import Optional

import numpy as np

from fiducial_odom.errors import DegenerateTiming
from fiducial_odom.perception.pose.frames import RigidPose, Twist
from fiducial_odom.utils.math3d import IDENTITY_QUATERNION, quaternion_to_rpy


def uninitialized_pose(frame_id: str = "") -> RigidPose:
    """Pose standing in for "no prior sample": origin, identity, stamped at 0."""
    return RigidPose(
        position=np.zeros(3),
        orientation=IDENTITY_QUATERNION.copy(),
        timestamp=0.0,
        frame_id=frame_id,
    )


class VelocityEstimator:
    """
    Finite-difference twist estimator.

    The relative transform previous^-1 * current gives a linear delta in the
    previous pose's local frame and an angular delta, which is decomposed
    into roll/pitch/yaw before dividing by the time step.
    """

    def estimate(self, previous: Optional[RigidPose], current: RigidPose) -> Twist:
        """
        Estimate twist between two poses.

        Args:
            previous: Earlier pose. None, or a pose with an all-zero
                orientation, means no prior sample: identity orientation is
                substituted (None also implies origin and stamp 0).
            current: Later pose.

        Returns:
            Twist with linear velocity (m/s) and roll/pitch/yaw rates (rad/s).

        Raises:
            DegenerateTiming: If current is not strictly later than previous.
        """
        if previous is None:
            previous = uninitialized_pose(current.frame_id)
        elif not previous.has_orientation:
            previous = RigidPose(
                position=previous.position.copy(),
                orientation=IDENTITY_QUATERNION.copy(),
                timestamp=previous.timestamp,
                frame_id=previous.frame_id,
            )

        delta_t = current.timestamp - previous.timestamp
        if delta_t <= 0.0:
            raise DegenerateTiming(previous.timestamp, current.timestamp)

        deltas = current.relative_to(previous)
        linear_deltas = deltas.translation
        rpy_deltas = np.array(quaternion_to_rpy(deltas.rotation), dtype=np.float64)

        return Twist(linear=linear_deltas / delta_t, angular=rpy_deltas / delta_t)
