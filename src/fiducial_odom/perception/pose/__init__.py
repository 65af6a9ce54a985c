"""Pose and frame types for fiducial_odom."""

from fiducial_odom.perception.pose.frames import RigidPose, RigidTransform, Twist

__all__ = [
    "RigidPose",
    "RigidTransform",
    "Twist",
]
