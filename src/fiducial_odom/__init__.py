"""
fiducial_odom - Relative odometry from intermittent fiducial marker detections.

This package corrects detected marker poses into the platform frame, estimates
linear and angular velocity by finite differencing, and emits odometry
estimates together with a mirrored transform broadcast.
"""

from fiducial_odom.version import __version__

__all__ = ["__version__"]
