"""Fiducial detection module for fiducial_odom."""

from fiducial_odom.perception.fiducials.base import (
    DetectionResult,
    IFiducialDetector,
    TimedDetector,
)
from fiducial_odom.perception.fiducials.recorded import RecordedDetector, RecordedFrame

__all__ = [
    "DetectionResult",
    "IFiducialDetector",
    "TimedDetector",
    "RecordedDetector",
    "RecordedFrame",
]
