"""
Shared pytest fixtures for fiducial_odom tests.
"""

from typing import Union

import pytest
import numpy as np

from fiducial_odom.errors import DetectionFailed
from fiducial_odom.perception.camera import CameraCalibration, CameraFrame
from fiducial_odom.perception.fiducials.base import DetectionResult, IFiducialDetector
from fiducial_odom.perception.pose.frames import RigidPose, RigidTransform


class ManualClock:
    """Clock whose time is set by the test."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class ScriptedDetector(IFiducialDetector):
    """Detector answering from a script of results and exceptions."""

    def __init__(self, script: list[Union[DetectionResult, Exception]]) -> None:
        self._script = list(script)
        self.calls = 0

    def detect(
        self, frame: CameraFrame, calibration: CameraCalibration
    ) -> DetectionResult:
        item = self._script[self.calls]
        self.calls += 1
        if isinstance(item, Exception):
            raise item
        return item

    @property
    def backend_name(self) -> str:
        return "scripted"


def marker_at(x: float, y: float, z: float, quat=(0.0, 0.0, 0.0, 1.0)) -> DetectionResult:
    """Detection result with a single marker at the given camera-frame pose."""
    return DetectionResult(
        count=1,
        pose=RigidPose(position=[x, y, z], orientation=quat, frame_id="camera_link"),
    )


@pytest.fixture
def calibration() -> CameraCalibration:
    """Create default camera calibration."""
    return CameraCalibration.default()


@pytest.fixture
def camera_frame() -> CameraFrame:
    """Create sample CameraFrame object."""
    return CameraFrame(image=np.zeros((720, 1280), dtype=np.uint8), timestamp_s=0.0, frame_id=0)


@pytest.fixture
def camera_to_footprint() -> RigidTransform:
    """Identity transform between camera and footprint frames."""
    return RigidTransform.identity("camera_link", "footprint")


@pytest.fixture
def clock() -> ManualClock:
    """Manually advanced clock."""
    return ManualClock()


@pytest.fixture
def detection_failed() -> DetectionFailed:
    """A detector failure."""
    return DetectionFailed("server aborted goal")


@pytest.fixture
def marker():
    """Factory for single-marker detection results."""
    return marker_at


@pytest.fixture
def scripted_detector():
    """Factory for detectors answering from a script."""
    return ScriptedDetector
