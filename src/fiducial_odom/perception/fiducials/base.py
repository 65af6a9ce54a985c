"""
Base classes for fiducial detection.

The marker detector is an external service: it receives an image and its
calibration and answers with zero or more marker poses relative to the camera.
This module defines the result type, the detector interface and a wrapper that
bounds each request with a timeout.
"""

from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from typing import Optional, Sequence

from fiducial_odom.errors import DetectionFailed
from fiducial_odom.perception.camera import CameraCalibration, CameraFrame
from fiducial_odom.perception.pose.frames import RigidPose


@dataclass
class DetectionResult:
    """
    Outcome of a successful detection request.

    Attributes:
        count: Number of markers found.
        pose: Pose of the first (primary) marker relative to the camera frame.
            Present exactly when count > 0.
    """

    count: int
    pose: Optional[RigidPose] = None

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError("count must be non-negative")
        if self.count > 0 and self.pose is None:
            raise ValueError("pose is required when count > 0")

    @classmethod
    def empty(cls) -> "DetectionResult":
        """Result with no markers found."""
        return cls(count=0)

    @classmethod
    def from_poses(cls, poses: Sequence[RigidPose]) -> "DetectionResult":
        """Build result from all detected poses, keeping the first as primary."""
        if not poses:
            return cls.empty()
        return cls(count=len(poses), pose=poses[0])

    @property
    def found(self) -> bool:
        """True if at least one marker was detected."""
        return self.count > 0


class IFiducialDetector(ABC):
    """
    Abstract base class for fiducial marker detectors.

    Implementations raise DetectionFailed when the request cannot be served.
    """

    @abstractmethod
    def detect(
        self, frame: CameraFrame, calibration: CameraCalibration
    ) -> DetectionResult:
        """
        Detect fiducial markers in frame.

        Args:
            frame: Input camera frame.
            calibration: Calibration of the camera that captured the frame.

        Returns:
            Detection result.

        Raises:
            DetectionFailed: If detection errored.
        """
        pass

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Return backend name."""
        pass


class TimedDetector(IFiducialDetector):
    """
    Runs another detector on a worker thread with a bounded wait.

    Requests are submitted one at a time; the caller blocks until the result,
    an error or the timeout. Errors raised by the wrapped detector are
    surfaced as DetectionFailed.
    """

    def __init__(
        self,
        detector: IFiducialDetector,
        timeout_s: Optional[float] = 5.0,
    ) -> None:
        """
        Initialize timed detector.

        Args:
            detector: Detector to wrap.
            timeout_s: Maximum wait per request in seconds. None waits forever.
        """
        if timeout_s is not None and timeout_s <= 0:
            raise ValueError("timeout_s must be positive")

        self._detector = detector
        self._timeout_s = timeout_s
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="fiducial-detector"
        )

    def detect(
        self, frame: CameraFrame, calibration: CameraCalibration
    ) -> DetectionResult:
        future = self._executor.submit(self._detector.detect, frame, calibration)
        try:
            return future.result(timeout=self._timeout_s)
        except FutureTimeoutError as e:
            future.cancel()
            raise DetectionFailed(
                f"{self._detector.backend_name} timed out after {self._timeout_s}s"
            ) from e
        except DetectionFailed:
            raise
        except Exception as e:
            raise DetectionFailed(f"{self._detector.backend_name} error: {e}") from e

    def close(self) -> None:
        """Stop the worker thread without waiting for a stuck request."""
        self._executor.shutdown(wait=False, cancel_futures=True)

    def __enter__(self) -> "TimedDetector":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    @property
    def timeout_s(self) -> Optional[float]:
        """Per-request timeout in seconds."""
        return self._timeout_s

    @property
    def backend_name(self) -> str:
        return self._detector.backend_name
