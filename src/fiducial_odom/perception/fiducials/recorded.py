"""
Recorded detector for offline replay.

Serves detection results captured earlier, one entry per frame id. A recording
is a YAML file of the form:

    frames:
      - timestamp_s: 0.0
        detections:
          - position: [0.1, 0.0, 1.2]
            orientation: [0.0, 0.0, 0.0, 1.0]
      - timestamp_s: 0.1
        detections:
          - rvec: [0.0, 0.0, 0.1]
            tvec: [0.1, 0.0, 1.2]
      - timestamp_s: 0.2
        error: timeout
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from fiducial_odom.errors import DetectionFailed
from fiducial_odom.perception.camera import CameraCalibration, CameraFrame
from fiducial_odom.perception.fiducials.base import DetectionResult, IFiducialDetector
from fiducial_odom.perception.pose.frames import RigidPose
from fiducial_odom.utils.io import load_yaml


@dataclass
class RecordedFrame:
    """
    One recorded detection outcome.

    Attributes:
        timestamp_s: Capture timestamp in seconds.
        result: Detection result, None if the request failed.
        error: Failure description when result is None.
    """

    timestamp_s: float
    result: Optional[DetectionResult] = None
    error: Optional[str] = None


def _parse_pose(entry: dict[str, Any], timestamp_s: float, frame_id: str) -> RigidPose:
    if "rvec" in entry and "tvec" in entry:
        return RigidPose.from_rvec_tvec(
            entry["rvec"], entry["tvec"], timestamp=timestamp_s, frame_id=frame_id
        )
    return RigidPose(
        position=entry["position"],
        orientation=entry.get("orientation", [0.0, 0.0, 0.0, 1.0]),
        timestamp=timestamp_s,
        frame_id=frame_id,
    )


class RecordedDetector(IFiducialDetector):
    """Detector that answers from a list of recorded frames, indexed by frame id."""

    def __init__(self, frames: list[RecordedFrame]) -> None:
        self._frames = frames

    @classmethod
    def from_yaml(cls, path: Path, camera_frame: str = "camera_link") -> "RecordedDetector":
        """
        Load a recording from YAML.

        Args:
            path: Path to recording file.
            camera_frame: Frame name assigned to recorded poses.

        Returns:
            RecordedDetector instance.

        Raises:
            FileNotFoundError: If the recording does not exist.
            ValueError: If the recording is malformed.
        """
        data = load_yaml(path)
        raw_frames = data.get("frames") if isinstance(data, dict) else None
        if not isinstance(raw_frames, list):
            raise ValueError(f"Recording {path} must contain a 'frames' list")

        frames: list[RecordedFrame] = []
        for index, raw in enumerate(raw_frames):
            try:
                timestamp_s = float(raw["timestamp_s"])
                if raw.get("error"):
                    frames.append(RecordedFrame(timestamp_s, error=str(raw["error"])))
                    continue
                poses = [
                    _parse_pose(entry, timestamp_s, camera_frame)
                    for entry in raw.get("detections") or []
                ]
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                raise ValueError(f"Invalid recording entry {index} in {path}: {e}") from e
            frames.append(
                RecordedFrame(timestamp_s, result=DetectionResult.from_poses(poses))
            )

        return cls(frames)

    def detect(
        self, frame: CameraFrame, calibration: CameraCalibration
    ) -> DetectionResult:
        if not 0 <= frame.frame_id < len(self._frames):
            raise DetectionFailed(f"no recorded result for frame {frame.frame_id}")

        recorded = self._frames[frame.frame_id]
        if recorded.result is None:
            raise DetectionFailed(recorded.error or "recorded failure")
        return recorded.result

    @property
    def frames(self) -> list[RecordedFrame]:
        """Recorded frames in capture order."""
        return list(self._frames)

    @property
    def backend_name(self) -> str:
        return "recorded"
