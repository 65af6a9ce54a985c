"""
Offline replay for fiducial_odom.

Feeds a detection recording through the odometry node, using the recorded
capture timestamps as processing time and the static transforms from the
configuration as the frame graph.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import numpy as np

from fiducial_odom.config.schema import FiducialOdomConfig
from fiducial_odom.logging.setup import get_logger
from fiducial_odom.odometry.assembler import OdometryEstimate
from fiducial_odom.odometry.node import FiducialOdometryNode
from fiducial_odom.odometry.publishers import IOdometryPublisher
from fiducial_odom.perception.camera import CameraCalibration, CameraFrame
from fiducial_odom.perception.fiducials.recorded import RecordedDetector
from fiducial_odom.perception.pose.frames import RigidTransform
from fiducial_odom.tf.broadcaster import RecordingBroadcaster
from fiducial_odom.tf.buffer import FrameBuffer
from fiducial_odom.utils.time import Clock

logger = get_logger(__name__)


class ReplayClock:
    """Clock that returns whatever time the replay loop last set."""

    def __init__(self, start_s: float = 0.0) -> None:
        self._now = start_s

    def set(self, now_s: float) -> None:
        self._now = float(now_s)

    def __call__(self) -> float:
        return self._now


def build_frame_buffer(config: FiducialOdomConfig, clock: Clock) -> FrameBuffer:
    """
    Create a frame buffer seeded with the configured static transforms.

    Args:
        config: Configuration.
        clock: Time source for expiry checks.

    Returns:
        FrameBuffer instance.
    """
    buffer = FrameBuffer(cache_time_s=config.transforms.cache_time_s, clock=clock)
    for static in config.transforms.static:
        buffer.set_transform(
            RigidTransform(
                translation=static.translation,
                rotation=static.rotation,
                frame_id=static.frame_id,
                child_frame_id=static.child_frame_id,
            ),
            static=True,
        )
    return buffer


@dataclass
class ReplaySummary:
    """
    Result of a replay run.

    Attributes:
        estimates: Estimates emitted, in order.
        telemetry: Telemetry summary of all cycles.
    """

    estimates: list[OdometryEstimate] = field(default_factory=list)
    telemetry: dict[str, Any] = field(default_factory=dict)

    @property
    def last_estimate(self) -> Optional[OdometryEstimate]:
        """Final emitted estimate."""
        return self.estimates[-1] if self.estimates else None


def run_replay(
    recording_path: Path,
    config: FiducialOdomConfig,
    publisher: Optional[IOdometryPublisher] = None,
    calibration: Optional[CameraCalibration] = None,
) -> ReplaySummary:
    """
    Replay a detection recording.

    Transform lookup backoff is not slept during replay.

    Args:
        recording_path: Recording YAML file.
        config: Configuration.
        publisher: Optional publisher receiving every estimate.
        calibration: Camera calibration handed to the detector (default if None).

    Returns:
        ReplaySummary with the emitted estimates.
    """
    clock = ReplayClock()
    detector = RecordedDetector.from_yaml(
        recording_path, camera_frame=config.frames.camera_frame
    )
    buffer = build_frame_buffer(config, clock)
    summary = ReplaySummary()

    node = FiducialOdometryNode.from_config(
        config,
        detector=detector,
        frame_query=buffer,
        publisher=publisher,
        broadcaster=RecordingBroadcaster(),
        clock=clock,
        sleep=lambda _s: None,
    )
    calibration = calibration or CameraCalibration.default()
    placeholder = np.zeros((calibration.height, calibration.width), dtype=np.uint8)

    logger.info("replay_started", recording=str(recording_path), frames=len(detector.frames))

    with node:
        for index, recorded in enumerate(detector.frames):
            clock.set(recorded.timestamp_s)
            frame = CameraFrame(
                image=placeholder, timestamp_s=recorded.timestamp_s, frame_id=index
            )
            result = node.process(frame, calibration)
            if isinstance(result, OdometryEstimate):
                summary.estimates.append(result)

    summary.telemetry = node.telemetry.get_summary()
    logger.info("replay_finished", **summary.telemetry)
    return summary
