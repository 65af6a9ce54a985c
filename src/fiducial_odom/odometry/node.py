"""
Fiducial odometry node for fiducial_odom.

Drives one full cycle per camera frame: detect markers, look up the
camera-to-footprint transform, correct the pose, estimate velocity, assemble
the estimate, then publish it and broadcast the matching transform. Every
detection or lookup failure skips the cycle and leaves the estimator state
untouched. Output failures are logged and never raised.
"""

from threading import Lock
from typing import Callable, Optional
import time

import numpy as np

from fiducial_odom.config.schema import FiducialOdomConfig
from fiducial_odom.errors import DetectionFailed, TransformUnavailable
from fiducial_odom.logging.setup import get_logger
from fiducial_odom.logging.telemetry import CycleTelemetry, TelemetryCollector
from fiducial_odom.odometry.assembler import (
    AssemblyResult,
    EstimatorState,
    OdometryAssembler,
    OdometryEstimate,
    Skipped,
    SkipReason,
)
from fiducial_odom.odometry.corrector import PoseCorrector
from fiducial_odom.odometry.publishers import IOdometryPublisher
from fiducial_odom.perception.camera import CameraCalibration, CameraFrame
from fiducial_odom.perception.fiducials.base import IFiducialDetector, TimedDetector
from fiducial_odom.tf.broadcaster import ITransformBroadcaster
from fiducial_odom.tf.buffer import IFrameQuery
from fiducial_odom.utils.time import Clock, Timer, get_timestamp_s

logger = get_logger(__name__)

EMITTED = "emitted"


class FiducialOdometryNode:
    """
    Sequential fiducial odometry pipeline.

    process() may be called from several camera callback threads; a lock
    serializes whole cycles so pose timestamps stay strictly increasing.
    """

    def __init__(
        self,
        detector: IFiducialDetector,
        frame_query: IFrameQuery,
        publisher: Optional[IOdometryPublisher] = None,
        broadcaster: Optional[ITransformBroadcaster] = None,
        camera_frame: str = "camera_link",
        footprint_frame: str = "footprint",
        bin_frame: str = "bin_link",
        odometry_frame: str = "odom",
        backoff_s: float = 1.0,
        clock: Clock = get_timestamp_s,
        sleep: Callable[[float], None] = time.sleep,
        telemetry: Optional[TelemetryCollector] = None,
    ) -> None:
        """
        Initialize node.

        Args:
            detector: Marker detector.
            frame_query: Frame graph used for the camera to footprint lookup.
            publisher: Receives every estimate.
            broadcaster: Receives every estimate as a bin to footprint transform.
            camera_frame: Reference frame of the camera.
            footprint_frame: Reference frame of the platform footprint.
            bin_frame: Reference frame of the bin (target).
            odometry_frame: Reference frame of odom.
            backoff_s: Pause after a failed transform lookup.
            clock: Processing time source.
            sleep: Sleep function used for the backoff.
            telemetry: Collector for cycle telemetry.
        """
        if backoff_s < 0:
            raise ValueError("backoff_s must be non-negative")

        self._detector = detector
        self._frame_query = frame_query
        self._publisher = publisher
        self._broadcaster = broadcaster
        self._camera_frame = camera_frame
        self._footprint_frame = footprint_frame
        self._bin_frame = bin_frame
        self._odometry_frame = odometry_frame
        self._backoff_s = backoff_s
        self._clock = clock
        self._sleep = sleep
        self._telemetry = telemetry or TelemetryCollector()

        self._assembler = OdometryAssembler(
            bin_frame=bin_frame,
            footprint_frame=footprint_frame,
            corrector=PoseCorrector(clock=clock, output_frame=bin_frame),
            state=EstimatorState(),
        )
        self._lock = Lock()

        logger.info(
            "fiducial_odometry_node_created",
            detector=detector.backend_name,
            camera_frame=camera_frame,
            footprint_frame=footprint_frame,
            bin_frame=bin_frame,
            odometry_frame=odometry_frame,
        )

    @classmethod
    def from_config(
        cls,
        config: FiducialOdomConfig,
        detector: IFiducialDetector,
        frame_query: IFrameQuery,
        publisher: Optional[IOdometryPublisher] = None,
        broadcaster: Optional[ITransformBroadcaster] = None,
        clock: Clock = get_timestamp_s,
        sleep: Callable[[float], None] = time.sleep,
    ) -> "FiducialOdometryNode":
        """
        Build a node from configuration.

        The detector is wrapped in a TimedDetector when a timeout is set.
        """
        if config.detector.timeout_s is not None and not isinstance(
            detector, TimedDetector
        ):
            detector = TimedDetector(detector, timeout_s=config.detector.timeout_s)

        return cls(
            detector=detector,
            frame_query=frame_query,
            publisher=publisher,
            broadcaster=broadcaster if config.output.broadcast_transform else None,
            camera_frame=config.frames.camera_frame,
            footprint_frame=config.frames.footprint_frame,
            bin_frame=config.frames.bin_frame,
            odometry_frame=config.frames.odometry_frame,
            backoff_s=config.transforms.backoff_s,
            clock=clock,
            sleep=sleep,
        )

    def process(
        self, frame: CameraFrame, calibration: CameraCalibration
    ) -> AssemblyResult:
        """
        Run one odometry cycle for a camera frame.

        Args:
            frame: Captured image.
            calibration: Calibration of the capturing camera.

        Returns:
            The published OdometryEstimate, or Skipped with the reason.
        """
        with self._lock:
            with Timer() as timer:
                result = self._run_cycle(frame, calibration)
            self._record(frame, result, timer.elapsed_ms)
            return result

    def _run_cycle(
        self, frame: CameraFrame, calibration: CameraCalibration
    ) -> AssemblyResult:
        try:
            detection = self._detector.detect(frame, calibration)
        except DetectionFailed as e:
            logger.warning("detection_failed", frame_id=frame.frame_id, error=str(e))
            return Skipped(SkipReason.DETECTION_FAILED, str(e))
        except Exception as e:
            detail = f"{self._detector.backend_name} error: {e}"
            logger.warning("detection_failed", frame_id=frame.frame_id, error=detail)
            return Skipped(SkipReason.DETECTION_FAILED, detail)

        if not detection.found:
            logger.debug("no_detections", frame_id=frame.frame_id)
            return Skipped(SkipReason.NO_DETECTIONS)

        try:
            camera_to_footprint = self._frame_query.lookup_transform(
                self._camera_frame, self._footprint_frame
            )
        except TransformUnavailable as e:
            logger.warning(
                "transform_unavailable",
                frame_id=frame.frame_id,
                target=e.target_frame,
                source=e.source_frame,
                error=e.reason,
                backoff_s=self._backoff_s,
            )
            if self._backoff_s > 0:
                self._sleep(self._backoff_s)
            return Skipped(SkipReason.TRANSFORM_UNAVAILABLE, str(e))

        result = self._assembler.assemble(
            detection, camera_to_footprint, now=self._clock()
        )

        if isinstance(result, OdometryEstimate):
            self._emit(result)

        return result

    def _emit(self, estimate: OdometryEstimate) -> None:
        """Hand the estimate to the broadcaster and publisher; failures are logged."""
        if self._broadcaster is not None:
            try:
                self._broadcaster.send_transform(estimate.to_transform())
            except Exception as e:
                logger.warning(
                    "broadcast_failed", timestamp=estimate.timestamp, error=str(e)
                )
        if self._publisher is not None:
            try:
                self._publisher.publish(estimate)
            except Exception as e:
                logger.warning(
                    "publish_failed", timestamp=estimate.timestamp, error=str(e)
                )

    def _record(
        self, frame: CameraFrame, result: AssemblyResult, latency_ms: float
    ) -> None:
        if isinstance(result, OdometryEstimate):
            self._telemetry.record(
                CycleTelemetry(
                    timestamp_s=result.timestamp,
                    outcome=EMITTED,
                    latency_ms=latency_ms,
                    frame_id=frame.frame_id,
                    pose_x=result.pose.x,
                    pose_y=result.pose.y,
                    pose_z=result.pose.z,
                    speed_mps=float(np.linalg.norm(result.twist.linear)),
                )
            )
        else:
            self._telemetry.record(
                CycleTelemetry(
                    timestamp_s=frame.timestamp_s,
                    outcome=result.reason.value,
                    latency_ms=latency_ms,
                    frame_id=frame.frame_id,
                )
            )

    def reset(self) -> None:
        """Forget the last accepted pose."""
        with self._lock:
            self._assembler.state.reset()
        logger.info("fiducial_odometry_node_reset")

    def close(self) -> None:
        """Stop the detector worker and close the publisher."""
        if isinstance(self._detector, TimedDetector):
            self._detector.close()
        if self._publisher is not None:
            self._publisher.close()

    def __enter__(self) -> "FiducialOdometryNode":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    @property
    def state(self) -> EstimatorState:
        """Estimator state."""
        return self._assembler.state

    @property
    def telemetry(self) -> TelemetryCollector:
        """Cycle telemetry."""
        return self._telemetry
