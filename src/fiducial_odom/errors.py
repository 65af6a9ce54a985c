"""
Error types for fiducial_odom.

Every failure in the odometry cycle is recoverable: the cycle is skipped and
the estimator state is kept for the next attempt.
"""


class FiducialOdomError(Exception):
    """Base class for fiducial odometry errors."""


class DetectionFailed(FiducialOdomError):
    """Detector returned an error or did not answer within its timeout."""


class TransformUnavailable(FiducialOdomError):
    """Frame lookup failed because a frame is unknown or its data expired."""

    def __init__(self, target_frame: str, source_frame: str, reason: str) -> None:
        self.target_frame = target_frame
        self.source_frame = source_frame
        self.reason = reason
        super().__init__(
            f"Cannot transform from '{source_frame}' to '{target_frame}': {reason}"
        )


class DegenerateTiming(FiducialOdomError):
    """Two pose samples do not have strictly increasing timestamps."""

    def __init__(self, previous_s: float, current_s: float) -> None:
        self.previous_s = previous_s
        self.current_s = current_s
        super().__init__(
            f"Non-positive time step: previous={previous_s:.6f}s current={current_s:.6f}s"
        )
