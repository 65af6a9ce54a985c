"""
Pose correction for fiducial_odom.

Re-expresses a marker pose detected in the camera frame in the platform
footprint frame.
"""

from typing import Optional

from fiducial_odom.perception.pose.frames import RigidPose, RigidTransform
from fiducial_odom.utils.time import Clock, get_timestamp_s


class PoseCorrector:
    """
    Applies the camera-to-footprint transform and the axis convention fix.

    Corrected poses are stamped with the processing time, not the capture
    time of the image they came from.
    """

    def __init__(
        self,
        clock: Clock = get_timestamp_s,
        output_frame: Optional[str] = None,
    ) -> None:
        """
        Initialize pose corrector.

        Args:
            clock: Time source for the corrected pose stamp.
            output_frame: Frame name given to corrected poses. Defaults to the
                parent frame of the transform used.
        """
        self._clock = clock
        self._output_frame = output_frame

    def correct(
        self,
        raw_pose: RigidPose,
        transform: RigidTransform,
        now: Optional[float] = None,
    ) -> RigidPose:
        """
        Correct a raw detected pose.

        Args:
            raw_pose: Marker pose relative to the camera frame.
            transform: Camera frame to footprint frame transform (latest).
            now: Stamp for the corrected pose; defaults to the clock.

        Returns:
            Corrected pose stamped with now.
        """
        corrected = transform.transform_pose(raw_pose)
        if self._output_frame is not None:
            corrected.frame_id = self._output_frame
        corrected.timestamp = float(self._clock() if now is None else now)

        # Fixed handedness correction between camera and footprint conventions
        corrected.position[0] = -corrected.position[0]

        return corrected
