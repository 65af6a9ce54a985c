"""Unit tests for pose correction."""

import numpy as np
import pytest
from numpy.testing import assert_array_almost_equal

from fiducial_odom.odometry.corrector import PoseCorrector
from fiducial_odom.perception.pose.frames import RigidPose, RigidTransform
from fiducial_odom.utils.math3d import quaternion_from_rpy


@pytest.fixture
def rotated_transform() -> RigidTransform:
    """Camera to footprint transform with yaw and offset."""
    return RigidTransform(
        translation=[1.0, 2.0, 3.0],
        rotation=quaternion_from_rpy(0.0, 0.0, np.pi / 2),
        frame_id="camera_link",
        child_frame_id="footprint",
    )


class TestPoseCorrector:
    """Tests for PoseCorrector."""

    def test_x_negated_only(self, rotated_transform: RigidTransform) -> None:
        """Test only the first axis changes sign after the transform."""
        raw = RigidPose(
            position=[1.0, 0.0, 0.0],
            orientation=quaternion_from_rpy(0.1, 0.0, 0.0),
            timestamp=3.0,
        )
        transformed = rotated_transform.transform_pose(raw)

        corrected = PoseCorrector().correct(raw, rotated_transform, now=10.0)

        assert corrected.x == pytest.approx(-transformed.x)
        assert corrected.y == pytest.approx(transformed.y)
        assert corrected.z == pytest.approx(transformed.z)
        assert_array_almost_equal(corrected.orientation, transformed.orientation)
        assert_array_almost_equal(corrected.position, [-1.0, 3.0, 3.0])

    def test_stamped_with_processing_time(self, clock, camera_to_footprint) -> None:
        """Test corrected pose uses the clock, not the detection stamp."""
        clock.now = 42.5
        raw = RigidPose(position=[0.0, 0.0, 1.0], timestamp=1.0)

        corrected = PoseCorrector(clock=clock).correct(raw, camera_to_footprint)

        assert corrected.timestamp == 42.5

    def test_explicit_now_overrides_clock(self, clock, camera_to_footprint) -> None:
        """Test explicit now is used as stamp."""
        clock.now = 1.0
        raw = RigidPose(position=[0.0, 0.0, 1.0])

        corrected = PoseCorrector(clock=clock).correct(raw, camera_to_footprint, now=7.0)

        assert corrected.timestamp == 7.0

    def test_output_frame(self, camera_to_footprint) -> None:
        """Test output frame naming."""
        raw = RigidPose(position=[0.0, 0.0, 1.0], frame_id="camera_link")

        default = PoseCorrector().correct(raw, camera_to_footprint, now=1.0)
        named = PoseCorrector(output_frame="bin_link").correct(
            raw, camera_to_footprint, now=1.0
        )

        assert default.frame_id == "camera_link"
        assert named.frame_id == "bin_link"

    def test_raw_pose_not_mutated(self, camera_to_footprint) -> None:
        """Test the input pose is left untouched."""
        raw = RigidPose(position=[0.5, 0.0, 1.0], timestamp=2.0)

        PoseCorrector().correct(raw, camera_to_footprint, now=9.0)

        assert_array_almost_equal(raw.position, [0.5, 0.0, 1.0])
        assert raw.timestamp == 2.0
