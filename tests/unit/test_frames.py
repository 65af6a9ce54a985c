"""Unit tests for rigid-body frame types."""

import numpy as np
import pytest
from numpy.testing import assert_array_almost_equal

from fiducial_odom.perception.pose.frames import RigidPose, RigidTransform, Twist
from fiducial_odom.utils.math3d import quaternion_from_rpy, quaternion_to_rpy


class TestRigidTransform:
    """Tests for RigidTransform."""

    def test_identity_transform(self) -> None:
        """Test identity transformation."""
        t = RigidTransform.identity("a", "b")
        point = np.array([1.0, 2.0, 3.0])
        assert_array_almost_equal(t.apply(point), point)

    def test_rotation_normalized(self) -> None:
        """Test rotation is stored as unit quaternion."""
        t = RigidTransform(translation=[0, 0, 0], rotation=[0.0, 0.0, 0.0, 3.0])
        assert_array_almost_equal(t.rotation, [0.0, 0.0, 0.0, 1.0])

    def test_bad_shape_raises(self) -> None:
        """Test translation with wrong size is rejected."""
        with pytest.raises(ValueError):
            RigidTransform(translation=[1.0, 2.0])

    def test_rotation_90_z(self) -> None:
        """Test 90 degree rotation about Z axis."""
        t = RigidTransform(
            translation=np.zeros(3), rotation=quaternion_from_rpy(0.0, 0.0, np.pi / 2)
        )
        assert_array_almost_equal(t.apply(np.array([1.0, 0.0, 0.0])), [0.0, 1.0, 0.0])

    def test_inverse(self) -> None:
        """Test inverse transformation restores points and swaps frames."""
        t = RigidTransform(
            translation=[1.0, 2.0, 3.0],
            rotation=quaternion_from_rpy(0.1, 0.2, 0.3),
            frame_id="parent",
            child_frame_id="child",
        )
        point = np.array([1.0, 1.0, 1.0])
        restored = t.inverse().apply(t.apply(point))

        assert_array_almost_equal(restored, point)
        assert t.inverse().frame_id == "child"
        assert t.inverse().child_frame_id == "parent"

    def test_compose(self) -> None:
        """Test transform composition."""
        t1 = RigidTransform(translation=[1.0, 0.0, 0.0], frame_id="a", child_frame_id="b")
        t2 = RigidTransform(translation=[0.0, 1.0, 0.0], frame_id="b", child_frame_id="c")

        composed = t1.compose(t2)

        assert_array_almost_equal(composed.apply(np.zeros(3)), [1.0, 1.0, 0.0])
        assert composed.frame_id == "a"
        assert composed.child_frame_id == "c"

    def test_transform_pose(self) -> None:
        """Test pose is re-expressed in the parent frame."""
        t = RigidTransform(
            translation=[1.0, 2.0, 3.0],
            rotation=quaternion_from_rpy(0.0, 0.0, np.pi / 2),
            frame_id="footprint",
        )
        pose = RigidPose(position=[1.0, 0.0, 0.0], timestamp=4.0, frame_id="camera")

        out = t.transform_pose(pose)

        assert_array_almost_equal(out.position, [1.0, 3.0, 3.0])
        assert quaternion_to_rpy(out.orientation)[2] == pytest.approx(np.pi / 2)
        assert out.timestamp == 4.0
        assert out.frame_id == "footprint"


class TestRigidPose:
    """Tests for RigidPose."""

    def test_zero_orientation_kept(self) -> None:
        """Test the uninitialized zero quaternion is not normalized away."""
        pose = RigidPose(position=[0, 0, 0], orientation=[0, 0, 0, 0])
        assert not pose.has_orientation
        assert_array_almost_equal(pose.orientation, np.zeros(4))

    def test_orientation_normalized(self) -> None:
        """Test non-zero orientation is normalized."""
        pose = RigidPose(position=[0, 0, 0], orientation=[0, 0, 2, 0])
        assert_array_almost_equal(pose.orientation, [0, 0, 1, 0])

    def test_from_rvec_tvec(self) -> None:
        """Test creation from OpenCV rotation vector."""
        pose = RigidPose.from_rvec_tvec(
            np.array([0.0, 0.0, 0.5]), np.array([0.1, 0.2, 2.0]), timestamp=1.0
        )
        assert_array_almost_equal(pose.position, [0.1, 0.2, 2.0])
        assert quaternion_to_rpy(pose.orientation)[2] == pytest.approx(0.5)

    def test_relative_to_translation(self) -> None:
        """Test relative translation is expressed in the previous frame."""
        previous = RigidPose(
            position=[1.0, 0.0, 0.0], orientation=quaternion_from_rpy(0, 0, np.pi / 2)
        )
        current = RigidPose(
            position=[1.0, 2.0, 0.0], orientation=quaternion_from_rpy(0, 0, np.pi / 2)
        )

        delta = current.relative_to(previous)

        # Moving along world +y is moving forward along previous x
        assert_array_almost_equal(delta.translation, [2.0, 0.0, 0.0])
        assert_array_almost_equal(delta.rotation, [0.0, 0.0, 0.0, 1.0])

    def test_to_dict(self) -> None:
        """Test serialization."""
        pose = RigidPose(position=[1.0, 2.0, 3.0], timestamp=5.0, frame_id="bin_link")
        data = pose.to_dict()
        assert data["position"] == [1.0, 2.0, 3.0]
        assert data["orientation"] == [0.0, 0.0, 0.0, 1.0]
        assert data["frame_id"] == "bin_link"


class TestTwist:
    """Tests for Twist."""

    def test_defaults_zero(self) -> None:
        """Test default twist is zero."""
        twist = Twist()
        assert_array_almost_equal(twist.linear, np.zeros(3))
        assert_array_almost_equal(twist.angular, np.zeros(3))
