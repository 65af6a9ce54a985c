"""Unit tests for velocity estimation."""

import numpy as np
import pytest
from numpy.testing import assert_array_almost_equal

from fiducial_odom.errors import DegenerateTiming
from fiducial_odom.odometry.velocity import VelocityEstimator, uninitialized_pose
from fiducial_odom.perception.pose.frames import RigidPose
from fiducial_odom.utils.math3d import quaternion_from_rpy


@pytest.fixture
def estimator() -> VelocityEstimator:
    """Create velocity estimator."""
    return VelocityEstimator()


class TestVelocityEstimator:
    """Tests for VelocityEstimator."""

    def test_linear_velocity_scaling(self, estimator: VelocityEstimator) -> None:
        """Test 2 m over 2 s gives 1 m/s along x."""
        previous = RigidPose(position=[0.0, 0.0, 0.0], timestamp=0.0)
        current = RigidPose(position=[2.0, 0.0, 0.0], timestamp=2.0)

        twist = estimator.estimate(previous, current)

        assert_array_almost_equal(twist.linear, [1.0, 0.0, 0.0])
        assert_array_almost_equal(twist.angular, [0.0, 0.0, 0.0])

    @pytest.mark.parametrize("theta, dt", [(0.3, 0.5), (-1.2, 2.0), (0.05, 0.1)])
    def test_yaw_rate(self, estimator: VelocityEstimator, theta: float, dt: float) -> None:
        """Test yaw rotation over dt gives theta/dt yaw rate."""
        previous = RigidPose(position=[1.0, 1.0, 0.0], timestamp=10.0)
        current = RigidPose(
            position=[1.0, 1.0, 0.0],
            orientation=quaternion_from_rpy(0.0, 0.0, theta),
            timestamp=10.0 + dt,
        )

        twist = estimator.estimate(previous, current)

        assert twist.angular[2] == pytest.approx(theta / dt)
        assert twist.angular[0] == pytest.approx(0.0, abs=1e-9)
        assert twist.angular[1] == pytest.approx(0.0, abs=1e-9)
        assert_array_almost_equal(twist.linear, np.zeros(3))

    def test_relative_rotation_between_rotated_poses(self, estimator) -> None:
        """Test angular rate uses the relative rotation, not the absolute one."""
        previous = RigidPose(
            position=[0.0, 0.0, 0.0],
            orientation=quaternion_from_rpy(0.0, 0.0, 1.0),
            timestamp=0.0,
        )
        current = RigidPose(
            position=[0.0, 0.0, 0.0],
            orientation=quaternion_from_rpy(0.0, 0.0, 1.5),
            timestamp=1.0,
        )

        twist = estimator.estimate(previous, current)

        assert twist.angular[2] == pytest.approx(0.5)

    def test_linear_delta_in_previous_frame(self, estimator) -> None:
        """Test linear velocity is expressed in the previous pose's frame."""
        yaw_90 = quaternion_from_rpy(0.0, 0.0, np.pi / 2)
        previous = RigidPose(position=[0.0, 0.0, 0.0], orientation=yaw_90, timestamp=0.0)
        current = RigidPose(position=[0.0, 1.0, 0.0], orientation=yaw_90, timestamp=0.5)

        twist = estimator.estimate(previous, current)

        assert_array_almost_equal(twist.linear, [2.0, 0.0, 0.0])

    def test_zero_quaternion_treated_as_identity(self, estimator) -> None:
        """Test zero-quaternion previous equals identity previous."""
        current = RigidPose(
            position=[0.3, -0.2, 1.0],
            orientation=quaternion_from_rpy(0.1, 0.2, 0.3),
            timestamp=4.0,
        )
        zero = RigidPose(position=[0.1, 0.1, 0.1], orientation=[0, 0, 0, 0], timestamp=1.0)
        identity = RigidPose(
            position=[0.1, 0.1, 0.1], orientation=[0, 0, 0, 1], timestamp=1.0
        )

        from_zero = estimator.estimate(zero, current)
        from_identity = estimator.estimate(identity, current)

        assert_array_almost_equal(from_zero.angular, from_identity.angular)
        assert_array_almost_equal(from_zero.linear, from_identity.linear)

    def test_missing_previous_uses_origin_at_epoch(self, estimator) -> None:
        """Test None previous behaves like an identity pose at the origin, t=0."""
        current = RigidPose(
            position=[2.0, 0.0, 4.0],
            orientation=quaternion_from_rpy(0.0, 0.0, 0.4),
            timestamp=2.0,
        )

        twist = estimator.estimate(None, current)

        assert_array_almost_equal(twist.linear, [1.0, 0.0, 2.0])
        assert twist.angular[2] == pytest.approx(0.2)
        assert_array_almost_equal(
            twist.linear, estimator.estimate(uninitialized_pose(), current).linear
        )

    @pytest.mark.parametrize("current_s", [5.0, 4.0])
    def test_non_increasing_time_raises(self, estimator, current_s: float) -> None:
        """Test equal or earlier timestamps fail fast."""
        previous = RigidPose(position=[0.0, 0.0, 0.0], timestamp=5.0)
        current = RigidPose(position=[1.0, 0.0, 0.0], timestamp=current_s)

        with pytest.raises(DegenerateTiming):
            estimator.estimate(previous, current)
