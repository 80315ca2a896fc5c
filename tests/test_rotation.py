"""Tests for gravity / magnetometer rotation matrices."""

import pytest
import numpy as np

from tilt_sensor.core.quaternion import QuaternionOps
from tilt_sensor.core.rotation import STANDARD_GRAVITY, RotationOps
from tilt_sensor.core.types import SensorKind, TiltAngles

# Field with 60 degree inclination pointing north and down
FLAT_NORTH_FIELD = np.array([0.0, 24.0, -41.57])
FLAT_GRAVITY = np.array([0.0, 0.0, STANDARD_GRAVITY])


class TestFromGravityMagnetic:
    """Tests for RotationOps.from_gravity_magnetic."""

    def test_flat_facing_north_is_identity(self):
        """Device flat and facing north gives the identity matrix."""
        R = RotationOps.from_gravity_magnetic(FLAT_GRAVITY, FLAT_NORTH_FIELD)
        np.testing.assert_allclose(R, np.eye(3), atol=1e-12)

    def test_recovers_device_attitude(self, host):
        """Matrix from synthesized readings equals the device rotation."""
        attitude = TiltAngles(35.0, -20.0, 50.0)
        gravity = host.sample_for(SensorKind.GRAVITY, attitude).vector
        magnetic = host.sample_for(SensorKind.MAGNETIC_FIELD, attitude).vector

        R = RotationOps.from_gravity_magnetic(gravity, magnetic)
        expected = QuaternionOps.to_rotation_matrix(QuaternionOps.from_tilt(attitude))
        np.testing.assert_allclose(R, expected, atol=1e-9)

    def test_free_fall_is_degenerate(self):
        """Gravity below a tenth of g yields no matrix."""
        R = RotationOps.from_gravity_magnetic(np.array([0.0, 0.0, 0.5]), FLAT_NORTH_FIELD)
        assert R is None

    def test_field_parallel_to_gravity_is_degenerate(self):
        """Field along gravity has no horizontal component."""
        R = RotationOps.from_gravity_magnetic(FLAT_GRAVITY, np.array([0.0, 0.0, -40.0]))
        assert R is None

    def test_thresholds_are_configurable(self):
        """A stricter free-fall ratio rejects reduced gravity."""
        gravity = np.array([0.0, 0.0, 4.0])
        assert RotationOps.from_gravity_magnetic(gravity, FLAT_NORTH_FIELD) is not None
        assert RotationOps.from_gravity_magnetic(
            gravity, FLAT_NORTH_FIELD, free_fall_ratio=0.5
        ) is None

    def test_non_finite_input_is_degenerate(self):
        """NaN readings never produce a matrix."""
        R = RotationOps.from_gravity_magnetic(np.array([np.nan, 0.0, 9.8]), FLAT_NORTH_FIELD)
        assert R is None


class TestOrientation:
    """Tests for matrix angle extraction."""

    def test_identity_is_flat(self):
        """Identity matrix gives zero tilt."""
        angles = RotationOps.orientation(np.eye(3))
        assert angles.as_tuple() == pytest.approx((0.0, 0.0, 0.0))

    def test_angle_ranges(self):
        """Angles stay within their documented ranges."""
        for attitude in (TiltAngles(179.0, 89.0, -179.0), TiltAngles(-179.0, -89.0, 179.0)):
            R = QuaternionOps.to_rotation_matrix(QuaternionOps.from_tilt(attitude))
            angles = RotationOps.orientation(R)
            assert -180.0 < angles.yaw <= 180.0
            assert -90.0 <= angles.pitch <= 90.0
            assert -180.0 < angles.roll <= 180.0

    def test_half_turn_yaw_is_positive(self):
        """Yaw of a half turn reads +180 even for a negative-zero entry."""
        R = np.array([[-1.0, -0.0, 0.0], [0.0, -1.0, 0.0], [0.0, 0.0, 1.0]])
        assert RotationOps.orientation(R).yaw == 180.0

    def test_half_turn_roll_is_positive(self):
        """Roll of a half turn reads +180 even for a negative-zero entry."""
        R = np.array([[1.0, 0.0, 0.0], [0.0, -1.0, 0.0], [0.0, 0.0, -1.0]])
        assert RotationOps.orientation(R).roll == 180.0


class TestAngleChange:
    """Tests for relative rotation between two matrices."""

    def test_same_matrix_is_zero(self):
        """No change between identical matrices."""
        R = QuaternionOps.to_rotation_matrix(QuaternionOps.from_tilt(TiltAngles(10.0, 20.0, 30.0)))
        angles = RotationOps.angle_change(R, R)
        assert angles.as_tuple() == pytest.approx((0.0, 0.0, 0.0), abs=1e-9)

    def test_yaw_difference(self):
        """Pure yaw change is the difference of yaws."""
        R_prev = QuaternionOps.to_rotation_matrix(QuaternionOps.from_tilt(TiltAngles(10.0, 0.0, 0.0)))
        R = QuaternionOps.to_rotation_matrix(QuaternionOps.from_tilt(TiltAngles(25.0, 0.0, 0.0)))
        angles = RotationOps.angle_change(R, R_prev)
        assert angles.yaw == pytest.approx(15.0)
        assert angles.pitch == pytest.approx(0.0, abs=1e-9)
        assert angles.roll == pytest.approx(0.0, abs=1e-9)
