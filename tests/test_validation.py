"""Tests for raw sample construction and validation."""

import pytest
import numpy as np

from tilt_sensor.core.types import (
    RawSample,
    ScreenRotation,
    SensorKind,
    SensorTier,
    SolveStats,
    SourceAvailability,
    TiltAngles,
)
from tilt_sensor.core.validation import SampleValidator, make_sample


class TestMakeSample:
    """Tests for make_sample."""

    @pytest.mark.parametrize("values", [
        (0.0, 0.0, 0.0),
        (0.0, 0.0, 0.0, 1.0),
        (0.0, 0.0, 0.0, 1.0, 0.1),
    ])
    def test_rotation_vector_lengths(self, values):
        """Rotation vector accepts 3 to 5 values."""
        sample = make_sample(SensorKind.ROTATION_VECTOR, values)
        assert len(sample.values) == len(values)

    @pytest.mark.parametrize("values", [(0.0, 0.0), (0.0,) * 6])
    def test_rotation_vector_bad_length(self, values):
        """Other lengths are rejected."""
        with pytest.raises(ValueError):
            make_sample(SensorKind.ROTATION_VECTOR, values)

    def test_vector_too_short(self):
        """Gravity needs three values."""
        with pytest.raises(ValueError):
            make_sample(SensorKind.GRAVITY, (0.0, 9.8))

    def test_unknown_kind(self):
        """Plain strings are not sensor kinds."""
        with pytest.raises(ValueError):
            make_sample("gravity", (0.0, 0.0, 9.8))

    def test_values_are_floats(self):
        """Values are stored as an immutable float tuple."""
        sample = make_sample(SensorKind.MAGNETIC_FIELD, [1, 2, 3], accuracy=3)
        assert sample.values == (1.0, 2.0, 3.0)
        assert sample.accuracy == 3
        np.testing.assert_array_equal(sample.vector, [1.0, 2.0, 3.0])


class TestSampleValidator:
    """Tests for SampleValidator."""

    def test_valid_gravity(self):
        """Ordinary reading passes."""
        result = SampleValidator().validate(RawSample(SensorKind.GRAVITY, (0.0, 0.0, 9.8)))
        assert result.is_valid
        assert result.errors == []

    @pytest.mark.parametrize("bad", [np.nan, np.inf, -np.inf])
    def test_non_finite(self, bad):
        """NaN and Inf are errors."""
        result = SampleValidator().validate(RawSample(SensorKind.ACCELEROMETER, (bad, 0.0, 9.8)))
        assert not result.is_valid
        assert any("Non-finite" in e for e in result.errors)

    def test_zero_vector(self):
        """All-zero magnetic reading is an error."""
        result = SampleValidator().validate(RawSample(SensorKind.MAGNETIC_FIELD, (0.0, 0.0, 0.0)))
        assert not result.is_valid

    def test_rotation_vector_too_long(self):
        """Vector part longer than one is an error."""
        result = SampleValidator().validate(RawSample(SensorKind.ROTATION_VECTOR, (0.9, 0.9, 0.0)))
        assert not result.is_valid

    def test_zero_quaternion(self):
        """All-zero quaternion cannot be normalized."""
        result = SampleValidator().validate(
            RawSample(SensorKind.ROTATION_VECTOR, (0.0, 0.0, 0.0, 0.0))
        )
        assert not result.is_valid

    def test_quaternion_norm_drift_warns(self):
        """Slightly non-unit quaternion passes with a warning."""
        result = SampleValidator().validate(
            RawSample(SensorKind.ROTATION_VECTOR, (0.0, 0.0, 0.0, 1.1))
        )
        assert result.is_valid
        assert len(result.warnings) == 1


class TestTypes:
    """Tests for small value types."""

    def test_screen_rotation_from_degrees(self):
        """Degree values map to rotations."""
        assert ScreenRotation.from_degrees(180) is ScreenRotation.ROTATION_180

    def test_screen_rotation_rejects_other_angles(self):
        """Only quarter turns are supported."""
        with pytest.raises(ValueError, match="Unsupported screen rotation"):
            ScreenRotation.from_degrees(45)

    @pytest.mark.parametrize("flags, tier", [
        ({}, SensorTier.NONE),
        ({"have_magnetic": True}, SensorTier.NONE),
        ({"have_accelerometer": True, "have_magnetic": True}, SensorTier.ACCELEROMETER_MAGNETIC),
        ({"have_gravity": True, "have_accelerometer": True, "have_magnetic": True},
         SensorTier.GRAVITY_MAGNETIC),
        ({"have_rotation_vector": True}, SensorTier.ROTATION_VECTOR),
    ])
    def test_tier_from_availability(self, flags, tier):
        """Tier is the best complete combination."""
        assert SourceAvailability(**flags).tier is tier

    def test_solve_rate(self):
        """Solve rate is solves over received samples."""
        assert SolveStats().solve_rate == 0.0
        assert SolveStats(samples_received=4, solves=3).solve_rate == 0.75

    def test_tilt_angles_dict(self):
        """Angles serialize by axis name."""
        angles = TiltAngles(1.0, -2.0, 3.0)
        assert angles.to_dict() == {"yaw": 1.0, "pitch": -2.0, "roll": 3.0}
        assert TiltAngles.zero().as_tuple() == (0.0, 0.0, 0.0)
