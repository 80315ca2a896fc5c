"""Input validation for raw sensor samples."""

from typing import Optional, Sequence
import numpy as np

from .types import RawSample, SensorKind, ValidationResult

ROTATION_VECTOR_LENGTHS = (3, 4, 5)
VECTOR_LENGTH = 3


def make_sample(
    kind: SensorKind,
    values: Sequence[float],
    accuracy: Optional[int] = None,
    timestamp: Optional[float] = None,
) -> RawSample:
    """Build a RawSample, rejecting malformed input.

    Args:
        kind: Sensor source of the values.
        values: Raw values as delivered by the host.
        accuracy: Optional accuracy hint from the host.
        timestamp: Optional host timestamp in seconds.

    Returns:
        Immutable sample.

    Raises:
        ValueError: If kind is unknown or the number of values is wrong.
    """
    if not isinstance(kind, SensorKind):
        raise ValueError(f"Unknown sensor kind: {kind!r}")

    values = tuple(float(v) for v in values)
    if kind is SensorKind.ROTATION_VECTOR:
        if len(values) not in ROTATION_VECTOR_LENGTHS:
            raise ValueError(
                f"Rotation vector needs 3 to 5 values, got {len(values)}"
            )
    elif len(values) < VECTOR_LENGTH:
        raise ValueError(
            f"{kind.value} needs {VECTOR_LENGTH} values, got {len(values)}"
        )

    return RawSample(kind=kind, values=values, accuracy=accuracy, timestamp=timestamp)


class SampleValidator:
    """Checks raw samples for values the solver cannot use."""

    def __init__(self, rotation_norm_tolerance: float = 0.01):
        """Initialize validator.

        Args:
            rotation_norm_tolerance: Allowed excess of the rotation
                vector's norm over 1.
        """
        self._rotation_norm_tolerance = rotation_norm_tolerance

    def validate(self, sample: RawSample) -> ValidationResult:
        """Validate a raw sample.

        Args:
            sample: Sample to validate.

        Returns:
            ValidationResult with validation status and any errors/warnings.
        """
        result = ValidationResult(is_valid=True)

        self._check_finite(sample, result)
        if not result.is_valid:
            return result

        if sample.kind is SensorKind.ROTATION_VECTOR:
            self._check_rotation_vector(sample, result)
        else:
            self._check_vector(sample, result)

        return result

    def _check_finite(self, sample: RawSample, result: ValidationResult) -> None:
        """Check all values are finite (not NaN or Inf)."""
        for i, val in enumerate(sample.values):
            if not np.isfinite(val):
                result.add_error(f"Non-finite {sample.kind.value} value at index {i}: {val}")

    def _check_rotation_vector(self, sample: RawSample, result: ValidationResult) -> None:
        """Rotation vector must describe a (nearly) unit quaternion."""
        vector_norm = float(np.linalg.norm(sample.vector))
        if vector_norm > 1.0 + self._rotation_norm_tolerance:
            result.add_error(f"Rotation vector norm too large: {vector_norm:.4f}")

        if len(sample.values) >= 4:
            q_norm = float(np.linalg.norm(sample.values[:4]))
            if q_norm < 1e-6:
                result.add_error("Rotation vector quaternion has zero norm")
            elif abs(q_norm - 1.0) > self._rotation_norm_tolerance:
                result.add_warning(f"Rotation vector quaternion norm drift: {q_norm:.4f}")

    def _check_vector(self, sample: RawSample, result: ValidationResult) -> None:
        """Gravity / accelerometer / magnetic readings must not vanish."""
        if float(np.linalg.norm(sample.vector)) == 0.0:
            result.add_error(f"Zero-length {sample.kind.value} vector")
