"""Sensor source arbitration.

Sources in order of preference:
- ROTATION_VECTOR
- GRAVITY + MAGNETIC_FIELD
- ACCELEROMETER + MAGNETIC_FIELD

Once a better source has delivered data, samples from the sources it
replaces are ignored for the rest of the session.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from ..core.config import ValidationConfig
from ..core.quaternion import QuaternionOps
from ..core.rotation import RotationOps
from ..core.types import RawSample, SensorKind, SensorTier
from ..core.validation import SampleValidator
from .solver import MatrixRotation, QuaternionRotation, RotationRepresentation
from .state import FusionState

logger = logging.getLogger(__name__)


@dataclass
class ArbiterDecision:
    """What the engine should do with one incoming sample."""
    rotation: Optional[RotationRepresentation] = None
    ignored: bool = False
    invalid: bool = False
    degenerate: bool = False
    tier_upgraded: bool = False
    dropped: Tuple[SensorKind, ...] = ()

    @property
    def should_solve(self) -> bool:
        """A rotation is ready for the solver."""
        return self.rotation is not None


class SourceArbiter:
    """Decides which samples count and when a solve is due."""

    def __init__(self, config: Optional[ValidationConfig] = None):
        """Initialize arbiter.

        Args:
            config: Thresholds for degenerate gravity / magnetic input.
        """
        self._config = config or ValidationConfig()
        self._validator = SampleValidator()

    def ingest(self, state: FusionState, sample: RawSample) -> ArbiterDecision:
        """Apply a sample to the state and decide whether to solve.

        Must be called with the state lock held.

        Args:
            state: Shared fusion state.
            sample: Incoming raw sample.

        Returns:
            ArbiterDecision for this sample.
        """
        validation = self._validator.validate(sample)
        if not validation.is_valid:
            logger.debug("Rejected %s sample: %s", sample.kind.value, validation.errors)
            return ArbiterDecision(invalid=True)

        decision = self._accept(state, sample)
        if decision.ignored:
            return decision

        decision.rotation, decision.degenerate = self._rotation(state)
        return decision

    def _accept(self, state: FusionState, sample: RawSample) -> ArbiterDecision:
        """Update caches and availability for a sample, or ignore it."""
        avail = state.availability
        kind = sample.kind

        if kind is SensorKind.ROTATION_VECTOR:
            first = not avail.have_rotation_vector
            state.latest_quaternion = QuaternionOps.from_rotation_vector(sample.values).normalized()
            avail.have_rotation_vector = True
            if first:
                logger.info("Rotation vector available, switching to %s tier",
                            SensorTier.ROTATION_VECTOR.value)
            return ArbiterDecision(tier_upgraded=first)

        if kind is SensorKind.GRAVITY:
            if avail.have_rotation_vector:
                return ArbiterDecision(ignored=True, dropped=(SensorKind.GRAVITY,))
            state.latest_up = sample.vector
            avail.have_gravity = True
            return ArbiterDecision()

        if kind is SensorKind.ACCELEROMETER:
            if avail.have_gravity or avail.have_rotation_vector:
                return ArbiterDecision(ignored=True, dropped=(SensorKind.ACCELEROMETER,))
            state.latest_up = sample.vector
            avail.have_accelerometer = True
            return ArbiterDecision()

        if avail.have_rotation_vector:
            return ArbiterDecision(ignored=True, dropped=(SensorKind.MAGNETIC_FIELD,))
        state.latest_magnetic = sample.vector
        avail.have_magnetic = True
        return ArbiterDecision()

    def _rotation(self, state: FusionState) -> Tuple[Optional[RotationRepresentation], bool]:
        """Build the authoritative rotation from cached samples.

        Returns:
            (rotation, degenerate). rotation is None when data is
            insufficient or degenerate.
        """
        avail = state.availability

        if avail.have_rotation_vector:
            return QuaternionRotation(state.latest_quaternion), False

        if (avail.have_gravity or avail.have_accelerometer) and avail.have_magnetic:
            R = RotationOps.from_gravity_magnetic(
                state.latest_up,
                state.latest_magnetic,
                free_fall_ratio=self._config.free_fall_gravity_ratio,
                min_horizontal_field=self._config.min_horizontal_field,
            )
            if R is None:
                return None, True
            return MatrixRotation(R), False

        return None, False
