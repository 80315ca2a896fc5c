"""Device tilt engine.

Main interface combining:
- SourceArbiter to pick the best available sensor combination
- OrientationSolver for absolute / relative yaw, pitch and roll
- One smoothing filter per axis

Usage:
    sensor = TiltSensor(ScreenRotation.ROTATION_90, OrientationMode.RELATIVE, host=host)
    sensor.add_listener(on_tilt)
    sensor.start_tracking(sampling_period_us=20000)
    ...
    sensor.stop_tracking()

Samples are pushed on the host's thread while control calls come from
the application. Both go through the state lock. Listeners are called
on the sample thread right after the lock is released and must not
call start_tracking, stop_tracking, set_orientation_mode or
reset_origin themselves.
"""

import logging
from typing import Optional, Sequence, Set, Tuple

from ..communication.host import SensorHost
from ..core.config import Config, FilterConfig, ValidationConfig
from ..core.types import (
    OrientationMode,
    RawSample,
    ScreenRotation,
    SensorKind,
    SensorTier,
    SolveStats,
    SourceAvailability,
    TiltAngles,
)
from ..core.validation import make_sample
from ..filters import create_filter
from .arbiter import SourceArbiter
from .solver import OrientationSolver
from .state import AxisFilters, FusionState, TiltListener

logger = logging.getLogger(__name__)


class TiltSensorError(Exception):
    """Base exception for tilt engine misuse."""
    pass


class TrackingStateError(TiltSensorError):
    """Control operation called in an invalid tracking state."""
    pass


class TiltSensor:
    """Computes smoothed device tilt from motion sensor samples."""

    def __init__(
        self,
        screen_rotation: ScreenRotation = ScreenRotation.ROTATION_0,
        mode: OrientationMode = OrientationMode.ABSOLUTE,
        host: Optional[SensorHost] = None,
        filter_config: Optional[FilterConfig] = None,
        validation_config: Optional[ValidationConfig] = None,
    ):
        """Initialize tilt engine.

        Args:
            screen_rotation: Display rotation, fixed for this instance.
            mode: Initial orientation mode.
            host: Sensor subsystem to subscribe to while tracking. If
                None, samples must be pushed with on_raw_sample().
            filter_config: Smoothing filter settings.
            validation_config: Degenerate-geometry thresholds.
        """
        self._filter_config = filter_config or FilterConfig()
        self._host = host
        self._solver = OrientationSolver(screen_rotation)
        self._arbiter = SourceArbiter(validation_config)
        self._subscribed: Set[SensorKind] = set()

        self._state = FusionState(
            mode=OrientationMode(mode),
            filters=self._create_filters(self._filter_config.low_accuracy_factor),
        )

    @classmethod
    def from_config(cls, config: Config, host: Optional[SensorHost] = None) -> "TiltSensor":
        """Create an engine from configuration."""
        return cls(
            screen_rotation=ScreenRotation.from_degrees(config.tracking.screen_rotation),
            mode=OrientationMode(config.tracking.orientation_mode),
            host=host,
            filter_config=config.filter,
            validation_config=config.validation,
        )

    def _create_filters(self, factor: float, current: Optional[TiltAngles] = None) -> AxisFilters:
        """Build yaw / pitch / roll filters, seeded with current values."""
        current = current or TiltAngles.zero()
        return AxisFilters(
            yaw=create_filter(self._filter_config, factor, current.yaw),
            pitch=create_filter(self._filter_config, factor, current.pitch),
            roll=create_filter(self._filter_config, factor, current.roll),
        )

    # Tracking lifecycle

    def start_tracking(self, sampling_period_us: int) -> None:
        """Begin receiving sensor samples.

        stop_tracking() must be called when updates are no longer needed
        to release the host subscriptions.

        Args:
            sampling_period_us: Desired sampling period, passed through
                to the host unchanged.

        Raises:
            ValueError: If the sampling period is not positive.
            TrackingStateError: If already tracking.
        """
        if sampling_period_us <= 0:
            raise ValueError(f"Sampling period must be positive, got {sampling_period_us}")

        with self._state.lock:
            if self._state.tracking:
                raise TrackingStateError("start_tracking() called while already tracking")
            self._state.clear_samples()
            self._state.filters = self._create_filters(self._filter_config.low_accuracy_factor)
            self._state.tracking = True
            self._state.has_tracked = True

        logger.info(
            "Tracking started: rotation=%d, mode=%s, period=%d us",
            self._solver.screen_rotation.value,
            self._state.mode.value,
            sampling_period_us,
        )

        if self._host is None:
            return

        for kind in SensorKind:
            if self._host.subscribe(kind, self.on_sample, sampling_period_us):
                with self._state.lock:
                    self._subscribed.add(kind)
            else:
                logger.warning("Sensor not available on host: %s", kind.value)

    def stop_tracking(self) -> None:
        """Stop receiving sensor samples, reset filters to zero and forget
        which sources were seen.

        Safe to call when not tracking.
        """
        with self._state.lock:
            was_tracking = self._state.tracking
            self._state.tracking = False
            self._state.filters.reset(0.0)
            self._state.clear_samples()

        self._unsubscribe(tuple(SensorKind))

        if was_tracking:
            logger.info("Tracking stopped: %s", self.stats.to_dict())

    def _unsubscribe(self, kinds: Tuple[SensorKind, ...]) -> None:
        """Release host subscriptions for the given kinds."""
        if self._host is None:
            return

        with self._state.lock:
            to_drop = [kind for kind in kinds if kind in self._subscribed]
            self._subscribed.difference_update(to_drop)

        for kind in to_drop:
            self._host.unsubscribe(kind, self.on_sample)
            logger.debug("Unsubscribed from %s", kind.value)

    # Orientation control

    def set_orientation_mode(self, mode: OrientationMode) -> None:
        """Switch between absolute and relative tilt.

        Always clears the captured origin.
        """
        mode = OrientationMode(mode)
        with self._state.lock:
            self._state.mode = mode
            self._state.origin = None
        logger.info("Orientation mode set to %s", mode.value)

    def reset_origin(self, immediate: bool) -> None:
        """Forget the relative origin; the next solve captures a new one.

        Args:
            immediate: If True, filters are reset to zero so the next
                update snaps to the new origin. If False, values
                transition smoothly to the new origin.

        Raises:
            TrackingStateError: If the engine has never been tracking.
        """
        with self._state.lock:
            if not self._state.has_tracked:
                raise TrackingStateError("reset_origin() called before start_tracking()")
            self._state.origin = None
            if immediate:
                self._state.filters.reset(0.0)
        logger.debug("Origin reset (immediate=%s)", immediate)

    # Listeners

    def add_listener(self, listener: TiltListener) -> None:
        """Register a callback for (yaw, pitch, roll) updates.

        Registering the same listener twice causes duplicate calls.
        """
        with self._state.lock:
            self._state.listeners.append(listener)

    def remove_listener(self, listener: TiltListener) -> None:
        """Unregister one registration of a listener.

        Raises:
            ValueError: If the listener is not registered.
        """
        with self._state.lock:
            self._state.listeners.remove(listener)

    # Sample input

    def on_raw_sample(
        self,
        kind: SensorKind,
        values: Sequence[float],
        accuracy: Optional[int] = None,
    ) -> None:
        """Push a raw sample from the host sensor subsystem.

        Raises:
            ValueError: If kind or the number of values is invalid.
        """
        self.on_sample(make_sample(kind, values, accuracy))

    def on_sample(self, sample: RawSample) -> None:
        """Process one sample and notify listeners if tilt was solved."""
        state = self._state

        with state.lock:
            if not state.tracking:
                logger.debug("Dropping %s sample: not tracking", sample.kind.value)
                return

            state.stats.samples_received += 1
            decision = self._arbiter.ingest(state, sample)

            if decision.tier_upgraded:
                state.stats.tier_upgrades += 1
                state.filters = self._create_filters(
                    self._filter_config.high_accuracy_factor,
                    state.filters.current(),
                )

            angles = None
            if decision.ignored:
                state.stats.samples_ignored += 1
            elif decision.invalid or decision.degenerate:
                state.stats.degenerate += 1
            elif not decision.should_solve:
                state.stats.insufficient_data += 1
            else:
                solved = self._solver.solve(state, decision.rotation)
                if solved is None:
                    state.stats.degenerate += 1
                    logger.debug("Degenerate rotation, skipping update")
                else:
                    angles = state.filters.push(solved)
                    state.latest = angles
                    state.stats.solves += 1

            listeners = list(state.listeners) if angles is not None else []

        if decision.dropped:
            self._unsubscribe(decision.dropped)

        if angles is None:
            return

        yaw, pitch, roll = angles.as_tuple()
        for listener in listeners:
            listener(yaw, pitch, roll)

    # Diagnostics

    @property
    def tier(self) -> SensorTier:
        """Sensor combination currently used for orientation."""
        with self._state.lock:
            return self._state.availability.tier

    @property
    def is_tracking(self) -> bool:
        """Whether the engine is receiving samples."""
        with self._state.lock:
            return self._state.tracking

    @property
    def orientation_mode(self) -> OrientationMode:
        """Current orientation mode."""
        with self._state.lock:
            return self._state.mode

    @property
    def screen_rotation(self) -> ScreenRotation:
        """Screen rotation fixed at construction."""
        return self._solver.screen_rotation

    @property
    def availability(self) -> SourceAvailability:
        """Copy of the source availability flags."""
        with self._state.lock:
            avail = self._state.availability
            return SourceAvailability(
                have_rotation_vector=avail.have_rotation_vector,
                have_gravity=avail.have_gravity,
                have_accelerometer=avail.have_accelerometer,
                have_magnetic=avail.have_magnetic,
            )

    @property
    def stats(self) -> SolveStats:
        """Copy of the sample counters."""
        with self._state.lock:
            return SolveStats(**self._state.stats.to_dict())

    @property
    def latest(self) -> Optional[TiltAngles]:
        """Most recent filtered angles, or None before the first update."""
        with self._state.lock:
            return self._state.latest

    @property
    def smoothing_factor(self) -> float:
        """Smoothing factor currently applied to all three axes."""
        with self._state.lock:
            return self._state.filters.yaw.smoothing_factor
