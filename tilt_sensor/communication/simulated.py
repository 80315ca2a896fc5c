"""Simulated sensor host for development and tests.

Generates synthetic motion sensor samples for a configurable device
attitude without hardware.
"""

import logging
import threading
import time
from typing import Dict, Optional, Set, Tuple
import numpy as np
from numpy.typing import NDArray

from ..core.config import Config
from ..core.quaternion import QuaternionOps
from ..core.rotation import STANDARD_GRAVITY
from ..core.types import RawSample, SensorKind, TiltAngles
from .host import SampleCallback, SensorHostError

logger = logging.getLogger(__name__)

DEFAULT_PERIOD_US = 20000


class SimulatedSensorHost:
    """Sensor host producing samples for a (slowly swaying) attitude.

    Samples are delivered either on a background thread between
    start() and stop(), or synchronously through emit(). Kinds missing
    from the configuration behave like sensors the device lacks.
    """

    def __init__(self, config: Config, seed: Optional[int] = None):
        """Initialize simulated host.

        Args:
            config: System configuration with simulation settings.
            seed: Seed for the noise generator.
        """
        self._config = config
        self._sim = config.simulation
        self._kinds: Set[SensorKind] = {SensorKind(k) for k in self._sim.kinds}
        self._rng = np.random.default_rng(seed)

        self._subscriptions: Dict[SensorKind, Tuple[SampleCallback, int]] = {}
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._start_time = 0.0
        self._samples_emitted = 0

        incl = np.radians(self._sim.inclination_deg)
        self._world_field = self._sim.magnetic_field_ut * np.array(
            [0.0, np.cos(incl), -np.sin(incl)]
        )

    # SensorHost interface

    def subscribe(self, kind: SensorKind, callback: SampleCallback, sampling_period_us: int) -> bool:
        """Register a callback for one sensor kind."""
        if kind not in self._kinds:
            return False
        with self._lock:
            self._subscriptions[kind] = (callback, sampling_period_us)
        logger.debug("Subscribed to %s at %d us", kind.value, sampling_period_us)
        return True

    def unsubscribe(self, kind: SensorKind, callback: SampleCallback) -> None:
        """Remove the callback for one sensor kind."""
        with self._lock:
            current = self._subscriptions.get(kind)
            if current is not None and current[0] == callback:
                del self._subscriptions[kind]

    @property
    def subscribed(self) -> Set[SensorKind]:
        """Kinds with an active subscription."""
        with self._lock:
            return set(self._subscriptions)

    @property
    def samples_emitted(self) -> int:
        """Number of samples delivered so far."""
        with self._lock:
            return self._samples_emitted

    # Sample synthesis

    def attitude(self, t: float) -> TiltAngles:
        """Device attitude t seconds after start."""
        sway = 0.0
        if self._sim.sway_deg and self._sim.sway_period_s > 0:
            sway = self._sim.sway_deg * np.sin(2.0 * np.pi * t / self._sim.sway_period_s)
        return TiltAngles(
            yaw=self._sim.yaw_deg + float(sway),
            pitch=self._sim.pitch_deg,
            roll=self._sim.roll_deg,
        )

    def sample_for(self, kind: SensorKind, attitude: TiltAngles) -> RawSample:
        """Synthesize the reading a sensor would give at an attitude.

        Noise is Gaussian with a standard deviation relative to the
        magnitude of each reading.

        Args:
            kind: Sensor kind to synthesize.
            attitude: Device attitude in the natural orientation.

        Returns:
            Raw sample as the host would deliver it.
        """
        q = QuaternionOps.from_tilt(attitude)
        noise = self._sim.noise_std

        if kind is SensorKind.ROTATION_VECTOR:
            arr = q.to_array()
            if noise:
                arr = arr + self._rng.normal(0.0, noise * 0.1, 4)
                arr = arr / np.linalg.norm(arr)
            if arr[0] < 0:
                arr = -arr
            values = (arr[1], arr[2], arr[3], arr[0])
        else:
            R = QuaternionOps.to_rotation_matrix(q)
            if kind is SensorKind.MAGNETIC_FIELD:
                world = self._world_field
            else:
                world = np.array([0.0, 0.0, STANDARD_GRAVITY])
            values = tuple(self._noisy(R.T @ world, noise))

        return RawSample(
            kind=kind,
            values=tuple(float(v) for v in values),
            timestamp=time.time(),
        )

    def _noisy(self, vector: NDArray[np.float64], noise: float) -> NDArray[np.float64]:
        if not noise:
            return vector
        return vector + self._rng.normal(0.0, noise * np.linalg.norm(vector), 3)

    def emit(self, kind: SensorKind, attitude: Optional[TiltAngles] = None) -> bool:
        """Deliver one sample synchronously to the subscriber of kind.

        Args:
            kind: Sensor kind to emit.
            attitude: Attitude to synthesize; defaults to the
                configured attitude without sway.

        Returns:
            True if a subscriber received the sample.
        """
        with self._lock:
            subscription = self._subscriptions.get(kind)
        if subscription is None:
            return False

        if attitude is None:
            attitude = self.attitude(0.0)
        subscription[0](self.sample_for(kind, attitude))
        with self._lock:
            self._samples_emitted += 1
        return True

    # Background delivery

    def start(self) -> None:
        """Start delivering samples on a background thread.

        Raises:
            SensorHostError: If already started.
        """
        if self._thread is not None:
            raise SensorHostError("Simulated host already running")

        self._stop_event.clear()
        self._start_time = time.monotonic()
        self._thread = threading.Thread(
            target=self._run, name="simulated-sensor-host", daemon=True
        )
        self._thread.start()
        logger.info("Simulated sensor host started: %s",
                    sorted(k.value for k in self._kinds))

    def stop(self, timeout_s: float = 1.0) -> None:
        """Stop the background thread."""
        if self._thread is None:
            return
        self._stop_event.set()
        self._thread.join(timeout=timeout_s)
        self._thread = None
        logger.info("Simulated sensor host stopped after %d samples", self.samples_emitted)

    def _run(self) -> None:
        while not self._stop_event.is_set():
            with self._lock:
                subscriptions = list(self._subscriptions.items())

            period_us = min(
                (period for _, (_, period) in subscriptions),
                default=DEFAULT_PERIOD_US,
            )

            attitude = self.attitude(time.monotonic() - self._start_time)
            for kind, (callback, _) in subscriptions:
                callback(self.sample_for(kind, attitude))
                with self._lock:
                    self._samples_emitted += 1

            self._stop_event.wait(period_us / 1e6)

    def __enter__(self) -> "SimulatedSensorHost":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
