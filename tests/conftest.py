"""Pytest fixtures for tilt estimation tests."""

from typing import Callable, List, Tuple
import pytest

from tilt_sensor.communication import SimulatedSensorHost
from tilt_sensor.core.config import Config, FilterConfig
from tilt_sensor.core.types import (
    OrientationMode,
    ScreenRotation,
    SensorKind,
    TiltAngles,
)
from tilt_sensor.fusion import TiltSensor


@pytest.fixture
def config() -> Config:
    """Create default configuration for tests (no noise, no sway)."""
    return Config()


@pytest.fixture
def passthrough_filters() -> FilterConfig:
    """Filter configuration whose filters output the raw solve."""
    return FilterConfig(low_accuracy_factor=1.0, high_accuracy_factor=1.0)


@pytest.fixture
def host(config) -> SimulatedSensorHost:
    """Noise-free simulated host with all sensor kinds."""
    return SimulatedSensorHost(config, seed=42)


@pytest.fixture
def recorder() -> "TiltRecorder":
    """Listener collecting every update."""
    return TiltRecorder()


@pytest.fixture
def make_sensor(host, passthrough_filters) -> Callable[..., TiltSensor]:
    """Factory for a started engine bound to the simulated host.

    Defaults to pass-through filters so the raw solve is observable.
    """
    created: List[TiltSensor] = []

    def _make(
        rotation: ScreenRotation = ScreenRotation.ROTATION_0,
        mode: OrientationMode = OrientationMode.ABSOLUTE,
        filter_config: FilterConfig = None,
        start: bool = True,
    ) -> TiltSensor:
        sensor = TiltSensor(
            rotation,
            mode,
            host=host,
            filter_config=filter_config or passthrough_filters,
        )
        if start:
            sensor.start_tracking(20000)
        created.append(sensor)
        return sensor

    yield _make

    for sensor in created:
        sensor.stop_tracking()


def emit_gravity_magnetic(host: SimulatedSensorHost, attitude: TiltAngles) -> None:
    """Deliver a magnetic then a gravity sample for an attitude."""
    host.emit(SensorKind.MAGNETIC_FIELD, attitude)
    host.emit(SensorKind.GRAVITY, attitude)


def emit_accelerometer_magnetic(host: SimulatedSensorHost, attitude: TiltAngles) -> None:
    """Deliver a magnetic then an accelerometer sample for an attitude."""
    host.emit(SensorKind.MAGNETIC_FIELD, attitude)
    host.emit(SensorKind.ACCELEROMETER, attitude)


class TiltRecorder:
    """Listener storing (yaw, pitch, roll) updates."""

    def __init__(self):
        self.updates: List[Tuple[float, float, float]] = []

    def __call__(self, yaw: float, pitch: float, roll: float) -> None:
        self.updates.append((yaw, pitch, roll))

    @property
    def last(self) -> Tuple[float, float, float]:
        return self.updates[-1]
