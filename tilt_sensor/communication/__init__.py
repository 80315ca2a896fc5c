"""Host sensor subsystem interfaces."""

from .host import SensorHost, SensorHostError, SampleCallback
from .simulated import SimulatedSensorHost

__all__ = ["SensorHost", "SensorHostError", "SampleCallback", "SimulatedSensorHost"]
