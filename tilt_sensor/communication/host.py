"""Interface to the host sensor subsystem."""

from typing import Callable, Protocol

from ..core.types import RawSample, SensorKind

SampleCallback = Callable[[RawSample], None]


class SensorHostError(Exception):
    """Base exception for sensor host failures."""
    pass


class SensorHost(Protocol):
    """Push-based source of raw motion sensor samples.

    Callbacks may be invoked on a thread other than the one that
    subscribed.
    """

    def subscribe(
        self,
        kind: SensorKind,
        callback: SampleCallback,
        sampling_period_us: int,
    ) -> bool:
        """Start delivering samples of one kind.

        Returns:
            False if the device has no sensor of this kind.
        """
        ...

    def unsubscribe(self, kind: SensorKind, callback: SampleCallback) -> None:
        """Stop delivering samples of one kind. No-op if not subscribed."""
        ...
