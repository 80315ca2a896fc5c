"""Exponential smoothing filter."""

from .base import check_smoothing_factor


class ExponentialSmoothingFilter:
    """Exponentially-weighted moving average.

    Analogous to an infinite-impulse-response, single-pole low-pass
    filter.
    """

    def __init__(self, smoothing_factor: float, initial_value: float = 0.0):
        """Initialize filter.

        Args:
            smoothing_factor: 0-1. Calculated as dt / (t + dt), where t is
                the system's time constant and dt the sampling period.
                The closer to 0, the greater the inertia.
            initial_value: Value returned by get() before any push.
        """
        self._factor = check_smoothing_factor(smoothing_factor)
        self._last_value = float(initial_value)

    @property
    def smoothing_factor(self) -> float:
        """Current smoothing factor."""
        return self._factor

    @smoothing_factor.setter
    def smoothing_factor(self, factor: float) -> None:
        self._factor = check_smoothing_factor(factor)

    def reset(self, value: float) -> None:
        """Jump to value with no transient."""
        self._last_value = float(value)

    def push(self, value: float) -> float:
        """Push new sample and return the new smoothed value."""
        self._last_value = self._last_value + self._factor * (value - self._last_value)
        return self._last_value

    def get(self) -> float:
        """Smoothed value."""
        return self._last_value

    def __repr__(self) -> str:
        return (
            f"ExponentialSmoothingFilter(factor={self._factor}, "
            f"value={self._last_value:.4f})"
        )
