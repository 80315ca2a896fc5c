"""Smoothing filter contract for per-axis tilt values."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Filter(Protocol):
    """A discrete-time filter for raw sensor values."""

    smoothing_factor: float

    def push(self, value: float) -> float:
        """Update filter with the latest value and return the filtered value."""
        ...

    def reset(self, value: float) -> None:
        """Reset filter to the given value."""
        ...

    def get(self) -> float:
        """Latest filtered value."""
        ...


def check_smoothing_factor(factor: float) -> float:
    """Validate a smoothing factor.

    Raises:
        ValueError: If factor is not in (0, 1].
    """
    factor = float(factor)
    if not 0.0 < factor <= 1.0:
        raise ValueError(f"Smoothing factor must be in (0, 1], got {factor}")
    return factor
