"""Ring-buffer moving average filter."""

import numpy as np

from .base import check_smoothing_factor


class MovingAverageFilter:
    """Moving average over a fixed number of exponentially-updated slots.

    Each push moves the oldest buffer slot toward the new value by the
    smoothing factor, then advances the circular index. The output is
    the mean of the buffer, kept as a running sum. With a factor of 1
    this is a plain N-sample moving average.
    """

    def __init__(
        self,
        window_size: int,
        smoothing_factor: float = 1.0,
        initial_value: float = 0.0,
    ):
        """Initialize filter.

        Args:
            window_size: Number of samples in the ring buffer.
            smoothing_factor: 0-1 factor applied to each slot update.
            initial_value: Value the buffer is filled with.

        Raises:
            ValueError: If window_size < 1 or the factor is out of range.
        """
        if window_size < 1:
            raise ValueError(f"Window size must be at least 1, got {window_size}")

        self._factor = check_smoothing_factor(smoothing_factor)
        self._buffer = np.zeros(int(window_size), dtype=np.float64)
        self._sum = 0.0
        self._index = 0
        self._value = 0.0
        self.reset(initial_value)

    @property
    def window_size(self) -> int:
        """Number of slots in the ring buffer."""
        return len(self._buffer)

    @property
    def smoothing_factor(self) -> float:
        """Current smoothing factor."""
        return self._factor

    @smoothing_factor.setter
    def smoothing_factor(self, factor: float) -> None:
        self._factor = check_smoothing_factor(factor)

    def reset(self, value: float) -> None:
        """Fill the buffer with value."""
        value = float(value)
        self._buffer.fill(value)
        self._sum = value * len(self._buffer)
        self._index = 0
        self._value = value

    def push(self, value: float) -> float:
        """Push new sample and return the buffer mean."""
        oldest = self._buffer[self._index]
        filtered = oldest + self._factor * (value - oldest)

        self._sum += filtered - oldest
        self._buffer[self._index] = filtered
        self._index = (self._index + 1) % len(self._buffer)

        self._value = self._sum / len(self._buffer)
        return self._value

    def get(self) -> float:
        """Latest buffer mean."""
        return self._value

    def __repr__(self) -> str:
        return (
            f"MovingAverageFilter(window={len(self._buffer)}, "
            f"factor={self._factor}, value={self._value:.4f})"
        )
