"""Construction of the configured filter variant."""

from ..core.config import FilterConfig
from .base import Filter
from .exponential import ExponentialSmoothingFilter
from .moving_average import MovingAverageFilter

FILTER_KINDS = ("exponential", "moving_average")


def create_filter(config: FilterConfig, factor: float, initial_value: float = 0.0) -> Filter:
    """Create a filter of the configured kind.

    Args:
        config: Filter configuration.
        factor: Smoothing factor for the new filter.
        initial_value: Starting value.

    Returns:
        New filter instance.

    Raises:
        ValueError: If the configured kind is unknown.
    """
    if config.kind == "exponential":
        return ExponentialSmoothingFilter(factor, initial_value)
    if config.kind == "moving_average":
        return MovingAverageFilter(config.window_size, factor, initial_value)
    raise ValueError(
        f"Unknown filter kind: {config.kind!r} (expected one of {FILTER_KINDS})"
    )
