"""Smoothing filters for tilt angles."""

from .base import Filter, check_smoothing_factor
from .exponential import ExponentialSmoothingFilter
from .moving_average import MovingAverageFilter
from .factory import create_filter, FILTER_KINDS

__all__ = [
    "Filter",
    "check_smoothing_factor",
    "ExponentialSmoothingFilter",
    "MovingAverageFilter",
    "create_filter",
    "FILTER_KINDS",
]
