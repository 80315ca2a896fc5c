"""Update monitoring module for tilt listeners."""

from .metrics import UpdateMonitor, UpdateStats

__all__ = ["UpdateMonitor", "UpdateStats"]
