"""Update-rate and smoothness monitoring for tilt listeners."""

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Optional
import numpy as np

from ..core.config import Config
from ..core.types import TiltAngles

logger = logging.getLogger(__name__)


@dataclass
class UpdateStats:
    """Aggregated listener update statistics."""
    mean_dt_ms: float
    std_dt_ms: float
    max_dt_ms: float
    min_dt_ms: float
    effective_rate_hz: float
    max_step_deg: float
    total_updates: int

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "rate_hz": self.effective_rate_hz,
            "dt_mean_ms": self.mean_dt_ms,
            "dt_std_ms": self.std_dt_ms,
            "max_step_deg": self.max_step_deg,
            "updates": self.total_updates,
        }


class UpdateMonitor:
    """Tilt listener that tracks update timing and step size.

    Register an instance with TiltSensor.add_listener(). It records
    the interval between updates and the largest per-update change of
    any axis, and logs a summary periodically.
    """

    def __init__(self, config: Config, clock: Callable[[], float] = time.perf_counter):
        """Initialize update monitor.

        Args:
            config: System configuration with monitoring settings.
            clock: Time source in seconds.
        """
        self._mon_cfg = config.monitoring
        self._clock = clock
        self._lock = threading.Lock()

        self._dt_history: Deque[float] = deque(maxlen=self._mon_cfg.window_size)
        self._updates = 0
        self._max_step = 0.0
        self._last_time: Optional[float] = None
        self._last_angles: Optional[TiltAngles] = None
        self._last_log_time = self._clock()

    def __call__(self, yaw: float, pitch: float, roll: float) -> None:
        """Record one listener update."""
        now = self._clock()
        angles = TiltAngles(yaw=yaw, pitch=pitch, roll=roll)

        with self._lock:
            if self._last_time is not None:
                self._dt_history.append((now - self._last_time) * 1000.0)
            if self._last_angles is not None:
                step = max(abs(a - b) for a, b in zip(angles.as_tuple(), self._last_angles.as_tuple()))
                self._max_step = max(self._max_step, step)

            self._last_time = now
            self._last_angles = angles
            self._updates += 1

        self._maybe_log_stats(now)

    @property
    def latest(self) -> Optional[TiltAngles]:
        """Angles of the most recent update."""
        with self._lock:
            return self._last_angles

    def _maybe_log_stats(self, now: float) -> None:
        """Log statistics periodically."""
        if now - self._last_log_time < self._mon_cfg.log_interval_s:
            return

        stats = self.get_stats()
        logger.info(
            "Updates: rate=%.1f Hz, dt=%.2f+/-%.2f ms, max step=%.2f deg, total=%d",
            stats.effective_rate_hz,
            stats.mean_dt_ms,
            stats.std_dt_ms,
            stats.max_step_deg,
            stats.total_updates,
        )
        self._last_log_time = now

    def get_stats(self) -> UpdateStats:
        """Get aggregated update statistics.

        Returns:
            UpdateStats with current metrics.
        """
        with self._lock:
            dt_array = np.array(self._dt_history)
            updates = self._updates
            max_step = self._max_step

        if dt_array.size == 0:
            return UpdateStats(
                mean_dt_ms=0.0,
                std_dt_ms=0.0,
                max_dt_ms=0.0,
                min_dt_ms=0.0,
                effective_rate_hz=0.0,
                max_step_deg=max_step,
                total_updates=updates,
            )

        mean_dt = float(np.mean(dt_array))
        effective_rate = 1000.0 / mean_dt if mean_dt > 0 else 0.0

        return UpdateStats(
            mean_dt_ms=mean_dt,
            std_dt_ms=float(np.std(dt_array)),
            max_dt_ms=float(np.max(dt_array)),
            min_dt_ms=float(np.min(dt_array)),
            effective_rate_hz=effective_rate,
            max_step_deg=max_step,
            total_updates=updates,
        )

    def reset(self) -> None:
        """Reset all metrics."""
        with self._lock:
            self._dt_history.clear()
            self._updates = 0
            self._max_step = 0.0
            self._last_time = None
            self._last_angles = None
