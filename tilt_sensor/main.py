#!/usr/bin/env python3
"""Command line runner for the tilt engine.

Runs the engine against the simulated sensor host and outputs
JSON-formatted tilt updates to stdout.
"""

import argparse
import json
import logging
import signal
import sys
import threading
import time
from typing import List, Optional

import yaml

from .communication import SimulatedSensorHost
from .core import Config, load_config
from .fusion import TiltSensor
from .monitoring import UpdateMonitor

logger = logging.getLogger(__name__)

SHUTDOWN_REQUESTED = threading.Event()


def signal_handler(signum, frame):
    """Handle shutdown signals gracefully."""
    SHUTDOWN_REQUESTED.set()
    logger.info("Shutdown requested")


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application.

    Args:
        verbose: If True, set DEBUG level; otherwise INFO.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


class JsonEmitter:
    """Tilt listener printing rate-limited JSON lines."""

    def __init__(self, sensor: TiltSensor, emit_rate_hz: int, stream=None):
        self._sensor = sensor
        self._interval = 1.0 / emit_rate_hz if emit_rate_hz > 0 else 0.0
        self._stream = stream or sys.stdout
        self._last_emit_time = 0.0
        self.emitted = 0

    def __call__(self, yaw: float, pitch: float, roll: float) -> None:
        now = time.monotonic()
        if now - self._last_emit_time < self._interval:
            return
        output = {
            "yaw": round(yaw, 3),
            "pitch": round(pitch, 3),
            "roll": round(roll, 3),
            "tier": self._sensor.tier.value,
        }
        print(json.dumps(output), file=self._stream, flush=True)
        self._last_emit_time = now
        self.emitted += 1


def run_tilt_loop(config: Config, duration_s: Optional[float] = None) -> int:
    """Run the engine on the simulated host until shutdown.

    Args:
        config: System configuration.
        duration_s: Stop after this many seconds; None runs until
            interrupted.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    host = SimulatedSensorHost(config)
    sensor = TiltSensor.from_config(config, host=host)
    monitor = UpdateMonitor(config)
    emitter = JsonEmitter(sensor, config.output.emit_rate_hz)

    sensor.add_listener(monitor)
    sensor.add_listener(emitter)

    start = time.monotonic()
    try:
        sensor.start_tracking(config.tracking.sampling_period_us)
        host.start()
        logger.info("Running tilt estimation (tier=%s)", sensor.tier.value)

        while not SHUTDOWN_REQUESTED.is_set():
            if duration_s is not None and time.monotonic() - start >= duration_s:
                break
            SHUTDOWN_REQUESTED.wait(0.1)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")

    finally:
        host.stop()
        tier = sensor.tier
        sensor.stop_tracking()
        stats = monitor.get_stats()
        solve_stats = sensor.stats

        logger.info("Final statistics:")
        logger.info("  Tier: %s", tier.value)
        logger.info("  Updates: %d (%.1f Hz)", stats.total_updates, stats.effective_rate_hz)
        logger.info("  Samples: %d received, %d ignored, %d degenerate",
                    solve_stats.samples_received,
                    solve_stats.samples_ignored,
                    solve_stats.degenerate)
        logger.info("  Max step: %.2f deg", stats.max_step_deg)

    return 0


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Device tilt estimation on a simulated sensor host"
    )
    parser.add_argument(
        "-c", "--config",
        type=str,
        default=None,
        help="Path to configuration file",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--rotation",
        type=int,
        choices=(0, 90, 180, 270),
        default=None,
        help="Screen rotation in degrees (overrides config)",
    )
    parser.add_argument(
        "--relative",
        action="store_true",
        help="Report tilt relative to the starting orientation",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=None,
        help="Run time in seconds (default: until interrupted)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Application entry point.

    Returns:
        Exit code.
    """
    args = parse_args(argv)

    setup_logging(verbose=args.verbose)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        logger.error("Configuration error: %s", e)
        return 1
    except (TypeError, ValueError, yaml.YAMLError) as e:
        logger.error("Failed to load configuration: %s", e)
        return 1

    if args.rotation is not None:
        config.tracking.screen_rotation = args.rotation
    if args.relative:
        config.tracking.orientation_mode = "relative"

    try:
        return run_tilt_loop(config, duration_s=args.duration)
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
