"""Configuration management for tilt estimation."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional
import logging
import os

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "TILT_SENSOR_CONFIG"


@dataclass
class TrackingConfig:
    """Engine session configuration."""
    screen_rotation: int = 0
    orientation_mode: str = "absolute"
    sampling_period_us: int = 20000


@dataclass
class FilterConfig:
    """Smoothing filter configuration.

    Factors are in (0, 1]; closer to 0 means more inertia.
    """
    kind: str = "exponential"
    low_accuracy_factor: float = 0.05
    high_accuracy_factor: float = 0.8
    window_size: int = 10


@dataclass
class ValidationConfig:
    """Degenerate-geometry thresholds for gravity / magnetic solving."""
    free_fall_gravity_ratio: float = 0.1
    min_horizontal_field: float = 0.1


@dataclass
class SimulationConfig:
    """Synthetic sensor host configuration."""
    kinds: List[str] = field(default_factory=lambda: [
        "rotation_vector", "gravity", "accelerometer", "magnetic_field",
    ])
    yaw_deg: float = 0.0
    pitch_deg: float = 0.0
    roll_deg: float = 0.0
    sway_deg: float = 0.0
    sway_period_s: float = 4.0
    noise_std: float = 0.0
    magnetic_field_ut: float = 48.0
    inclination_deg: float = 60.0


@dataclass
class MonitoringConfig:
    """Update-rate monitoring configuration."""
    window_size: int = 200
    log_interval_s: float = 10.0


@dataclass
class OutputConfig:
    """Command line output configuration."""
    emit_rate_hz: int = 10


@dataclass
class Config:
    """Complete configuration for tilt estimation."""
    tracking: TrackingConfig = field(default_factory=TrackingConfig)
    filter: FilterConfig = field(default_factory=FilterConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def load_config(config_path: Optional[str] = None) -> Config:
    """Load configuration from YAML file.

    Args:
        config_path: Path to configuration file. If None, uses the
            TILT_SENSOR_CONFIG environment variable, then the packaged
            default.

    Returns:
        Configuration object with all settings.

    Raises:
        FileNotFoundError: If specified config file doesn't exist.
    """
    if config_path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            config_path = env_path
        else:
            default_path = Path(__file__).parent.parent / "config" / "default.yaml"
            if default_path.exists():
                config_path = str(default_path)
            else:
                return Config()

    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return Config()

    return _build_config(data)


def _build_config(data: dict) -> Config:
    """Build Config object from dictionary.

    Raises:
        TypeError: If the document is not a mapping.
    """
    if not isinstance(data, dict):
        raise TypeError(f"Configuration must be a mapping, got {type(data).__name__}")
    return _dict_to_dataclass(data, Config)


def _dict_to_dataclass(data: dict, cls: type) -> object:
    """Recursively convert dictionary to dataclass.

    Sections left empty keep their defaults; unknown keys are skipped
    with a warning.
    """
    field_types = {f.name: f.type for f in cls.__dataclass_fields__.values()}
    kwargs = {}

    for key, value in data.items():
        if key not in field_types:
            logger.warning("Ignoring unknown %s key: %s", cls.__name__, key)
            continue
        field_type = field_types[key]
        if hasattr(field_type, "__dataclass_fields__"):
            if value is None:
                continue
            if not isinstance(value, dict):
                raise TypeError(f"Section '{key}' must be a mapping, got {type(value).__name__}")
            kwargs[key] = _dict_to_dataclass(value, field_type)
        else:
            kwargs[key] = value

    return cls(**kwargs)
