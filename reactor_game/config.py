"""
Reactor Game Configuration

Dataclass configuration for the reactor physics model and the game driver.
Every tunable constant of the simulation lives here so that a round can be
replayed from a YAML file. Defaults reproduce the arcade tuning exactly.
"""

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from dataclass_wizard import YAMLWizard

from reactor_game.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

HIGH_SCORE_KEY = "reactorHighScore"


@dataclass
class ReactorConfig(YAMLWizard):
    """
    Reactor physics configuration

    Rod position drives the acceleration of power, power sets the
    equilibrium temperature, and temperature sets the scoring rate.
    """

    # === INITIAL CONDITIONS ===
    initial_rod_position: float = 50.0              # % withdrawn
    initial_power: float = 50.0                     # % power
    initial_power_velocity: float = 0.0             # %/s
    initial_temperature: float = 400.0              # °C

    # === CONTROL RODS ===
    rod_min: float = 0.0                            # fully inserted
    rod_max: float = 100.0                          # fully withdrawn
    rod_center: float = 50.0                        # zero acceleration position
    rod_acceleration_gain: float = 0.4              # power accel per % off center
    rod_gravity: float = 10.0                       # %/s rods fall when not held
    rod_step: float = 0.25                          # % per adjust_rod call

    # === POWER DYNAMICS ===
    velocity_damping: float = 0.995                 # applied once per update call
    power_response: float = 2.5                     # power change per unit velocity
    power_min: float = 0.0
    power_max: float = 150.0

    # === THERMAL MODEL ===
    ambient_temperature: float = 300.0              # °C floor, zero-score line
    temperature_per_power: float = 7.0              # °C per % power at equilibrium
    thermal_lag: float = 0.5                        # 1/s approach rate to target
    low_power_threshold: float = 20.0               # % below which extra cooling applies
    low_power_cooling: float = 0.5                  # °C/s per % below threshold

    # === TERMINAL CONDITIONS ===
    meltdown_temperature: float = 1000.0            # °C
    stall_grace_period: float = 2.0                 # s before a stall can trigger

    # === SCORING ===
    score_exponent: float = 3.0
    score_multiplier: float = 100.0
    score_rate: float = 10.0

    # Optional clamp on a single update step; None applies dt as given
    max_dt: Optional[float] = None

    def __post_init__(self):
        """Validate configuration parameters"""
        self._validate_parameters()

    def _validate_parameters(self):
        errors = []

        if self.rod_min >= self.rod_max:
            errors.append("Rod range is empty (rod_min must be below rod_max)")
        elif not (self.rod_min <= self.initial_rod_position <= self.rod_max):
            errors.append(f"Initial rod position {self.initial_rod_position} outside "
                          f"[{self.rod_min}, {self.rod_max}]")

        if self.power_min >= self.power_max:
            errors.append("Power range is empty (power_min must be below power_max)")
        elif not (self.power_min <= self.initial_power <= self.power_max):
            errors.append(f"Initial power {self.initial_power} outside "
                          f"[{self.power_min}, {self.power_max}]")

        if self.initial_temperature < self.ambient_temperature:
            errors.append("Initial temperature must not be below ambient temperature")

        if self.meltdown_temperature <= self.ambient_temperature:
            errors.append("Meltdown temperature must be above ambient temperature")

        if not (0.0 < self.velocity_damping <= 1.0):
            errors.append("Velocity damping must be in (0, 1]")

        for name in ("rod_gravity", "rod_step", "thermal_lag", "low_power_cooling",
                     "stall_grace_period", "score_rate", "score_multiplier"):
            if getattr(self, name) < 0:
                errors.append(f"{name} must not be negative")

        if self.max_dt is not None and not (self.max_dt > 0 and math.isfinite(self.max_dt)):
            errors.append("max_dt must be a positive number when set")

        if errors:
            raise ConfigurationError(errors)

    @property
    def temperature_span(self) -> float:
        """Temperature range between the ambient floor and meltdown"""
        return self.meltdown_temperature - self.ambient_temperature


@dataclass
class GameConfig(YAMLWizard):
    """
    Game driver configuration

    Holds the physics configuration plus the settings used by the driver
    loop: high score persistence and the thresholds of the status display.
    """

    reactor: ReactorConfig = field(default_factory=ReactorConfig)

    # === HIGH SCORE ===
    high_score_file: Optional[str] = None           # None keeps the record in memory
    high_score_key: str = HIGH_SCORE_KEY

    # === DISPLAY THRESHOLDS ===
    warning_temperature: float = 700.0              # °C
    danger_temperature: float = 900.0               # °C
    low_power_warning: float = 10.0                 # %
    velocity_full_scale: float = 50.0               # %/s at full gauge deflection

    # Optional clamp on the frame time fed to the simulation
    max_frame_dt: Optional[float] = None

    def __post_init__(self):
        errors: List[str] = []

        if self.warning_temperature >= self.danger_temperature:
            errors.append("Warning temperature must be below danger temperature")
        if self.velocity_full_scale <= 0:
            errors.append("Velocity full scale must be positive")
        if not self.high_score_key:
            errors.append("High score key must not be empty")
        if self.max_frame_dt is not None and self.max_frame_dt <= 0:
            errors.append("max_frame_dt must be positive when set")

        if errors:
            raise ConfigurationError(errors)


def load_config(path: Union[str, Path, None] = None) -> GameConfig:
    """
    Load a game configuration

    Args:
        path: YAML file to read; None returns the defaults

    Returns:
        GameConfig instance
    """
    if path is None:
        return GameConfig()

    path = Path(path)
    if not path.exists():
        raise ConfigurationError([f"Configuration file not found: {path}"])

    logger.debug(f"Loading configuration from {path}")
    return GameConfig.from_yaml_file(str(path))


def save_config(config: GameConfig, path: Union[str, Path]) -> Path:
    """Write a configuration to a YAML file, returning the path written"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    config.to_yaml_file(str(path))
    logger.info(f"Configuration written to {path}")
    return path
