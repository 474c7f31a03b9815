"""
Reactor Simulation Core

This module implements the reactor control loop played by the game: rod
position accelerates power, power drives temperature through a first-order
lag, and temperature sets the scoring rate. The reactor ends in one of three
terminal phases (meltdown, stall, or voluntary shutdown) and stays there until
it is reset.
"""

import logging
import math
import numbers
from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional, Union

import numpy as np

from reactor_game.config import ReactorConfig
from reactor_game.exceptions import InvalidTimeStepError

logger = logging.getLogger(__name__)


class ReactorPhase(Enum):
    """Lifecycle phase of the reactor"""
    RUNNING = "running"
    CRITICAL = "critical"    # meltdown, over temperature
    STALLED = "stalled"      # under temperature after the grace period
    SHUTDOWN = "shutdown"    # voluntary emergency shutdown

    @property
    def is_terminal(self) -> bool:
        return self is not ReactorPhase.RUNNING


class RodDirection(Enum):
    """Discrete rod commands"""
    INSERT = -1
    HOLD = 0
    WITHDRAW = 1


@dataclass
class ReactorState:
    """Reactor state shown to the player"""

    rod_position: float = 50.0     # % withdrawn (0 = fully inserted)
    power: float = 50.0            # % power
    power_velocity: float = 0.0    # %/s
    temperature: float = 400.0     # °C
    points: float = 0.0
    time_running: float = 0.0      # s
    phase: ReactorPhase = ReactorPhase.RUNNING

    @classmethod
    def initial(cls, config: ReactorConfig) -> "ReactorState":
        """Startup configuration described by a reactor config"""
        return cls(
            rod_position=config.initial_rod_position,
            power=config.initial_power,
            power_velocity=config.initial_power_velocity,
            temperature=config.initial_temperature,
        )

    @property
    def is_running(self) -> bool:
        return self.phase is ReactorPhase.RUNNING

    @property
    def is_critical(self) -> bool:
        return self.phase is ReactorPhase.CRITICAL

    @property
    def is_stalled(self) -> bool:
        return self.phase is ReactorPhase.STALLED

    @property
    def is_shutdown(self) -> bool:
        return self.phase is ReactorPhase.SHUTDOWN

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['phase'] = self.phase.value
        return data


class ReactorSimulation:
    """
    Reactor physics and scoring state machine

    Driven by an external loop: call adjust_rod() for held input, then
    update(dt) once per frame, then inspect the phase.
    """

    def __init__(self, config: Optional[ReactorConfig] = None):
        """
        Initialize the reactor in its startup configuration

        Args:
            config: Physics constants; defaults reproduce the arcade tuning
        """
        self.config = config or ReactorConfig()
        self.state = ReactorState.initial(self.config)

    @property
    def phase(self) -> ReactorPhase:
        return self.state.phase

    def reset(self) -> None:
        """Return every field to the startup configuration"""
        self.state = ReactorState.initial(self.config)
        logger.debug("Reactor reset")

    def snapshot(self) -> ReactorState:
        """Independent copy of the current state"""
        return replace(self.state)

    def update(self, dt: float) -> ReactorState:
        """
        Advance the reactor by one step

        Args:
            dt: Elapsed time in seconds, finite and non-negative

        Returns:
            The live reactor state after the step
        """
        s = self.state
        cfg = self.config
        if s.phase.is_terminal:
            return s

        if not (isinstance(dt, numbers.Real) and not isinstance(dt, bool)
                and math.isfinite(dt) and dt >= 0):
            raise InvalidTimeStepError(dt)
        dt = float(dt)

        if cfg.max_dt is not None and dt > cfg.max_dt:
            logger.debug(f"Clamping time step {dt:.3f}s to {cfg.max_dt:.3f}s")
            dt = cfg.max_dt

        # Rods above center accelerate power, below center brake it
        acceleration = (s.rod_position - cfg.rod_center) * cfg.rod_acceleration_gain
        s.power_velocity += acceleration * dt

        # Rods fall unless held
        s.rod_position = float(np.clip(s.rod_position - cfg.rod_gravity * dt,
                                       cfg.rod_min, cfg.rod_max))

        # Damping is per call, not per second
        s.power_velocity *= cfg.velocity_damping

        s.power = float(np.clip(s.power + s.power_velocity * cfg.power_response * dt,
                                cfg.power_min, cfg.power_max))

        # Temperature lags toward the equilibrium set by power
        target_temp = cfg.ambient_temperature + s.power * cfg.temperature_per_power
        temp_change = (target_temp - s.temperature) * cfg.thermal_lag * dt
        if s.power < cfg.low_power_threshold:
            temp_change -= (cfg.low_power_threshold - s.power) * cfg.low_power_cooling * dt

        s.temperature = max(cfg.ambient_temperature, s.temperature + temp_change)

        # Meltdown is checked before stall
        if s.temperature >= cfg.meltdown_temperature:
            s.phase = ReactorPhase.CRITICAL
            logger.warning(f"Meltdown: core temperature {s.temperature:.1f}°C "
                           f"after {s.time_running:.1f}s")
            return s

        if s.temperature <= cfg.ambient_temperature and s.time_running > cfg.stall_grace_period:
            s.phase = ReactorPhase.STALLED
            logger.warning(f"Stall: core temperature fell to {s.temperature:.1f}°C "
                           f"after {s.time_running:.1f}s")
            return s

        s.points += self.scoring_rate(s.temperature) * dt
        s.time_running += dt
        return s

    def scoring_rate(self, temperature: float) -> float:
        """
        Points per second earned at a given core temperature

        Grows with the cube of the fraction of the way from ambient to
        meltdown, so most of the score is made close to the limit.
        """
        cfg = self.config
        if temperature <= cfg.ambient_temperature:
            return 0.0
        temp_ratio = (temperature - cfg.ambient_temperature) / cfg.temperature_span
        multiplier = temp_ratio ** cfg.score_exponent * cfg.score_multiplier
        return multiplier * cfg.score_rate

    def adjust_rod(self, direction: Union[RodDirection, float]) -> float:
        """
        Move the control rods by one step

        Args:
            direction: RodDirection or a signed scalar (+1 withdraw, -1 insert)

        Returns:
            Rod position after the move
        """
        if isinstance(direction, RodDirection):
            direction = direction.value

        s = self.state
        if s.is_shutdown:
            return s.rod_position

        cfg = self.config
        s.rod_position = float(np.clip(s.rod_position + direction * cfg.rod_step,
                                       cfg.rod_min, cfg.rod_max))
        return s.rod_position

    def emergency_shutdown(self) -> bool:
        """
        AZ-5: drop all rods and stop the reactor, keeping the points earned

        Returns:
            True if the reactor was running and is now shut down
        """
        s = self.state
        if s.phase.is_terminal:
            logger.debug(f"Emergency shutdown ignored, reactor already {s.phase.value}")
            return False

        s.phase = ReactorPhase.SHUTDOWN
        s.rod_position = self.config.rod_min
        s.power_velocity = 0.0
        logger.info(f"Emergency shutdown with {s.points:.1f} points "
                    f"after {s.time_running:.1f}s")
        return True
