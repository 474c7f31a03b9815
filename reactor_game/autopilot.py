"""
Scripted operator for unattended rounds.

Steers power toward the equilibrium power of a target temperature, using
the current power velocity to anticipate overshoot, and banks the score
when a points goal is met or the core drifts too close to either limit.
"""

import logging
from typing import Callable, Optional

from reactor_game.config import ReactorConfig
from reactor_game.exceptions import InvalidTimeStepError
from reactor_game.game import ReactorGame, RoundResult
from reactor_game.reactor import ReactorState, RodDirection

logger = logging.getLogger(__name__)


class AutoOperator:
    """Bang-bang rod controller with velocity lookahead"""

    def __init__(self, config: Optional[ReactorConfig] = None,
                 target_temperature: float = 850.0,
                 bank_at_points: Optional[float] = None,
                 deadband: float = 2.0,
                 velocity_lookahead: float = 1.5,
                 meltdown_margin: float = 40.0,
                 stall_margin: float = 10.0):
        """
        Args:
            config: Physics constants the operator plans with
            target_temperature: Core temperature to hold, °C
            bank_at_points: Bank as soon as this many points are earned
            deadband: Power error (%) tolerated before moving rods
            velocity_lookahead: Seconds of power velocity added to the prediction
            meltdown_margin: Bank when this close to meltdown, °C
            stall_margin: Bank when this close to the ambient floor, °C
        """
        self.config = config or ReactorConfig()
        self.target_temperature = target_temperature
        self.bank_at_points = bank_at_points
        self.deadband = deadband
        self.velocity_lookahead = velocity_lookahead
        self.meltdown_margin = meltdown_margin
        self.stall_margin = stall_margin

    @property
    def target_power(self) -> float:
        cfg = self.config
        return (self.target_temperature - cfg.ambient_temperature) / cfg.temperature_per_power

    def decide(self, state: ReactorState) -> RodDirection:
        """Rod command for the next frame"""
        predicted = (state.power
                     + state.power_velocity * self.config.power_response * self.velocity_lookahead)
        error = self.target_power - predicted

        if error > self.deadband:
            return RodDirection.WITHDRAW
        if error < -self.deadband:
            return RodDirection.INSERT
        return RodDirection.HOLD

    def should_bank(self, state: ReactorState) -> bool:
        cfg = self.config
        if self.bank_at_points is not None and state.points >= self.bank_at_points:
            return True
        if state.temperature >= cfg.meltdown_temperature - self.meltdown_margin:
            return True
        return (state.time_running > cfg.stall_grace_period
                and state.temperature <= cfg.ambient_temperature + self.stall_margin)


def play_round(game: ReactorGame, operator: AutoOperator, dt: float = 1 / 60,
               max_time: float = 120.0,
               on_frame: Optional[Callable[[ReactorGame], None]] = None) -> Optional[RoundResult]:
    """
    Play the current round to its end

    Args:
        game: Game whose current round is played
        operator: Policy choosing rod commands and when to bank
        dt: Fixed frame time in seconds
        max_time: Bank once this much frame time has elapsed
        on_frame: Called after every frame, e.g. to refresh a display

    Returns:
        Result of the round
    """
    if not dt > 0:
        raise InvalidTimeStepError(dt)

    elapsed = 0.0
    while not game.game_over:
        state = game.state
        if elapsed >= max_time or operator.should_bank(state):
            logger.debug(f"Autopilot banking at {state.temperature:.1f}°C, {state.points:.1f} points")
            game.trigger_az5()
            break

        game.release_all()
        game.hold_rods(operator.decide(state))
        game.step(dt)
        elapsed += dt

        if on_frame is not None:
            on_frame(game)

    return game.last_result
