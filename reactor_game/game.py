"""
Reactor Game Engine

This module wraps the reactor simulation in a playable round: held rod
input is applied every frame, terminal phases end the round, an AZ-5
emergency shutdown banks the score, and the high score is kept through an
injected store.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

import numpy as np

from reactor_game.config import GameConfig
from reactor_game.exceptions import HighScoreStoreError
from reactor_game.high_score import HighScoreStore, create_store
from reactor_game.reactor import ReactorPhase, ReactorSimulation, ReactorState, RodDirection

logger = logging.getLogger(__name__)


class RoundOutcome(Enum):
    """How a round ended"""
    BANKED = "banked"
    MELTDOWN = "meltdown"
    STALL = "stall"

    @property
    def success(self) -> bool:
        return self is RoundOutcome.BANKED


class ReactorStatus(Enum):
    """Status line shown above the gauges"""
    NOMINAL = "REACTOR NOMINAL"
    HIGH_TEMPERATURE = "⚠ HIGH TEMPERATURE ⚠"
    CRITICAL_TEMPERATURE = "⚠ CRITICAL TEMPERATURE ⚠"
    LOW_POWER = "⚠ LOW POWER WARNING ⚠"

    @property
    def severity(self) -> str:
        if self is ReactorStatus.CRITICAL_TEMPERATURE:
            return "danger"
        if self is ReactorStatus.NOMINAL:
            return "normal"
        return "warning"


@dataclass
class RoundResult:
    """Final result of one round"""
    outcome: RoundOutcome
    title: str
    message: str
    final_score: int
    time_running: float
    new_high_score: bool = False

    @property
    def score_text(self) -> str:
        if self.outcome.success:
            return f"Points Banked: {self.final_score}"
        return "You lost all your points"


@dataclass
class GaugeReadings:
    """Gauge values derived from the reactor state, in display percent"""
    power_bar: float           # 0-100
    temperature_bar: float     # 0-100, one percent per 10 °C
    velocity_bar: float        # -50..50, signed half-width from center
    rod_insertion: float       # 0 = rods out, 100 = rods fully in
    core_glow: float           # power / 100
    temperature_band: str      # normal, warning or danger


class ReactorGame:
    """Game driver around a ReactorSimulation"""

    def __init__(self, config: Optional[GameConfig] = None,
                 store: Optional[HighScoreStore] = None):
        """
        Initialize the game

        Args:
            config: Game configuration (defaults when omitted)
            store: High score store; built from config.high_score_file when omitted
        """
        self.config = config or GameConfig()
        self.store = store or create_store(self.config.high_score_file, self.config.high_score_key)
        self.simulation = ReactorSimulation(self.config.reactor)

        self.high_score = self.store.load()
        self.game_over = False
        self.last_result: Optional[RoundResult] = None
        self.rounds: List[RoundResult] = []
        self._held = {RodDirection.WITHDRAW: False, RodDirection.INSERT: False}

        logger.debug(f"Game started with high score {self.high_score}")

    @property
    def state(self) -> ReactorState:
        return self.simulation.state

    def hold_rods(self, direction: RodDirection, held: bool = True) -> None:
        """Press or release a rod control"""
        if direction is RodDirection.HOLD:
            return
        self._held[direction] = held

    def release_all(self) -> None:
        for direction in self._held:
            self._held[direction] = False

    def held_directions(self) -> List[RodDirection]:
        return [d for d in (RodDirection.WITHDRAW, RodDirection.INSERT) if self._held[d]]

    def handle_input(self) -> None:
        """Apply held controls, at most one rod step per direction per frame"""
        for direction in self.held_directions():
            self.simulation.adjust_rod(direction)

    def step(self, dt: float) -> ReactorState:
        """
        Advance one frame

        Args:
            dt: Frame time in seconds

        Returns:
            Reactor state after the frame
        """
        if self.game_over:
            return self.state

        max_dt = self.config.max_frame_dt
        if max_dt is not None and dt > max_dt:
            dt = max_dt

        self.handle_input()
        self.simulation.update(dt)

        phase = self.simulation.phase
        if phase is ReactorPhase.CRITICAL:
            limit = self.config.reactor.meltdown_temperature
            self._end_round(RoundOutcome.MELTDOWN, "MELTDOWN",
                            f"Core temperature exceeded {limit:.0f}°C", 0)
        elif phase is ReactorPhase.STALLED:
            self._end_round(RoundOutcome.STALL, "MELTDOWN",
                            "Reactor stalled - power dropped too low", 0)

        return self.state

    def trigger_az5(self) -> Optional[RoundResult]:
        """
        Emergency shutdown, banking the points earned so far

        Returns:
            The round result, or None if the round was already over
        """
        if self.game_over:
            return None

        self.simulation.emergency_shutdown()
        final_score = math.floor(self.state.points)
        return self._end_round(RoundOutcome.BANKED, "SHUTDOWN COMPLETE", "SAFE SHUTDOWN", final_score)

    def _end_round(self, outcome: RoundOutcome, title: str, message: str, final_score: int) -> RoundResult:
        self.game_over = True

        new_record = outcome.success and final_score > self.high_score
        result = RoundResult(
            outcome=outcome,
            title=title,
            message=message,
            final_score=final_score,
            time_running=self.state.time_running,
            new_high_score=new_record,
        )
        self.last_result = result
        self.rounds.append(result)
        logger.info(f"Round over ({outcome.value}): {message}, score {final_score}")

        if new_record:
            self.high_score = final_score
            try:
                self.store.save(final_score)
            except HighScoreStoreError as e:
                logger.warning(f"New high score {final_score} kept for this session only: {e}")
            else:
                logger.info(f"New high score: {final_score}")

        return result

    def restart(self) -> None:
        """Start a new round, keeping the high score and round history"""
        self.simulation.reset()
        self.release_all()
        self.game_over = False
        self.last_result = None

    def status(self) -> ReactorStatus:
        """Status line for the current state, hottest condition first"""
        s = self.state
        if s.temperature > self.config.danger_temperature:
            return ReactorStatus.CRITICAL_TEMPERATURE
        if s.temperature > self.config.warning_temperature:
            return ReactorStatus.HIGH_TEMPERATURE
        if s.power < self.config.low_power_warning:
            return ReactorStatus.LOW_POWER
        return ReactorStatus.NOMINAL

    def readings(self) -> GaugeReadings:
        s = self.state
        cfg = self.config

        velocity = min(abs(s.power_velocity) / cfg.velocity_full_scale, 1.0) * 50.0
        if s.temperature > cfg.danger_temperature:
            band = "danger"
        elif s.temperature > cfg.warning_temperature:
            band = "warning"
        else:
            band = "normal"

        return GaugeReadings(
            power_bar=min(s.power, 100.0),
            temperature_bar=min(s.temperature / 10.0, 100.0),
            velocity_bar=velocity if s.power_velocity >= 0 else -velocity,
            rod_insertion=100.0 - s.rod_position,
            core_glow=s.power / 100.0,
            temperature_band=band,
        )

    def session_summary(self) -> Dict[str, Any]:
        """Summary over all finished rounds"""
        scores = np.array([r.final_score for r in self.rounds], dtype=float)
        banked = [r for r in self.rounds if r.outcome.success]
        return {
            'rounds_played': len(self.rounds),
            'rounds_banked': len(banked),
            'meltdowns': sum(1 for r in self.rounds if r.outcome is RoundOutcome.MELTDOWN),
            'stalls': sum(1 for r in self.rounds if r.outcome is RoundOutcome.STALL),
            'best_score': int(scores.max()) if scores.size else 0,
            'average_score': float(np.mean(scores)) if scores.size else 0.0,
            'total_time': float(sum(r.time_running for r in self.rounds)),
            'high_score': self.high_score,
        }
