"""
Reactor Control Arcade Game

A real-time arcade game built on a simplified reactor control loop: hold
the control rods against gravity to keep power up, let the core run hot to
earn points faster, and hit AZ-5 to bank the score before a meltdown or a
stall ends the round.

This library provides:
- The reactor simulation state machine
- A game driver with held-input handling, banking and high scores
- YAML configuration of every physics constant
- A scripted autopilot and a rich terminal display

Example:
    >>> from reactor_game import ReactorGame, RodDirection
    >>> game = ReactorGame()
    >>> game.hold_rods(RodDirection.WITHDRAW)
    >>> state = game.step(1 / 60)
    >>> result = game.trigger_az5()
    >>> print(result.score_text)
"""

__version__ = "1.0.0"
__author__ = "Nuclear Sim Team"

from reactor_game.config import GameConfig, ReactorConfig, load_config, save_config
from reactor_game.reactor import ReactorPhase, ReactorSimulation, ReactorState, RodDirection
from reactor_game.high_score import (
    HighScoreStore,
    InMemoryHighScoreStore,
    JsonFileHighScoreStore,
)
from reactor_game.game import (
    GaugeReadings,
    ReactorGame,
    ReactorStatus,
    RoundOutcome,
    RoundResult,
)
from reactor_game.autopilot import AutoOperator, play_round
from reactor_game.exceptions import (
    ReactorGameError,
    InvalidTimeStepError,
    ConfigurationError,
    HighScoreStoreError,
)

__all__ = [
    'ReactorSimulation',
    'ReactorState',
    'ReactorPhase',
    'RodDirection',
    'ReactorConfig',
    'GameConfig',
    'load_config',
    'save_config',
    'HighScoreStore',
    'InMemoryHighScoreStore',
    'JsonFileHighScoreStore',
    'ReactorGame',
    'ReactorStatus',
    'RoundOutcome',
    'RoundResult',
    'GaugeReadings',
    'AutoOperator',
    'play_round',
    'ReactorGameError',
    'InvalidTimeStepError',
    'ConfigurationError',
    'HighScoreStoreError',
]
