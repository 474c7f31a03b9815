"""
Unit tests for the scripted operator.
"""

import pytest

from reactor_game.autopilot import AutoOperator, play_round
from reactor_game.exceptions import InvalidTimeStepError
from reactor_game.game import ReactorGame, RoundOutcome
from reactor_game.high_score import InMemoryHighScoreStore
from reactor_game.reactor import ReactorState, RodDirection


class TestAutoOperator:
    """Rod decisions and banking."""

    def test_target_power(self):
        operator = AutoOperator(target_temperature=650.0)
        assert operator.target_power == pytest.approx(50.0)

    def test_decisions(self):
        """Test the operator steers power toward the target."""
        operator = AutoOperator(target_temperature=650.0)
        assert operator.decide(ReactorState(power=30.0)) is RodDirection.WITHDRAW
        assert operator.decide(ReactorState(power=70.0)) is RodDirection.INSERT
        assert operator.decide(ReactorState(power=50.5)) is RodDirection.HOLD

    def test_velocity_lookahead(self):
        """Test rising power is braked before it reaches the target."""
        operator = AutoOperator(target_temperature=650.0, velocity_lookahead=1.0)
        state = ReactorState(power=45.0, power_velocity=4.0)
        assert operator.decide(state) is RodDirection.INSERT

    def test_banks_at_points_goal(self):
        operator = AutoOperator(bank_at_points=100.0)
        assert not operator.should_bank(ReactorState(points=99.0))
        assert operator.should_bank(ReactorState(points=100.0))

    def test_banks_near_limits(self):
        """Test the operator banks before meltdown or stall."""
        operator = AutoOperator()
        assert operator.should_bank(ReactorState(temperature=965.0))
        assert not operator.should_bank(ReactorState(temperature=305.0, time_running=1.0))
        assert operator.should_bank(ReactorState(temperature=305.0, time_running=3.0))
        assert not operator.should_bank(ReactorState(temperature=600.0, time_running=3.0))


class TestPlayRound:
    """Unattended rounds."""

    def test_round_is_banked(self):
        """Test an autopilot round always ends with a safe shutdown."""
        game = ReactorGame(store=InMemoryHighScoreStore())
        result = play_round(game, AutoOperator(), max_time=30.0)

        assert result.outcome is RoundOutcome.BANKED
        assert result.final_score > 0
        assert game.high_score == result.final_score

    def test_points_goal(self):
        """Test banking as soon as the goal is reached."""
        game = ReactorGame(store=InMemoryHighScoreStore())
        result = play_round(game, AutoOperator(bank_at_points=50.0), max_time=60.0)

        assert result.outcome is RoundOutcome.BANKED
        assert result.final_score >= 50

    def test_frame_callback(self):
        frames = []
        game = ReactorGame(store=InMemoryHighScoreStore())
        play_round(game, AutoOperator(), dt=0.1, max_time=1.0, on_frame=frames.append)
        assert 9 <= len(frames) <= 11
        assert all(f is game for f in frames)

    def test_invalid_dt(self):
        game = ReactorGame(store=InMemoryHighScoreStore())
        with pytest.raises(InvalidTimeStepError):
            play_round(game, AutoOperator(), dt=0.0)
