"""
Tests for the command line interface.
"""

import io
import json

import pytest
from rich.console import Console

from reactor_game.cli import main


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=100)


def output(console):
    return console.file.getvalue()


class TestCLI:

    def test_no_command(self, console):
        assert main([], console=console) == 1

    def test_autoplay_saves_high_score(self, tmp_path, console):
        """Test an autopilot round banks into the score file."""
        scores = tmp_path / "scores.json"
        code = main(['--high-score-file', str(scores), 'autoplay', '--no-live',
                     '--max-time', '5'], console=console)

        assert code == 0
        assert "SHUTDOWN COMPLETE" in output(console)
        assert json.loads(scores.read_text())["reactorHighScore"] > 0

    def test_autoplay_live(self, console):
        code = main(['autoplay', '--max-time', '0.5', '--dt', '0.1'], console=console)
        assert code == 0
        assert "Points Banked" in output(console)

    def test_highscore(self, tmp_path, console):
        scores = tmp_path / "scores.json"
        scores.write_text(json.dumps({"reactorHighScore": 321}))

        assert main(['--high-score-file', str(scores), 'highscore'], console=console) == 0
        assert "321" in output(console)

        assert main(['--high-score-file', str(scores), 'highscore', '--reset'], console=console) == 0
        assert json.loads(scores.read_text())["reactorHighScore"] == 0

    def test_config_written(self, tmp_path, console):
        path = tmp_path / "reactor.yaml"
        assert main(['config', '--output', str(path)], console=console) == 0
        assert path.exists()

    def test_missing_config_file(self, tmp_path, console):
        code = main(['--config', str(tmp_path / "nope.yaml"), 'highscore'], console=console)
        assert code == 1

    def test_highscore_without_file(self, console):
        """Test reset refuses to act without a score file."""
        assert main(['highscore', '--reset'], console=console) == 1
        assert "No high score file configured" in output(console)
