"""
High score persistence.

The record outlives any single reactor and is kept behind a small
load/save interface injected into the game driver.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

from reactor_game.config import HIGH_SCORE_KEY
from reactor_game.exceptions import HighScoreStoreError

logger = logging.getLogger(__name__)


class HighScoreStore(ABC):
    """Storage for a single non-negative integer high score."""

    @abstractmethod
    def load(self) -> int:
        """Return the stored record, 0 when none exists."""

    @abstractmethod
    def save(self, score: int) -> None:
        """Replace the stored record."""

    @staticmethod
    def _validate(score) -> int:
        score = int(score)
        if score < 0:
            raise HighScoreStoreError(f"High score must not be negative: {score}")
        return score


class InMemoryHighScoreStore(HighScoreStore):
    """Keeps the record for the lifetime of the process."""

    def __init__(self, initial: int = 0):
        self._score = self._validate(initial)

    def load(self) -> int:
        return self._score

    def save(self, score: int) -> None:
        self._score = self._validate(score)


class JsonFileHighScoreStore(HighScoreStore):
    """Keeps the record in a JSON object file under a fixed key.

    Other keys in the file are preserved on save. A missing or unreadable
    file, or a value that is not a non-negative integer, loads as 0.
    """

    def __init__(self, path: Union[str, Path], key: str = HIGH_SCORE_KEY):
        self.path = Path(path)
        self.key = key

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read high score file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring high score file {self.path}: expected a JSON object")
            return {}
        return data

    def load(self) -> int:
        value = self._read().get(self.key, 0)
        try:
            score = int(value)
        except (TypeError, ValueError, OverflowError):
            logger.warning(f"Ignoring invalid high score {value!r} in {self.path}")
            return 0
        return max(0, score)

    def save(self, score: int) -> None:
        score = self._validate(score)
        data = self._read()
        data[self.key] = score
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            raise HighScoreStoreError(f"Could not save high score to {self.path}: {e}") from e
        logger.debug(f"Saved high score {score} to {self.path}")


def create_store(path: Union[str, Path, None] = None, key: str = HIGH_SCORE_KEY) -> HighScoreStore:
    """File store when a path is given, in-memory store otherwise."""
    if path is None:
        return InMemoryHighScoreStore()
    return JsonFileHighScoreStore(path, key)
