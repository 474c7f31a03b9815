"""
Unit tests for high score persistence.
"""

import json

import pytest

from reactor_game.exceptions import HighScoreStoreError
from reactor_game.high_score import (
    InMemoryHighScoreStore,
    JsonFileHighScoreStore,
    create_store,
)


class TestInMemoryStore:

    def test_default_zero(self):
        assert InMemoryHighScoreStore().load() == 0

    def test_save_load(self):
        store = InMemoryHighScoreStore()
        store.save(42)
        assert store.load() == 42

    def test_negative_rejected(self):
        store = InMemoryHighScoreStore()
        with pytest.raises(HighScoreStoreError):
            store.save(-1)


class TestJsonFileStore:
    """JSON file store."""

    def test_missing_file_loads_zero(self, tmp_path):
        """Test a fresh install has no record."""
        store = JsonFileHighScoreStore(tmp_path / "scores.json")
        assert store.load() == 0

    def test_save_and_reload(self, tmp_path):
        """Test the record survives a new store instance."""
        path = tmp_path / "nested" / "scores.json"
        JsonFileHighScoreStore(path).save(1234)

        assert JsonFileHighScoreStore(path).load() == 1234
        assert json.loads(path.read_text()) == {"reactorHighScore": 1234}

    def test_other_keys_preserved(self, tmp_path):
        """Test saving keeps unrelated entries."""
        path = tmp_path / "scores.json"
        path.write_text(json.dumps({"volume": 7}))
        JsonFileHighScoreStore(path).save(5)
        assert json.loads(path.read_text()) == {"volume": 7, "reactorHighScore": 5}

    def test_custom_key(self, tmp_path):
        path = tmp_path / "scores.json"
        JsonFileHighScoreStore(path, key="hard").save(9)
        assert JsonFileHighScoreStore(path, key="hard").load() == 9
        assert JsonFileHighScoreStore(path).load() == 0

    @pytest.mark.parametrize("content", ["not json", "[1, 2]", '{"reactorHighScore": "abc"}',
                                         '{"reactorHighScore": null}', '{"reactorHighScore": Infinity}'])
    def test_unreadable_loads_zero(self, tmp_path, content):
        """Test corrupt content falls back to no record."""
        path = tmp_path / "scores.json"
        path.write_text(content)
        assert JsonFileHighScoreStore(path).load() == 0

    def test_string_number_accepted(self, tmp_path):
        """Test a numeric string is read as the record."""
        path = tmp_path / "scores.json"
        path.write_text('{"reactorHighScore": "77"}')
        assert JsonFileHighScoreStore(path).load() == 77

    def test_unwritable_path_raises(self, tmp_path):
        """Test write failures surface as store errors."""
        store = JsonFileHighScoreStore(tmp_path)
        with pytest.raises(HighScoreStoreError):
            store.save(10)


class TestCreateStore:

    def test_memory_without_path(self):
        assert isinstance(create_store(None), InMemoryHighScoreStore)

    def test_file_with_path(self, tmp_path):
        store = create_store(tmp_path / "s.json", key="k")
        assert isinstance(store, JsonFileHighScoreStore)
        assert store.key == "k"
