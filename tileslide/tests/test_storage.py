"""
Tests for the score store.

Tests:
- Best score and saved game persistence
- Fail-soft behaviour on missing, corrupt and unwritable data
- Generic key/value helpers
"""

import logging

import pytest

from ..engine_core.serialize import state_to_dict
from ..session import SessionManager
from ..storage import ScoreStore
from ..storage.store import BEST_SCORE_KEY, GAME_STATE_KEY
from .conftest import make_state, _


class TestBestScore:
    """Tests for best score persistence."""

    def test_missing_best_score_is_zero(self, store):
        assert store.get_best_score() == 0

    def test_save_and_load(self, store):
        assert store.save_best_score(2048)
        assert store.get_best_score() == 2048

    def test_survives_new_store_instance(self, store):
        store.save_best_score(512)
        assert ScoreStore(data_dir=store.data_dir).get_best_score() == 512

    def test_malformed_value_falls_back_to_zero(self, store, caplog):
        store.save_data(BEST_SCORE_KEY, "not a number")
        with caplog.at_level(logging.WARNING):
            assert store.get_best_score() == 0
        assert "malformed best score" in caplog.text

    def test_negative_value_clamped(self, store):
        store.save_data(BEST_SCORE_KEY, -5)
        assert store.get_best_score() == 0


class TestSavedGame:
    """Tests for saving a game in progress."""

    def test_no_saved_game(self, store):
        assert store.get_saved_game_state() is None

    def test_save_and_load_game(self, store):
        state = make_state([[2, 4], [_, 8]], score=20, best_score=100)

        assert store.save_game_state(state)
        loaded = store.get_saved_game_state()

        assert loaded.board == state.board
        assert loaded.score == 20
        assert loaded.best_score == 100

    def test_corrupt_saved_game_ignored(self, store, caplog):
        store.data_dir.mkdir(parents=True, exist_ok=True)
        (store.data_dir / f"{GAME_STATE_KEY}.json").write_text("{\"board\": 3}")

        with caplog.at_level(logging.WARNING):
            assert store.get_saved_game_state() is None
        assert "Ignoring invalid saved game" in caplog.text

    @pytest.mark.parametrize("field", ["score", "best_score", "win_value", "move_count"])
    @pytest.mark.parametrize("bad_value", [None, [1, 2], "lots"])
    def test_malformed_counter_ignored(self, store, caplog, field, bad_value):
        data = state_to_dict(make_state([[2, _], [_, 4]], score=8))
        data[field] = bad_value
        store.save_data(GAME_STATE_KEY, data)

        with caplog.at_level(logging.WARNING):
            assert store.get_saved_game_state() is None
        assert "Ignoring invalid saved game" in caplog.text

    def test_stacked_tiles_ignored(self, store):
        data = state_to_dict(make_state([[2, _], [_, 4]]))
        data["board"]["tiles"].append({"id": 1, "value": 3, "row": 0, "col": 0})
        data["board"]["next_tile_id"] = 5
        store.save_data(GAME_STATE_KEY, data)

        assert store.get_saved_game_state() is None

    def test_resume_with_malformed_game_starts_fresh(self, store):
        data = state_to_dict(make_state([[2, _], [_, 4]], score=8))
        data["score"] = None
        store.save_data(GAME_STATE_KEY, data)

        session = SessionManager(store=store).create_session(seed=1, resume=True)

        assert session.game_state.score == 0
        assert session.game_state.board.size == 4

    def test_non_dict_saved_game_ignored(self, store):
        store.save_data(GAME_STATE_KEY, [1, 2, 3])
        assert store.get_saved_game_state() is None

    def test_clear_removes_everything(self, store):
        store.save_best_score(10)
        store.save_game_state(make_state([[2, _], [_, _]]))

        store.clear()

        assert store.get_best_score() == 0
        assert store.get_saved_game_state() is None


class TestGenericData:
    """Tests for save_data / get_data / remove_data."""

    def test_json_round_trip(self, store):
        store.save_data("settings", {"theme": "dark", "sound": False})
        assert store.get_data("settings") == {"theme": "dark", "sound": False}

    def test_raw_string_returned_when_not_json(self, store):
        store.save_data("note", "hello there")
        assert store.get_data("note") == "hello there"

    def test_missing_key_is_none(self, store):
        assert store.get_data("nothing") is None

    def test_remove_missing_key_is_ok(self, store):
        assert store.remove_data("nothing")

    def test_keys_are_sanitized(self, store):
        store.save_data("../escape", 1)
        assert store.get_data("../escape") == 1
        assert not (store.data_dir.parent / "escape.json").exists()


class TestFailSoft:
    """Write failures are logged, not raised."""

    def test_unwritable_directory(self, tmp_path, caplog):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        store = ScoreStore(data_dir=blocker / "data")

        with caplog.at_level(logging.ERROR):
            assert not store.save_best_score(100)
        assert "Error saving data" in caplog.text
        assert store.get_best_score() == 0

    def test_unserializable_value(self, store):
        assert not store.save_data("bad", object())
