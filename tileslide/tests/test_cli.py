"""
Tests for the CLI and display helpers.
"""

import builtins

import pytest

from ..cli import main, render_board
from ..formatting import calculate_rating, format_score, format_time
from ..storage import ScoreStore
from .conftest import make_state, _


class TestFormatting:

    def test_format_score(self):
        assert format_score(0) == "0"
        assert format_score(999) == "999"
        assert format_score(1234567) == "1,234,567"

    @pytest.mark.parametrize(
        "score,rating",
        [
            (0, "Beginner"),
            (999, "Beginner"),
            (1000, "Novice"),
            (2000, "Intermediate"),
            (5000, "Advanced"),
            (10000, "Expert"),
            (25000, "Master"),
        ],
    )
    def test_calculate_rating(self, score, rating):
        assert calculate_rating(score) == rating

    def test_format_time(self):
        assert format_time(165) == "02:45"
        assert format_time(5.9) == "00:05"


class TestRenderBoard:

    def test_render_shows_values_and_score(self):
        state = make_state([[2, _], [_, 1024]], score=1500, best_score=20000)
        text = render_board(state)

        assert "Score: 1,500" in text
        assert "Best: 20,000" in text
        assert "1024" in text
        assert text.count("\n") == 5  # score line + 2 rows with separators


class TestCommands:

    def test_no_command_exits(self, capsys):
        with pytest.raises(SystemExit):
            main([])

    def test_simulate(self, capsys):
        main(["simulate", "--games", "2", "--seed", "3"])
        out = capsys.readouterr().out
        assert "Game 1:" in out
        assert "Game 2:" in out
        assert "Average:" in out

    def test_simulate_rejects_zero_games(self):
        with pytest.raises(SystemExit):
            main(["simulate", "--games", "0"])

    def test_play_session(self, tmp_path, monkeypatch, capsys):
        keys = iter(["a", "x", "d", "q"])
        monkeypatch.setattr(builtins, "input", lambda prompt="": next(keys))

        main(["play", "--seed", "1", "--data-dir", str(tmp_path)])

        out = capsys.readouterr().out
        assert "Score:" in out
        assert "Unknown input: 'x'" in out
        assert ScoreStore(data_dir=tmp_path).get_saved_game_state() is not None

    def test_play_stops_on_eof(self, tmp_path, monkeypatch):
        def raise_eof(prompt=""):
            raise EOFError

        monkeypatch.setattr(builtins, "input", raise_eof)
        main(["play", "--data-dir", str(tmp_path)])
