"""
Tests for board/state containers, invariants and serialization.
"""

import pytest

from ..engine_core.invariants import check_board_invariants, is_power_of_two
from ..engine_core.serialize import state_from_dict, state_to_dict
from ..engine_core.state import Board, Direction, GameState, Tile
from .conftest import make_state, _


class TestBoard:
    """Tests for the Board value."""

    def test_grid_derived_from_tiles(self):
        board = Board(size=2, tiles=(Tile(0, 2, 0, 1), Tile(1, 4, 1, 0)), next_tile_id=2)
        assert board.grid == [[None, 2], [4, None]]
        assert board.cell(0, 1) == 2
        assert board.cell(0, 0) is None

    def test_from_rows_assigns_ids_row_major(self):
        board = Board.from_rows([[2, _], [4, 8]])
        assert [(t.tile_id, t.value) for t in board.tiles] == [(0, 2), (1, 4), (2, 8)]
        assert board.next_tile_id == 3

    def test_from_rows_rejects_ragged_grid(self):
        with pytest.raises(ValueError):
            Board.from_rows([[2, 4], [8]])

    def test_empty_cells_row_major(self):
        board = Board.from_rows([[2, _], [_, 4]])
        assert board.empty_cells() == [(0, 1), (1, 0)]

    def test_full_and_totals(self):
        board = Board.from_rows([[2, 4], [8, 16]])
        assert board.is_full
        assert board.total_value == 30
        assert board.max_value == 16

    def test_board_is_immutable(self):
        board = Board.empty()
        with pytest.raises(AttributeError):
            board.size = 5

    def test_direction_vectors(self):
        assert Direction.UP.vector == (-1, 0)
        assert Direction.DOWN.vector == (1, 0)
        assert Direction.LEFT.vector == (0, -1)
        assert Direction.RIGHT.vector == (0, 1)
        assert [d.value for d in Direction] == ["up", "right", "down", "left"]


class TestInvariants:
    """Invariant violations are assertion errors."""

    def test_valid_board_passes(self):
        check_board_invariants(Board.from_rows([[2, 4], [_, 2048]]))

    def test_shared_cell_fails(self):
        board = Board(size=2, tiles=(Tile(0, 2, 0, 0), Tile(1, 4, 0, 0)), next_tile_id=2)
        with pytest.raises(AssertionError):
            check_board_invariants(board)

    def test_out_of_bounds_fails(self):
        board = Board(size=2, tiles=(Tile(0, 2, 2, 0),), next_tile_id=1)
        with pytest.raises(AssertionError):
            check_board_invariants(board)

    def test_bad_value_fails(self):
        board = Board(size=2, tiles=(Tile(0, 3, 0, 0),), next_tile_id=1)
        with pytest.raises(AssertionError):
            check_board_invariants(board)

    def test_duplicate_id_fails(self):
        board = Board(size=2, tiles=(Tile(0, 2, 0, 0), Tile(0, 2, 1, 1)), next_tile_id=1)
        with pytest.raises(AssertionError):
            check_board_invariants(board)

    def test_power_of_two(self):
        assert is_power_of_two(2)
        assert is_power_of_two(4096)
        assert not is_power_of_two(1)
        assert not is_power_of_two(6)


class TestSerialization:
    """Tests for state_to_dict / state_from_dict."""

    def test_state_survives_dict_conversion(self):
        state = make_state([[2, _], [4, 8]], score=12, best_score=40, move_count=3)

        data = state_to_dict(state)
        loaded = state_from_dict(data)

        assert loaded.board == state.board
        assert loaded.score == 12
        assert loaded.best_score == 40
        assert loaded.move_count == 3
        assert data["board"]["grid"] == [[2, None], [4, 8]]

    def test_events_not_persisted(self):
        state = GameState(last_events=("anything",))
        assert state_from_dict(state_to_dict(state)).last_events == ()

    def test_invalid_board_rejected(self):
        data = state_to_dict(make_state([[2, _], [_, _]]))
        data["board"]["tiles"].append({"id": 5, "value": 4, "row": 0, "col": 0})
        with pytest.raises(ValueError):
            state_from_dict(data)

    @pytest.mark.parametrize(
        "tile",
        [
            {"id": 2, "value": 3, "row": 1, "col": 1},
            {"id": 2, "value": 4, "row": 2, "col": 0},
            {"id": 0, "value": 4, "row": 1, "col": 1},
            {"id": -1, "value": 4, "row": 1, "col": 1},
            {"id": 2, "value": 4, "row": 1},
        ],
        ids=["bad-value", "out-of-bounds", "duplicate-id", "negative-id", "missing-col"],
    )
    def test_bad_tile_rejected(self, tile):
        data = state_to_dict(make_state([[2, _], [4, _]]))
        data["board"]["tiles"].append(tile)
        data["board"]["next_tile_id"] = 3
        with pytest.raises(ValueError):
            state_from_dict(data)

    def test_null_score_rejected(self):
        data = state_to_dict(make_state([[2, _], [_, _]]))
        data["score"] = None
        with pytest.raises(ValueError, match="Malformed state data"):
            state_from_dict(data)

    def test_negative_score_rejected(self):
        data = state_to_dict(make_state([[2, _], [_, _]]))
        data["score"] = -4
        with pytest.raises(ValueError):
            state_from_dict(data)

    def test_missing_board_rejected(self):
        with pytest.raises(ValueError):
            state_from_dict({"score": 3})

    def test_unknown_version_rejected(self):
        data = state_to_dict(make_state([[2, _], [_, _]]))
        data["version"] = 99
        with pytest.raises(ValueError):
            state_from_dict(data)
