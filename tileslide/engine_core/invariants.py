"""
Board invariants.

Violations are programming errors, so these checks raise AssertionError
rather than returning an error value. Tests and debug code call
them; the engine trusts its input and the loader in serialize.py does
its own ValueError checks.
"""

from __future__ import annotations

from .state import Board, GameState


def is_power_of_two(value: int) -> bool:
    return value >= 2 and (value & (value - 1)) == 0


def check_board_invariants(board: Board):
    """Assert that tiles are in bounds, on distinct cells, with valid values and ids."""
    seen_cells: set[tuple[int, int]] = set()
    seen_ids: set[int] = set()

    for tile in board.tiles:
        assert board.in_bounds(tile.row, tile.col), f"Tile {tile.tile_id} out of bounds at {tile.position}"
        assert tile.position not in seen_cells, f"Two tiles share cell {tile.position}"
        assert tile.tile_id not in seen_ids, f"Duplicate tile id {tile.tile_id}"
        assert is_power_of_two(tile.value), f"Tile {tile.tile_id} has invalid value {tile.value}"
        assert tile.tile_id < board.next_tile_id, f"Tile id {tile.tile_id} not below next id {board.next_tile_id}"
        seen_cells.add(tile.position)
        seen_ids.add(tile.tile_id)

    grid = board.grid
    occupied = sum(1 for row in grid for value in row if value is not None)
    assert occupied == len(board.tiles), "Grid and tile set disagree"


def check_state_invariants(state: GameState):
    """Assert board invariants plus score bookkeeping."""
    check_board_invariants(state.board)
    assert state.score >= 0, "Score must be non-negative"
    assert state.best_score >= 0, "Best score must be non-negative"
