"""
Serialization - Convert game state to and from plain dicts.

Used by the score store to save a game in progress and by the API
layer. The format keeps tiles (with ids) as the primary data and adds
the derived grid for readers that only want values.
"""

from __future__ import annotations
from typing import Any

from .state import Board, GameState, Tile, WIN_VALUE
from .invariants import is_power_of_two

FORMAT_VERSION = 1


def board_to_dict(board: Board) -> dict[str, Any]:
    return {
        "size": board.size,
        "next_tile_id": board.next_tile_id,
        "tiles": [
            {"id": t.tile_id, "value": t.value, "row": t.row, "col": t.col}
            for t in board.tiles
        ],
        "grid": board.grid,
    }


def board_from_dict(data: dict[str, Any]) -> Board:
    """
    Rebuild a board; the grid entry is ignored in favour of the tiles.

    Raises ValueError if the data does not describe a valid board.
    """
    try:
        tiles = tuple(
            Tile(
                tile_id=int(t["id"]),
                value=int(t["value"]),
                row=int(t["row"]),
                col=int(t["col"]),
            )
            for t in data["tiles"]
        )
        next_id = int(data.get("next_tile_id", max((t.tile_id for t in tiles), default=-1) + 1))
        board = Board(size=int(data["size"]), tiles=tiles, next_tile_id=next_id)
    except (KeyError, TypeError, AttributeError) as e:
        raise ValueError(f"Malformed board data: {e}") from e

    _validate_board(board)
    return board


def _validate_board(board: Board):
    """Raise ValueError unless tiles are in bounds, on distinct cells, with valid values and ids."""
    if board.size < 1:
        raise ValueError(f"Invalid board size: {board.size}")

    seen_cells: set[tuple[int, int]] = set()
    seen_ids: set[int] = set()
    for tile in board.tiles:
        if not board.in_bounds(tile.row, tile.col):
            raise ValueError(f"Tile {tile.tile_id} out of bounds at {tile.position}")
        if tile.position in seen_cells:
            raise ValueError(f"Two tiles share cell {tile.position}")
        if tile.tile_id in seen_ids:
            raise ValueError(f"Duplicate tile id {tile.tile_id}")
        if not is_power_of_two(tile.value):
            raise ValueError(f"Tile {tile.tile_id} has invalid value {tile.value}")
        if tile.tile_id < 0 or tile.tile_id >= board.next_tile_id:
            raise ValueError(f"Tile id {tile.tile_id} not below next id {board.next_tile_id}")
        seen_cells.add(tile.position)
        seen_ids.add(tile.tile_id)


def state_to_dict(state: GameState) -> dict[str, Any]:
    return {
        "version": FORMAT_VERSION,
        "board": board_to_dict(state.board),
        "score": state.score,
        "best_score": state.best_score,
        "game_over": state.game_over,
        "won": state.won,
        "win_value": state.win_value,
        "move_count": state.move_count,
    }


def state_from_dict(data: dict[str, Any]) -> GameState:
    """
    Rebuild a game state. Events are not persisted.

    Raises ValueError if the data does not describe a valid game.
    """
    if data.get("version", FORMAT_VERSION) != FORMAT_VERSION:
        raise ValueError(f"Unsupported state version: {data.get('version')}")
    if "board" not in data:
        raise ValueError("Malformed state data: missing board")

    board = board_from_dict(data["board"])
    try:
        score = int(data.get("score", 0))
        best_score = int(data.get("best_score", 0))
        win_value = int(data.get("win_value", WIN_VALUE))
        move_count = int(data.get("move_count", 0))
    except (TypeError, ValueError) as e:
        raise ValueError(f"Malformed state data: {e}") from e

    if min(score, best_score, move_count) < 0:
        raise ValueError("Score, best score and move count must be non-negative")
    if not is_power_of_two(win_value):
        raise ValueError(f"Invalid win value: {win_value}")

    return GameState(
        board=board,
        score=score,
        best_score=max(best_score, score),
        game_over=bool(data.get("game_over", False)),
        won=bool(data.get("won", False)),
        win_value=win_value,
        move_count=move_count,
    )
