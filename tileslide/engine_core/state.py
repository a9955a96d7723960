"""
Game State - Immutable board and game state containers.

Design principles:
- Immutable: every transition returns a new Board / GameState
- Single source of truth: the tile tuple is primary, the grid is derived
- Serializable: see serialize.py for dict conversion
- Size-agnostic: grid size and win value are carried on the values
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

GRID_SIZE = 4
WIN_VALUE = 2048


class Direction(Enum):
    """Swipe directions accepted by the engine."""
    UP = "up"
    RIGHT = "right"
    DOWN = "down"
    LEFT = "left"

    @property
    def vector(self) -> tuple[int, int]:
        """Unit (row, col) step for this direction."""
        return _VECTORS[self]


_VECTORS = {
    Direction.UP: (-1, 0),
    Direction.RIGHT: (0, 1),
    Direction.DOWN: (1, 0),
    Direction.LEFT: (0, -1),
}


@dataclass(frozen=True)
class Tile:
    """
    A live tile on the board.

    The id is stable for the lifetime of the tile: a slide keeps it,
    a merge keeps the survivor's id and retires the other one.
    """
    tile_id: int
    value: int
    row: int
    col: int

    @property
    def position(self) -> tuple[int, int]:
        return (self.row, self.col)

    def moved_to(self, row: int, col: int) -> Tile:
        """Return this tile at a new position."""
        return replace(self, row=row, col=col)

    def with_value(self, value: int) -> Tile:
        """Return this tile with a new value."""
        return replace(self, value=value)


@dataclass(frozen=True)
class Board:
    """
    A square grid of tiles.

    Only the tiles are stored. `grid` and `cell()` are views built
    from them, so the two can never disagree.
    """
    size: int = GRID_SIZE
    tiles: tuple[Tile, ...] = ()
    next_tile_id: int = 0

    @classmethod
    def empty(cls, size: int = GRID_SIZE) -> Board:
        return cls(size=size)

    @classmethod
    def from_rows(cls, rows: list[list[int | None]]) -> Board:
        """
        Build a board from a grid of values (None for empty).

        Tile ids are assigned in row-major order. Mostly used by tests
        and by the CLI to set up positions.
        """
        size = len(rows)
        tiles = []
        next_id = 0
        for r, row in enumerate(rows):
            if len(row) != size:
                raise ValueError("Board rows must form a square grid")
            for c, value in enumerate(row):
                if value is None:
                    continue
                tiles.append(Tile(tile_id=next_id, value=value, row=r, col=c))
                next_id += 1
        return cls(size=size, tiles=tuple(tiles), next_tile_id=next_id)

    @property
    def grid(self) -> list[list[int | None]]:
        """Grid of values derived from the tiles."""
        grid: list[list[int | None]] = [[None] * self.size for _ in range(self.size)]
        for tile in self.tiles:
            grid[tile.row][tile.col] = tile.value
        return grid

    def tile_at(self, row: int, col: int) -> Tile | None:
        """Get the tile occupying a cell."""
        for tile in self.tiles:
            if tile.row == row and tile.col == col:
                return tile
        return None

    def cell(self, row: int, col: int) -> int | None:
        """Value at a cell, None if empty."""
        tile = self.tile_at(row, col)
        return tile.value if tile else None

    def get_tile(self, tile_id: int) -> Tile | None:
        for tile in self.tiles:
            if tile.tile_id == tile_id:
                return tile
        return None

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def empty_cells(self) -> list[tuple[int, int]]:
        """Empty cells in row-major order."""
        occupied = {tile.position for tile in self.tiles}
        return [
            (r, c)
            for r in range(self.size)
            for c in range(self.size)
            if (r, c) not in occupied
        ]

    @property
    def is_full(self) -> bool:
        return len(self.tiles) == self.size * self.size

    @property
    def total_value(self) -> int:
        return sum(tile.value for tile in self.tiles)

    @property
    def max_value(self) -> int:
        return max((tile.value for tile in self.tiles), default=0)

    def with_tile(self, tile: Tile) -> Board:
        """Return new board with a freshly spawned tile added."""
        return Board(
            size=self.size,
            tiles=self.tiles + (tile,),
            next_tile_id=max(self.next_tile_id, tile.tile_id + 1),
        )

    def with_tiles(self, tiles: tuple[Tile, ...]) -> Board:
        """Return new board with the tile set replaced."""
        return Board(size=self.size, tiles=tiles, next_tile_id=self.next_tile_id)


@dataclass(frozen=True)
class GameState:
    """
    Complete game state at a point in time.

    This is the canonical state that the engine operates on.
    All state changes go through BoardEngine.apply_move / reset.
    """
    board: Board = field(default_factory=Board)
    score: int = 0
    best_score: int = 0
    game_over: bool = False
    won: bool = False
    win_value: int = WIN_VALUE
    move_count: int = 0

    # Events of the transition that produced this state
    last_events: tuple[Any, ...] = ()

    @property
    def is_finished(self) -> bool:
        """No further moves are processed until reset."""
        return self.game_over or self.won

    @property
    def new_tile_ids(self) -> set[int]:
        """Tiles spawned by the transition that produced this state."""
        return {e.tile_id for e in self.last_events if e.event_type.value == "spawn"}

    @property
    def merged_tile_ids(self) -> set[int]:
        """Survivors of merges in the transition that produced this state."""
        return {
            e.survivor_tile_id for e in self.last_events
            if e.event_type.value == "merge"
        }

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)
