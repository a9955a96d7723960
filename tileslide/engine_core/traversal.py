"""
Traversal - Processing order and farthest-position search.

Tiles are processed starting from the side they move toward, so a tile
that has already reached its final cell is never overtaken by one
behind it. One pass is enough.
"""

from __future__ import annotations
from dataclasses import dataclass

from .state import Board, Direction


@dataclass(frozen=True)
class Traversals:
    rows: list[int]
    cols: list[int]

    def cells(self) -> list[tuple[int, int]]:
        """Cells in processing order (row-outer, col-inner)."""
        return [(r, c) for r in self.rows for c in self.cols]


@dataclass(frozen=True)
class FarthestPosition:
    """
    Where a tile stops and what it runs into.

    `farthest` is the last empty cell reached (the tile's own cell if
    it cannot move). `next_cell` is the first occupied cell beyond it,
    None when the walk hit the edge.
    """
    farthest: tuple[int, int]
    next_cell: tuple[int, int] | None


def build_traversals(direction: Direction, size: int) -> Traversals:
    rows = list(range(size))
    cols = list(range(size))
    if direction == Direction.RIGHT:
        cols.reverse()
    if direction == Direction.DOWN:
        rows.reverse()
    return Traversals(rows=rows, cols=cols)


def find_farthest_position(
    occupied: dict[tuple[int, int], object],
    row: int,
    col: int,
    direction: Direction,
    size: int,
) -> FarthestPosition:
    """
    Walk from (row, col) along the direction while cells are empty.

    `occupied` maps positions to whatever the caller tracks there;
    only membership is checked.
    """
    d_row, d_col = direction.vector
    farthest = (row, col)
    current = (row + d_row, col + d_col)

    while _in_bounds(current, size) and current not in occupied:
        farthest = current
        current = (current[0] + d_row, current[1] + d_col)

    next_cell = current if _in_bounds(current, size) else None
    return FarthestPosition(farthest=farthest, next_cell=next_cell)


def has_adjacent_equal(board: Board) -> bool:
    """True if any horizontally or vertically adjacent pair shares a value."""
    grid = board.grid
    size = board.size
    for r in range(size):
        for c in range(size):
            value = grid[r][c]
            if value is None:
                continue
            if c < size - 1 and grid[r][c + 1] == value:
                return True
            if r < size - 1 and grid[r + 1][c] == value:
                return True
    return False


def _in_bounds(cell: tuple[int, int], size: int) -> bool:
    return 0 <= cell[0] < size and 0 <= cell[1] < size
