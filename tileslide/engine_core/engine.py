"""
Board Engine - Applies swipes to game state.

The engine is the single point of state transition.
All state changes must go through apply_move() or reset().

Design principles:
- Pure function: (state, direction) -> MoveResult(new_state, events, moved)
- Never mutates its input; a move that does nothing returns the input state
- Randomness comes only from the injected rng (seedable for tests)
- Holds no state between calls except the rng
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
import random

from .state import Board, Direction, GameState, Tile, GRID_SIZE, WIN_VALUE
from .events import MergeEvent, MoveResult, SlideEvent, SpawnEvent, TileEvent
from .traversal import build_traversals, find_farthest_position, has_adjacent_equal

# Probability that a spawned tile is a 2 (otherwise a 4)
SPAWN_TWO_PROBABILITY = 0.9

# Probability that a new game starts with 2 tiles (otherwise 3)
TWO_STARTER_TILES_PROBABILITY = 0.5


@dataclass
class SlideOutcome:
    """Tile movement for one direction, before any spawn."""
    board: Board
    events: list[TileEvent] = field(default_factory=list)
    score_gain: int = 0
    reached_win: bool = False

    @property
    def moved(self) -> bool:
        return bool(self.events)


@dataclass
class BoardEngine:
    """
    Computes board transitions.

    Stateless apart from `rng`, which may be any object exposing
    `random()` and `randrange(n)` (random.Random in production,
    a scripted source in tests).
    """
    grid_size: int = GRID_SIZE
    win_value: int = WIN_VALUE
    rng: Any = field(default_factory=random.Random)

    @classmethod
    def seeded(cls, seed: int | None, **kwargs) -> BoardEngine:
        """Engine with a deterministic random source."""
        return cls(rng=random.Random(seed), **kwargs)

    def reset(self, previous_best_score: int = 0) -> GameState:
        """
        Start a new game.

        Empty grid plus 2 or 3 starter tiles. The best score is carried
        over as given; stale or zero values are fine.
        """
        board = Board.empty(self.grid_size)
        count = 2 if self.rng.random() < TWO_STARTER_TILES_PROBABILITY else 3

        events: list[TileEvent] = []
        for _ in range(count):
            board, event = self.spawn_random_tile(board)
            if event:
                events.append(event)

        return GameState(
            board=board,
            score=0,
            best_score=previous_best_score,
            game_over=False,
            won=False,
            win_value=self.win_value,
            last_events=tuple(events),
        )

    def spawn_random_tile(self, board: Board) -> tuple[Board, SpawnEvent | None]:
        """
        Place a 2 (90%) or 4 (10%) on a uniformly chosen empty cell.

        A full board is returned unchanged with no event.
        """
        empty = board.empty_cells()
        if not empty:
            return board, None

        row, col = empty[self.rng.randrange(len(empty))]
        value = 2 if self.rng.random() < SPAWN_TWO_PROBABILITY else 4

        tile = Tile(tile_id=board.next_tile_id, value=value, row=row, col=col)
        event = SpawnEvent(tile_id=tile.tile_id, row=row, col=col, value=value)
        return board.with_tile(tile), event

    def apply_move(self, state: GameState, direction: Direction | str) -> MoveResult:
        """
        Apply a swipe to the game state.

        Returns MoveResult with the new state and tile events. When the
        game is already over or won, or no tile can move, the input
        state is returned as-is with moved=False and no events.
        """
        direction = Direction(direction)

        if state.is_finished:
            return MoveResult.unchanged(state)

        outcome = slide_tiles(state.board, direction, state.win_value)
        if not outcome.moved:
            return MoveResult.unchanged(state)

        board, spawn = self.spawn_random_tile(outcome.board)
        events = list(outcome.events)
        if spawn:
            events.append(spawn)

        score = state.score + outcome.score_gain
        new_state = state._copy_with(
            board=board,
            score=score,
            best_score=max(state.best_score, score),
            game_over=is_terminal(board),
            won=state.won or outcome.reached_win,
            move_count=state.move_count + 1,
            last_events=tuple(events),
        )
        return MoveResult(state=new_state, events=events, moved=True)


def slide_tiles(board: Board, direction: Direction, win_value: int = WIN_VALUE) -> SlideOutcome:
    """
    Move every tile as far as it goes in one pass.

    A tile merges into the first tile it runs into when the values are
    equal and that tile has not already been produced by a merge in
    this pass. Otherwise it stops at the farthest empty cell.
    """
    cells: dict[tuple[int, int], Tile] = {tile.position: tile for tile in board.tiles}
    merged_ids: set[int] = set()
    outcome = SlideOutcome(board=board)

    for row, col in build_traversals(direction, board.size).cells():
        tile = cells.get((row, col))
        if tile is None:
            continue

        position = find_farthest_position(cells, row, col, direction, board.size)
        target = cells.get(position.next_cell) if position.next_cell else None

        if (
            target is not None
            and target.value == tile.value
            and target.tile_id not in merged_ids
        ):
            survivor = target.with_value(tile.value * 2)
            del cells[(row, col)]
            cells[survivor.position] = survivor
            merged_ids.add(survivor.tile_id)

            outcome.score_gain += survivor.value
            if survivor.value == win_value:
                outcome.reached_win = True
            outcome.events.append(
                MergeEvent(
                    survivor_tile_id=survivor.tile_id,
                    removed_tile_id=tile.tile_id,
                    from_row=row,
                    from_col=col,
                    to_row=survivor.row,
                    to_col=survivor.col,
                    new_value=survivor.value,
                )
            )
        elif position.farthest != (row, col):
            to_row, to_col = position.farthest
            del cells[(row, col)]
            cells[position.farthest] = tile.moved_to(to_row, to_col)
            outcome.events.append(
                SlideEvent(
                    tile_id=tile.tile_id,
                    from_row=row,
                    from_col=col,
                    to_row=to_row,
                    to_col=to_col,
                )
            )

    if outcome.moved:
        tiles = tuple(sorted(cells.values(), key=lambda t: t.tile_id))
        outcome.board = board.with_tiles(tiles)
    return outcome


def is_terminal(board: Board) -> bool:
    """
    True when the board is full and no adjacent pair shares a value.

    Diagonal neighbours do not count. Always computed over the whole board.
    """
    return board.is_full and not has_adjacent_equal(board)


def can_move(board: Board, direction: Direction | str) -> bool:
    """Whether a swipe in this direction would change the board."""
    return slide_tiles(board, Direction(direction)).moved


def legal_moves(state: GameState) -> list[Direction]:
    """
    Directions that would change the board, in enum order.

    Empty once the game is over or won.
    """
    if state.is_finished:
        return []
    return [d for d in Direction if can_move(state.board, d)]


def apply_move(
    state: GameState,
    direction: Direction | str,
    rng: Any = None,
) -> MoveResult:
    """
    Convenience function to apply a move.

    Creates a BoardEngine sized to the state's board and applies the move.
    """
    engine = BoardEngine(
        grid_size=state.board.size,
        win_value=state.win_value,
        rng=rng if rng is not None else random.Random(),
    )
    return engine.apply_move(state, direction)
