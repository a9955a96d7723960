"""
Engine Core - Pure board transitions for the sliding-tile game.

The engine:
1. Builds new games (reset)
2. Spawns random tiles from an injected random source
3. Applies swipes (traversal, farthest position, single merge per tile)
4. Detects the win and the terminal (no moves left) board

Nothing here performs I/O.
"""

from .state import Board, Direction, GameState, Tile, GRID_SIZE, WIN_VALUE
from .events import EventType, MergeEvent, MoveResult, SlideEvent, SpawnEvent, TileEvent
from .engine import BoardEngine, apply_move, can_move, is_terminal, legal_moves, slide_tiles
from .invariants import check_board_invariants, check_state_invariants
from .serialize import state_from_dict, state_to_dict

__all__ = [
    "Board",
    "Direction",
    "GameState",
    "Tile",
    "GRID_SIZE",
    "WIN_VALUE",
    "EventType",
    "MergeEvent",
    "MoveResult",
    "SlideEvent",
    "SpawnEvent",
    "TileEvent",
    "BoardEngine",
    "apply_move",
    "can_move",
    "is_terminal",
    "legal_moves",
    "slide_tiles",
    "check_board_invariants",
    "check_state_invariants",
    "state_from_dict",
    "state_to_dict",
]
