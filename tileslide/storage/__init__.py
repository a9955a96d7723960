"""
Storage Module - Persistence kept outside the engine.

The only things that survive a run are the best score and,
optionally, a game in progress. Both live in plain JSON files.
"""

from .store import ScoreStore, BEST_SCORE_KEY, GAME_STATE_KEY

__all__ = [
    "ScoreStore",
    "BEST_SCORE_KEY",
    "GAME_STATE_KEY",
]
