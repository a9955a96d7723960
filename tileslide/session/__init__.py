"""
Session Module - Manages in-memory game sessions.

A session represents one play-through of a game:
- Created when a player starts a game
- Holds the current game state and its engine
- Applies moves one at a time
- Removed when the player ends it

The only persistence is the best score (and optionally the
game in progress), written through the storage module.
"""

from .manager import SessionManager, Session, SessionState
from .gestures import classify_swipe, direction_for_key, SWIPE_THRESHOLD

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "classify_swipe",
    "direction_for_key",
    "SWIPE_THRESHOLD",
]
