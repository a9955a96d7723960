"""
API Module - HTTP interface for game front ends.

Exposes the engine via REST API. A front end:
1. Creates a game session
2. Sends swipes (direction or raw drag deltas)
3. Animates the returned tile events
4. Restarts or ends the session

All state is session-scoped. Only the best score is persisted.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    MoveRequest,
    # Responses
    GameStateResponse,
    MoveResponse,
    ErrorResponse,
    # Shared
    TileInfo,
    TileEventInfo,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "MoveRequest",
    # Responses
    "GameStateResponse",
    "MoveResponse",
    "ErrorResponse",
    # Shared
    "TileInfo",
    "TileEventInfo",
    # Service
    "APIService",
    "create_app",
]
