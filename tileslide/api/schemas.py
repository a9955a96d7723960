"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between clients (web or mobile
front ends that render and animate the board) and the engine.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has expired
- INVALID_DIRECTION: Move request has no usable direction
- VALIDATION_ERROR: Request body could not be parsed
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, model_validator


# =============================================================================
# Enums
# =============================================================================

class DirectionValue(str, Enum):
    """Swipe directions."""
    UP = "up"
    RIGHT = "right"
    DOWN = "down"
    LEFT = "left"


class SessionStatus(str, Enum):
    """Session status values."""
    ACTIVE = "active"
    WON = "won"
    GAME_OVER = "game_over"
    ENDED = "ended"


class TileEventType(str, Enum):
    SPAWN = "spawn"
    SLIDE = "slide"
    MERGE = "merge"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    INVALID_DIRECTION = "INVALID_DIRECTION"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class TileInfo(BaseModel):
    """A live tile for display."""
    tile_id: int
    value: int
    row: int
    col: int
    is_new: bool = Field(False, description="Spawned by the last move")
    merged_into: bool = Field(False, description="Survivor of a merge in the last move")


class TileEventInfo(BaseModel):
    """
    A tile event from the last move.

    Fields not relevant to the event type are null:
    spawn uses tile_id/row/col/value, slide uses tile_id and from/to,
    merge uses survivor/removed ids, from/to and new_value.
    """
    type: TileEventType
    tile_id: Optional[int] = None
    row: Optional[int] = None
    col: Optional[int] = None
    value: Optional[int] = None
    from_row: Optional[int] = None
    from_col: Optional[int] = None
    to_row: Optional[int] = None
    to_col: Optional[int] = None
    survivor_tile_id: Optional[int] = None
    removed_tile_id: Optional[int] = None
    new_value: Optional[int] = None


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to start a new game session."""
    seed: Optional[int] = Field(None, description="Seed for reproducible tile spawns")
    resume: bool = Field(False, description="Continue the stored game if there is one")


class MoveRequest(BaseModel):
    """
    Request to apply a move.

    Either give `direction` directly, or the raw drag deltas `dx`/`dy`
    and let the server classify the swipe.
    """
    direction: Optional[DirectionValue] = None
    dx: Optional[float] = None
    dy: Optional[float] = None

    @model_validator(mode="after")
    def _require_direction_or_deltas(self):
        if self.direction is None and (self.dx is None or self.dy is None):
            raise ValueError("Provide either direction or both dx and dy")
        return self


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    api_version: str = Field("v1", description="API version")


class GameStateResponse(BaseModel):
    """Complete game state for display."""
    session_id: str
    status: SessionStatus
    grid: list[list[Optional[int]]]
    tiles: list[TileInfo] = Field(default_factory=list)
    score: int = 0
    score_display: str = "0"
    best_score: int = 0
    won: bool = False
    game_over: bool = False
    move_count: int = 0
    legal_moves: list[DirectionValue] = Field(default_factory=list)
    created_at: float = 0.0
    api_version: str = "v1"


class MoveResponse(BaseModel):
    """Result of a move: whether it did anything, the events, and the new state."""
    session_id: str
    moved: bool
    direction: DirectionValue
    score_delta: int = 0
    events: list[TileEventInfo] = Field(default_factory=list)
    state: GameStateResponse
    api_version: str = "v1"


class SessionListResponse(BaseModel):
    sessions: list[str] = Field(default_factory=list)
    count: int = 0
    api_version: str = "v1"


class EndSessionResponse(BaseModel):
    success: bool
    session_id: str
    api_version: str = "v1"


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str
    environment: str
    active_sessions: int = 0
