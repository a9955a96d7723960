"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to session/engine calls
2. Classifies raw drag deltas into directions
3. Formats responses for clients

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .schemas import (
    # Requests
    CreateSessionRequest,
    MoveRequest,
    # Responses
    ErrorResponse,
    GameStateResponse,
    MoveResponse,
    # Shared
    TileInfo,
    TileEventInfo,
    # Enums
    DirectionValue,
    ErrorCode,
    SessionStatus,
)
from ..engine_core.engine import legal_moves
from ..engine_core.events import TileEvent
from ..engine_core.state import Direction, GameState
from ..formatting import format_score
from ..session import SessionManager, Session, SessionState, classify_swipe

logger = logging.getLogger(__name__)


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        # Start a game
        state = service.create_session(CreateSessionRequest(seed=42))

        # Swipe
        result = service.move(state.session_id, MoveRequest(direction="left"))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    def create_session(self, request: CreateSessionRequest | None = None) -> GameStateResponse:
        """
        Create a new game session.
        """
        request = request or CreateSessionRequest()
        session = self.session_manager.create_session(
            seed=request.seed,
            resume=request.resume,
        )
        return self._build_game_state(session)

    def get_game_state(self, session_id: str) -> GameStateResponse | ErrorResponse:
        """
        Get current game state.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._build_game_state(session)

    def move(self, session_id: str, request: MoveRequest) -> MoveResponse | ErrorResponse:
        """
        Apply a move to a session.

        A move that changes nothing (or arrives after the game ended)
        returns moved=false with no events and the unchanged state.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)

        if request.direction is not None:
            direction = Direction(request.direction.value)
        else:
            direction = classify_swipe(request.dx, request.dy)
            if direction is None:
                return ErrorResponse(
                    error="Drag too short to count as a swipe",
                    error_code=ErrorCode.INVALID_DIRECTION,
                )

        result = self.session_manager.move(session_id, direction)
        if result is None:
            return self._not_found(session_id)

        return MoveResponse(
            session_id=session_id,
            moved=result.moved,
            direction=DirectionValue(direction.value),
            score_delta=result.score_delta,
            events=[self._convert_event(e) for e in result.events],
            state=self._build_game_state(session, result.state),
        )

    def restart(self, session_id: str) -> GameStateResponse | ErrorResponse:
        """
        Start a new game in an existing session, keeping the best score.
        """
        session = self.session_manager.restart(session_id)
        if not session:
            return self._not_found(session_id)
        return self._build_game_state(session)

    def end_session(self, session_id: str) -> bool:
        """
        End a game session.
        """
        return self.session_manager.end_session(session_id)

    def list_sessions(self) -> list[str]:
        """
        List active session IDs.
        """
        return self.session_manager.list_active_sessions()

    # =========================================================================
    # Helper methods
    # =========================================================================

    def _not_found(self, session_id: str) -> ErrorResponse:
        logger.debug("Session %s not found", session_id)
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )

    def _build_game_state(self, session: Session, state: GameState | None = None) -> GameStateResponse:
        """
        Build complete game state response.

        Pass `state` to describe a specific state (e.g. the one a move
        produced) rather than whatever the session holds now.
        """
        if state is None:
            state = session.game_state
        new_ids = state.new_tile_ids
        merged_ids = state.merged_tile_ids

        tiles = [
            TileInfo(
                tile_id=tile.tile_id,
                value=tile.value,
                row=tile.row,
                col=tile.col,
                is_new=tile.tile_id in new_ids,
                merged_into=tile.tile_id in merged_ids,
            )
            for tile in state.board.tiles
        ]

        return GameStateResponse(
            session_id=session.session_id,
            status=self._status_for(session, state),
            grid=state.board.grid,
            tiles=tiles,
            score=state.score,
            score_display=format_score(state.score),
            best_score=state.best_score,
            won=state.won,
            game_over=state.game_over,
            move_count=state.move_count,
            legal_moves=[DirectionValue(d.value) for d in legal_moves(state)],
            created_at=session.created_at,
        )

    def _status_for(self, session: Session, state: GameState) -> SessionStatus:
        """API status of a session showing the given state."""
        if session.state == SessionState.ENDED:
            return SessionStatus.ENDED
        if state.won:
            return SessionStatus.WON
        if state.game_over:
            return SessionStatus.GAME_OVER
        return SessionStatus.ACTIVE

    def _convert_event(self, event: TileEvent) -> TileEventInfo:
        return TileEventInfo(**event.to_dict())
