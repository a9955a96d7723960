"""
FastAPI Application - REST API for game front ends.

Endpoints:
    POST   /api/v1/sessions                 Start a game session
    GET    /api/v1/sessions                 List active sessions
    GET    /api/v1/sessions/{id}            Get game state
    DELETE /api/v1/sessions/{id}            End session
    POST   /api/v1/sessions/{id}/move       Apply a swipe
    POST   /api/v1/sessions/{id}/restart    Start over (best score kept)
    WS     /api/v1/sessions/{id}/ws         WebSocket for real-time updates

Move Flow:
    1. POST /move with {"direction": "left"} or raw drag deltas {"dx": .., "dy": ..}
    2. The engine computes the new state synchronously
    3. Response carries `moved`, the tile `events` to animate and the new `state`
    4. The same payload is pushed to WebSocket subscribers of the session

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Optional, Union
import json
import logging
import os

from .. import __version__

# Environment configuration
TILESLIDE_ENV = os.getenv("TILESLIDE_ENV", "development")
TILESLIDE_DATA_DIR = os.getenv("TILESLIDE_DATA_DIR", None)
TILESLIDE_SESSION_TTL = int(os.getenv("TILESLIDE_SESSION_TTL", "3600"))
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

logger = logging.getLogger(__name__)


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
        from fastapi.exceptions import RequestValidationError
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .service import APIService
    from .schemas import (
        # Request models
        CreateSessionRequest,
        MoveRequest,
        # Response models
        ErrorResponse,
        GameStateResponse,
        MoveResponse,
        SessionListResponse,
        EndSessionResponse,
        HealthResponse,
        # Enums
        ErrorCode,
    )
    from ..session import SessionManager
    from ..storage import ScoreStore

    app = FastAPI(
        title="Tileslide API",
        description="""
Sliding-tile puzzle engine (2048).

## Move Flow

`POST /move` applies one swipe and returns:

- `moved`: whether any tile changed cell or merged
- `events`: `spawn`, `slide` and `merge` records to animate
- `state`: the full board after the move

Moves sent after the game is won or over return `moved=false`.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `INVALID_DIRECTION` | Drag too short to classify |
| `VALIDATION_ERROR` | Malformed request (HTTP 422) |
| `INTERNAL_ERROR` | Unexpected server failure (HTTP 500) |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Service instance
    if service is None:
        store = ScoreStore(data_dir=TILESLIDE_DATA_DIR)
        service = APIService(session_manager=SessionManager(store=store))
    api_service = service

    # WebSocket connections
    ws_connections: dict[str, list[WebSocket]] = {}

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
            ).model_dump(mode="json"),
        )

    def error_to_response(response: ErrorResponse) -> JSONResponse:
        status_code = 404 if response.error_code == ErrorCode.SESSION_NOT_FOUND else 400
        return make_error_response(response.error_code, response.error, status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        )
        return make_error_response(ErrorCode.VALIDATION_ERROR, problems or "Invalid request", 422)

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return make_error_response(ErrorCode.INTERNAL_ERROR, "Internal server error", 500)

    async def broadcast_to_session(session_id: str, message: dict):
        """Broadcast a message to all WebSocket connections for a session."""
        if session_id in ws_connections:
            dead_connections = []
            for ws in ws_connections[session_id]:
                try:
                    await ws.send_json(message)
                except (WebSocketDisconnect, RuntimeError):
                    dead_connections.append(ws)
            for ws in dead_connections:
                ws_connections[session_id].remove(ws)

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=GameStateResponse,
        tags=["Sessions"],
        summary="Start a new game session",
    )
    async def create_session(body: Optional[CreateSessionRequest] = None) -> GameStateResponse:
        """
        Start a new game.

        Pass a `seed` for reproducible spawns. The stored best score is
        carried into the new game.
        """
        api_service.session_manager.cleanup_stale_sessions(TILESLIDE_SESSION_TTL)
        return api_service.create_session(body or CreateSessionRequest())

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        """List all session IDs that still accept moves."""
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get game state",
    )
    async def get_game_state(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        """Get the complete current game state for display."""
        response = api_service.get_game_state(session_id)
        if isinstance(response, ErrorResponse):
            return error_to_response(response)
        return response

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a game session",
    )
    async def end_session(session_id: str) -> EndSessionResponse:
        """End a game session and release it."""
        success = api_service.end_session(session_id)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions/{session_id}/move",
        response_model=MoveResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Swipe could not be classified"},
            404: {"model": ErrorResponse, "description": "Session not found"},
        },
        tags=["Game"],
        summary="Apply a swipe",
    )
    async def move(session_id: str, body: MoveRequest) -> Union[MoveResponse, JSONResponse]:
        """
        Apply one swipe.

        **Request Body:**
        ```json
        {"direction": "left"}
        ```
        or
        ```json
        {"dx": -120.0, "dy": 8.5}
        ```
        """
        response = api_service.move(session_id, body)
        if isinstance(response, ErrorResponse):
            return error_to_response(response)

        if response.moved:
            await broadcast_to_session(session_id, {
                "type": "move",
                "payload": response.model_dump(mode="json"),
            })
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/restart",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Start over in the same session",
    )
    async def restart(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        """Start a new game; the best score is kept."""
        response = api_service.restart(session_id)
        if isinstance(response, ErrorResponse):
            return error_to_response(response)

        await broadcast_to_session(session_id, {
            "type": "state_update",
            "payload": response.model_dump(mode="json"),
        })
        return response

    # =========================================================================
    # WebSocket Endpoint
    # =========================================================================

    @app.websocket("/api/v1/sessions/{session_id}/ws")
    async def websocket_endpoint(websocket: WebSocket, session_id: str):
        """
        WebSocket for real-time updates.

        Messages from server:
        - state_update: Full game state (on connect and after restart)
        - move: A move was applied (same payload as POST /move)
        - error: Error occurred

        Messages from client:
        - ping: Keep-alive
        """
        await websocket.accept()

        ws_connections.setdefault(session_id, []).append(websocket)

        try:
            # Send initial state
            response = api_service.get_game_state(session_id)
            if isinstance(response, ErrorResponse):
                await websocket.send_json({
                    "type": "error",
                    "payload": {"message": response.error},
                })
            else:
                await websocket.send_json({
                    "type": "state_update",
                    "payload": response.model_dump(mode="json"),
                })

            # Listen for messages
            while True:
                data = await websocket.receive_text()
                try:
                    message = json.loads(data)
                    if message.get("type") == "ping":
                        await websocket.send_json({"type": "pong"})
                except json.JSONDecodeError:
                    await websocket.send_json({
                        "type": "error",
                        "payload": {"message": "Invalid JSON"},
                    })

        except WebSocketDisconnect:
            logger.debug("WebSocket closed for session %s", session_id)
        finally:
            if websocket in ws_connections.get(session_id, []):
                ws_connections[session_id].remove(websocket)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            version=__version__,
            environment=TILESLIDE_ENV,
            active_sessions=len(api_service.list_sessions()),
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Tileslide API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app
