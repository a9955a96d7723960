"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. Caller creates a session -> best score loaded from the store,
   fresh game built by the engine
2. During the game:
   - Caller sends a direction
   - Engine computes the new state and tile events synchronously
   - Best score (and optionally the game) is written to the store
3. Game is won or no moves remain -> session stays readable until
   restarted or ended
4. Session ended -> removed from memory

CONCURRENCY:
- Each session owns its GameState exclusively
- Moves and restarts on one session are serialized by a per-session lock
- Persistence happens after the new state is in place; a failed write
  is logged by the store and does not affect the move
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import logging
import threading
import time
import uuid

from ..engine_core.engine import BoardEngine, legal_moves
from ..engine_core.events import MoveResult
from ..engine_core.state import Direction, GameState
from ..storage import ScoreStore

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"  # Moves accepted
    WON = "won"  # Target tile reached
    GAME_OVER = "game_over"  # No moves left
    ENDED = "ended"  # Removed by the caller


@dataclass
class Session:
    """
    One play-through of the game.

    Contains:
    - The engine (with its own random source)
    - The current canonical game state
    """
    session_id: str
    engine: BoardEngine
    game_state: GameState
    created_at: float
    updated_at: float = 0.0
    seed: int | None = None

    state: SessionState = SessionState.ACTIVE
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def is_active(self) -> bool:
        """Check if session still accepts moves."""
        return self.state == SessionState.ACTIVE

    def legal_moves(self) -> list[Direction]:
        return legal_moves(self.game_state)

    def apply_move(self, direction: Direction | str) -> MoveResult:
        """Apply a move and replace the session's state atomically."""
        with self._lock:
            result = self.engine.apply_move(self.game_state, direction)
            if result.moved:
                self.game_state = result.state
                self.updated_at = time.time()
                self.state = _state_for(result.state)
            return result

    def restart(self) -> GameState:
        """Start over, keeping the best score."""
        with self._lock:
            self.game_state = self.engine.reset(self.game_state.best_score)
            self.updated_at = time.time()
            self.state = SessionState.ACTIVE
            return self.game_state


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions seeded with the stored best score
    - Route moves to sessions and persist the best score
    - Clean up ended and stale sessions
    """

    def __init__(
        self,
        store: ScoreStore | None = None,
        save_games: bool = False,
        engine_factory=None,
    ):
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()
        self.store = store
        self.save_games = save_games
        self._engine_factory = engine_factory or BoardEngine.seeded

    def create_session(
        self,
        seed: int | None = None,
        resume: bool = False,
    ) -> Session:
        """
        Create a new game session.

        Args:
            seed: Seed for the session's random source (None = random)
            resume: Continue the stored game if the store has one

        Returns:
            New Session with a game ready to play
        """
        engine = self._engine_factory(seed)
        best_score = self.store.get_best_score() if self.store else 0

        game_state = None
        if resume and self.store:
            game_state = self.store.get_saved_game_state()
            if game_state is not None and game_state.board.size != engine.grid_size:
                logger.warning("Saved game has a different grid size, starting fresh")
                game_state = None

        if game_state is None:
            game_state = engine.reset(best_score)
        elif game_state.best_score < best_score:
            game_state = game_state._copy_with(best_score=best_score)

        now = time.time()
        session = Session(
            session_id=str(uuid.uuid4()),
            engine=engine,
            game_state=game_state,
            created_at=now,
            updated_at=now,
            seed=seed,
            state=_state_for(game_state),
        )

        with self._lock:
            self._sessions[session.session_id] = session
        logger.info("Created session %s (seed=%s)", session.session_id, seed)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def move(self, session_id: str, direction: Direction | str) -> MoveResult | None:
        """
        Apply a move to a session.

        Returns None if the session does not exist.
        """
        session = self.get_session(session_id)
        if not session:
            return None

        previous_best = session.game_state.best_score
        result = session.apply_move(direction)
        if result.moved:
            self._persist(session, previous_best)
        return result

    def restart(self, session_id: str) -> Session | None:
        session = self.get_session(session_id)
        if not session:
            return None
        session.restart()
        if self.store and self.save_games:
            self.store.save_game_state(session.game_state)
        return session

    def end_session(self, session_id: str) -> bool:
        """
        End a session and remove it from memory.

        Returns False if the session did not exist.
        """
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if not session:
            return False
        session.state = SessionState.ENDED
        logger.info("Ended session %s", session_id)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of sessions still accepting moves."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        Remove sessions not updated for longer than max_age.

        Returns the number of sessions removed.
        """
        current_time = time.time()
        to_remove = [
            session_id for session_id, session in list(self._sessions.items())
            if current_time - session.updated_at > max_age_seconds
        ]
        for session_id in to_remove:
            self.end_session(session_id)
        return len(to_remove)

    def _persist(self, session: Session, previous_best: int):
        if not self.store:
            return
        if session.game_state.best_score > previous_best:
            self.store.save_best_score(session.game_state.best_score)
        if self.save_games:
            self.store.save_game_state(session.game_state)


def _state_for(game_state: GameState) -> SessionState:
    if game_state.won:
        return SessionState.WON
    if game_state.game_over:
        return SessionState.GAME_OVER
    return SessionState.ACTIVE
