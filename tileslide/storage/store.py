"""
Score Store - File-based persistence for best score and saved games.

The store:
- Stores JSON files under a data directory (one file per key)
- No database required
- Is FAIL-SOFT: read/write errors are logged, never raised.
  A failed load falls back to 0 / None so gameplay is never blocked.

Keys:
- best_score   plain integer
- game_state   serialized GameState (see engine_core.serialize)
"""

from __future__ import annotations
import json
import logging
import os
import re
from pathlib import Path
from typing import Any

from ..engine_core.state import GameState
from ..engine_core.serialize import state_from_dict, state_to_dict

logger = logging.getLogger(__name__)

BEST_SCORE_KEY = "best_score"
GAME_STATE_KEY = "game_state"

_SAFE_KEY = re.compile(r"[^A-Za-z0-9_.-]")


class ScoreStore:
    """
    File-based store for the values the game keeps between runs.

    Usage:
        store = ScoreStore(data_dir="~/.tileslide")

        best = store.get_best_score()
        state = engine.reset(best)
        ...
        store.save_best_score(state.best_score)
    """

    def __init__(self, data_dir: str | Path | None = None):
        if data_dir is None:
            data_dir = os.getenv("TILESLIDE_DATA_DIR") or Path.home() / ".tileslide"
        self.data_dir = Path(data_dir).expanduser()

    # =========================================================================
    # Best score
    # =========================================================================

    def get_best_score(self) -> int:
        """Stored best score, or 0 if missing or unreadable."""
        value = self.get_data(BEST_SCORE_KEY)
        if value is None:
            return 0
        try:
            score = int(value)
        except (TypeError, ValueError):
            logger.warning("Ignoring malformed best score: %r", value)
            return 0
        return max(score, 0)

    def save_best_score(self, score: int) -> bool:
        return self.save_data(BEST_SCORE_KEY, int(score))

    # =========================================================================
    # Saved game
    # =========================================================================

    def save_game_state(self, state: GameState) -> bool:
        return self.save_data(GAME_STATE_KEY, state_to_dict(state))

    def get_saved_game_state(self) -> GameState | None:
        """Saved game, or None if missing, unreadable or invalid."""
        data = self.get_data(GAME_STATE_KEY)
        if data is None:
            return None
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed saved game")
            return None
        try:
            return state_from_dict(data)
        except ValueError as e:
            logger.warning("Ignoring invalid saved game: %s", e)
            return None

    def clear(self):
        """Remove all game data."""
        for key in (BEST_SCORE_KEY, GAME_STATE_KEY):
            self.remove_data(key)

    # =========================================================================
    # Generic key/value access
    # =========================================================================

    def save_data(self, key: str, value: Any) -> bool:
        """
        Store a value under a key.

        Strings are written as-is, anything else as JSON.
        Returns False (after logging) if the write failed.
        """
        path = self._get_path(key)
        try:
            payload = value if isinstance(value, str) else json.dumps(value)
            self.data_dir.mkdir(parents=True, exist_ok=True)
            tmp_path = path.with_suffix(".tmp")
            tmp_path.write_text(payload, encoding="utf-8")
            tmp_path.replace(path)
        except (OSError, TypeError, ValueError) as e:
            logger.error("Error saving data for key %s: %s", key, e)
            return False
        return True

    def get_data(self, key: str) -> Any:
        """
        Load the value stored under a key.

        Returns None if the key is missing or unreadable. A value that
        is not valid JSON is returned as the raw string.
        """
        path = self._get_path(key)
        if not path.exists():
            return None

        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error("Error retrieving data for key %s: %s", key, e)
            return None

        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            return raw

    def remove_data(self, key: str) -> bool:
        try:
            self._get_path(key).unlink(missing_ok=True)
        except OSError as e:
            logger.error("Error removing data for key %s: %s", key, e)
            return False
        return True

    def _get_path(self, key: str) -> Path:
        """File path for a key."""
        return self.data_dir / f"{_SAFE_KEY.sub('_', key)}.json"
