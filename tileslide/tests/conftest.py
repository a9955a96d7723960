"""
Pytest fixtures for Tileslide tests.
"""

import pytest

from ..engine_core.engine import BoardEngine
from ..engine_core.state import Board, GameState
from ..session import SessionManager
from ..storage import ScoreStore


class ScriptedRandom:
    """
    Random source that replays scripted values.

    `rolls` feed random() and `picks` feed randrange(n); both cycle.
    A negative pick counts from the end, so -1 always picks the last
    empty cell in row-major order.
    """

    def __init__(self, rolls=(0.0,), picks=(-1,)):
        self.rolls = list(rolls)
        self.picks = list(picks)
        self._roll_idx = 0
        self._pick_idx = 0

    def random(self) -> float:
        value = self.rolls[self._roll_idx % len(self.rolls)]
        self._roll_idx += 1
        return value

    def randrange(self, n: int) -> int:
        pick = self.picks[self._pick_idx % len(self.picks)]
        self._pick_idx += 1
        return pick if pick >= 0 else n + pick


def make_state(rows, **kwargs) -> GameState:
    """Game state for a grid of values (None for empty)."""
    return GameState(board=Board.from_rows(rows), **kwargs)


_ = None


@pytest.fixture
def scripted_rng() -> ScriptedRandom:
    """Spawns a 2 on the last empty cell."""
    return ScriptedRandom()


@pytest.fixture
def engine(scripted_rng) -> BoardEngine:
    """Engine with deterministic spawns."""
    return BoardEngine(rng=scripted_rng)


@pytest.fixture
def seeded_engine() -> BoardEngine:
    return BoardEngine.seeded(1234)


@pytest.fixture
def store(tmp_path) -> ScoreStore:
    """Score store writing to a temporary directory."""
    return ScoreStore(data_dir=tmp_path / "data")


@pytest.fixture
def manager(store) -> SessionManager:
    return SessionManager(store=store)
