"""
Event System - Tile events and move results.

Events describe what happened to individual tiles during one transition:
1. spawn - a new tile appeared
2. slide - a tile changed cell
3. merge - a tile moved into an equal tile and was retired

They carry enough information to animate positions and opacity
without recomputing any grid logic.
"""

from __future__ import annotations
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Union


class EventType(Enum):
    """Types of tile events."""
    SPAWN = "spawn"
    SLIDE = "slide"
    MERGE = "merge"


@dataclass(frozen=True)
class SpawnEvent:
    tile_id: int
    row: int
    col: int
    value: int

    @property
    def event_type(self) -> EventType:
        return EventType.SPAWN

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.event_type.value, **asdict(self)}


@dataclass(frozen=True)
class SlideEvent:
    tile_id: int
    from_row: int
    from_col: int
    to_row: int
    to_col: int

    @property
    def event_type(self) -> EventType:
        return EventType.SLIDE

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.event_type.value, **asdict(self)}


@dataclass(frozen=True)
class MergeEvent:
    """
    The removed tile travelled from (from_row, from_col) into the
    survivor at (to_row, to_col), which now holds new_value.

    The removed tile is already gone from the board; renderers that
    want to fade it out can do so using removed_tile_id.
    """
    survivor_tile_id: int
    removed_tile_id: int
    from_row: int
    from_col: int
    to_row: int
    to_col: int
    new_value: int

    @property
    def event_type(self) -> EventType:
        return EventType.MERGE

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.event_type.value, **asdict(self)}


TileEvent = Union[SpawnEvent, SlideEvent, MergeEvent]


@dataclass
class MoveResult:
    """
    Result of applying a move.

    Contains:
    - The resulting state (the input state when nothing moved)
    - The tile events for the presentation layer
    - Whether any tile changed cell or merged
    """
    state: Any  # GameState
    events: list[TileEvent] = field(default_factory=list)
    moved: bool = False

    @property
    def score_delta(self) -> int:
        return sum(e.new_value for e in self.events if isinstance(e, MergeEvent))

    @property
    def merges(self) -> list[MergeEvent]:
        return [e for e in self.events if isinstance(e, MergeEvent)]

    @property
    def spawns(self) -> list[SpawnEvent]:
        return [e for e in self.events if isinstance(e, SpawnEvent)]

    @property
    def new_tile_ids(self) -> set[int]:
        return {e.tile_id for e in self.spawns}

    @property
    def merged_tile_ids(self) -> set[int]:
        return {e.survivor_tile_id for e in self.merges}

    @classmethod
    def unchanged(cls, state: Any) -> MoveResult:
        """Result for a move that did nothing."""
        return cls(state=state, events=[], moved=False)
