"""
Gestures - Turn drag deltas and key presses into swipe directions.

The rule compares |dx| with |dy|: the larger magnitude selects the
axis and its sign selects the direction. Screen coordinates grow
downward, so a positive dy is a swipe down.
"""

from __future__ import annotations

from ..engine_core.state import Direction

# Drags of this many units or fewer on both axes are ignored
SWIPE_THRESHOLD = 10.0

KEY_BINDINGS = {
    "w": Direction.UP,
    "k": Direction.UP,
    "a": Direction.LEFT,
    "h": Direction.LEFT,
    "s": Direction.DOWN,
    "j": Direction.DOWN,
    "d": Direction.RIGHT,
    "l": Direction.RIGHT,
}


def classify_swipe(dx: float, dy: float, threshold: float = SWIPE_THRESHOLD) -> Direction | None:
    """
    Classify a drag into a direction.

    Returns None when the drag is too short to count as a swipe.
    Ties between |dx| and |dy| go to the vertical axis.
    """
    if abs(dx) <= threshold and abs(dy) <= threshold:
        return None

    if abs(dx) > abs(dy):
        return Direction.RIGHT if dx > 0 else Direction.LEFT
    return Direction.DOWN if dy > 0 else Direction.UP


def direction_for_key(key: str) -> Direction | None:
    """Map a key (wasd / hjkl / direction name) to a direction."""
    key = key.strip().lower()
    if key in KEY_BINDINGS:
        return KEY_BINDINGS[key]
    try:
        return Direction(key)
    except ValueError:
        return None
