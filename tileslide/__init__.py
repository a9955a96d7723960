"""
Tileslide - Sliding-tile puzzle engine (2048)

A deterministic, side-effect-free engine for the 2048 puzzle. It provides:
- Immutable board and game state
- Swipe transitions with tile events for animation
- Win and terminal (no moves left) detection
- Sessions, a REST API and a terminal client around the engine
"""

__version__ = "0.1.0"
