"""
Delve package root.

Turn-based dungeon-crawl engine. The core (generation, field of view, combat,
monster AI and the turn state machine) is pure domain logic; rendering and
key mapping are left to callers that consume the returned state.
"""

__version__ = "0.1.0"

__all__ = [
    "dungeon",
    "fov",
    "game",
    "persistence",
]
