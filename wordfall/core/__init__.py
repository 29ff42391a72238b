"""Core game simulation: level catalog, engine, state and snapshots."""

from wordfall.core.engine import GameEngine
from wordfall.core.levels import Level, LevelCatalog, default_catalog
from wordfall.core.snapshot import GameSnapshot, WordView
from wordfall.core.state import GameState, GameStatus, InvalidTransitionError
from wordfall.core.words import ActiveWord

__all__ = [
    "ActiveWord",
    "GameEngine",
    "GameSnapshot",
    "GameState",
    "GameStatus",
    "InvalidTransitionError",
    "Level",
    "LevelCatalog",
    "WordView",
    "default_catalog",
]
