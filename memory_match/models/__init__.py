"""Game models."""

from .card import DEFAULT_SYMBOLS, Card, CardView
from .difficulty import DEFAULT_DIFFICULTIES, Difficulty
from .game_state import GameState, GameStatus, Snapshot

__all__ = [
    "Card",
    "CardView",
    "DEFAULT_SYMBOLS",
    "Difficulty",
    "DEFAULT_DIFFICULTIES",
    "GameState",
    "GameStatus",
    "Snapshot",
]
