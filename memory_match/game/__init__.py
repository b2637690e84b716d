"""Game logic."""

from .deck import create_deck, shuffle
from .engine import GameEngine
from .rating import star_rating
from .scheduler import ManualClock, ScheduledTask, Scheduler, TaskKind
from .transitions import Effect, Transition

__all__ = [
    "Effect",
    "GameEngine",
    "ManualClock",
    "ScheduledTask",
    "Scheduler",
    "TaskKind",
    "Transition",
    "create_deck",
    "shuffle",
    "star_rating",
]
