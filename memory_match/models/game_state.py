"""Game state models."""

from enum import Enum

from pydantic import BaseModel, Field

from .card import Card, CardView
from .difficulty import Difficulty


class GameStatus(str, Enum):
    """Lifecycle of a round."""

    IDLE = "idle"  # Dealt, no card selected yet
    ACTIVE = "active"  # Timer running
    WON = "won"  # All pairs matched, timer stopped


class GameState(BaseModel):
    """Complete state of one round.

    Transitions never mutate a state in place; they return an updated copy
    (see ``memory_match.game.transitions``).
    """

    difficulty_key: str
    difficulty: Difficulty
    cards: list[Card] = Field(default_factory=list)

    # Positions revealed this turn and not yet resolved (at most two)
    pending: list[int] = Field(default_factory=list)
    locked: bool = False  # Evaluation in progress

    status: GameStatus = GameStatus.IDLE
    moves: int = 0
    elapsed: int = 0  # Seconds
    matched_pairs: int = 0

    # Bumped on every deal; delayed tasks from older generations are ignored
    generation: int = 0
    round_number: int = 0

    @property
    def total_pairs(self) -> int:
        """Get number of pairs on the board."""
        return self.difficulty.pairs

    @property
    def is_complete(self) -> bool:
        """Check if every pair has been matched."""
        return self.matched_pairs > 0 and self.matched_pairs == self.total_pairs

    def card_at(self, position: int) -> Card | None:
        """Get the card at a board position, or None if out of range."""
        if 0 <= position < len(self.cards):
            return self.cards[position]
        return None

    def __str__(self) -> str:
        return (
            f"Round {self.round_number} [{self.status.value}] "
            f"{self.difficulty.name}: {self.matched_pairs}/{self.total_pairs} pairs, "
            f"{self.moves} moves, {self.elapsed}s"
        )


class Snapshot(BaseModel, frozen=True):
    """Read-only view of the game handed to the rendering layer."""

    cards: tuple[CardView, ...]
    status: GameStatus
    moves: int
    elapsed: int
    matched_pairs: int
    total_pairs: int
    difficulty_key: str
    difficulty_name: str
    grid_cols: int
    locked: bool
    round_number: int
    stars: int | None = None  # Only set once the round is won
