"""Difficulty presets."""

from pydantic import BaseModel, Field


class Difficulty(BaseModel, frozen=True):
    """Named board configuration."""

    name: str
    pairs: int = Field(gt=0)
    grid_cols: int = Field(default=4, gt=0)

    @property
    def card_count(self) -> int:
        """Get number of cards on the board."""
        return self.pairs * 2

    @property
    def grid_rows(self) -> int:
        """Get number of rows needed to lay out the board."""
        return -(-self.card_count // self.grid_cols)


DEFAULT_DIFFICULTIES: dict[str, Difficulty] = {
    "easy": Difficulty(name="Easy", pairs=6, grid_cols=3),
    "medium": Difficulty(name="Medium", pairs=8, grid_cols=4),
    "hard": Difficulty(name="Hard", pairs=12, grid_cols=4),
}
