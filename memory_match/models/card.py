"""Card models."""

from pydantic import BaseModel

# Symbol identifiers shipped with the game. The UI maps each one to an image.
DEFAULT_SYMBOLS: list[str] = [
    "bee",
    "bug",
    "cat",
    "duck",
    "elephant",
    "fox",
    "giraffe",
    "hippo",
    "koala",
    "monkey",
    "pen",
    "rabbit",
    "turtle",
    "sheep",
]


class Card(BaseModel):
    """Single card on the board.

    ``id`` is the card's position on the board (0..2N-1). A matched card
    stays revealed for the rest of the round.
    """

    id: int
    symbol: str
    revealed: bool = False
    matched: bool = False

    @property
    def is_face_up(self) -> bool:
        """Check if the card shows its symbol."""
        return self.revealed or self.matched

    def to_view(self) -> "CardView":
        """Get the read-only view exposed to the UI."""
        return CardView(
            id=self.id,
            symbol=self.symbol if self.is_face_up else None,
            revealed=self.revealed,
            matched=self.matched,
        )

    def __str__(self) -> str:
        if self.matched:
            return f"({self.symbol})"
        if self.revealed:
            return self.symbol
        return "##"


class CardView(BaseModel, frozen=True):
    """Card as seen by the player. ``symbol`` is None while face-down."""

    id: int
    symbol: str | None = None
    revealed: bool = False
    matched: bool = False
