"""Logging utilities and game state display."""

import logging
import sys
from typing import TYPE_CHECKING

from memory_match.game.rating import MAX_STARS
from memory_match.logging.formatters import format_time
from memory_match.models.game_state import GameStatus

if TYPE_CHECKING:
    from memory_match.models.card import CardView
    from memory_match.models.game_state import Snapshot


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


class GameDisplay:
    """Display game state to stdout."""

    def __init__(self, cell_width: int = 10, show_positions: bool = True):
        """Initialize display.

        Args:
            cell_width: Width of one board cell in characters
            show_positions: Whether to label face-down cards with their position
        """
        self.cell_width = cell_width
        self.show_positions = show_positions

    def print_separator(self) -> None:
        """Print a separator line."""
        print("=" * 60)

    def format_cell(self, card: "CardView") -> str:
        """Format a single board cell."""
        if card.matched:
            text = f"({card.symbol})"
        elif card.revealed:
            text = str(card.symbol)
        elif self.show_positions:
            text = f"[{card.id}]"
        else:
            text = "[##]"
        return text.center(self.cell_width)

    def format_stars(self, stars: int | None) -> str:
        """Format a star rating as filled and empty stars."""
        filled = stars or 0
        return "★" * filled + "☆" * (MAX_STARS - filled)

    def print_status(self, snapshot: "Snapshot") -> None:
        """Print timer, moves and matched pairs."""
        lock_str = " [WAIT]" if snapshot.locked else ""
        print(
            f"Round {snapshot.round_number} ({snapshot.difficulty_name})  "
            f"Time {format_time(snapshot.elapsed)}  "
            f"{snapshot.moves} moves  "
            f"{snapshot.matched_pairs}/{snapshot.total_pairs} pairs{lock_str}"
        )

    def print_board(self, snapshot: "Snapshot") -> None:
        """Print the board as a grid."""
        cols = snapshot.grid_cols
        cards = snapshot.cards
        for start in range(0, len(cards), cols):
            row = cards[start : start + cols]
            print("".join(self.format_cell(c) for c in row))

    def print_win(self, snapshot: "Snapshot") -> None:
        """Print the congratulations banner."""
        self.print_separator()
        print("Congratulations!")
        print(
            f"You completed the game in {format_time(snapshot.elapsed)} "
            f"with {snapshot.moves} moves!"
        )
        print(self.format_stars(snapshot.stars))
        self.print_separator()

    def render(self, snapshot: "Snapshot") -> None:
        """Print the whole game view."""
        print()
        self.print_status(snapshot)
        self.print_board(snapshot)
        if snapshot.status == GameStatus.WON:
            self.print_win(snapshot)

    def print_help(self, difficulty_keys: list[str]) -> None:
        """Print available commands."""
        print("Commands:")
        print("  <number>   turn over the card at that position")
        print("  r          new round")
        print(f"  d <level>  change difficulty ({', '.join(difficulty_keys)})")
        print("  h          show this help")
        print("  q          quit")
