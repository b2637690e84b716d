"""Game logger for detailed game replay."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, TextIO

from memory_match.config import Config, GameLogConfig
from memory_match.models.game_state import GameState

from .formatters import format_board, format_layout


class GameLogger:
    """Logger for game events in JSONL format.

    Each line in the output file is a JSON object representing one event.
    This allows step-by-step replay of a session.
    """

    def __init__(self, config: GameLogConfig | None = None):
        """Initialize game logger.

        Args:
            config: Logging configuration. If None, logging is disabled.
        """
        self.config = config or GameLogConfig()
        self._file: TextIO | None = None

    def __enter__(self) -> "GameLogger":
        """Context manager entry."""
        if self.config.enabled and self.config.output_path:
            path = Path(self.config.output_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(path, "a", encoding="utf-8")
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()

    def close(self) -> None:
        """Close the log file."""
        if self._file:
            self._file.close()
            self._file = None

    def _write(self, event: dict[str, Any]) -> None:
        """Write an event to the log file.

        Args:
            event: Event dictionary to write as JSON.
        """
        if self._file:
            self._file.write(json.dumps(event, ensure_ascii=False) + "\n")
            self._file.flush()

    def log_session_start(self, config: Config) -> None:
        """Log session start with the active presets.

        Args:
            config: Configuration the session runs with.
        """
        self._write({
            "type": "session_start",
            "timestamp": datetime.now().isoformat(),
            "difficulty": config.game.difficulty,
            "seed": config.game.seed,
            "difficulties": {
                key: d.model_dump() for key, d in config.game.difficulties.items()
            },
        })

    def log_round_start(self, state: GameState) -> None:
        """Log a fresh deal, including the hidden layout.

        Args:
            state: Newly dealt round.
        """
        self._write({
            "type": "round_start",
            "round": state.round_number,
            "generation": state.generation,
            "difficulty": state.difficulty_key,
            "pairs": state.total_pairs,
            "grid_cols": state.difficulty.grid_cols,
            "layout": format_layout(state.cards),
        })

    def log_select(self, state: GameState, position: int, accepted: bool) -> None:
        """Log a card selection.

        Args:
            state: State after the selection.
            position: Selected position.
            accepted: Whether the card was turned over.
        """
        self._write({
            "type": "select",
            "round": state.round_number,
            "position": position,
            "accepted": accepted,
            "status": state.status.value,
            "board": format_board(state.cards),
        })

    def log_evaluate(
        self,
        state: GameState,
        first: int,
        second: int,
        matched: bool,
    ) -> None:
        """Log the second card of a turn being turned over.

        Args:
            state: State after the second selection (locked).
            first: First position of the pair.
            second: Second position of the pair.
            matched: Whether the symbols are equal.
        """
        self._write({
            "type": "evaluate",
            "round": state.round_number,
            "move": state.moves,
            "positions": [first, second],
            "match": matched,
        })

    def log_resolve(self, state: GameState, positions: list[int], matched: bool) -> None:
        """Log a delayed match or mismatch resolution.

        Args:
            state: State after resolution.
            positions: Positions that were resolved.
            matched: True if they were marked matched, False if hidden again.
        """
        self._write({
            "type": "resolve",
            "round": state.round_number,
            "positions": positions,
            "match": matched,
            "matched_pairs": state.matched_pairs,
            "elapsed": state.elapsed,
            "board": format_board(state.cards),
        })

    def log_round_end(self, state: GameState, stars: int | None) -> None:
        """Log a won round.

        Args:
            state: Final state of the round.
            stars: Star rating.
        """
        self._write({
            "type": "round_end",
            "round": state.round_number,
            "moves": state.moves,
            "elapsed": state.elapsed,
            "stars": stars,
        })

    def log_session_end(self, rounds_played: int, rounds_won: int) -> None:
        """Log session end.

        Args:
            rounds_played: Rounds dealt during the session.
            rounds_won: Rounds completed.
        """
        self._write({
            "type": "session_end",
            "timestamp": datetime.now().isoformat(),
            "rounds_played": rounds_played,
            "rounds_won": rounds_won,
        })
