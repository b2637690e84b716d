"""Game engine for Memory Match."""

from __future__ import annotations

import logging
import random
from typing import Callable

from memory_match.config import Config
from memory_match.logging import GameLogger
from memory_match.models.game_state import GameState, GameStatus, Snapshot

from .rating import star_rating
from .scheduler import Clock, ScheduledTask, Scheduler, TaskKind
from .transitions import (
    Transition,
    new_round,
    resolve_match,
    resolve_mismatch,
    select_card,
    tick,
)

logger = logging.getLogger(__name__)


class GameEngine:
    """Single-player controller over one round at a time.

    The engine is not thread-safe: all calls are expected from one event
    loop. Delayed work (timer ticks, match resolution, re-deal after a win)
    only runs when ``poll`` is called, or implicitly at the start of
    ``select_card``.
    """

    def __init__(
        self,
        config: Config | None = None,
        game_logger: GameLogger | None = None,
        clock: Clock | None = None,
        rng: random.Random | None = None,
    ):
        """Initialize game engine and deal the first round.

        Args:
            config: Configuration (uses defaults if not provided)
            game_logger: GameLogger instance for event logging
            clock: Time source in seconds (default: time.monotonic)
            rng: Random source (default: seeded from config.game.seed)
        """
        self.config = config or Config()
        self.timing = self.config.timing
        self.game_logger = game_logger
        self.rng = rng or random.Random(self.config.game.seed)
        self.scheduler = Scheduler(clock)

        self.rounds_won = 0

        self._on_change: Callable[[str, Snapshot], None] | None = None
        self._on_round_end: Callable[[Snapshot], None] | None = None

        # Callbacks raised while due work runs are held until it finishes
        self._polling = False
        self._deferred: list[tuple[Callable[..., None], tuple]] = []

        if self.game_logger:
            self.game_logger.log_session_start(self.config)

        self.state: GameState = self._deal(self.config.game.difficulty)

    def set_callbacks(
        self,
        on_change: Callable[[str, Snapshot], None] | None = None,
        on_round_end: Callable[[Snapshot], None] | None = None,
    ) -> None:
        """Set event callbacks.

        Args:
            on_change: Called after every state change (event name, snapshot)
            on_round_end: Called when a round is won (final snapshot)

        Callbacks triggered by delayed work run after ``poll`` has finished
        that work, so they may call back into the engine.
        """
        self._on_change = on_change
        self._on_round_end = on_round_end

    @property
    def difficulty_keys(self) -> list[str]:
        """Get available difficulty identifiers."""
        return list(self.config.game.difficulties)

    def select_card(self, position: int) -> bool:
        """Handle "player selects card at position".

        Args:
            position: Board position (card id)

        Returns:
            True if the card was turned over
        """
        self.poll()

        previous = self.state
        transition = select_card(previous, position, self.timing)
        self._apply(transition)

        if self.game_logger:
            self.game_logger.log_select(self.state, position, transition.accepted)

        if transition.accepted:
            card = self.state.cards[position]
            logger.debug(f"Selected card {position} ({card.symbol})")
            if self.state.locked:
                first, second = self.state.pending
                matched = self.state.cards[first].symbol == self.state.cards[second].symbol
                logger.debug(
                    f"Move {self.state.moves}: {first} vs {second} -> "
                    f"{'match' if matched else 'mismatch'}"
                )
                if self.game_logger:
                    self.game_logger.log_evaluate(self.state, first, second, matched)

        if transition.state is not previous:
            self._notify("select")
        return transition.accepted

    def set_difficulty(self, key: str) -> None:
        """Switch difficulty and deal a new round.

        Raises:
            ValueError: If ``key`` is not a configured difficulty.
        """
        if key not in self.config.game.difficulties:
            raise ValueError(
                f"Unknown difficulty {key!r} (choose from {', '.join(self.difficulty_keys)})"
            )
        self.state = self._deal(key, self.state)
        self._notify("new_round")

    def reset(self) -> None:
        """Deal a new round at the current difficulty."""
        self.state = self._deal(self.state.difficulty_key, self.state)
        self._notify("new_round")

    def poll(self) -> int:
        """Run delayed work that has fallen due.

        Returns:
            Number of tasks applied (stale tasks are not counted)
        """
        applied = 0

        def handle(task: ScheduledTask) -> None:
            nonlocal applied
            if self._fire(task):
                applied += 1

        self._polling = True
        try:
            self.scheduler.run_due(handle)
        finally:
            self._polling = False

        deferred, self._deferred = self._deferred, []
        for callback, args in deferred:
            callback(*args)
        return applied

    def snapshot(self) -> Snapshot:
        """Get a read-only view of the current round."""
        state = self.state
        stars = None
        if state.status == GameStatus.WON:
            stars = star_rating(state.total_pairs, state.moves)
        return Snapshot(
            cards=tuple(c.to_view() for c in state.cards),
            status=state.status,
            moves=state.moves,
            elapsed=state.elapsed,
            matched_pairs=state.matched_pairs,
            total_pairs=state.total_pairs,
            difficulty_key=state.difficulty_key,
            difficulty_name=state.difficulty.name,
            grid_cols=state.difficulty.grid_cols,
            locked=state.locked,
            round_number=state.round_number,
            stars=stars,
        )

    def end_session(self) -> None:
        """Record the end of the session in the game log."""
        logger.info(
            f"Session ended after {self.state.round_number} round(s), {self.rounds_won} won"
        )
        if self.game_logger:
            self.game_logger.log_session_end(self.state.round_number, self.rounds_won)

    def _deal(self, key: str, previous: GameState | None = None) -> GameState:
        """Deal a round and invalidate everything scheduled for earlier ones."""
        difficulty = self.config.game.difficulties[key]
        state = new_round(key, difficulty, self.config.game.symbols, self.rng, previous)
        self.scheduler.discard_before(state.generation)

        logger.info(
            f"Round {state.round_number}: {difficulty.name} "
            f"({difficulty.pairs} pairs, generation {state.generation})"
        )
        if self.game_logger:
            self.game_logger.log_round_start(state)
        return state

    def _apply(self, transition: Transition) -> None:
        """Adopt the transition's state and schedule its effects."""
        self.state = transition.state
        for effect in transition.effects:
            self.scheduler.schedule(effect.kind, effect.delay, self.state.generation)

    def _fire(self, task: ScheduledTask) -> bool:
        """Apply a due task to the current round.

        Returns:
            False if the task belonged to a superseded round
        """
        if task.generation != self.state.generation:
            logger.debug(
                f"Dropped stale {task.kind.value} task "
                f"(generation {task.generation}, current {self.state.generation})"
            )
            return False

        before = self.state
        if task.kind == TaskKind.TICK:
            self._apply(tick(self.state, self.timing))
        elif task.kind == TaskKind.RESOLVE_MATCH:
            positions = list(self.state.pending)
            self._apply(resolve_match(self.state, self.timing))
            if self.game_logger:
                self.game_logger.log_resolve(self.state, positions, matched=True)
            if self.state.status == GameStatus.WON:
                self._finish_round()
        elif task.kind == TaskKind.RESOLVE_MISMATCH:
            positions = list(self.state.pending)
            self._apply(resolve_mismatch(self.state))
            if self.game_logger:
                self.game_logger.log_resolve(self.state, positions, matched=False)
        elif task.kind == TaskKind.NEW_ROUND:
            self.state = self._deal(self.state.difficulty_key, self.state)
            self._notify("new_round")
            return True

        if self.state is not before:
            self._notify(task.kind.value)
        return True

    def _finish_round(self) -> None:
        """Bookkeeping for a won round."""
        self.rounds_won += 1
        snapshot = self.snapshot()
        logger.info(
            f"Round {self.state.round_number} won in {self.state.moves} moves, "
            f"{self.state.elapsed}s ({snapshot.stars} stars)"
        )
        if self.game_logger:
            self.game_logger.log_round_end(self.state, snapshot.stars)
        if self._on_round_end:
            self._emit(self._on_round_end, snapshot)

    def _notify(self, event: str) -> None:
        if self._on_change:
            self._emit(self._on_change, event, self.snapshot())

    def _emit(self, callback: Callable[..., None], *args: object) -> None:
        """Run a callback now, or after the current poll if one is running."""
        if self._polling:
            self._deferred.append((callback, args))
        else:
            callback(*args)
