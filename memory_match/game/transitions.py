"""Pure state transitions.

Each function takes a ``GameState`` and returns a ``Transition``: the next
state plus the delayed tasks the caller must schedule. Input states are never
mutated, so transitions can be tested without a clock or a UI.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Sequence

from memory_match.config import TimingConfig
from memory_match.models.difficulty import Difficulty
from memory_match.models.game_state import GameState, GameStatus

from .deck import create_deck
from .scheduler import TaskKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Effect:
    """Request to run a task of ``kind`` after ``delay`` seconds."""

    kind: TaskKind
    delay: float


@dataclass(frozen=True)
class Transition:
    """Result of applying an event to a state."""

    state: GameState
    effects: tuple[Effect, ...] = ()
    accepted: bool = True


def new_round(
    difficulty_key: str,
    difficulty: Difficulty,
    symbols: Sequence[str],
    rng: random.Random,
    previous: GameState | None = None,
) -> GameState:
    """Deal a fresh round.

    Counters, pending selections and the lock start from zero. The generation
    is one past the previous round's so its outstanding tasks become stale.

    Args:
        difficulty_key: Preset identifier.
        difficulty: Preset to deal.
        symbols: Symbol alphabet.
        rng: Random source.
        previous: Round being replaced, if any.
    """
    generation = previous.generation + 1 if previous else 1
    round_number = previous.round_number + 1 if previous else 1
    return GameState(
        difficulty_key=difficulty_key,
        difficulty=difficulty,
        cards=create_deck(difficulty.pairs, symbols, rng),
        generation=generation,
        round_number=round_number,
    )


def _rejection_reason(state: GameState, position: int) -> str | None:
    if state.status == GameStatus.WON:
        return "round already won"
    if state.locked:
        return "evaluation in progress"
    if len(state.pending) >= 2:
        return "two cards already pending"
    card = state.card_at(position)
    if card is None:
        return "no such card"
    if card.matched:
        return "card already matched"
    if card.revealed:
        return "card already revealed"
    return None


def select_card(state: GameState, position: int, timing: TimingConfig) -> Transition:
    """Apply "player selects card at ``position``".

    The first selection of a round starts the timer. Invalid selections leave
    the board untouched. The second card of a turn counts a move, locks input
    and schedules the match or mismatch resolution.
    """
    effects: list[Effect] = []

    if state.status == GameStatus.IDLE:
        state = state.model_copy(deep=True)
        state.status = GameStatus.ACTIVE
        effects.append(Effect(TaskKind.TICK, timing.tick_interval))

    reason = _rejection_reason(state, position)
    if reason:
        logger.debug(f"Selection {position} rejected: {reason}")
        return Transition(state, tuple(effects), accepted=False)

    state = state.model_copy(deep=True)
    state.cards[position].revealed = True
    state.pending.append(position)

    if len(state.pending) == 2:
        state.moves += 1
        state.locked = True
        first, second = (state.cards[p] for p in state.pending)
        if first.symbol == second.symbol:
            effects.append(Effect(TaskKind.RESOLVE_MATCH, timing.match_delay))
        else:
            effects.append(Effect(TaskKind.RESOLVE_MISMATCH, timing.mismatch_delay))

    return Transition(state, tuple(effects))


def resolve_match(state: GameState, timing: TimingConfig) -> Transition:
    """Mark the pending pair as matched and check for a win.

    Winning stops the timer and schedules the next deal.
    """
    if not state.locked or len(state.pending) != 2:
        return Transition(state, accepted=False)

    state = state.model_copy(deep=True)
    for position in state.pending:
        state.cards[position].matched = True
    state.matched_pairs += 1
    state.pending = []
    state.locked = False

    if state.is_complete:
        state.status = GameStatus.WON
        return Transition(state, (Effect(TaskKind.NEW_ROUND, timing.win_delay),))
    return Transition(state)


def resolve_mismatch(state: GameState) -> Transition:
    """Turn the pending pair face-down again."""
    if not state.locked or len(state.pending) != 2:
        return Transition(state, accepted=False)

    state = state.model_copy(deep=True)
    for position in state.pending:
        state.cards[position].revealed = False
    state.pending = []
    state.locked = False
    return Transition(state)


def tick(state: GameState, timing: TimingConfig) -> Transition:
    """Advance the timer by one second while the round is active."""
    if state.status != GameStatus.ACTIVE:
        return Transition(state, accepted=False)

    state = state.model_copy(deep=True)
    state.elapsed += 1
    return Transition(state, (Effect(TaskKind.TICK, timing.tick_interval),))
