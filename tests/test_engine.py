"""Tests for the game engine."""

import random
from collections import defaultdict

import pytest

from memory_match.config import Config, GameConfig
from memory_match.game.engine import GameEngine
from memory_match.game.scheduler import ManualClock
from memory_match.models.game_state import GameState, GameStatus


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def engine(clock):
    return GameEngine(Config(), clock=clock, rng=random.Random(42))


def advance(engine: GameEngine, clock: ManualClock, seconds: float) -> int:
    """Move time forward and run whatever fell due."""
    clock.advance(seconds)
    return engine.poll()


def pairs_of(state: GameState) -> list[tuple[int, int]]:
    """Get positions of every unmatched pair."""
    by_symbol: dict[str, list[int]] = defaultdict(list)
    for card in state.cards:
        if not card.matched:
            by_symbol[card.symbol].append(card.id)
    return [tuple(positions) for positions in by_symbol.values()]


def find_mismatch(state: GameState) -> tuple[int, int]:
    """Get two unmatched positions holding different symbols."""
    pairs = pairs_of(state)
    return pairs[0][0], pairs[1][0]


def play_pair(engine: GameEngine, clock: ManualClock, first: int, second: int) -> None:
    engine.select_card(first)
    engine.select_card(second)
    advance(engine, clock, engine.timing.match_delay)


class TestInitialRound:
    """Tests for the first deal."""

    def test_starts_idle(self, engine):
        """Test the initial snapshot."""
        snap = engine.snapshot()

        assert snap.status == GameStatus.IDLE
        assert snap.difficulty_key == "easy"
        assert snap.total_pairs == 6
        assert snap.grid_cols == 3
        assert len(snap.cards) == 12
        assert all(c.symbol is None for c in snap.cards)
        assert snap.moves == snap.elapsed == snap.matched_pairs == 0
        assert snap.stars is None
        assert snap.round_number == 1

    def test_seeded_deal_is_reproducible(self, clock):
        """Test that the same seed deals the same board."""
        first = GameEngine(Config(), clock=clock, rng=random.Random(5))
        second = GameEngine(Config(), clock=clock, rng=random.Random(5))
        assert [c.symbol for c in first.state.cards] == [c.symbol for c in second.state.cards]

    def test_config_seed(self, clock):
        """Test seeding through configuration."""
        config = Config(game=GameConfig(seed=11))
        first = GameEngine(config, clock=clock)
        second = GameEngine(config, clock=clock)
        assert [c.symbol for c in first.state.cards] == [c.symbol for c in second.state.cards]


class TestSelection:
    """Tests for selecting cards."""

    def test_match_resolves_after_delay(self, engine, clock):
        """Test that a pair is marked matched after the match delay."""
        first, second = pairs_of(engine.state)[0]
        assert engine.select_card(first)
        assert engine.select_card(second)

        snap = engine.snapshot()
        assert snap.locked
        assert snap.moves == 1
        assert snap.cards[first].symbol is not None

        advance(engine, clock, 0.25)
        assert engine.snapshot().locked

        advance(engine, clock, 0.25)
        snap = engine.snapshot()
        assert not snap.locked
        assert snap.matched_pairs == 1
        assert snap.cards[first].matched and snap.cards[second].matched
        assert snap.moves == 1

    def test_mismatch_hides_after_delay(self, engine, clock):
        """Test that a mismatched pair turns back over after the mismatch delay."""
        first, second = find_mismatch(engine.state)
        engine.select_card(first)
        engine.select_card(second)

        advance(engine, clock, 0.5)
        snap = engine.snapshot()
        assert snap.locked
        assert snap.cards[first].revealed

        advance(engine, clock, 0.5)
        snap = engine.snapshot()
        assert not snap.locked
        assert snap.cards[first].symbol is None
        assert snap.cards[second].symbol is None
        assert snap.matched_pairs == 0
        assert snap.moves == 1

    def test_third_selection_rejected(self, engine, clock):
        """Test that the evaluation lock drops further selections."""
        first, second = find_mismatch(engine.state)
        third = next(i for i in range(12) if i not in (first, second))
        engine.select_card(first)
        engine.select_card(second)

        before = engine.snapshot()
        assert not engine.select_card(third)
        assert engine.snapshot() == before

    def test_selection_after_lock_expires(self, engine, clock):
        """Test that selecting after the delay resolves first, then accepts."""
        first, second = find_mismatch(engine.state)
        engine.select_card(first)
        engine.select_card(second)

        clock.advance(1.0)
        # No explicit poll: the selection runs due work first
        assert engine.select_card(first)
        assert engine.state.pending == [first]

    def test_reselecting_revealed_card_is_noop(self, engine):
        """Test that selecting a face-up card changes nothing."""
        engine.select_card(0)
        before = engine.snapshot()
        assert not engine.select_card(0)
        assert engine.snapshot() == before

    def test_reselecting_matched_card_is_noop(self, engine, clock):
        """Test that selecting a matched card changes nothing."""
        first, second = pairs_of(engine.state)[0]
        play_pair(engine, clock, first, second)

        before = engine.snapshot()
        assert not engine.select_card(first)
        assert engine.snapshot() == before

    def test_invalid_position_ignored(self, engine):
        """Test that positions off the board are ignored."""
        engine.select_card(0)
        before = engine.snapshot()
        assert not engine.select_card(12)
        assert not engine.select_card(-1)
        assert engine.snapshot() == before


class TestTimer:
    """Tests for elapsed time."""

    def test_idle_does_not_tick(self, engine, clock):
        """Test that time does not count before the first selection."""
        advance(engine, clock, 5)
        assert engine.snapshot().elapsed == 0

    def test_ticks_once_per_second(self, engine, clock):
        """Test that an active round counts seconds."""
        engine.select_card(0)
        advance(engine, clock, 0.5)
        assert engine.snapshot().elapsed == 0
        advance(engine, clock, 0.5)
        assert engine.snapshot().elapsed == 1
        advance(engine, clock, 3)
        assert engine.snapshot().elapsed == 4
        assert engine.snapshot().status == GameStatus.ACTIVE


class TestWin:
    """Tests for finishing a round."""

    def test_full_round(self, engine, clock):
        """Test win, frozen timer and automatic re-deal."""
        ended = []
        engine.set_callbacks(on_round_end=ended.append)

        for first, second in pairs_of(engine.state):
            play_pair(engine, clock, first, second)

        snap = engine.snapshot()
        assert snap.status == GameStatus.WON
        assert snap.matched_pairs == 6
        assert snap.moves == 6
        assert snap.stars == 3
        assert all(c.matched for c in snap.cards)
        assert engine.rounds_won == 1
        assert len(ended) == 1 and ended[0].stars == 3

        # Timer is frozen while the win is shown
        frozen = snap.elapsed
        advance(engine, clock, 1.0)
        snap = engine.snapshot()
        assert snap.status == GameStatus.WON
        assert snap.elapsed == frozen

        # New round dealt after the win delay
        advance(engine, clock, 0.25)
        snap = engine.snapshot()
        assert snap.status == GameStatus.IDLE
        assert snap.round_number == 2
        assert snap.difficulty_key == "easy"
        assert snap.moves == snap.elapsed == snap.matched_pairs == 0
        assert snap.stars is None
        assert all(c.symbol is None for c in snap.cards)

    def test_rating_reflects_moves(self, engine, clock):
        """Test that wasted moves lower the rating."""
        for _ in range(4):
            first, second = find_mismatch(engine.state)
            engine.select_card(first)
            engine.select_card(second)
            advance(engine, clock, engine.timing.mismatch_delay)

        for first, second in pairs_of(engine.state):
            play_pair(engine, clock, first, second)

        snap = engine.snapshot()
        assert snap.status == GameStatus.WON
        assert snap.moves == 10
        assert snap.stars == 2  # 6 / 10 = 0.6


class TestReset:
    """Tests for reset and difficulty changes."""

    def test_set_difficulty(self, engine):
        """Test switching to a larger board."""
        engine.set_difficulty("hard")
        snap = engine.snapshot()
        assert snap.difficulty_key == "hard"
        assert len(snap.cards) == 24
        assert snap.grid_cols == 4
        assert snap.round_number == 2

    def test_unknown_difficulty(self, engine):
        """Test that unknown presets are rejected."""
        with pytest.raises(ValueError):
            engine.set_difficulty("impossible")
        assert engine.snapshot().difficulty_key == "easy"

    def test_difficulty_change_mid_evaluation(self, engine, clock):
        """Test that a pending resolution cannot touch the next round."""
        first, second = find_mismatch(engine.state)
        engine.select_card(first)
        engine.select_card(second)
        generation = engine.state.generation

        engine.set_difficulty("medium")
        assert engine.state.generation == generation + 1

        assert advance(engine, clock, 3) == 0
        snap = engine.snapshot()
        assert snap.status == GameStatus.IDLE
        assert snap.elapsed == 0
        assert snap.moves == 0
        assert not snap.locked
        assert all(not c.revealed for c in snap.cards)

    def test_stale_tasks_dropped_at_fire_time(self, engine, clock):
        """Test the generation check even if old tasks are still queued."""
        first, second = pairs_of(engine.state)[0]
        engine.select_card(first)
        engine.select_card(second)

        # Swap the round without purging the queue
        engine.state = engine.state.model_copy(update={"generation": 99})
        assert advance(engine, clock, 2) == 0
        assert engine.state.matched_pairs == 0

    def test_reset_mid_round(self, engine, clock):
        """Test that reset deals a fresh round at the same difficulty."""
        engine.set_difficulty("medium")
        first, second = pairs_of(engine.state)[0]
        play_pair(engine, clock, first, second)
        advance(engine, clock, 2)

        engine.reset()
        snap = engine.snapshot()
        assert snap.difficulty_key == "medium"
        assert snap.status == GameStatus.IDLE
        assert snap.matched_pairs == snap.moves == snap.elapsed == 0

        advance(engine, clock, 5)
        assert engine.snapshot().elapsed == 0

    def test_win_redeal_cancelled_by_reset(self, engine, clock):
        """Test that resetting during the win banner deals only once."""
        for first, second in pairs_of(engine.state):
            play_pair(engine, clock, first, second)
        assert engine.snapshot().status == GameStatus.WON

        engine.reset()
        round_number = engine.snapshot().round_number
        advance(engine, clock, 2)
        assert engine.snapshot().round_number == round_number


class TestCallbacks:
    """Tests for change notifications."""

    def test_change_events(self, engine, clock):
        """Test the events reported to the display."""
        events = []
        engine.set_callbacks(on_change=lambda event, snap: events.append(event))

        first, second = find_mismatch(engine.state)
        engine.select_card(first)
        engine.select_card(second)
        advance(engine, clock, 1.0)
        engine.reset()

        assert events == ["select", "select", "tick", "resolve_mismatch", "new_round"]

    def test_rejected_selection_not_reported(self, engine):
        """Test that no-op selections do not trigger a redraw."""
        engine.select_card(0)
        events = []
        engine.set_callbacks(on_change=lambda event, snap: events.append(event))
        engine.select_card(0)
        assert events == []

    def test_handler_may_select_during_delayed_work(self, engine, clock):
        """Test that a change handler can turn over a card after a resolution."""
        first, second = find_mismatch(engine.state)
        events = []

        def on_change(event, snap):
            events.append(event)
            if event == "resolve_mismatch":
                assert engine.select_card(first)

        engine.set_callbacks(on_change=on_change)
        engine.select_card(first)
        engine.select_card(second)
        advance(engine, clock, 1.0)

        assert events == ["select", "select", "tick", "resolve_mismatch", "select"]
        assert engine.state.pending == [first]
        assert [t.due for t in engine.scheduler.pending()] == [2.0]

        advance(engine, clock, 1.0)
        assert engine.snapshot().elapsed == 2
