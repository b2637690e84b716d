"""Delayed task queue driven by a pluggable clock."""

import heapq
import itertools
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class TaskKind(str, Enum):
    """Kinds of delayed work the engine schedules."""

    TICK = "tick"  # Timer second
    RESOLVE_MATCH = "resolve_match"
    RESOLVE_MISMATCH = "resolve_mismatch"
    NEW_ROUND = "new_round"  # Re-deal after a win


@dataclass(order=True)
class ScheduledTask:
    """Task due at ``due`` seconds on the scheduler's clock.

    ``generation`` is the round the task was scheduled for; the engine drops
    tasks whose generation no longer matches the current round.
    """

    due: float
    seq: int  # Tie-breaker: scheduling order
    kind: TaskKind = field(compare=False)
    generation: int = field(compare=False)


class ManualClock:
    """Clock that only moves when told to. Used by tests and replays."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        """Move the clock forward."""
        if seconds < 0:
            raise ValueError("clock cannot go backwards")
        self.now += seconds


class Scheduler:
    """Min-heap of scheduled tasks.

    Tasks fire once, in due order, no earlier than their due time. A task
    scheduled from inside a firing task is timed from the firing task's due
    time rather than the wall clock, so catching up after a long pause still
    yields evenly spaced tasks.
    """

    def __init__(self, clock: Clock | None = None):
        """Initialize scheduler.

        Args:
            clock: Returns the current time in seconds (default: time.monotonic)
        """
        self._clock = clock or time.monotonic
        self._queue: list[ScheduledTask] = []
        self._seq = itertools.count()
        self._firing_due: float | None = None

    def schedule(self, kind: TaskKind, delay: float, generation: int) -> ScheduledTask:
        """Queue a task ``delay`` seconds from now.

        Args:
            kind: What to run.
            delay: Seconds from now (or from the firing task's due time).
            generation: Round the task belongs to.

        Returns:
            The queued task.
        """
        base = self._firing_due if self._firing_due is not None else self._clock()
        task = ScheduledTask(
            due=base + delay,
            seq=next(self._seq),
            kind=kind,
            generation=generation,
        )
        heapq.heappush(self._queue, task)
        return task

    def run_due(self, handler: Callable[[ScheduledTask], None]) -> int:
        """Fire every task due by the current time.

        Tasks the handler schedules are fired in the same call if they also
        fall due.

        Args:
            handler: Called once per due task.

        Returns:
            Number of tasks fired.
        """
        now = self._clock()
        fired = 0
        while self._queue and self._queue[0].due <= now:
            task = heapq.heappop(self._queue)
            self._firing_due = task.due
            try:
                handler(task)
            finally:
                self._firing_due = None
            fired += 1
        return fired

    def discard_before(self, generation: int) -> int:
        """Drop queued tasks belonging to rounds older than ``generation``.

        Returns:
            Number of tasks dropped.
        """
        kept = [t for t in self._queue if t.generation >= generation]
        dropped = len(self._queue) - len(kept)
        if dropped:
            heapq.heapify(kept)
            self._queue = kept
            logger.debug(f"Discarded {dropped} task(s) older than generation {generation}")
        return dropped

    def next_due(self) -> float | None:
        """Get the due time of the earliest queued task."""
        return self._queue[0].due if self._queue else None

    def pending(self) -> list[ScheduledTask]:
        """Get queued tasks in due order."""
        return sorted(self._queue)

    def __len__(self) -> int:
        return len(self._queue)
