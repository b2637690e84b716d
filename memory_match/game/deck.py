"""Deck generation."""

import random
from typing import Sequence, TypeVar

from memory_match.models.card import Card

T = TypeVar("T")


def shuffle(items: Sequence[T], rng: random.Random) -> list[T]:
    """Return a uniformly shuffled copy of ``items``.

    Fisher-Yates: walk from the end and swap each slot with a random slot at
    or before it. Every ordering is equally likely for a fair ``rng``, and the
    same seed always yields the same order.

    Args:
        items: Items to shuffle. Not modified.
        rng: Random source.

    Returns:
        New list with the items in random order.
    """
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = rng.randint(0, i)
        result[i], result[j] = result[j], result[i]
    return result


def create_deck(pairs: int, symbols: Sequence[str], rng: random.Random) -> list[Card]:
    """Deal a shuffled board of ``pairs`` pairs.

    Args:
        pairs: Number of pairs (N).
        symbols: Alphabet to draw N distinct symbols from.
        rng: Random source for symbol choice and card order.

    Returns:
        2N face-down cards; each card's id is its position.

    Raises:
        ValueError: If N is not positive or exceeds the alphabet size.
    """
    if pairs <= 0:
        raise ValueError(f"pairs must be positive, got {pairs}")
    if pairs > len(symbols):
        raise ValueError(f"cannot deal {pairs} pairs from {len(symbols)} symbols")

    chosen = shuffle(symbols, rng)[:pairs]
    faces = shuffle([s for s in chosen for _ in range(2)], rng)
    return [Card(id=i, symbol=symbol) for i, symbol in enumerate(faces)]
