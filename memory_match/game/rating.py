"""Star rating."""

MAX_STARS = 3

# Minimum pairs-per-move efficiency for each rating
THREE_STAR_EFFICIENCY = 0.8
TWO_STAR_EFFICIENCY = 0.6


def efficiency(pairs: int, moves: int) -> float | None:
    """Get pairs per move, or None before the first move."""
    if moves <= 0:
        return None
    return pairs / moves


def star_rating(pairs: int, moves: int) -> int | None:
    """Rate a finished round from 1 to 3 stars.

    Args:
        pairs: Total pairs on the board.
        moves: Pair flips taken.

    Returns:
        Star count, or None if no move has been made.
    """
    value = efficiency(pairs, moves)
    if value is None:
        return None
    if value >= THREE_STAR_EFFICIENCY:
        return 3
    if value >= TWO_STAR_EFFICIENCY:
        return 2
    return 1
