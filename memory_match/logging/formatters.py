"""Formatters for game log output and display."""

from memory_match.models.card import Card, CardView

# Board markers for log output
HIDDEN = "?"
MATCHED_SUFFIX = "*"


def format_time(seconds: int) -> str:
    """Format seconds as minutes and zero-padded seconds.

    Args:
        seconds: Elapsed seconds.

    Returns:
        Formatted string (e.g., "1:05").
    """
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}:{secs:02d}"


def format_layout(cards: list[Card]) -> str:
    """Format the full deal to comma-separated symbols in position order.

    Args:
        cards: Cards in board order.

    Returns:
        Comma-separated symbols (e.g., "cat,bee,cat,bee").
    """
    return ",".join(c.symbol for c in cards)


def format_card(card: Card | CardView) -> str:
    """Format a card as the player sees it.

    Returns:
        Symbol if face-up (with "*" if matched), "?" if face-down.
    """
    if card.matched:
        return f"{card.symbol}{MATCHED_SUFFIX}"
    if card.revealed:
        return str(card.symbol)
    return HIDDEN


def format_board(cards: list[Card] | tuple[CardView, ...]) -> str:
    """Format the visible board to comma-separated cells.

    Returns:
        Comma-separated cells (e.g., "?,cat*,?,cat*").
    """
    return ",".join(format_card(c) for c in cards)
