"""
Deck List Formatter.

THIS MODULE HANDLES OUTPUT RENDERING ONLY.

Re-serializes resolved cards into a dialect's textual form. Output is
lossless for quantities and names; anything the dialect cannot encode
(set codes in a generic list, for example) is dropped.
"""

from collections.abc import Sequence

from decksmith.models.card import ResolvedCard
from decksmith.models.game import RIFTBOUND_SLOT_CATEGORIES, CardCategory, Dialect

LIVE_SECTIONS: tuple[tuple[CardCategory, str], ...] = (
    (CardCategory.POKEMON, "Pokémon"),
    (CardCategory.TRAINER, "Trainer"),
    (CardCategory.ENERGY, "Energy"),
)

RIFTBOUND_SECTIONS: tuple[tuple[CardCategory | None, str], ...] = (
    (CardCategory.LEGEND, "Legend"),
    (None, "Main Deck"),
    (CardCategory.BATTLEFIELD, "Battlefields"),
    (CardCategory.RUNE, "Runes"),
)


def format_deck_list(cards: Sequence[ResolvedCard], dialect: Dialect) -> str:
    """
    Render cards as deck text in the given dialect.

    Args:
        cards: Resolved cards in deck order
        dialect: Target dialect

    Returns:
        Deck text that tokenizes back to the same names and quantities
    """
    if dialect == Dialect.LIVE_EXPORT:
        return _format_live(cards)
    if dialect == Dialect.POCKET_EXPORT:
        return "\n".join(_pocket_line(card) for card in cards)
    if dialect == Dialect.RIFTBOUND_EXPORT:
        return _format_riftbound(cards)
    return "\n".join(f"{card.quantity} {card.name}" for card in cards)


def _live_line(card: ResolvedCard) -> str:
    if card.set_code and card.collector_number:
        return f"{card.quantity} {card.name} {card.set_code} {card.collector_number}"
    return f"{card.quantity} {card.name}"


def _pocket_line(card: ResolvedCard) -> str:
    if card.set_code:
        return f"{card.name} ({card.set_code}) x{card.quantity}"
    return f"{card.name} x{card.quantity}"


def _format_live(cards: Sequence[ResolvedCard]) -> str:
    sectioned = {category for category, _label in LIVE_SECTIONS}

    # Cards of unknown category go first, above any header
    lines = [_live_line(c) for c in cards if c.category not in sectioned]

    for category, label in LIVE_SECTIONS:
        members = [c for c in cards if c.category == category]
        if not members:
            continue
        if lines:
            lines.append("")
        lines.append(f"{label}: {sum(c.quantity for c in members)}")
        lines.extend(_live_line(c) for c in members)

    return "\n".join(lines)


def _format_riftbound(cards: Sequence[ResolvedCard]) -> str:
    lines: list[str] = []
    for category, label in RIFTBOUND_SECTIONS:
        if category is None:
            members = [c for c in cards if c.category not in RIFTBOUND_SLOT_CATEGORIES]
        else:
            members = [c for c in cards if c.category == category]
        if not members:
            continue
        if lines:
            lines.append("")
        lines.append(f"{label}: {sum(c.quantity for c in members)}")
        lines.extend(f"{c.quantity} {c.name}" for c in members)
    return "\n".join(lines)
