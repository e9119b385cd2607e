"""
Reprint Grouping Engine.

Groups resolved cards by canonical name and checks each group against
its per-name copy limit.

INVARIANTS:
- Group key is the normalized card name (variant suffix, diacritics
  and case removed); printings are kept in input order
- copy_limit is a pure function of (game, basic resource, singleton);
  groups are rebuilt on every call, never cached across formats
"""

from collections.abc import Sequence

from decksmith.config import (
    BASIC_RESOURCE_NOMINAL_LIMIT,
    POKEMON_COPY_LIMIT,
    RIFTBOUND_COPY_LIMIT,
    SINGLETON_COPY_LIMIT,
)
from decksmith.models.card import ResolvedCard
from decksmith.models.deck import CardGroup, compute_group_status
from decksmith.models.game import SINGLETON_FORMATS, DeckFormat, Tcg
from decksmith.services.card_traits import normalize_card_name


def copy_limit(tcg: Tcg, is_basic_energy: bool, singleton: bool) -> int:
    """
    Per-name copy cap.

    Basic resources report a nominal cap; their groups are always
    "unlimited" regardless of count.
    """
    if is_basic_energy:
        return BASIC_RESOURCE_NOMINAL_LIMIT
    if singleton:
        return SINGLETON_COPY_LIMIT
    if tcg == Tcg.RIFTBOUND:
        return RIFTBOUND_COPY_LIMIT
    return POKEMON_COPY_LIMIT


def group_reprints(
    cards: Sequence[ResolvedCard],
    tcg: Tcg,
    fmt: DeckFormat | None = None,
) -> list[CardGroup]:
    """
    Group printings of the same card.

    Args:
        cards: Resolved cards in input order
        tcg: Game the deck belongs to
        fmt: Active format; singleton formats cap groups at one copy

    Returns:
        Groups in order of first appearance
    """
    singleton = fmt in SINGLETON_FORMATS
    printings: dict[str, list[ResolvedCard]] = {}
    for card in cards:
        printings.setdefault(normalize_card_name(card.name), []).append(card)

    groups: list[CardGroup] = []
    for key, members in printings.items():
        total = sum(c.quantity for c in members)
        basic = any(c.is_basic_energy for c in members)
        limit = copy_limit(tcg, basic, singleton)
        groups.append(
            CardGroup(
                key=key,
                name=members[0].name,
                cards=tuple(members),
                total_quantity=total,
                limit=limit,
                is_basic_energy=basic,
                status=compute_group_status(total, limit, basic),
            )
        )
    return groups
