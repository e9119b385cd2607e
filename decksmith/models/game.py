"""
Game, Format and Dialect Vocabulary.

Closed enumerations shared by every pipeline stage.

INVARIANTS:
- A parse run is assigned exactly one Dialect and one Tcg
- Every DeckFormat belongs to exactly one Tcg
- Singleton formats cap non-resource cards at one copy per name
"""

from enum import Enum


class Tcg(str, Enum):
    """Supported trading card games."""

    POKEMON = "pokemon"
    RIFTBOUND = "riftbound"


class Dialect(str, Enum):
    """Textual deck-list syntaxes the importer understands."""

    LIVE_EXPORT = "live_export"  # Pokémon TCG Live: "4 Pikachu ex SVI 057"
    POCKET_EXPORT = "pocket_export"  # Pokémon TCG Pocket: "Pikachu ex x2"
    RIFTBOUND_EXPORT = "riftbound_export"  # Riftbound sections: "Legend:" / "Runes:"
    GENERIC_LIST = "generic_list"  # "4 Card Name"


class DeckFormat(str, Enum):
    """Competitive formats a deck can be validated against."""

    STANDARD = "standard"
    EXPANDED = "expanded"
    GLC = "glc"
    CONSTRUCTED = "constructed"


class CardCategory(str, Enum):
    """
    Card category as resolved or inferred.

    The first three belong to Pokémon, the rest to Riftbound.
    """

    POKEMON = "pokemon"
    TRAINER = "trainer"
    ENERGY = "energy"
    LEGEND = "legend"
    BATTLEFIELD = "battlefield"
    RUNE = "rune"
    UNIT = "unit"
    SPELL = "spell"
    GEAR = "gear"
    UNKNOWN = "unknown"


FORMAT_TCG: dict[DeckFormat, Tcg] = {
    DeckFormat.STANDARD: Tcg.POKEMON,
    DeckFormat.EXPANDED: Tcg.POKEMON,
    DeckFormat.GLC: Tcg.POKEMON,
    DeckFormat.CONSTRUCTED: Tcg.RIFTBOUND,
}

FORMAT_LABELS: dict[DeckFormat, str] = {
    DeckFormat.STANDARD: "Standard",
    DeckFormat.EXPANDED: "Expanded",
    DeckFormat.GLC: "Gym Leader Challenge",
    DeckFormat.CONSTRUCTED: "Constructed",
}

TCG_LABELS: dict[Tcg, str] = {
    Tcg.POKEMON: "Pokémon TCG",
    Tcg.RIFTBOUND: "Riftbound",
}

SINGLETON_FORMATS: frozenset[DeckFormat] = frozenset({DeckFormat.GLC})

# Riftbound categories that occupy a fixed structural slot (everything else is main deck)
RIFTBOUND_SLOT_CATEGORIES: frozenset[CardCategory] = frozenset(
    {CardCategory.LEGEND, CardCategory.BATTLEFIELD, CardCategory.RUNE}
)


def parse_format_choice(value: str | None) -> DeckFormat | None:
    """
    Turn a user-facing format choice into an explicit override.

    "auto", empty and None mean "detect the format"; anything else must
    name a DeckFormat.

    Raises:
        ValueError: If the value names no known format
    """
    if value is None:
        return None

    normalized = value.strip().lower()
    if normalized in ("", "auto"):
        return None

    return DeckFormat(normalized)
