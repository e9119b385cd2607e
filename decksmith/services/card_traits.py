"""
Card traits.

Name normalization and the rule-relevant flags every deck stage reads:
basic resource, ACE SPEC, Radiant, rule box, basic Pokémon and the card
category.

Resolver metadata always wins over name heuristics. The name-based
fallbacks only apply when the resolver could not describe the card.
"""

import re
import unicodedata
from collections.abc import Iterable
from dataclasses import dataclass

from decksmith.models.game import CardCategory, Tcg

BASIC_ENERGY_TYPES = (
    "grass",
    "fire",
    "water",
    "lightning",
    "psychic",
    "fighting",
    "darkness",
    "metal",
    "fairy",
)

BASIC_ENERGY_NAMES: frozenset[str] = frozenset(
    [f"{t} energy" for t in BASIC_ENERGY_TYPES]
    + [f"basic {t} energy" for t in BASIC_ENERGY_TYPES]
)

# Energy symbols used by Pokémon TCG Live: "Basic {R} Energy"
ENERGY_SYMBOLS: dict[str, str] = {
    "{g}": "grass",
    "{r}": "fire",
    "{w}": "water",
    "{l}": "lightning",
    "{p}": "psychic",
    "{f}": "fighting",
    "{d}": "darkness",
    "{m}": "metal",
    "{y}": "fairy",
}

RULE_BOX_SUFFIXES = (" ex", " v", " vstar", " vmax", " gx", " v-union")
RULE_BOX_SUBTYPES = frozenset({"ex", "v", "vstar", "vmax", "gx", "v-union", "tag team", "radiant"})
ACE_SPEC_KEYWORDS = ("ace spec", "ace-spec")

# Evolution and rule-box markers that rule out a Basic Pokémon by name alone
NON_BASIC_NAME_PATTERN = re.compile(r"\b(ex|V|VMAX|VSTAR|Stage|BREAK)\b", re.IGNORECASE)

RIFTBOUND_RUNE_PATTERN = re.compile(r"\brunes?$", re.IGNORECASE)
RIFTBOUND_BATTLEFIELD_PATTERN = re.compile(
    r"battlefield|grove|monastery|hillock|windswept|temple|sanctuary|citadel",
    re.IGNORECASE,
)

# Resolver supertype / card-type labels, lowercased
SUPERTYPE_CATEGORIES: dict[str, CardCategory] = {
    "pokémon": CardCategory.POKEMON,
    "pokemon": CardCategory.POKEMON,
    "trainer": CardCategory.TRAINER,
    "energy": CardCategory.ENERGY,
    "legend": CardCategory.LEGEND,
    "battlefield": CardCategory.BATTLEFIELD,
    "rune": CardCategory.RUNE,
    "unit": CardCategory.UNIT,
    "champion": CardCategory.UNIT,
    "spell": CardCategory.SPELL,
    "gear": CardCategory.GEAR,
}

_TRAILING_PARENTHETICAL = re.compile(r"\s*\([^)]*\)\s*$")


@dataclass(frozen=True, slots=True)
class CardTraits:
    """Rule-relevant flags of one card."""

    category: CardCategory
    is_basic_energy: bool
    is_ace_spec: bool
    is_radiant: bool
    is_rule_box: bool
    is_basic: bool


def strip_diacritics(value: str) -> str:
    """Remove combining marks ("Pokémon" -> "Pokemon")."""
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_card_name(name: str) -> str:
    """
    Grouping key for a card name.

    Drops a trailing parenthetical variant ("Boss's Orders (Ghetsis)"),
    strips diacritics, casefolds and collapses whitespace.
    """
    without_variant = _TRAILING_PARENTHETICAL.sub("", name)
    return " ".join(strip_diacritics(without_variant).casefold().split())


def _energy_name(name: str) -> str:
    normalized = normalize_card_name(name)
    for symbol, energy_type in ENERGY_SYMBOLS.items():
        normalized = normalized.replace(symbol, energy_type)
    return normalized


def _lowered(values: Iterable[str]) -> set[str]:
    return {v.lower() for v in values}


def category_from_supertype(supertype: str | None) -> CardCategory:
    """Map a resolver supertype label onto a CardCategory."""
    if not supertype:
        return CardCategory.UNKNOWN
    return SUPERTYPE_CATEGORIES.get(supertype.strip().lower(), CardCategory.UNKNOWN)


def infer_category(name: str, tcg: Tcg, section: CardCategory | None = None) -> CardCategory:
    """
    Best-effort category for a card the resolver did not describe.

    The enclosing section header is trusted first, then the name.
    """
    if section is not None:
        return section

    if tcg == Tcg.RIFTBOUND:
        if RIFTBOUND_RUNE_PATTERN.search(name.strip()):
            return CardCategory.RUNE
        if RIFTBOUND_BATTLEFIELD_PATTERN.search(name):
            return CardCategory.BATTLEFIELD
        return CardCategory.UNKNOWN

    if _energy_name(name) in BASIC_ENERGY_NAMES or normalize_card_name(name).endswith(" energy"):
        return CardCategory.ENERGY
    return CardCategory.UNKNOWN


def is_basic_energy(
    name: str,
    tcg: Tcg,
    category: CardCategory,
    subtypes: Iterable[str] = (),
) -> bool:
    """Basic resource card with no per-name copy cap (basic Energy, Runes)."""
    if tcg == Tcg.RIFTBOUND:
        return category == CardCategory.RUNE
    if category == CardCategory.ENERGY and "basic" in _lowered(subtypes):
        return True
    return _energy_name(name) in BASIC_ENERGY_NAMES


def is_ace_spec(name: str, subtypes: Iterable[str] = ()) -> bool:
    lowered_name = name.lower()
    lowered_subtypes = _lowered(subtypes)
    return any(k in lowered_name or k in lowered_subtypes for k in ACE_SPEC_KEYWORDS)


def is_radiant(name: str, subtypes: Iterable[str] = ()) -> bool:
    return name.strip().lower().startswith("radiant ") or "radiant" in _lowered(subtypes)


def is_rule_box(name: str, category: CardCategory, subtypes: Iterable[str] = ()) -> bool:
    """Rule-box Pokémon: ex, V, VSTAR, VMAX, GX, V-UNION or Radiant."""
    if category not in (CardCategory.POKEMON, CardCategory.UNKNOWN):
        return False
    if _lowered(subtypes) & RULE_BOX_SUBTYPES:
        return True
    lowered = normalize_card_name(name)
    return lowered.endswith(RULE_BOX_SUFFIXES) or is_radiant(name)


def is_basic_pokemon(
    name: str,
    category: CardCategory,
    subtypes: Iterable[str] = (),
    evolution_stage: str | None = None,
) -> bool:
    """
    Basic Pokémon check.

    Uses subtypes or evolution stage when known. Without either, falls
    back to the absence of evolution and rule-box markers in the name.
    """
    if category != CardCategory.POKEMON:
        return False

    lowered_subtypes = _lowered(subtypes)
    stage = (evolution_stage or "").lower()
    if lowered_subtypes or stage:
        return "basic" in lowered_subtypes or stage == "basic"

    return NON_BASIC_NAME_PATTERN.search(name) is None


def describe_card(
    name: str,
    tcg: Tcg,
    category: CardCategory,
    subtypes: tuple[str, ...] = (),
    evolution_stage: str | None = None,
) -> CardTraits:
    """Compute every rule-relevant flag for one card."""
    basic_energy = is_basic_energy(name, tcg, category, subtypes)
    if tcg == Tcg.RIFTBOUND:
        return CardTraits(
            category=category,
            is_basic_energy=basic_energy,
            is_ace_spec=False,
            is_radiant=False,
            is_rule_box=False,
            is_basic=False,
        )

    if basic_energy and category == CardCategory.UNKNOWN:
        category = CardCategory.ENERGY

    return CardTraits(
        category=category,
        is_basic_energy=basic_energy,
        is_ace_spec=is_ace_spec(name, subtypes),
        is_radiant=is_radiant(name, subtypes),
        is_rule_box=is_rule_box(name, category, subtypes),
        is_basic=is_basic_pokemon(name, category, subtypes, evolution_stage),
    )
