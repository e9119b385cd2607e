"""
Game Classifier.

Decides which trading card game a tokenized deck list belongs to.

Each piece of evidence is an independent Signal; the verdict and its
confidence come from services.scoring. Every fired signal contributes
one sentence to the reasons shown to the user.

Resolver vocabulary overlap is best-effort: when the resolver was not
available that signal is omitted entirely, never guessed.
"""

import re
from collections.abc import Mapping, Sequence

from decksmith.config import POKEMON_DECK_SIZE, RIFTBOUND_DECK_SIZE
from decksmith.models.card import CardInfo, ParsedCardLine
from decksmith.models.deck import TcgClassification
from decksmith.models.game import CardCategory, Dialect, Tcg
from decksmith.services.card_traits import (
    RIFTBOUND_BATTLEFIELD_PATTERN,
    RIFTBOUND_RUNE_PATTERN,
    category_from_supertype,
)
from decksmith.services.scoring import Signal, decide
from decksmith.services.set_codes import is_known_pokemon_code

# Signal weights (points at full strength)
DIALECT_PRIOR_WEIGHT = 40.0
SECTION_HEADER_WEIGHT = 20.0
CATEGORY_KEYWORD_WEIGHT = 30.0
DOMAIN_KEYWORD_WEIGHT = 10.0
SET_CODE_WEIGHT = 30.0
POKEMON_VOCABULARY_WEIGHT = 20.0
DECK_SIZE_WEIGHT = 15.0
RESOLVER_OVERLAP_WEIGHT = 40.0

DIALECT_PRIORS: dict[Dialect, tuple[Tcg, str]] = {
    Dialect.LIVE_EXPORT: (Tcg.POKEMON, "The list uses the Pokémon TCG Live export layout."),
    Dialect.POCKET_EXPORT: (Tcg.POKEMON, "The list uses the Pokémon TCG Pocket export layout."),
    Dialect.RIFTBOUND_EXPORT: (Tcg.RIFTBOUND, "The list uses Riftbound deck sections."),
}

POKEMON_SECTIONS = frozenset({CardCategory.POKEMON, CardCategory.TRAINER, CardCategory.ENERGY})
RIFTBOUND_SECTIONS = frozenset(
    {CardCategory.LEGEND, CardCategory.BATTLEFIELD, CardCategory.RUNE, CardCategory.UNIT}
)

RIFTBOUND_DOMAINS = ("fury", "calm", "mind", "body", "order", "chaos")
RIFTBOUND_DOMAIN_PATTERN = re.compile(r"\b(" + "|".join(RIFTBOUND_DOMAINS) + r")\b", re.IGNORECASE)

POKEMON_VOCABULARY_PATTERN = re.compile(
    r"\b(ex|gx|vmax|vstar|v|energy|radiant|pok[eé]mon)\b|\bball$",
    re.IGNORECASE,
)

TIE_REASON = "The evidence is balanced, so the list is treated as Pokémon TCG."
NO_EVIDENCE_REASON = "No game-specific evidence was found, so the list is treated as Pokémon TCG."

HYPOTHESES = [Tcg.POKEMON, Tcg.RIFTBOUND]


def _share(count: int, total: int) -> float:
    return count / total if total else 0.0


def _dialect_signals(dialect: Dialect) -> list[Signal]:
    prior = DIALECT_PRIORS.get(dialect)
    if prior is None:
        return []
    tcg, reason = prior
    return [Signal(tcg, DIALECT_PRIOR_WEIGHT, 1.0, reason)]


def _section_signals(lines: Sequence[ParsedCardLine]) -> list[Signal]:
    sections = {line.section for line in lines if line.section is not None}
    signals: list[Signal] = []
    if sections & POKEMON_SECTIONS:
        signals.append(
            Signal(
                Tcg.POKEMON,
                SECTION_HEADER_WEIGHT,
                1.0,
                "Cards are listed under Pokémon, Trainer or Energy headers.",
            )
        )
    if sections & RIFTBOUND_SECTIONS:
        signals.append(
            Signal(
                Tcg.RIFTBOUND,
                SECTION_HEADER_WEIGHT,
                1.0,
                "Cards are listed under Legend, Battlefield or Rune headers.",
            )
        )
    return signals


def _looks_like_slot_card(name: str) -> bool:
    return bool(RIFTBOUND_RUNE_PATTERN.search(name) or RIFTBOUND_BATTLEFIELD_PATTERN.search(name))


def _keyword_signals(
    lines: Sequence[ParsedCardLine],
    infos: Mapping[str, CardInfo | None] | None,
) -> list[Signal]:
    slot_names: set[str] = set()
    for line in lines:
        info = infos.get(line.raw_name) if infos else None
        if info is not None:
            category = category_from_supertype(info.supertype)
            if category in (CardCategory.LEGEND, CardCategory.BATTLEFIELD, CardCategory.RUNE):
                slot_names.add(line.raw_name)
        elif _looks_like_slot_card(line.raw_name):
            slot_names.add(line.raw_name)

    signals: list[Signal] = []
    if slot_names:
        signals.append(
            Signal(
                Tcg.RIFTBOUND,
                CATEGORY_KEYWORD_WEIGHT,
                min(1.0, len(slot_names) / 2),
                f"{len(slot_names)} card(s) are Legends, Battlefields or Runes, "
                "which only exist in Riftbound.",
            )
        )

    domains = {
        match.group(1).lower()
        for line in lines
        for match in RIFTBOUND_DOMAIN_PATTERN.finditer(line.raw_name)
    }
    if domains:
        signals.append(
            Signal(
                Tcg.RIFTBOUND,
                DOMAIN_KEYWORD_WEIGHT,
                min(1.0, len(domains) / 2),
                f"Card names mention Riftbound domains ({', '.join(sorted(domains))}).",
            )
        )
    return signals


def _set_code_signals(lines: Sequence[ParsedCardLine]) -> list[Signal]:
    coded = [line for line in lines if is_known_pokemon_code(line.set_code)]
    if not coded:
        return []
    return [
        Signal(
            Tcg.POKEMON,
            SET_CODE_WEIGHT,
            _share(len(coded), len(lines)),
            f"{len(coded)} of {len(lines)} lines carry Pokémon set codes.",
        )
    ]


def _vocabulary_signals(lines: Sequence[ParsedCardLine]) -> list[Signal]:
    hits = [line for line in lines if POKEMON_VOCABULARY_PATTERN.search(line.raw_name)]
    if not hits:
        return []
    return [
        Signal(
            Tcg.POKEMON,
            POKEMON_VOCABULARY_WEIGHT,
            min(1.0, len(hits) / 3),
            f"{len(hits)} card name(s) use Pokémon vocabulary (ex, V, Energy, ...).",
        )
    ]


def _deck_size_signals(lines: Sequence[ParsedCardLine]) -> list[Signal]:
    total = sum(line.quantity for line in lines)
    if total == POKEMON_DECK_SIZE:
        return [
            Signal(
                Tcg.POKEMON,
                DECK_SIZE_WEIGHT,
                1.0,
                f"The list totals {POKEMON_DECK_SIZE} cards, the Pokémon deck size.",
            )
        ]
    if total == RIFTBOUND_DECK_SIZE:
        return [
            Signal(
                Tcg.RIFTBOUND,
                DECK_SIZE_WEIGHT,
                1.0,
                f"The list totals {RIFTBOUND_DECK_SIZE} cards, the Riftbound deck size.",
            )
        ]
    return []


def _resolver_signals(
    lines: Sequence[ParsedCardLine],
    infos: Mapping[str, CardInfo | None],
) -> list[Signal]:
    names = {line.raw_name for line in lines}
    signals: list[Signal] = []
    for tcg, label in ((Tcg.POKEMON, "Pokémon TCG"), (Tcg.RIFTBOUND, "Riftbound")):
        known = [n for n in names if (info := infos.get(n)) is not None and info.tcg == tcg]
        if known:
            signals.append(
                Signal(
                    tcg,
                    RESOLVER_OVERLAP_WEIGHT,
                    _share(len(known), len(names)),
                    f"{len(known)} of {len(names)} card names are known {label} cards.",
                )
            )
    return signals


def collect_signals(
    lines: Sequence[ParsedCardLine],
    dialect: Dialect,
    infos: Mapping[str, CardInfo | None] | None = None,
) -> list[Signal]:
    """Gather every game signal the lines and dialect provide."""
    signals = [
        *_dialect_signals(dialect),
        *_section_signals(lines),
        *_keyword_signals(lines, infos),
        *_set_code_signals(lines),
        *_vocabulary_signals(lines),
        *_deck_size_signals(lines),
    ]
    if infos is not None:
        signals.extend(_resolver_signals(lines, infos))
    return signals


def classify_tcg(
    lines: Sequence[ParsedCardLine],
    dialect: Dialect,
    infos: Mapping[str, CardInfo | None] | None = None,
) -> TcgClassification:
    """
    Decide which game a deck list belongs to.

    Args:
        lines: Successfully tokenized lines
        dialect: Detected dialect
        infos: Resolver answers by raw name, or None if the resolver
            was unavailable

    Returns:
        TcgClassification with confidence 0-100 and one reason per fired signal
    """
    signals = collect_signals(lines, dialect, infos)
    if not signals:
        return TcgClassification(tcg=Tcg.POKEMON, confidence=0, reasons=(NO_EVIDENCE_REASON,))

    verdict = decide(signals, HYPOTHESES, TIE_REASON)
    return TcgClassification(
        tcg=Tcg(verdict.winner),
        confidence=verdict.confidence,
        reasons=verdict.reasons,
    )
