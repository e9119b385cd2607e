"""
Format Detector.

Infers the competitive format from the resolved card pool, unless the
caller supplied an explicit override.

INVARIANTS:
- An override always wins: confidence 100, is_override set, and the
  reason describes the override rather than any inferred evidence
- The override's plausibility is NOT checked here (the validator does)
- reason is exactly one sentence
"""

from collections.abc import Sequence

from decksmith.config import (
    POKEMON_DECK_SIZE,
    RIFTBOUND_BATTLEFIELD_COUNT,
    RIFTBOUND_LEGEND_COUNT,
    RIFTBOUND_RUNE_COUNT,
    settings,
)
from decksmith.models.card import ResolvedCard
from decksmith.models.deck import FormatDetection
from decksmith.models.game import FORMAT_LABELS, CardCategory, DeckFormat, Tcg
from decksmith.services.card_traits import normalize_card_name
from decksmith.services.set_codes import is_expanded_era_code


def override_detection(fmt: DeckFormat) -> FormatDetection:
    """Detection result for a caller-chosen format."""
    return FormatDetection(
        format=fmt,
        confidence=100,
        reason=f"Format set to {FORMAT_LABELS[fmt]} by request.",
        is_override=True,
    )


def _category_total(cards: Sequence[ResolvedCard], category: CardCategory) -> int:
    return sum(c.quantity for c in cards if c.category == category)


def _detect_riftbound(cards: Sequence[ResolvedCard]) -> FormatDetection:
    slots_filled = (
        _category_total(cards, CardCategory.LEGEND) == RIFTBOUND_LEGEND_COUNT
        and _category_total(cards, CardCategory.BATTLEFIELD) == RIFTBOUND_BATTLEFIELD_COUNT
        and _category_total(cards, CardCategory.RUNE) == RIFTBOUND_RUNE_COUNT
    )
    if slots_filled:
        return FormatDetection(
            format=DeckFormat.CONSTRUCTED,
            confidence=90,
            reason="The Legend, Battlefield and Rune slots match Riftbound Constructed.",
        )
    return FormatDetection(
        format=DeckFormat.CONSTRUCTED,
        confidence=50,
        reason="Riftbound decks are validated as Constructed, the only supported format.",
    )


def looks_like_glc(cards: Sequence[ResolvedCard]) -> bool:
    """Singleton 60-card list with no rule-box Pokémon."""
    if sum(c.quantity for c in cards) != POKEMON_DECK_SIZE:
        return False
    if any(c.is_rule_box for c in cards):
        return False

    totals: dict[str, int] = {}
    for card in cards:
        if card.is_basic_energy:
            continue
        key = normalize_card_name(card.name)
        totals[key] = totals.get(key, 0) + card.quantity
    return bool(totals) and all(total == 1 for total in totals.values())


def _mark_range(marks: list[str]) -> str:
    if len(marks) == 1:
        return marks[0]
    return f"{marks[0]}-{marks[-1]}"


def _detect_pokemon(
    cards: Sequence[ResolvedCard],
    standard_marks: Sequence[str],
    expanded_marks: Sequence[str],
) -> FormatDetection:
    if looks_like_glc(cards):
        return FormatDetection(
            format=DeckFormat.GLC,
            confidence=85,
            reason="Every card appears once and there are no rule-box Pokémon, "
            "which matches Gym Leader Challenge.",
        )

    marks = sorted({c.regulation_mark.upper() for c in cards if c.regulation_mark})
    if marks:
        window = _mark_range(marks)
        outside_standard = [m for m in marks if m not in standard_marks]
        if not outside_standard:
            return FormatDetection(
                format=DeckFormat.STANDARD,
                confidence=90,
                reason=f"Regulation marks {window} are all legal in Standard.",
            )
        if all(m in expanded_marks for m in marks):
            return FormatDetection(
                format=DeckFormat.EXPANDED,
                confidence=80,
                reason=f"Regulation marks {window} include {', '.join(outside_standard)}, "
                "which rotated out of Standard.",
            )
        return FormatDetection(
            format=DeckFormat.EXPANDED,
            confidence=60,
            reason=f"Regulation marks {window} predate Standard, so Expanded is the closest fit.",
        )

    if any(is_expanded_era_code(c.set_code) for c in cards):
        return FormatDetection(
            format=DeckFormat.EXPANDED,
            confidence=70,
            reason="No regulation marks were available, but some set codes are "
            "only legal in Expanded.",
        )

    return FormatDetection(
        format=DeckFormat.STANDARD,
        confidence=50,
        reason="No regulation marks were available, so Standard is assumed.",
    )


def detect_format(
    cards: Sequence[ResolvedCard],
    tcg: Tcg,
    override: DeckFormat | None = None,
    standard_marks: Sequence[str] | None = None,
    expanded_marks: Sequence[str] | None = None,
) -> FormatDetection:
    """
    Infer the competitive format of a deck.

    Args:
        cards: Resolved cards
        tcg: Game the deck belongs to
        override: Caller-chosen format; skips detection entirely
        standard_marks: Regulation marks legal in Standard (defaults to settings)
        expanded_marks: Regulation marks legal in Expanded (defaults to settings)

    Returns:
        FormatDetection with a single-sentence reason
    """
    if override is not None:
        return override_detection(override)

    if tcg == Tcg.RIFTBOUND:
        return _detect_riftbound(cards)

    return _detect_pokemon(
        cards,
        standard_marks if standard_marks is not None else settings.standard_regulation_marks,
        expanded_marks if expanded_marks is not None else settings.expanded_regulation_marks,
    )
