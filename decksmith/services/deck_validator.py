"""
Deck Validator.

Applies format and game legality rules to a resolved deck.

Rules are an ordered tuple of independent predicates. Every predicate
runs on every deck; one failing rule never suppresses another, so the
user sees every problem in one pass.

INVARIANTS:
- is_valid is True iff no predicate produced an error
- Warnings never affect validity
- Every issue carries structured args; the message is English convenience
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from typing import Any

from decksmith.config import (
    MAX_ACE_SPECS,
    MAX_RADIANTS,
    POKEMON_DECK_SIZE,
    RIFTBOUND_BATTLEFIELD_COUNT,
    RIFTBOUND_DECK_SIZE,
    RIFTBOUND_LEGEND_COUNT,
    RIFTBOUND_MAIN_DECK_SIZE,
    RIFTBOUND_RUNE_COUNT,
    SINGLETON_COPY_LIMIT,
    settings,
)
from decksmith.models.card import ResolvedCard
from decksmith.models.deck import CardGroup
from decksmith.models.game import (
    FORMAT_LABELS,
    FORMAT_TCG,
    RIFTBOUND_SLOT_CATEGORIES,
    SINGLETON_FORMATS,
    TCG_LABELS,
    CardCategory,
    DeckFormat,
    Tcg,
)
from decksmith.models.validation import IssueType, Severity, ValidationIssue, ValidationReport

logger = logging.getLogger(__name__)

# Riftbound structural slots: (slot name, category, expected count)
RIFTBOUND_SLOTS: tuple[tuple[str, CardCategory | None, int], ...] = (
    ("legend", CardCategory.LEGEND, RIFTBOUND_LEGEND_COUNT),
    ("battlefield", CardCategory.BATTLEFIELD, RIFTBOUND_BATTLEFIELD_COUNT),
    ("rune", CardCategory.RUNE, RIFTBOUND_RUNE_COUNT),
    ("main", None, RIFTBOUND_MAIN_DECK_SIZE),
)


@dataclass(frozen=True, slots=True)
class ValidationContext:
    """Everything a rule may read besides the cards themselves."""

    fmt: DeckFormat
    tcg: Tcg
    standard_marks: tuple[str, ...] = field(
        default_factory=lambda: tuple(settings.standard_regulation_marks)
    )
    low_unique_threshold: int = field(default_factory=lambda: settings.low_unique_cards_threshold)

    @property
    def singleton(self) -> bool:
        return self.fmt in SINGLETON_FORMATS

    @property
    def is_pokemon(self) -> bool:
        return self.tcg == Tcg.POKEMON


Rule = Callable[
    [Sequence[ResolvedCard], Sequence[CardGroup], ValidationContext],
    list[ValidationIssue],
]


def _error(issue_type: IssueType, message: str, **args: Any) -> ValidationIssue:
    return ValidationIssue(type=issue_type, severity=Severity.ERROR, message=message, args=args)


def _warning(issue_type: IssueType, message: str, **args: Any) -> ValidationIssue:
    return ValidationIssue(type=issue_type, severity=Severity.WARNING, message=message, args=args)


def _quantity(cards: Sequence[ResolvedCard]) -> int:
    return sum(c.quantity for c in cards)


def _slot_total(cards: Sequence[ResolvedCard], category: CardCategory | None) -> int:
    if category is None:
        return _quantity([c for c in cards if c.category not in RIFTBOUND_SLOT_CATEGORIES])
    return _quantity([c for c in cards if c.category == category])


def _distinct_names(cards: Sequence[ResolvedCard]) -> list[str]:
    return list(dict.fromkeys(c.name for c in cards))


def _pokemon_types(cards: Sequence[ResolvedCard]) -> list[set[str]]:
    return [
        {t.lower() for t in c.types}
        for c in cards
        if c.category == CardCategory.POKEMON and c.types
    ]


# =============================================================================
# ERROR RULES
# =============================================================================


def check_empty_deck(
    cards: Sequence[ResolvedCard],
    groups: Sequence[CardGroup],
    ctx: ValidationContext,
) -> list[ValidationIssue]:
    if cards:
        return []
    return [_error(IssueType.EMPTY_DECK, "Deck is empty")]


def check_card_count(
    cards: Sequence[ResolvedCard],
    groups: Sequence[CardGroup],
    ctx: ValidationContext,
) -> list[ValidationIssue]:
    expected = POKEMON_DECK_SIZE if ctx.is_pokemon else RIFTBOUND_DECK_SIZE
    current = _quantity(cards)
    if current == expected:
        return []
    return [
        _error(
            IssueType.CARD_COUNT,
            f"Deck must have exactly {expected} cards (currently {current})",
            current=current,
            expected=expected,
        )
    ]


def check_copy_limit(
    cards: Sequence[ResolvedCard],
    groups: Sequence[CardGroup],
    ctx: ValidationContext,
) -> list[ValidationIssue]:
    # Singleton formats report through check_singleton_limit instead
    if ctx.singleton:
        return []
    return [
        _error(
            IssueType.COPY_LIMIT,
            f'"{g.name}" exceeds {g.limit} copy limit ({g.total_quantity}/{g.limit})',
            cardName=g.name,
            current=g.total_quantity,
            limit=g.limit,
        )
        for g in groups
        if g.exceeds_limit
    ]


def check_singleton_limit(
    cards: Sequence[ResolvedCard],
    groups: Sequence[CardGroup],
    ctx: ValidationContext,
) -> list[ValidationIssue]:
    if not ctx.singleton:
        return []
    return [
        _error(
            IssueType.SINGLETON_LIMIT,
            f'"{g.name}" can only appear once in {FORMAT_LABELS[ctx.fmt]} '
            f"(currently {g.total_quantity})",
            cardName=g.name,
            current=g.total_quantity,
            limit=SINGLETON_COPY_LIMIT,
        )
        for g in groups
        if not g.is_basic_energy and g.total_quantity > SINGLETON_COPY_LIMIT
    ]


def check_no_basic(
    cards: Sequence[ResolvedCard],
    groups: Sequence[CardGroup],
    ctx: ValidationContext,
) -> list[ValidationIssue]:
    if not ctx.is_pokemon:
        return []
    if any(c.is_basic for c in cards):
        return []
    # Undescribed cards might be Basic Pokémon; unresolved_cards covers them
    if any(not c.is_resolved and c.category == CardCategory.UNKNOWN for c in cards):
        return []
    return [_error(IssueType.NO_BASIC, "Deck needs at least 1 Basic Pokémon")]


def check_ace_spec_limit(
    cards: Sequence[ResolvedCard],
    groups: Sequence[CardGroup],
    ctx: ValidationContext,
) -> list[ValidationIssue]:
    ace_specs = [c for c in cards if c.is_ace_spec]
    current = _quantity(ace_specs)
    if not ctx.is_pokemon or current <= MAX_ACE_SPECS:
        return []
    return [
        _error(
            IssueType.ACE_SPEC_LIMIT,
            f"Deck can only have {MAX_ACE_SPECS} ACE SPEC card (currently {current})",
            current=current,
            limit=MAX_ACE_SPECS,
            cards=_distinct_names(ace_specs),
        )
    ]


def check_radiant_limit(
    cards: Sequence[ResolvedCard],
    groups: Sequence[CardGroup],
    ctx: ValidationContext,
) -> list[ValidationIssue]:
    radiants = [c for c in cards if c.is_radiant]
    current = _quantity(radiants)
    if not ctx.is_pokemon or current <= MAX_RADIANTS:
        return []
    return [
        _error(
            IssueType.RADIANT_LIMIT,
            f"Deck can only have {MAX_RADIANTS} Radiant Pokémon (currently {current})",
            current=current,
            limit=MAX_RADIANTS,
            cards=_distinct_names(radiants),
        )
    ]


def check_rule_box_prohibited(
    cards: Sequence[ResolvedCard],
    groups: Sequence[CardGroup],
    ctx: ValidationContext,
) -> list[ValidationIssue]:
    if ctx.fmt != DeckFormat.GLC:
        return []
    rule_box = _distinct_names([c for c in cards if c.is_rule_box])
    if not rule_box:
        return []
    return [
        _error(
            IssueType.RULE_BOX_PROHIBITED,
            "Rule Box Pokémon (ex, V, VSTAR, VMAX, Radiant) are not allowed in GLC",
            cards=rule_box,
        )
    ]


def check_ace_spec_prohibited(
    cards: Sequence[ResolvedCard],
    groups: Sequence[CardGroup],
    ctx: ValidationContext,
) -> list[ValidationIssue]:
    if ctx.fmt != DeckFormat.GLC:
        return []
    ace_specs = _distinct_names([c for c in cards if c.is_ace_spec])
    if not ace_specs:
        return []
    return [
        _error(
            IssueType.ACE_SPEC_PROHIBITED,
            "ACE SPEC cards are not allowed in GLC",
            cards=ace_specs,
        )
    ]


def check_slot_counts(
    cards: Sequence[ResolvedCard],
    groups: Sequence[CardGroup],
    ctx: ValidationContext,
) -> list[ValidationIssue]:
    if ctx.tcg != Tcg.RIFTBOUND:
        return []
    issues: list[ValidationIssue] = []
    for slot, category, expected in RIFTBOUND_SLOTS:
        current = _slot_total(cards, category)
        if current != expected:
            issues.append(
                _error(
                    IssueType.SLOT_COUNT,
                    f"The {slot} slot needs exactly {expected} card(s) (currently {current})",
                    slot=slot,
                    current=current,
                    expected=expected,
                )
            )
    return issues


def check_format_mismatch(
    cards: Sequence[ResolvedCard],
    groups: Sequence[CardGroup],
    ctx: ValidationContext,
) -> list[ValidationIssue]:
    format_tcg = FORMAT_TCG[ctx.fmt]
    if format_tcg == ctx.tcg:
        return []
    return [
        _error(
            IssueType.FORMAT_MISMATCH,
            f"{FORMAT_LABELS[ctx.fmt]} is a {TCG_LABELS[format_tcg]} format, "
            f"but this deck looks like {TCG_LABELS[ctx.tcg]}",
            format=ctx.fmt.value,
            formatTcg=format_tcg.value,
            detectedTcg=ctx.tcg.value,
        )
    ]


# =============================================================================
# WARNING RULES
# =============================================================================


def check_low_unique_cards(
    cards: Sequence[ResolvedCard],
    groups: Sequence[CardGroup],
    ctx: ValidationContext,
) -> list[ValidationIssue]:
    current = len(groups)
    if not cards or current >= ctx.low_unique_threshold:
        return []
    return [
        _warning(
            IssueType.LOW_UNIQUE_CARDS,
            f"Deck has only {current} unique cards",
            current=current,
            minimum=ctx.low_unique_threshold,
        )
    ]


def check_regulation_marks(
    cards: Sequence[ResolvedCard],
    groups: Sequence[CardGroup],
    ctx: ValidationContext,
) -> list[ValidationIssue]:
    if ctx.fmt != DeckFormat.STANDARD:
        return []
    outside = [
        c for c in cards if c.regulation_mark and c.regulation_mark not in ctx.standard_marks
    ]
    if not outside:
        return []
    marks = sorted({c.regulation_mark for c in outside if c.regulation_mark})
    return [
        _warning(
            IssueType.REGULATION_MARK,
            "Some cards may not be legal in Standard "
            f"(regulation marks: {', '.join(marks)})",
            marks=marks,
            cards=[{"name": c.name, "mark": c.regulation_mark} for c in outside],
        )
    ]


def check_multiple_types(
    cards: Sequence[ResolvedCard],
    groups: Sequence[CardGroup],
    ctx: ValidationContext,
) -> list[ValidationIssue]:
    if ctx.fmt != DeckFormat.GLC:
        return []
    type_sets = _pokemon_types(cards)
    if not type_sets:
        return []
    # Dual-type Pokémon are fine as long as one type is shared by all
    if set.intersection(*type_sets):
        return []
    all_types = sorted(set.union(*type_sets))
    return [
        _warning(
            IssueType.MULTIPLE_TYPES,
            "GLC decks should have Pokémon of a single type. "
            f"Detected types: {', '.join(all_types)}",
            types=all_types,
        )
    ]


def check_unresolved_cards(
    cards: Sequence[ResolvedCard],
    groups: Sequence[CardGroup],
    ctx: ValidationContext,
) -> list[ValidationIssue]:
    unresolved = [c for c in cards if not c.is_resolved]
    if not unresolved:
        return []
    return [
        _warning(
            IssueType.UNRESOLVED_CARDS,
            f"{len(unresolved)} card(s) could not be identified; "
            "their rules were checked by name only",
            count=len(unresolved),
            cards=_distinct_names(unresolved),
        )
    ]


RULES: tuple[Rule, ...] = (
    check_empty_deck,
    check_card_count,
    check_copy_limit,
    check_singleton_limit,
    check_no_basic,
    check_ace_spec_limit,
    check_radiant_limit,
    check_rule_box_prohibited,
    check_ace_spec_prohibited,
    check_slot_counts,
    check_format_mismatch,
    check_low_unique_cards,
    check_regulation_marks,
    check_multiple_types,
    check_unresolved_cards,
)


def build_summary(
    cards: Sequence[ResolvedCard],
    groups: Sequence[CardGroup],
    ctx: ValidationContext,
) -> dict[str, Any]:
    """Numeric summary shown next to the validation verdict."""
    summary: dict[str, Any] = {
        "totalCards": _quantity(cards),
        "uniqueNames": len(groups),
        "basicCreatureCount": _quantity([c for c in cards if c.is_basic]),
        "aceSpecs": _quantity([c for c in cards if c.is_ace_spec]),
        "radiants": _quantity([c for c in cards if c.is_radiant]),
    }
    if ctx.tcg == Tcg.RIFTBOUND:
        for slot, category, _expected in RIFTBOUND_SLOTS:
            key = "mainDeck" if category is None else slot
            summary[key] = _slot_total(cards, category)
    if ctx.fmt == DeckFormat.GLC:
        type_sets = _pokemon_types(cards)
        summary["pokemonTypes"] = sorted(set.union(*type_sets)) if type_sets else []
    return summary


def validate_deck(
    cards: Sequence[ResolvedCard],
    groups: Sequence[CardGroup],
    fmt: DeckFormat,
    tcg: Tcg,
    standard_marks: Sequence[str] | None = None,
    low_unique_threshold: int | None = None,
) -> ValidationReport:
    """
    Validate a deck against a format.

    Args:
        cards: Resolved cards (unresolved placeholders included)
        groups: Reprint groups built for the same format
        fmt: Format to validate against
        tcg: Game the deck belongs to
        standard_marks: Regulation marks legal in Standard (defaults to settings)
        low_unique_threshold: Unique-name count below which a warning is
            raised (defaults to settings)

    Returns:
        ValidationReport with every error and warning found
    """
    ctx = ValidationContext(fmt=fmt, tcg=tcg)
    if standard_marks is not None:
        ctx = replace(ctx, standard_marks=tuple(standard_marks))
    if low_unique_threshold is not None:
        ctx = replace(ctx, low_unique_threshold=low_unique_threshold)

    issues: list[ValidationIssue] = []
    for rule in RULES:
        issues.extend(rule(cards, groups, ctx))

    report = ValidationReport.from_issues(issues, build_summary(cards, groups, ctx))
    logger.info(
        "%s validation: %s - %d errors, %d warnings",
        FORMAT_LABELS[fmt],
        "VALID" if report.is_valid else "INVALID",
        len(report.errors),
        len(report.warnings),
    )
    return report
