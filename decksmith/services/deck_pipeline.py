"""
Deck Parse Pipeline.

The only entry point callers use to turn pasted deck text into a
DeckParseResult.

Stages run strictly forward:
    raw text -> dialect -> tokens -> resolver (one batch call)
    -> game -> format -> reprint groups -> validation

INVARIANTS:
1. A run holds no state outside its own locals; the same text, override
   and resolver answers always produce an equal result
2. At most one resolver call per run, for distinct names only
3. Malformed text never raises; it is reported in line_errors
4. The only exception a run can raise is ResolutionUnavailableError,
   and only when resolution is mandatory
5. DeckImportSession delivers last-write-wins: a superseded run's result
   is discarded and never replaces a newer one
"""

import asyncio
import logging
from collections.abc import Mapping, Sequence

from decksmith.models.card import (
    CardHint,
    CardInfo,
    ParsedCardLine,
    ResolutionStatus,
    ResolvedCard,
)
from decksmith.models.deck import CardGroup, DeckParseResult, DeckStats
from decksmith.models.failure import ResolutionUnavailableError
from decksmith.models.game import (
    RIFTBOUND_SLOT_CATEGORIES,
    CardCategory,
    DeckFormat,
    Tcg,
    parse_format_choice,
)
from decksmith.parsers.deck_text import tokenize_deck
from decksmith.services.card_resolver import CardResolver
from decksmith.services.card_traits import category_from_supertype, describe_card, infer_category
from decksmith.services.deck_validator import validate_deck
from decksmith.services.format_detector import detect_format
from decksmith.services.reprint_grouping import group_reprints
from decksmith.services.set_codes import card_id_for
from decksmith.services.tcg_classifier import classify_tcg

logger = logging.getLogger(__name__)

POKEMON_BREAKDOWN_KEYS: tuple[tuple[CardCategory, str], ...] = (
    (CardCategory.POKEMON, "pokemon"),
    (CardCategory.TRAINER, "trainer"),
    (CardCategory.ENERGY, "energy"),
)

RIFTBOUND_BREAKDOWN_KEYS: tuple[tuple[CardCategory, str], ...] = (
    (CardCategory.LEGEND, "legend"),
    (CardCategory.BATTLEFIELD, "battlefield"),
    (CardCategory.RUNE, "rune"),
)


# =============================================================================
# RESOLUTION
# =============================================================================


def distinct_requests(lines: Sequence[ParsedCardLine]) -> tuple[list[str], list[CardHint]]:
    """
    Distinct names to resolve, each with the hint of its first printing.

    Returns:
        (names, hints) of equal length, in order of first appearance
    """
    hints: dict[str, CardHint] = {}
    for line in lines:
        if line.raw_name not in hints:
            hints[line.raw_name] = CardHint(
                set_code=line.set_code,
                collector_number=line.collector_number,
            )
    return list(hints), list(hints.values())


async def resolve_cards(
    lines: Sequence[ParsedCardLine],
    resolver: CardResolver,
    timeout: float | None = None,
    require_resolution: bool = False,
) -> dict[str, CardInfo | None] | None:
    """
    Resolve every distinct name in one batch call.

    Returns:
        Resolver answers by raw name, or None when the resolver is
        unavailable and resolution is optional

    Raises:
        ResolutionUnavailableError: Resolver failed and resolution is mandatory
    """
    names, hints = distinct_requests(lines)
    if not names:
        return {}

    try:
        answers = await asyncio.wait_for(resolver.resolve_many(names, hints), timeout)
    except TimeoutError as e:
        error = ResolutionUnavailableError(detail=f"Card resolver timed out after {timeout}s")
        if require_resolution:
            raise error from e
        logger.warning("Card resolver timed out after %ss; continuing unresolved", timeout)
        return None
    except ResolutionUnavailableError as e:
        if require_resolution:
            raise
        logger.warning("Card resolver unavailable (%s); continuing unresolved", e.detail)
        return None

    # Names the resolver left out are unknown, not errors
    return {name: answers.get(name) for name in names}


def build_resolved_card(
    line: ParsedCardLine,
    info: CardInfo | None,
    tcg: Tcg,
    status: ResolutionStatus,
    hinted_printing: bool = True,
) -> ResolvedCard:
    """
    Enrich one tokenized line with resolver data (or name heuristics).

    The resolver's card id is kept when it answered for this line's own
    printing. Otherwise a Pokémon line with a set code and number gets an
    id derived from them.
    """
    if info is not None:
        name = info.name
        category = category_from_supertype(info.supertype)
        if category == CardCategory.UNKNOWN:
            category = infer_category(name, tcg, line.section)
        subtypes, types = info.subtypes, info.types
        regulation_mark = info.regulation_mark.upper() if info.regulation_mark else None
        evolution_stage = info.evolution_stage
    else:
        name = line.raw_name
        category = infer_category(name, tcg, line.section)
        subtypes, types = (), ()
        regulation_mark = None
        evolution_stage = None

    traits = describe_card(name, tcg, category, subtypes, evolution_stage)

    card_id = info.card_id if info is not None else None
    derive_id = not card_id or not hinted_printing
    if derive_id and tcg == Tcg.POKEMON and line.set_code and line.collector_number:
        card_id = card_id_for(line.set_code, line.collector_number)

    return ResolvedCard(
        name=name,
        quantity=line.quantity,
        line_number=line.source_line.number,
        category=traits.category,
        resolution=status,
        card_id=card_id,
        set_code=line.set_code,
        collector_number=line.collector_number,
        supertype=info.supertype if info is not None else None,
        subtypes=subtypes,
        types=types,
        regulation_mark=regulation_mark,
        is_basic_energy=traits.is_basic_energy,
        is_ace_spec=traits.is_ace_spec,
        is_radiant=traits.is_radiant,
        is_rule_box=traits.is_rule_box,
        is_basic=traits.is_basic,
    )


def build_resolved_cards(
    lines: Sequence[ParsedCardLine],
    infos: Mapping[str, CardInfo | None] | None,
    tcg: Tcg,
) -> list[ResolvedCard]:
    hinted: dict[str, tuple[str | None, str | None]] = {}
    cards: list[ResolvedCard] = []
    for line in lines:
        printing = (line.set_code, line.collector_number)
        hinted_printing = hinted.setdefault(line.raw_name, printing) == printing
        if infos is None:
            cards.append(build_resolved_card(line, None, tcg, ResolutionStatus.UNAVAILABLE))
            continue
        info = infos.get(line.raw_name)
        status = ResolutionStatus.RESOLVED if info is not None else ResolutionStatus.NOT_FOUND
        cards.append(build_resolved_card(line, info, tcg, status, hinted_printing))
    return cards


# =============================================================================
# AGGREGATES
# =============================================================================


def compute_breakdown(cards: Sequence[ResolvedCard], tcg: Tcg) -> dict[str, int]:
    """Per-category card counts for the game's deck shape."""
    if tcg == Tcg.RIFTBOUND:
        breakdown = {"mainDeck": 0}
        breakdown.update({key: 0 for _category, key in RIFTBOUND_BREAKDOWN_KEYS})
        keys = dict(RIFTBOUND_BREAKDOWN_KEYS)
        for card in cards:
            if card.category in RIFTBOUND_SLOT_CATEGORIES:
                breakdown[keys[card.category]] += card.quantity
            else:
                breakdown["mainDeck"] += card.quantity
        return breakdown

    breakdown = {key: 0 for _category, key in POKEMON_BREAKDOWN_KEYS}
    breakdown["unknown"] = 0
    keys = dict(POKEMON_BREAKDOWN_KEYS)
    for card in cards:
        breakdown[keys.get(card.category, "unknown")] += card.quantity
    return breakdown


def compute_stats(cards: Sequence[ResolvedCard], groups: Sequence[CardGroup]) -> DeckStats:
    return DeckStats(
        total_cards=sum(c.quantity for c in cards),
        unique_cards=len(cards),
        unique_names=len(groups),
        groups_exceeding_limit=sum(1 for g in groups if g.exceeds_limit),
        unresolved_cards=sum(1 for c in cards if not c.is_resolved),
    )


# =============================================================================
# ENTRY POINT
# =============================================================================


async def parse_deck_list(
    raw_text: str,
    format_override: DeckFormat | str | None = None,
    *,
    resolver: CardResolver,
    resolver_timeout: float | None = None,
    require_resolution: bool = False,
) -> DeckParseResult:
    """
    Parse, classify, group and validate pasted deck text.

    Args:
        raw_text: Deck text exactly as pasted
        format_override: Explicit format, or None / "auto" to detect it
        resolver: Card resolver collaborator
        resolver_timeout: Seconds to wait for the resolver; a timeout is
            treated as the resolver being unavailable
        require_resolution: Fail the run instead of degrading when the
            resolver is unavailable

    Returns:
        DeckParseResult describing every card, group, issue and bad line

    Raises:
        ValueError: If format_override names no known format
        ResolutionUnavailableError: Resolver failed and require_resolution is set
    """
    override = (
        format_override
        if isinstance(format_override, DeckFormat) or format_override is None
        else parse_format_choice(format_override)
    )

    tokenized = tokenize_deck(raw_text)
    lines = tokenized.parsed_lines

    infos = await resolve_cards(lines, resolver, resolver_timeout, require_resolution)

    classification = classify_tcg(lines, tokenized.dialect, infos)
    tcg = classification.tcg

    cards = build_resolved_cards(lines, infos, tcg)
    detection = detect_format(cards, tcg, override)
    groups = group_reprints(cards, tcg, detection.format)
    validation = validate_deck(cards, groups, detection.format, tcg)

    result = DeckParseResult(
        tcg=tcg,
        tcg_confidence=classification.confidence,
        tcg_reasons=classification.reasons,
        input_format=tokenized.dialect,
        format=detection.format,
        format_confidence=detection.confidence,
        format_reason=detection.reason,
        is_format_override=detection.is_override,
        cards=tuple(cards),
        reprint_groups=tuple(groups),
        breakdown=compute_breakdown(cards, tcg),
        stats=compute_stats(cards, groups),
        validation=validation,
        line_errors=tuple(tokenized.line_errors),
        resolver_available=infos is not None,
    )

    logger.info(
        "Parsed deck: dialect=%s, tcg=%s (%d%%), format=%s, cards=%d, line_errors=%d, valid=%s",
        tokenized.dialect.value,
        tcg.value,
        classification.confidence,
        detection.format.value,
        result.stats.total_cards,
        len(result.line_errors),
        validation.is_valid,
    )
    return result


class DeckImportSession:
    """
    Last-write-wins wrapper around parse_deck_list for live editing.

    Each submit() gets the next sequence number and cancels the run in
    flight. A run that finishes after a newer one was submitted returns
    None and never replaces `latest`. Cancelling the caller of submit()
    still raises CancelledError.
    """

    def __init__(
        self,
        resolver: CardResolver,
        resolver_timeout: float | None = None,
        require_resolution: bool = False,
    ) -> None:
        self._resolver = resolver
        self._resolver_timeout = resolver_timeout
        self._require_resolution = require_resolution
        self._sequence = 0
        self._in_flight: asyncio.Task[DeckParseResult] | None = None
        self._superseded: set[asyncio.Task[DeckParseResult]] = set()
        self.latest: DeckParseResult | None = None
        self.latest_sequence = 0

    @property
    def sequence(self) -> int:
        """Sequence number of the most recently submitted run."""
        return self._sequence

    async def submit(
        self,
        raw_text: str,
        format_override: DeckFormat | str | None = None,
    ) -> DeckParseResult | None:
        """
        Start a run, superseding any run still in flight.

        Returns:
            The result if this run is still the newest when it finishes,
            otherwise None
        """
        self._sequence += 1
        sequence = self._sequence

        if self._in_flight is not None and not self._in_flight.done():
            self._superseded.add(self._in_flight)
            self._in_flight.cancel()

        task = asyncio.create_task(
            parse_deck_list(
                raw_text,
                format_override,
                resolver=self._resolver,
                resolver_timeout=self._resolver_timeout,
                require_resolution=self._require_resolution,
            )
        )
        self._in_flight = task

        try:
            result = await task
        except asyncio.CancelledError:
            # Only a cancellation issued by a newer submit() is absorbed
            current = asyncio.current_task()
            caller_cancelled = current is not None and current.cancelling() > 0
            if task in self._superseded and not caller_cancelled:
                logger.debug("Run #%d superseded by #%d", sequence, self._sequence)
                return None
            raise
        except ResolutionUnavailableError:
            if sequence != self._sequence:
                logger.debug("Run #%d superseded by #%d", sequence, self._sequence)
                return None
            raise
        finally:
            self._superseded.discard(task)

        if sequence != self._sequence:
            logger.debug("Discarding stale run #%d (latest is #%d)", sequence, self._sequence)
            return None

        self.latest = result
        self.latest_sequence = sequence
        return result
