"""
Deck Parse Result Models.

DeckParseResult is the externally visible aggregate of one pipeline run.
Its field names (camelCase on the wire) are the stable contract that
presentation layers render directly.

INVARIANTS:
- CardGroup.total_quantity == sum of its printings' quantities
- CardGroup.status is a pure function of (total_quantity, limit, is_basic_energy)
- DeckParseResult is fully determined by (raw text, format override,
  resolver responses); it holds no hidden mutable state
"""

from dataclasses import dataclass
from enum import Enum

from pydantic import Field, model_validator

from decksmith.models.base import ResultModel
from decksmith.models.card import LineError, ResolvedCard
from decksmith.models.game import DeckFormat, Dialect, Tcg
from decksmith.models.validation import ValidationReport


class GroupStatus(str, Enum):
    """Copy-limit standing of a reprint group."""

    UNDER = "under"
    AT_LIMIT = "at_limit"
    EXCEEDED = "exceeded"
    UNLIMITED = "unlimited"


def compute_group_status(total_quantity: int, limit: int, is_basic_energy: bool) -> GroupStatus:
    """Classify a group against its per-name copy limit."""
    if is_basic_energy:
        return GroupStatus.UNLIMITED
    if total_quantity > limit:
        return GroupStatus.EXCEEDED
    if total_quantity == limit:
        return GroupStatus.AT_LIMIT
    return GroupStatus.UNDER


class CardGroup(ResultModel):
    """
    All printings sharing one canonical card name.

    Attributes:
        key: Normalized grouping key (casefolded, diacritics removed)
        name: Display name of the group
        cards: Contributing printings in input order
        total_quantity: Sum of quantities across printings
        limit: Per-name copy cap in the active format
        is_basic_energy: Basic resource card (uncapped)
        status: Standing against the limit
    """

    key: str
    name: str
    cards: tuple[ResolvedCard, ...]
    total_quantity: int
    limit: int
    is_basic_energy: bool
    status: GroupStatus

    @model_validator(mode="after")
    def _check_invariants(self) -> "CardGroup":
        if self.total_quantity != sum(c.quantity for c in self.cards):
            raise ValueError("total_quantity must equal the sum of printing quantities")
        expected = compute_group_status(self.total_quantity, self.limit, self.is_basic_energy)
        if self.status != expected:
            raise ValueError(f"status must be {expected.value}, got {self.status.value}")
        return self

    @property
    def exceeds_limit(self) -> bool:
        """True if the group breaks its copy limit."""
        return self.status == GroupStatus.EXCEEDED


@dataclass(frozen=True, slots=True)
class TcgClassification:
    """Game classifier verdict."""

    tcg: Tcg
    confidence: int
    reasons: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class FormatDetection:
    """
    Format detector verdict.

    reason is a single sentence by contract, never a list.
    """

    format: DeckFormat
    confidence: int
    reason: str
    is_override: bool = False


class DeckStats(ResultModel):
    """Numeric summary of the parsed list."""

    total_cards: int = 0
    unique_cards: int = 0
    unique_names: int = 0
    groups_exceeding_limit: int = 0
    unresolved_cards: int = 0


class DeckParseResult(ResultModel):
    """Everything one parse run produced."""

    tcg: Tcg
    tcg_confidence: int = Field(ge=0, le=100)
    tcg_reasons: tuple[str, ...]
    input_format: Dialect
    format: DeckFormat
    format_confidence: int = Field(ge=0, le=100)
    format_reason: str
    is_format_override: bool
    cards: tuple[ResolvedCard, ...]
    reprint_groups: tuple[CardGroup, ...]
    breakdown: dict[str, int]
    stats: DeckStats
    validation: ValidationReport
    line_errors: tuple[LineError, ...]
    resolver_available: bool = True
