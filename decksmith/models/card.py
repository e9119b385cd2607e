"""
Card Models.

This module defines the trust boundary between raw deck-list lines
and resolved card identities.

INVARIANTS:
- RawLine / ParsedCardLine are UNTRUSTED text extracted from user input
- CardInfo is what the external card resolver knows about a name
- ResolvedCard is a ParsedCardLine enriched with CardInfo (or flagged
  as unresolved); it still counts toward deck totals either way
- All models are immutable after construction
"""

from dataclasses import dataclass
from enum import Enum

from decksmith.models.base import ResultModel
from decksmith.models.game import CardCategory, Tcg


class RawLine(ResultModel):
    """One non-empty, non-comment physical line of input."""

    number: int
    text: str


class LineErrorReason(str, Enum):
    """Why a line could not be tokenized. Closed set."""

    EMPTY_AFTER_TRIM = "empty_after_trim"
    MISSING_QUANTITY = "missing_quantity"
    NON_POSITIVE_QUANTITY = "non_positive_quantity"
    MISSING_NAME = "missing_name"
    UNRECOGNIZED_STRUCTURE = "unrecognized_structure"


class LineError(ResultModel):
    """A line the active dialect grammar rejected. Always recoverable."""

    source_line: RawLine
    reason: LineErrorReason


@dataclass(frozen=True, slots=True)
class ParsedCardLine:
    """
    A tokenized card line. NOT YET RESOLVED.

    Attributes:
        quantity: Copies on this line (always >= 1)
        raw_name: Card name exactly as typed
        source_line: The line this entry came from
        set_code: Set abbreviation if the dialect encodes one (e.g., "SVI")
        collector_number: Number within the set (e.g., "057", "TG01")
        section: Category implied by the section header above the line
    """

    quantity: int
    raw_name: str
    source_line: RawLine
    set_code: str | None = None
    collector_number: str | None = None
    section: CardCategory | None = None


@dataclass(frozen=True, slots=True)
class CardHint:
    """Printing hint passed alongside a name to the card resolver."""

    set_code: str | None = None
    collector_number: str | None = None


@dataclass(frozen=True, slots=True)
class CardInfo:
    """
    Canonical card identity returned by the card resolver.

    Attributes:
        card_id: Resolver identifier of the printing (e.g., "sv01-057")
        name: Canonical card name
        tcg: Game the card belongs to
        supertype: Category label as the resolver spells it
            ("Pokémon", "Trainer", "Energy", "Legend", "Rune", "Unit", ...)
        subtypes: Subtype labels ("Basic", "ex", "ACE SPEC", "Radiant", ...)
        types: Pokémon energy types or Riftbound domains
        regulation_mark: Printed regulation mark letter, if any
        evolution_stage: Stage label when the resolver reports one
    """

    card_id: str
    name: str
    tcg: Tcg
    supertype: str | None = None
    subtypes: tuple[str, ...] = ()
    types: tuple[str, ...] = ()
    regulation_mark: str | None = None
    evolution_stage: str | None = None


class ResolutionStatus(str, Enum):
    """Outcome of resolving one card name."""

    RESOLVED = "resolved"
    NOT_FOUND = "not_found"  # resolver answered, name unknown
    UNAVAILABLE = "unavailable"  # resolver could not be reached


class ResolvedCard(ResultModel):
    """
    A deck entry after resolution.

    Unresolved entries keep the typed name and quantity so they still
    count toward totals; their flags fall back to name-based detection.
    """

    name: str
    quantity: int
    line_number: int
    category: CardCategory
    resolution: ResolutionStatus
    card_id: str | None = None
    set_code: str | None = None
    collector_number: str | None = None
    supertype: str | None = None
    subtypes: tuple[str, ...] = ()
    types: tuple[str, ...] = ()
    regulation_mark: str | None = None
    is_basic_energy: bool = False
    is_ace_spec: bool = False
    is_radiant: bool = False
    is_rule_box: bool = False
    is_basic: bool = False

    @property
    def is_resolved(self) -> bool:
        """True if the resolver recognized this card."""
        return self.resolution == ResolutionStatus.RESOLVED
