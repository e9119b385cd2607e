"""
DeckSmith services.

Game classification, card resolution, reprint grouping, format
detection, validation and the parse pipeline that sequences them.
"""

from decksmith.services.card_database import (
    card_info_from_record,
    download_card_database,
    get_card_database,
    load_card_database,
)
from decksmith.services.card_resolver import (
    CardDatabaseResolver,
    CardResolver,
    HttpCardResolver,
    UnconfiguredCardResolver,
)
from decksmith.services.card_traits import (
    CardTraits,
    describe_card,
    normalize_card_name,
)
from decksmith.services.deck_formatter import format_deck_list
from decksmith.services.deck_pipeline import DeckImportSession, parse_deck_list
from decksmith.services.deck_validator import validate_deck
from decksmith.services.format_detector import detect_format
from decksmith.services.reprint_grouping import copy_limit, group_reprints
from decksmith.services.scoring import Signal, score_signals
from decksmith.services.tcg_classifier import classify_tcg

__all__ = [
    # Card data
    "CardDatabaseResolver",
    "CardResolver",
    "CardTraits",
    "HttpCardResolver",
    "UnconfiguredCardResolver",
    "card_info_from_record",
    "describe_card",
    "download_card_database",
    "get_card_database",
    "load_card_database",
    "normalize_card_name",
    # Pipeline stages
    "Signal",
    "classify_tcg",
    "copy_limit",
    "detect_format",
    "group_reprints",
    "score_signals",
    "validate_deck",
    # Entry points
    "DeckImportSession",
    "format_deck_list",
    "parse_deck_list",
]
