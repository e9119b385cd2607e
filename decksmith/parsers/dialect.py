"""
Dialect Detector.

Classifies raw deck text into one of the closed set of textual dialects
using structural signatures only (section headers, multiplier tokens).

The detector never fails: text matching no signature is GENERIC_LIST.
Signatures are checked in priority order and the first match wins;
counts are never compared across signatures.
"""

import re
from collections.abc import Callable

from decksmith.models.game import CardCategory, Dialect

# Pokémon TCG Live section headers: "Pokémon: 12", "Trainer: 36", "Energy:" (EN/ES)
LIVE_SECTION_PATTERN = re.compile(
    r"^(?P<label>pok[eé]mon|trainers?|energy|energies|entrenador(?:es)?|energ[ií]as?)"
    r"\s*(?::\s*(?P<count>\d+)?)?\s*$",
    re.IGNORECASE,
)

# Riftbound export section headers: "Legend:", "Main Deck: 40", "Runes: 12"
RIFTBOUND_SECTION_PATTERN = re.compile(
    r"^(?P<label>legend|champion|main\s*deck|battlefields?|runes?)"
    r"\s*(?::\s*(?P<count>\d+)?)?\s*$",
    re.IGNORECASE,
)

# Export metadata that is neither a header nor a card: "Total Cards: 60"
METADATA_PATTERN = re.compile(r"^total\s+cards\s*:\s*\d+\s*$", re.IGNORECASE)

# Trailing multiplier token: "Pikachu ex x2", "Mew ex ×1"
POCKET_MULTIPLIER_PATTERN = re.compile(r"(?:\s[xX]|×)\s*-?\d+\s*$")

# Share of candidate lines that must carry a trailing multiplier
POCKET_LINE_RATIO = 0.6

COMMENT_PREFIXES = ("//", "#")

_LIVE_SECTION_CATEGORIES: dict[str, CardCategory] = {
    "pokémon": CardCategory.POKEMON,
    "pokemon": CardCategory.POKEMON,
    "trainer": CardCategory.TRAINER,
    "trainers": CardCategory.TRAINER,
    "entrenador": CardCategory.TRAINER,
    "entrenadores": CardCategory.TRAINER,
    "energy": CardCategory.ENERGY,
    "energies": CardCategory.ENERGY,
    "energía": CardCategory.ENERGY,
    "energia": CardCategory.ENERGY,
    "energías": CardCategory.ENERGY,
    "energias": CardCategory.ENERGY,
}

_RIFTBOUND_SECTION_CATEGORIES: dict[str, CardCategory | None] = {
    "legend": CardCategory.LEGEND,
    "champion": CardCategory.UNIT,
    "maindeck": None,
    "battlefield": CardCategory.BATTLEFIELD,
    "battlefields": CardCategory.BATTLEFIELD,
    "rune": CardCategory.RUNE,
    "runes": CardCategory.RUNE,
}


def is_comment(line: str) -> bool:
    """True for comment lines ("// ..." or "# ...")."""
    return line.startswith(COMMENT_PREFIXES)


def live_section_category(line: str) -> CardCategory | None:
    """Category named by a Pokémon TCG Live section header, or None."""
    match = LIVE_SECTION_PATTERN.match(line)
    if match is None:
        return None
    return _LIVE_SECTION_CATEGORIES[match.group("label").lower()]


def riftbound_section_category(line: str) -> tuple[bool, CardCategory | None]:
    """
    Check a line against the Riftbound section headers.

    Returns:
        (is_header, category); the main-deck header has no category
    """
    match = RIFTBOUND_SECTION_PATTERN.match(line)
    if match is None:
        return False, None
    label = re.sub(r"\s+", "", match.group("label").lower())
    return True, _RIFTBOUND_SECTION_CATEGORIES[label]


def candidate_lines(text: str) -> list[str]:
    """Stripped lines that are not blank, comments, headers or metadata."""
    lines: list[str] = []
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or is_comment(stripped):
            continue
        if METADATA_PATTERN.match(stripped):
            continue
        if LIVE_SECTION_PATTERN.match(stripped) or RIFTBOUND_SECTION_PATTERN.match(stripped):
            continue
        lines.append(stripped)
    return lines


def _has_live_headers(text: str) -> bool:
    return any(LIVE_SECTION_PATTERN.match(line.strip()) for line in text.splitlines())


def _has_riftbound_headers(text: str) -> bool:
    return any(RIFTBOUND_SECTION_PATTERN.match(line.strip()) for line in text.splitlines())


def _has_pocket_multipliers(text: str) -> bool:
    lines = candidate_lines(text)
    if not lines:
        return False
    matching = sum(1 for line in lines if POCKET_MULTIPLIER_PATTERN.search(line))
    return matching >= len(lines) * POCKET_LINE_RATIO


# Ordered battery of structural signatures. First match wins.
SIGNATURES: tuple[tuple[Dialect, Callable[[str], bool]], ...] = (
    (Dialect.LIVE_EXPORT, _has_live_headers),
    (Dialect.RIFTBOUND_EXPORT, _has_riftbound_headers),
    (Dialect.POCKET_EXPORT, _has_pocket_multipliers),
)


def detect_dialect(text: str) -> Dialect:
    """
    Classify raw deck text into a dialect.

    Args:
        text: Raw pasted deck text

    Returns:
        The first dialect whose signature matches, else GENERIC_LIST
    """
    for dialect, signature in SIGNATURES:
        if signature(text):
            return dialect
    return Dialect.GENERIC_LIST
