"""
Line Tokenizer.

THIS MODULE HANDLES SYNTAX ONLY.

Turns one RawLine into a ParsedCardLine under the grammar of the active
dialect, or into a LineError naming why the line was rejected.

Tokenization never raises for malformed text. A quantity of zero or
less, or a missing name, is always a LineError; nothing is dropped
silently and nothing is defaulted to one copy.
"""

import re

from decksmith.models.card import LineError, LineErrorReason, ParsedCardLine, RawLine
from decksmith.models.game import CardCategory, Dialect

# Leading list decoration: "- 4 Pikachu", "• Mew ex x1". Requires a space or
# end of line after the bullet run so "-1 Pikachu" keeps its sign.
DECORATION_PATTERN = re.compile(r"^[*•·\-–]+(?=\s|$)\s*")

# "4 Card Name", "4x Card Name", "4 x Card Name", "4" (name missing).
# A spaced multiplier is lowercase or "×" so "4 X Speed" keeps its name.
LEADING_QUANTITY_PATTERN = re.compile(
    r"^(?P<qty>[-+]?\d+)(?:[xX×]|\s+[x×](?=\s|$))?(?:\s+(?P<rest>.*))?$"
)

# "Card Name x2", "Card Name (A1) ×2"
TRAILING_QUANTITY_PATTERN = re.compile(
    r"^(?P<name>.*?)(?:\s*\((?P<set>[^()]*)\))?(?:\s+[xX]|\s*×)\s*(?P<qty>[-+]?\d+)$"
)

# Multiplier with nothing in front of it: "x2"
BARE_MULTIPLIER_PATTERN = re.compile(r"^[xX×]\s*[-+]?\d+$")

# Name ending in a dangling multiplier: "Pikachu ex x"
DANGLING_MULTIPLIER_PATTERN = re.compile(r"(?:\s[xX]|×)\s*$")

# Live export: "Pikachu ex SVI 057", "Professor's Research PR-SV 122", "Iono PAL 185a"
LIVE_SET_PATTERN = re.compile(
    r"^(?P<name>.+?)\s+(?P<set>[A-Z][A-Z0-9]{1,4}(?:-[A-Z0-9]{1,4})?)"
    r"\s+(?P<number>[A-Za-z]{0,5}\d+[A-Za-z]?)$"
)

# Live export variant with a dash between set and number: "Pikachu SVI-189"
LIVE_SET_DASH_PATTERN = re.compile(
    r"^(?P<name>.+?)\s+(?P<set>[A-Z]{2,5})-(?P<number>[A-Za-z]{0,5}\d+[A-Za-z]?)$",
    re.IGNORECASE,
)

# A set reference with no card name in front of it: "ssp-97"
SET_ONLY_PATTERN = re.compile(r"^[A-Za-z]{2,5}-?\d{1,4}$")

ALPHANUMERIC_PATTERN = re.compile(r"\w")


def _error(line: RawLine, reason: LineErrorReason) -> LineError:
    return LineError(source_line=line, reason=reason)


def _quantity_error(quantity: int, line: RawLine) -> LineError | None:
    if quantity <= 0:
        return _error(line, LineErrorReason.NON_POSITIVE_QUANTITY)
    return None


def _normalize_whitespace(value: str) -> str:
    return " ".join(value.split())


def _tokenize_live(
    text: str, line: RawLine, section: CardCategory | None
) -> ParsedCardLine | LineError:
    match = LEADING_QUANTITY_PATTERN.match(text)
    if match is None:
        return _missing_leading_quantity(text, line)

    quantity = int(match.group("qty"))
    if error := _quantity_error(quantity, line):
        return error

    rest = _normalize_whitespace(match.group("rest") or "")
    if not rest or SET_ONLY_PATTERN.match(rest):
        return _error(line, LineErrorReason.MISSING_NAME)

    set_match = LIVE_SET_PATTERN.match(rest) or LIVE_SET_DASH_PATTERN.match(rest)
    if set_match:
        return ParsedCardLine(
            quantity=quantity,
            raw_name=set_match.group("name").strip(),
            source_line=line,
            set_code=set_match.group("set").upper(),
            collector_number=set_match.group("number"),
            section=section,
        )

    # Name without printing info; the resolver looks it up by name
    return ParsedCardLine(quantity=quantity, raw_name=rest, source_line=line, section=section)


def _tokenize_pocket(text: str, line: RawLine) -> ParsedCardLine | LineError:
    if BARE_MULTIPLIER_PATTERN.match(text):
        return _error(line, LineErrorReason.MISSING_NAME)

    match = TRAILING_QUANTITY_PATTERN.match(text)
    if match is None:
        if DANGLING_MULTIPLIER_PATTERN.search(text) or LEADING_QUANTITY_PATTERN.match(text):
            return _error(line, LineErrorReason.MISSING_QUANTITY)
        if text[0].isalpha():
            return _error(line, LineErrorReason.MISSING_QUANTITY)
        return _error(line, LineErrorReason.UNRECOGNIZED_STRUCTURE)

    quantity = int(match.group("qty"))
    if error := _quantity_error(quantity, line):
        return error

    name = _normalize_whitespace(match.group("name"))
    if not name:
        return _error(line, LineErrorReason.MISSING_NAME)

    set_code = (match.group("set") or "").strip() or None
    return ParsedCardLine(quantity=quantity, raw_name=name, source_line=line, set_code=set_code)


def _tokenize_leading(
    text: str, line: RawLine, section: CardCategory | None
) -> ParsedCardLine | LineError:
    match = LEADING_QUANTITY_PATTERN.match(text)
    if match is None:
        # Generic lists occasionally mix in "Card Name x4" lines
        trailing = TRAILING_QUANTITY_PATTERN.match(text)
        if trailing and _normalize_whitespace(trailing.group("name")):
            quantity = int(trailing.group("qty"))
            if error := _quantity_error(quantity, line):
                return error
            return ParsedCardLine(
                quantity=quantity,
                raw_name=_normalize_whitespace(trailing.group("name")),
                source_line=line,
                section=section,
            )
        return _missing_leading_quantity(text, line)

    quantity = int(match.group("qty"))
    if error := _quantity_error(quantity, line):
        return error

    name = _normalize_whitespace(match.group("rest") or "")
    if not name:
        return _error(line, LineErrorReason.MISSING_NAME)

    return ParsedCardLine(quantity=quantity, raw_name=name, source_line=line, section=section)


def _missing_leading_quantity(text: str, line: RawLine) -> LineError:
    # Starts like a number but fits no grammar ("4.5 Pikachu", "3/4 Iono")
    if text[0].isdigit() or text[0] in "+-":
        return _error(line, LineErrorReason.UNRECOGNIZED_STRUCTURE)
    return _error(line, LineErrorReason.MISSING_QUANTITY)


def tokenize_line(
    line: RawLine,
    dialect: Dialect,
    section: CardCategory | None = None,
) -> ParsedCardLine | LineError:
    """
    Tokenize one line under the grammar of a dialect.

    Args:
        line: The physical line and its 1-based number
        dialect: Grammar to apply
        section: Category implied by the enclosing section header, if any

    Returns:
        ParsedCardLine on success, LineError otherwise (never raises)
    """
    text = DECORATION_PATTERN.sub("", line.text.strip()).strip()
    if not text:
        return _error(line, LineErrorReason.EMPTY_AFTER_TRIM)

    if not ALPHANUMERIC_PATTERN.search(text):
        return _error(line, LineErrorReason.UNRECOGNIZED_STRUCTURE)

    if dialect == Dialect.LIVE_EXPORT:
        return _tokenize_live(text, line, section)
    if dialect == Dialect.POCKET_EXPORT:
        return _tokenize_pocket(text, line)
    return _tokenize_leading(text, line, section)
