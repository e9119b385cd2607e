"""
Deck text splitting.

Walks raw deck text line by line, tracks the section header each line
sits under, and hands every remaining line to the line tokenizer.

Blank lines, comments, section headers and export metadata are
structural and never become RawLines. Line numbers are 1-based physical
line numbers of the original text so diagnostics point at what the
user actually typed.
"""

from dataclasses import dataclass

from decksmith.models.card import LineError, ParsedCardLine, RawLine
from decksmith.models.game import CardCategory, Dialect
from decksmith.parsers.dialect import (
    METADATA_PATTERN,
    detect_dialect,
    is_comment,
    live_section_category,
    riftbound_section_category,
)
from decksmith.parsers.line_tokenizer import tokenize_line


@dataclass(frozen=True, slots=True)
class TokenizedDeck:
    """Ordered tokenizer output for one parse run."""

    dialect: Dialect
    entries: tuple[ParsedCardLine | LineError, ...]

    @property
    def parsed_lines(self) -> list[ParsedCardLine]:
        """Successfully tokenized lines in input order."""
        return [e for e in self.entries if isinstance(e, ParsedCardLine)]

    @property
    def line_errors(self) -> list[LineError]:
        """Rejected lines in input order."""
        return [e for e in self.entries if isinstance(e, LineError)]


def _section_header(line: str, dialect: Dialect) -> tuple[bool, CardCategory | None]:
    if dialect == Dialect.LIVE_EXPORT:
        category = live_section_category(line)
        return category is not None, category
    if dialect == Dialect.RIFTBOUND_EXPORT:
        return riftbound_section_category(line)
    return False, None


def split_raw_lines(text: str, dialect: Dialect) -> list[tuple[RawLine, CardCategory | None]]:
    """
    Split text into RawLines paired with their enclosing section category.

    Args:
        text: Raw deck text
        dialect: Dialect whose section headers are recognized

    Returns:
        (RawLine, section) pairs in input order
    """
    lines: list[tuple[RawLine, CardCategory | None]] = []
    section: CardCategory | None = None

    for number, physical in enumerate(text.splitlines(), start=1):
        stripped = physical.strip()
        if not stripped or is_comment(stripped):
            continue
        if METADATA_PATTERN.match(stripped):
            continue

        is_header, category = _section_header(stripped, dialect)
        if is_header:
            section = category
            continue

        lines.append((RawLine(number=number, text=stripped), section))

    return lines


def tokenize_deck(text: str, dialect: Dialect | None = None) -> TokenizedDeck:
    """
    Tokenize a whole deck list in one tolerant pass.

    A bad line never stops the pass; it is reported as a LineError in
    its place and the following lines are still tokenized.

    Args:
        text: Raw deck text
        dialect: Dialect to apply; detected from the text when None

    Returns:
        TokenizedDeck with one entry per RawLine
    """
    if dialect is None:
        dialect = detect_dialect(text)

    entries = tuple(
        tokenize_line(raw_line, dialect, section)
        for raw_line, section in split_raw_lines(text, dialect)
    )
    return TokenizedDeck(dialect=dialect, entries=entries)
