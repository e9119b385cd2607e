from decksmith.parsers.deck_text import TokenizedDeck, split_raw_lines, tokenize_deck
from decksmith.parsers.dialect import detect_dialect, is_comment
from decksmith.parsers.line_tokenizer import tokenize_line

__all__ = [
    "TokenizedDeck",
    "detect_dialect",
    "is_comment",
    "split_raw_lines",
    "tokenize_deck",
    "tokenize_line",
]
