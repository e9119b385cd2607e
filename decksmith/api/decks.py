"""
Deck API endpoints.

Parses pasted deck lists into the DeckParseResult contract.
"""

from typing import Annotated, Any, Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from decksmith.config import settings
from decksmith.models.deck import DeckParseResult
from decksmith.models.failure import ApiResponse, create_success
from decksmith.services.card_resolver import CardResolver, get_card_resolver
from decksmith.services.deck_pipeline import parse_deck_list

router = APIRouter(prefix="/decks", tags=["decks"])

# Deck text larger than this is not a deck list
MAX_DECK_STRING_LENGTH = 20_000


class ParseDeckRequest(BaseModel):
    """Request model for parsing a deck list."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    deck_string: str = Field(..., max_length=MAX_DECK_STRING_LENGTH)
    format: Literal["auto", "standard", "expanded", "glc", "constructed"] = "auto"


@router.post(
    "/parse",
    response_model=ApiResponse[DeckParseResult],
    response_model_by_alias=True,
    responses={503: {"model": ApiResponse[Any]}},
)
async def parse_deck(
    request: ParseDeckRequest,
    resolver: Annotated[CardResolver, Depends(get_card_resolver)],
) -> Any:
    """
    Parse a pasted deck list.

    Detects the game, dialect and format, groups reprints and validates
    the deck. Malformed lines and rule violations are reported inside a
    successful response; only a card resolver outage (when resolution is
    required) produces a failure response.
    """
    result = await parse_deck_list(
        request.deck_string,
        request.format,
        resolver=resolver,
        resolver_timeout=settings.resolver_timeout_seconds,
        require_resolution=settings.require_card_resolution,
    )
    return create_success(result)
