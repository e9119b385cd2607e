"""
Card Resolver.

The card resolver is an external collaborator: given names and printing
hints, it answers with canonical card identities. The pipeline depends
only on the CardResolver protocol.

INVARIANTS:
1. resolve_many answers every requested name; unknown names map to None
2. Name matching is exact after normalization (no fuzzy matching)
3. Infrastructure failure raises ResolutionUnavailableError, never a
   partial answer
"""

import logging
from functools import lru_cache
from typing import Any, Protocol

import httpx

from decksmith.config import settings
from decksmith.models.card import CardHint, CardInfo
from decksmith.models.failure import ResolutionUnavailableError
from decksmith.services.card_database import card_info_from_record, get_card_database
from decksmith.services.card_traits import normalize_card_name
from decksmith.services.set_codes import card_id_for

logger = logging.getLogger(__name__)

RESOLVE_ENDPOINT = "/cards/resolve"


class CardResolver(Protocol):
    """Batch card lookup used by the parse pipeline."""

    async def resolve_many(
        self,
        names: list[str],
        hints: list[CardHint],
    ) -> dict[str, CardInfo | None]:
        """
        Resolve card names in one batch.

        Args:
            names: Distinct card names as typed
            hints: Printing hint for each name (same order and length)

        Returns:
            Mapping of every requested name to its CardInfo, or None if
            the name is unknown

        Raises:
            ResolutionUnavailableError: If the resolver cannot answer
        """
        ...


class CardDatabaseResolver:
    """
    Resolves names against the local card cache.

    A printing hint picks the exact printing when it names the same
    card; otherwise the first printing of the name is used.
    """

    def __init__(self, card_db: dict[str, dict[str, Any]]) -> None:
        """
        Initialize resolver with the card cache.

        Args:
            card_db: Card records keyed by card id
        """
        self._card_db = card_db
        self._by_name = self._build_name_index()

    def _build_name_index(self) -> dict[str, dict[str, Any]]:
        index: dict[str, dict[str, Any]] = {}
        for record in self._card_db.values():
            key = normalize_card_name(record["name"])
            if key not in index:
                index[key] = record
        return index

    def _printing(self, hint: CardHint) -> dict[str, Any] | None:
        if not hint.set_code or not hint.collector_number:
            return None
        number = hint.collector_number
        for candidate in (number, number.lstrip("0") or "0"):
            record = self._card_db.get(card_id_for(hint.set_code, candidate))
            if record is not None:
                return record
        return None

    def lookup(self, name: str, hint: CardHint | None = None) -> CardInfo | None:
        """Resolve a single name, or None if it is not in the cache."""
        key = normalize_card_name(name)
        if hint is not None:
            printing = self._printing(hint)
            if printing is not None and normalize_card_name(printing["name"]) == key:
                return card_info_from_record(printing)

        record = self._by_name.get(key)
        if record is None:
            return None
        return card_info_from_record(record)

    async def resolve_many(
        self,
        names: list[str],
        hints: list[CardHint],
    ) -> dict[str, CardInfo | None]:
        try:
            return {
                name: self.lookup(name, hint) for name, hint in zip(names, hints, strict=True)
            }
        except (KeyError, ValueError) as e:
            logger.warning("Card cache holds an invalid record: %s", e)
            raise ResolutionUnavailableError(detail="Card cache holds an invalid record") from e


class HttpCardResolver:
    """
    Resolves names through the remote card service.

    One POST per batch. Any transport error, timeout, non-2xx status or
    malformed body is reported as ResolutionUnavailableError.
    """

    def __init__(
        self,
        base_url: str,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._url = base_url.rstrip("/") + RESOLVE_ENDPOINT
        self._client = client
        self._timeout = timeout

    async def resolve_many(
        self,
        names: list[str],
        hints: list[CardHint],
    ) -> dict[str, CardInfo | None]:
        payload = {
            "cards": [
                {"name": name, "setCode": hint.set_code, "number": hint.collector_number}
                for name, hint in zip(names, hints, strict=True)
            ]
        }

        try:
            if self._client is not None:
                response = await self._client.post(self._url, json=payload, timeout=self._timeout)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(self._url, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as e:
            logger.warning("Card service request failed: %s", e)
            raise ResolutionUnavailableError(detail=f"{type(e).__name__}: {e}") from e
        except ValueError as e:
            logger.warning("Card service returned malformed JSON: %s", e)
            raise ResolutionUnavailableError(detail="Malformed card service response") from e

        return self._parse_body(names, body)

    def _parse_body(self, names: list[str], body: Any) -> dict[str, CardInfo | None]:
        cards = body.get("cards") if isinstance(body, dict) else None
        if not isinstance(cards, dict):
            raise ResolutionUnavailableError(detail="Card service response has no 'cards' object")

        resolved: dict[str, CardInfo | None] = {}
        for name in names:
            record = cards.get(name)
            if not record:
                resolved[name] = None
                continue
            try:
                resolved[name] = card_info_from_record(record)
            except (KeyError, ValueError) as e:
                raise ResolutionUnavailableError(
                    detail=f"Card service returned an invalid record for {name!r}"
                ) from e
        return resolved


class UnconfiguredCardResolver:
    """Stand-in used when no card source is configured; always unavailable."""

    async def resolve_many(
        self,
        names: list[str],
        hints: list[CardHint],
    ) -> dict[str, CardInfo | None]:
        raise ResolutionUnavailableError(detail="No card source configured")


@lru_cache(maxsize=1)
def _local_resolver() -> CardDatabaseResolver:
    return CardDatabaseResolver(get_card_database())


def get_card_resolver() -> CardResolver:
    """
    Resolver for the configured card source.

    A remote card service takes precedence over the local card cache.
    With neither available every run degrades to unresolved cards.
    """
    if settings.card_service_url:
        return HttpCardResolver(
            settings.card_service_url,
            timeout=settings.resolver_timeout_seconds,
        )

    if settings.card_database_path:
        try:
            return _local_resolver()
        except (FileNotFoundError, KeyError, ValueError) as e:
            logger.warning("Card cache unavailable: %s", e)

    return UnconfiguredCardResolver()
