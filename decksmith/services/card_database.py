"""
Card database service.

Loads and caches the local card cache: a JSON export of card records
from the card service, one record per printing.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

import httpx

from decksmith.config import settings
from decksmith.models.card import CardInfo
from decksmith.models.game import Tcg

DATA_DIR = Path(__file__).parent.parent / "data"
DEFAULT_DATABASE_PATH = DATA_DIR / "card-cache.json"
EXPORT_ENDPOINT = "/cards/export"


async def download_card_database(
    service_url: str | None = None,
    output_path: Path | None = None,
) -> Path:
    """
    Download the card cache export from the card service.

    Args:
        service_url: Card service base URL. Defaults to settings.card_service_url
        output_path: Where to save the file. Defaults to data/card-cache.json

    Returns:
        Path to downloaded file.

    Raises:
        ValueError: If no card service URL is configured
        httpx.HTTPError: If download fails
    """
    service_url = service_url or settings.card_service_url
    if not service_url:
        raise ValueError("No card service URL configured (set CARD_SERVICE_URL)")

    if output_path is None:
        output_path = DEFAULT_DATABASE_PATH

    output_path.parent.mkdir(parents=True, exist_ok=True)

    async with httpx.AsyncClient(timeout=30.0) as client:
        async with client.stream(
            "GET", service_url.rstrip("/") + EXPORT_ENDPOINT, timeout=300.0
        ) as response:
            response.raise_for_status()
            with open(output_path, "wb") as f:
                async for chunk in response.aiter_bytes(8192):
                    f.write(chunk)

    return output_path


def load_card_database(path: Path | None = None) -> dict[str, dict[str, Any]]:
    """
    Load the card cache from file.

    Accepts either a JSON list of card records or an object keyed by
    card id.

    Args:
        path: Path to JSON file. Defaults to data/card-cache.json

    Returns:
        Dict mapping card ids to card records.

    Raises:
        FileNotFoundError: If database file doesn't exist
    """
    if path is None:
        path = DEFAULT_DATABASE_PATH

    if not path.exists():
        raise FileNotFoundError(
            f"Card database not found at {path}. "
            "Run `python -m decksmith.jobs.download_cards` first."
        )

    with open(path, encoding="utf-8") as f:
        raw = json.load(f)

    records = raw.values() if isinstance(raw, dict) else raw

    db: dict[str, dict[str, Any]] = {}
    for card in records:
        card_id = card.get("id")
        if card_id and card.get("name") and card_id not in db:
            db[card_id] = card

    return db


@lru_cache(maxsize=1)
def get_card_database() -> dict[str, dict[str, Any]]:
    """
    Get cached card database.

    Returns:
        Dict mapping card ids to card records.
        Cached after first load.

    Raises:
        FileNotFoundError: If database file doesn't exist
    """
    path = Path(settings.card_database_path) if settings.card_database_path else None
    return load_card_database(path)


def _string_list(value: Any) -> tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


def card_info_from_record(record: dict[str, Any]) -> CardInfo:
    """
    Build a CardInfo from a card service record.

    Understands both Pokémon records (supertype/subtypes/types) and
    Riftbound records (cardType/domains).

    Raises:
        KeyError: If the record has no id or name
        ValueError: If the record names an unknown game
    """
    tcg = Tcg(str(record.get("tcg", Tcg.POKEMON.value)).lower())
    supertype = record.get("supertype") or record.get("category") or record.get("cardType")
    evolution_stage = record.get("evolutionStage") or record.get("stage")

    return CardInfo(
        card_id=record["id"],
        name=record["name"],
        tcg=tcg,
        supertype=supertype,
        subtypes=_string_list(record.get("subtypes")),
        types=_string_list(record.get("types") or record.get("domains")),
        regulation_mark=record.get("regulationMark"),
        evolution_stage=evolution_stage,
    )
