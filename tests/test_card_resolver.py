"""Tests for card resolvers."""

import json
from pathlib import Path

import httpx
import pytest
import respx

from decksmith.config import settings
from decksmith.models.card import CardHint
from decksmith.models.failure import ResolutionUnavailableError
from decksmith.models.game import Tcg
from decksmith.services import card_database, card_resolver
from decksmith.services.card_resolver import (
    CardDatabaseResolver,
    HttpCardResolver,
    UnconfiguredCardResolver,
    get_card_resolver,
)

RESOLVE_URL = "https://cards.test/cards/resolve"


@pytest.fixture
def card_db() -> dict[str, dict]:
    return {
        "sv01-57": {
            "id": "sv01-57",
            "name": "Pikachu",
            "supertype": "Pokémon",
            "subtypes": ["Basic"],
            "regulationMark": "G",
        },
        "sv03.5-25": {
            "id": "sv03.5-25",
            "name": "Pikachu",
            "supertype": "Pokémon",
            "subtypes": ["Basic"],
            "regulationMark": "G",
        },
        "sv02-185": {"id": "sv02-185", "name": "Iono", "supertype": "Trainer"},
        "sv04.5-234": {"id": "sv04.5-234", "name": "Pokégear 3.0", "supertype": "Trainer"},
    }


@pytest.fixture
def resolver(card_db: dict[str, dict]) -> CardDatabaseResolver:
    return CardDatabaseResolver(card_db)


@pytest.fixture
def clear_resolver_caches():
    card_database.get_card_database.cache_clear()
    card_resolver._local_resolver.cache_clear()
    yield
    card_database.get_card_database.cache_clear()
    card_resolver._local_resolver.cache_clear()


class TestCardDatabaseResolver:
    """Tests for resolving against the local card cache."""

    def test_lookup_by_name(self, resolver: CardDatabaseResolver) -> None:
        info = resolver.lookup("Iono")

        assert info is not None
        assert info.card_id == "sv02-185"
        assert info.tcg == Tcg.POKEMON

    def test_lookup_is_case_and_accent_insensitive(self, resolver: CardDatabaseResolver) -> None:
        info = resolver.lookup("POKEGEAR 3.0")
        assert info is not None
        assert info.name == "Pokégear 3.0"

    def test_hint_picks_printing(self, resolver: CardDatabaseResolver) -> None:
        info = resolver.lookup("Pikachu", CardHint(set_code="MEW", collector_number="25"))
        assert info is not None
        assert info.card_id == "sv03.5-25"

    def test_hint_with_leading_zeros(self, resolver: CardDatabaseResolver) -> None:
        info = resolver.lookup("Pikachu", CardHint(set_code="SVI", collector_number="057"))
        assert info is not None
        assert info.card_id == "sv01-57"

    def test_hint_for_other_card_is_ignored(self, resolver: CardDatabaseResolver) -> None:
        info = resolver.lookup("Iono", CardHint(set_code="SVI", collector_number="57"))
        assert info is not None
        assert info.name == "Iono"

    def test_unknown_name(self, resolver: CardDatabaseResolver) -> None:
        assert resolver.lookup("Missingno") is None

    async def test_resolve_many_answers_every_name(self, resolver: CardDatabaseResolver) -> None:
        answers = await resolver.resolve_many(["Iono", "Missingno"], [CardHint(), CardHint()])

        assert set(answers) == {"Iono", "Missingno"}
        assert answers["Iono"] is not None
        assert answers["Missingno"] is None

    async def test_invalid_record_is_unavailable(self) -> None:
        resolver = CardDatabaseResolver(
            {"sv01-1": {"id": "sv01-1", "name": "Pikachu", "tcg": "Pokémon TCG"}}
        )

        with pytest.raises(ResolutionUnavailableError):
            await resolver.resolve_many(["Pikachu"], [CardHint()])


class TestHttpCardResolver:
    """Tests for the remote card service resolver."""

    @respx.mock
    async def test_resolves_batch(self) -> None:
        route = respx.post(RESOLVE_URL).mock(
            return_value=httpx.Response(
                200,
                json={
                    "cards": {
                        "Pikachu": {"id": "sv01-57", "name": "Pikachu", "supertype": "Pokémon"},
                        "Missingno": None,
                    }
                },
            )
        )
        resolver = HttpCardResolver("https://cards.test/")

        answers = await resolver.resolve_many(
            ["Pikachu", "Missingno"],
            [CardHint(set_code="SVI", collector_number="057"), CardHint()],
        )

        assert answers["Pikachu"] is not None
        assert answers["Pikachu"].card_id == "sv01-57"
        assert answers["Missingno"] is None

        sent = json.loads(route.calls.last.request.content)
        assert sent == {
            "cards": [
                {"name": "Pikachu", "setCode": "SVI", "number": "057"},
                {"name": "Missingno", "setCode": None, "number": None},
            ]
        }

    @respx.mock
    async def test_names_left_out_are_unknown(self) -> None:
        respx.post(RESOLVE_URL).mock(return_value=httpx.Response(200, json={"cards": {}}))
        resolver = HttpCardResolver("https://cards.test")

        answers = await resolver.resolve_many(["Iono"], [CardHint()])
        assert answers == {"Iono": None}

    @respx.mock
    async def test_uses_injected_client(self) -> None:
        respx.post(RESOLVE_URL).mock(return_value=httpx.Response(200, json={"cards": {}}))

        async with httpx.AsyncClient() as client:
            resolver = HttpCardResolver("https://cards.test", client=client)
            answers = await resolver.resolve_many(["Iono"], [CardHint()])

        assert answers == {"Iono": None}

    @respx.mock
    async def test_server_error_is_unavailable(self) -> None:
        respx.post(RESOLVE_URL).mock(return_value=httpx.Response(500))
        resolver = HttpCardResolver("https://cards.test")

        with pytest.raises(ResolutionUnavailableError) as exc_info:
            await resolver.resolve_many(["Iono"], [CardHint()])
        assert exc_info.value.status_code == 503

    @respx.mock
    async def test_connection_error_is_unavailable(self) -> None:
        respx.post(RESOLVE_URL).mock(side_effect=httpx.ConnectError("connection refused"))
        resolver = HttpCardResolver("https://cards.test")

        with pytest.raises(ResolutionUnavailableError):
            await resolver.resolve_many(["Iono"], [CardHint()])

    @respx.mock
    async def test_malformed_json_is_unavailable(self) -> None:
        respx.post(RESOLVE_URL).mock(return_value=httpx.Response(200, text="not json"))
        resolver = HttpCardResolver("https://cards.test")

        with pytest.raises(ResolutionUnavailableError):
            await resolver.resolve_many(["Iono"], [CardHint()])

    @respx.mock
    async def test_unexpected_shape_is_unavailable(self) -> None:
        respx.post(RESOLVE_URL).mock(return_value=httpx.Response(200, json={"results": []}))
        resolver = HttpCardResolver("https://cards.test")

        with pytest.raises(ResolutionUnavailableError):
            await resolver.resolve_many(["Iono"], [CardHint()])

    @respx.mock
    async def test_invalid_record_is_unavailable(self) -> None:
        respx.post(RESOLVE_URL).mock(
            return_value=httpx.Response(200, json={"cards": {"Iono": {"name": "Iono"}}})
        )
        resolver = HttpCardResolver("https://cards.test")

        with pytest.raises(ResolutionUnavailableError):
            await resolver.resolve_many(["Iono"], [CardHint()])


class TestUnconfiguredCardResolver:
    """Tests for the unconfigured stand-in."""

    async def test_always_unavailable(self) -> None:
        with pytest.raises(ResolutionUnavailableError):
            await UnconfiguredCardResolver().resolve_many(["Iono"], [CardHint()])


@pytest.mark.usefixtures("clear_resolver_caches")
class TestGetCardResolver:
    """Tests for resolver selection from settings."""

    def test_remote_service_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings, "card_service_url", "https://cards.test")
        monkeypatch.setattr(settings, "card_database_path", "/tmp/cards.json")

        assert isinstance(get_card_resolver(), HttpCardResolver)

    def test_local_cache(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, card_db: dict[str, dict]
    ) -> None:
        db_path = tmp_path / "cards.json"
        db_path.write_text(json.dumps(list(card_db.values())), encoding="utf-8")
        monkeypatch.setattr(settings, "card_service_url", "")
        monkeypatch.setattr(settings, "card_database_path", str(db_path))

        resolver = get_card_resolver()

        assert isinstance(resolver, CardDatabaseResolver)
        assert resolver.lookup("Iono") is not None

    def test_missing_local_cache(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings, "card_service_url", "")
        monkeypatch.setattr(settings, "card_database_path", str(tmp_path / "missing.json"))

        assert isinstance(get_card_resolver(), UnconfiguredCardResolver)

    def test_corrupt_local_cache(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        db_path = tmp_path / "cards.json"
        db_path.write_text("{not json", encoding="utf-8")
        monkeypatch.setattr(settings, "card_service_url", "")
        monkeypatch.setattr(settings, "card_database_path", str(db_path))

        assert isinstance(get_card_resolver(), UnconfiguredCardResolver)

    def test_nothing_configured(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings, "card_service_url", "")
        monkeypatch.setattr(settings, "card_database_path", "")

        assert isinstance(get_card_resolver(), UnconfiguredCardResolver)
