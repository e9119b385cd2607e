"""
Tests for the edge exception handlers.

Every error that reaches the application edge is returned inside the
failure envelope.
"""

from typing import Any

import pytest
from fastapi.responses import JSONResponse
from httpx import ASGITransport, AsyncClient

from decksmith.api.errors import envelope_response
from decksmith.main import app
from decksmith.models.card import CardHint, CardInfo
from decksmith.models.failure import ApiResponse, OutcomeType, create_success
from decksmith.services.card_resolver import get_card_resolver


class BrokenResolver:
    """Fails with an error no layer knows how to explain."""

    async def resolve_many(
        self, names: list[str], hints: list[CardHint]
    ) -> dict[str, CardInfo | None]:
        raise RuntimeError("resolver bug")


@pytest.fixture
async def client():
    # The server error middleware re-raises after sending the 500 response
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


class TestValidationErrors:
    """Request validation failures are known failures."""

    async def test_missing_field(self, client: AsyncClient) -> None:
        response = await client.post("/decks/parse", json={})

        assert response.status_code == 422
        body = response.json()
        assert body["outcome"] == "known_failure"
        assert body["failure"]["kind"] == "missing_required"
        assert "deckString" in body["failure"]["detail"]

    async def test_invalid_value(self, client: AsyncClient) -> None:
        response = await client.post(
            "/decks/parse", json={"deckString": "4 Iono", "format": "modern"}
        )

        assert response.status_code == 422
        body = response.json()
        assert body["outcome"] == "known_failure"
        assert body["failure"]["kind"] == "invalid_input"


class TestUnexpectedErrors:
    """Unexplained errors become unknown failures."""

    async def test_unknown_failure_envelope(self, client: AsyncClient) -> None:
        app.dependency_overrides[get_card_resolver] = lambda: BrokenResolver()

        response = await client.post("/decks/parse", json={"deckString": "4 Iono"})

        assert response.status_code == 500
        body = response.json()
        assert body["outcome"] == "unknown_failure"
        assert body["data"] is None
        assert body["failure"]["kind"] == "unknown"
        assert body["failure"]["detail"] == "RuntimeError"
        assert "resolver bug" not in response.text


class TestEnvelopeResponse:
    """Tests for envelope_response."""

    def test_finalized_response(self) -> None:
        response = envelope_response(create_success({"value": 1}), 200)

        assert isinstance(response, JSONResponse)
        assert response.status_code == 200

    def test_unfinalized_response_is_rejected(self) -> None:
        response: ApiResponse[Any] = ApiResponse(outcome=OutcomeType.SUCCESS, data={})

        with pytest.raises(ValueError):
            envelope_response(response, 200)
