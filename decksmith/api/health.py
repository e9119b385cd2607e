"""
Health check endpoints.

Provides liveness and readiness probes with card source checks.
"""

import httpx
from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from decksmith.config import settings
from decksmith.services.card_database import get_card_database

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    card_source: str | None = None


async def _check_card_source() -> tuple[bool, str]:
    """Probe the configured card source. Returns (ok, description)."""
    if settings.card_service_url:
        url = settings.card_service_url.rstrip("/") + "/health"
        try:
            async with httpx.AsyncClient(timeout=settings.resolver_timeout_seconds) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPError:
            return False, "remote unreachable"
        return True, "remote"

    if settings.card_database_path:
        try:
            get_card_database()
        except (FileNotFoundError, ValueError):
            return False, "local cache missing"
        return True, "local"

    return False, "not configured"


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """
    Liveness probe.

    Returns healthy if the service is running.
    Does not check dependencies.
    """
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(response: Response) -> HealthResponse:
    """
    Readiness probe.

    Returns ready if card data can be resolved. Returns 503 otherwise;
    deck parsing still works in that state but every card is unresolved.
    """
    ok, description = await _check_card_source()
    if not ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="not ready", card_source=description)
    return HealthResponse(status="ready", card_source=description)
