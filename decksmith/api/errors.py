"""
Exception handlers.

Routes every error that reaches the application edge through the
failure envelope, so clients never see a bare framework error body.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from decksmith.models.failure import (
    ApiResponse,
    FailureKind,
    KnownError,
    create_known_failure,
    create_unknown_failure,
    is_finalized,
)

logger = logging.getLogger(__name__)


def envelope_response(response: ApiResponse[Any], status_code: int) -> JSONResponse:
    """
    Serialize a finalized envelope.

    Raises:
        ValueError: If the response skipped finalize_response
    """
    if not is_finalized(response):
        raise ValueError("Response did not pass through finalize_response")
    return JSONResponse(status_code=status_code, content=response.model_dump(mode="json"))


def _describe_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts)


async def known_error_handler(request: Request, exc: KnownError) -> JSONResponse:
    logger.warning(
        "%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.detail
    )
    return envelope_response(exc.to_response(), exc.status_code)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    missing = any(error.get("type") == "missing" for error in exc.errors())
    kind = FailureKind.MISSING_REQUIRED if missing else FailureKind.INVALID_INPUT
    response = create_known_failure(kind, _describe_validation_errors(exc))
    return envelope_response(response, 422)


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return envelope_response(create_unknown_failure(exc), 500)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(KnownError, known_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
