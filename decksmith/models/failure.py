"""
Failure Explanation Envelope: Unified Response Classification.

Every API response is classified and explained through this envelope.
Malformed deck text is NOT a failure: it is data, reported inside a
successful DeckParseResult. Failures are reserved for infrastructure
(card resolver unreachable) and unusable requests.

Response types:
- Success: Operation completed successfully
- KnownFailure: System knows why it failed
- UnknownFailure: System does not know why it failed

AUTHORITY BOUNDARY:
All user-visible responses MUST pass through `finalize_response()`.
"""

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"
    MISSING_REQUIRED = "missing_required"

    # Service failures
    SERVICE_UNAVAILABLE = "service_unavailable"

    # Unknown
    UNKNOWN = "unknown"


class OutcomeType(str, Enum):
    """High-level outcome classification."""

    SUCCESS = "success"
    KNOWN_FAILURE = "known_failure"
    UNKNOWN_FAILURE = "unknown_failure"


T = TypeVar("T")


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class ApiResponse(BaseModel, Generic[T]):
    """
    Universal response envelope for all API endpoints.

    Every response is classified into one outcome type,
    ensuring no failure reaches the user unexplained.
    """

    outcome: OutcomeType = Field(
        ...,
        description="High-level classification of the result",
    )
    data: T | None = Field(
        default=None,
        description="Response data (present on success)",
    )
    failure: FailureDetail | None = Field(
        default=None,
        description="Failure details (present on non-success)",
    )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ApiResponse[Any]:
        """Convert to a finalized known-failure ApiResponse."""
        response: ApiResponse[Any] = ApiResponse(
            outcome=OutcomeType.KNOWN_FAILURE,
            failure=FailureDetail(
                kind=self.kind,
                message=self.message,
                detail=self.detail,
                suggestion=self.suggestion,
            ),
        )
        return finalize_response(response)


class ResolutionUnavailableError(KnownError):
    """
    The card resolver could not be reached or did not answer in time.

    This is the ONLY exception the parse pipeline lets escape, and only
    when resolution is mandatory. Otherwise the run degrades to
    unresolved placeholders.
    """

    def __init__(self, detail: str | None = None):
        super().__init__(
            kind=FailureKind.SERVICE_UNAVAILABLE,
            message="Card data is temporarily unavailable.",
            detail=detail,
            suggestion="Retry in a moment. Your deck text was not changed.",
            status_code=503,
        )


# =============================================================================
# FAILURE AUTHORITY BOUNDARY
# =============================================================================

# Standard messages: fixed and predictable
STANDARD_MESSAGES: dict[OutcomeType, str] = {
    OutcomeType.KNOWN_FAILURE: "The operation failed due to a known issue.",
    OutcomeType.UNKNOWN_FAILURE: (
        "I failed and I don't know why. Try simplifying the request or retrying."
    ),
}

STANDARD_SUGGESTIONS: dict[OutcomeType, str] = {
    OutcomeType.KNOWN_FAILURE: "Check the error details and adjust your request.",
    OutcomeType.UNKNOWN_FAILURE: "If this persists, please report the issue.",
}

# Track finalized responses by identity
_finalized_responses: set[int] = set()


def finalize_response(response: ApiResponse[Any]) -> ApiResponse[Any]:
    """
    Finalize a response through the authority boundary.

    Raises:
        ValueError: If response structure is invalid
    """
    if response.outcome == OutcomeType.SUCCESS:
        if response.failure is not None:
            raise ValueError("Success response must not have failure details")
    else:
        if response.failure is None:
            raise ValueError(f"{response.outcome.value} response must have failure details")

    _finalized_responses.add(id(response))

    return response


def is_finalized(response: ApiResponse[Any]) -> bool:
    """Check if a response has passed through the authority boundary."""
    return id(response) in _finalized_responses


def create_unknown_failure(
    exception: Exception,
    include_type: bool = True,
) -> ApiResponse[Any]:
    """
    Create an unknown failure response from an exception.

    The message is fixed and cannot be customized.
    """
    detail = None
    if include_type:
        detail = f"{type(exception).__name__}"

    response: ApiResponse[Any] = ApiResponse(
        outcome=OutcomeType.UNKNOWN_FAILURE,
        failure=FailureDetail(
            kind=FailureKind.UNKNOWN,
            message=STANDARD_MESSAGES[OutcomeType.UNKNOWN_FAILURE],
            detail=detail,
            suggestion=STANDARD_SUGGESTIONS[OutcomeType.UNKNOWN_FAILURE],
        ),
    )

    return finalize_response(response)


def create_known_failure(
    kind: FailureKind,
    reason: str,
) -> ApiResponse[Any]:
    """
    Create a known failure response.

    The message is standardized. Only the reason (technical detail) varies.
    """
    response: ApiResponse[Any] = ApiResponse(
        outcome=OutcomeType.KNOWN_FAILURE,
        failure=FailureDetail(
            kind=kind,
            message=STANDARD_MESSAGES[OutcomeType.KNOWN_FAILURE],
            detail=reason,
            suggestion=STANDARD_SUGGESTIONS[OutcomeType.KNOWN_FAILURE],
        ),
    )

    return finalize_response(response)


def create_success(data: T) -> ApiResponse[T]:
    """Create a finalized success response."""
    response = ApiResponse[T](outcome=OutcomeType.SUCCESS, data=data)
    return finalize_response(response)
