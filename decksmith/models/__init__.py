from decksmith.models.base import ResultModel
from decksmith.models.card import (
    CardHint,
    CardInfo,
    LineError,
    LineErrorReason,
    ParsedCardLine,
    RawLine,
    ResolutionStatus,
    ResolvedCard,
)
from decksmith.models.deck import (
    CardGroup,
    DeckParseResult,
    DeckStats,
    FormatDetection,
    GroupStatus,
    TcgClassification,
    compute_group_status,
)
from decksmith.models.failure import (
    STANDARD_MESSAGES,
    STANDARD_SUGGESTIONS,
    ApiResponse,
    FailureDetail,
    FailureKind,
    KnownError,
    OutcomeType,
    ResolutionUnavailableError,
    create_known_failure,
    create_success,
    create_unknown_failure,
    finalize_response,
    is_finalized,
)
from decksmith.models.game import (
    FORMAT_LABELS,
    FORMAT_TCG,
    SINGLETON_FORMATS,
    TCG_LABELS,
    CardCategory,
    DeckFormat,
    Dialect,
    Tcg,
    parse_format_choice,
)
from decksmith.models.validation import (
    IssueType,
    Severity,
    ValidationIssue,
    ValidationReport,
)

__all__ = [
    "ApiResponse",
    "CardCategory",
    "CardGroup",
    "CardHint",
    "CardInfo",
    "DeckFormat",
    "DeckParseResult",
    "DeckStats",
    "Dialect",
    "FORMAT_LABELS",
    "FORMAT_TCG",
    "FailureDetail",
    "FailureKind",
    "FormatDetection",
    "GroupStatus",
    "IssueType",
    "KnownError",
    "LineError",
    "LineErrorReason",
    "OutcomeType",
    "ParsedCardLine",
    "RawLine",
    "ResolutionStatus",
    "ResolutionUnavailableError",
    "ResolvedCard",
    "ResultModel",
    "SINGLETON_FORMATS",
    "STANDARD_MESSAGES",
    "STANDARD_SUGGESTIONS",
    "Severity",
    "TCG_LABELS",
    "Tcg",
    "TcgClassification",
    "ValidationIssue",
    "ValidationReport",
    "compute_group_status",
    "create_known_failure",
    "create_success",
    "create_unknown_failure",
    "finalize_response",
    "is_finalized",
    "parse_format_choice",
]
