"""
Validation Report Models.

Deck-level issues carry structured arguments so that presentation
layers can localize freely. The English message is a convenience only.
"""

from enum import Enum
from typing import Any

from pydantic import Field

from decksmith.models.base import ResultModel


class IssueType(str, Enum):
    """Deck-level validation issue types. Closed set."""

    # Errors
    EMPTY_DECK = "empty_deck"
    CARD_COUNT = "card_count"
    COPY_LIMIT = "copy_limit"
    SINGLETON_LIMIT = "singleton_limit"
    NO_BASIC = "no_basic"
    ACE_SPEC_LIMIT = "ace_spec_limit"
    RADIANT_LIMIT = "radiant_limit"
    RULE_BOX_PROHIBITED = "rule_box_prohibited"
    ACE_SPEC_PROHIBITED = "ace_spec_prohibited"
    SLOT_COUNT = "slot_count"
    FORMAT_MISMATCH = "format_mismatch"

    # Warnings
    LOW_UNIQUE_CARDS = "low_unique_cards"
    REGULATION_MARK = "regulation_mark"
    MULTIPLE_TYPES = "multiple_types"
    UNRESOLVED_CARDS = "unresolved_cards"


class Severity(str, Enum):
    """Errors block validity; warnings are advisory."""

    ERROR = "error"
    WARNING = "warning"


class ValidationIssue(ResultModel):
    """One finding from one validation rule."""

    type: IssueType
    severity: Severity
    message: str
    args: dict[str, Any] = Field(default_factory=dict)


class ValidationReport(ResultModel):
    """
    Result of validating a deck against a format.

    INVARIANT: is_valid is True iff errors is empty.
    """

    is_valid: bool
    errors: tuple[ValidationIssue, ...] = ()
    warnings: tuple[ValidationIssue, ...] = ()
    summary: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_issues(
        cls,
        issues: list[ValidationIssue],
        summary: dict[str, Any],
    ) -> "ValidationReport":
        """Split issues by severity and derive validity."""
        errors = tuple(i for i in issues if i.severity == Severity.ERROR)
        warnings = tuple(i for i in issues if i.severity == Severity.WARNING)
        return cls(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=warnings,
            summary=summary,
        )

    def issues_of_type(self, issue_type: IssueType) -> list[ValidationIssue]:
        """All errors and warnings of one type."""
        return [i for i in (*self.errors, *self.warnings) if i.type == issue_type]
