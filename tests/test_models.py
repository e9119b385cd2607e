"""Tests for result models."""

import pytest
from pydantic import ValidationError

from decksmith.models import (
    CardCategory,
    CardGroup,
    DeckFormat,
    GroupStatus,
    IssueType,
    ResolutionStatus,
    ResolvedCard,
    Severity,
    ValidationIssue,
    ValidationReport,
    compute_group_status,
    parse_format_choice,
)


def _card(quantity: int) -> ResolvedCard:
    return ResolvedCard(
        name="Iono",
        quantity=quantity,
        line_number=1,
        category=CardCategory.TRAINER,
        resolution=ResolutionStatus.RESOLVED,
    )


class TestGroupStatus:
    """Tests for compute_group_status."""

    def test_statuses(self) -> None:
        assert compute_group_status(3, 4, False) == GroupStatus.UNDER
        assert compute_group_status(4, 4, False) == GroupStatus.AT_LIMIT
        assert compute_group_status(5, 4, False) == GroupStatus.EXCEEDED
        assert compute_group_status(99, 60, True) == GroupStatus.UNLIMITED


class TestCardGroup:
    """CardGroup enforces its own invariants."""

    def test_total_must_match_printings(self) -> None:
        with pytest.raises(ValidationError):
            CardGroup(
                key="iono",
                name="Iono",
                cards=(_card(2), _card(2)),
                total_quantity=5,
                limit=4,
                is_basic_energy=False,
                status=GroupStatus.EXCEEDED,
            )

    def test_status_must_match_total(self) -> None:
        with pytest.raises(ValidationError):
            CardGroup(
                key="iono",
                name="Iono",
                cards=(_card(2), _card(2)),
                total_quantity=4,
                limit=4,
                is_basic_energy=False,
                status=GroupStatus.UNDER,
            )

    def test_serializes_camel_case(self) -> None:
        group = CardGroup(
            key="iono",
            name="Iono",
            cards=(_card(4),),
            total_quantity=4,
            limit=4,
            is_basic_energy=False,
            status=GroupStatus.AT_LIMIT,
        )
        dumped = group.model_dump(by_alias=True, mode="json")

        assert dumped["totalQuantity"] == 4
        assert dumped["isBasicEnergy"] is False
        assert dumped["status"] == "at_limit"
        assert dumped["cards"][0]["lineNumber"] == 1

    def test_is_immutable(self) -> None:
        card = _card(4)
        with pytest.raises(ValidationError):
            card.quantity = 3


class TestValidationReport:
    """Tests for ValidationReport."""

    def test_validity_follows_errors(self) -> None:
        warning = ValidationIssue(
            type=IssueType.LOW_UNIQUE_CARDS, severity=Severity.WARNING, message="few"
        )
        error = ValidationIssue(type=IssueType.EMPTY_DECK, severity=Severity.ERROR, message="none")

        assert ValidationReport.from_issues([warning], {}).is_valid
        report = ValidationReport.from_issues([warning, error], {})
        assert not report.is_valid
        assert report.errors == (error,)
        assert report.warnings == (warning,)

    def test_issues_of_type(self) -> None:
        error = ValidationIssue(type=IssueType.EMPTY_DECK, severity=Severity.ERROR, message="none")
        report = ValidationReport.from_issues([error], {})

        assert report.issues_of_type(IssueType.EMPTY_DECK) == [error]
        assert report.issues_of_type(IssueType.CARD_COUNT) == []


class TestParseFormatChoice:
    """Tests for parse_format_choice."""

    def test_auto(self) -> None:
        assert parse_format_choice(None) is None
        assert parse_format_choice("auto") is None
        assert parse_format_choice(" AUTO ") is None
        assert parse_format_choice("") is None

    def test_explicit(self) -> None:
        assert parse_format_choice("GLC") == DeckFormat.GLC
        assert parse_format_choice("constructed") == DeckFormat.CONSTRUCTED

    def test_unknown(self) -> None:
        with pytest.raises(ValueError):
            parse_format_choice("modern")
