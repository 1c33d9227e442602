"""Tests for the role to recipient group permission table."""

from __future__ import annotations

import pytest

from app.application.use_cases.circulars import (
    allowed_groups,
    can_issue,
    normalize_selection,
    validate_selection,
)
from app.domain.entities import RecipientGroup, UserRole
from app.domain.exceptions import PermissionDenied

STUDENTS = RecipientGroup.STUDENTS
PROFESSORS = RecipientGroup.PROFESSORS
MANAGEMENT = RecipientGroup.MANAGEMENT
ALL = RecipientGroup.ALL


@pytest.mark.parametrize(
    ("role", "expected"),
    [
        (UserRole.MANAGEMENT, {STUDENTS, PROFESSORS, ALL}),
        (UserRole.PROFESSOR, {STUDENTS, MANAGEMENT}),
        (UserRole.STUDENT, set()),
        (UserRole.ALUMNI, set()),
        ("professor", {STUDENTS, MANAGEMENT}),
        ("janitor", set()),
        (None, set()),
    ],
)
def test_allowed_groups(role, expected) -> None:
    assert allowed_groups(role) == frozenset(expected)


def test_only_management_and_professors_can_issue() -> None:
    assert can_issue(UserRole.MANAGEMENT)
    assert can_issue(UserRole.PROFESSOR)
    assert not can_issue(UserRole.STUDENT)
    assert not can_issue(UserRole.ALUMNI)
    assert not can_issue("unknown")


@pytest.mark.parametrize(
    ("role", "selection"),
    [
        (UserRole.MANAGEMENT, {STUDENTS}),
        (UserRole.MANAGEMENT, {STUDENTS, PROFESSORS}),
        (UserRole.MANAGEMENT, {ALL}),
        (UserRole.MANAGEMENT, {ALL, STUDENTS}),
        (UserRole.PROFESSOR, {STUDENTS}),
        (UserRole.PROFESSOR, {STUDENTS, MANAGEMENT}),
    ],
)
def test_validate_selection_accepts_allowed_groups(role, selection) -> None:
    validate_selection(role, selection)


@pytest.mark.parametrize(
    ("role", "selection", "offending"),
    [
        (UserRole.PROFESSOR, {ALL}, ALL),
        (UserRole.PROFESSOR, {ALL, STUDENTS}, ALL),
        (UserRole.PROFESSOR, {PROFESSORS}, PROFESSORS),
        (UserRole.MANAGEMENT, {MANAGEMENT}, MANAGEMENT),
        (UserRole.STUDENT, {STUDENTS}, STUDENTS),
        (UserRole.ALUMNI, {PROFESSORS, STUDENTS}, STUDENTS),
    ],
)
def test_validate_selection_reports_first_disallowed_group(role, selection, offending) -> None:
    with pytest.raises(PermissionDenied) as exc_info:
        validate_selection(role, selection)

    assert exc_info.value.role is role
    assert exc_info.value.group is offending


def test_validate_selection_rejects_empty_selection() -> None:
    with pytest.raises(PermissionDenied) as exc_info:
        validate_selection(UserRole.MANAGEMENT, set())

    assert exc_info.value.group is None


def test_normalize_selection_collapses_all() -> None:
    assert normalize_selection({ALL, STUDENTS, PROFESSORS}) == frozenset({ALL})
    assert normalize_selection({STUDENTS, MANAGEMENT}) == frozenset({STUDENTS, MANAGEMENT})
