"""Tests for read statistics, unread counters and dashboard summaries."""

from __future__ import annotations

import pytest

from app.application.use_cases.circulars import (
    archive_circular,
    count_unread_circulars,
    create_circular,
    get_circular_summary,
    get_read_stats,
    list_active_circulars,
    list_received_circulars,
    list_sent_circulars,
    mark_circular_read,
    read_stats_for,
)
from app.domain.entities import CircularStatus, ReadStats, RecipientGroup, UserRole
from app.domain.exceptions import CircularNotFound


@pytest.mark.parametrize(
    ("read", "total", "percentage"),
    [
        (0, 0, 0),
        (0, 3, 0),
        (1, 2, 50),
        (1, 3, 33),
        (2, 3, 67),
        (1, 8, 13),
        (1, 200, 1),
        (1, 400, 0),
        (3, 3, 100),
    ],
)
def test_percentage_rounds_half_up(read, total, percentage) -> None:
    stats = ReadStats.from_counts(read, total)

    assert stats.percentage == percentage
    assert stats.read_count == read
    assert stats.total_recipients == total


@pytest.fixture()
def school(make_user):
    return {
        "dean": make_user(UserRole.MANAGEMENT, "Dean Adams"),
        "prof": make_user(UserRole.PROFESSOR, "Pat Prof"),
        "s1": make_user(UserRole.STUDENT, "Sam One"),
        "s2": make_user(UserRole.STUDENT, "Sue Two"),
        "s3": make_user(UserRole.STUDENT, "Sid Three"),
    }


def _issue(session, resolver, sender, groups, title="Notice"):
    return create_circular(
        session,
        title=title,
        body="Details inside.",
        sender_id=sender.id,
        sender_role=sender.user_role,
        recipient_groups=groups,
        resolver=resolver,
    )


def test_read_stats_follow_reads(session, resolver, school) -> None:
    circular = _issue(session, resolver, school["dean"], {RecipientGroup.STUDENTS})

    assert get_read_stats(session, circular.id) == ReadStats(0, 3, 0)
    mark_circular_read(session, circular_id=circular.id, user_id=school["s1"].id)
    assert get_read_stats(session, circular.id) == ReadStats(1, 3, 33)
    updated = mark_circular_read(session, circular_id=circular.id, user_id=school["s2"].id)
    assert get_read_stats(session, circular.id) == ReadStats(2, 3, 67)
    assert read_stats_for(updated) == ReadStats(2, 3, 67)


def test_read_stats_for_unknown_circular(session) -> None:
    with pytest.raises(CircularNotFound):
        get_read_stats(session, "missing")


def test_unread_count_includes_archived_circulars(session, resolver, school) -> None:
    first = _issue(session, resolver, school["dean"], {RecipientGroup.STUDENTS}, "First")
    second = _issue(session, resolver, school["prof"], {RecipientGroup.STUDENTS}, "Second")
    student = school["s1"].id

    assert count_unread_circulars(session, student) == 2

    archive_circular(session, circular_id=first.id, requester_id=school["dean"].id)
    assert count_unread_circulars(session, student) == 2

    mark_circular_read(session, circular_id=second.id, user_id=student)
    assert count_unread_circulars(session, student) == 1

    mark_circular_read(session, circular_id=first.id, user_id=student)
    assert count_unread_circulars(session, student) == 0


def test_listings(session, resolver, school) -> None:
    first = _issue(session, resolver, school["dean"], {RecipientGroup.STUDENTS}, "First")
    second = _issue(session, resolver, school["dean"], {RecipientGroup.ALL}, "Second")
    from_prof = _issue(session, resolver, school["prof"], {RecipientGroup.MANAGEMENT}, "Prof")
    archive_circular(session, circular_id=first.id, requester_id=school["dean"].id)

    sent = list_sent_circulars(session, school["dean"].id)
    assert {c.id for c in sent} == {first.id, second.id}
    active_sent = list_sent_circulars(session, school["dean"].id, status=CircularStatus.ACTIVE)
    assert [c.id for c in active_sent] == [second.id]

    received = list_received_circulars(session, school["s1"].id)
    assert {c.id for c in received} == {first.id, second.id}
    archived_received = list_received_circulars(
        session, school["s1"].id, status=CircularStatus.ARCHIVED
    )
    assert [c.id for c in archived_received] == [first.id]

    assert [c.id for c in list_received_circulars(session, school["dean"].id)] == [from_prof.id]
    assert {c.id for c in list_active_circulars(session)} == {second.id, from_prof.id}


def test_summary_for_issuers_and_students(session, resolver, school) -> None:
    first = _issue(session, resolver, school["dean"], {RecipientGroup.STUDENTS}, "First")
    _issue(session, resolver, school["dean"], {RecipientGroup.ALL}, "Second")
    _issue(session, resolver, school["prof"], {RecipientGroup.STUDENTS}, "Third")
    mark_circular_read(session, circular_id=first.id, user_id=school["s1"].id)

    student = get_circular_summary(session, user_id=school["s1"].id, role=UserRole.STUDENT)
    assert student.sent_count is None
    assert (student.received_count, student.unread_count, student.read_count) == (3, 2, 1)

    dean = get_circular_summary(session, user_id=school["dean"].id, role=UserRole.MANAGEMENT)
    assert dean.sent_count == 2
    assert dean.received_count == 0

    prof = get_circular_summary(session, user_id=school["prof"].id, role="professor")
    assert prof.sent_count == 1
    assert (prof.received_count, prof.unread_count) == (1, 1)
