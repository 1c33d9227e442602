"""Use cases computing read statistics for circulars."""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.domain.entities import Circular, CircularSummary, ReadStats, UserRole
from app.domain.exceptions import CircularNotFound
from app.infrastructure.repositories import CircularRepository

from .permissions import can_issue


def get_read_stats(session: Session, circular_id: str) -> ReadStats:
    """Return how many recipients read the circular and the rounded percentage."""

    repository = CircularRepository(session)
    if not repository.exists(circular_id):
        raise CircularNotFound(circular_id)
    read_count, total = repository.count_reads(circular_id)
    return ReadStats.from_counts(read_count, total)


def read_stats_for(circular: Circular) -> ReadStats:
    """Compute the stats of an already loaded circular without querying again."""

    return ReadStats.from_counts(len(circular.read_by), circular.recipient_count)


def count_unread_circulars(session: Session, user_id: int) -> int:
    """Count circulars addressed to ``user_id`` that they have not read.

    Both active and archived circulars are counted.
    """

    return CircularRepository(session).count_unread(user_id)


def get_circular_summary(
    session: Session, *, user_id: int, role: UserRole | str | None
) -> CircularSummary:
    """Return the dashboard counters for ``user_id``.

    ``sent_count`` is only reported for roles that can issue circulars.
    """

    repository = CircularRepository(session)
    received = repository.count_received(user_id)
    unread = repository.count_unread(user_id)
    sent = repository.count_by_sender(user_id) if can_issue(role) else None
    return CircularSummary(
        sent_count=sent,
        received_count=received,
        unread_count=unread,
        read_count=received - unread,
    )


__all__ = [
    "count_unread_circulars",
    "get_circular_summary",
    "get_read_stats",
    "read_stats_for",
]
