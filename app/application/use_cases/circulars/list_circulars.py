"""Use cases for listing circulars from the sender and recipient side."""

from collections.abc import Sequence

from sqlalchemy.orm import Session

from app.domain.entities import Circular, CircularStatus
from app.infrastructure.repositories import CircularRepository


def list_sent_circulars(
    session: Session, user_id: int, *, status: CircularStatus | None = None
) -> Sequence[Circular]:
    """Return the circulars issued by ``user_id``, newest first."""

    return CircularRepository(session).list_by_sender(user_id, status=status)


def list_received_circulars(
    session: Session, user_id: int, *, status: CircularStatus | None = None
) -> Sequence[Circular]:
    """Return the circulars addressed to ``user_id``, newest first.

    Archived circulars are included unless ``status`` narrows the listing.
    """

    return CircularRepository(session).list_by_recipient(user_id, status=status)


def list_active_circulars(session: Session) -> Sequence[Circular]:
    """Return every active circular, newest first."""

    return CircularRepository(session).list_by_status(CircularStatus.ACTIVE)


__all__ = [
    "list_active_circulars",
    "list_received_circulars",
    "list_sent_circulars",
]
