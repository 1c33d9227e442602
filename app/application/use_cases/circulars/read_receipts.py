"""Use cases tracking which recipients have read a circular."""

import logging

from sqlalchemy.orm import Session

from app.domain.entities import Circular
from app.domain.exceptions import CircularNotFound, NotRecipient
from app.infrastructure.repositories import CircularRepository

logger = logging.getLogger(__name__)


def mark_circular_read(session: Session, *, circular_id: str, user_id: int) -> Circular:
    """Record that ``user_id`` read the circular.

    Marking twice is a no-op. Archived circulars can still be marked as read.
    """

    repository = CircularRepository(session)
    if not repository.exists(circular_id):
        raise CircularNotFound(circular_id)
    if not repository.is_recipient(circular_id, user_id):
        raise NotRecipient(circular_id, user_id)

    if repository.mark_read(circular_id, user_id):
        logger.info("User %s read circular %s", user_id, circular_id)

    circular = repository.get(circular_id)
    if circular is None:  # pragma: no cover - circulars are never deleted
        raise CircularNotFound(circular_id)
    return circular


def is_circular_read(session: Session, *, circular_id: str, user_id: int) -> bool:
    """Return ``True`` when ``user_id`` has a read receipt for the circular."""

    repository = CircularRepository(session)
    if not repository.exists(circular_id):
        raise CircularNotFound(circular_id)
    return repository.has_read(circular_id, user_id)


__all__ = ["is_circular_read", "mark_circular_read"]
