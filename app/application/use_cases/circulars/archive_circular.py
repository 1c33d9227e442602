"""Use case for archiving a circular."""

import logging

from sqlalchemy.orm import Session

from app.domain.entities import Circular, CircularStatus
from app.domain.exceptions import (
    AlreadyArchived,
    CircularNotFound,
    InvalidStatusTransition,
    NotOwner,
)
from app.infrastructure.repositories import CircularRepository

logger = logging.getLogger(__name__)


def archive_circular(
    session: Session, *, circular_id: str, requester_id: int
) -> Circular:
    """Archive the circular on behalf of its sender.

    The status change is a conditional update, so when several requests
    race only one performs the transition and the others get
    :class:`AlreadyArchived`.
    """

    repository = CircularRepository(session)
    circular = repository.get(circular_id)
    if circular is None:
        raise CircularNotFound(circular_id)
    if circular.sender_id != requester_id:
        raise NotOwner(circular_id, requester_id)
    if circular.is_archived:
        raise AlreadyArchived(circular_id)
    if not circular.can_transition_to(CircularStatus.ARCHIVED):
        raise InvalidStatusTransition(
            circular_id, circular.status, CircularStatus.ARCHIVED
        )

    transitioned = repository.transition_status(
        circular_id,
        sender_id=requester_id,
        from_status=circular.status,
        to_status=CircularStatus.ARCHIVED,
    )
    if not transitioned:
        raise AlreadyArchived(circular_id)

    logger.info("Circular %s archived by user %s", circular_id, requester_id)
    archived = repository.get(circular_id)
    if archived is None:  # pragma: no cover - circulars are never deleted
        raise CircularNotFound(circular_id)
    return archived


__all__ = ["archive_circular"]
