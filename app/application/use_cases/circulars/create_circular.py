"""Use case for issuing a circular."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.application.use_cases.notifications import (
    dispatch_notifications,
    stage_circular_notifications,
)
from app.domain.entities import Circular, CircularStatus, RecipientGroup, UserRole
from app.domain.exceptions import PermissionDenied
from app.infrastructure.repositories import CircularRepository

from .permissions import can_issue, normalize_selection, validate_selection
from .recipients import RecipientResolver
from .validators import (
    ensure_recipient_groups,
    ensure_valid_body,
    ensure_valid_title,
)

logger = logging.getLogger(__name__)


def create_circular(
    session: Session,
    *,
    title: str,
    body: str,
    sender_id: int,
    sender_role: UserRole | str | None,
    recipient_groups: Iterable[RecipientGroup | str],
    resolver: RecipientResolver,
    sender_name: str | None = None,
) -> Circular:
    """Validate, resolve and persist a new circular in one transaction.

    Roles that cannot issue circulars are rejected before anything else is
    looked at. Nothing is written unless every step succeeds; the recipients'
    notifications are stored in the same transaction and pushed to open
    websockets after the commit.
    """

    role = sender_role if isinstance(sender_role, UserRole) else UserRole.from_alias(sender_role)
    if not can_issue(role):
        raise PermissionDenied(role or sender_role, None)

    clean_title = ensure_valid_title(title)
    clean_body = ensure_valid_body(body)
    selection = ensure_recipient_groups(recipient_groups)
    validate_selection(role, selection)

    normalized = normalize_selection(selection)
    snapshot = resolver.resolve(normalized, sender_id)
    if sender_name is None:
        sender_name = resolver.lookup_user_name(sender_id)

    circular = Circular(
        id=None,
        title=clean_title,
        body=clean_body,
        sender_id=sender_id,
        sender_role=role,
        sender_name=sender_name,
        recipient_groups=normalized,
        recipient_snapshot=snapshot,
        status=CircularStatus.ACTIVE,
        read_by=frozenset(),
    )

    repository = CircularRepository(session)
    try:
        saved = repository.create(circular, commit=False)
        notifications = stage_circular_notifications(session, circular=saved)
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        raise

    logger.info(
        "Circular %s issued by user %s to %s recipient(s)",
        saved.id,
        sender_id,
        saved.recipient_count,
    )
    dispatch_notifications(notifications)
    return saved


__all__ = ["create_circular"]
