"""Utility helpers to generate and dispatch domain notifications."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy.orm import Session

from app.domain.entities import CIRCULAR_ISSUED_EVENT, Circular, Notification
from app.infrastructure.notifications import dispatch_notification
from app.infrastructure.repositories import NotificationRepository
from app.utils import now_in_app_timezone


def build_circular_notifications(circular: Circular) -> list[Notification]:
    """Return one unsaved notification per member of the recipient snapshot."""

    sender_label = circular.sender_name or "a colleague"
    title = f"New Circular: {circular.title}"
    message = (
        f"You have received a new circular from {sender_label}"
        f" ({circular.sender_role.value.lower()})"
    )
    payload = {
        "circular_id": circular.id,
        "sender_id": circular.sender_id,
        "sender_name": circular.sender_name,
        "sender_role": circular.sender_role.value,
    }
    created_at = now_in_app_timezone()
    return [
        Notification(
            id=None,
            user_id=recipient_id,
            event_type=CIRCULAR_ISSUED_EVENT,
            title=title,
            message=message,
            payload=dict(payload),
            created_at=created_at,
            read_at=None,
        )
        for recipient_id in sorted(circular.recipient_snapshot)
    ]


def stage_circular_notifications(
    session: Session, *, circular: Circular
) -> list[Notification]:
    """Add the recipients' notifications to the session's open transaction."""

    return NotificationRepository(session).create_many(
        build_circular_notifications(circular), commit=False
    )


def dispatch_notifications(notifications: Iterable[Notification]) -> None:
    """Push already persisted ``notifications`` to connected websockets."""

    for notification in notifications:
        dispatch_notification(notification)


__all__ = [
    "build_circular_notifications",
    "dispatch_notifications",
    "stage_circular_notifications",
]
