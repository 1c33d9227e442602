"""Endpoints and websocket handler for realtime notifications."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect, status
from sqlalchemy.orm import Session

from app.domain.entities import Notification, User
from app.infrastructure.database import SessionLocal, get_db
from app.infrastructure.notifications import notification_manager, serialize_notification
from app.infrastructure.repositories import NotificationRepository
from app.interfaces.api.dependencies import get_current_active_user, resolve_current_user
from app.interfaces.api.schemas import NotificationMarkReadRequest, NotificationRead

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead(
        id=notification.id or 0,
        user_id=notification.user_id,
        event_type=notification.event_type,
        title=notification.title,
        message=notification.message,
        payload=notification.payload or {},
        created_at=notification.created_at,
        read_at=notification.read_at,
    )


@router.get("/", response_model=list[NotificationRead])
def list_notifications(
    unread_only: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[NotificationRead]:
    """Return the most recent notifications for the authenticated user."""

    repository = NotificationRepository(db)
    if unread_only:
        notifications = repository.list_unread_for_user(current_user.id)
    else:
        notifications = repository.list_for_user(current_user.id)
    return [_notification_to_schema(notification) for notification in notifications]


@router.post("/read", status_code=status.HTTP_204_NO_CONTENT)
def mark_notifications_read(
    payload: NotificationMarkReadRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> None:
    """Mark the given notifications of the authenticated user as read."""

    NotificationRepository(db).mark_as_read(payload.unique_ids(), user_id=current_user.id)


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint that streams notifications to the authenticated user."""

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=1008)
        return

    session = SessionLocal()
    try:
        user = resolve_current_user(token, session)
        if not user.is_active:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
        pending_notifications = NotificationRepository(session).list_unread_for_user(user.id)
    except HTTPException:
        await websocket.close(code=1008)
        return
    finally:
        session.close()

    await notification_manager.connect(user.id, websocket)
    try:
        await websocket.send_json(
            {
                "type": "init",
                "data": [serialize_notification(n) for n in pending_notifications],
            }
        )
        while True:
            try:
                message = await websocket.receive_json()
            except ValueError:
                logger.debug("Ignoring malformed websocket message from user %s", user.id)
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list) and ids:
                    ack_session = SessionLocal()
                    try:
                        NotificationRepository(ack_session).mark_as_read(ids, user_id=user.id)
                    finally:
                        ack_session.close()
    except WebSocketDisconnect:
        pass
    finally:
        notification_manager.disconnect(user.id, websocket)
