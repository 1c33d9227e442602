"""Routes for issuing, reading and archiving circulars."""

from __future__ import annotations

import logging
from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.application.use_cases.circulars import (
    RecipientResolver,
    allowed_groups,
    archive_circular as archive_circular_uc,
    count_unread_circulars,
    create_circular as create_circular_uc,
    get_circular_for_user,
    get_circular_summary,
    get_read_stats,
    list_active_circulars,
    list_received_circulars,
    list_sent_circulars,
    mark_circular_read,
    read_stats_for,
)
from app.domain.entities import Circular, CircularStatus, RecipientGroup, User
from app.domain.exceptions import (
    AlreadyArchived,
    CircularError,
    CircularNotFound,
    CircularValidationError,
    InvalidStatusTransition,
    NoRecipients,
    NotOwner,
    NotRecipient,
    PermissionDenied,
    TransientDependencyError,
)
from app.infrastructure.database import get_db
from app.interfaces.api.dependencies import (
    get_current_active_user,
    get_recipient_resolver,
    require_management,
)
from app.interfaces.api.schemas import (
    AllowedGroupsRead,
    CircularCreate,
    CircularDetailRead,
    CircularRead,
    CircularSummaryRead,
    ReadStatsRead,
    ReceivedCircularRead,
    SentCircularRead,
    UnreadCountRead,
)

router = APIRouter(prefix="/circulars", tags=["circulars"])
logger = logging.getLogger(__name__)

_ERROR_STATUS: tuple[tuple[type[CircularError], int], ...] = (
    (CircularValidationError, status.HTTP_400_BAD_REQUEST),
    (PermissionDenied, status.HTTP_403_FORBIDDEN),
    (NotOwner, status.HTTP_403_FORBIDDEN),
    (NotRecipient, status.HTTP_403_FORBIDDEN),
    (CircularNotFound, status.HTTP_404_NOT_FOUND),
    (AlreadyArchived, status.HTTP_409_CONFLICT),
    (InvalidStatusTransition, status.HTTP_409_CONFLICT),
    (NoRecipients, 422),
    (TransientDependencyError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def _raise_http(exc: CircularError, current_user: User) -> NoReturn:
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(exc, error_type):
            break
    else:  # pragma: no cover - every domain error is mapped above
        status_code = status.HTTP_400_BAD_REQUEST
    logger.info(
        "Circular request from user %s rejected (%s): %s",
        current_user.id,
        type(exc).__name__,
        exc,
    )
    raise HTTPException(status_code=status_code, detail=str(exc)) from exc


def _base_fields(circular: Circular) -> dict:
    return {
        "id": circular.id,
        "title": circular.title,
        "body": circular.body,
        "sender_id": circular.sender_id,
        "sender_name": circular.sender_name,
        "sender_role": circular.sender_role,
        "recipient_groups": sorted(circular.recipient_groups, key=lambda group: group.value),
        "recipient_count": circular.recipient_count,
        "status": circular.status,
        "created_at": circular.created_at,
        "updated_at": circular.updated_at,
    }


def _to_read(circular: Circular) -> CircularRead:
    return CircularRead(**_base_fields(circular))


def _to_sent(circular: Circular) -> SentCircularRead:
    stats = read_stats_for(circular)
    return SentCircularRead(
        **_base_fields(circular),
        stats=ReadStatsRead.model_validate(stats),
    )


def _to_received(circular: Circular, user_id: int) -> ReceivedCircularRead:
    return ReceivedCircularRead(
        **_base_fields(circular),
        is_read=circular.is_read_by(user_id),
    )


def _to_detail(circular: Circular, user_id: int) -> CircularDetailRead:
    if circular.sender_id == user_id:
        return CircularDetailRead(
            **_base_fields(circular),
            stats=ReadStatsRead.model_validate(read_stats_for(circular)),
        )
    return CircularDetailRead(**_base_fields(circular), is_read=circular.is_read_by(user_id))


@router.post("/", response_model=CircularRead, status_code=status.HTTP_201_CREATED)
def create_circular(
    circular_in: CircularCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    resolver: RecipientResolver = Depends(get_recipient_resolver),
) -> CircularRead:
    """Issue a circular to the selected recipient groups."""

    try:
        circular = create_circular_uc(
            db,
            title=circular_in.title,
            body=circular_in.body,
            sender_id=current_user.id,
            sender_role=current_user.user_role,
            sender_name=current_user.name,
            recipient_groups=circular_in.recipient_groups,
            resolver=resolver,
        )
    except CircularError as exc:
        _raise_http(exc, current_user)
    return _to_read(circular)


@router.get("/allowed-groups", response_model=AllowedGroupsRead)
def read_allowed_groups(
    current_user: User = Depends(get_current_active_user),
) -> AllowedGroupsRead:
    """Return the recipient groups the caller's role may target."""

    role = current_user.user_role
    groups = sorted(allowed_groups(role), key=lambda group: list(RecipientGroup).index(group))
    return AllowedGroupsRead(role=role, groups=groups)


@router.get("/sent", response_model=list[SentCircularRead])
def list_sent(
    status_filter: CircularStatus | None = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[SentCircularRead]:
    """List the circulars issued by the caller along with their read stats."""

    circulars = list_sent_circulars(db, current_user.id, status=status_filter)
    return [_to_sent(circular) for circular in circulars]


@router.get("/received", response_model=list[ReceivedCircularRead])
def list_received(
    status_filter: CircularStatus | None = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[ReceivedCircularRead]:
    """List the circulars addressed to the caller."""

    circulars = list_received_circulars(db, current_user.id, status=status_filter)
    return [_to_received(circular, current_user.id) for circular in circulars]


@router.get("/unread-count", response_model=UnreadCountRead)
def read_unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> UnreadCountRead:
    """Return how many received circulars the caller has not read."""

    return UnreadCountRead(count=count_unread_circulars(db, current_user.id))


@router.get("/summary", response_model=CircularSummaryRead)
def read_summary(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> CircularSummaryRead:
    """Return the caller's sent, received and unread counters."""

    summary = get_circular_summary(db, user_id=current_user.id, role=current_user.user_role)
    return CircularSummaryRead.model_validate(summary)


@router.get("/active", response_model=list[SentCircularRead])
def list_active(
    db: Session = Depends(get_db),
    _: User = Depends(require_management),
) -> list[SentCircularRead]:
    """List every active circular with its read stats."""

    return [_to_sent(circular) for circular in list_active_circulars(db)]


@router.get("/{circular_id}", response_model=CircularDetailRead)
def read_circular(
    circular_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> CircularDetailRead:
    """Return a circular to its sender or one of its recipients."""

    try:
        circular = get_circular_for_user(db, circular_id, user_id=current_user.id)
    except CircularError as exc:
        _raise_http(exc, current_user)
    return _to_detail(circular, current_user.id)


@router.get("/{circular_id}/stats", response_model=ReadStatsRead)
def read_circular_stats(
    circular_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ReadStatsRead:
    """Return the read progress of a circular to its sender."""

    try:
        circular = get_circular_for_user(db, circular_id, user_id=current_user.id)
        if circular.sender_id != current_user.id:
            raise NotOwner(circular_id, current_user.id)
        stats = get_read_stats(db, circular_id)
    except CircularError as exc:
        _raise_http(exc, current_user)
    return ReadStatsRead.model_validate(stats)


@router.post("/{circular_id}/read", response_model=ReceivedCircularRead)
def mark_read(
    circular_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ReceivedCircularRead:
    """Acknowledge a received circular. Repeating the call has no effect."""

    try:
        circular = mark_circular_read(db, circular_id=circular_id, user_id=current_user.id)
    except CircularError as exc:
        _raise_http(exc, current_user)
    return _to_received(circular, current_user.id)


@router.post("/{circular_id}/archive", response_model=SentCircularRead)
def archive_circular(
    circular_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> SentCircularRead:
    """Archive a circular issued by the caller."""

    try:
        circular = archive_circular_uc(db, circular_id=circular_id, requester_id=current_user.id)
    except CircularError as exc:
        _raise_http(exc, current_user)
    return _to_sent(circular)
