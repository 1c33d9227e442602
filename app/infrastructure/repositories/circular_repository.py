"""Persistence helpers for circular entities."""

from __future__ import annotations

import uuid
from collections.abc import Sequence

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from app.domain.entities import (
    Circular,
    CircularStatus,
    RecipientGroup,
    UserRole,
)
from app.infrastructure.models import CircularModel, CircularRecipientModel
from app.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class CircularRepository:
    """Store circulars and apply their lifecycle transitions atomically.

    The recipient snapshot is stored as one ``circular_recipient`` row per
    user and read receipts are the ``read_at`` column of those rows, so a
    read can only ever be recorded for a member of the snapshot.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, circular_id: str) -> Circular | None:
        model = self.session.get(CircularModel, circular_id, populate_existing=True)
        return self._to_entity(model) if model else None

    def exists(self, circular_id: str) -> bool:
        """Check for the circular without loading its recipient snapshot."""

        statement = select(CircularModel.id).where(CircularModel.id == circular_id)
        return self.session.execute(statement).first() is not None

    def list_by_sender(
        self, sender_id: int, *, status: CircularStatus | None = None
    ) -> Sequence[Circular]:
        query = self.session.query(CircularModel).filter(
            CircularModel.sender_id == sender_id
        )
        if status is not None:
            query = query.filter(CircularModel.status == status.value)
        query = query.order_by(CircularModel.created_at.desc(), CircularModel.id.desc())
        return [self._to_entity(model) for model in query.all()]

    def list_by_recipient(
        self, user_id: int, *, status: CircularStatus | None = None
    ) -> Sequence[Circular]:
        query = (
            self.session.query(CircularModel)
            .join(
                CircularRecipientModel,
                CircularRecipientModel.circular_id == CircularModel.id,
            )
            .filter(CircularRecipientModel.user_id == user_id)
        )
        if status is not None:
            query = query.filter(CircularModel.status == status.value)
        query = query.order_by(CircularModel.created_at.desc(), CircularModel.id.desc())
        return [self._to_entity(model) for model in query.all()]

    def list_by_status(self, status: CircularStatus) -> Sequence[Circular]:
        query = (
            self.session.query(CircularModel)
            .filter(CircularModel.status == status.value)
            .order_by(CircularModel.created_at.desc(), CircularModel.id.desc())
        )
        return [self._to_entity(model) for model in query.all()]

    def count_by_sender(self, sender_id: int) -> int:
        return (
            self.session.query(func.count(CircularModel.id))
            .filter(CircularModel.sender_id == sender_id)
            .scalar()
            or 0
        )

    def count_received(self, user_id: int) -> int:
        return (
            self.session.query(func.count(CircularRecipientModel.id))
            .filter(CircularRecipientModel.user_id == user_id)
            .scalar()
            or 0
        )

    def count_unread(self, user_id: int) -> int:
        """Count circulars addressed to ``user_id`` without a read receipt.

        Archived circulars are included.
        """

        return (
            self.session.query(func.count(CircularRecipientModel.id))
            .filter(
                CircularRecipientModel.user_id == user_id,
                CircularRecipientModel.read_at.is_(None),
            )
            .scalar()
            or 0
        )

    def count_reads(self, circular_id: str) -> tuple[int, int]:
        """Return ``(read_count, total_recipients)`` for ``circular_id``."""

        total, read = (
            self.session.query(
                func.count(CircularRecipientModel.id),
                func.count(CircularRecipientModel.read_at),
            )
            .filter(CircularRecipientModel.circular_id == circular_id)
            .one()
        )
        return int(read or 0), int(total or 0)

    def is_recipient(self, circular_id: str, user_id: int) -> bool:
        statement = select(CircularRecipientModel.id).where(
            CircularRecipientModel.circular_id == circular_id,
            CircularRecipientModel.user_id == user_id,
        )
        return self.session.execute(statement).first() is not None

    def has_read(self, circular_id: str, user_id: int) -> bool:
        statement = select(CircularRecipientModel.id).where(
            CircularRecipientModel.circular_id == circular_id,
            CircularRecipientModel.user_id == user_id,
            CircularRecipientModel.read_at.is_not(None),
        )
        return self.session.execute(statement).first() is not None

    def create(self, circular: Circular, *, commit: bool = True) -> Circular:
        """Insert ``circular`` with its recipient snapshot.

        With ``commit=False`` the rows are only flushed so the caller can add
        related records to the same transaction.
        """

        now = ensure_app_naive_datetime(now_in_app_timezone())
        model = CircularModel(
            id=circular.id or str(uuid.uuid4()),
            title=circular.title,
            body=circular.body,
            sender_id=circular.sender_id,
            sender_role=circular.sender_role.value,
            sender_name=circular.sender_name,
            recipient_groups=sorted(group.value for group in circular.recipient_groups),
            status=circular.status.value,
            created_at=ensure_app_naive_datetime(circular.created_at) or now,
            updated_at=ensure_app_naive_datetime(circular.updated_at) or now,
        )
        model.recipients = [
            CircularRecipientModel(
                user_id=user_id,
                read_at=now if user_id in circular.read_by else None,
            )
            for user_id in sorted(circular.recipient_snapshot)
        ]
        self.session.add(model)
        if commit:
            self.session.commit()
            self.session.refresh(model)
        else:
            self.session.flush()
        return self._to_entity(model)

    def transition_status(
        self,
        circular_id: str,
        *,
        sender_id: int,
        from_status: CircularStatus,
        to_status: CircularStatus,
    ) -> bool:
        """Move the circular to ``to_status`` if it is still in ``from_status``.

        Returns ``True`` when this call performed the transition.
        """

        statement = (
            update(CircularModel)
            .where(
                CircularModel.id == circular_id,
                CircularModel.sender_id == sender_id,
                CircularModel.status == from_status.value,
            )
            .values(
                status=to_status.value,
                updated_at=ensure_app_naive_datetime(now_in_app_timezone()),
            )
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(statement)
        self.session.commit()
        return result.rowcount == 1

    def mark_read(self, circular_id: str, user_id: int) -> bool:
        """Record the read receipt of ``user_id`` if none exists yet.

        Returns ``True`` only for the call that recorded the receipt.
        """

        now = ensure_app_naive_datetime(now_in_app_timezone())
        receipt = (
            update(CircularRecipientModel)
            .where(
                CircularRecipientModel.circular_id == circular_id,
                CircularRecipientModel.user_id == user_id,
                CircularRecipientModel.read_at.is_(None),
            )
            .values(read_at=now)
            .execution_options(synchronize_session=False)
        )
        recorded = self.session.execute(receipt).rowcount == 1
        if recorded:
            self.session.execute(
                update(CircularModel)
                .where(CircularModel.id == circular_id)
                .values(updated_at=now)
                .execution_options(synchronize_session=False)
            )
        self.session.commit()
        return recorded

    @staticmethod
    def _to_entity(model: CircularModel) -> Circular:
        recipients = model.recipients or []
        return Circular(
            id=model.id,
            title=model.title,
            body=model.body,
            sender_id=model.sender_id,
            sender_role=UserRole(model.sender_role),
            sender_name=model.sender_name,
            recipient_groups=frozenset(
                RecipientGroup(group) for group in model.recipient_groups or []
            ),
            recipient_snapshot=frozenset(row.user_id for row in recipients),
            status=CircularStatus(model.status),
            read_by=frozenset(
                row.user_id for row in recipients if row.read_at is not None
            ),
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["CircularRepository"]
