"""SQLAlchemy models for circulars and their recipient snapshot."""

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.domain.entities import CircularStatus
from app.infrastructure.database import Base
from app.utils import now_in_app_naive_datetime


class CircularModel(Base):
    """Database representation of an issued circular."""

    __tablename__ = "circular"

    id = Column(String(36), primary_key=True)
    title = Column(String(200), nullable=False)
    body = Column(Text, nullable=False)
    sender_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    sender_role = Column(String(20), nullable=False)
    sender_name = Column(String(50), nullable=True)
    recipient_groups = Column(JSON, nullable=False, default=list)
    status = Column(
        String(20),
        nullable=False,
        default=CircularStatus.ACTIVE.value,
        index=True,
    )
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)

    recipients = relationship(
        "CircularRecipientModel",
        back_populates="circular",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class CircularRecipientModel(Base):
    """One member of a circular's recipient snapshot and its read receipt."""

    __tablename__ = "circular_recipient"
    __table_args__ = (
        UniqueConstraint("circular_id", "user_id", name="uq_circular_recipient"),
    )

    id = Column(Integer, primary_key=True, index=True)
    circular_id = Column(
        String(36),
        ForeignKey("circular.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    read_at = Column(DateTime(), nullable=True)

    circular = relationship("CircularModel", back_populates="recipients")


__all__ = ["CircularModel", "CircularRecipientModel"]
