"""Circular schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.domain.entities import CircularStatus, RecipientGroup, UserRole


class CircularCreate(BaseModel):
    title: str = Field(..., description="Title shown to recipients, up to 200 characters")
    body: str = Field(..., description="Announcement text, up to 5000 characters")
    recipient_groups: list[str] = Field(
        default_factory=list,
        description="Group tags (STUDENTS, PROFESSORS, MANAGEMENT, ALL) that receive the circular",
    )

    model_config = ConfigDict(extra="forbid")


class ReadStatsRead(BaseModel):
    read_count: int
    total_recipients: int
    percentage: int

    model_config = ConfigDict(from_attributes=True)


class CircularRead(BaseModel):
    id: str
    title: str
    body: str
    sender_id: int
    sender_name: str | None
    sender_role: UserRole
    recipient_groups: list[RecipientGroup]
    recipient_count: int
    status: CircularStatus
    created_at: datetime | None
    updated_at: datetime | None


class SentCircularRead(CircularRead):
    stats: ReadStatsRead


class ReceivedCircularRead(CircularRead):
    is_read: bool


class CircularDetailRead(CircularRead):
    """Single circular; ``stats`` is only filled for the sender."""

    is_read: bool | None = None
    stats: ReadStatsRead | None = None


class AllowedGroupsRead(BaseModel):
    role: UserRole | None
    groups: list[RecipientGroup]


class UnreadCountRead(BaseModel):
    count: int


class CircularSummaryRead(BaseModel):
    sent_count: int | None
    received_count: int
    unread_count: int
    read_count: int

    model_config = ConfigDict(from_attributes=True)


__all__ = [
    "AllowedGroupsRead",
    "CircularCreate",
    "CircularDetailRead",
    "CircularRead",
    "CircularSummaryRead",
    "ReadStatsRead",
    "ReceivedCircularRead",
    "SentCircularRead",
    "UnreadCountRead",
]
