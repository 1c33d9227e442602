"""Domain entity representing a circular and its lifecycle."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class UserRole(str, Enum):
    """Roles known to the circular feature."""

    MANAGEMENT = "MANAGEMENT"
    PROFESSOR = "PROFESSOR"
    STUDENT = "STUDENT"
    ALUMNI = "ALUMNI"

    @classmethod
    def from_alias(cls, alias: str | None) -> "UserRole | None":
        """Return the role matching ``alias`` or ``None`` when it is unknown."""

        if not alias:
            return None
        try:
            return cls(alias.strip().upper())
        except ValueError:
            return None

    @property
    def alias(self) -> str:
        """Return the alias used for this role in the ``role`` table."""

        return self.value.lower()


class RecipientGroup(str, Enum):
    """Cohort tags a sender can target."""

    STUDENTS = "STUDENTS"
    PROFESSORS = "PROFESSORS"
    MANAGEMENT = "MANAGEMENT"
    ALL = "ALL"


class CircularStatus(str, Enum):
    """Lifecycle states of a circular.

    ``DRAFT`` is part of the stored shape but no operation creates a draft or
    moves a circular in or out of it.
    """

    ACTIVE = "ACTIVE"
    ARCHIVED = "ARCHIVED"
    DRAFT = "DRAFT"


_ALLOWED_TRANSITIONS: dict[CircularStatus, frozenset[CircularStatus]] = {
    CircularStatus.ACTIVE: frozenset({CircularStatus.ARCHIVED}),
    CircularStatus.ARCHIVED: frozenset(),
    CircularStatus.DRAFT: frozenset(),
}


@dataclass
class Circular:
    """Broadcast announcement issued by one sender to a frozen set of recipients."""

    id: str | None
    title: str
    body: str
    sender_id: int
    sender_role: UserRole
    sender_name: str | None
    recipient_groups: frozenset[RecipientGroup]
    recipient_snapshot: frozenset[int]
    status: CircularStatus = CircularStatus.ACTIVE
    read_by: frozenset[int] = field(default_factory=frozenset)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def recipient_count(self) -> int:
        return len(self.recipient_snapshot)

    @property
    def is_archived(self) -> bool:
        return self.status is CircularStatus.ARCHIVED

    def is_recipient(self, user_id: int) -> bool:
        return user_id in self.recipient_snapshot

    def is_read_by(self, user_id: int) -> bool:
        return user_id in self.read_by

    def is_visible_to(self, user_id: int) -> bool:
        """Return ``True`` when ``user_id`` sent or received the circular."""

        return user_id == self.sender_id or self.is_recipient(user_id)

    def can_transition_to(self, status: CircularStatus) -> bool:
        return status in _ALLOWED_TRANSITIONS[self.status]


__all__ = ["Circular", "CircularStatus", "RecipientGroup", "UserRole"]
