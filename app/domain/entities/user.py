"""Domain entity representing a user."""

from dataclasses import dataclass
from datetime import datetime


from .circular import UserRole
from .role import Role


@dataclass
class User:
    """Core attributes describing an application user."""

    id: int | None
    role: Role
    name: str
    email: str
    password: str
    last_login: datetime | None
    created_at: datetime | None
    updated_at: datetime | None
    is_active: bool

    @property
    def user_role(self) -> UserRole | None:
        """Return the circular role matching the stored role alias."""

        return self.role.user_role

    def has_role(self, role: UserRole) -> bool:
        """Return ``True`` when the user's role alias matches ``role``."""

        return self.user_role is role


__all__ = ["User"]
