"""Domain entity representing a user role."""

from dataclasses import dataclass

from .circular import UserRole


@dataclass
class Role:
    """Stored role; ``alias`` links it to a :class:`UserRole`."""

    id: int
    name: str
    alias: str

    @property
    def user_role(self) -> UserRole | None:
        return UserRole.from_alias(self.alias)


__all__ = ["Role"]
