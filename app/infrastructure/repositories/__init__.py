"""Repository implementations for infrastructure layer."""

from .circular_repository import CircularRepository
from .notification_repository import NotificationRepository
from .role_repository import RoleRepository
from .user_repository import UserRepository

__all__ = [
    "CircularRepository",
    "NotificationRepository",
    "RoleRepository",
    "UserRepository",
]
