"""ORM models used by the application infrastructure."""

from .circular import CircularModel, CircularRecipientModel
from .notification import NotificationModel
from .role import RoleModel
from .user import UserModel

__all__ = [
    "CircularModel",
    "CircularRecipientModel",
    "NotificationModel",
    "RoleModel",
    "UserModel",
]
