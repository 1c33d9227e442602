"""Domain entities exposed by the application."""

from .circular import Circular, CircularStatus, RecipientGroup, UserRole
from .notification import CIRCULAR_ISSUED_EVENT, Notification
from .read_stats import CircularSummary, ReadStats
from .role import Role
from .user import User

__all__ = [
    "Circular",
    "CircularStatus",
    "CircularSummary",
    "CIRCULAR_ISSUED_EVENT",
    "Notification",
    "ReadStats",
    "RecipientGroup",
    "Role",
    "User",
    "UserRole",
]
